from datetime import date, timedelta
from types import SimpleNamespace

from closet.services.anti_consumption.similarity import (
    build_reasoning,
    find_similar,
    similarity_confidence,
)

TODAY = date(2026, 6, 15)


def _item(category, colors=(), tags=(), last_worn=None):
    return SimpleNamespace(category=category, colors=list(colors), tags=list(tags), last_worn=last_worn)


def test_shared_color_in_same_category():
    a = _item("tops", ["blue", "white"])
    b = _item("tops", ["blue", "navy"])
    c = _item("bottoms", ["blue"])
    similar = find_similar([a, b, c], "tops", ["blue"])
    assert similar == [a, b]
    assert abs(similarity_confidence(len(similar)) - 2 / 3) < 1e-9


def test_no_match_in_other_category():
    wardrobe = [_item("tops", ["blue", "white"]), _item("tops", ["blue", "navy"])]
    similar = find_similar(wardrobe, "dresses", ["blue"])
    assert similar == []
    assert similarity_confidence(0) == 0.0
    assert build_reasoning(similar, "dresses", TODAY) == []


def test_category_and_color_case_insensitive():
    a = _item("tops", ["Blue"])
    assert find_similar([a], "Tops", ["BLUE"]) == [a]


def test_style_tag_match_without_color_overlap():
    a = _item("tops", ["red"], tags=["boho-chic"])
    b = _item("tops", ["green"])
    assert find_similar([a, b], "tops", ["blue"], "Boho Chic") == [a]


def test_category_alone_when_no_colors_or_style():
    a = _item("shoes", ["black"])
    b = _item("shoes")
    assert find_similar([a, b], "shoes", []) == [a, b]


def test_confidence_caps_at_one():
    assert similarity_confidence(3) == 1.0
    assert similarity_confidence(7) == 1.0


def test_reasoning_counts_recent_wears():
    recent = _item("tops", ["blue"], last_worn=TODAY - timedelta(days=3))
    old = _item("tops", ["blue"], last_worn=TODAY - timedelta(days=120))
    reasons = build_reasoning([recent, old], "tops", TODAY)
    assert reasons == [
        "You already own 2 similar tops items",
        "1 of these items were worn recently, showing they fit your current style",
    ]


def test_reasoning_suggests_rediscovery_when_nothing_recent():
    old = _item("tops", ["blue"], last_worn=TODAY - timedelta(days=45))
    never = _item("tops", ["blue"])
    reasons = build_reasoning([old, never], "tops", TODAY)
    assert reasons[1] == "2 of these items haven't been worn recently and could be rediscovered instead of buying new"


def test_style_matches_slugged_tags():
    accented = _item("dresses", ["red"], tags=["boheme"])
    slashed = _item("dresses", ["red"], tags=["boho-chic"])
    assert find_similar([accented, slashed], "dresses", ["blue"], "Bohème") == [accented]
    assert find_similar([accented, slashed], "dresses", ["blue"], "boho/chic") == [slashed]
