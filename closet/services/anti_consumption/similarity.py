"""
Similarity scoring for "shop your closet first".

An owned item is similar to a prospective purchase when it is in the same
category and either shares a color with it or carries the style as a tag.
"""
from datetime import date, timedelta
from typing import Any, Iterable, List, Optional, Sequence

from closet.core.config import settings
from closet.core.tags import slugify


def find_similar(
    wardrobe: Sequence[Any],
    target_category: str,
    target_colors: Iterable[str],
    target_style: Optional[str] = None,
) -> List[Any]:
    """Return the items of `wardrobe` similar to the target, in wardrobe order."""
    category = (target_category or "").strip().lower()
    colors = {c.strip().lower() for c in target_colors or [] if c and c.strip()}
    style = slugify(target_style)

    similar = []
    for item in wardrobe:
        if (item.category or "").strip().lower() != category:
            continue
        # no criteria at all: category alone is enough
        if not colors and not style:
            similar.append(item)
            continue
        item_colors = {c.strip().lower() for c in item.colors or []}
        if colors & item_colors:
            similar.append(item)
            continue
        if style and any(slugify(tag) == style for tag in item.tags or []):
            similar.append(item)
    return similar


def similarity_confidence(similar_count: int, baseline: Optional[int] = None) -> float:
    """min(1, count / baseline); 0 when nothing is similar."""
    baseline = baseline or settings.SIMILARITY_BASELINE_COUNT
    if similar_count <= 0:
        return 0.0
    return min(1.0, similar_count / baseline)


def worn_recently(item: Any, today: date, window_days: int) -> bool:
    last = getattr(item, "last_worn", None)
    return last is not None and last >= today - timedelta(days=window_days)


def build_reasoning(
    similar: Sequence[Any],
    category: str,
    today: date,
    window_days: Optional[int] = None,
) -> List[str]:
    """Two sentences explaining the recommendation, or none if nothing matched."""
    if not similar:
        return []
    window_days = window_days or settings.RECENT_WEAR_DAYS
    n = len(similar)
    reasons = [f"You already own {n} similar {category.strip().lower()} items"]

    recent = sum(1 for item in similar if worn_recently(item, today, window_days))
    if recent:
        reasons.append(f"{recent} of these items were worn recently, showing they fit your current style")
    else:
        reasons.append(
            f"{n} of these items haven't been worn recently and could be rediscovered instead of buying new"
        )
    return reasons
