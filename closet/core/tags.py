import re
import unicodedata
from typing import Iterable

CATEGORIES = {
    "tops",
    "bottoms",
    "dresses",
    "shoes",
    "accessories",
    "outerwear",
    "activewear",
}

def slugify(s: str | None) -> str:
    s = unicodedata.normalize("NFKD", s or "").encode("ascii", "ignore").decode()
    s = s.strip().lower()
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return re.sub(r"-{2,}", "-", s).strip("-")

def normalize_tag(s: str) -> str:
    s = slugify(s)
    if not (1 <= len(s) <= 24):
        raise ValueError("invalid_length")
    return s

def normalize_many(xs: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for x in xs or []:
        t = normalize_tag(x)
        if t and t not in seen:
            seen.add(t)
            out.append(t)
    return out

def normalize_category(s: str) -> str:
    c = (s or "").strip().lower()
    if c not in CATEGORIES:
        raise ValueError("invalid_category")
    return c

def normalize_colors(xs: Iterable[str]) -> list[str]:
    # order matters for colors (dominant first), so keep first occurrence
    seen: set[str] = set()
    out: list[str] = []
    for x in xs or []:
        c = " ".join((x or "").strip().lower().split())
        if c and c not in seen:
            seen.add(c)
            out.append(c)
    return out
