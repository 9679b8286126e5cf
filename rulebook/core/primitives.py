from __future__ import annotations

import math
import re

_NON_SLUG = re.compile(r"[^a-z0-9]+")
_FIRST_INT = re.compile(r"\d+")


def sluggify(text: str) -> str:
    """'Accuracy Bonus' -> 'accuracy-bonus'."""
    return _NON_SLUG.sub("-", text.lower()).strip("-")


def first_int(text: str | None, default: int) -> int:
    if not text:
        return default
    m = _FIRST_INT.search(text)
    return int(m.group(0)) if m else default


def clamp(value, lo, hi):
    return max(lo, min(value, hi))


def round_half_up(value: float) -> int:
    # Sheet percentages round .5 upwards, including for negatives
    return math.floor(value + 0.5)
