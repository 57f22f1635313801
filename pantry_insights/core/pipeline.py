"""Reusable building blocks for the analytics reports.

Every report is a small in-memory pipeline over a recipe/inventory snapshot:
filter -> join -> group -> derive -> sort -> limit.  The helpers here cover
the parts the reports share:

- the name-keyed soft join between recipe ingredients and inventory rows
  (build_name_index / build_usage_index, keyed by normalize_name),
- null-safe arithmetic (to_number, average, safe_percentage, round_half_up),
- grouping and multi-key sorting with mixed directions (group_by, sort_rows),
- the fixed Easy < Medium < Hard order (DIFFICULTY_RANK, rank_of),
- timestamp parsing and windowing (parse_timestamp, timestamp_key, within_window).
"""

import math
from collections import defaultdict
from datetime import date, datetime
from operator import attrgetter
from typing import Callable, Iterable, Optional

DIFFICULTY_RANK = {"Easy": 1, "Medium": 2, "Hard": 3}
UNRANKED = 99

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def normalize_name(value) -> str:
    """Return the soft-join key for an ingredient name: trimmed and case-folded."""
    if value is None:
        return ""
    return str(value).strip().casefold()


def to_number(value) -> float:
    """Coalesce a numeric field to a finite float; anything else becomes 0."""
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def round_half_up(value, digits: int = 0):
    """Round with halves going up (2.5 -> 3), unlike Python's banker's rounding.

    Returns an int when digits is 0.
    """
    factor = 10 ** digits
    result = math.floor(to_number(value) * factor + 0.5) / factor
    return int(result) if digits == 0 else result


def safe_percentage(part, whole) -> int:
    """Return part/whole as a rounded integer percentage, or 0 when whole <= 0."""
    denominator = to_number(whole)
    if denominator <= 0:
        return 0
    return round_half_up(to_number(part) / denominator * 100)


def average(values: Iterable) -> float:
    """Arithmetic mean with every value coalesced to a number; 0 for no values."""
    numbers = [to_number(v) for v in values]
    if not numbers:
        return 0.0
    return sum(numbers) / len(numbers)


def label_or(value, fallback: str) -> str:
    """Return value as a display label, or fallback when it's missing/blank."""
    if value is None:
        return fallback
    text = str(value).strip()
    return text or fallback


def _key_func(key) -> Callable:
    return attrgetter(key) if isinstance(key, str) else key


def build_name_index(rows: Iterable, key) -> dict[str, list]:
    """Index rows by the normalised name found under key (attribute name or callable).

    Built once per request and probed per ingredient.  Rows with a blank
    name are left out so they never match anything.
    """
    get_key = _key_func(key)
    index = defaultdict(list)
    for row in rows:
        name = normalize_name(get_key(row))
        if name:
            index[name].append(row)
    return dict(index)


def build_usage_index(recipes: Iterable) -> dict[str, list]:
    """Map normalised ingredient name -> recipes that use it (each recipe once)."""
    index = defaultdict(list)
    for recipe in recipes:
        names = {normalize_name(ing.name) for ing in recipe.ingredients or []}
        for name in names:
            if name:
                index[name].append(recipe)
    return dict(index)


def group_by(rows: Iterable, key) -> dict:
    """Group rows by key into an insertion-ordered dict of lists."""
    get_key = _key_func(key)
    groups: dict = {}
    for row in rows:
        groups.setdefault(get_key(row), []).append(row)
    return groups


def sort_rows(rows: Iterable, *keys: tuple[Callable, bool]) -> list:
    """Sort by several keys, each with its own direction.

    keys are (key_func, descending) pairs, most significant first.  Applied
    as successive stable sorts from the least significant key.
    """
    result = list(rows)
    for key, descending in reversed(keys):
        result.sort(key=key, reverse=descending)
    return result


def rank_of(value, ranks: dict = DIFFICULTY_RANK, default: int = UNRANKED) -> int:
    """Position of value in a fixed domain order; unknown values sort last."""
    return ranks.get(value, default)


def take(rows: Iterable, limit: Optional[int]) -> list:
    """Return the first limit rows; a missing or non-positive limit means all rows."""
    rows = list(rows)
    if limit is None or limit <= 0:
        return rows
    return rows[:int(limit)]


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO date/datetime string (or date/datetime) into a naive datetime.

    Date-only values become midnight.  Timezone-aware values are converted to
    local time so they compare with datetime.now().  Returns None when the
    value is missing or unparseable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if not text:
            return None
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def timestamp_key(value) -> datetime:
    """Sort key for timestamps; missing/unparseable values sort as the oldest."""
    return parse_timestamp(value) or datetime.min


def within_window(moment: Optional[datetime], start: datetime, end: datetime) -> bool:
    """True when moment falls inside [start, end]."""
    return moment is not None and start <= moment <= end


def month_label(year: int, month: int) -> str:
    """Human label for a (year, month) bucket, e.g. 'March 2025'."""
    return f"{MONTH_NAMES[month - 1]} {year}"
