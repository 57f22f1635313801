from datetime import date, datetime, timezone

from conftest import make_recipe, make_item
from pantry_insights.core.pipeline import (
    average,
    build_name_index,
    build_usage_index,
    group_by,
    label_or,
    month_label,
    normalize_name,
    parse_timestamp,
    rank_of,
    round_half_up,
    safe_percentage,
    sort_rows,
    take,
    timestamp_key,
    to_number,
    within_window,
)


def test_normalize_name_trims_and_casefolds():
    assert normalize_name("  Rolled OATS ") == "rolled oats"
    assert normalize_name(None) == ""


def test_to_number_coalesces_bad_values():
    assert to_number(None) == 0
    assert to_number("abc") == 0
    assert to_number(float("nan")) == 0
    assert to_number(float("inf")) == 0
    assert to_number("2.5") == 2.5


def test_round_half_up_rounds_halves_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(66.666) == 67
    assert round_half_up(3.14159, 2) == 3.14
    assert isinstance(round_half_up(4.2), int)


def test_safe_percentage_guards_denominator():
    assert safe_percentage(2, 3) == 67
    assert safe_percentage(1, 0) == 0
    assert safe_percentage(5, None) == 0


def test_average_of_nothing_is_zero():
    assert average([]) == 0
    assert average([10, None, "x"]) == 10 / 3


def test_label_or_falls_back_on_blank():
    assert label_or("  ", "Unknown") == "Unknown"
    assert label_or(None, "Unknown") == "Unknown"
    assert label_or(" Thai ", "Unknown") == "Thai"


def test_name_index_skips_blank_names():
    items = [make_item("I1", "Milk"), make_item("I2", " milk"), make_item("I3", "  ")]
    index = build_name_index(items, "ingredient_name")
    assert list(index) == ["milk"]
    assert [i.id for i in index["milk"]] == ["I1", "I2"]


def test_usage_index_counts_each_recipe_once():
    recipe = make_recipe("R1", "Double Milk", ["Milk", "milk"])
    index = build_usage_index([recipe])
    assert index["milk"] == [recipe]


def test_group_by_keeps_first_seen_order():
    groups = group_by(["b1", "a1", "b2"], lambda s: s[0])
    assert list(groups) == ["b", "a"]
    assert groups["b"] == ["b1", "b2"]


def test_sort_rows_mixed_directions():
    rows = [{"n": 1, "s": "b"}, {"n": 2, "s": "a"}, {"n": 1, "s": "a"}]
    ordered = sort_rows(rows, (lambda r: r["n"], True), (lambda r: r["s"], False))
    assert ordered == [{"n": 2, "s": "a"}, {"n": 1, "s": "a"}, {"n": 1, "s": "b"}]


def test_rank_of_unknown_sorts_last():
    assert rank_of("Easy") < rank_of("Medium") < rank_of("Hard") < rank_of("Legendary")


def test_take_treats_non_positive_limit_as_all():
    assert take([1, 2, 3], 2) == [1, 2]
    assert take([1, 2, 3], 0) == [1, 2, 3]
    assert take([1, 2, 3], None) == [1, 2, 3]


def test_parse_timestamp_variants():
    assert parse_timestamp("2025-03-10") == datetime(2025, 3, 10)
    assert parse_timestamp(date(2025, 3, 10)) == datetime(2025, 3, 10)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp("") is None
    aware = parse_timestamp("2025-03-10T12:00:00Z")
    assert aware.tzinfo is None
    assert aware == datetime(2025, 3, 10, 12, tzinfo=timezone.utc).astimezone().replace(tzinfo=None)


def test_timestamp_key_puts_missing_first():
    assert timestamp_key(None) < timestamp_key("2000-01-01")


def test_within_window_is_inclusive():
    start, end = datetime(2025, 1, 1), datetime(2025, 1, 8)
    assert within_window(start, start, end)
    assert within_window(end, start, end)
    assert not within_window(None, start, end)
    assert not within_window(datetime(2024, 12, 31), start, end)


def test_month_label():
    assert month_label(2025, 3) == "March 2025"
