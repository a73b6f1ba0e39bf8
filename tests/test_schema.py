from __future__ import annotations

import math

import pytest

from plotfeed.data.schema import ColumnRole, ColumnSelector, Schema, parse_number


def test_schema_without_roles_keeps_every_title() -> None:
    schema = Schema.build(ColumnSelector.unset(), ColumnSelector.unset(), ["a", "b", "c"])

    s = schema.empty_set()
    assert s.epoch is None
    assert s.x is None
    assert [series.title for series in s.series] == ["a", "b", "c"]
    assert all(len(series.values) == 0 for series in s.series)

    row = schema.parse_row(["1", "2", "3"])
    assert row.epoch is None
    assert row.x is None
    assert row.values == [1.0, 2.0, 3.0]


def test_schema_with_x_and_epoch() -> None:
    schema = Schema.build(
        ColumnSelector.by_position(0),
        ColumnSelector.by_title("b"),
        ["a", "b", "c"],
    )
    assert schema.x == ColumnRole("a", 0)
    assert schema.epoch == ColumnRole("b", 1)
    assert schema.series_titles == ("c",)

    s = schema.empty_set()
    assert s.epoch is None
    assert s.x == ("a", [])
    assert s.titles() == ["c"]

    row = schema.parse_row(["1", "2", "3"])
    assert row.x == "1"
    assert row.epoch == "2"
    assert row.values == [3.0]


def test_x_wins_when_both_selectors_match_the_same_field() -> None:
    schema = Schema.build(
        ColumnSelector.by_title("t"),
        ColumnSelector.by_position(0),
        ["t", "v"],
    )
    assert schema.x == ColumnRole("t", 0)
    assert schema.epoch is None
    assert schema.series_titles == ("v",)


def test_title_match_is_exact_and_case_sensitive() -> None:
    schema = Schema.build(ColumnSelector.by_title("Time"), ColumnSelector.unset(), ["time", " Time", "v"])
    assert schema.x is None
    assert schema.series_titles == ("time", " Time", "v")


def test_empty_header_yields_role_less_schema() -> None:
    schema = Schema.build(ColumnSelector.by_position(0), ColumnSelector.by_title("e"), [])
    assert schema.x is None
    assert schema.epoch is None
    assert schema.series_titles == ()
    assert schema.empty_set().series == []


def test_bad_cell_becomes_nan_without_touching_neighbours() -> None:
    schema = Schema.build(ColumnSelector.unset(), ColumnSelector.unset(), ["a", "b", "c"])
    row = schema.parse_row(["1.5", "foo", " 3 "])

    assert row.values[0] == 1.5
    assert math.isnan(row.values[1])
    assert row.values[2] == 3.0


def test_x_and_epoch_cells_are_kept_verbatim() -> None:
    schema = Schema.build(ColumnSelector.by_position(0), ColumnSelector.by_position(1), ["t", "run", "v"])
    row = schema.parse_row([" 12:00:01 ", "run #1", "4"])
    assert row.x == " 12:00:01 "
    assert row.epoch == "run #1"
    assert row.values == [4.0]


def test_row_length_mismatch_is_tolerated() -> None:
    schema = Schema.build(ColumnSelector.by_position(0), ColumnSelector.unset(), ["x", "a", "b"])

    short = schema.parse_row(["1", "2"])
    assert short.x == "1"
    assert short.values == [2.0]

    long = schema.parse_row(["1", "2", "3", "4"])
    assert long.values == [2.0, 3.0, 4.0]


def test_parse_number_accepts_scientific_notation() -> None:
    assert parse_number("1e3") == 1000.0
    assert parse_number("-0.25") == -0.25
    assert math.isnan(parse_number(""))


@pytest.mark.parametrize("cell", ["1_000", "\u0661\u0662", "0x10", "1e", "--1", "1.2.3", "  "])
def test_parse_number_rejects_non_decimal_notation(cell) -> None:
    assert math.isnan(parse_number(cell))


@pytest.mark.parametrize(
    ("cell", "expected"),
    [("+.5", 0.5), ("5.", 5.0), ("1E-3", 0.001), (" 42 ", 42.0), ("inf", math.inf), ("-Infinity", -math.inf)],
)
def test_parse_number_accepts_decimal_notation(cell, expected) -> None:
    assert parse_number(cell) == expected


def test_parse_number_reads_literal_nan() -> None:
    assert math.isnan(parse_number("-NaN"))


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, ColumnSelector.unset()),
        ("", ColumnSelector.unset()),
        (3, ColumnSelector.by_position(3)),
        ("12", ColumnSelector.by_position(12)),
        ("time", ColumnSelector.by_title("time")),
        ("-1", ColumnSelector.by_title("-1")),
        ("\u00b2", ColumnSelector.by_title("\u00b2")),
    ],
)
def test_column_selector_parse(raw, expected) -> None:
    assert ColumnSelector.parse(raw) == expected


def test_column_selector_matches() -> None:
    assert not ColumnSelector.unset().matches("a", 0)
    assert ColumnSelector.by_position(1).matches("anything", 1)
    assert not ColumnSelector.by_position(1).matches("anything", 0)
    assert ColumnSelector.by_title("a").matches("a", 5)
    assert not ColumnSelector.by_title("a").matches("A", 5)


def test_column_selector_rejects_negative_position() -> None:
    with pytest.raises(ValueError):
        ColumnSelector.by_position(-1)
