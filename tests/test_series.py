from __future__ import annotations

import math

import numpy as np

from plotfeed.data.schema import ColumnSelector, Schema
from plotfeed.data.series import Series, SeriesSet, Slice


def test_append_slice_fills_x_epoch_and_series() -> None:
    schema = Schema.build(ColumnSelector.by_position(0), ColumnSelector.by_title("run"), ["t", "run", "a", "b"])
    data = schema.empty_set()

    data.append_slice(schema.parse_row(["0", "r1", "1", "2"]))
    data.append_slice(schema.parse_row(["1", "r1", "3", "4"]))

    assert data.epoch == "r1"
    assert data.x == ("t", ["0", "1"])
    assert data.series[0].values == [1.0, 3.0]
    assert data.series[1].values == [2.0, 4.0]
    assert len(data) == 2


def test_append_slice_pads_short_rows_and_drops_surplus() -> None:
    data = SeriesSet(series=[Series.with_title("a"), Series.with_title("b")])

    data.append_slice(Slice(values=[1.0]))
    data.append_slice(Slice(values=[2.0, 3.0, 99.0]))

    assert data.series[0].values == [1.0, 2.0]
    assert math.isnan(data.series[1].values[0])
    assert data.series[1].values[1] == 3.0


def test_append_slice_without_x_cell_keeps_x_aligned() -> None:
    data = SeriesSet(x=("t", []), series=[Series.with_title("a")])
    data.append_slice(Slice(values=[1.0]))
    assert data.x == ("t", [""])


def test_to_numpy_preserves_nan() -> None:
    data = SeriesSet(series=[Series("a", [1.0, math.nan]), Series("b", [2.0, 3.0])])

    matrix = data.to_numpy()

    assert matrix.shape == (2, 2)
    np.testing.assert_array_equal(matrix, np.array([[1.0, 2.0], [np.nan, 3.0]]))


def test_to_numpy_without_series() -> None:
    data = SeriesSet(x=("t", ["a", "b"]))
    assert data.to_numpy().shape == (2, 0)
