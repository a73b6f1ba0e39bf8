"""In-memory containers for chart data built from parsed rows."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

XColumn = Tuple[str, List[str]]


@dataclass
class Series:
    """A named, ordered sequence of numeric values."""

    title: str
    values: List[float] = field(default_factory=list)

    @classmethod
    def with_title(cls, title: str) -> Series:
        return cls(title=title)

    def __len__(self) -> int:
        return len(self.values)

    def to_numpy(self) -> np.ndarray:
        """Return the values as a ``float64`` array (NaN cells preserved)."""
        return np.asarray(self.values, dtype=np.float64)


@dataclass
class Slice:
    """One parsed data row.

    ``x`` and ``epoch`` keep the raw cell text; every other cell becomes a
    float in ``values`` (NaN when the cell is not a number).
    """

    x: Optional[str] = None
    epoch: Optional[str] = None
    values: List[float] = field(default_factory=list)

    @classmethod
    def default(cls) -> Slice:
        return cls()


@dataclass
class SeriesSet:
    """A dataset: optional X column, optional epoch label and numeric series."""

    epoch: Optional[str] = None
    x: Optional[XColumn] = None
    series: List[Series] = field(default_factory=list)

    def titles(self) -> List[str]:
        return [s.title for s in self.series]

    def __len__(self) -> int:
        if self.x is not None:
            return len(self.x[1])
        if self.series:
            return len(self.series[0])
        return 0

    def append_slice(self, row: Slice) -> None:
        """Append one row, keeping every series the same length.

        Missing trailing values are padded with NaN; values beyond the last
        series are dropped.
        """
        if row.epoch is not None:
            self.epoch = row.epoch
        if self.x is not None:
            self.x[1].append(row.x if row.x is not None else "")
        for i, series in enumerate(self.series):
            series.values.append(row.values[i] if i < len(row.values) else math.nan)

    def to_numpy(self) -> np.ndarray:
        """Return a ``(rows, series)`` float64 matrix of all numeric values."""
        if not self.series:
            return np.empty((len(self), 0), dtype=np.float64)
        return np.column_stack([s.to_numpy() for s in self.series])


__all__ = ["Series", "SeriesSet", "Slice", "XColumn"]
