"""
Mapping of positional CSV header fields onto chart roles.

A header line is split into titles; at most one of them becomes the X
column and at most one the epoch column, as chosen by two
:class:`ColumnSelector` values. Every remaining title is a numeric series.
Data rows are then converted against that mapping with
:meth:`Schema.parse_row`.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from .series import Series, SeriesSet, Slice

_UNSET = "unset"
_POSITION = "position"
_TITLE = "title"


@dataclass(frozen=True)
class ColumnSelector:
    """Picks a header field either by position or by exact title.

    An unset selector matches nothing.
    """

    kind: str = _UNSET
    position: Optional[int] = None
    title: Optional[str] = None

    @classmethod
    def unset(cls) -> ColumnSelector:
        return cls()

    @classmethod
    def by_position(cls, position: int) -> ColumnSelector:
        if position < 0:
            raise ValueError(f"column position must be >= 0, got {position}")
        return cls(kind=_POSITION, position=int(position))

    @classmethod
    def by_title(cls, title: str) -> ColumnSelector:
        return cls(kind=_TITLE, title=str(title))

    @classmethod
    def parse(cls, value: Union[None, int, str, ColumnSelector]) -> ColumnSelector:
        """
        Build a selector from a configuration value.

        ``None`` or an empty string gives an unset selector, an integer or a
        string of digits selects by position, any other string selects by
        title.
        """
        if isinstance(value, ColumnSelector):
            return value
        if value is None:
            return cls.unset()
        if isinstance(value, bool):
            raise ValueError(f"invalid column selector {value!r}")
        if isinstance(value, int):
            return cls.by_position(value)
        text = str(value)
        if not text:
            return cls.unset()
        if text.isascii() and text.isdigit():
            return cls.by_position(int(text))
        return cls.by_title(text)

    @property
    def is_set(self) -> bool:
        return self.kind != _UNSET

    def matches(self, title: str, position: int) -> bool:
        if self.kind == _POSITION:
            return position == self.position
        if self.kind == _TITLE:
            return title == self.title
        return False

    def __str__(self) -> str:
        if self.kind == _POSITION:
            return f"#{self.position}"
        if self.kind == _TITLE:
            return repr(self.title)
        return "<unset>"


@dataclass(frozen=True)
class ColumnRole:
    """Header field claimed for the X or epoch role."""

    title: str
    position: int


@dataclass(frozen=True)
class Schema:
    """Role assignment for one header line."""

    x: Optional[ColumnRole] = None
    epoch: Optional[ColumnRole] = None
    series_titles: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def build(
        cls,
        x: ColumnSelector,
        epoch: ColumnSelector,
        header: Iterable[str],
    ) -> Schema:
        """Assign roles to ``header`` fields; X is tested before epoch.

        Any header, including an empty one, yields a valid schema.
        """
        x_role: Optional[ColumnRole] = None
        epoch_role: Optional[ColumnRole] = None
        titles: List[str] = []
        for position, title in enumerate(header):
            if x.matches(title, position):
                x_role = ColumnRole(title, position)
            elif epoch.matches(title, position):
                epoch_role = ColumnRole(title, position)
            else:
                titles.append(title)
        return cls(x=x_role, epoch=epoch_role, series_titles=tuple(titles))

    def empty_set(self) -> SeriesSet:
        """Return a dataset with one empty series per series title.

        The epoch stays unset until a row carrying it is appended.
        """
        return SeriesSet(
            epoch=None,
            x=(self.x.title, []) if self.x is not None else None,
            series=[Series.with_title(t) for t in self.series_titles],
        )

    def parse_row(self, fields: Iterable[str]) -> Slice:
        """Convert one row of raw cells into a :class:`Slice`."""
        row = Slice.default()
        x_pos = self.x.position if self.x is not None else None
        epoch_pos = self.epoch.position if self.epoch is not None else None
        for position, cell in enumerate(fields):
            if position == x_pos:
                row.x = cell
            elif position == epoch_pos:
                row.epoch = cell
            else:
                row.values.append(parse_number(cell))
        return row


_DECIMAL = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)",
    re.IGNORECASE | re.ASCII,
)


def parse_number(cell: str) -> float:
    """Parse a decimal cell, returning NaN when it is not a number.

    Only plain ASCII decimal notation is accepted; digit-group underscores
    and non-ASCII digits give NaN.
    """
    text = cell.strip()
    if _DECIMAL.fullmatch(text) is None:
        return math.nan
    return float(text)


__all__ = ["ColumnRole", "ColumnSelector", "Schema", "parse_number"]
