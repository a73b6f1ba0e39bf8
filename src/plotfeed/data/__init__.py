"""Schema mapping and series containers for parsed CSV input.

:mod:`schema` turns a header line into a role assignment (X, epoch, numeric
series) and converts data rows against it; :mod:`series` holds the datasets
those rows are appended to. Nothing here knows about threads or sources, so
the same types are shared by the fetcher and its consumers.
"""

from __future__ import annotations

from .schema import ColumnRole, ColumnSelector, Schema, parse_number
from .series import Series, SeriesSet, Slice

__all__ = [
    "ColumnRole",
    "ColumnSelector",
    "Schema",
    "Series",
    "SeriesSet",
    "Slice",
    "parse_number",
]
