from __future__ import annotations
from typing import List, Optional, Sequence

from tblfmt.utils.parsing import (
    ColumnMapping, Index, ListMapping, Range, InclusiveRange, InfiniteRange,
)


def point_index(n: int, idx: int) -> Optional[int]:
    """
    Absolute position of a single field in a row of length n.
    Negatives count from the end; returns None when the index falls before
    the start of the row. Positions past the end are returned unchanged and
    simply miss on lookup.
    """
    if idx >= 0:
        return idx
    i = n + idx
    return i if i >= 0 else None


def slice_bound(n: int, idx: int) -> int:
    """Range start / exclusive end, clamped into [0, n]."""
    if idx >= 0:
        return min(idx, n)
    return max(n + idx, 0)


def inclusive_slice_bound(n: int, idx: int) -> int:
    """Inclusive range end, clamped into [0, n-1] (-1 for an empty row)."""
    if idx >= 0:
        return min(idx, n - 1)
    return max(n + idx, 0)


def get_field(row: Sequence[str], idx: int) -> str:
    i = point_index(len(row), idx)
    if i is None or i >= len(row):
        return ""
    return row[i]


def _join_slice(row: Sequence[str], start: int, stop: int, joiner: str) -> str:
    if start >= stop:
        return ""
    return joiner.join(row[start:stop])


def map_column(mapping: ColumnMapping, row: Sequence[str]) -> str:
    """Derive one output field from an input row."""
    n = len(row)
    if isinstance(mapping, Index):
        return get_field(row, mapping.index)
    if isinstance(mapping, ListMapping):
        return mapping.joiner.join(get_field(row, i) for i in mapping.indices)
    if isinstance(mapping, Range):
        return _join_slice(row, slice_bound(n, mapping.start), slice_bound(n, mapping.end), mapping.joiner)
    if isinstance(mapping, InclusiveRange):
        stop = inclusive_slice_bound(n, mapping.end) + 1
        return _join_slice(row, slice_bound(n, mapping.start), stop, mapping.joiner)
    if isinstance(mapping, InfiniteRange):
        return _join_slice(row, slice_bound(n, mapping.start), n, mapping.joiner)
    raise TypeError(f"Unknown column mapping: {mapping!r}")


def map_row(mappings: Optional[Sequence[ColumnMapping]], row: Sequence[str]) -> List[str]:
    if mappings is None:
        return list(row)
    return [map_column(m, row) for m in mappings]


def fit_row(row: Sequence[str], n_columns: int) -> List[str]:
    """Truncate or pad with empty fields to exactly n_columns."""
    out = list(row[:n_columns])
    out.extend([""] * (n_columns - len(out)))
    return out
