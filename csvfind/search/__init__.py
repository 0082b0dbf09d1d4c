"""Row filtering: first-column search over CSV files."""

from .backends import (
    BACKEND_CHOICES,
    FieldSplitBackend,
    MatchBackend,
    RipgrepBackend,
    select_backend,
)
from .row_filter import FilterResult, RowFilter, filter_rows

__all__ = [
    "BACKEND_CHOICES",
    "FieldSplitBackend",
    "FilterResult",
    "MatchBackend",
    "RipgrepBackend",
    "RowFilter",
    "filter_rows",
    "select_backend",
]
