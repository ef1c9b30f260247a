from __future__ import annotations

from collections.abc import Iterable

from ..models.table import RowRecord

"""Status filter: keep rows whose status column equals the wanted value.

Comparison ignores case and surrounding whitespace. A missing status cell
is treated as "" and therefore never matches.
"""

__all__ = [
    "RowFilter",
]


class RowFilter:
    def __init__(self, status_column: str = "FinalStatus", wanted: str = "DELIVERED") -> None:
        self.status_column = status_column
        self.wanted = wanted.strip().upper()

    def matches(self, row: RowRecord) -> bool:
        value = row.get(self.status_column) or ""
        return str(value).strip().upper() == self.wanted

    def filter(self, rows: Iterable[RowRecord]) -> list[RowRecord]:
        return [row for row in rows if self.matches(row)]
