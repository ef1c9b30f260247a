from __future__ import annotations

from collections.abc import Iterable

from ..models.table import RowRecord

__all__ = [
    "DEFAULT_EXCLUDED_COLUMNS",
    "RowProjector",
]

# Route Dispatch Report の W 列 / X 列
DEFAULT_EXCLUDED_COLUMNS = ("sync time", "planDeliveryDate")


class RowProjector:
    """Drops the excluded columns from each row before export.

    Returns copies; absent columns are ignored and the remaining column
    order is unchanged.
    """

    def __init__(self, excluded: Iterable[str] = DEFAULT_EXCLUDED_COLUMNS) -> None:
        self.excluded = frozenset(excluded)

    def project(self, row: RowRecord) -> RowRecord:
        return {k: v for k, v in row.items() if k not in self.excluded}

    def project_all(self, rows: Iterable[RowRecord]) -> list[RowRecord]:
        return [self.project(row) for row in rows]
