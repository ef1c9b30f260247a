from __future__ import annotations

from collections.abc import Iterable

from ..models.table import Group, RowRecord

"""Partition rows by the grouping column (FleeName).

Group order follows the first occurrence of each key; rows keep their
relative order inside a group. Everything is held in memory.
"""

__all__ = [
    "UNDEFINED_KEY",
    "GroupPartitioner",
]

UNDEFINED_KEY = "undefined"


class GroupPartitioner:
    def __init__(self, key_column: str = "FleeName", undefined_key: str = UNDEFINED_KEY) -> None:
        self.key_column = key_column
        self.undefined_key = undefined_key

    def key_for(self, row: RowRecord) -> str:
        key = str(row.get(self.key_column) or "").strip()
        return key or self.undefined_key

    def partition(self, rows: Iterable[RowRecord]) -> dict[str, Group]:
        buckets: dict[str, list[RowRecord]] = {}
        for row in rows:
            buckets.setdefault(self.key_for(row), []).append(row)
        return {key: Group(key=key, rows=tuple(bucket)) for key, bucket in buckets.items()}
