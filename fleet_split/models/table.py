from __future__ import annotations

from dataclasses import dataclass

"""Row / table domain models for the report split pipeline.

A RowRecord is a plain insertion-ordered ``dict`` mapping column name to the
cell text. All records read from one sheet share the same key set, so column
order of the first record is the column order of the sheet.
"""

__all__ = [
    "RowRecord",
    "SourceTable",
    "Group",
]

RowRecord = dict[str, str]


@dataclass(frozen=True)
class SourceTable:
    """First sheet of the uploaded report after normalization."""
    sheet_name: str  # 出力ワークブックも同じシート名を使う
    columns: list[str]
    rows: list[RowRecord]

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class Group:
    """Rows sharing one group key, in source order.

    Built once by the partitioner and never merged or split afterwards.
    """
    key: str
    rows: tuple[RowRecord, ...]

    def __len__(self) -> int:
        return len(self.rows)
