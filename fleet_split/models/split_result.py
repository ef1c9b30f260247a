from __future__ import annotations

from dataclasses import dataclass

"""Archive entry and final result models."""

__all__ = [
    "ArchiveEntry",
    "SplitResult",
]


@dataclass(frozen=True)
class ArchiveEntry:
    """A named workbook payload destined for the archive.

    ``filename`` is already sanitized and carries the table extension.
    """
    filename: str
    payload: bytes


@dataclass(frozen=True)
class SplitResult:
    """Successful pipeline outcome handed back to the caller.

    The caller owns delivery of ``archive`` (writing ``archive_name`` to disk,
    serving it for download, ...).
    """
    archive: bytes
    archive_name: str  # <sanitized label>.zip
    total_rows: int  # DELIVERED 行数 (フィルタ後)
    group_keys: list[str]  # first-seen order
    entry_names: list[str]  # archive 内のファイル名 (group_keys と同順)

    @property
    def group_count(self) -> int:
        return len(self.group_keys)
