from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.error_record import ErrorRecord

"""Failed-run log for the CLI.

A split that fails is recorded as one JSON line (see error_log_schema.json)
in `logs/errors-YYYYMMDD-HHMMSS.log`. 成功した実行ではファイルを作らない。
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

DEFAULT_LOGS_DIR = Path("./logs")
STAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """Collects failed-run records and writes them on ``flush``."""

    def __init__(self, logs_dir: Path | None = None) -> None:
        self.logs_dir = logs_dir or DEFAULT_LOGS_DIR
        self.records: list[ErrorRecord] = []
        self._path: Path | None = None

    @property
    def file_path(self) -> Path:
        # 名前 (UTC 時刻) は最初に必要になった時点で固定
        if self._path is None:
            stamp = datetime.now(UTC).strftime(STAMP_FMT)
            self._path = self.logs_dir / f"errors-{stamp}.log"
        return self._path

    def append(self, record: ErrorRecord) -> None:
        self.records.append(record)

    def __len__(self) -> int:
        return len(self.records)

    def flush(self) -> Path | None:
        """Write pending records and return the log path (None if nothing was pending)."""
        if not self.records:
            return None
        path = self.file_path
        path.parent.mkdir(parents=True, exist_ok=True)
        lines = "".join(r.to_json_line() + "\n" for r in self.records)
        with path.open("a", encoding="utf-8") as f:
            f.write(lines)
        self.records.clear()
        return path
