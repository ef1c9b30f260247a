from __future__ import annotations

import json
import re
from pathlib import Path

from fleet_split.logging.error_log import ErrorLogBuffer
from fleet_split.models.error_record import ErrorRecord

KEYS = {"timestamp", "file", "label", "stage", "error_type", "message"}


def test_error_record_creation_and_json_line():
    rec = ErrorRecord.create(
        file="dispatch.xlsx",
        label="HUB-01",
        stage="filtering",
        error_type="NO_MATCHES",
        message="No records with FinalStatus = DELIVERED found",
    )
    data = json.loads(rec.to_json_line())
    assert set(data.keys()) == KEYS
    assert data["error_type"] == "NO_MATCHES"
    assert data["stage"] == "filtering"
    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$", data["timestamp"])


def test_error_record_keeps_non_ascii():
    rec = ErrorRecord.create("配送.xlsx", "東京", "reading", "READ_EMPTY", "Excel file is empty")
    assert "配送.xlsx" in rec.to_json_line()


def test_error_log_buffer_flush(temp_workdir: Path):
    buf = ErrorLogBuffer()
    buf.append(ErrorRecord.create("a.xlsx", "H", "reading", "READ_EMPTY", "empty"))
    buf.append(ErrorRecord.create("b.xlsx", "H", "exporting", "WRITE_ERROR", "bad"))
    path = buf.flush()
    assert path is not None and path.exists()
    assert path.parent == Path("logs")
    assert re.match(r"^errors-\d{8}-\d{6}\.log$", path.name)
    lines = path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    for raw in lines:
        assert set(json.loads(raw).keys()) == KEYS
    # flush 後バッファクリア
    assert len(buf) == 0


def test_error_log_buffer_empty_flush_creates_nothing(temp_workdir: Path):
    buf = ErrorLogBuffer()
    assert buf.flush() is None
    assert not (temp_workdir / "logs").exists()


def test_error_log_buffer_appends_on_second_flush(tmp_path: Path):
    buf = ErrorLogBuffer(logs_dir=tmp_path / "logs")
    buf.append(ErrorRecord.create("f.xlsx", "H", "reading", "READ_EMPTY", "1"))
    path = buf.flush()
    size1 = path.stat().st_size
    buf.append(ErrorRecord.create("f.xlsx", "H", "reading", "READ_EMPTY", "2"))
    assert buf.flush() == path
    assert path.stat().st_size > size1
