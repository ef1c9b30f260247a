# Shared pytest fixtures
from __future__ import annotations

import io
import tempfile
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from fleet_split.config.loader import CONFIG_ENV_VAR

REPORT_COLUMNS = ["WaybillNo", "FleeName", "FinalStatus", "Pieces", "sync time", "planDeliveryDate"]
SHEET_NAME = "Route Dispatch"


def report_row(
    waybill: str, fleet: str, status: str, pieces: int = 1, day: int = 1
) -> dict[str, Any]:
    return {
        "WaybillNo": waybill,
        "FleeName": fleet,
        "FinalStatus": status,
        "Pieces": pieces,
        "sync time": datetime(2024, 3, day, 8, 30),
        "planDeliveryDate": datetime(2024, 3, day),
    }


def build_report_bytes(
    rows: list[dict[str, Any]],
    columns: list[str] | None = None,
    sheet_name: str = SHEET_NAME,
    extra_sheets: dict[str, list[dict[str, Any]]] | None = None,
) -> bytes:
    """Create an .xlsx payload with a header row followed by ``rows``."""
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df = pd.DataFrame(rows, columns=columns if columns is not None else (REPORT_COLUMNS if not rows else None))
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        for name, extra in (extra_sheets or {}).items():
            pd.DataFrame(extra).to_excel(writer, sheet_name=name, index=False)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def isolated_config_env(monkeypatch):
    # setenv -> delenv so the variable is removed again on teardown even if .env loading sets it
    monkeypatch.setenv(CONFIG_ENV_VAR, "unset")
    monkeypatch.delenv(CONFIG_ENV_VAR)


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """status_column: FinalStatus
wanted_status: DELIVERED
group_column: FleeName
excluded_columns:
  - sync time
  - planDeliveryDate
column_width: 15
compression_level: 6
on_name_collision: suffix
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "split.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def mixed_rows() -> list[dict[str, Any]]:
    """Five rows, two DELIVERED (mixed case) for the same padded fleet name."""
    return [
        report_row("WB001", "CourierX", "Delivered", pieces=2, day=1),
        report_row("WB002", "CourierY", "IN_TRANSIT", day=2),
        report_row("WB003", " CourierX ", "delivered ", pieces=5, day=3),
        report_row("WB004", "CourierZ", "FAILED", day=4),
        report_row("WB005", "CourierY", "RETURNED", day=5),
    ]


@pytest.fixture()
def report_bytes() -> Callable[..., bytes]:
    return build_report_bytes


@pytest.fixture()
def write_report(temp_workdir: Path) -> Callable[..., Path]:
    def _write(rows: list[dict[str, Any]], name: str = "dispatch.xlsx", **kwargs: Any) -> Path:
        path = temp_workdir / "data" / name
        path.write_bytes(build_report_bytes(rows, **kwargs))
        return path
    return _write
