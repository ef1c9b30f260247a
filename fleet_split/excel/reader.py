from __future__ import annotations

import io
import logging
import math
from datetime import date, datetime, time
from typing import Any

import pandas as pd
from openpyxl import load_workbook

from ..errors import ReadError
from ..models.table import RowRecord, SourceTable
from .number_format import render_number

"""Excel reader for the dispatch report.

- 先頭シート (workbook 上の順序で index 0) のみ読む
- 1行目をヘッダ行、2行目以降をデータ行として扱う
- 全セルを表示文字列に正規化 (数値は number_format 適用, 日付は YYYY-MM-DD, 空セルは "")
- 重複ヘッダは `Remark`, `Remark_1`, `Remark_2` ...、空ヘッダは `__EMPTY`

"NA" / "N/A" / "null" 等の文字列は欠損扱いせずそのまま残す。
"""

__all__ = [
    "DATE_FORMAT",
    "EMPTY_HEADER",
    "ExcelTableReader",
    "cell_to_text",
    "dedupe_headers",
    "read_first_sheet",
    "normalize_sheet",
]

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
EMPTY_HEADER = "__EMPTY"


def cell_to_text(value: Any, number_format: str = "General") -> str:
    """Convert a raw cell value to its display string.

    - None / NaN / NaT -> ""
    - datetime / date / Timestamp -> YYYY-MM-DD (number_format is ignored)
    - bool -> TRUE / FALSE (Excel display form)
    - int / float with a number format -> formatted text ("00000", "0%", "#,##0.00" ...)
    - integral float -> integer text (5.0 -> "5")
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, (datetime, date)):
        # pd.Timestamp は datetime のサブクラス。NaT は strftime できないので先に除外
        if value is pd.NaT:
            return ""
        return value.strftime(DATE_FORMAT)
    if isinstance(value, time):
        return value.isoformat()
    if isinstance(value, (int, float)) and not (isinstance(value, float) and not math.isfinite(value)):
        rendered = render_number(value, number_format or "General")
        if rendered is not None:
            return rendered
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, str):
        return value
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return str(value)


def dedupe_headers(names: list[str]) -> list[str]:
    """Make header names unique: repeats get ``_1``, ``_2`` ... and blanks become ``__EMPTY``."""
    counters: dict[str, int] = {}
    taken: set[str] = set()
    result: list[str] = []
    for name in names:
        base = name if name != "" else EMPTY_HEADER
        candidate = base
        if candidate in taken:
            n = counters.get(base, 0)
            while candidate in taken:
                n += 1
                candidate = f"{base}_{n}"
            counters[base] = n
        taken.add(candidate)
        result.append(candidate)
    return result


def read_first_sheet(payload: bytes) -> tuple[str, pd.DataFrame]:
    """Parse the workbook payload and return (sheet_name, DataFrame of display text).

    openpyxl で読むのはセルの number_format を得るため (pandas 経由では失われる)。
    """
    wb = load_workbook(io.BytesIO(payload), read_only=True, data_only=True)
    try:
        if not wb.worksheets:
            raise ReadError.empty()
        ws = wb.worksheets[0]
        sheet_name = str(ws.title)
        grid = [
            [cell_to_text(c.value, getattr(c, "number_format", "General")) for c in row]
            for row in ws.iter_rows()
        ]
    finally:
        wb.close()

    width = max((len(r) for r in grid), default=0)
    grid = [r + [""] * (width - len(r)) for r in grid]
    # 末尾の完全な空列 (書式だけのセル等) は列として扱わない
    while width and all(r[width - 1] == "" for r in grid):
        width -= 1
    grid = [r[:width] for r in grid]
    if not grid or width == 0:
        return sheet_name, pd.DataFrame()

    header = dedupe_headers(grid[0])
    return sheet_name, pd.DataFrame(grid[1:], columns=header, dtype=object)


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SourceTable:
    """Normalize a raw DataFrame (first row already applied as header).

    Steps:
    1. Stringify column names
    2. Convert every cell with ``cell_to_text``
    3. Skip rows whose cells are all blank
    """
    columns = [str(c) for c in df.columns.tolist()]
    rows: list[RowRecord] = []
    for raw in df.itertuples(index=False, name=None):
        texts = [cell_to_text(v) for v in raw]
        if all(t == "" for t in texts):
            continue
        row: RowRecord = dict(zip(columns, texts, strict=True))
        rows.append(row)
    return SourceTable(sheet_name=sheet_name, columns=columns, rows=rows)


class ExcelTableReader:
    """Reads the uploaded report payload into a SourceTable.

    Args:
        group_column: Column that must exist in the header (checked on
            presence only, not per row)
    """

    def __init__(self, group_column: str = "FleeName") -> None:
        self.group_column = group_column

    def parse(self, payload: bytes) -> tuple[str, pd.DataFrame]:
        return read_first_sheet(payload)

    def validate(self, table: SourceTable) -> SourceTable:
        if not table.rows:
            raise ReadError.empty()
        if self.group_column not in table.columns:
            raise ReadError.missing_column(self.group_column)
        return table

    def read(self, payload: bytes) -> SourceTable:
        sheet_name, df = self.parse(payload)
        table = normalize_sheet(df, sheet_name)
        logger.debug(
            "read sheet=%s columns=%d rows=%d", sheet_name, len(table.columns), len(table.rows)
        )
        return self.validate(table)
