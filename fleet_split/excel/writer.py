from __future__ import annotations

import io
import logging
from collections.abc import Sequence
from datetime import datetime

import pandas as pd

from ..errors import WriteError
from ..models.table import RowRecord

"""Excel writer: one workbook per group.

xlsxwriter engine を使用 (zip エントリの時刻は固定、作成日時は下記で固定)。
同一入力からは同一バイト列を生成する。
"""

__all__ = [
    "DEFAULT_COLUMN_WIDTH",
    "FIXED_CREATED",
    "ExcelTableWriter",
]

logger = logging.getLogger(__name__)

DEFAULT_COLUMN_WIDTH = 15
# docProps/core.xml に埋め込まれる作成日時
FIXED_CREATED = datetime(2000, 1, 1)

# 文字列を数式/URL/数値として解釈させない (セル内容をそのまま残す)
_WORKBOOK_OPTIONS = {
    "strings_to_formulas": False,
    "strings_to_urls": False,
    "strings_to_numbers": False,
    "in_memory": True,
}


class ExcelTableWriter:
    """Serializes row records into an XLSX payload.

    Header comes from the first row's keys. Every column gets the same
    display width regardless of content.
    """

    def __init__(self, column_width: float = DEFAULT_COLUMN_WIDTH) -> None:
        self.column_width = column_width

    def write(self, rows: Sequence[RowRecord], sheet_name: str) -> bytes:
        if not rows:
            raise WriteError(f"no rows to write for sheet '{sheet_name}'")
        columns = list(rows[0].keys())
        try:
            df = pd.DataFrame.from_records(list(rows), columns=columns)
            buffer = io.BytesIO()
            with pd.ExcelWriter(
                buffer,
                engine="xlsxwriter",
                engine_kwargs={"options": _WORKBOOK_OPTIONS},
            ) as writer:
                writer.book.set_properties({"created": FIXED_CREATED})
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                worksheet = writer.sheets[sheet_name]
                if columns:
                    worksheet.set_column(0, len(columns) - 1, self.column_width)
        except WriteError:
            raise
        except Exception as e:
            raise WriteError(f"failed to write sheet '{sheet_name}': {e}") from e
        payload = buffer.getvalue()
        logger.debug("wrote sheet=%s rows=%d bytes=%d", sheet_name, len(rows), len(payload))
        return payload
