from __future__ import annotations

import io
import logging
import re
import zipfile
from collections.abc import Iterable, Sequence

from ..errors import ArchiveError
from ..models.split_result import ArchiveEntry

"""ZIP archive assembly for the per-group workbooks.

Entry names are sanitized group keys. Two keys may sanitize to the same name
(``A/B`` and ``A:B`` -> ``A_B``); ``on_collision`` decides what happens:

- ``suffix`` (default): later entries become ``A_B (2).xlsx``, ``A_B (3).xlsx``
- ``overwrite``: last write wins, the earlier entry is dropped
"""

__all__ = [
    "ILLEGAL_FILENAME_CHARS",
    "COLLISION_POLICIES",
    "DEFAULT_COMPRESSION_LEVEL",
    "sanitize_filename",
    "ArchiveBuilder",
]

logger = logging.getLogger(__name__)

ILLEGAL_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*]')
COLLISION_POLICIES = ("suffix", "overwrite")
DEFAULT_COMPRESSION_LEVEL = 6
# zip エントリ時刻を固定 (同一入力 -> 同一バイト列)
_FIXED_DATE_TIME = (1980, 1, 1, 0, 0, 0)


def sanitize_filename(name: str) -> str:
    """Replace filesystem-illegal characters with ``_`` and trim."""
    return ILLEGAL_FILENAME_CHARS.sub("_", name).strip()


class ArchiveBuilder:
    """Collects named payloads into one deflate-compressed ZIP payload."""

    def __init__(
        self,
        compression_level: int = DEFAULT_COMPRESSION_LEVEL,
        on_collision: str = "suffix",
        extension: str = "xlsx",
    ) -> None:
        if on_collision not in COLLISION_POLICIES:
            raise ValueError(f"unknown collision policy: {on_collision}")
        self.compression_level = compression_level
        self.on_collision = on_collision
        self.extension = extension

    def entry_for(self, key: str, payload: bytes) -> ArchiveEntry:
        return ArchiveEntry(filename=f"{sanitize_filename(key)}.{self.extension}", payload=payload)

    def resolve_names(self, names: Iterable[str]) -> list[str]:
        """Return the stored name of each entry, in input order.

        Under ``overwrite`` duplicates keep their name (and replace each other);
        under ``suffix`` every name in the result is unique.
        """
        names = list(names)
        if self.on_collision == "overwrite":
            return names
        taken: set[str] = set()
        resolved: list[str] = []
        for name in names:
            candidate = name
            if candidate in taken:
                stem, dot, ext = name.rpartition(".")
                if not dot:
                    stem, ext = name, ""
                n = 2
                while True:
                    candidate = f"{stem} ({n}).{ext}" if dot else f"{stem} ({n})"
                    if candidate not in taken:
                        break
                    n += 1
            taken.add(candidate)
            resolved.append(candidate)
        return resolved

    def build(self, entries: Sequence[ArchiveEntry]) -> bytes:
        names = self.resolve_names(e.filename for e in entries)
        stored: dict[str, bytes] = {}
        for name, entry in zip(names, entries, strict=True):
            if name in stored:
                logger.warning("archive name collision: %s overwritten", name)
            elif name != entry.filename:
                logger.warning("archive name collision: %s stored as %s", entry.filename, name)
            stored[name] = entry.payload

        buffer = io.BytesIO()
        try:
            with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as zf:
                for name, payload in stored.items():
                    info = zipfile.ZipInfo(name, date_time=_FIXED_DATE_TIME)
                    info.compress_type = zipfile.ZIP_DEFLATED
                    zf.writestr(info, payload, compresslevel=self.compression_level)
        except Exception as e:
            raise ArchiveError(f"failed to build archive: {e}") from e
        return buffer.getvalue()
