from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from ..archive.builder import ArchiveBuilder, sanitize_filename
from ..config.loader import SplitConfig
from ..errors import FilterError, SplitError, UnknownProcessingError
from ..excel.reader import ExcelTableReader
from ..excel.writer import ExcelTableWriter
from ..models.pipeline_state import PipelineState, ProgressEvent
from ..models.split_result import ArchiveEntry, SplitResult
from ..models.table import Group, RowRecord, SourceTable
from .filtering import RowFilter
from .grouping import GroupPartitioner
from .projection import RowProjector

"""Pipeline orchestration for the dispatch report split.

Sequences read → filter → group → project/write → archive for one payload,
emits progress milestones and maps every failure to a SplitError.

Progress milestones (percent):
    READING 10 / 25, FILTERING 40, GROUPING 50, EXPORTING 60..90, ARCHIVING 95, DONE 100

A SplitPipeline instance runs once. ``split_report`` builds a fresh one per
call so invocations never share state.
"""

__all__ = [
    "ProgressCallback",
    "TableReader",
    "TableWriter",
    "SplitPipeline",
    "split_report",
]

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressEvent], None]

EXPORT_START_PERCENT = 60
EXPORT_SPAN_PERCENT = 30


class TableReader(Protocol):
    def read(self, payload: bytes) -> SourceTable: ...


class TableWriter(Protocol):
    def write(self, rows: list[RowRecord], sheet_name: str) -> bytes: ...


class SplitPipeline:
    """Single-use pipeline from (payload, label) to SplitResult.

    Args:
        config: Split settings (columns, status, archive options)
        reader: Table reader; defaults to ExcelTableReader
        writer: Table writer; defaults to ExcelTableWriter
        on_progress: Called with each ProgressEvent, in order
    """

    def __init__(
        self,
        config: SplitConfig | None = None,
        *,
        reader: TableReader | None = None,
        writer: TableWriter | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self.config = config or SplitConfig()
        cfg = self.config
        self.reader = reader or ExcelTableReader(group_column=cfg.group_column)
        self.writer = writer or ExcelTableWriter(column_width=cfg.column_width)
        self.row_filter = RowFilter(cfg.status_column, cfg.wanted_status)
        self.partitioner = GroupPartitioner(cfg.group_column, cfg.undefined_key)
        self.projector = RowProjector(cfg.excluded_columns)
        self.archiver = ArchiveBuilder(
            compression_level=cfg.compression_level,
            on_collision=cfg.on_name_collision,
            extension=cfg.table_extension,
        )
        self.on_progress = on_progress
        self.state = PipelineState.IDLE
        self.failed_stage: PipelineState | None = None
        self.error: SplitError | None = None
        self.events: list[ProgressEvent] = []

    def _advance(self, state: PipelineState, percent: int, message: str = "") -> None:
        self.state = state
        if self.events:
            percent = max(percent, self.events[-1].percent)
        event = ProgressEvent(state=state, percent=percent, message=message)
        self.events.append(event)
        logger.debug("progress %s %s %s", state.value, event.label(), message)
        if self.on_progress is not None:
            self.on_progress(event)

    def _fail(self, error: SplitError) -> SplitError:
        self.failed_stage = self.state
        self.state = PipelineState.FAILED
        self.error = error
        return error

    def run(self, payload: bytes, label: str) -> SplitResult:
        """Run the pipeline once.

        Raises:
            ValueError: label is blank, or the instance was already used
            SplitError: any pipeline failure (see fleet_split.errors)
        """
        if self.state is not PipelineState.IDLE:
            raise ValueError("SplitPipeline instances are single-use")
        archive_label = sanitize_filename(label or "")
        if not archive_label:
            raise ValueError("label must not be empty")

        try:
            return self._run(payload, archive_label)
        except SplitError as e:
            self._fail(e)
            raise
        except Exception as e:
            message = str(e) or type(e).__name__
            raise self._fail(UnknownProcessingError(message)) from e

    def _run(self, payload: bytes, archive_label: str) -> SplitResult:
        cfg = self.config

        self._advance(PipelineState.READING, 10, "Reading file...")
        table = self.reader.read(payload)
        self._advance(PipelineState.READING, 25, f"Read {len(table.rows)} rows from '{table.sheet_name}'")

        self._advance(PipelineState.FILTERING, 40, "Filtering rows...")
        matched = self.row_filter.filter(table.rows)
        if not matched:
            raise FilterError(f"No records with {cfg.status_column} = {cfg.wanted_status} found")
        logger.info(
            "%d of %d rows have %s = %s", len(matched), len(table.rows), cfg.status_column, cfg.wanted_status
        )

        self._advance(PipelineState.GROUPING, 50, "Grouping data...")
        groups = self.partitioner.partition(matched)
        total = len(groups)

        self._advance(PipelineState.EXPORTING, EXPORT_START_PERCENT, f"Generating {total} files...")
        entries: list[ArchiveEntry] = []
        for done, group in enumerate(groups.values(), start=1):
            entries.append(self._export_group(group, table.sheet_name))
            percent = round(EXPORT_START_PERCENT + done / total * EXPORT_SPAN_PERCENT)
            self._advance(PipelineState.EXPORTING, percent, f"Wrote {group.key} ({len(group)} rows)")

        self._advance(PipelineState.ARCHIVING, 95, "Packaging files...")
        archive = self.archiver.build(entries)
        entry_names = self.archiver.resolve_names(e.filename for e in entries)

        result = SplitResult(
            archive=archive,
            archive_name=f"{archive_label}.{cfg.archive_extension}",
            total_rows=len(matched),
            group_keys=list(groups),
            entry_names=entry_names,
        )
        self._advance(
            PipelineState.DONE,
            100,
            f"Success! Generated {total} Excel files ({cfg.wanted_status} only) and packaged as ZIP",
        )
        return result

    def _export_group(self, group: Group, sheet_name: str) -> ArchiveEntry:
        rows = self.projector.project_all(group.rows)
        payload = self.writer.write(rows, sheet_name)
        return self.archiver.entry_for(group.key, payload)


def split_report(
    payload: bytes,
    label: str,
    *,
    config: SplitConfig | None = None,
    on_progress: ProgressCallback | None = None,
) -> SplitResult:
    """Split a dispatch report payload into a per-group ZIP archive.

    Builds an independent SplitPipeline for this call.
    """
    return SplitPipeline(config, on_progress=on_progress).run(payload, label)
