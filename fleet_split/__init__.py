"""Route dispatch report splitter.

Reads a dispatch report workbook, keeps the DELIVERED rows, writes one
workbook per fleet and bundles them into a single ZIP archive.
"""

from .config.loader import SplitConfig, load_config
from .errors import (
    ArchiveError,
    FilterError,
    ReadError,
    ReadErrorKind,
    SplitError,
    UnknownProcessingError,
    WriteError,
)
from .models import PipelineState, ProgressEvent, SplitResult
from .services.orchestrator import SplitPipeline, split_report

__version__ = "0.1.0"

__all__ = [
    "split_report",
    "SplitPipeline",
    "SplitConfig",
    "load_config",
    "SplitResult",
    "PipelineState",
    "ProgressEvent",
    "SplitError",
    "ReadError",
    "ReadErrorKind",
    "FilterError",
    "WriteError",
    "ArchiveError",
    "UnknownProcessingError",
]
