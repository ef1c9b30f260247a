"""Domain models for the dispatch report split tool.

This package contains the value types passed between pipeline stages.
"""

from .error_record import ErrorRecord
from .pipeline_state import PipelineState, ProgressEvent
from .split_result import ArchiveEntry, SplitResult
from .table import Group, RowRecord, SourceTable

__all__ = [
    # Table models
    "RowRecord",
    "SourceTable",
    "Group",
    # Pipeline models
    "PipelineState",
    "ProgressEvent",
    # Output models
    "ArchiveEntry",
    "SplitResult",
    "ErrorRecord",
]
