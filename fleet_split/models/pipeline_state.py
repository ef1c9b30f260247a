from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Pipeline lifecycle enum and progress event model.

State transitions:
    IDLE → READING → FILTERING → GROUPING → EXPORTING → ARCHIVING → DONE
    any non-IDLE state → FAILED
"""

__all__ = [
    "PipelineState",
    "ProgressEvent",
]


class PipelineState(Enum):
    IDLE = "idle"
    READING = "reading"
    FILTERING = "filtering"
    GROUPING = "grouping"
    EXPORTING = "exporting"
    ARCHIVING = "archiving"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (PipelineState.DONE, PipelineState.FAILED)


@dataclass(frozen=True)
class ProgressEvent:
    """One progress milestone emitted to the caller.

    ``percent`` is non-decreasing within a single run.
    """
    state: PipelineState
    percent: int
    message: str = ""

    def label(self) -> str:
        return f"{self.percent}%"
