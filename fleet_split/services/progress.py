from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

from ..models.pipeline_state import ProgressEvent

"""Progress display service with tqdm (TTY only).

The pipeline reports discrete percentages (10, 25, 40, ... 100); this tracker
turns them into a single 0-100 bar. In non-TTY environments (CI, pipes) no
bar is created to avoid ANSI control sequence spam.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Check if TTY output is enabled.

    Returns:
        True if stdout is a TTY and progress should be displayed, False otherwise
    """
    return sys.stdout.isatty()


class ProgressTracker:
    """Percent progress bar fed by pipeline ProgressEvents.

    Usable directly as the pipeline's ``on_progress`` callback.
    """

    def __init__(self, *, description: str = "Splitting report") -> None:
        self.description = description
        self.percent = 0
        self.last_message = ""

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=100,
                desc=description,
                unit="%",
                disable=False,
                leave=True,
                position=0,
                ncols=80,  # Standard width for consistency
                ascii=True,  # ASCII chars for better compatibility
            )
        else:
            self.pbar = None

    def __call__(self, event: ProgressEvent) -> None:
        self.update(event)

    def update(self, event: ProgressEvent) -> None:
        """Advance the bar to ``event.percent`` (never backwards)."""
        step = event.percent - self.percent
        if step > 0:
            self.percent = event.percent
        self.last_message = event.message

        if self.enabled and self.pbar is not None:
            if step > 0:
                self.pbar.update(step)
            self.pbar.set_postfix(stage=event.state.value)

    def close(self) -> None:
        """Close the progress bar."""
        if self.enabled and self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
