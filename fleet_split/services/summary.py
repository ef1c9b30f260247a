from __future__ import annotations

from ..models.split_result import SplitResult

"""Summary line rendering for the SUMMARY output.

Format:
    SUMMARY rows={rows} groups={groups} entries={entries} archive_bytes={bytes} elapsed_sec={elapsed}
"""

# 統計パネル相当: 先頭 10 件のみ表示
FLEET_PREVIEW_LIMIT = 10


def _format_seconds(elapsed: float) -> str:
    # Handle very small numbers and integer values appropriately
    if elapsed == 0:
        return "0"
    if elapsed == int(elapsed):
        return str(int(elapsed))
    if elapsed < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{elapsed:.6f}".rstrip("0").rstrip(".")
    return f"{elapsed:.2f}".rstrip("0").rstrip(".")


def render_summary_line(result: SplitResult, elapsed_seconds: float) -> str:
    """Render a SUMMARY line from a SplitResult.

    Examples:
        >>> r = SplitResult(archive=b"PK", archive_name="HUB.zip", total_rows=4,
        ...                 group_keys=["A", "B"], entry_names=["A.xlsx", "B.xlsx"])
        >>> render_summary_line(r, 0.5)
        'SUMMARY rows=4 groups=2 entries=2 archive_bytes=2 elapsed_sec=0.5'
    """
    return (
        f"SUMMARY rows={result.total_rows} "
        f"groups={result.group_count} "
        f"entries={len(set(result.entry_names))} "
        f"archive_bytes={len(result.archive)} "
        f"elapsed_sec={_format_seconds(elapsed_seconds)}"
    )


def render_fleet_preview(group_keys: list[str], limit: int = FLEET_PREVIEW_LIMIT) -> str:
    """Comma-separated first ``limit`` group keys, with a "+N more" tail."""
    shown = ", ".join(group_keys[:limit])
    rest = len(group_keys) - limit
    if rest > 0:
        return f"{shown} (+{rest} more)"
    return shown
