from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from fleet_split.archive.builder import sanitize_filename
from fleet_split.config.loader import ConfigError, SplitConfig, load_config, resolve_config_path
from fleet_split.errors import SplitError
from fleet_split.logging.error_log import ErrorLogBuffer, ErrorRecord
from fleet_split.logging.init import enable_debug, log_summary, setup_logging
from fleet_split.services.orchestrator import SplitPipeline
from fleet_split.services.progress import ProgressTracker
from fleet_split.services.summary import render_fleet_preview, render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then config (YAML)
- Read the report file, ask for the Hub/Sub-hub label when not given
- Run the split pipeline with a tqdm progress bar
- Write <label>.zip, print fleet list and SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_PIPELINE_FAILURE = 2

SUPPORTED_SUFFIXES = (".xlsx",)
LABEL_PROMPT = "Please enter the Hub/Sub-hub: "


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv (FLEET_SPLIT_CONFIG 等)."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="fleet-split",
        description="Split a route dispatch report into one workbook per fleet (DELIVERED rows only)",
    )
    p.add_argument("input", type=Path, help="Route dispatch report (.xlsx)")
    p.add_argument("--label", help="Hub/Sub-hub name used as the archive name (prompted if omitted)")
    p.add_argument("--output-dir", type=Path, default=Path("."), help="Directory for the ZIP archive")
    p.add_argument("--config", type=Path, default=None, help="Config YAML (default: config/split.yml)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet header, sample rows and fleets then exit")
    return p.parse_args(argv)


def _ask_label() -> str:
    try:
        return input(LABEL_PROMPT)
    except EOFError:
        return ""


def _inspect_data(payload: bytes, cfg: SplitConfig) -> int:
    from fleet_split.excel.reader import ExcelTableReader
    from fleet_split.services.filtering import RowFilter
    from fleet_split.services.grouping import GroupPartitioner

    table = ExcelTableReader(group_column=cfg.group_column).read(payload)
    print(f"SHEET: {table.sheet_name} cols={table.columns}")
    print("  sample_rows=", table.rows[:3])
    matched = RowFilter(cfg.status_column, cfg.wanted_status).filter(table.rows)
    print(f"  rows={len(table.rows)} {cfg.wanted_status.lower()}={len(matched)}")
    groups = GroupPartitioner(cfg.group_column, cfg.undefined_key).partition(matched)
    for key, group in groups.items():
        print(f"  GROUP: {key} rows={len(group)}")
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None のときのみシステム引数を読む (テストで [] を渡すケース対策)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    if args.debug:
        enable_debug()
        logger.debug("debug mode enabled")

    config_path, required = resolve_config_path(args.config)
    try:
        cfg = load_config(config_path, required=required)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL
    logger.debug(f"config source: {cfg.source or 'built-in defaults'}")

    input_path: Path = args.input
    if not input_path.is_file():
        logger.error(f"input not found: {input_path}")
        return EXIT_FATAL
    if input_path.suffix.lower() not in SUPPORTED_SUFFIXES:
        logger.error("Please upload Excel file (.xlsx)")
        return EXIT_FATAL
    payload = input_path.read_bytes()

    if args.inspect_data:
        try:
            return _inspect_data(payload, cfg)
        except Exception as e:
            logger.error(f"inspect: {e}")
            return EXIT_PIPELINE_FAILURE

    label = args.label if args.label is not None else _ask_label()
    label = label.strip()
    if not sanitize_filename(label):
        logger.error("label: Hub/Sub-hub name is required")
        return EXIT_FATAL

    logger.info(f"Processing {input_path.name} for {label}")
    started = time.perf_counter()
    error_log = ErrorLogBuffer()
    with ProgressTracker() as progress:
        pipeline = SplitPipeline(cfg, on_progress=progress)
        try:
            result = pipeline.run(payload, label)
        except SplitError as e:
            stage = (pipeline.failed_stage or pipeline.state).value
            logger.error(f"processing failed: [{e.error_type}] {e.message}")
            error_log.append(ErrorRecord.create(input_path.name, label, stage, e.error_type, e.message))
            log_path = error_log.flush()
            if log_path is not None:
                logger.info(f"error log: {log_path}")
            return EXIT_PIPELINE_FAILURE
    elapsed = time.perf_counter() - started

    output_dir: Path = args.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)
    archive_path = output_dir / result.archive_name
    archive_path.write_bytes(result.archive)

    logger.info(f"{result.total_rows} {cfg.wanted_status} rows, {result.group_count} files -> {archive_path}")
    logger.info(f"fleets: {render_fleet_preview(result.group_keys)}")
    # log_summary で "SUMMARY " が付与されるため先頭を除去
    summary_line = render_summary_line(result, elapsed)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
