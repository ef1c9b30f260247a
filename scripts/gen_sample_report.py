#!/usr/bin/env python3
"""Sample dispatch report generator.

Generates a synthetic Route Dispatch Report (.xlsx) for manual runs and rough
performance checks of ``fleet-split``. Layout:
- Row 1: Header row (FleeName, FinalStatus, ..., sync time, planDeliveryDate)
- Row 2+: Data rows (mixed statuses, a few blank / padded fleet names)
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

STATUSES = ["DELIVERED", "Delivered", "IN_TRANSIT", "FAILED", "RETURNED"]


def generate_report(rows: int, fleets: int, seed: int = 42) -> pd.DataFrame:
    """Generate a DataFrame shaped like a dispatch report.

    Args:
        rows: Number of data rows
        fleets: Number of distinct fleet names
        seed: Random seed for reproducible data
    """
    rng = np.random.default_rng(seed)
    fleet_names = [f"Fleet_{i:03d}" for i in range(1, fleets + 1)]
    # 空白付き / 空欄 / 禁止文字入りの名前も混ぜる
    fleet_names += [" Fleet_001 ", "", "North/East"]

    plan_dates = pd.date_range("2024-01-01", "2024-12-31", periods=60)
    sync_times = pd.date_range("2024-01-01 06:00", "2024-12-31 22:00", periods=500)

    return pd.DataFrame(
        {
            "WaybillNo": [f"WB{n:08d}" for n in range(1, rows + 1)],
            "FleeName": rng.choice(fleet_names, rows).tolist(),
            "FinalStatus": rng.choice(STATUSES, rows, p=[0.5, 0.1, 0.2, 0.1, 0.1]).tolist(),
            "Pieces": rng.integers(1, 20, rows).tolist(),
            "Weight": np.round(rng.uniform(0.1, 30.0, rows), 2).tolist(),
            "sync time": rng.choice(sync_times, rows).tolist(),
            "planDeliveryDate": rng.choice(plan_dates, rows).tolist(),
        }
    )


def main() -> int:
    parser = argparse.ArgumentParser(description="Generate a synthetic route dispatch report")
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--rows", type=int, default=5_000, help="Number of data rows (default: 5,000)")
    parser.add_argument("--fleets", type=int, default=25, help="Number of fleets (default: 25)")
    parser.add_argument("--sheet", default="Route Dispatch", help="Sheet name")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0 or args.fleets <= 0:
        print("Error: --rows and --fleets must be positive", file=sys.stderr)
        return 1

    df = generate_report(args.rows, args.fleets, args.seed)
    args.output.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(args.output, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=args.sheet, index=False)

    print(f"Created report: {args.output}")
    print(f"  Rows: {args.rows:,}  Fleets: {args.fleets} (+3 irregular names)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
