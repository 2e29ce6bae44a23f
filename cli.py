#!/usr/bin/env python3
"""
Attendance Core CLI: evaluate a month of biometric punches for tardiness,
undertime, overtime and night differential.
"""
import argparse
import logging
import sys
from pathlib import Path

from attendance_core.policy import ROUNDING_MODES
from attendance_core.run import run


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Attendance Core: tardy/undertime and overtime report from biometric punches.",
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Run input JSON (records, schedule, optional overtimeSchedule/policy/holidays)",
    )
    parser.add_argument(
        "--out-dir",
        type=Path,
        default=None,
        help="Output directory for day_ledger.csv (and attendance.xlsx with --xlsx)",
    )
    parser.add_argument(
        "--xlsx",
        action="store_true",
        help="Also write an Excel workbook to --out-dir",
    )
    parser.add_argument(
        "--rounding",
        choices=ROUNDING_MODES,
        default=None,
        help="Override overtime rounding",
    )
    parser.add_argument(
        "--min-block",
        type=int,
        default=None,
        help="Override minimum overtime block (minutes)",
    )
    parser.add_argument(
        "--night-diff",
        action="store_true",
        default=None,
        help="Compute night differential minutes",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Debug logging (dropped punches, intervals)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.input.exists():
        print(f"Error: input file not found: {args.input}", file=sys.stderr)
        return 1
    if args.xlsx and not args.out_dir:
        print("Error: --xlsx needs --out-dir", file=sys.stderr)
        return 1

    try:
        result = run(
            input_path=args.input,
            out_dir=args.out_dir,
            xlsx=args.xlsx,
            rounding=args.rounding,
            min_block_min=args.min_block,
            night_diff_enabled=args.night_diff,
        )
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(result.summary_text)
    print()
    if result.employee_output_text:
        print("--- EMPLOYEES ---")
        print(result.employee_output_text)
    else:
        print("--- EMPLOYEES: none ---")

    if result.ledger_path:
        print()
        print(f"Day ledger: {result.ledger_path}")
    if result.workbook_path:
        print(f"Workbook: {result.workbook_path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
