"""
Orchestrate: load run input, evaluate every employee-day, compute overtime, write outputs.
"""
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import List, Optional

from .daily import aggregate_employee, resolve_presence
from .intervals import sum_intervals
from .outputs import (
    DayRow,
    EmployeeReport,
    RunTotals,
    format_employee_output,
    format_run_summary,
    totals_for,
    write_day_ledger_csv,
    write_workbook_xlsx,
)
from .overtime import ZERO, compute_overtime_for_day
from .policy import with_overrides
from .records import RunInput, load_run_input, match_from_record

logger = logging.getLogger(__name__)


@dataclass
class RunResult:
    reports: List[EmployeeReport]
    totals: RunTotals
    employee_output_text: str
    summary_text: str
    ledger_path: Optional[Path] = None
    workbook_path: Optional[Path] = None


def evaluate(run_input: RunInput) -> List[EmployeeReport]:
    """Per-employee reports. Overtime is computed only when an overtime schedule is configured."""
    reports = []
    for record in run_input.records:
        if not record.punches:
            logger.warning("No punches for bio user %s", record.bio_user_id)
        match = match_from_record(record)
        attendance = aggregate_employee(match, run_input.schedule)
        office = ""
        if record.office_hint:
            office = run_input.offices.get(record.office_hint, record.office_hint)

        rows = []
        for punch, day in zip(match.days, attendance.detail):
            presence = resolve_presence(punch.times)
            kind = run_input.holiday_kind(punch.date)
            overtime = ZERO
            if run_input.overtime_schedule is not None:
                overtime = compute_overtime_for_day(
                    run_input.overtime_schedule, presence, run_input.policy, kind)
            rows.append(DayRow(
                employee_id=attendance.employee_id,
                name=record.name or "",
                office=office,
                day=day,
                holiday_kind=kind,
                presence_min=sum_intervals(presence),
                overtime=overtime,
            ))
        reports.append(EmployeeReport(
            employee_id=attendance.employee_id,
            name=record.name or "",
            office=office,
            rows=rows,
            summary=attendance.summary,
        ))
    return reports


def run(
    input_path: Path,
    out_dir: Optional[Path] = None,
    xlsx: bool = False,
    rounding: Optional[str] = None,
    min_block_min: Optional[int] = None,
    night_diff_enabled: Optional[bool] = None,
) -> RunResult:
    """
    Load the run input, evaluate, and write day_ledger.csv (and attendance.xlsx
    when xlsx) to out_dir if set. Policy arguments override the input's policy.
    """
    run_input = load_run_input(input_path)
    policy = with_overrides(
        run_input.policy,
        rounding=rounding,
        min_block_min=min_block_min,
        night_diff_enabled=night_diff_enabled,
    )
    if policy is not run_input.policy:
        run_input = replace(run_input, policy=policy)

    reports = evaluate(run_input)
    totals = totals_for(reports)
    logger.info("Evaluated %d employees, %d employee-days", totals.employees, totals.days)

    ledger_path = workbook_path = None
    if out_dir:
        out_dir = Path(out_dir)
        out_dir.mkdir(parents=True, exist_ok=True)
        ledger_path = out_dir / "day_ledger.csv"
        write_day_ledger_csv(ledger_path, reports)
        if xlsx:
            workbook_path = out_dir / "attendance.xlsx"
            write_workbook_xlsx(workbook_path, reports, run_input.month)

    return RunResult(
        reports=reports,
        totals=totals,
        employee_output_text=format_employee_output(reports),
        summary_text=format_run_summary(totals, run_input.month),
        ledger_path=ledger_path,
        workbook_path=workbook_path,
    )
