"""
Report outputs: per-employee text, run summary, CSV day ledger, optional XLSX workbook.
"""
import csv
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .daily import DayResult, EmployeeSummary
from .overtime import OvertimeComputation, ZERO
from .time_utils import format_duration

LEDGER_HEADER = [
    "employee_id", "name", "office", "date", "holiday_kind",
    "first_in", "last_out", "tardy_min", "under_min", "exception",
    "presence_min", "ot_pre", "ot_post", "ot_restday", "ot_holiday", "ot_total", "nd_minutes",
]


@dataclass
class DayRow:
    """One employee-day: tardiness result plus overtime."""
    employee_id: str
    name: str
    office: str
    day: DayResult
    holiday_kind: str = "none"
    presence_min: int = 0
    overtime: OvertimeComputation = ZERO

    def ledger_values(self) -> list:
        d, ot = self.day, self.overtime
        return [
            self.employee_id, self.name, self.office, d.date, self.holiday_kind,
            d.first_in or "", d.last_out or "", d.tardy_min, d.under_min, d.exception or "",
            self.presence_min, ot.ot_pre, ot.ot_post, ot.ot_restday, ot.ot_holiday, ot.ot_total, ot.nd_minutes,
        ]


@dataclass
class EmployeeReport:
    employee_id: str
    name: str
    office: str
    rows: List[DayRow] = field(default_factory=list)
    summary: EmployeeSummary = field(default_factory=EmployeeSummary)

    @property
    def ot_total(self) -> int:
        return sum(r.overtime.ot_total for r in self.rows)

    @property
    def nd_minutes(self) -> int:
        return sum(r.overtime.nd_minutes for r in self.rows)


@dataclass
class RunTotals:
    employees: int = 0
    days: int = 0
    summary: EmployeeSummary = field(default_factory=EmployeeSummary)
    ot_total: int = 0
    nd_minutes: int = 0

    def to_dict(self) -> dict:
        d = {"employees": self.employees, "days": self.days}
        d.update(self.summary.to_dict())
        d["otTotal"] = self.ot_total
        d["ndMinutes"] = self.nd_minutes
        return d


def totals_for(reports: List[EmployeeReport]) -> RunTotals:
    totals = RunTotals(employees=len(reports))
    for r in reports:
        totals.days += len(r.rows)
        totals.summary = totals.summary + r.summary
        totals.ot_total += r.ot_total
        totals.nd_minutes += r.nd_minutes
    return totals


def format_employee_output(reports: List[EmployeeReport]) -> str:
    """Human-readable per-employee block with one line per day."""
    lines = []
    for rep in reports:
        label = f"{rep.name} ({rep.employee_id})" if rep.name else rep.employee_id
        lines.append(f"EMPLOYEE: {label}")
        if rep.office:
            lines.append(f"Office: {rep.office}")
        for row in rep.rows:
            d, ot = row.day, row.overtime
            parts = [
                f"  {d.date}",
                f"in {d.first_in or '--:--'}",
                f"out {d.last_out or '--:--'}",
                f"tardy {d.tardy_min}",
                f"under {d.under_min}",
            ]
            if ot.ot_total or ot.nd_minutes:
                parts.append(f"OT {format_duration(ot.ot_total)}")
                if ot.nd_minutes:
                    parts.append(f"ND {format_duration(ot.nd_minutes)}")
            if row.holiday_kind != "none":
                parts.append(f"[{row.holiday_kind}]")
            if d.exception:
                parts.append(f"({d.exception})")
            lines.append("  ".join(parts))
        s = rep.summary
        lines.append(
            f"Summary: present {s.present}, tardy {s.tardy_count}x/{s.tardy_min} min, "
            f"under {s.under_count}x/{s.under_min} min, exceptions {s.exceptions}, "
            f"OT {format_duration(rep.ot_total)}"
        )
        lines.append("")
    return "\n".join(lines).rstrip()


def format_run_summary(totals: RunTotals, month: str = "") -> str:
    s = totals.summary
    head = f"Month: {month}\n" if month else ""
    return (
        f"{head}"
        f"Employees: {totals.employees}\n"
        f"Employee-days: {totals.days}\n"
        f"Present days: {s.present}\n"
        f"Tardy: {s.tardy_count} days, {s.tardy_min} min\n"
        f"Undertime: {s.under_count} days, {s.under_min} min\n"
        f"Missing punch exceptions: {s.exceptions}\n"
        f"Overtime: {format_duration(totals.ot_total)} (night diff {format_duration(totals.nd_minutes)})"
    )


def write_day_ledger_csv(path: Path, reports: List[EmployeeReport]) -> None:
    """One CSV row per employee-day."""
    with open(path, "w", encoding="utf-8", newline="") as f:
        w = csv.writer(f)
        w.writerow(LEDGER_HEADER)
        for rep in reports:
            for row in rep.rows:
                w.writerow(row.ledger_values())


def write_workbook_xlsx(path: Path, reports: List[EmployeeReport], month: Optional[str] = None) -> None:
    """Workbook with a Summary sheet (one row per employee) and a Days sheet (the ledger)."""
    try:
        import openpyxl
    except ImportError:
        raise RuntimeError("openpyxl required for Excel output. pip install openpyxl")
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Summary"
    if month:
        ws.append(["Month", month])
    ws.append([
        "employee_id", "name", "office", "present", "tardy_count", "tardy_min",
        "under_count", "under_min", "exceptions", "ot_total", "nd_minutes",
    ])
    for rep in reports:
        s = rep.summary
        ws.append([
            rep.employee_id, rep.name, rep.office, s.present, s.tardy_count, s.tardy_min,
            s.under_count, s.under_min, s.exceptions, rep.ot_total, rep.nd_minutes,
        ])
    days = wb.create_sheet("Days")
    days.append(LEDGER_HEADER)
    for rep in reports:
        for row in rep.rows:
            days.append(row.ledger_values())
    wb.save(path)
    wb.close()
