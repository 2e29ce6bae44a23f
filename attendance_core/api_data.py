"""
Produce JSON-serializable structures for the web API.
Status classification for UI filtering.
"""
from typing import Any, Dict, List

from .daily import EmployeeAttendance
from .outputs import DayRow, EmployeeReport, RunTotals
from .time_utils import format_duration

# Day status names for UI
STATUS_OK = "ok"
STATUS_TARDY = "tardy"
STATUS_UNDERTIME = "undertime"
STATUS_EXCEPTION = "exception"
STATUS_ABSENT = "absent"


def day_status(row: DayRow) -> str:
    """One label per day; data-quality exceptions win over tardy/undertime."""
    d = row.day
    if not d.first_in and not d.last_out:
        return STATUS_ABSENT
    if d.exception:
        return STATUS_EXCEPTION
    if d.tardy_min > 0:
        return STATUS_TARDY
    if d.under_min > 0:
        return STATUS_UNDERTIME
    return STATUS_OK


def _row_to_dict(row: DayRow) -> Dict[str, Any]:
    out = row.day.to_dict()
    out["holidayKind"] = row.holiday_kind
    out["presenceMin"] = row.presence_min
    out["overtime"] = row.overtime.to_dict()
    out["otDisplay"] = format_duration(row.overtime.ot_total)
    out["status"] = day_status(row)
    return out


def attendance_to_dict(attendance: EmployeeAttendance) -> Dict[str, Any]:
    return {
        "employeeId": attendance.employee_id,
        "detail": [d.to_dict() for d in attendance.detail],
        "summary": attendance.summary.to_dict(),
    }


def build_api_response(reports: List[EmployeeReport], totals: RunTotals, month: str = "") -> Dict[str, Any]:
    """Build JSON-serializable response for a full run."""
    employees = []
    for rep in reports:
        summary = rep.summary.to_dict()
        summary["otTotal"] = rep.ot_total
        summary["ndMinutes"] = rep.nd_minutes
        employees.append({
            "employeeId": rep.employee_id,
            "name": rep.name,
            "office": rep.office,
            "summary": summary,
            "days": [_row_to_dict(r) for r in rep.rows],
        })
    return {
        "month": month,
        "summary": totals.to_dict(),
        "employees": employees,
    }
