"""
Day evaluator: first-in / last-out, tardy and undertime minutes, missing punch flag.
Employee rollup over days. Presence pairing for the overtime path.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Iterable, List, Optional

from . import time_utils
from .intervals import MinuteInterval, merge_intervals
from .records import EmployeeMatch
from .schedules import DaySchedule

logger = logging.getLogger(__name__)

MISSING_PUNCH = "Missing punch"

# Candidate windows (inclusive). Noon belongs to both.
AM_START = 5 * 60
AM_END = 12 * 60
PM_START = 12 * 60
PM_END = 22 * 60


@dataclass
class DayResult:
    date: str
    first_in: Optional[str] = None   # HH:MM
    last_out: Optional[str] = None   # HH:MM
    tardy_min: int = 0
    under_min: int = 0
    exception: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "firstIn": self.first_in,
            "lastOut": self.last_out,
            "tardyMin": self.tardy_min,
            "underMin": self.under_min,
            "exception": self.exception,
        }


@dataclass
class EmployeeSummary:
    present: int = 0
    tardy_count: int = 0
    tardy_min: int = 0
    under_count: int = 0
    under_min: int = 0
    exceptions: int = 0

    def __add__(self, other: "EmployeeSummary") -> "EmployeeSummary":
        return EmployeeSummary(
            present=self.present + other.present,
            tardy_count=self.tardy_count + other.tardy_count,
            tardy_min=self.tardy_min + other.tardy_min,
            under_count=self.under_count + other.under_count,
            under_min=self.under_min + other.under_min,
            exceptions=self.exceptions + other.exceptions,
        )

    def to_dict(self) -> dict:
        d = asdict(self)
        return {
            "present": d["present"],
            "tardyCount": d["tardy_count"],
            "tardyMin": d["tardy_min"],
            "underCount": d["under_count"],
            "underMin": d["under_min"],
            "exceptions": d["exceptions"],
        }


@dataclass
class EmployeeAttendance:
    employee_id: str
    detail: List[DayResult] = field(default_factory=list)
    summary: EmployeeSummary = field(default_factory=EmployeeSummary)


def punch_minutes(times: Iterable[str]) -> List[int]:
    """Usable punch tokens as minutes, in input order. Bad tokens are dropped."""
    out = []
    for t in times:
        m = time_utils.token_minutes(t)
        if m is None:
            logger.debug("Dropping unparseable punch token %r", t)
            continue
        out.append(m)
    return out


def compute_day(times: Iterable[str], schedule: DaySchedule, date: str = "") -> DayResult:
    """Evaluate one day of raw punch tokens against a flat start/end/grace schedule."""
    minutes = punch_minutes(times)
    am = sorted(m for m in minutes if AM_START <= m <= AM_END)
    pm = sorted(m for m in minutes if PM_START <= m <= PM_END)

    first = am[0] if am else None
    last = pm[-1] if pm else None

    start = time_utils.to_minutes(schedule.start)
    end = time_utils.to_minutes(schedule.end)

    tardy = max(0, first - start - schedule.grace_min) if first is not None else 0
    under = max(0, end - last) if last is not None else 0

    return DayResult(
        date=date,
        first_in=time_utils.format_time(first) if first is not None else None,
        last_out=time_utils.format_time(last) if last is not None else None,
        tardy_min=tardy,
        under_min=under,
        exception=MISSING_PUNCH if first is None or last is None else None,
    )


def summarize_days(detail: Iterable[DayResult]) -> EmployeeSummary:
    summary = EmployeeSummary()
    for d in detail:
        summary = summary + EmployeeSummary(
            present=1 if (d.first_in or d.last_out) else 0,
            tardy_count=1 if d.tardy_min > 0 else 0,
            tardy_min=d.tardy_min,
            under_count=1 if d.under_min > 0 else 0,
            under_min=d.under_min,
            exceptions=1 if d.exception else 0,
        )
    return summary


def aggregate_employee(match: EmployeeMatch, schedule: DaySchedule) -> EmployeeAttendance:
    """Per-day results plus summary counters. Days are independent."""
    detail = [compute_day(day.times, schedule, date=day.date) for day in match.days]
    return EmployeeAttendance(
        employee_id=match.employee_id,
        detail=detail,
        summary=summarize_days(detail),
    )


def resolve_presence(times: Iterable[str]) -> List[MinuteInterval]:
    """
    Pair punches into presence intervals. Device order is kept; a punch that
    goes backwards in clock time is taken as the next day. Trailing odd punch dropped.
    """
    chronological = []
    offset = 0
    for t in times:
        m = time_utils.clock_minutes(t)
        if m is None:
            logger.debug("Dropping punch token %r: not a clock time", t)
            continue
        value = m + offset
        if chronological and value < chronological[-1]:
            offset += time_utils.MINUTES_PER_DAY
            value = m + offset
        if chronological and value == chronological[-1]:
            continue
        chronological.append(value)

    pairs = []
    for i in range(0, len(chronological) - 1, 2):
        pairs.append(MinuteInterval(chronological[i], chronological[i + 1]))
    return merge_intervals(pairs)
