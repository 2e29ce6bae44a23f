"""
Input records (biometric punches per employee per day) and the JSON run input loader.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

from .overtime import HOLIDAY, NONE, RESTDAY
from .policy import DEFAULT_OVERTIME_POLICY, OvertimePolicy, normalize_policy
from .schedules import DaySchedule, Schedule, schedule_from_dict

logger = logging.getLogger(__name__)


class RunInputError(ValueError):
    """Run input file that cannot be read or has the wrong shape."""


@dataclass
class RawPunch:
    """One date of punch tokens, as the spreadsheet parser delivers them."""
    date: str  # YYYY-MM-DD
    times: List[str] = field(default_factory=list)


# Matched employees carry the same {date, times} shape
DayPunches = RawPunch


@dataclass
class RawRecord:
    bio_user_id: str
    name: Optional[str] = None
    office_hint: Optional[str] = None
    punches: List[RawPunch] = field(default_factory=list)


@dataclass
class EmployeeMatch:
    employee_id: str
    bio_user_id: str
    office_id: Optional[str] = None
    days: List[DayPunches] = field(default_factory=list)


@dataclass
class RunInput:
    records: List[RawRecord]
    schedule: DaySchedule = field(default_factory=DaySchedule)
    overtime_schedule: Optional[Schedule] = None
    policy: OvertimePolicy = DEFAULT_OVERTIME_POLICY
    holidays: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    offices: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    month: str = ""

    def holiday_kind(self, date: str) -> str:
        return self.holidays.get(date, NONE)


def match_from_record(record: RawRecord, employee_id: Optional[str] = None) -> EmployeeMatch:
    """Wrap a raw record as a match; without a resolved id the bio id stands in."""
    return EmployeeMatch(
        employee_id=employee_id or record.bio_user_id,
        bio_user_id=record.bio_user_id,
        office_id=record.office_hint,
        days=list(record.punches),
    )


def _times(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return value.split()
    if not isinstance(value, (list, tuple)):
        raise RunInputError("punch 'times' must be a list or a space separated string")
    return [str(t) for t in value if t is not None]


def record_from_dict(d: Dict[str, Any]) -> RawRecord:
    if not isinstance(d, dict):
        raise RunInputError("each record must be an object")
    bio = d.get("bioUserId", d.get("bio_user_id"))
    if bio is None or str(bio).strip() == "":
        raise RunInputError("record is missing bioUserId")
    raw_punches = d.get("punches")
    if raw_punches is not None and not isinstance(raw_punches, list):
        raise RunInputError(f"record {bio}: 'punches' must be a list")
    punches = []
    for p in raw_punches or []:
        if not isinstance(p, dict) or not p.get("date"):
            logger.warning("Skipping punch entry without a date for %s", bio)
            continue
        punches.append(RawPunch(date=str(p["date"]), times=_times(p.get("times"))))
    return RawRecord(
        bio_user_id=str(bio).strip(),
        name=d.get("name"),
        office_hint=d.get("officeHint", d.get("office_hint")),
        punches=punches,
    )


def _holidays(raw: Any) -> Mapping[str, str]:
    if raw is not None and not isinstance(raw, dict):
        raise RunInputError("'holidays' must map YYYY-MM-DD to holiday or restday")
    out = {}
    for date, kind in (raw or {}).items():
        kind = str(kind).lower()
        if kind in (HOLIDAY, RESTDAY):
            out[str(date)] = kind
        else:
            logger.warning("Ignoring holiday kind %r for %s", kind, date)
    return MappingProxyType(out)


def run_input_from_dict(data: Dict[str, Any]) -> RunInput:
    """Build a RunInput from decoded JSON. Raises RunInputError on structural problems."""
    if not isinstance(data, dict):
        raise RunInputError("run input must be a JSON object")
    records_raw = data.get("records")
    if not isinstance(records_raw, list):
        raise RunInputError("run input needs a 'records' list")
    schedule_raw = data.get("schedule")
    if schedule_raw is not None and not isinstance(schedule_raw, dict):
        raise RunInputError("'schedule' must be an object with start, end and graceMin")
    ot_raw = data.get("overtimeSchedule", data.get("overtime_schedule"))
    offices = data.get("offices") or {}
    if not isinstance(offices, dict):
        raise RunInputError("'offices' must map office id to name")
    return RunInput(
        records=[record_from_dict(r) for r in records_raw],
        schedule=DaySchedule.from_dict(schedule_raw),
        overtime_schedule=schedule_from_dict(ot_raw) if ot_raw else None,
        policy=normalize_policy(data.get("policy")),
        holidays=_holidays(data.get("holidays")),
        offices=MappingProxyType({str(k): str(v) for k, v in offices.items()}),
        month=str(data.get("month") or ""),
    )


def load_run_input(path: Path) -> RunInput:
    """Read a run input JSON file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise RunInputError(f"cannot read run input {path}: {e}") from e
    return run_input_from_dict(data)
