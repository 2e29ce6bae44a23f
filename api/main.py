"""
FastAPI backend for the attendance / overtime engine.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Literal, Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from attendance_core.api_data import attendance_to_dict, build_api_response
from attendance_core.daily import aggregate_employee, resolve_presence
from attendance_core.intervals import MinuteInterval
from attendance_core.outputs import totals_for
from attendance_core.overtime import NONE, compute_overtime_for_day
from attendance_core.policy import normalize_policy
from attendance_core.records import RunInputError, run_input_from_dict, EmployeeMatch, RawPunch
from attendance_core.run import evaluate
from attendance_core.schedules import DaySchedule, ScheduleError, schedule_from_dict, schedule_to_dict

logger = logging.getLogger(__name__)

app = FastAPI(title="Attendance Core", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class DayPunchesIn(BaseModel):
    date: str
    times: List[str] = Field(default_factory=list)


class DayScheduleIn(BaseModel):
    start: str = "08:00"
    end: str = "17:00"
    graceMin: int = 0


class EmployeeDaysIn(BaseModel):
    employeeId: str
    bioUserId: str = ""
    officeId: Optional[str] = None
    days: List[DayPunchesIn] = Field(default_factory=list)


class EvaluateRequest(BaseModel):
    schedule: DayScheduleIn = Field(default_factory=DayScheduleIn)
    employees: List[EmployeeDaysIn]


class FixedIn(BaseModel):
    type: Literal["FIXED"]
    startTime: str
    endTime: str


class FlexIn(BaseModel):
    type: Literal["FLEX"]
    bandwidthStart: str
    bandwidthEnd: str
    requiredDailyMinutes: int


class ShiftIn(BaseModel):
    type: Literal["SHIFT"]
    shiftStart: str
    shiftEnd: str


class IntervalIn(BaseModel):
    start: int
    end: int


class OvertimeDayRequest(BaseModel):
    schedule: Union[FixedIn, FlexIn, ShiftIn] = Field(discriminator="type")
    presence: Optional[List[IntervalIn]] = None
    times: Optional[List[str]] = None
    policy: Optional[Dict[str, Any]] = None
    holiday: Literal["none", "restday", "holiday"] = NONE


@app.get("/api/health")
def health():
    return {"status": "ok"}


@app.post("/api/attendance/evaluate")
def evaluate_attendance(req: EvaluateRequest):
    """Tardy / undertime detail and summary per employee."""
    schedule = DaySchedule(start=req.schedule.start, end=req.schedule.end, grace_min=req.schedule.graceMin)
    out = []
    for emp in req.employees:
        match = EmployeeMatch(
            employee_id=emp.employeeId,
            bio_user_id=emp.bioUserId or emp.employeeId,
            office_id=emp.officeId,
            days=[RawPunch(date=d.date, times=list(d.times)) for d in emp.days],
        )
        out.append(attendance_to_dict(aggregate_employee(match, schedule)))
    return {"employees": out}


@app.post("/api/overtime/day")
def overtime_day(req: OvertimeDayRequest):
    """Overtime for one employee-day. Presence intervals win over raw punch times."""
    try:
        schedule = schedule_from_dict(req.schedule.model_dump())
    except ScheduleError as e:
        raise HTTPException(400, str(e))
    if req.presence is not None:
        presence = [MinuteInterval(iv.start, iv.end) for iv in req.presence]
    else:
        presence = resolve_presence(req.times or [])
    result = compute_overtime_for_day(schedule, presence, normalize_policy(req.policy), req.holiday)
    return {
        "schedule": schedule_to_dict(schedule),
        "presence": [{"start": iv.start, "end": iv.end} for iv in presence],
        "overtime": result.to_dict(),
    }


@app.post("/api/process")
def process(payload: Dict[str, Any]):
    """Full run: same JSON shape as the CLI input file."""
    try:
        run_input = run_input_from_dict(payload)
    except (RunInputError, ScheduleError) as e:
        raise HTTPException(400, str(e))
    reports = evaluate(run_input)
    logger.info("Processed %d records", len(run_input.records))
    return build_api_response(reports, totals_for(reports), run_input.month)
