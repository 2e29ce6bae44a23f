"""
Work schedule variants: FIXED, FLEX, SHIFT. Plus the flat start/end/grace
day schedule used for tardiness.

FIXED and SHIFT share their math but stay separate types.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Union

from .intervals import MinuteInterval
from .time_utils import MINUTES_PER_DAY, to_minutes

# Schedule type tags
FIXED = "FIXED"
FLEX = "FLEX"
SHIFT = "SHIFT"


class ScheduleError(ValueError):
    """Schedule payload with a missing or unknown type tag."""


@dataclass(frozen=True)
class FixedSchedule:
    start_time: str  # HH:MM
    end_time: str    # HH:MM; <= start_time means the day crosses midnight
    type: str = FIXED


@dataclass(frozen=True)
class FlexSchedule:
    bandwidth_start: str
    bandwidth_end: str
    required_daily_minutes: int
    type: str = FLEX


@dataclass(frozen=True)
class ShiftSchedule:
    shift_start: str
    shift_end: str
    type: str = SHIFT


Schedule = Union[FixedSchedule, FlexSchedule, ShiftSchedule]


@dataclass(frozen=True)
class DaySchedule:
    """Flat schedule for the tardiness path: start, end, grace minutes."""
    start: str = "08:00"
    end: str = "17:00"
    grace_min: int = 0

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "DaySchedule":
        d = d or {}
        grace = _get(d, "graceMin", "grace_min", default=0)
        try:
            grace = int(grace)
        except (TypeError, ValueError):
            grace = 0
        return cls(
            start=str(_get(d, "start", default="08:00")),
            end=str(_get(d, "end", default="17:00")),
            grace_min=grace,
        )


def _get(d: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def schedule_from_dict(d: Dict[str, Any]) -> Schedule:
    """Build the variant named by d["type"]. Raises ScheduleError for anything else."""
    if not isinstance(d, dict):
        raise ScheduleError("schedule must be an object")
    kind = str(d.get("type") or "").upper()
    if kind == FIXED:
        return FixedSchedule(
            start_time=str(_get(d, "startTime", "start_time", default="00:00")),
            end_time=str(_get(d, "endTime", "end_time", default="00:00")),
        )
    if kind == FLEX:
        required = _get(d, "requiredDailyMinutes", "required_daily_minutes", default=0)
        try:
            required = int(required)
        except (TypeError, ValueError):
            required = 0
        return FlexSchedule(
            bandwidth_start=str(_get(d, "bandwidthStart", "bandwidth_start", default="00:00")),
            bandwidth_end=str(_get(d, "bandwidthEnd", "bandwidth_end", default="00:00")),
            required_daily_minutes=required,
        )
    if kind == SHIFT:
        return ShiftSchedule(
            shift_start=str(_get(d, "shiftStart", "shift_start", default="00:00")),
            shift_end=str(_get(d, "shiftEnd", "shift_end", default="00:00")),
        )
    raise ScheduleError(f"unknown schedule type: {d.get('type')!r}")


def schedule_to_dict(schedule: Schedule) -> Dict[str, Any]:
    if isinstance(schedule, FixedSchedule):
        return {"type": FIXED, "startTime": schedule.start_time, "endTime": schedule.end_time}
    if isinstance(schedule, ShiftSchedule):
        return {"type": SHIFT, "shiftStart": schedule.shift_start, "shiftEnd": schedule.shift_end}
    return {
        "type": FLEX,
        "bandwidthStart": schedule.bandwidth_start,
        "bandwidthEnd": schedule.bandwidth_end,
        "requiredDailyMinutes": schedule.required_daily_minutes,
    }


def _extend_past_midnight(start: int, end: int) -> int:
    return end + MINUTES_PER_DAY if end <= start else end


def fixed_bounds(schedule: FixedSchedule) -> Tuple[int, int]:
    """(start, end) minutes; end pushed past 1440 for an overnight day."""
    start = to_minutes(schedule.start_time)
    return start, _extend_past_midnight(start, to_minutes(schedule.end_time))


def shift_bounds(schedule: ShiftSchedule) -> Tuple[int, int]:
    start = to_minutes(schedule.shift_start)
    return start, _extend_past_midnight(start, to_minutes(schedule.shift_end))


def bandwidth(schedule: FlexSchedule) -> MinuteInterval:
    start = to_minutes(schedule.bandwidth_start)
    return MinuteInterval(start, _extend_past_midnight(start, to_minutes(schedule.bandwidth_end)))


def pre_range(start: int) -> MinuteInterval:
    """Everything in the 24h before scheduled start."""
    return MinuteInterval(start - MINUTES_PER_DAY, start)


def post_range(start: int, end: int, grace_after_end_min: int = 0) -> MinuteInterval:
    """From grace-adjusted end up to the same clock time as start, next day."""
    return MinuteInterval(end + grace_after_end_min, start + MINUTES_PER_DAY)
