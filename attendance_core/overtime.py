"""
Overtime and night differential for one employee-day.

Input is already-resolved presence (MinuteInterval list), a schedule variant,
an OvertimePolicy and the day's holiday kind. Buckets: pre-shift, post-shift,
general (flex), rest day, holiday. Never raises; empty presence gives zeros.
"""
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Tuple

from . import schedules
from .intervals import (
    MinuteInterval,
    clip_intervals,
    extend_for_reference,
    merge_intervals,
    minutes_in_night_window,
    sanitize_presence,
    subtract_intervals,
    sum_intervals,
    take_tail,
)
from .policy import FLEX_STRICT, ROUND_15, ROUND_NONE, OvertimePolicy

logger = logging.getLogger(__name__)

# Holiday kinds
NONE = "none"
RESTDAY = "restday"
HOLIDAY = "holiday"

Segments = List[MinuteInterval]


@dataclass(frozen=True)
class OvertimeComputation:
    """
    Minutes per bucket. ot_total is the rounded, thresholded, meal-adjusted sum;
    ot_pre/ot_post keep their values from before the meal deduction.
    """
    ot_pre: int = 0
    ot_post: int = 0
    ot_restday: int = 0
    ot_holiday: int = 0
    ot_total: int = 0
    nd_minutes: int = 0

    def to_dict(self) -> dict:
        return {
            "OT_pre": self.ot_pre,
            "OT_post": self.ot_post,
            "OT_restday": self.ot_restday,
            "OT_holiday": self.ot_holiday,
            "OT_total": self.ot_total,
            "ND_minutes": self.nd_minutes,
        }


ZERO = OvertimeComputation()


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def round_minutes(minutes: float, mode: str) -> int:
    """Round to a whole minute for "none", 15 for nearest15, otherwise 30. Floors at 0."""
    if minutes is None or not math.isfinite(minutes):
        return 0
    if mode == ROUND_NONE:
        return max(0, _round_half_up(minutes))
    step = 15 if mode == ROUND_15 else 30
    return max(0, _round_half_up(minutes / step) * step)


def apply_min_block(minutes: float, min_block: float) -> float:
    """All or nothing: below min_block counts as 0. min_block <= 0 disables the gate."""
    if min_block <= 0:
        return max(0, minutes)
    return max(0, minutes) if minutes >= min_block else 0


def _finish_bucket(minutes: int, segments: Segments, policy: OvertimePolicy) -> Tuple[int, Segments]:
    """Threshold then round. A zeroed bucket keeps no segments."""
    rounded = round_minutes(apply_min_block(minutes, policy.min_block_min), policy.rounding)
    return rounded, (segments if rounded > 0 else [])


def compute_rest_or_holiday(presence: Segments, policy: OvertimePolicy, kind: str) -> OvertimeComputation:
    """All presence is overtime on a rest day or holiday; schedule shape is ignored."""
    rounded = round_minutes(apply_min_block(sum_intervals(presence), policy.min_block_min), policy.rounding)
    if rounded <= 0:
        return ZERO
    nd = minutes_in_night_window(presence) if policy.night_diff_enabled else 0
    if kind == HOLIDAY:
        return OvertimeComputation(ot_holiday=rounded, ot_total=rounded, nd_minutes=nd)
    return OvertimeComputation(ot_restday=rounded, ot_total=rounded, nd_minutes=nd)


def compute_flex_overtime(
    schedule: schedules.FlexSchedule,
    presence: Segments,
    policy: OvertimePolicy,
) -> Tuple[int, Segments]:
    """
    Strict: only presence outside the bandwidth.
    Lenient: also the latest in-band minutes once total presence passes the
    required daily minutes and the out-of-band time is used up.
    """
    if not presence:
        return 0, []
    band = schedules.bandwidth(schedule)
    extended = extend_for_reference(presence, band.start)
    in_band = merge_intervals(clip_intervals(extended, band))
    out_band = subtract_intervals(extended, [band])
    out_minutes = sum_intervals(out_band)

    if policy.flex_mode == FLEX_STRICT:
        return out_minutes, out_band

    overflow = max(0, sum_intervals(extended) - schedule.required_daily_minutes)
    extra_inside = max(0, overflow - out_minutes)
    if extra_inside <= 0:
        return out_minutes, out_band

    segments = merge_intervals(out_band + take_tail(in_band, extra_inside))
    return sum_intervals(segments), segments


def compute_fixed_overtime(
    bounds: Tuple[int, int],
    presence: Segments,
    policy: OvertimePolicy,
) -> Tuple[Tuple[int, Segments], Tuple[int, Segments]]:
    """((pre_minutes, pre_segments), (post_minutes, post_segments)) for a start/end day."""
    if not presence:
        return (0, []), (0, [])
    start, end = bounds
    extended = extend_for_reference(presence, start)
    pre = []
    if policy.count_pre_shift:
        pre = merge_intervals(clip_intervals(extended, schedules.pre_range(start)))
    post = merge_intervals(clip_intervals(extended, schedules.post_range(start, end, policy.grace_after_end_min)))
    return (sum_intervals(pre), pre), (sum_intervals(post), post)


def _meal_adjusted(total: int, policy: OvertimePolicy) -> int:
    if policy.meal_deduct_min > 0 and policy.meal_trigger_min > 0 and total >= policy.meal_trigger_min:
        return max(0, total - policy.meal_deduct_min)
    return total


def compute_overtime_for_day(
    schedule: schedules.Schedule,
    presence: Iterable[MinuteInterval],
    policy: OvertimePolicy,
    holiday: str = NONE,
) -> OvertimeComputation:
    """Overtime buckets and night differential minutes for one employee-day."""
    cleaned = sanitize_presence(presence)
    if not cleaned:
        return ZERO

    if holiday in (HOLIDAY, RESTDAY):
        return compute_rest_or_holiday(cleaned, policy, holiday)

    pre_min = post_min = general_min = 0
    pre_segs: Segments = []
    post_segs: Segments = []
    general_segs: Segments = []

    if isinstance(schedule, schedules.FlexSchedule):
        general_min, general_segs = compute_flex_overtime(schedule, cleaned, policy)
    elif isinstance(schedule, schedules.FixedSchedule):
        (pre_min, pre_segs), (post_min, post_segs) = compute_fixed_overtime(
            schedules.fixed_bounds(schedule), cleaned, policy)
    elif isinstance(schedule, schedules.ShiftSchedule):
        (pre_min, pre_segs), (post_min, post_segs) = compute_fixed_overtime(
            schedules.shift_bounds(schedule), cleaned, policy)
    else:
        logger.warning("No overtime rules for schedule %r", schedule)

    pre_rounded, pre_segs = _finish_bucket(pre_min, pre_segs, policy)
    post_rounded, post_segs = _finish_bucket(post_min, post_segs, policy)
    general_rounded, general_segs = _finish_bucket(general_min, general_segs, policy)

    total = _meal_adjusted(pre_rounded + post_rounded + general_rounded, policy)
    nd = 0
    if policy.night_diff_enabled:
        nd = minutes_in_night_window(merge_intervals(pre_segs + post_segs + general_segs))

    return OvertimeComputation(
        ot_pre=pre_rounded,
        ot_post=post_rounded,
        ot_total=total,
        nd_minutes=nd,
    )
