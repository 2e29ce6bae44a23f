import math

from attendance_core.intervals import MinuteInterval as I
from attendance_core.overtime import (
    HOLIDAY,
    RESTDAY,
    ZERO,
    apply_min_block,
    compute_overtime_for_day,
    round_minutes,
)
from attendance_core.policy import OvertimePolicy
from attendance_core.schedules import FixedSchedule, FlexSchedule, ShiftSchedule

DAY = FixedSchedule("08:00", "17:00")
NIGHT = FixedSchedule("22:00", "06:00")


def plain(**kw):
    """No rounding, no minimum block, no meal rule."""
    base = dict(rounding="none", min_block_min=0, meal_trigger_min=0, meal_deduct_min=0)
    base.update(kw)
    return OvertimePolicy(**base)


def test_round_minutes():
    assert round_minutes(22, "nearest15") == 15
    assert round_minutes(7.5, "nearest15") == 15
    assert round_minutes(7.4, "nearest15") == 0
    assert round_minutes(22.5, "nearest15") == 30
    assert round_minutes(44, "nearest30") == 30
    assert round_minutes(45, "nearest30") == 60
    assert round_minutes(10.5, "none") == 11
    assert round_minutes(-20, "none") == 0
    assert round_minutes(math.nan, "nearest15") == 0
    assert round_minutes(44, "nearest5") == 30
    assert round_minutes(46, "") == 60


def test_apply_min_block():
    assert apply_min_block(29, 30) == 0
    assert apply_min_block(30, 30) == 30
    assert apply_min_block(5, 0) == 5
    assert apply_min_block(-3, 0) == 0


def test_empty_or_inverted_presence_is_zero():
    assert compute_overtime_for_day(DAY, [], plain()) == ZERO
    assert compute_overtime_for_day(DAY, [I(100, 50)], plain()) == ZERO


def test_holiday_routes_everything_to_holiday_bucket():
    for schedule in (DAY, NIGHT, ShiftSchedule("08:00", "17:00"), FlexSchedule("07:00", "19:00", 480)):
        ot = compute_overtime_for_day(schedule, [I(480, 1020)], plain(), HOLIDAY)
        assert (ot.ot_pre, ot.ot_post, ot.ot_restday) == (0, 0, 0)
        assert ot.ot_holiday == ot.ot_total == 540


def test_restday_bucket_and_min_block_gate():
    ot = compute_overtime_for_day(DAY, [I(480, 1020)], plain(), RESTDAY)
    assert ot.ot_restday == ot.ot_total == 540
    assert ot.ot_holiday == 0
    assert compute_overtime_for_day(DAY, [I(480, 1020)], plain(min_block_min=600), RESTDAY) == ZERO


def test_holiday_night_diff_over_raw_presence():
    ot = compute_overtime_for_day(DAY, [I(1260, 1500)], plain(night_diff_enabled=True), HOLIDAY)
    assert ot.ot_holiday == 240
    assert ot.nd_minutes == 180


def test_fixed_post_shift():
    ot = compute_overtime_for_day(DAY, [I(480, 1140)], plain())
    assert (ot.ot_pre, ot.ot_post, ot.ot_total) == (0, 120, 120)


def test_pre_shift_only_when_counted():
    presence = [I(420, 1020)]
    assert compute_overtime_for_day(DAY, presence, plain(count_pre_shift=True)).ot_pre == 60
    assert compute_overtime_for_day(DAY, presence, plain()).ot_pre == 0


def test_grace_after_end():
    presence = [I(480, 1050)]
    assert compute_overtime_for_day(DAY, presence, plain(grace_after_end_min=30)).ot_post == 0
    assert compute_overtime_for_day(DAY, presence, plain()).ot_post == 30


def test_min_block_is_all_or_nothing():
    ot = compute_overtime_for_day(DAY, [I(480, 1040)], plain(min_block_min=30))
    assert ot == ZERO


def test_post_rounding():
    ot = compute_overtime_for_day(DAY, [I(480, 1042)], plain(rounding="nearest15"))
    assert ot.ot_post == 15


def test_overnight_fixed_pre_shift_kept():
    ot = compute_overtime_for_day(NIGHT, [I(1260, 1320)], plain(count_pre_shift=True))
    assert ot.ot_pre == 60
    assert ot.ot_total == 60


def test_overnight_fixed_first_hour_is_in_shift():
    # 22:00-23:00 against a 22:00 start is regular time
    assert compute_overtime_for_day(NIGHT, [I(1320, 1380)], plain(count_pre_shift=True)) == ZERO


def test_overnight_post_shift_after_midnight():
    presence = [I(1320, 1440), I(0, 450)]
    ot = compute_overtime_for_day(NIGHT, presence, plain())
    assert ot.ot_post == 90


def test_shift_matches_fixed_math():
    presence = [I(1320, 1440), I(0, 450)]
    policy = plain(count_pre_shift=True, night_diff_enabled=True)
    assert compute_overtime_for_day(ShiftSchedule("22:00", "06:00"), presence, policy) == \
        compute_overtime_for_day(NIGHT, presence, policy)


def test_meal_deduction_only_touches_total():
    policy = plain(count_pre_shift=True, meal_trigger_min=120, meal_deduct_min=60)
    ot = compute_overtime_for_day(DAY, [I(420, 1090)], policy)
    assert (ot.ot_pre, ot.ot_post) == (60, 70)
    assert ot.ot_total == 70
    assert ot.ot_pre + ot.ot_post != ot.ot_total


def test_meal_below_trigger_or_disabled():
    policy = plain(count_pre_shift=True, meal_trigger_min=120, meal_deduct_min=60)
    assert compute_overtime_for_day(DAY, [I(420, 1070)], policy).ot_total == 110
    disabled = plain(count_pre_shift=True, meal_trigger_min=0, meal_deduct_min=60)
    assert compute_overtime_for_day(DAY, [I(420, 1090)], disabled).ot_total == 130


def test_night_diff_on_post_shift():
    ot = compute_overtime_for_day(DAY, [I(480, 1410)], plain(night_diff_enabled=True))
    assert ot.ot_post == 390
    assert ot.nd_minutes == 90


def test_night_diff_zero_when_bucket_zeroed():
    evening = FixedSchedule("14:00", "22:00")
    ot = compute_overtime_for_day(evening, [I(840, 1340)], plain(min_block_min=30, night_diff_enabled=True))
    assert ot == ZERO


def test_flex_strict_counts_out_of_band_only():
    flex = FlexSchedule("07:00", "19:00", 480)
    ot = compute_overtime_for_day(flex, [I(360, 1200)], plain())
    assert ot.ot_total == 120
    assert (ot.ot_pre, ot.ot_post) == (0, 0)
    assert compute_overtime_for_day(flex, [I(420, 1080)], plain()) == ZERO


def test_flex_lenient_credits_latest_in_band_minutes():
    flex = FlexSchedule("07:00", "19:00", 480)
    assert compute_overtime_for_day(flex, [I(420, 1080)], plain(flex_mode="lenient")).ot_total == 180
    assert compute_overtime_for_day(flex, [I(420, 1200)], plain(flex_mode="lenient")).ot_total == 300


def test_flex_lenient_tail_feeds_night_diff():
    # 13:00-23:00 in a 06:00-23:00 band, 480 required: the last 120 minutes are overtime
    flex = FlexSchedule("06:00", "23:00", 480)
    ot = compute_overtime_for_day(flex, [I(780, 1380)], plain(flex_mode="lenient", night_diff_enabled=True))
    assert ot.ot_total == 120
    assert ot.nd_minutes == 60


def test_flex_overnight_bandwidth():
    flex = FlexSchedule("20:00", "08:00", 480)
    ot = compute_overtime_for_day(flex, [I(1200, 1440), I(0, 600)], plain())
    assert ot.ot_total == 120


def test_unknown_holiday_kind_is_a_normal_day():
    assert compute_overtime_for_day(DAY, [I(480, 1140)], plain(), "festival").ot_post == 120
