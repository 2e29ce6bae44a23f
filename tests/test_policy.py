from attendance_core.policy import (
    DEFAULT_OVERTIME_POLICY,
    FLEX_LENIENT,
    FLEX_STRICT,
    OvertimePolicy,
    normalize_policy,
    with_overrides,
)


def test_defaults():
    assert normalize_policy(None) == DEFAULT_OVERTIME_POLICY
    assert normalize_policy({}) == DEFAULT_OVERTIME_POLICY
    assert DEFAULT_OVERTIME_POLICY.rounding == "nearest15"
    assert DEFAULT_OVERTIME_POLICY.min_block_min == 30
    assert DEFAULT_OVERTIME_POLICY.meal_trigger_min == 300
    assert DEFAULT_OVERTIME_POLICY.meal_deduct_min == 60


def test_bad_rounding_falls_back():
    assert normalize_policy({"rounding": "nearest5"}).rounding == "nearest15"
    assert normalize_policy({"rounding": "nearest30"}).rounding == "nearest30"


def test_flex_mode():
    assert normalize_policy({"flexMode": "lenient"}).flex_mode == FLEX_LENIENT
    assert normalize_policy({"flexMode": "soft"}).flex_mode == FLEX_LENIENT
    assert normalize_policy({"flexMode": "other"}).flex_mode == FLEX_STRICT


def test_meal_rules():
    assert normalize_policy({"mealDeductMin": 0}).meal_deduct_min == 0
    assert normalize_policy({"mealTriggerMin": "abc"}).meal_trigger_min == 0
    assert normalize_policy({"mealTriggerMin": 240.4}).meal_trigger_min == 240


def test_numbers():
    assert normalize_policy({"minBlockMin": -5}).min_block_min == 30
    assert normalize_policy({"minBlockMin": 12.6}).min_block_min == 13
    assert normalize_policy({"graceAfterEndMin": "15"}).grace_after_end_min == 15
    assert normalize_policy({"graceAfterEndMin": True}).grace_after_end_min == 0


def test_snake_case_and_flags():
    p = normalize_policy({"count_pre_shift": 1, "night_diff_enabled": True, "min_block_min": 0})
    assert p.count_pre_shift is True
    assert p.night_diff_enabled is True
    assert p.min_block_min == 0


def test_to_dict_uses_wire_names():
    assert OvertimePolicy().to_dict()["minBlockMin"] == 30


def test_overrides():
    p = with_overrides(DEFAULT_OVERTIME_POLICY, rounding="none", min_block_min=None)
    assert p.rounding == "none"
    assert p.min_block_min == 30
    assert with_overrides(DEFAULT_OVERTIME_POLICY, rounding="bogus") is DEFAULT_OVERTIME_POLICY
