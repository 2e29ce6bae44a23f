"""
Overtime policy: rounding, minimum block, pre-shift, grace, flex mode, meal
deduction, night differential. normalize_policy turns loose config into a policy.
"""
import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

# Rounding modes
ROUND_NONE = "none"
ROUND_15 = "nearest15"
ROUND_30 = "nearest30"
ROUNDING_MODES = (ROUND_NONE, ROUND_15, ROUND_30)

# Flex modes
FLEX_STRICT = "strict"
FLEX_LENIENT = "lenient"
_LENIENT_ALIASES = {"lenient", "soft"}


@dataclass(frozen=True)
class OvertimePolicy:
    rounding: str = ROUND_15
    min_block_min: int = 30
    count_pre_shift: bool = False
    grace_after_end_min: int = 0
    flex_mode: str = FLEX_STRICT
    meal_trigger_min: int = 300
    meal_deduct_min: int = 60
    night_diff_enabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        return {
            "rounding": d["rounding"],
            "minBlockMin": d["min_block_min"],
            "countPreShift": d["count_pre_shift"],
            "graceAfterEndMin": d["grace_after_end_min"],
            "flexMode": d["flex_mode"],
            "mealTriggerMin": d["meal_trigger_min"],
            "mealDeductMin": d["meal_deduct_min"],
            "nightDiffEnabled": d["night_diff_enabled"],
        }


DEFAULT_OVERTIME_POLICY = OvertimePolicy()

_MISSING = object()


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or value is None:
        return None
    try:
        n = float(value)
    except (TypeError, ValueError):
        return None
    return n if math.isfinite(n) else None


def _non_negative(value: Any, default: int) -> int:
    n = _number(value)
    if n is None or n < 0:
        return default
    return int(round(n))


def _optional_rule(value: Any, default: int) -> int:
    """Missing -> default. Present but non-positive or junk -> 0 (rule disabled)."""
    if value is _MISSING:
        return default
    n = _number(value)
    if n is None or n <= 0:
        return 0
    return int(round(n))


def _flag(value: Any) -> bool:
    return value is not _MISSING and bool(value)


def _lookup(raw: Dict[str, Any], camel: str, snake: str) -> Any:
    if camel in raw:
        return raw[camel]
    if snake in raw:
        return raw[snake]
    return _MISSING


def normalize_policy(raw: Optional[Dict[str, Any]] = None) -> OvertimePolicy:
    """
    Build an OvertimePolicy from a loose dict (camelCase or snake_case keys).
    Unknown or malformed values fall back to defaults; never raises.
    """
    if not isinstance(raw, dict):
        return DEFAULT_OVERTIME_POLICY
    d = DEFAULT_OVERTIME_POLICY

    rounding = _lookup(raw, "rounding", "rounding")
    if rounding not in ROUNDING_MODES:
        rounding = d.rounding

    flex_raw = _lookup(raw, "flexMode", "flex_mode")
    flex_mode = FLEX_LENIENT if isinstance(flex_raw, str) and flex_raw.lower() in _LENIENT_ALIASES else FLEX_STRICT

    return OvertimePolicy(
        rounding=rounding,
        min_block_min=_non_negative(_lookup(raw, "minBlockMin", "min_block_min"), d.min_block_min),
        count_pre_shift=_flag(_lookup(raw, "countPreShift", "count_pre_shift")),
        grace_after_end_min=_non_negative(_lookup(raw, "graceAfterEndMin", "grace_after_end_min"),
                                          d.grace_after_end_min),
        flex_mode=flex_mode,
        meal_trigger_min=_optional_rule(_lookup(raw, "mealTriggerMin", "meal_trigger_min"), d.meal_trigger_min),
        meal_deduct_min=_optional_rule(_lookup(raw, "mealDeductMin", "meal_deduct_min"), d.meal_deduct_min),
        night_diff_enabled=_flag(_lookup(raw, "nightDiffEnabled", "night_diff_enabled")),
    )


def with_overrides(policy: OvertimePolicy, **overrides: Any) -> OvertimePolicy:
    """Copy of policy with non-None overrides applied (CLI flags)."""
    changes = {k: v for k, v in overrides.items() if v is not None}
    if "rounding" in changes and changes["rounding"] not in ROUNDING_MODES:
        del changes["rounding"]
    return replace(policy, **changes) if changes else policy
