"""
Time handling: 24-hour HH:MM format, minute arithmetic, midnight crossover, punch tokens.
"""
import re
from typing import Optional

MINUTES_PER_DAY = 24 * 60

# Time format: HH:MM 24-hour, hour may be one digit
TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_TOKEN_STRIP_RE = re.compile(r"[^\d:]")
_BARE_DIGITS_RE = re.compile(r"^\d{3,4}$")


def parse_time(s: str) -> Optional[int]:
    """Parse HH:MM or H:MM to minutes since midnight. Returns None if invalid."""
    if not s or not isinstance(s, str):
        return None
    m = TIME_RE.match(s.strip())
    if not m:
        return None
    h, mn = int(m.group(1)), int(m.group(2))
    if h > 23 or mn > 59:
        return None
    return h * 60 + mn


def format_time(minutes: int) -> str:
    """Minutes since midnight to HH:MM 24-hour. Handles next-day (e.g. 24*60+30 -> 00:30)."""
    if minutes < 0:
        minutes = 0
    minutes = minutes % MINUTES_PER_DAY
    h, mn = divmod(minutes, 60)
    return f"{h:02d}:{mn:02d}"


def format_duration(minutes: int) -> str:
    """Minutes to H:MM (hours not wrapped)."""
    h, m = divmod(max(0, int(minutes)), 60)
    return f"{h}:{m:02d}"


def to_minutes(value: str) -> int:
    """
    Lenient HH:MM -> minute-of-day. Hours wrap mod 24 and minutes mod 60
    independently ("25:70" -> 70). Anything non-numeric counts as 0.
    """
    parts = str(value or "").split(":")
    hours = _int_or_zero(parts[0]) if parts else 0
    minutes = _int_or_zero(parts[1]) if len(parts) > 1 else 0
    return (hours % 24) * 60 + (minutes % 60)


def _int_or_zero(s: str) -> int:
    s = s.strip()
    try:
        return int(s)
    except ValueError:
        return 0


def normalize_punch_token(token: str) -> Optional[str]:
    """
    Normalize one biometric punch token to H:MM / HH:MM. Returns None if unusable.
    Non-digit, non-colon characters are stripped; bare "800" / "1730" become "08:00" / "17:30".
    """
    if not isinstance(token, str):
        return None
    s = _TOKEN_STRIP_RE.sub("", token)
    if not s:
        return None
    if _BARE_DIGITS_RE.match(s):
        s = s.zfill(4)
        s = f"{s[:2]}:{s[2:]}"
    if not TIME_RE.match(s):
        return None
    return s


def token_minutes(token: str) -> Optional[int]:
    """Punch token -> minutes (h*60+m, no range check). None if the token is unusable."""
    s = normalize_punch_token(token)
    if s is None:
        return None
    h, mn = s.split(":")
    return int(h) * 60 + int(mn)


def clock_minutes(token: str) -> Optional[int]:
    """Punch token -> minute of day, only for real clock times (00:00-23:59)."""
    s = normalize_punch_token(token)
    return parse_time(s) if s is not None else None
