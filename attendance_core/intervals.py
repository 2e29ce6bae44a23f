"""
Minute-interval set algebra on a day-relative axis.

Intervals are half-open [start, end) in minutes since a reference midnight.
Values may run past 1440 (or below 0 during computation) to express the
next/previous day of an overnight span. Nothing here raises: inverted or
empty intervals are dropped.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from .time_utils import MINUTES_PER_DAY

logger = logging.getLogger(__name__)

# Night differential window: 22:00 -> 06:00 (next day)
ND_START = 22 * 60
ND_END = 6 * 60


@dataclass(frozen=True)
class MinuteInterval:
    """Half-open [start, end) span of minutes."""
    start: int
    end: int

    @property
    def minutes(self) -> int:
        return max(0, self.end - self.start)

    def shifted(self, delta: int) -> "MinuteInterval":
        return MinuteInterval(self.start + delta, self.end + delta)


def _sort_key(iv: MinuteInterval):
    return (iv.start, iv.end)


def clamp_interval(start: int, end: int) -> Optional[MinuteInterval]:
    """Floor both ends at 0. None when nothing is left."""
    s = max(0, start)
    e = max(0, end)
    if e <= s:
        return None
    return MinuteInterval(s, e)


def merge_intervals(intervals: Iterable[MinuteInterval]) -> List[MinuteInterval]:
    """Sort (start, then end) and coalesce overlapping or touching intervals."""
    ordered = sorted(intervals, key=_sort_key)
    if not ordered:
        return []
    merged = []
    cur_start, cur_end = ordered[0].start, ordered[0].end
    for iv in ordered[1:]:
        if iv.start <= cur_end:
            cur_end = max(cur_end, iv.end)
        else:
            merged.append(MinuteInterval(cur_start, cur_end))
            cur_start, cur_end = iv.start, iv.end
    merged.append(MinuteInterval(cur_start, cur_end))
    return merged


def sum_intervals(intervals: Iterable[MinuteInterval]) -> int:
    """Total minutes. Overlaps are double-counted; merge first when it matters."""
    return sum(iv.minutes for iv in intervals)


def clip_intervals(intervals: Iterable[MinuteInterval], window: MinuteInterval) -> List[MinuteInterval]:
    """Portion of each interval inside window; empty pieces dropped."""
    if window.end <= window.start:
        return []
    clipped = []
    for iv in intervals:
        s = max(iv.start, window.start)
        e = min(iv.end, window.end)
        if e > s:
            clipped.append(MinuteInterval(s, e))
    return clipped


def subtract_intervals(base: Iterable[MinuteInterval], to_subtract: Iterable[MinuteInterval]) -> List[MinuteInterval]:
    """Remove every to_subtract span from each base interval. Result is merged."""
    base = list(base)
    to_subtract = [iv for iv in to_subtract if iv.end > iv.start]
    if not base:
        return []
    if not to_subtract:
        return merge_intervals(base)
    result = []
    for iv in base:
        pieces = [iv]
        for sub in to_subtract:
            remaining = []
            for piece in pieces:
                if sub.end <= piece.start or sub.start >= piece.end:
                    remaining.append(piece)
                    continue
                if sub.start > piece.start:
                    remaining.append(MinuteInterval(piece.start, sub.start))
                if sub.end < piece.end:
                    remaining.append(MinuteInterval(sub.end, piece.end))
            pieces = remaining
            if not pieces:
                break
        result.extend(pieces)
    return merge_intervals(result)


def extend_for_reference(intervals: Iterable[MinuteInterval], reference: int) -> List[MinuteInterval]:
    """
    Move each interval a full day forward when its midpoint sits closer to
    reference that way. Lets post-midnight presence line up with a schedule
    anchored the evening before. Ties keep the original position.

    Midpoint distance is the only test, so an interval longer than 12h that
    covers the reference is judged by its center alone.
    """
    extended = []
    for iv in intervals:
        midpoint = (iv.start + iv.end) / 2
        dist_original = abs(midpoint - reference)
        dist_shifted = abs(midpoint + MINUTES_PER_DAY - reference)
        if dist_shifted < dist_original:
            extended.append(iv.shifted(MINUTES_PER_DAY))
        else:
            extended.append(iv)
    return merge_intervals(extended)


def minutes_overlap(a: MinuteInterval, b: MinuteInterval) -> int:
    return max(0, min(a.end, b.end) - max(a.start, b.start))


def minutes_in_night_window(intervals: Iterable[MinuteInterval]) -> int:
    """
    Minutes falling in 22:00-06:00. Each interval is cut at every 1440 boundary
    so the window is applied per calendar day.
    """
    late = MinuteInterval(ND_START, MINUTES_PER_DAY)
    early = MinuteInterval(0, ND_END)
    total = 0
    for iv in intervals:
        cursor = iv.start
        while cursor < iv.end:
            day_start = (cursor // MINUTES_PER_DAY) * MINUTES_PER_DAY
            slice_end = min(iv.end, day_start + MINUTES_PER_DAY)
            local = MinuteInterval(cursor - day_start, slice_end - day_start)
            total += minutes_overlap(local, late)
            total += minutes_overlap(local, early)
            cursor = slice_end
    return total


def take_tail(segments: List[MinuteInterval], minutes: int) -> List[MinuteInterval]:
    """The last `minutes` minutes covered by segments (walked from the end), merged."""
    if minutes <= 0:
        return []
    taken = []
    remaining = minutes
    for iv in reversed(segments):
        if remaining <= 0:
            break
        length = iv.minutes
        if not length:
            continue
        take = min(length, remaining)
        taken.append(MinuteInterval(iv.end - take, iv.end))
        remaining -= take
    return merge_intervals(taken)


def sanitize_presence(presence: Iterable[MinuteInterval]) -> List[MinuteInterval]:
    """Clamp, drop empty/inverted spans, merge."""
    cleaned = []
    for iv in presence:
        clamped = clamp_interval(iv.start, iv.end)
        if clamped is None:
            logger.debug("Dropping empty or inverted interval %s-%s", iv.start, iv.end)
            continue
        cleaned.append(clamped)
    return merge_intervals(cleaned)
