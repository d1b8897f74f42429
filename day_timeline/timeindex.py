"""Conversions between wall-clock strings and minutes since midnight."""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .config import MINUTES_PER_DAY
from .models import SegmentKind, Task, TaskStatus, TimeStatus

IMMINENT_WINDOW_MINS = 15
CRITICAL_WINDOW_START_MINS = 30
CRITICAL_WINDOW_END_MINS = -15


class InvalidTimeError(ValueError):
    """Raised when a time string cannot be read as HH:MM."""


def parse_time(value: Optional[str]) -> int:
    """Return minutes since midnight for an ``HH:MM`` string."""
    if value is None:
        raise InvalidTimeError("Missing time")
    text = str(value).strip()
    hours_raw, sep, minutes_raw = text.partition(":")
    if not sep or not hours_raw.isdigit() or not minutes_raw.isdigit() or len(minutes_raw) != 2:
        raise InvalidTimeError(f"Invalid time: {value!r}")
    hours = int(hours_raw)
    minutes = int(minutes_raw)
    if hours > 23 or minutes > 59:
        raise InvalidTimeError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_minutes(minute: int) -> str:
    minute = int(minute) % MINUTES_PER_DAY
    return f"{minute // 60:02d}:{minute % 60:02d}"


def format_duration(minutes: int) -> str:
    """Human label for a duration: ``45 min``, ``2h``, ``12h 30min``."""
    minutes = max(0, int(round(minutes)))
    if minutes < 60:
        return f"{minutes} min"
    hours, rest = divmod(minutes, 60)
    if rest == 0:
        return f"{hours}h"
    return f"{hours}h {rest}min"


def gap_label(kind: SegmentKind, minutes: int) -> str:
    """Caption drawn inside a compressed segment."""
    if kind is SegmentKind.GAP:
        return f"{format_duration(minutes)} libres"
    if kind is SegmentKind.SHORT_BREAK:
        return f"{int(round(minutes))} min libres"
    return ""


def format_hour_label(hour: int) -> str:
    hour = hour % 24
    suffix = "am" if hour < 12 else "pm"
    return f"{hour % 12 or 12}{suffix}"


def task_time_range(start_minute: int, duration_minutes: int) -> str:
    end = start_minute + duration_minutes
    return f"{format_minutes(start_minute)} - {format_minutes(end)} ({duration_minutes} min)"


def minutes_until(task_minute: int, now_minute: int) -> int:
    return task_minute - now_minute


def time_status(diff: int) -> TimeStatus:
    if diff <= 0:
        return TimeStatus.DUE
    if diff <= IMMINENT_WINDOW_MINS:
        return TimeStatus.IMMINENT
    return TimeStatus.NORMAL


def format_relative(diff: int) -> str:
    if diff > 0:
        return f"en {diff} min"
    if diff == 0:
        return "¡Ahora!"
    return f"hace {abs(diff)} min"


def critical_upcoming(tasks: Iterable[Task], now_minute: int) -> List[Tuple[Task, int]]:
    """Critical, unfinished tasks starting between 15 min ago and 30 min ahead."""
    selected: List[Tuple[Task, int]] = []
    for task in tasks:
        if not task.payload.get("is_critical"):
            continue
        if task.payload.get("status") == TaskStatus.DONE.value:
            continue
        diff = minutes_until(task.start_minute, now_minute)
        if CRITICAL_WINDOW_END_MINS <= diff <= CRITICAL_WINDOW_START_MINS:
            selected.append((task, diff))
    selected.sort(key=lambda pair: pair[1])
    return selected
