"""Partition the display window into task, gap, break and filler segments."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Tuple

from .config import TimelineConfig
from .models import PositionedSegment, Segment, SegmentKind, Task
from .timeindex import InvalidTimeError, parse_time

logger = logging.getLogger(__name__)

_RESERVED_KEYS = ("id", "time", "duration", "durationMinutes")


def _parse_duration(value: Any) -> int:
    """Whole minutes from an int, an integral float, or a numeric string."""
    if value is None or isinstance(value, bool):
        raise ValueError(f"Missing duration: {value!r}")
    if isinstance(value, int):
        return value
    minutes = float(value)
    if not minutes.is_integer():
        raise ValueError(f"Duration is not a whole number of minutes: {value!r}")
    return int(minutes)


def load_tasks(raw_tasks: Iterable[Dict[str, Any]]) -> Tuple[List[Task], List[Dict[str, Any]]]:
    """Parse raw task dicts into Tasks, setting malformed entries aside.

    Returns ``(tasks, anomalies)``. Tasks come back sorted by start time;
    anomalies are the raw entries that could not be placed on the axis,
    including entries without an id and repeats of an id already seen.
    """
    tasks: List[Task] = []
    anomalies: List[Dict[str, Any]] = []
    seen_ids = set()
    for raw in raw_tasks:
        raw_id = raw.get("id")
        try:
            if raw_id is None or not str(raw_id).strip():
                raise ValueError("Missing id")
            task_id = str(raw_id)
            if task_id in seen_ids:
                raise ValueError(f"Duplicate id {task_id!r}")
            start = parse_time(raw.get("time"))
            duration = _parse_duration(raw.get("durationMinutes", raw.get("duration")))
        except (InvalidTimeError, ValueError, TypeError, OverflowError) as exc:
            logger.warning("Skipping task %r: %s", raw_id, exc)
            anomalies.append(raw)
            continue
        seen_ids.add(task_id)
        payload = {key: value for key, value in raw.items() if key not in _RESERVED_KEYS}
        tasks.append(Task(id=task_id, start_minute=start, duration_minutes=duration, payload=payload))
    tasks.sort(key=lambda task: (task.start_minute, task.id))
    return tasks, anomalies


def classify_gap(gap: int, config: TimelineConfig) -> SegmentKind | None:
    """Decide how an idle stretch is drawn; None means there is nothing to draw."""
    if gap > config.long_gap_threshold:
        return SegmentKind.GAP
    if gap >= config.min_break_threshold and gap > 0:
        return SegmentKind.SHORT_BREAK
    if gap > 0:
        return SegmentKind.FILLER
    return None


def _idle_segment(start: int, end: int, config: TimelineConfig) -> List[Segment]:
    kind = classify_gap(end - start, config)
    if kind is None:
        return []
    return [Segment(kind=kind, start_minute=start, duration_minutes=end - start, span_start=start, span_end=end)]


def build_segments(tasks: Iterable[Task], config: TimelineConfig) -> List[Segment]:
    """Walk the tasks in time order and emit the segments covering the window.

    The spans of the returned segments tile ``[window_start, window_end]``
    exactly; overlapping tasks still get a TASK entry each.
    """
    window_start = config.window_start
    window_end = config.window_end
    ordered = sorted(tasks, key=lambda task: (task.start_minute, task.id))

    segments: List[Segment] = []
    cursor = window_start
    for task in ordered:
        idle_end = min(task.start_minute, window_end)
        segments.extend(_idle_segment(cursor, idle_end, config))
        cursor = max(cursor, idle_end)

        span_start = cursor
        span_end = min(max(task.end_minute, cursor), window_end)
        segments.append(
            Segment(
                kind=SegmentKind.TASK,
                start_minute=task.start_minute,
                duration_minutes=task.duration_minutes,
                span_start=span_start,
                span_end=span_end,
                task_id=task.id,
            )
        )
        cursor = span_end

    segments.extend(_idle_segment(cursor, window_end, config))
    return segments


def segment_height(segment: Segment, config: TimelineConfig) -> float:
    if segment.kind is SegmentKind.GAP:
        return config.long_gap_height
    if segment.kind is SegmentKind.SHORT_BREAK:
        return config.short_break_height
    return segment.span_minutes * config.pixels_per_minute


def position_segments(segments: Iterable[Segment], config: TimelineConfig) -> Tuple[List[PositionedSegment], float]:
    """Stack segment heights top to bottom; returns the segments and the total height."""
    positioned: List[PositionedSegment] = []
    top = 0.0
    for segment in segments:
        height = segment_height(segment, config)
        positioned.append(PositionedSegment(segment=segment, top=top, height=height))
        top += height
    return positioned, top
