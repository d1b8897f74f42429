"""Pick the time labels drawn along the axis."""
from __future__ import annotations

from typing import Iterable, List, Sequence, Set

from .config import MINUTES_PER_DAY, TimelineConfig
from .coordinates import CoordinateMapper
from .models import PositionedSegment, SegmentKind, TaskLayout, TimeMarker
from .timeindex import format_hour_label, format_minutes


def _label(minute: int, twelve_hour: bool = False) -> str:
    if twelve_hour and minute % 60 == 0:
        return format_hour_label(minute // 60)
    if minute == MINUTES_PER_DAY:
        return "24:00"
    return format_minutes(minute)


def marker_candidates(
    segments: Iterable[PositionedSegment],
    layouts: Iterable[TaskLayout],
    config: TimelineConfig,
) -> List[int]:
    """Minutes worth labelling, before any thinning."""
    shifted = {layout.task_id for layout in layouts if layout.left_percent > 0}
    candidates: Set[int] = {config.window_start, config.window_end}
    for item in segments:
        segment = item.segment
        if segment.kind is SegmentKind.TASK:
            # A card in a right-hand column would cover its own label.
            if segment.task_id not in shifted:
                candidates.add(segment.start_minute)
        elif segment.kind is SegmentKind.GAP:
            candidates.add(segment.span_start)
            candidates.add(segment.span_end)
        else:
            first_hour = -(-segment.span_start // 60) * 60
            candidates.update(range(first_hour, segment.span_end, 60))
    return sorted(
        minute for minute in candidates if config.window_start <= minute <= config.window_end
    )


def thin_markers(
    minutes: Sequence[int],
    mapper: CoordinateMapper,
    min_spacing: float,
    *,
    twelve_hour: bool = False,
) -> List[TimeMarker]:
    """Keep a label only when it sits far enough below the last kept one."""
    markers: List[TimeMarker] = []
    for minute in sorted(set(minutes)):
        top = mapper.position(minute)
        if markers and top - markers[-1].top < min_spacing:
            continue
        markers.append(TimeMarker(minute=minute, top=top, label=_label(minute, twelve_hour)))
    return markers


def select_markers(
    segments: Sequence[PositionedSegment],
    layouts: Sequence[TaskLayout],
    mapper: CoordinateMapper,
    config: TimelineConfig,
) -> List[TimeMarker]:
    candidates = marker_candidates(segments, layouts, config)
    return thin_markers(candidates, mapper, config.min_label_spacing, twelve_hour=config.twelve_hour_labels)
