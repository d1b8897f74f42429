"""One-shot layout pass: raw tasks in, everything the renderer needs out."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional

from .collisions import layout_tasks
from .config import TimelineConfig
from .coordinates import CoordinateMapper
from .markers import select_markers
from .models import TimelineLayout
from .segments import build_segments, load_tasks, position_segments

logger = logging.getLogger(__name__)


def compute_layout(raw_tasks: Iterable[Dict[str, Any]], config: Optional[TimelineConfig] = None) -> TimelineLayout:
    """Lay out a day's tasks from scratch.

    Entries with a bad time, duration or id are left out of this pass and
    reported in ``TimelineLayout.anomalies``.
    """
    config = config or TimelineConfig()
    tasks, anomalies = load_tasks(raw_tasks)
    segments, total_height = position_segments(build_segments(tasks, config), config)
    mapper = CoordinateMapper(segments, config.pixels_per_minute)
    layouts = layout_tasks(tasks, mapper, config)
    markers = select_markers(segments, layouts, mapper, config)
    logger.debug(
        "Laid out %d tasks in %d segments, %.1fpx tall (%d skipped)",
        len(tasks),
        len(segments),
        total_height,
        len(anomalies),
    )
    return TimelineLayout(
        tasks=tasks,
        segments=segments,
        layouts=layouts,
        markers=markers,
        total_height=total_height,
        mapper=mapper,
        anomalies=anomalies,
    )
