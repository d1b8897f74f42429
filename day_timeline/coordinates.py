"""Piecewise mapping from minutes to vertical distance."""
from __future__ import annotations

from bisect import bisect_right
from typing import List, Sequence

from .models import PositionedSegment


class CoordinateMapper:
    """Map a minute of the day to a distance from the top of the timeline.

    Uncompressed segments (tasks, fillers) scale linearly at
    ``pixels_per_minute``; compressed ones (gaps, short breaks) squeeze their
    whole span into their fixed height. Minutes outside the laid-out window
    are extrapolated at the linear scale.
    """

    def __init__(self, segments: Sequence[PositionedSegment], pixels_per_minute: float) -> None:
        self.pixels_per_minute = pixels_per_minute
        # Segments with an empty span (overlapped tasks) never own a minute.
        self._segments: List[PositionedSegment] = [
            item for item in segments if item.segment.span_minutes > 0
        ]
        self._starts = [item.segment.span_start for item in self._segments]
        self.total_height = sum(item.height for item in segments)

    def position(self, minute: float) -> float:
        if not self._segments:
            return minute * self.pixels_per_minute
        first = self._segments[0]
        last = self._segments[-1]
        if minute < first.segment.span_start:
            return first.top - (first.segment.span_start - minute) * self.pixels_per_minute
        if minute >= last.segment.span_end:
            return last.bottom + (minute - last.segment.span_end) * self.pixels_per_minute

        index = bisect_right(self._starts, minute) - 1
        item = self._segments[index]
        offset = minute - item.segment.span_start
        if item.kind.compressed:
            return item.top + offset / item.segment.span_minutes * item.height
        return item.top + offset * self.pixels_per_minute

    __call__ = position
