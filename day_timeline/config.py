"""Tunable parameters for the timeline layout."""
from __future__ import annotations

from dataclasses import dataclass

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class TimelineConfig:
    """Display window, scale and spacing used by one layout pass.

    All distances are in pixels, all durations in minutes. The window runs
    from ``start_hour:00`` to ``end_hour:00``; ``end_hour`` may be 24.
    """

    start_hour: int = 6
    end_hour: int = 22
    pixels_per_minute: float = 2.0
    min_task_height: float = 40
    long_gap_threshold: int = 90
    min_break_threshold: int = 15
    long_gap_height: float = 48
    short_break_height: float = 32
    min_label_spacing: float = 20
    tick_interval_ms: int = 60_000
    highlight_duration_ms: int = 2_500
    twelve_hour_labels: bool = False

    def __post_init__(self) -> None:
        if not 0 <= self.start_hour < self.end_hour <= 24:
            raise ValueError(
                f"Invalid timeline window: {self.start_hour}:00-{self.end_hour}:00"
            )
        if self.pixels_per_minute <= 0:
            raise ValueError("pixels_per_minute must be positive")
        for name in ("min_task_height", "long_gap_height", "short_break_height", "min_label_spacing"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.min_break_threshold < 0 or self.long_gap_threshold < self.min_break_threshold:
            raise ValueError("Break thresholds must satisfy 0 <= min_break <= long_gap")

    @property
    def window_start(self) -> int:
        return self.start_hour * 60

    @property
    def window_end(self) -> int:
        return self.end_hour * 60
