"""Data models shared across the day timeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .coordinates import CoordinateMapper


class SegmentKind(str, Enum):
    TASK = "task"
    GAP = "gap"
    SHORT_BREAK = "short_break"
    FILLER = "filler"

    @property
    def compressed(self) -> bool:
        """Return True when the segment is drawn at a fixed height."""
        return self in (SegmentKind.GAP, SegmentKind.SHORT_BREAK)


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "inprogress"
    DONE = "done"


class TimeStatus(str, Enum):
    DUE = "due"
    IMMINENT = "imminent"
    NORMAL = "normal"


@dataclass(frozen=True)
class Task:
    """A scheduled task as the layout engine sees it.

    Everything the engine does not interpret (text, employee, status...)
    travels in ``payload`` untouched.
    """

    id: str
    start_minute: int
    duration_minutes: int
    payload: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes


@dataclass(frozen=True)
class Segment:
    """A contiguous stretch of the day classified for vertical layout.

    ``span_start``/``span_end`` describe the part of the window axis the
    segment newly covers. For TASK segments that overlap an earlier task the
    span is shorter than the task itself (possibly empty).
    """

    kind: SegmentKind
    start_minute: int
    duration_minutes: int
    span_start: int
    span_end: int
    task_id: Optional[str] = None

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes

    @property
    def span_minutes(self) -> int:
        return self.span_end - self.span_start


@dataclass(frozen=True)
class PositionedSegment:
    segment: Segment
    top: float
    height: float

    @property
    def kind(self) -> SegmentKind:
        return self.segment.kind

    @property
    def bottom(self) -> float:
        return self.top + self.height


CollisionGroup = Tuple[Task, ...]
Column = List[Task]


@dataclass(frozen=True)
class TaskLayout:
    task_id: str
    top: float
    height: float
    left_percent: float
    width_percent: float
    z_index: int
    column_index: int = 0
    column_count: int = 1


@dataclass(frozen=True)
class TimeMarker:
    minute: int
    top: float
    label: str


@dataclass(frozen=True)
class DragState:
    """Per-gesture reorder state; ``DragState()`` is the idle value."""

    dragged_id: Optional[str] = None
    drop_target_id: Optional[str] = None

    @property
    def is_dragging(self) -> bool:
        return self.dragged_id is not None


IDLE = DragState()


@dataclass(frozen=True)
class ReorderRequest:
    dragged_id: str
    target_id: str


@dataclass
class TimelineLayout:
    """Everything one layout pass produces for a single render."""

    tasks: List[Task]
    segments: List[PositionedSegment]
    layouts: List[TaskLayout]
    markers: List[TimeMarker]
    total_height: float
    mapper: "CoordinateMapper"
    anomalies: List[Dict[str, Any]] = field(default_factory=list)

    def layout_for(self, task_id: str) -> Optional[TaskLayout]:
        for layout in self.layouts:
            if layout.task_id == task_id:
                return layout
        return None

    def task_for(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None
