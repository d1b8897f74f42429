"""Drag-to-reorder state machine.

The transitions are plain functions over the immutable :class:`DragState`
value so they can be exercised without a UI. :class:`ReorderController`
owns the current value for one widget and forwards completed drops to the
reorder sink.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Collection, Iterable, Optional, Tuple

from .models import IDLE, DragState, ReorderRequest

logger = logging.getLogger(__name__)

ReorderSink = Callable[[str, str], None]


@dataclass(frozen=True)
class TaskRegion:
    """On-screen rectangle of a rendered task card, used for touch hit-testing."""

    task_id: str
    x: float
    y: float
    width: float
    height: float
    z_index: int = 1

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x < self.x + self.width and self.y <= y < self.y + self.height


def press(state: DragState, task_id: str) -> DragState:
    if state.is_dragging:
        return state
    return DragState(dragged_id=task_id)


def hover(state: DragState, task_id: Optional[str]) -> DragState:
    if not state.is_dragging:
        return state
    if task_id == state.dragged_id:
        task_id = None
    return replace(state, drop_target_id=task_id)


def release(state: DragState, known_ids: Collection[str]) -> Tuple[DragState, Optional[ReorderRequest]]:
    """End the gesture; returns the idle state and the request to emit, if any."""
    if not state.is_dragging or state.drop_target_id is None:
        return IDLE, None
    if state.drop_target_id == state.dragged_id:
        return IDLE, None
    if state.drop_target_id not in known_ids or state.dragged_id not in known_ids:
        logger.warning(
            "Dropping reorder %s -> %s: task no longer present",
            state.dragged_id,
            state.drop_target_id,
        )
        return IDLE, None
    return IDLE, ReorderRequest(dragged_id=state.dragged_id, target_id=state.drop_target_id)


def cancel(state: DragState) -> DragState:
    return IDLE


def hit_test(x: float, y: float, regions: Iterable[TaskRegion]) -> Optional[str]:
    """Return the id of the topmost task region under the point."""
    best: Optional[TaskRegion] = None
    for region in regions:
        if region.contains(x, y) and (best is None or region.z_index > best.z_index):
            best = region
    return best.task_id if best else None


class ReorderController:
    """Holds the drag state for one view and talks to the reorder sink."""

    def __init__(self, sink: Optional[ReorderSink] = None) -> None:
        self.sink = sink
        self.state: DragState = IDLE

    @property
    def is_dragging(self) -> bool:
        return self.state.is_dragging

    def press(self, task_id: str) -> None:
        self.state = press(self.state, task_id)

    def hover(self, task_id: Optional[str]) -> None:
        self.state = hover(self.state, task_id)

    def hover_point(self, x: float, y: float, regions: Iterable[TaskRegion]) -> None:
        """Touch path: there is no native drag-over, so hit-test the tracked bounds."""
        self.hover(hit_test(x, y, regions))

    def cancel(self) -> None:
        self.state = cancel(self.state)

    def release(self, known_ids: Collection[str]) -> Optional[ReorderRequest]:
        self.state, request = release(self.state, known_ids)
        if request is None or self.sink is None:
            return request
        logger.debug("Reorder %s -> %s", request.dragged_id, request.target_id)
        try:
            self.sink(request.dragged_id, request.target_id)
        except Exception:
            logger.exception("Reorder sink rejected %s -> %s", request.dragged_id, request.target_id)
            raise
        return request
