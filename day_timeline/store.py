"""In-memory task store backing the reorder and status sinks."""
from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any, Callable, Dict, Iterable, List

from .models import TaskStatus

logger = logging.getLogger(__name__)

Subscriber = Callable[[List[Dict[str, Any]]], None]


def next_status(status: str) -> str:
    """Advance a task card: todo -> inprogress -> done; done stays done."""
    if status == TaskStatus.TODO.value:
        return TaskStatus.IN_PROGRESS.value
    if status == TaskStatus.IN_PROGRESS.value:
        return TaskStatus.DONE.value
    return status


class TaskStore:
    """Holds the day's raw task dicts and pushes a fresh list on every change.

    The timeline never writes task data itself; it calls :meth:`reorder`,
    :meth:`update_status` or :meth:`update_text` and waits for the pushed list.
    """

    def __init__(self, tasks: Iterable[Dict[str, Any]] = ()) -> None:
        self._tasks: List[Dict[str, Any]] = [dict(task) for task in tasks]
        self._subscribers: List[Subscriber] = []

    @property
    def tasks(self) -> List[Dict[str, Any]]:
        return deepcopy(self._tasks)

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a listener; returns a function that removes it."""
        self._subscribers.append(callback)
        callback(self.tasks)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def replace_all(self, tasks: Iterable[Dict[str, Any]]) -> None:
        self._tasks = [dict(task) for task in tasks]
        self._publish()

    def reorder(self, dragged_id: str, target_id: str) -> None:
        """Swap the scheduled times of two tasks."""
        dragged = self._find(dragged_id)
        target = self._find(target_id)
        if not dragged.get("time") or not target.get("time"):
            raise ValueError(f"Cannot reorder {dragged_id} -> {target_id}: task has no time")
        if dragged.get("date") != target.get("date"):
            raise ValueError(f"Cannot reorder {dragged_id} -> {target_id}: different dates")
        dragged["time"], target["time"] = target["time"], dragged["time"]
        logger.info("Swapped times of %s and %s", dragged_id, target_id)
        self._publish()

    def update_status(self, task_id: str, status: str) -> None:
        self._find(task_id)["status"] = status
        self._publish()

    def update_text(self, task_id: str, text: str) -> None:
        self._find(task_id)["text"] = text
        logger.info("Renamed task %s", task_id)
        self._publish()

    def _find(self, task_id: str) -> Dict[str, Any]:
        for task in self._tasks:
            if str(task.get("id")) == task_id:
                return task
        raise KeyError(task_id)

    def _publish(self) -> None:
        snapshot = self.tasks
        for callback in list(self._subscribers):
            callback(snapshot)
