"""Side-by-side layout for tasks that share time."""
from __future__ import annotations

from collections import deque
from typing import Iterable, List, Set

from .config import TimelineConfig
from .coordinates import CoordinateMapper
from .models import CollisionGroup, Column, Task, TaskLayout


def overlaps(a: Task, b: Task) -> bool:
    return a.start_minute < b.end_minute and b.start_minute < a.end_minute


def collision_groups(tasks: Iterable[Task]) -> List[CollisionGroup]:
    """Split tasks into maximal groups connected by time overlap.

    Grouping is transitive: if A overlaps B and B overlaps C, all three end
    up together even when A and C never touch.
    """
    ordered = sorted(tasks, key=lambda task: (task.start_minute, task.id))
    visited: Set[str] = set()
    groups: List[CollisionGroup] = []
    for seed in ordered:
        if seed.id in visited:
            continue
        visited.add(seed.id)
        members: List[Task] = []
        queue = deque([seed])
        while queue:
            current = queue.popleft()
            members.append(current)
            for other in ordered:
                if other.id not in visited and overlaps(current, other):
                    visited.add(other.id)
                    queue.append(other)
        members.sort(key=lambda task: (task.start_minute, task.id))
        groups.append(tuple(members))
    return groups


def assign_columns(group: Iterable[Task]) -> List[Column]:
    """Greedy first-fit colouring of a group, in start-time order."""
    columns: List[Column] = []
    for task in sorted(group, key=lambda task: (task.start_minute, task.id)):
        for column in columns:
            if column[-1].end_minute <= task.start_minute:
                column.append(task)
                break
        else:
            columns.append([task])
    return columns


def layout_tasks(tasks: Iterable[Task], mapper: CoordinateMapper, config: TimelineConfig) -> List[TaskLayout]:
    layouts: List[TaskLayout] = []
    for group in collision_groups(tasks):
        columns = assign_columns(group)
        column_count = len(columns)
        width = 100 / column_count
        for column_index, column in enumerate(columns):
            for task in column:
                top = mapper.position(task.start_minute)
                # Floor only the drawn height; the overlap math above keeps
                # the declared duration.
                bottom = mapper.position(max(task.end_minute, task.start_minute))
                layouts.append(
                    TaskLayout(
                        task_id=task.id,
                        top=top,
                        height=max(bottom - top, config.min_task_height),
                        left_percent=column_index / column_count * 100,
                        width_percent=width,
                        z_index=column_index + 1,
                        column_index=column_index,
                        column_count=column_count,
                    )
                )
    layouts.sort(key=lambda layout: (layout.top, layout.left_percent))
    return layouts
