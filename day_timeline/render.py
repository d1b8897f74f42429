"""QPainter drawing shared by the on-screen widget and the PDF export."""
from __future__ import annotations

from typing import List, Optional

from PyQt6.QtCore import Qt, QRectF
from PyQt6.QtGui import QBrush, QColor, QFont, QPainter, QPen

from .models import DragState, SegmentKind, Task, TaskStatus, TimelineLayout, TimeStatus
from .reorder import TaskRegion
from .timeindex import format_minutes, gap_label, minutes_until, task_time_range, time_status

AXIS_WIDTH = 64
CARD_VERTICAL_GAP = 8
CARD_HORIZONTAL_GAP = 4
CARD_RADIUS = 8
LABEL_FONT_SIZE = 9
CARD_FONT_SIZE = 9

AXIS_TEXT_COLOR = QColor("#9ca3af")
GRID_COLOR = QColor("#e5e7eb")
GAP_FILL = QColor("#f3f4f6")
BREAK_FILL = QColor("#f9fafb")
NOW_COLOR = QColor("#ef4444")
HIGHLIGHT_COLOR = QColor("#2563eb")
DROP_TARGET_COLOR = QColor("#16a34a")
IMMINENT_COLOR = QColor("#f59e0b")
_CARD_TEXT_FLAGS = (
    Qt.AlignmentFlag.AlignLeft.value | Qt.AlignmentFlag.AlignTop.value | Qt.TextFlag.TextWordWrap.value
)

EMPLOYEE_COLORS = {
    "Ali": (QColor("#fce7f3"), QColor("#ec4899"), QColor("#9d174d")),
    "Fer": (QColor("#f3e8ff"), QColor("#a855f7"), QColor("#6b21a8")),
    "Claudia": (QColor("#ccfbf1"), QColor("#14b8a6"), QColor("#115e59")),
    "Admin": (QColor("#fef9c3"), QColor("#ca8a04"), QColor("#713f12")),
}


def task_regions(layout: TimelineLayout, width: float, *, left: float = AXIS_WIDTH) -> List[TaskRegion]:
    """Screen rectangles of every task card for a timeline drawn ``width`` wide."""
    content_width = max(1.0, width - left)
    regions: List[TaskRegion] = []
    for item in layout.layouts:
        x = left + content_width * item.left_percent / 100
        card_width = content_width * item.width_percent / 100 - CARD_HORIZONTAL_GAP
        card_height = max(item.height - CARD_VERTICAL_GAP, 1.0)
        regions.append(
            TaskRegion(
                task_id=item.task_id,
                x=x,
                y=item.top,
                width=max(card_width, 1.0),
                height=card_height,
                z_index=item.z_index,
            )
        )
    return regions


def card_time_status(task: Task, now_minute: Optional[int]) -> Optional[TimeStatus]:
    """Urgency of a task that has not been started yet, or None when it does not apply."""
    if now_minute is None or task.payload.get("status", TaskStatus.TODO.value) != TaskStatus.TODO.value:
        return None
    return time_status(minutes_until(task.start_minute, now_minute))


def now_position(layout: TimelineLayout, now_minute: int) -> Optional[float]:
    """Distance of the current-time line, or None when it falls off the view."""
    position = layout.mapper.position(now_minute)
    if 0 <= position <= layout.total_height:
        return position
    return None


def paint_timeline(
    painter: QPainter,
    layout: TimelineLayout,
    width: float,
    *,
    now_minute: Optional[int] = None,
    highlighted_id: Optional[str] = None,
    drag_state: Optional[DragState] = None,
) -> None:
    painter.setRenderHint(QPainter.RenderHint.Antialiasing, True)
    font = QFont(painter.font())
    font.setPointSize(LABEL_FONT_SIZE)
    painter.setFont(font)

    _paint_segments(painter, layout, width)
    _paint_markers(painter, layout, width)
    _paint_cards(painter, layout, width, highlighted_id, drag_state or DragState(), now_minute)

    if now_minute is not None:
        position = now_position(layout, now_minute)
        if position is not None:
            painter.setPen(QPen(NOW_COLOR, 2))
            painter.drawLine(int(AXIS_WIDTH), int(position), int(width), int(position))
            painter.setBrush(QBrush(NOW_COLOR))
            painter.drawEllipse(QRectF(AXIS_WIDTH - 6, position - 6, 12, 12))


def _paint_segments(painter: QPainter, layout: TimelineLayout, width: float) -> None:
    """Shade compressed stretches and caption them with their idle time."""
    for item in layout.segments:
        if not item.kind.compressed:
            continue
        rect = QRectF(AXIS_WIDTH, item.top, width - AXIS_WIDTH, item.height)
        painter.fillRect(rect, GAP_FILL if item.kind is SegmentKind.GAP else BREAK_FILL)
        painter.setPen(QPen(AXIS_TEXT_COLOR))
        caption = gap_label(item.kind, item.segment.span_minutes)
        painter.drawText(rect, Qt.AlignmentFlag.AlignCenter, caption)


def _paint_markers(painter: QPainter, layout: TimelineLayout, width: float) -> None:
    for marker in layout.markers:
        painter.setPen(QPen(GRID_COLOR, 1))
        painter.drawLine(int(AXIS_WIDTH), int(marker.top), int(width), int(marker.top))
        painter.setPen(QPen(AXIS_TEXT_COLOR))
        label_rect = QRectF(0, marker.top - 8, AXIS_WIDTH - 12, 16)
        painter.drawText(
            label_rect,
            Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter,
            marker.label,
        )


def _paint_cards(
    painter: QPainter,
    layout: TimelineLayout,
    width: float,
    highlighted_id: Optional[str],
    drag_state: DragState,
    now_minute: Optional[int] = None,
) -> None:
    regions = sorted(task_regions(layout, width), key=lambda region: region.z_index)
    font = QFont(painter.font())
    font.setPointSize(CARD_FONT_SIZE)
    painter.setFont(font)
    for region in regions:
        task = layout.task_for(region.task_id)
        if task is None:
            continue
        fill, accent, text_color = EMPLOYEE_COLORS.get(task.payload.get("employee"), EMPLOYEE_COLORS["Admin"])
        status = task.payload.get("status", TaskStatus.TODO.value)
        urgency = card_time_status(task, now_minute)
        rect = QRectF(region.x, region.y, region.width, region.height)

        painter.save()
        if status == TaskStatus.DONE.value or task.id == drag_state.dragged_id:
            painter.setOpacity(0.5)
        border = QPen(Qt.PenStyle.NoPen)
        if task.id == highlighted_id:
            border = QPen(HIGHLIGHT_COLOR, 3)
        elif task.id == drag_state.drop_target_id:
            border = QPen(DROP_TARGET_COLOR, 2, Qt.PenStyle.DashLine)
        elif urgency is TimeStatus.DUE:
            border = QPen(NOW_COLOR, 2)
        elif urgency is TimeStatus.IMMINENT:
            border = QPen(IMMINENT_COLOR, 2)
        elif status == TaskStatus.IN_PROGRESS.value:
            border = QPen(accent, 2)
        painter.setPen(border)
        painter.setBrush(QBrush(fill))
        painter.drawRoundedRect(rect, CARD_RADIUS, CARD_RADIUS)
        painter.fillRect(QRectF(rect.left() + 4, rect.top() + 4, 4, max(rect.height() - 8, 1)), accent)

        painter.setPen(QPen(text_color))
        text_rect = rect.adjusted(14, 4, -6, -4)
        title = str(task.payload.get("text", task.id))
        subtitle = task_time_range(task.start_minute, task.duration_minutes)
        if region.height < 32:
            subtitle = format_minutes(task.start_minute)
        painter.drawText(
            text_rect,
            _CARD_TEXT_FLAGS,
            f"{title}\n{subtitle}",
        )
        painter.restore()
