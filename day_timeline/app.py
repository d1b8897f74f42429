"""Main PyQt application entry point."""
from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from PyQt6.QtCore import QEvent, QPointF, Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QAction, QCloseEvent, QKeySequence, QPainter
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QInputDialog,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QToolButton,
    QWidget,
)

from .config import TimelineConfig
from .exporters import export_as_csv, export_as_pdf
from .layout import compute_layout
from .models import TimelineLayout
from .render import paint_timeline, now_position, task_regions
from .reorder import ReorderController, TaskRegion, hit_test
from .storage import load_tasks_csv, save_tasks_csv
from .store import TaskStore, next_status
from .timeindex import critical_upcoming, format_minutes, format_relative, task_time_range

logger = logging.getLogger(__name__)

_DEFAULT_WIDTH = 520
_HANDLE_WIDTH = 16
_STATUS_BUTTON_SIZE = 24
_STATUS_MESSAGE_MS = 3000


class DayTimelineWidget(QWidget):
    """Vertical day calendar with drag-to-reorder.

    The widget never edits tasks. Reorders, status changes and edit requests
    leave through signals; the new task list comes back via `set_tasks`.
    """

    reorder_requested = pyqtSignal(str, str)
    status_change_requested = pyqtSignal(str, str)
    edit_requested = pyqtSignal(str)
    scroll_requested = pyqtSignal(int)
    now_changed = pyqtSignal(int)

    def __init__(
        self,
        config: Optional[TimelineConfig] = None,
        parent: Optional[QWidget] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(parent)
        self.config = config or TimelineConfig()
        self._clock = clock
        self.layout_data: TimelineLayout = compute_layout([], self.config)
        self.regions: List[TaskRegion] = []
        self.highlighted_id: Optional[str] = None
        self.now_minute = self._current_minute()
        self.reorder = ReorderController(self.reorder_requested.emit)

        self._tick_timer = QTimer(self)
        self._tick_timer.setInterval(self.config.tick_interval_ms)
        self._tick_timer.timeout.connect(self.refresh_now)
        self._tick_timer.start()

        self._highlight_timer = QTimer(self)
        self._highlight_timer.setSingleShot(True)
        self._highlight_timer.setInterval(self.config.highlight_duration_ms)
        self._highlight_timer.timeout.connect(self.clear_highlight)

        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setMouseTracking(True)
        self._relayout()

    # --- Data ---------------------------------------------------------------

    def set_tasks(self, raw_tasks: List[Dict[str, Any]]) -> None:
        """Recompute the whole layout for a new task list."""
        self.layout_data = compute_layout(raw_tasks, self.config)
        if self.layout_data.anomalies:
            logger.warning("%d task(s) left off the timeline", len(self.layout_data.anomalies))
        if self.highlighted_id and self.layout_data.task_for(self.highlighted_id) is None:
            self.clear_highlight()
        self._relayout()

    def _relayout(self) -> None:
        self.regions = task_regions(self.layout_data, self.width())
        self.setMinimumHeight(int(self.layout_data.total_height) + 1)
        self.update()

    def _current_minute(self) -> int:
        now = self._clock()
        return now.hour * 60 + now.minute

    def refresh_now(self) -> None:
        """Minute tick: move only the current-time line."""
        self.now_minute = self._current_minute()
        self.now_changed.emit(self.now_minute)
        self.update()

    def now_line_position(self) -> Optional[float]:
        return now_position(self.layout_data, self.now_minute)

    # --- Highlight ------------------------------------------------------------

    def highlight_task(self, task_id: str) -> bool:
        """Scroll to a task and flag it until the highlight timer fires."""
        layout = self.layout_data.layout_for(task_id)
        if layout is None:
            return False
        self.highlighted_id = task_id
        # start() restarts a pending timer, so a newer highlight supersedes it.
        self._highlight_timer.start()
        self.scroll_requested.emit(int(layout.top))
        self.update()
        return True

    def clear_highlight(self) -> None:
        self._highlight_timer.stop()
        self.highlighted_id = None
        self.update()

    def highlight_pending(self) -> bool:
        return self._highlight_timer.isActive()

    def shutdown(self) -> None:
        """Stop both timers; called when the widget goes away."""
        self._tick_timer.stop()
        self._highlight_timer.stop()

    # --- Painting ------------------------------------------------------------

    def sizeHint(self):  # type: ignore[override]
        size = super().sizeHint()
        size.setWidth(_DEFAULT_WIDTH)
        size.setHeight(int(self.layout_data.total_height) + 1)
        return size

    def resizeEvent(self, event):  # type: ignore[override]
        self.regions = task_regions(self.layout_data, self.width())
        super().resizeEvent(event)

    def paintEvent(self, event):  # type: ignore[override]
        painter = QPainter(self)
        painter.fillRect(self.rect(), Qt.GlobalColor.white)
        paint_timeline(
            painter,
            self.layout_data,
            self.width(),
            now_minute=self.now_minute,
            highlighted_id=self.highlighted_id,
            drag_state=self.reorder.state,
        )
        painter.end()

    # --- Pointer and touch ---------------------------------------------------

    def region_at(self, point: QPointF) -> Optional[TaskRegion]:
        task_id = hit_test(point.x(), point.y(), self.regions)
        for region in self.regions:
            if region.task_id == task_id:
                return region
        return None

    def _on_handle(self, region: TaskRegion, point: QPointF) -> bool:
        return point.x() - region.x <= _HANDLE_WIDTH

    def _on_status_button(self, region: TaskRegion, point: QPointF) -> bool:
        right = region.x + region.width
        return right - point.x() <= _STATUS_BUTTON_SIZE and point.y() - region.y <= _STATUS_BUTTON_SIZE

    def begin_gesture(self, point: QPointF) -> bool:
        """Start dragging when the press lands on a card's handle."""
        region = self.region_at(point)
        if region is None or not self._on_handle(region, point):
            return False
        self.reorder.press(region.task_id)
        self.update()
        return True

    def move_gesture(self, point: QPointF) -> None:
        if not self.reorder.is_dragging:
            return
        self.reorder.hover_point(point.x(), point.y(), self.regions)
        self.update()

    def end_gesture(self) -> None:
        known_ids = {task.id for task in self.layout_data.tasks}
        self.reorder.release(known_ids)
        self.update()

    def cancel_gesture(self) -> None:
        self.reorder.cancel()
        self.update()

    def mousePressEvent(self, event):  # type: ignore[override]
        if event.button() == Qt.MouseButton.LeftButton:
            point = event.position()
            if not self.begin_gesture(point):
                region = self.region_at(point)
                if region is not None and self._on_status_button(region, point):
                    self._request_status_change(region.task_id)
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):  # type: ignore[override]
        self.move_gesture(event.position())
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):  # type: ignore[override]
        if self.reorder.is_dragging:
            self.end_gesture()
        super().mouseReleaseEvent(event)

    def mouseDoubleClickEvent(self, event):  # type: ignore[override]
        region = self.region_at(event.position())
        if region is not None:
            self.edit_requested.emit(region.task_id)
        super().mouseDoubleClickEvent(event)

    def event(self, event):  # type: ignore[override]
        kind = event.type()
        if kind in (QEvent.Type.TouchBegin, QEvent.Type.TouchUpdate, QEvent.Type.TouchEnd, QEvent.Type.TouchCancel):
            points = event.points()
            if kind == QEvent.Type.TouchCancel:
                self.cancel_gesture()
            elif points:
                point = points[0].position()
                if kind == QEvent.Type.TouchBegin:
                    self.begin_gesture(point)
                elif kind == QEvent.Type.TouchUpdate:
                    self.move_gesture(point)
                elif self.reorder.is_dragging:
                    self.move_gesture(point)
                    self.end_gesture()
            event.accept()
            return True
        return super().event(event)

    def _request_status_change(self, task_id: str) -> None:
        task = self.layout_data.task_for(task_id)
        if task is None:
            return
        current = str(task.payload.get("status", "todo"))
        new_status = next_status(current)
        if new_status != current:
            self.status_change_requested.emit(task_id, new_status)

    def closeEvent(self, event: QCloseEvent) -> None:  # pragma: no cover - requires UI
        self.shutdown()
        super().closeEvent(event)


class MainWindow(QMainWindow):
    """Primary window with menus and the scrolling day timeline."""

    def __init__(
        self,
        config: Optional[TimelineConfig] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__()
        self.setWindowTitle("Day Timeline")
        self.current_path: Optional[Path] = None
        self.store = TaskStore()
        self.timeline = DayTimelineWidget(config, clock=clock)
        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setWidget(self.timeline)
        self.setCentralWidget(self.scroll)
        self._critical_task_id: Optional[str] = None
        self.critical_button = QToolButton()
        self.critical_button.setAutoRaise(True)
        self.critical_button.clicked.connect(self.focus_critical_task)
        self.critical_button.hide()
        self.statusBar().addPermanentWidget(self.critical_button)
        # The store is the only writer; the timeline just re-renders its pushes.
        self._unsubscribe = self.store.subscribe(self._show_tasks)
        self.timeline.reorder_requested.connect(self._handle_reorder)
        self.timeline.status_change_requested.connect(self._handle_status_change)
        self.timeline.edit_requested.connect(self._handle_edit)
        self.timeline.scroll_requested.connect(self._scroll_to)
        self.timeline.now_changed.connect(self._update_critical_banner)
        self._build_menu()
        self.resize(_DEFAULT_WIDTH + 60, 800)

    def _build_menu(self) -> None:
        """Create the File menu along with shortcuts."""
        menu = self.menuBar()
        file_menu = menu.addMenu("File")

        open_action = QAction("Open", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self.action_open)
        file_menu.addAction(open_action)

        save_action = QAction("Save", self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.triggered.connect(self.action_save)
        file_menu.addAction(save_action)

        export_action = QAction("Export", self)
        export_action.triggered.connect(self.action_export)
        file_menu.addAction(export_action)

        file_menu.addSeparator()
        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.StandardKey.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def open_path(self, path: Path | str) -> None:
        tasks = load_tasks_csv(path)
        self.store.replace_all(tasks)
        self.current_path = Path(path)
        skipped = len(self.timeline.layout_data.anomalies)
        message = f"Loaded {len(tasks)} tasks from {path}"
        if skipped:
            message += f" ({skipped} unreadable tasks skipped)"
        self.statusBar().showMessage(message, _STATUS_MESSAGE_MS)

    # Menu actions ------------------------------------------------------
    def action_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(self, "Open tasks", filter="CSV Files (*.csv)")
        if not path:
            return
        try:
            self.open_path(path)
        except (OSError, ValueError) as exc:  # pragma: no cover - interactive guard
            QMessageBox.critical(self, "Open failed", str(exc))

    def action_save(self) -> None:
        if not self.current_path:
            path, _ = QFileDialog.getSaveFileName(self, "Save tasks", filter="CSV Files (*.csv)")
            if not path:
                return
            self.current_path = Path(path)
        save_tasks_csv(self.current_path, self.store.tasks)
        self.statusBar().showMessage(f"Saved to {self.current_path}", _STATUS_MESSAGE_MS)

    def action_export(self) -> None:
        path, selected_filter = QFileDialog.getSaveFileName(
            self,
            "Export timeline",
            filter="CSV Files (*.csv);;PDF Files (*.pdf)",
        )
        if not path:
            return
        layout = self.timeline.layout_data
        if path.lower().endswith(".pdf") or "PDF" in selected_filter:
            export_as_pdf(path, layout, title=self.windowTitle())
            self.statusBar().showMessage(f"Exported PDF to {path}", _STATUS_MESSAGE_MS)
        else:
            export_as_csv(path, layout)
            self.statusBar().showMessage(f"Exported CSV to {path}", _STATUS_MESSAGE_MS)

    # Sinks -------------------------------------------------------------
    def _show_tasks(self, tasks: List[Dict[str, Any]]) -> None:
        self.timeline.set_tasks(tasks)
        self._update_critical_banner(self.timeline.now_minute)

    def _handle_reorder(self, dragged_id: str, target_id: str) -> None:
        try:
            self.store.reorder(dragged_id, target_id)
        except (KeyError, ValueError) as exc:
            logger.error("Reorder %s -> %s failed: %s", dragged_id, target_id, exc)
            self.statusBar().showMessage(f"Could not reorder: {exc}", _STATUS_MESSAGE_MS)

    def _handle_status_change(self, task_id: str, status: str) -> None:
        try:
            self.store.update_status(task_id, status)
        except KeyError:
            logger.error("Status change for unknown task %s", task_id)

    def _handle_edit(self, task_id: str) -> None:
        """Ask for a new title and hand it to the store."""
        task = self.timeline.layout_data.task_for(task_id)
        if task is None:
            return
        text, accepted = QInputDialog.getText(
            self,
            "Edit task",
            task_time_range(task.start_minute, task.duration_minutes),
            text=str(task.payload.get("text", "")),
        )
        text = text.strip()
        if not accepted or not text:
            return
        try:
            self.store.update_text(task_id, text)
        except KeyError:
            logger.error("Edit for unknown task %s", task_id)

    def _scroll_to(self, top: int) -> None:
        self.scroll.ensureVisible(0, top, 0, self.scroll.viewport().height() // 3)

    def _update_critical_banner(self, now_minute: int) -> None:
        """Point the status-bar button at the nearest critical task."""
        upcoming = critical_upcoming(self.timeline.layout_data.tasks, now_minute)
        if not upcoming:
            self._critical_task_id = None
            self.critical_button.hide()
            return
        task, diff = upcoming[0]
        self._critical_task_id = task.id
        text = task.payload.get("text", task.id)
        self.critical_button.setText(
            f"Critical: {text} {format_minutes(task.start_minute)} ({format_relative(diff)})"
        )
        self.critical_button.show()

    def focus_critical_task(self) -> bool:
        """Scroll to and flash the task named on the critical button."""
        if self._critical_task_id is None:
            return False
        return self.timeline.highlight_task(self._critical_task_id)

    def closeEvent(self, event: QCloseEvent) -> None:  # pragma: no cover - requires UI
        self._unsubscribe()
        self.timeline.shutdown()
        event.accept()


def run() -> None:
    """Entry point used by the `day-timeline` script."""
    logging.basicConfig(level=logging.INFO)
    app = QApplication(sys.argv)
    window = MainWindow()
    if len(sys.argv) > 1:
        window.open_path(sys.argv[1])
    window.show()
    app.exec()


if __name__ == "__main__":
    run()
