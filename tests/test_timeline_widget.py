from datetime import datetime

from PyQt6.QtCore import QEvent, QPoint, QPointF, Qt
from PyQt6.QtGui import QEventPoint, QTouchEvent
from PyQt6.QtTest import QTest
from PyQt6.QtWidgets import QApplication

from day_timeline.app import DayTimelineWidget
from day_timeline.config import TimelineConfig

CONFIG = TimelineConfig(start_hour=8, end_hour=22, highlight_duration_ms=20)
TASKS = [
    {"id": "a", "time": "09:00", "duration": 60, "text": "Bake", "status": "todo"},
    {"id": "c", "time": "11:00", "duration": 60, "text": "Deliver", "status": "inprogress"},
]


def _widget(clock=None) -> DayTimelineWidget:
    widget = DayTimelineWidget(CONFIG, clock=clock or (lambda: datetime(2026, 10, 18, 9, 30)))
    widget.resize(520, 800)
    widget.set_tasks(TASKS)
    return widget


def test_regions_follow_layout(qapp: QApplication) -> None:
    widget = _widget()

    regions = {region.task_id: region for region in widget.regions}
    assert regions["a"].x == 64
    assert regions["a"].y == 32
    assert regions["c"].y == 184
    widget.shutdown()


def test_drag_onto_other_task_emits_reorder(qapp: QApplication) -> None:
    widget = _widget()
    emitted = []
    widget.reorder_requested.connect(lambda dragged, target: emitted.append((dragged, target)))

    assert widget.begin_gesture(QPointF(70, 50))
    widget.move_gesture(QPointF(200, 200))
    assert widget.reorder.state.drop_target_id == "c"
    widget.end_gesture()

    assert emitted == [("a", "c")]
    assert not widget.reorder.is_dragging
    widget.shutdown()


def test_press_outside_handle_does_not_start_drag(qapp: QApplication) -> None:
    widget = _widget()

    assert not widget.begin_gesture(QPointF(300, 50))
    assert not widget.reorder.is_dragging
    widget.shutdown()


def test_release_over_empty_space_cancels(qapp: QApplication) -> None:
    widget = _widget()
    emitted = []
    widget.reorder_requested.connect(lambda dragged, target: emitted.append((dragged, target)))

    widget.begin_gesture(QPointF(70, 50))
    widget.move_gesture(QPointF(200, 200))
    widget.move_gesture(QPointF(200, 170))
    widget.end_gesture()

    assert emitted == []
    assert not widget.reorder.is_dragging
    widget.shutdown()


def test_target_deleted_mid_drag_is_not_emitted(qapp: QApplication) -> None:
    widget = _widget()
    emitted = []
    widget.reorder_requested.connect(lambda dragged, target: emitted.append((dragged, target)))

    widget.begin_gesture(QPointF(70, 50))
    widget.move_gesture(QPointF(200, 200))
    widget.set_tasks(TASKS[:1])
    widget.end_gesture()

    assert emitted == []
    widget.shutdown()


def test_now_line_tracks_clock(qapp: QApplication) -> None:
    now = {"value": datetime(2026, 10, 18, 9, 30)}
    widget = _widget(clock=lambda: now["value"])

    assert widget.now_line_position() == 92

    now["value"] = datetime(2026, 10, 18, 23, 30)
    widget.refresh_now()
    assert widget.now_minute == 1410
    assert widget.now_line_position() is None
    widget.shutdown()


def test_highlight_clears_after_timeout(qapp: QApplication) -> None:
    widget = _widget()
    scrolled = []
    widget.scroll_requested.connect(scrolled.append)

    assert widget.highlight_task("c")
    assert widget.highlighted_id == "c"
    assert widget.highlight_pending()
    assert scrolled == [184]

    QTest.qWait(100)

    assert widget.highlighted_id is None
    assert not widget.highlight_pending()
    widget.shutdown()


def test_highlight_unknown_task_is_ignored(qapp: QApplication) -> None:
    widget = _widget()

    assert not widget.highlight_task("missing")
    assert widget.highlighted_id is None
    widget.shutdown()


def test_malformed_tasks_are_left_off(qapp: QApplication) -> None:
    widget = _widget()
    widget.set_tasks(TASKS + [{"id": "bad", "time": "nine", "duration": 30}])

    assert [task.id for task in widget.layout_data.tasks] == ["a", "c"]
    assert widget.layout_data.anomalies[0]["id"] == "bad"
    widget.shutdown()


def test_widget_paints_offscreen(qapp: QApplication) -> None:
    widget = _widget()
    widget.highlight_task("a")

    image = widget.grab()

    assert not image.isNull()
    widget.shutdown()


def _touch(kind: QEvent.Type, state: QEventPoint.State, x: float, y: float) -> QTouchEvent:
    point = QEventPoint(1, state, QPointF(x, y), QPointF(x, y))
    return QTouchEvent(kind, None, Qt.KeyboardModifier.NoModifier, [point])


def test_status_button_click_requests_next_status(qapp: QApplication) -> None:
    widget = _widget()
    widget.show()
    emitted = []
    widget.status_change_requested.connect(lambda task_id, status: emitted.append((task_id, status)))

    QTest.mouseClick(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(505, 40))

    assert emitted == [("a", "inprogress")]
    assert not widget.reorder.is_dragging
    widget.shutdown()
    widget.close()


def test_status_button_on_done_task_emits_nothing(qapp: QApplication) -> None:
    widget = _widget()
    widget.set_tasks([dict(TASKS[0], status="done"), TASKS[1]])
    widget.show()
    emitted = []
    widget.status_change_requested.connect(lambda task_id, status: emitted.append((task_id, status)))

    QTest.mouseClick(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(505, 40))

    assert emitted == []
    widget.shutdown()
    widget.close()


def test_double_click_on_card_requests_edit(qapp: QApplication) -> None:
    widget = _widget()
    widget.show()
    edits = []
    statuses = []
    widget.edit_requested.connect(edits.append)
    widget.status_change_requested.connect(lambda task_id, status: statuses.append(task_id))

    QTest.mouseDClick(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(300, 60))

    assert edits == ["a"]
    assert statuses == []
    widget.shutdown()
    widget.close()


def test_mouse_drag_from_handle_emits_reorder(qapp: QApplication) -> None:
    widget = _widget()
    widget.show()
    emitted = []
    widget.reorder_requested.connect(lambda dragged, target: emitted.append((dragged, target)))

    QTest.mousePress(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(70, 50))
    assert widget.reorder.state.dragged_id == "a"
    QTest.mouseMove(widget, QPoint(200, 200))
    QTest.mouseRelease(widget, Qt.MouseButton.LeftButton, Qt.KeyboardModifier.NoModifier, QPoint(200, 200))

    assert emitted == [("a", "c")]
    assert not widget.reorder.is_dragging
    widget.shutdown()
    widget.close()


def test_touch_drag_emits_reorder_on_touch_end(qapp: QApplication) -> None:
    widget = _widget()
    emitted = []
    widget.reorder_requested.connect(lambda dragged, target: emitted.append((dragged, target)))

    assert widget.event(_touch(QEvent.Type.TouchBegin, QEventPoint.State.Pressed, 70, 50))
    widget.event(_touch(QEvent.Type.TouchUpdate, QEventPoint.State.Updated, 200, 200))
    assert widget.reorder.state.drop_target_id == "c"
    widget.event(_touch(QEvent.Type.TouchEnd, QEventPoint.State.Released, 200, 200))

    assert emitted == [("a", "c")]
    assert not widget.reorder.is_dragging
    widget.shutdown()


def test_touch_cancel_returns_to_idle(qapp: QApplication) -> None:
    widget = _widget()
    emitted = []
    widget.reorder_requested.connect(lambda dragged, target: emitted.append((dragged, target)))

    widget.event(_touch(QEvent.Type.TouchBegin, QEventPoint.State.Pressed, 70, 50))
    widget.event(_touch(QEvent.Type.TouchUpdate, QEventPoint.State.Updated, 200, 200))
    assert widget.reorder.is_dragging
    widget.event(QTouchEvent(QEvent.Type.TouchCancel))

    assert not widget.reorder.is_dragging
    assert widget.reorder.state.drop_target_id is None
    assert emitted == []
    widget.shutdown()
