from day_timeline.config import TimelineConfig
from day_timeline.layout import compute_layout
from day_timeline.markers import marker_candidates, select_markers

CONFIG = TimelineConfig(start_hour=8, end_hour=22)
RAW = [
    {"id": "a", "time": "09:00", "duration": 60},
    {"id": "b", "time": "09:30", "duration": 60},
]


def test_labels_cover_window_gaps_and_leftmost_tasks() -> None:
    layout = compute_layout(RAW, CONFIG)

    assert [marker.label for marker in layout.markers] == ["08:00", "09:00", "10:30", "22:00"]
    assert [marker.top for marker in layout.markers] == [0, 32, 212, 260]


def test_task_in_right_column_does_not_get_a_start_label() -> None:
    layout = compute_layout(RAW, CONFIG)
    candidates = marker_candidates(layout.segments, layout.layouts, CONFIG)

    assert 570 not in candidates
    assert 540 in candidates


def test_filler_and_break_only_contribute_whole_hours() -> None:
    config = TimelineConfig(start_hour=8, end_hour=10, min_label_spacing=0)
    layout = compute_layout([{"id": "a", "time": "08:20", "duration": 10}, {"id": "b", "time": "09:40", "duration": 20}], config)
    candidates = marker_candidates(layout.segments, layout.layouts, config)

    # 08:30-09:40 is a 70 minute short break: only 09:00 inside it is labelled.
    assert candidates == [480, 500, 540, 580, 600]


def test_labels_closer_than_spacing_are_dropped() -> None:
    config = TimelineConfig(start_hour=8, end_hour=22, min_label_spacing=40)
    layout = compute_layout(RAW, config)

    assert [marker.label for marker in layout.markers] == ["08:00", "10:30", "22:00"]


def test_selection_is_idempotent() -> None:
    layout = compute_layout(RAW + [{"id": "c", "time": "13:05", "duration": 5}], CONFIG)

    first = select_markers(layout.segments, layout.layouts, layout.mapper, CONFIG)
    second = select_markers(layout.segments, layout.layouts, layout.mapper, CONFIG)

    assert first == second
    tops = [marker.top for marker in first]
    assert all(b - a >= CONFIG.min_label_spacing for a, b in zip(tops, tops[1:]))


def test_twelve_hour_mode_relabels_whole_hours_only() -> None:
    config = TimelineConfig(start_hour=8, end_hour=22, twelve_hour_labels=True)
    layout = compute_layout(RAW, config)

    assert [marker.label for marker in layout.markers] == ["8am", "9am", "10:30", "10pm"]
    assert [marker.top for marker in layout.markers] == [0, 32, 212, 260]
