from pathlib import Path
import csv

from day_timeline.config import TimelineConfig
from day_timeline.exporters import export_as_csv, export_as_pdf
from day_timeline.layout import compute_layout


def test_export_csv_lists_card_geometry(tmp_path: Path) -> None:
    path = tmp_path / "export.csv"
    layout = compute_layout(
        [
            {"id": "a", "time": "09:00", "duration": 60},
            {"id": "b", "time": "09:30", "duration": 60},
            {"id": "broken", "time": "9h", "duration": 60},
        ],
        TimelineConfig(start_hour=8, end_hour=22),
    )

    export_as_csv(path, layout)

    with path.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))

    assert rows[0] == ["Task", "Start", "End", "Top", "Height", "Left %", "Width %", "Z"]
    assert rows[1] == ["a", "09:00", "10:00", "32.0", "120.0", "0.0", "50.0", "1"]
    assert rows[2] == ["b", "09:30", "10:30", "92.0", "120.0", "50.0", "50.0", "2"]
    assert len(rows) == 3


def test_export_pdf_writes_a_file(qapp, tmp_path: Path) -> None:
    path = tmp_path / "day" / "timeline.pdf"
    layout = compute_layout([{"id": "a", "time": "09:00", "duration": 60, "text": "Bake"}])

    export_as_pdf(path, layout, title="Saturday")

    assert path.exists()
    assert path.read_bytes().startswith(b"%PDF")
