"""CSV task source for the day timeline."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List
import csv


TASK_HEADER = ["id", "time", "duration", "text", "employee", "status", "is_critical"]


def save_tasks_csv(path: Path | str, tasks: Iterable[Dict[str, Any]]) -> None:
    """Persist raw task dicts to CSV."""
    csv_path = Path(path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    with csv_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(TASK_HEADER)
        for task in tasks:
            writer.writerow([
                task.get("id", ""),
                task.get("time") or "",
                _serialize_optional(task.get("duration", task.get("durationMinutes"))),
                task.get("text", ""),
                task.get("employee", ""),
                task.get("status", "todo"),
                int(bool(task.get("is_critical"))),
            ])


def load_tasks_csv(path: Path | str) -> List[Dict[str, Any]]:
    """Load raw task dicts from CSV.

    Times and durations are passed through as text; the layout pass decides
    which of them are usable.
    """
    csv_path = Path(path)
    with csv_path.open("r", newline="", encoding="utf-8") as handle:
        reader = csv.reader(handle)
        header = next(reader, None)
        if header != TASK_HEADER:
            raise ValueError("Invalid timeline CSV: missing task header")

        tasks: List[Dict[str, Any]] = []
        for row in reader:
            if len(row) < len(TASK_HEADER):
                continue
            task_id, time, duration, text, employee, status, critical = row[: len(TASK_HEADER)]
            if not task_id.strip():
                continue
            tasks.append({
                "id": task_id.strip(),
                "time": time.strip() or None,
                "duration": duration.strip() or None,
                "text": text,
                "employee": employee,
                "status": status or "todo",
                "is_critical": _parse_flag(critical),
            })
        return tasks


def _serialize_optional(value: Any) -> str:
    return "" if value is None else str(value)


def _parse_flag(value: str) -> bool:
    text = value.strip() if value is not None else ""
    try:
        return bool(int(text))
    except ValueError:
        return text.lower() in ("true", "yes")
