"""Export helpers for CSV and PDF."""
from __future__ import annotations

import csv
from pathlib import Path

from PyQt6.QtCore import Qt, QRectF
from PyQt6.QtGui import QColor, QFont, QPageLayout, QPageSize, QPainter, QPdfWriter

from .models import TimelineLayout
from .render import paint_timeline
from .timeindex import format_minutes

CSV_HEADERS = ["Task", "Start", "End", "Top", "Height", "Left %", "Width %", "Z"]

PDF_PAGE_MARGIN_RATIO = 0.04
PDF_TITLE_HEIGHT = 60
PDF_FONT_SIZE = 10
PDF_CONTENT_WIDTH = 520


def export_as_csv(path: Path | str, layout: TimelineLayout) -> None:
    """Export the computed card geometry, one row per task."""
    csv_path = Path(path)
    csv_path.parent.mkdir(parents=True, exist_ok=True)

    with csv_path.open("w", newline="", encoding="utf-8") as handle:
        writer = csv.writer(handle)
        writer.writerow(CSV_HEADERS)
        for item in layout.layouts:
            task = layout.task_for(item.task_id)
            if task is None:
                continue
            writer.writerow([
                task.id,
                format_minutes(task.start_minute),
                format_minutes(task.end_minute),
                f"{item.top:.1f}",
                f"{item.height:.1f}",
                f"{item.left_percent:.1f}",
                f"{item.width_percent:.1f}",
                item.z_index,
            ])


def export_as_pdf(path: Path | str, layout: TimelineLayout, *, title: str = "") -> None:
    """Render the day timeline onto a single portrait A4 page."""
    pdf_path = Path(path)
    pdf_path.parent.mkdir(parents=True, exist_ok=True)

    writer = QPdfWriter(str(pdf_path))
    writer.setPageSize(QPageSize(QPageSize.PageSizeId.A4))
    writer.setPageOrientation(QPageLayout.Orientation.Portrait)
    writer.setResolution(300)

    painter = QPainter(writer)
    _draw_pdf_page(painter, writer, layout, title)
    painter.end()


def _draw_pdf_page(painter: QPainter, writer: QPdfWriter, layout: TimelineLayout, title: str) -> None:
    page_rect = writer.pageLayout().paintRectPixels(writer.resolution())
    margin = int(page_rect.width() * PDF_PAGE_MARGIN_RATIO)
    content_rect = page_rect.adjusted(margin, margin, -margin, -margin)

    font = QFont(painter.font())
    font.setPointSize(PDF_FONT_SIZE)
    painter.setFont(font)
    painter.setPen(QColor("#333333"))
    header_rect = QRectF(content_rect.left(), content_rect.top(), content_rect.width(), PDF_TITLE_HEIGHT)
    painter.drawText(header_rect, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignVCenter, title)

    # Draw in screen units, then scale the whole timeline to fit the page.
    available_height = content_rect.height() - PDF_TITLE_HEIGHT
    scale = content_rect.width() / PDF_CONTENT_WIDTH
    if layout.total_height > 0:
        scale = min(scale, available_height / layout.total_height)
    painter.save()
    painter.translate(content_rect.left(), content_rect.top() + PDF_TITLE_HEIGHT)
    painter.scale(scale, scale)
    paint_timeline(painter, layout, PDF_CONTENT_WIDTH)
    painter.restore()

    if not layout.tasks:
        painter.drawText(header_rect, Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter, "No tasks scheduled")
