"""Plain-text and PDF renderings of a breakdown for download."""
from __future__ import annotations

import io
from datetime import date
from typing import List, Optional, Sequence

from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

from taskbreakdown.services.plan_types import PlanUnit

TEXT_FILENAME = "task_breakdown.txt"
PDF_FILENAME = "task_breakdown.pdf"

PAGE_WIDTH = 600
PAGE_HEIGHT = 800
MARGIN_X = 50
MARGIN_Y = 50
FONT_SIZE = 12
LINE_HEIGHT = FONT_SIZE * 1.5
TASK_INDENT = 10
REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


def export_text(units: Sequence[PlanUnit]) -> str:
    lines: List[str] = ["Task Breakdown", ""]
    for unit in units:
        lines.append(unit.unit)
        lines.extend(f"  - {task}" for task in unit.tasks)
        lines.append("")
    return "\n".join(lines) + "\n"


class _PdfLayout:
    """Tracks the cursor and starts new pages when the current one is full."""

    def __init__(self, pdf: canvas.Canvas, generated_on: date) -> None:
        self.pdf = pdf
        self.generated_on = generated_on
        self.page_number = 0
        self.y = 0.0
        self._start_page()

    def _start_page(self) -> None:
        if self.page_number:
            self.pdf.showPage()
        self.page_number += 1
        self.pdf.setFillColorRGB(0, 0, 0)
        if self.page_number == 1:
            self.pdf.setFont(REGULAR_FONT, 20)
            self.pdf.drawString(MARGIN_X, PAGE_HEIGHT - 50, "Task Breakdown")
            self.pdf.setFont(REGULAR_FONT, 10)
            self.pdf.setFillColorRGB(0.5, 0.5, 0.5)
            self.pdf.drawString(MARGIN_X, PAGE_HEIGHT - 70, f"{self.generated_on:%B} {self.generated_on.day}, {self.generated_on.year}")
            self.pdf.setFillColorRGB(0, 0, 0)
            self.y = PAGE_HEIGHT - 100
        else:
            self.pdf.setFont(REGULAR_FONT, 14)
            self.pdf.drawString(MARGIN_X, PAGE_HEIGHT - 30, f"Task Breakdown (Page {self.page_number})")
            self.y = PAGE_HEIGHT - 60

    def ensure_space(self, lines: float) -> None:
        if self.y < MARGIN_Y + LINE_HEIGHT * lines:
            self._start_page()

    def write(self, text: str, *, font: str, indent: float = 0, advance: float = LINE_HEIGHT) -> None:
        self.pdf.setFont(font, FONT_SIZE)
        self.pdf.drawString(MARGIN_X + indent, self.y, text)
        self.y -= advance


def export_pdf(units: Sequence[PlanUnit], *, generated_on: Optional[date] = None) -> bytes:
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(PAGE_WIDTH, PAGE_HEIGHT))
    pdf.setTitle("Task Breakdown")
    layout = _PdfLayout(pdf, generated_on or date.today())
    header_width = PAGE_WIDTH - MARGIN_X * 2
    max_width = header_width - TASK_INDENT

    for unit in units:
        header_lines = simpleSplit(unit.unit, BOLD_FONT, FONT_SIZE, header_width) or [""]
        # header plus at least one task line
        layout.ensure_space(len(header_lines) + 2)
        for position, line in enumerate(header_lines):
            last = position == len(header_lines) - 1
            layout.write(line, font=BOLD_FONT, advance=LINE_HEIGHT * 1.5 if last else LINE_HEIGHT)
        for task in unit.tasks:
            wrapped = simpleSplit(task, REGULAR_FONT, FONT_SIZE, max_width - 10) or [""]
            for position, line in enumerate(wrapped):
                layout.ensure_space(1)
                prefix = "• " if position == 0 else "  "
                layout.write(prefix + line, font=REGULAR_FONT, indent=TASK_INDENT)
        layout.y -= LINE_HEIGHT * 0.5

    pdf.save()
    return buffer.getvalue()
