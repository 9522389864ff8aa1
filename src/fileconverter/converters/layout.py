"""Word-wrap and pagination for rendering plain text onto fixed-size PDF pages."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from .errors import EncodingError

logger = logging.getLogger(__name__)

LINE_HEIGHT_FACTOR = 1.2
# Approximate average glyph width relative to the font size
CHAR_WIDTH_FACTOR = 0.6
DEFAULT_MARGIN = 50.0
FONT_NAME = "Helvetica"
ROW_FIT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class PageLayout:
    """Page geometry and font size for paginated text output."""

    page_width: float = A4[0]
    page_height: float = A4[1]
    margin: float = DEFAULT_MARGIN
    font_size: float = 12.0

    @property
    def line_height(self) -> float:
        return self.font_size * LINE_HEIGHT_FACTOR

    @property
    def char_budget(self) -> int:
        return math.floor((self.page_width - 2 * self.margin) / (self.font_size * CHAR_WIDTH_FACTOR))

    @property
    def lines_per_page(self) -> int:
        return rows_per_page(self.page_height, self.margin, self.line_height)


def rows_per_page(page_height: float, margin: float, line_height: float) -> int:
    """Whole lines that fit between the margins; at least one."""
    # Tolerance so that an exact fit like 84 / 8.4 is not lost to rounding
    return max(1, math.floor((page_height - 2 * margin) / line_height + ROW_FIT_TOLERANCE))


class PlacedLine(NamedTuple):
    text: str
    y: float


def wrap(lines: list[str], char_budget: int) -> list[str]:
    """
    Greedily wrap lines to at most char_budget characters.

    Lines that already fit are kept as they are, including empty ones, and
    an over-long line of only whitespace becomes an empty line.
    A single word longer than the budget is emitted whole on its own line.
    """
    wrapped: list[str] = []
    for line in lines:
        if len(line) <= char_budget:
            wrapped.append(line)
            continue

        words = line.split()
        if not words:
            wrapped.append("")
            continue

        current = ""
        for word in words:
            if not current:
                current = word
            elif len(current + " " + word) <= char_budget:
                current = current + " " + word
            else:
                wrapped.append(current)
                current = word
        if current:
            wrapped.append(current)
    return wrapped


def paginate(lines: list[str], page_height: float, margin: float, line_height: float) -> list[list[PlacedLine]]:
    """
    Assign each display line a page and a baseline y position.

    A page holds rows_per_page() lines, counted from the top margin down,
    so N lines always take ceil(N / rows) pages.
    """
    top = page_height - margin
    capacity = rows_per_page(page_height, margin, line_height)
    pages: list[list[PlacedLine]] = []
    current: list[PlacedLine] | None = None
    row = 0
    for line in lines:
        if current is None or row >= capacity:
            current = []
            pages.append(current)
            row = 0
        current.append(PlacedLine(line, top - row * line_height))
        row += 1
    return pages


def render_pdf(lines: list[str], output_path: Path, layout: PageLayout) -> int:
    """Wrap, paginate and draw lines into a PDF file. Returns the page count."""
    display_lines = wrap(lines, layout.char_budget)
    pages = paginate(display_lines, layout.page_height, layout.margin, layout.line_height)

    try:
        pdf = canvas.Canvas(str(output_path), pagesize=(layout.page_width, layout.page_height))
        for page in pages:
            pdf.setFont(FONT_NAME, layout.font_size)
            for placed in page:
                pdf.drawString(layout.margin, placed.y, placed.text)
            pdf.showPage()
        if not pages:
            pdf.showPage()
        pdf.save()
    except (OSError, ValueError, UnicodeError) as e:
        raise EncodingError(f"PDF rendering failed: {e}") from e

    logger.debug("Rendered %d line(s) on %d page(s) to %s", len(display_lines), len(pages), output_path.name)
    return max(len(pages), 1)
