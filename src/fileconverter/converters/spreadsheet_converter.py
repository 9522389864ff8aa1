"""CSV and XLSX conversions. Only the first worksheet of a workbook is used."""

from __future__ import annotations

import csv
import io
import logging
import zipfile
from pathlib import Path
from typing import Any

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from .base import BaseConverter, ConversionRequest, Handler, read_source, read_text, write_text
from .errors import ConversionIOError, EncodingError
from .layout import PageLayout, render_pdf
from .markup import table_page
from .registry import FormatCategory

logger = logging.getLogger(__name__)

CELL_SEPARATOR = " | "


def _cell_text(value: Any) -> str:
    return "" if value is None else str(value)


def read_first_sheet(path: Path) -> list[list[str]]:
    """Rows of the first worksheet as strings."""
    raw = read_source(path)
    try:
        wb = openpyxl.load_workbook(io.BytesIO(raw), data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise EncodingError(f"Invalid XLSX file {path.name}: {e}") from e

    if len(wb.worksheets) > 1:
        logger.info("%s has %d sheets, using only '%s'", path.name, len(wb.worksheets), wb.worksheets[0].title)
    ws = wb.worksheets[0]
    return [[_cell_text(v) for v in row] for row in ws.iter_rows(values_only=True)]


def rows_to_csv(rows: list[list[str]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def split_csv(text: str) -> list[list[str]]:
    """
    Split on newlines, then on commas.

    Quoted fields are not recognised, so a comma inside quotes still
    separates cells.
    """
    text = text.rstrip("\r\n")
    if not text:
        return []
    return [line.rstrip("\r").split(",") for line in text.split("\n")]


def non_empty_rows(text: str) -> list[list[str]]:
    """Trimmed cells of every row that is not blank."""
    return [[cell.strip() for cell in row] for row in split_csv(text) if ",".join(row).strip()]


def row_listing(text: str) -> list[str]:
    """One ' | '-joined line per non-empty row."""
    return [CELL_SEPARATOR.join(row) for row in non_empty_rows(text)]


class SpreadsheetConverter(BaseConverter):
    """Converts between csv, xlsx, html and a row-listing pdf."""

    category = FormatCategory.SPREADSHEET

    def __init__(self, layout: PageLayout | None = None) -> None:
        self.layout = layout or PageLayout(font_size=10.0)

    def handlers(self) -> dict[tuple[str, str], Handler]:
        return {
            ("xlsx", "csv"): self.xlsx_to_csv,
            ("xlsx", "html"): self.xlsx_to_html,
            ("xlsx", "pdf"): self.xlsx_to_pdf,
            ("csv", "xlsx"): self.csv_to_xlsx,
            ("csv", "html"): self.csv_to_html,
            ("csv", "pdf"): self.csv_to_pdf,
        }

    def xlsx_to_csv(self, request: ConversionRequest, output: Path) -> None:
        write_text(output, rows_to_csv(read_first_sheet(request.source_path)))

    def xlsx_to_html(self, request: ConversionRequest, output: Path) -> None:
        write_text(output, table_page(read_first_sheet(request.source_path), "Converted Spreadsheet"))

    def xlsx_to_pdf(self, request: ConversionRequest, output: Path) -> None:
        csv_text = rows_to_csv(read_first_sheet(request.source_path))
        render_pdf(row_listing(csv_text), output, self.layout)

    def csv_to_xlsx(self, request: ConversionRequest, output: Path) -> None:
        rows = split_csv(read_text(request.source_path))
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Sheet1"
        try:
            for row in rows:
                ws.append(row)
            wb.save(output)
        except OSError as e:
            raise ConversionIOError(f"Failed to write file {output}: {e}") from e
        except ValueError as e:
            raise EncodingError(f"Failed to build workbook: {e}") from e
        logger.debug("Wrote %d row(s) to %s", len(rows), output.name)

    def csv_to_html(self, request: ConversionRequest, output: Path) -> None:
        rows = non_empty_rows(read_text(request.source_path))
        write_text(output, table_page(rows, "Converted CSV Data"))

    def csv_to_pdf(self, request: ConversionRequest, output: Path) -> None:
        render_pdf(row_listing(read_text(request.source_path)), output, self.layout)
