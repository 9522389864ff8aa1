"""Plain text, HTML and DOCX conversions."""

from __future__ import annotations

import io
import logging
import re
import zipfile
from pathlib import Path

from docx import Document
from docx.document import Document as DocxDocument
from docx.opc.exceptions import PackageNotFoundError
from docx.table import Table
from docx.text.hyperlink import Hyperlink
from docx.text.paragraph import Paragraph

from .base import BaseConverter, ConversionRequest, Handler, read_source, read_text, write_text
from .errors import EncodingError, UnimplementedFeature
from .layout import PageLayout, render_pdf
from .markup import document_page, escape_html, strip_html, table_html, text_page
from .registry import FormatCategory

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^Heading (\d)$")


def load_docx(path: Path) -> DocxDocument:
    raw = read_source(path)
    try:
        return Document(io.BytesIO(raw))
    except (PackageNotFoundError, zipfile.BadZipFile, KeyError, ValueError) as e:
        raise EncodingError(f"Invalid DOCX file {path.name}: {e}") from e


def docx_text(document: DocxDocument) -> str:
    """Raw text of the body in document order, one blank line between blocks."""
    blocks: list[str] = []
    for block in document.iter_inner_content():
        if isinstance(block, Table):
            blocks.append("\n".join("\t".join(cell.text for cell in row.cells) for row in block.rows))
        else:
            blocks.append(block.text)
    return "\n\n".join(blocks)


def _inline_html(paragraph: Paragraph) -> str:
    parts: list[str] = []
    for item in paragraph.iter_inner_content():
        if isinstance(item, Hyperlink):
            text = escape_html(item.text)
            parts.append(f'<a href="{escape_html(item.url)}">{text}</a>' if item.url else text)
            continue
        text = escape_html(item.text)
        if not text:
            continue
        if item.italic:
            text = f"<em>{text}</em>"
        if item.bold:
            text = f"<strong>{text}</strong>"
        parts.append(text)
    return "".join(parts)


def _style_name(paragraph: Paragraph) -> str:
    style = paragraph.style
    return style.name if style is not None and style.name else ""


def _block_tag(paragraph: Paragraph) -> str:
    name = _style_name(paragraph)
    if name == "Title":
        return "h1"
    match = _HEADING_RE.match(name)
    if match:
        return f"h{min(max(int(match.group(1)), 1), 6)}"
    return "p"


def _list_tag(paragraph: Paragraph) -> str | None:
    name = _style_name(paragraph)
    if name.startswith("List Number"):
        return "ol"
    if name.startswith("List Bullet") or name == "List Paragraph":
        return "ul"
    return None


def docx_html(document: DocxDocument) -> str:
    """Convert the body into markup fragments (headings, paragraphs, lists, tables)."""
    parts: list[str] = []
    open_list: str | None = None

    for block in document.iter_inner_content():
        list_tag = _list_tag(block) if isinstance(block, Paragraph) else None
        if open_list and list_tag != open_list:
            parts.append(f"</{open_list}>")
            open_list = None

        if isinstance(block, Table):
            parts.append(table_html([[cell.text for cell in row.cells] for row in block.rows]))
            continue

        content = _inline_html(block)
        if not content:
            continue
        if list_tag:
            if open_list is None:
                parts.append(f"<{list_tag}>")
                open_list = list_tag
            parts.append(f"<li>{content}</li>")
        else:
            tag = _block_tag(block)
            parts.append(f"<{tag}>{content}</{tag}>")

    if open_list:
        parts.append(f"</{open_list}>")
    return "\n".join(parts)


class DocumentConverter(BaseConverter):
    """Converts between txt, html, docx and pdf, keyed by source format."""

    category = FormatCategory.DOCUMENT

    def __init__(self, layout: PageLayout | None = None) -> None:
        self.layout = layout or PageLayout()

    def handlers(self) -> dict[tuple[str, str], Handler]:
        return {
            ("txt", "html"): self.text_to_html,
            ("txt", "pdf"): self.text_to_pdf,
            ("txt", "docx"): self.unimplemented,
            ("html", "txt"): self.html_to_text,
            ("html", "pdf"): self.unimplemented,
            ("docx", "txt"): self.docx_to_text,
            ("docx", "html"): self.docx_to_html,
            ("docx", "pdf"): self.docx_to_pdf,
            ("pdf", "txt"): self.unimplemented,
            ("pdf", "html"): self.unimplemented,
        }

    def text_to_html(self, request: ConversionRequest, output: Path) -> None:
        write_text(output, text_page(read_text(request.source_path)))

    def text_to_pdf(self, request: ConversionRequest, output: Path) -> None:
        pages = render_pdf(read_text(request.source_path).split("\n"), output, self.layout)
        logger.debug("%s rendered on %d page(s)", request.source_path.name, pages)

    def html_to_text(self, request: ConversionRequest, output: Path) -> None:
        write_text(output, strip_html(read_text(request.source_path)))

    def docx_to_text(self, request: ConversionRequest, output: Path) -> None:
        write_text(output, docx_text(load_docx(request.source_path)))

    def docx_to_html(self, request: ConversionRequest, output: Path) -> None:
        write_text(output, document_page(docx_html(load_docx(request.source_path))))

    def docx_to_pdf(self, request: ConversionRequest, output: Path) -> None:
        text = docx_text(load_docx(request.source_path))
        render_pdf(text.split("\n"), output, self.layout)

    def unimplemented(self, request: ConversionRequest, output: Path) -> None:
        source, target = request.source_format, request.target_format
        if source == "pdf":
            raise UnimplementedFeature(f"PDF input conversion ({source} to {target}) is not implemented")
        raise UnimplementedFeature(f"{source.upper()} to {target.upper()} conversion is not implemented")
