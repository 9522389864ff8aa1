"""Minimal HTML generation and regex-based stripping."""

from __future__ import annotations

import re

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

_UNESCAPES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&#039;": "'",
}

_ESCAPE_RE = re.compile(r"[&<>\"']")
# Single pass, so "&amp;lt;" decodes to "&lt;" and not "<"
_UNESCAPE_RE = re.compile("|".join(re.escape(entity) for entity in _UNESCAPES))
_SCRIPT_RE = re.compile(r"<script\b.*?</script\s*>", re.IGNORECASE | re.DOTALL)
_STYLE_RE = re.compile(r"<style\b.*?</style\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")

_BASE_CSS = """\
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
            color: #333;
        }"""

_PRE_CSS = """
        pre {
            white-space: pre-wrap;
            word-wrap: break-word;
            background: #f5f5f5;
            padding: 15px;
            border-radius: 5px;
            border-left: 4px solid #007bff;
        }"""

_TABLE_CSS = """\
        body {
            font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif;
            margin: 20px;
            color: #333;
        }
        table {
            border-collapse: collapse;
            width: 100%;
            margin: 20px 0;
        }
        th, td {
            border: 1px solid #ddd;
            padding: 8px;
            text-align: left;
        }
        th {
            background-color: #f2f2f2;
            font-weight: bold;
        }
        tr:nth-child(even) {
            background-color: #f9f9f9;
        }"""


def escape_html(text: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def unescape_html(text: str) -> str:
    """Decode the handful of entities the engine understands; others are left alone."""
    return _UNESCAPE_RE.sub(lambda m: _UNESCAPES[m.group(0)], text)


def strip_html(markup: str) -> str:
    """
    Reduce markup to plain text.

    Drops <script> and <style> blocks, then every remaining tag, decodes
    entities and collapses whitespace. This is an approximation that is only
    reliable for well-formed, simple markup.
    """
    text = _SCRIPT_RE.sub("", markup)
    text = _STYLE_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    text = unescape_html(text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def _page(title: str, css: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape_html(title)}</title>
    <style>
{css}
    </style>
</head>
<body>
{body}
</body>
</html>
"""


def text_page(text: str) -> str:
    """Page holding escaped plain text in a <pre> block."""
    body = f"    <h1>Converted Text Document</h1>\n    <pre>{escape_html(text)}</pre>"
    return _page("Converted Document", _BASE_CSS + _PRE_CSS, body)


def document_page(fragment: str) -> str:
    """Page holding ready-made markup fragments."""
    return _page("Converted Document", _BASE_CSS, fragment)


def table_page(rows: list[list[str]], heading: str = "Converted Spreadsheet") -> str:
    body = f"    <h1>{escape_html(heading)}</h1>\n{table_html(rows)}"
    return _page(heading, _TABLE_CSS, body)


def table_html(rows: list[list[str]]) -> str:
    """Render rows as a <table>; the first row becomes header cells."""
    lines = ["    <table>"]
    for index, row in enumerate(rows):
        tag = "th" if index == 0 else "td"
        cells = "".join(f"<{tag}>{escape_html(cell)}</{tag}>" for cell in row)
        lines.append(f"        <tr>{cells}</tr>")
    lines.append("    </table>")
    return "\n".join(lines)
