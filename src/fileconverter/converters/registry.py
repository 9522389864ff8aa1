"""Format capability matrix and category classification."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from types import MappingProxyType


class FormatCategory(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    SPREADSHEET = "spreadsheet"
    UNKNOWN = "unknown"


IMAGE_FORMATS = ("png", "jpg", "jpeg", "webp", "gif", "bmp", "tiff")
DOCUMENT_FORMATS = ("txt", "html", "docx", "pdf")
SPREADSHEET_FORMATS = ("xlsx", "csv")


def _build_matrix() -> MappingProxyType:
    matrix: dict[str, frozenset[str]] = {}
    for fmt in IMAGE_FORMATS:
        matrix[fmt] = frozenset(f for f in IMAGE_FORMATS if f != fmt) | {"pdf"}
    matrix.update(
        {
            "txt": frozenset({"pdf", "html", "docx"}),
            "html": frozenset({"pdf", "txt"}),
            "docx": frozenset({"pdf", "txt", "html"}),
            "pdf": frozenset({"txt", "html"}),
            "xlsx": frozenset({"csv", "pdf", "html"}),
            "csv": frozenset({"xlsx", "pdf", "html"}),
        }
    )
    return MappingProxyType(matrix)


# source format -> allowed target formats
FORMAT_CAPABILITIES = _build_matrix()


def normalize_format(fmt: str) -> str:
    """Lowercase a format name and strip a leading dot ('.PNG' -> 'png')."""
    return fmt.strip().lower().lstrip(".")


def is_supported(source: str, target: str) -> bool:
    """Return True if `target` is reachable from `source`."""
    targets = FORMAT_CAPABILITIES.get(normalize_format(source))
    return targets is not None and normalize_format(target) in targets


def classify(fmt: str) -> FormatCategory:
    fmt = normalize_format(fmt)
    if fmt in IMAGE_FORMATS:
        return FormatCategory.IMAGE
    if fmt in DOCUMENT_FORMATS:
        return FormatCategory.DOCUMENT
    if fmt in SPREADSHEET_FORMATS:
        return FormatCategory.SPREADSHEET
    return FormatCategory.UNKNOWN


def targets_for(source: str) -> list[str]:
    """Sorted list of target formats for a source format (empty if unknown)."""
    return sorted(FORMAT_CAPABILITIES.get(normalize_format(source), ()))


def supported_extensions() -> list[str]:
    """Return the source extensions accepted by the engine, with leading dots."""
    return [f".{fmt}" for fmt in FORMAT_CAPABILITIES]


def output_path_for(source: str | Path, target: str, output_dir: str | Path | None = None) -> Path:
    """Derive the output path: source stem + '.' + target, in output_dir or next to the source."""
    source = Path(source)
    directory = Path(output_dir) if output_dir else source.parent
    return directory / f"{source.stem}.{normalize_format(target)}"
