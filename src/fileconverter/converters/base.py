"""Base classes and data models for the conversion pipelines."""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import chardet
from pydantic import BaseModel, ConfigDict, Field

from .errors import ConversionIOError
from .registry import FormatCategory, normalize_format, output_path_for

logger = logging.getLogger(__name__)


class ConversionOptions(BaseModel):
    """User-tunable options applied to a single conversion."""

    model_config = ConfigDict(frozen=True)

    quality: int = Field(default=90, ge=1, le=100)
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)

    @property
    def wants_resize(self) -> bool:
        return self.width is not None or self.height is not None


@dataclass(frozen=True)
class ConversionRequest:
    """One file to convert. Immutable once created."""

    source_path: Path
    target_format: str
    output_path: Path
    options: ConversionOptions = field(default_factory=ConversionOptions)

    def __post_init__(self) -> None:
        object.__setattr__(self, "source_path", Path(self.source_path))
        object.__setattr__(self, "output_path", Path(self.output_path))
        object.__setattr__(self, "target_format", normalize_format(self.target_format))

    @classmethod
    def create(
        cls,
        source: str | Path,
        target_format: str,
        output_dir: str | Path | None = None,
        options: ConversionOptions | None = None,
    ) -> ConversionRequest:
        """Build a request whose output path is derived from the source name."""
        return cls(
            source_path=Path(source),
            target_format=target_format,
            output_path=output_path_for(source, target_format, output_dir),
            options=options or ConversionOptions(),
        )

    @property
    def source_format(self) -> str:
        return normalize_format(self.source_path.suffix)


@dataclass
class ConversionResult:
    """Outcome of converting one file."""

    source_path: Path
    success: bool
    output_path: Path | None = None
    error: str | None = None
    cause: Exception | None = field(default=None, repr=False, compare=False)
    duration_seconds: float = 0.0


# Handler signature: (request, path to write the output to) -> None
Handler = Callable[[ConversionRequest, Path], None]


def read_source(path: Path) -> bytes:
    """Read a whole source file into memory."""
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise ConversionIOError(f"Failed to read file {path}: {e.strerror or e}") from e


def decode_text(raw_bytes: bytes) -> str:
    """Decode text as UTF-8, falling back to chardet detection."""
    try:
        return raw_bytes.decode("utf-8")
    except UnicodeDecodeError:
        encoding = chardet.detect(raw_bytes)["encoding"] or "latin-1"
        logger.debug("Input is not UTF-8, decoding as %s", encoding)
        return raw_bytes.decode(encoding, errors="replace")


def read_text(path: Path) -> str:
    return decode_text(read_source(path))


def write_text(path: Path, content: str) -> None:
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConversionIOError(f"Failed to write file {path}: {e.strerror or e}") from e


@contextmanager
def staged_output(final_path: Path) -> Iterator[Path]:
    """
    Yield a staging path for the output and move it into place on success.

    The staging directory lives next to the final output and is always
    removed, so a failed conversion leaves no partial file behind.
    """
    try:
        final_path.parent.mkdir(parents=True, exist_ok=True)
        staging_dir = Path(tempfile.mkdtemp(prefix=".fileconverter_", dir=final_path.parent))
    except OSError as e:
        raise ConversionIOError(f"Failed to prepare output directory {final_path.parent}: {e}") from e

    try:
        staged = staging_dir / final_path.name
        yield staged
        if not staged.exists():
            raise ConversionIOError(f"No output was produced for {final_path.name}")
        try:
            os.replace(staged, final_path)
        except OSError as e:
            raise ConversionIOError(f"Failed to write file {final_path}: {e}") from e
    finally:
        try:
            shutil.rmtree(staging_dir)
        except OSError as e:
            logger.warning("Failed to cleanup staging dir %s: %s", staging_dir, e)


def execute(handler: Handler, request: ConversionRequest) -> ConversionResult:
    """Run a handler against a staged output and time it."""
    t0 = time.time()
    with staged_output(request.output_path) as staged:
        handler(request, staged)
    return ConversionResult(
        source_path=request.source_path,
        success=True,
        output_path=request.output_path,
        duration_seconds=round(time.time() - t0, 3),
    )


class BaseConverter(ABC):
    """Abstract base class for the per-category pipelines."""

    category: FormatCategory = FormatCategory.UNKNOWN

    @abstractmethod
    def handlers(self) -> dict[tuple[str, str], Handler]:
        """Map each (source, target) pair this pipeline serves to its handler."""
        ...
