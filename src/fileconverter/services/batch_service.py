"""Batch conversion service: converts files one after another with progress reporting."""

import fnmatch
import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from fileconverter.converters.base import ConversionOptions, ConversionRequest, ConversionResult
from fileconverter.converters.errors import ConversionFailed, ConverterError
from fileconverter.converters.registry import supported_extensions
from fileconverter.converters.universal_converter import UniversalConverter
from fileconverter.utils.conversion_log import append_log, finalize_log

logger = logging.getLogger(__name__)

# Type alias for progress callback: (current, total, filename, status)
ProgressCallback = Callable[[int, int, str, str], None]


@dataclass
class BatchSummary:
    """Ordered per-file results of one batch."""

    total: int
    results: list[ConversionResult] = field(default_factory=list)
    skipped: int = 0
    cancelled: bool = False

    @property
    def success(self) -> int:
        return sum(1 for r in self.results if r.success)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.success)

    @property
    def message(self) -> str:
        if self.total and self.success == self.total:
            return f"All {self.total} files converted successfully!"
        return f"{self.success} of {self.total} files converted successfully."

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "success": self.success,
            "failed": self.failed,
            "skipped": self.skipped,
            "cancelled": self.cancelled,
            "errors": [f"{r.source_path.name}: {r.error}" for r in self.results if not r.success],
        }


def build_requests(
    sources: Iterable[str | Path],
    target_format: str,
    output_dir: str | Path | None = None,
    options: ConversionOptions | None = None,
) -> tuple[ConversionRequest, ...]:
    """Build an immutable batch of requests sharing one target format and option set."""
    options = options or ConversionOptions()
    return tuple(ConversionRequest.create(src, target_format, output_dir, options) for src in sources)


def collect_files(source_dir: str, patterns: list[str] | None = None) -> list[Path]:
    """Collect files matching the given glob patterns (default: every supported extension)."""
    source = Path(source_dir)
    if not source.is_dir():
        return []

    patterns = patterns or [f"*{ext}" for ext in supported_extensions()]
    matched: list[Path] = []
    for item in sorted(source.iterdir()):
        if not item.is_file():
            continue
        if any(fnmatch.fnmatch(item.name.lower(), pattern.lower()) for pattern in patterns):
            matched.append(item)
    return matched


class BatchService:
    """Runs a batch of conversion requests strictly in order."""

    def __init__(self, converter: UniversalConverter | None = None) -> None:
        self._converter = converter or UniversalConverter()
        self._cancelled = False

    def cancel(self) -> None:
        """Signal cancellation; takes effect before the next file starts, or before the first."""
        self._cancelled = True

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def convert_one(self, request: ConversionRequest) -> ConversionResult:
        """Convert one request, turning engine errors into a failed result."""
        try:
            return self._converter.convert(request)
        except ConverterError as e:
            cause = e.cause if isinstance(e, ConversionFailed) else e
            return ConversionResult(source_path=request.source_path, success=False, error=str(e), cause=cause)

    def convert_batch(
        self,
        requests: Sequence[ConversionRequest],
        on_progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
        log_file: Path | None = None,
    ) -> BatchSummary:
        """
        Convert every request in order.

        A failing file is recorded and the batch moves on. Cancellation is
        checked between files; results gathered so far are returned and the
        remaining files count as skipped. A cancel() issued before the batch
        starts applies to it; the flag is cleared once the batch ends.
        """
        total = len(requests)
        summary = BatchSummary(total=total)

        try:
            for i, request in enumerate(requests):
                if self._cancelled or (cancel_event is not None and cancel_event.is_set()):
                    summary.cancelled = True
                    summary.skipped = total - i
                    logger.info("Batch cancelled, skipping %d file(s)", summary.skipped)
                    if on_progress:
                        on_progress(i, total, "", "cancelled")
                    break

                filename = request.source_path.name
                if on_progress:
                    on_progress(i, total, filename, "converting")

                result = self.convert_one(request)
                summary.results.append(result)

                if result.success:
                    status = "success"
                    message = f"OK {filename} -> {result.output_path}"
                else:
                    status = "error"
                    message = f"FAILED {filename}: {result.error}"
                    logger.error("Conversion failed for %s: %s", filename, result.error)
                if log_file is not None:
                    append_log(log_file, message)
                if on_progress:
                    on_progress(i + 1, total, filename, status)
        finally:
            self._cancelled = False

        if log_file is not None:
            finalize_log(log_file, summary.to_dict())
        logger.info(summary.message)
        return summary
