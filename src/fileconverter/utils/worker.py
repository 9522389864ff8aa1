"""Background worker that runs a conversion batch off the caller's thread."""

import logging
import threading
from collections.abc import Callable, Sequence
from pathlib import Path

from fileconverter.converters.base import ConversionRequest
from fileconverter.services.batch_service import BatchService, BatchSummary, ProgressCallback

logger = logging.getLogger(__name__)


class BatchWorker:
    """Runs one batch at a time in a daemon thread and can cancel it between files."""

    def __init__(self, service: BatchService | None = None) -> None:
        self._service = service or BatchService()
        self._thread: threading.Thread | None = None
        self._cancel_event = threading.Event()

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def cancel_event(self) -> threading.Event:
        return self._cancel_event

    def start(
        self,
        requests: Sequence[ConversionRequest],
        on_progress: ProgressCallback | None = None,
        on_complete: Callable[[BatchSummary], None] | None = None,
        on_error: Callable[[Exception], None] | None = None,
        log_file: Path | None = None,
    ) -> bool:
        """Start converting requests. Returns False if a batch is already running."""
        if self.is_running:
            logger.warning("Worker is already running, ignoring new batch")
            return False

        self._cancel_event.clear()
        batch = tuple(requests)

        def _target() -> None:
            try:
                summary = self._service.convert_batch(
                    batch, on_progress=on_progress, cancel_event=self._cancel_event, log_file=log_file
                )
                if on_complete:
                    on_complete(summary)
            except Exception as e:
                logger.error("Background batch failed: %s", e)
                if on_error:
                    on_error(e)

        self._thread = threading.Thread(target=_target, daemon=True)
        self._thread.start()
        return True

    def cancel(self) -> None:
        """Ask the running batch to stop before its next file."""
        self._cancel_event.set()

    def wait(self, timeout: float | None = None) -> None:
        """Wait for the background thread to complete."""
        if self._thread is not None:
            self._thread.join(timeout=timeout)
