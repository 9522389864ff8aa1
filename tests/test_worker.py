"""Tests for BatchWorker: background batches and cancellation."""

import threading
from unittest.mock import MagicMock

from fileconverter.services.batch_service import BatchService, BatchSummary, build_requests
from fileconverter.utils.worker import BatchWorker


def make_requests(tmp_path, count=3):
    sources = []
    for i in range(count):
        path = tmp_path / f"f{i}.txt"
        path.write_text(f"file {i}", encoding="utf-8")
        sources.append(path)
    return build_requests(sources, "html", tmp_path / "out")


def test_runs_batch_and_reports_summary(tmp_path):
    worker = BatchWorker()
    done = []
    assert worker.start(make_requests(tmp_path), on_complete=done.append)
    worker.wait(timeout=30)

    assert not worker.is_running
    assert len(done) == 1
    assert isinstance(done[0], BatchSummary)
    assert done[0].success == 3


def test_cancel_stops_between_files(tmp_path):
    started = threading.Event()
    release = threading.Event()
    done = []

    def on_progress(current, total, filename, status):
        if status == "converting" and current == 0:
            started.set()
            release.wait(timeout=30)

    worker = BatchWorker()
    worker.start(make_requests(tmp_path), on_progress=on_progress, on_complete=done.append)
    assert started.wait(timeout=30)
    worker.cancel()
    release.set()
    worker.wait(timeout=30)

    summary = done[0]
    assert summary.cancelled
    assert len(summary.results) == 1
    assert summary.skipped == 2


def test_second_start_is_ignored_while_running(tmp_path):
    release = threading.Event()
    service = MagicMock(spec=BatchService)
    service.convert_batch.side_effect = lambda *a, **kw: release.wait(timeout=30)

    worker = BatchWorker(service)
    assert worker.start(make_requests(tmp_path))
    assert not worker.start(make_requests(tmp_path))
    release.set()
    worker.wait(timeout=30)
    assert service.convert_batch.call_count == 1


def test_errors_reach_on_error(tmp_path):
    service = MagicMock(spec=BatchService)
    service.convert_batch.side_effect = RuntimeError("boom")
    errors = []

    worker = BatchWorker(service)
    worker.start(make_requests(tmp_path), on_error=errors.append)
    worker.wait(timeout=30)

    assert len(errors) == 1
    assert str(errors[0]) == "boom"


def test_on_complete_failure_reaches_on_error(tmp_path):
    errors = []

    def on_complete(summary):
        raise ValueError("display gone")

    worker = BatchWorker()
    worker.start(make_requests(tmp_path, 1), on_complete=on_complete, on_error=errors.append)
    worker.wait(timeout=30)

    assert not worker.is_running
    assert len(errors) == 1
    assert isinstance(errors[0], ValueError)


def test_passes_cancel_event_and_log_file(tmp_path):
    service = MagicMock(spec=BatchService)
    worker = BatchWorker(service)
    log_file = tmp_path / "x.log"
    worker.start(make_requests(tmp_path, 1), log_file=log_file)
    worker.wait(timeout=30)

    kwargs = service.convert_batch.call_args.kwargs
    assert kwargs["cancel_event"] is worker.cancel_event
    assert kwargs["log_file"] == log_file
