"""Tests for file-based conversion logging."""

import os
import time
from unittest.mock import patch

from fileconverter.utils.conversion_log import (
    append_log,
    cleanup_old_logs,
    create_conversion_log,
    finalize_log,
    get_latest_log,
)


class TestCreateConversionLog:
    def test_creates_log_file(self, tmp_path):
        with patch("fileconverter.utils.conversion_log.LOG_DIR", tmp_path):
            log_file = create_conversion_log()
            assert log_file.exists()
            assert log_file.name.startswith("convert_")
            assert log_file.suffix == ".log"

    def test_log_file_has_header(self, tmp_path):
        with patch("fileconverter.utils.conversion_log.LOG_DIR", tmp_path):
            content = create_conversion_log("pdf").read_text(encoding="utf-8")
            assert "FileConverter Conversion Log" in content
            assert "Started:" in content
            assert "Target format: pdf" in content


class TestAppendLog:
    def test_append_messages(self, tmp_path):
        log_file = tmp_path / "test.log"
        log_file.write_text("", encoding="utf-8")
        append_log(log_file, "First")
        append_log(log_file, "Second")
        content = log_file.read_text(encoding="utf-8")
        assert content.index("First") < content.index("Second")
        assert "] " in content  # timestamp bracket


class TestFinalizeLog:
    def test_writes_summary(self, tmp_path):
        log_file = tmp_path / "test.log"
        log_file.write_text("", encoding="utf-8")
        finalize_log(log_file, {"total": 10, "success": 8, "failed": 1, "skipped": 1})
        content = log_file.read_text(encoding="utf-8")
        assert "Completed:" in content
        assert "Total: 10 | Success: 8 | Failed: 1 | Skipped: 1" in content
        assert "Cancelled" not in content

    def test_marks_cancelled_batch(self, tmp_path):
        log_file = tmp_path / "test.log"
        log_file.write_text("", encoding="utf-8")
        finalize_log(log_file, {"total": 3, "success": 1, "skipped": 2, "cancelled": True})
        assert "| Cancelled" in log_file.read_text(encoding="utf-8")

    def test_writes_errors(self, tmp_path):
        log_file = tmp_path / "test.log"
        log_file.write_text("", encoding="utf-8")
        finalize_log(log_file, {"total": 1, "failed": 1, "errors": ["doc.pdf: Conversion failed: nope"]})
        content = log_file.read_text(encoding="utf-8")
        assert "Errors:" in content
        assert "doc.pdf: Conversion failed: nope" in content


class TestCleanupOldLogs:
    def test_deletes_old_logs(self, tmp_path):
        with patch("fileconverter.utils.conversion_log.LOG_DIR", tmp_path):
            old_log = tmp_path / "convert_20240101_120000.log"
            old_log.write_text("old", encoding="utf-8")
            old_time = time.time() - (30 * 86400)
            os.utime(old_log, (old_time, old_time))

            assert cleanup_old_logs(retention_days=7) == 1
            assert not old_log.exists()

    def test_keeps_recent_and_foreign_files(self, tmp_path):
        with patch("fileconverter.utils.conversion_log.LOG_DIR", tmp_path):
            recent_log = tmp_path / "convert_20260225_120000.log"
            recent_log.write_text("recent", encoding="utf-8")
            other = tmp_path / "notes.log"
            other.write_text("keep", encoding="utf-8")
            old_time = time.time() - (30 * 86400)
            os.utime(other, (old_time, old_time))

            assert cleanup_old_logs(retention_days=7) == 0
            assert recent_log.exists()
            assert other.exists()


class TestGetLatestLog:
    def test_returns_latest(self, tmp_path):
        with patch("fileconverter.utils.conversion_log.LOG_DIR", tmp_path):
            log1 = tmp_path / "convert_20260101_100000.log"
            log2 = tmp_path / "convert_20260225_120000.log"
            log1.write_text("old", encoding="utf-8")
            os.utime(log1, (time.time() - 60, time.time() - 60))
            log2.write_text("new", encoding="utf-8")

            assert get_latest_log() == log2

    def test_returns_none_when_empty(self, tmp_path):
        with patch("fileconverter.utils.conversion_log.LOG_DIR", tmp_path):
            assert get_latest_log() is None
