"""Per-batch conversion log files under ~/.fileconverter/logs, pruned by age."""

import logging
from datetime import datetime, timedelta
from pathlib import Path

from fileconverter.models.config import CONFIG_DIR

logger = logging.getLogger(__name__)

LOG_DIR = CONFIG_DIR / "logs"
LOG_PATTERN = "convert_*.log"
DEFAULT_RETENTION_DAYS = 7
RULE = "# " + "=" * 60


def _now(fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
    return datetime.now().strftime(fmt)


def _log_files() -> list[tuple[float, Path]]:
    """(mtime, path) of every conversion log, newest first."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    entries = [(path.stat().st_mtime, path) for path in LOG_DIR.glob(LOG_PATTERN)]
    return sorted(entries, key=lambda entry: entry[0], reverse=True)


def create_conversion_log(target_format: str = "") -> Path:
    """Start a log file for a new batch and write its header."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / f"convert_{_now('%Y%m%d_%H%M%S')}.log"

    lines = ["# FileConverter Conversion Log", f"# Started: {_now()}"]
    if target_format:
        lines.append(f"# Target format: {target_format}")
    lines.append(RULE)
    log_file.write_text("\n".join(lines) + "\n\n", encoding="utf-8")
    return log_file


def append_log(log_file: Path, message: str) -> None:
    with log_file.open("a", encoding="utf-8") as f:
        f.write(f"[{_now('%H:%M:%S')}] {message}\n")


def finalize_log(log_file: Path, summary: dict) -> None:
    """Append the batch totals and, if any, the failed files."""
    counts = " | ".join(
        f"{label}: {summary.get(key, 0)}"
        for label, key in (("Total", "total"), ("Success", "success"), ("Failed", "failed"), ("Skipped", "skipped"))
    )
    if summary.get("cancelled"):
        counts += " | Cancelled"

    lines = ["", RULE, f"# Completed: {_now()}", f"# {counts}"]
    errors = summary.get("errors") or []
    if errors:
        lines += ["", "# Errors:"] + [f"#   - {err}" for err in errors]

    with log_file.open("a", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")


def cleanup_old_logs(retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Remove conversion logs last modified more than retention_days ago."""
    cutoff = (datetime.now() - timedelta(days=retention_days)).timestamp()
    stale = [path for mtime, path in _log_files() if mtime < cutoff]

    removed = 0
    for path in stale:
        try:
            path.unlink()
        except OSError as e:
            logger.warning("Could not remove old log %s: %s", path.name, e)
        else:
            removed += 1

    if removed:
        logger.info("Removed %d conversion log(s) older than %d day(s)", removed, retention_days)
    return removed


def get_latest_log() -> Path | None:
    logs = _log_files()
    return logs[0][1] if logs else None
