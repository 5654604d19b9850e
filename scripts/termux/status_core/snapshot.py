"""Append-only daily snapshot log of the latest fetch results."""

from __future__ import annotations

import logging
import os
import threading
from datetime import datetime
from pathlib import Path

from status_core.formatting import iso_utc
from status_core.models import SourceResult, utc_now

logger = logging.getLogger(__name__)

FILE_MODE = 0o600

# (label, source key, max lines) in file order
BLOCKS = (
    ("Device", "device", 20),
    ("GitHub", "github", 20),
    ("Vercel", "vercel", 20),
    ("Render", "render", 20),
    ("Listening", "network", 200),
)


def format_snapshot(results: dict[str, SourceResult], now: datetime) -> str:
    parts = [f"==== Snapshot {iso_utc(now)} ===="]
    for index, (label, key, limit) in enumerate(BLOCKS):
        if index:
            parts.append("")
        parts.append(f"-- {label} --")
        result = results.get(key)
        if result is None:
            parts.append("no data")
            continue
        parts.extend(result.lines[:limit])
    return "\n".join(parts) + "\n\n\n"


class SnapshotLogger:
    def __init__(self, log_dir: Path):
        self.log_dir = log_dir
        self.last_error = ""
        self._lock = threading.Lock()
        self._worker: threading.Thread | None = None

    def path_for(self, now: datetime) -> Path:
        return self.log_dir / f"{now.astimezone().strftime('%Y-%m-%d')}.log"

    def write(self, results: dict[str, SourceResult], now: datetime | None = None) -> Path:
        """Append one record; raises ``OSError`` when the file cannot be written."""
        now = now or utc_now()
        record = format_snapshot(results, now)
        path = self.path_for(now)
        with self._lock:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_APPEND, FILE_MODE)
            with os.fdopen(fd, "a", encoding="utf-8") as handle:
                handle.write(record)
            os.chmod(path, FILE_MODE)
        return path

    def _write_quietly(self, results: dict[str, SourceResult]) -> None:
        try:
            path = self.write(results)
        except OSError as exc:
            self.last_error = f"snapshot failed: {exc.strerror or exc}"
            logger.error("snapshot write failed: %s", exc)
            return
        self.last_error = ""
        logger.debug("snapshot appended to %s", path)

    def submit(self, results: dict[str, SourceResult]) -> threading.Thread | None:
        """Write in the background; the caller never joins the thread.

        Skipped while the previous background write is still running.
        """
        if self._worker is not None and self._worker.is_alive():
            logger.warning("previous snapshot still writing, skipping this cycle")
            return None
        worker = threading.Thread(
            target=self._write_quietly,
            args=(dict(results),),
            name="snapshot",
            daemon=True,
        )
        self._worker = worker
        worker.start()
        return worker
