from __future__ import annotations

import os
import stat
import tempfile
import threading
import unittest
from datetime import datetime, timezone
from pathlib import Path
import sys
from unittest import mock

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from status_core.models import SourceResult  # noqa: E402
from status_core.snapshot import SnapshotLogger, format_snapshot  # noqa: E402

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)

RESULTS = {
    "device": SourceResult("device", "Device", lines=("IP(s): 10.0.0.2/24",)),
    "github": SourceResult("github", "GitHub", lines=("me/repo",)),
    "vercel": SourceResult("vercel", "Vercel", lines=("Vercel not configured (VERCEL_TOKEN not set)",)),
    "network": SourceResult("network", "Listening", lines=tuple(f"sock {i}" for i in range(300))),
}


class SnapshotFormatTests(unittest.TestCase):
    def test_header_and_labelled_blocks(self):
        text = format_snapshot(RESULTS, NOW)
        lines = text.splitlines()
        self.assertEqual(lines[0], "==== Snapshot 2024-05-01T12:00:00Z ====")
        self.assertEqual(lines[1], "-- Device --")
        self.assertEqual(lines[2], "IP(s): 10.0.0.2/24")
        for label in ("-- GitHub --", "-- Vercel --", "-- Render --", "-- Listening --"):
            self.assertIn(label, lines)
        render_at = lines.index("-- Render --")
        self.assertEqual(lines[render_at + 1], "no data")
        self.assertIn("sock 199", lines)
        self.assertNotIn("sock 200", lines)
        self.assertTrue(text.endswith("\n\n\n"))


class SnapshotWriteTests(unittest.TestCase):
    def test_creates_directory_and_owner_only_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            log_dir = Path(tmp) / "nested" / "logs"
            snapshots = SnapshotLogger(log_dir)
            path = snapshots.write(RESULTS, NOW)
            self.assertTrue(path.exists())
            self.assertEqual(path.parent, log_dir)
            self.assertTrue(path.name.endswith(".log"))
            self.assertEqual(stat.S_IMODE(os.stat(path).st_mode), 0o600)

    def test_appends_records(self):
        with tempfile.TemporaryDirectory() as tmp:
            snapshots = SnapshotLogger(Path(tmp))
            snapshots.write(RESULTS, NOW)
            path = snapshots.write(RESULTS, NOW)
            self.assertEqual(path.read_text().count("==== Snapshot "), 2)

    def test_background_failure_is_recorded_not_raised(self):
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("not a directory")
            snapshots = SnapshotLogger(blocker / "logs")
            worker = snapshots.submit(RESULTS)
            worker.join(5)
            self.assertTrue(snapshots.last_error.startswith("snapshot failed"))

    def test_background_success_clears_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            snapshots = SnapshotLogger(Path(tmp))
            snapshots.last_error = "snapshot failed: earlier"
            snapshots.submit(RESULTS).join(5)
            self.assertEqual(snapshots.last_error, "")
            self.assertEqual(len(list(Path(tmp).glob("*.log"))), 1)

    def test_submit_skipped_while_previous_write_runs(self):
        with tempfile.TemporaryDirectory() as tmp:
            snapshots = SnapshotLogger(Path(tmp))
            release = threading.Event()
            calls = []

            def stalled_write(results, now=None):
                calls.append(results)
                release.wait(5)
                return Path(tmp) / "stalled.log"

            with mock.patch.object(snapshots, "write", side_effect=stalled_write):
                first = snapshots.submit(RESULTS)
                self.assertIsNotNone(first)
                self.assertIsNone(snapshots.submit(RESULTS))
                release.set()
                first.join(5)
                second = snapshots.submit(RESULTS)
                self.assertIsNotNone(second)
                second.join(5)
            self.assertEqual(len(calls), 2)


if __name__ == "__main__":
    unittest.main()
