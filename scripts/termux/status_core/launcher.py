"""Detached launching of the auxiliary tools."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import sys
import threading
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaunchResult:
    ok: bool
    message: str


def _watch(proc: subprocess.Popen, label: str) -> None:
    code = proc.wait()
    logger.info("%s (pid %s) exited with status %s", label, proc.pid, code)


def _spawn(cmd: list[str], label: str) -> LaunchResult:
    try:
        proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except OSError as exc:
        logger.error("failed to start %s: %s", label, exc)
        return LaunchResult(False, f"Failed to start {label}: {exc}")

    threading.Thread(target=_watch, args=(proc, label), name=f"watch-{label}", daemon=True).start()
    logger.info("started %s (pid %s): %s", label, proc.pid, " ".join(cmd))
    return LaunchResult(True, f"{label} started.")


def launch_script(path: Path, label: str) -> LaunchResult:
    if not path.is_file() or not os.access(path, os.X_OK):
        return LaunchResult(False, f"{label} script not found or not executable: {path}")
    return _spawn([str(path)], label)


def python_interpreter() -> str | None:
    return sys.executable or shutil.which("python3") or shutil.which("python")


def launch_python(path: Path, label: str) -> LaunchResult:
    if not path.is_file():
        return LaunchResult(False, f"{label} not found: {path}")
    interpreter = python_interpreter()
    if interpreter is None:
        return LaunchResult(False, "Python not installed")
    return _spawn([interpreter, str(path)], label)
