"""Settings loading from .env files layered over the process environment."""

from __future__ import annotations

import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import dotenv_values

DEFAULT_ENV_FILES = (Path(".env"), Path("~/.termux_status.env"))
DEFAULT_REFRESH_SECONDS = 30
MAX_FETCH_TIMEOUT = 5.0

OPTIONAL_TOOLS = ("ip", "ss", "nmap", "termux-battery-status")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    github_token: str = ""
    vercel_token: str = ""
    render_token: str = ""
    refresh_interval: int = DEFAULT_REFRESH_SECONDS
    log_dir: Path = Path("~/status_logs").expanduser()
    osint_script: Path = Path("~/nightmare_pro.sh").expanduser()
    wifi_tool: Path = Path("~/wifitool.py").expanduser()
    log_level: str = "INFO"
    env_file: Path | None = None

    @property
    def fetch_timeout(self) -> float:
        return min(MAX_FETCH_TIMEOUT, self.refresh_interval / 2)


def read_env_file(paths: tuple[Path, ...] = DEFAULT_ENV_FILES) -> tuple[Path | None, dict[str, str]]:
    """Return the first existing env file and its values; later files are ignored."""
    for candidate in paths:
        path = candidate.expanduser()
        if path.is_file():
            values = {k: v for k, v in dotenv_values(path).items() if v is not None}
            return path, values
    return None, {}


def _refresh_interval(raw: str | None) -> int:
    if raw is None or not str(raw).strip():
        return DEFAULT_REFRESH_SECONDS
    try:
        value = int(float(str(raw).strip()))
    except (OverflowError, ValueError) as exc:
        raise ConfigError(f"invalid REFRESH_INTERVAL: {raw!r}") from exc
    return max(1, value)


def _path(raw: str | None, default: str) -> Path:
    text = (raw or "").strip() or default
    return Path(text).expanduser()


def load_settings(
    env_files: tuple[Path, ...] = DEFAULT_ENV_FILES,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    env_file, file_values = read_env_file(env_files)
    merged: dict[str, str] = dict(os.environ if environ is None else environ)
    merged.update(file_values)

    return Settings(
        github_token=merged.get("GITHUB_TOKEN", "").strip(),
        vercel_token=merged.get("VERCEL_TOKEN", "").strip(),
        render_token=merged.get("RENDER_TOKEN", "").strip(),
        refresh_interval=_refresh_interval(merged.get("REFRESH_INTERVAL")),
        log_dir=_path(merged.get("LOG_DIR"), "~/status_logs"),
        osint_script=_path(merged.get("OSINT_SCRIPT"), "~/nightmare_pro.sh"),
        wifi_tool=_path(merged.get("WIFI_TOOL_PY"), "~/wifitool.py"),
        log_level=(merged.get("LOG_LEVEL") or "INFO").strip().upper(),
        env_file=env_file,
    )


def missing_tools(tools: tuple[str, ...] = OPTIONAL_TOOLS) -> list[str]:
    return [tool for tool in tools if shutil.which(tool) is None]
