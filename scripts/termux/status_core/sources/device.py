"""Device telemetry source (zero-auth, local only)."""

from __future__ import annotations

import json
import logging
import os
import socket
import time

import psutil

from status_core.config import Settings
from status_core.formatting import format_bytes, format_duration
from status_core.models import SourceResult
from status_core.sources import ok, run_command

logger = logging.getLogger(__name__)

KEY = "device"
TITLE = "Device"
COMMAND_TIMEOUT = 3


def local_ipv4_addresses() -> list[str]:
    addresses: list[str] = []
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error) as exc:
        logger.debug("net_if_addrs failed: %s", exc)
        return addresses
    for name, entries in sorted(interfaces.items()):
        for entry in entries:
            if entry.family != socket.AF_INET or entry.address.startswith("127."):
                continue
            prefix = _prefix_length(entry.netmask)
            addresses.append(f"{entry.address}/{prefix}" if prefix is not None else entry.address)
    return addresses


def _prefix_length(netmask: str | None) -> int | None:
    if not netmask:
        return None
    try:
        return sum(bin(int(octet)).count("1") for octet in netmask.split("."))
    except ValueError:
        return None


def battery_text() -> str:
    try:
        battery = psutil.sensors_battery()
    except (AttributeError, OSError, psutil.Error):
        battery = None
    if battery is not None:
        plugged = "charging" if battery.power_plugged else "discharging"
        return f"{battery.percent:.0f}% ({plugged})"

    raw = run_command(["termux-battery-status"], COMMAND_TIMEOUT)
    if not raw:
        return "N/A"
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError:
        return "N/A"
    return f"{payload.get('percentage', '?')}% ({payload.get('health') or 'unknown'})"


def uptime_text() -> str:
    try:
        return format_duration(time.time() - psutil.boot_time())
    except (OSError, psutil.Error):
        return "N/A"


def load_text() -> str:
    try:
        one, five, fifteen = os.getloadavg()
    except (AttributeError, OSError):
        return "N/A"
    return f"{one:.2f} {five:.2f} {fifteen:.2f}"


def memory_text() -> str:
    try:
        memory = psutil.virtual_memory()
    except (OSError, psutil.Error):
        return "N/A"
    return f"{format_bytes(memory.total - memory.available)}/{format_bytes(memory.total)}"


def summary_lines() -> list[str]:
    ips = " ".join(local_ipv4_addresses()) or "N/A"
    return [
        f"IP(s): {ips}",
        f"Battery: {battery_text()}",
        f"Uptime: {uptime_text()}",
        f"Load: {load_text()}",
        f"Memory: {memory_text()}",
    ]


def fetch(_settings: Settings) -> SourceResult:
    return ok(KEY, TITLE, summary_lines())
