"""Listening sockets source and the local quick port scan."""

from __future__ import annotations

import logging
import socket

import psutil

from status_core.config import Settings
from status_core.models import SourceResult
from status_core.sources import ok, run_command
from status_core.sources.device import local_ipv4_addresses

logger = logging.getLogger(__name__)

KEY = "network"
TITLE = "Listening"
MAX_SOCKETS = 200
COMMAND_TIMEOUT = 5
SCAN_TIMEOUT = 120

PROTOCOLS = {
    (socket.AF_INET, socket.SOCK_STREAM): "tcp",
    (socket.AF_INET6, socket.SOCK_STREAM): "tcp6",
    (socket.AF_INET, socket.SOCK_DGRAM): "udp",
    (socket.AF_INET6, socket.SOCK_DGRAM): "udp6",
}


def _process_name(pid: int | None) -> str:
    if not pid:
        return "-"
    try:
        return psutil.Process(pid).name()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        return str(pid)


def _psutil_listening() -> list[str]:
    rows: list[tuple[str, str, int, str]] = []
    for conn in psutil.net_connections(kind="inet"):
        if not conn.laddr:
            continue
        proto = PROTOCOLS.get((conn.family, conn.type), "?")
        # UDP sockets have no LISTEN state; a bound UDP socket without a peer is listening.
        if proto.startswith("tcp") and conn.status != psutil.CONN_LISTEN:
            continue
        if proto.startswith("udp") and conn.raddr:
            continue
        rows.append((proto, conn.laddr.ip, conn.laddr.port, _process_name(conn.pid)))
    rows.sort(key=lambda row: (row[0], row[2], row[1]))
    return [f"{proto:<5} {ip}:{port:<6} {name}" for proto, ip, port, name in rows]


def _command_listening() -> list[str] | None:
    for cmd in (["ss", "-tulpen"], ["netstat", "-tulpen"]):
        output = run_command(cmd, COMMAND_TIMEOUT)
        if output is not None:
            return output.splitlines()
    return None


def listening_lines(limit: int = MAX_SOCKETS) -> list[str]:
    try:
        lines = _psutil_listening()
    except (psutil.AccessDenied, OSError) as exc:
        logger.debug("net_connections unavailable (%s), falling back to ss/netstat", exc)
        lines = _command_listening()
        if lines is None:
            return ["ss/netstat not available"]
    return lines[:limit] or ["no listening sockets"]


def quick_scan() -> list[str]:
    """Run a fast TCP connect scan of this device's first local address."""
    addresses = local_ipv4_addresses()
    if not addresses:
        return ["Could not determine local IP"]
    target = addresses[0].split("/", 1)[0]
    header = f"Running quick nmap -sT -Pn -F on {target}"
    output = run_command(["nmap", "-sT", "-Pn", "-F", target], SCAN_TIMEOUT)
    if output is None:
        return [header, "nmap not installed or scan failed"]
    return [header, *output.splitlines()[:400]]


def fetch(_settings: Settings) -> SourceResult:
    return ok(KEY, TITLE, listening_lines())
