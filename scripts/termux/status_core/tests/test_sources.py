from __future__ import annotations

import unittest
from pathlib import Path
import sys
from unittest import mock

import requests

sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from status_core.config import Settings  # noqa: E402
from status_core.models import (  # noqa: E402
    STATUS_ERROR,
    STATUS_OK,
    STATUS_TIMEOUT,
    STATUS_UNCONFIGURED,
)
from status_core.sources import build_sources, device, github, network, render, vercel  # noqa: E402
from status_core.tests.fakes import FakeResponse, FakeSession  # noqa: E402

SETTINGS = Settings(github_token="gh", vercel_token="vc", render_token="rd", refresh_interval=30)

REPOS = [
    {
        "full_name": "me/old",
        "private": False,
        "stargazers_count": 1,
        "updated_at": "2024-01-01T00:00:00Z",
        "html_url": "https://github.com/me/old",
    },
    {
        "full_name": "me/new",
        "private": True,
        "stargazers_count": 5,
        "updated_at": "2024-05-01T00:00:00Z",
        "html_url": "https://github.com/me/new",
    },
]
RUNS = {"workflow_runs": [{"name": "CI", "conclusion": "success", "html_url": "https://github.com/run/1"}]}


class NotConfiguredTests(unittest.TestCase):
    def test_every_api_source_reports_not_configured(self):
        empty = Settings()
        session = FakeSession({})
        for module in (github, vercel, render):
            result = module.fetch(empty, session)
            self.assertEqual(result.status, STATUS_UNCONFIGURED)
            self.assertEqual(len(result.lines), 1)
            self.assertIn("not configured", result.lines[0])
            self.assertIn(module.TOKEN_NAME, result.lines[0])
        self.assertEqual(session.calls, [])


class GitHubTests(unittest.TestCase):
    def test_repos_sorted_newest_first_with_actions_line(self):
        session = FakeSession({"/actions/runs": FakeResponse(RUNS), "/user/repos": FakeResponse(REPOS)})
        result = github.fetch(SETTINGS, session)
        self.assertEqual(result.status, STATUS_OK)
        self.assertTrue(result.lines[0].startswith("me/new • private • ★5"))
        self.assertEqual(result.lines[1], "   ↳ CI — success — https://github.com/run/1")
        self.assertTrue(result.lines[2].startswith("me/old • public"))
        self.assertEqual(session.calls[0][1]["Authorization"], "token gh")

    def test_limits_to_six_repos(self):
        repos = [dict(REPOS[0], full_name=f"me/r{i}") for i in range(10)]
        session = FakeSession({"/actions/runs": FakeResponse({"workflow_runs": []}), "/user/repos": FakeResponse(repos)})
        result = github.fetch(SETTINGS, session)
        self.assertEqual(len(result.lines), 12)
        self.assertEqual(result.lines[1], "   ↳ —")

    def test_network_failure_is_placeholder(self):
        session = FakeSession({"/user/repos": requests.ConnectionError("down")})
        result = github.fetch(SETTINGS, session)
        self.assertEqual(result.status, STATUS_ERROR)
        self.assertEqual(result.lines, ("Failed to query GitHub API (ConnectionError)",))

    def test_http_timeout_is_timed_out_placeholder(self):
        session = FakeSession({"/user/repos": requests.Timeout()})
        result = github.fetch(SETTINGS, session)
        self.assertEqual(result.status, STATUS_TIMEOUT)
        self.assertIn("timed out", result.lines[0])

    def test_auth_failure(self):
        session = FakeSession({"/user/repos": FakeResponse({"message": "Bad credentials"}, status_code=401)})
        result = github.fetch(SETTINGS, session)
        self.assertEqual(result.status, STATUS_ERROR)
        self.assertIn("HTTP 401", result.lines[0])

    def test_malformed_payload(self):
        session = FakeSession({"/user/repos": FakeResponse({"unexpected": True})})
        result = github.fetch(SETTINGS, session)
        self.assertEqual(result.status, STATUS_ERROR)
        self.assertEqual(len(result.lines), 1)

    def test_invalid_json(self):
        session = FakeSession({"/user/repos": FakeResponse(invalid_json=True)})
        result = github.fetch(SETTINGS, session)
        self.assertIn("invalid JSON", result.lines[0])

    def test_actions_status_for_repo(self):
        session = FakeSession({"/repos/me/new/actions/runs": FakeResponse(RUNS)})
        self.assertEqual(github.actions_status(SETTINGS, session, "me/new"), "CI — success — https://github.com/run/1")


class VercelTests(unittest.TestCase):
    def test_projects(self):
        payload = {
            "projects": [
                {"name": "site", "id": "prj_1", "team": {"name": "acme"}},
                {"name": "blog", "id": "prj_2"},
            ]
        }
        session = FakeSession({"/v8/projects": FakeResponse(payload)})
        result = vercel.fetch(SETTINGS, session)
        self.assertEqual(result.lines, ("site • id:prj_1 • org:acme", "blog • id:prj_2 • org:personal"))
        self.assertEqual(session.calls[0][1]["Authorization"], "Bearer vc")

    def test_last_deploy(self):
        payload = {"deployments": [{"state": "READY", "url": "site.vercel.app", "createdAt": 1714521600000}]}
        session = FakeSession({"/v6/deployments": FakeResponse(payload)})
        line = vercel.last_deploy(SETTINGS, session, "prj_1")
        self.assertEqual(line, "READY — site.vercel.app — created: 2024-05-01T00:00:00Z")
        self.assertIn("projectId=prj_1", session.calls[0][0])

    def test_last_deploy_with_out_of_range_timestamp(self):
        payload = {"deployments": [{"state": "READY", "url": "site.vercel.app", "createdAt": 10**20}]}
        session = FakeSession({"/v6/deployments": FakeResponse(payload)})
        line = vercel.last_deploy(SETTINGS, session, "prj_1")
        self.assertEqual(line, "READY — site.vercel.app — created: n/a")

    def test_missing_projects_key(self):
        session = FakeSession({"/v8/projects": FakeResponse({"error": {"code": "forbidden"}})})
        self.assertEqual(vercel.fetch(SETTINGS, session).status, STATUS_ERROR)


class RenderTests(unittest.TestCase):
    def test_wrapped_and_flat_services(self):
        payload = [
            {"cursor": "a", "service": {"name": "api", "suspended": "not_suspended", "serviceDetails": {"url": "https://api.onrender.com"}}},
            {"name": "worker", "state": "live"},
        ]
        session = FakeSession({"/v1/services": FakeResponse(payload)})
        result = render.fetch(SETTINGS, session)
        self.assertEqual(
            result.lines,
            (
                "api • state:not_suspended • url: https://api.onrender.com",
                "worker • state:live • url: n/a",
            ),
        )

    def test_server_error(self):
        session = FakeSession({"/v1/services": FakeResponse([], status_code=503)})
        result = render.fetch(SETTINGS, session)
        self.assertEqual(result.lines, ("Failed to query Render API (HTTP 503)",))


class LocalSourceTests(unittest.TestCase):
    def test_device_lines_always_present(self):
        result = device.fetch(Settings())
        self.assertEqual(result.status, STATUS_OK)
        labels = [line.split(":", 1)[0] for line in result.lines]
        self.assertEqual(labels, ["IP(s)", "Battery", "Uptime", "Load", "Memory"])

    def test_battery_falls_back_to_termux_helper(self):
        with mock.patch("status_core.sources.device.psutil.sensors_battery", return_value=None), mock.patch(
            "status_core.sources.device.run_command", return_value='{"percentage": 81, "health": "GOOD"}'
        ):
            self.assertEqual(device.battery_text(), "81% (GOOD)")

    def test_battery_unavailable(self):
        with mock.patch("status_core.sources.device.psutil.sensors_battery", return_value=None), mock.patch(
            "status_core.sources.device.run_command", return_value=None
        ):
            self.assertEqual(device.battery_text(), "N/A")

    def test_listening_falls_back_to_ss(self):
        with mock.patch(
            "status_core.sources.network.psutil.net_connections", side_effect=network.psutil.AccessDenied()
        ), mock.patch("status_core.sources.network.run_command", return_value="Netid State\ntcp LISTEN 0.0.0.0:22\n"):
            self.assertEqual(network.listening_lines(), ["Netid State", "tcp LISTEN 0.0.0.0:22"])

    def test_listening_without_any_tool(self):
        with mock.patch(
            "status_core.sources.network.psutil.net_connections", side_effect=network.psutil.AccessDenied()
        ), mock.patch("status_core.sources.network.run_command", return_value=None):
            self.assertEqual(network.listening_lines(), ["ss/netstat not available"])

    def test_quick_scan_without_address(self):
        with mock.patch("status_core.sources.network.local_ipv4_addresses", return_value=[]):
            self.assertEqual(network.quick_scan(), ["Could not determine local IP"])

    def test_quick_scan_targets_first_address(self):
        with mock.patch(
            "status_core.sources.network.local_ipv4_addresses", return_value=["192.168.1.5/24"]
        ), mock.patch("status_core.sources.network.run_command", return_value="22/tcp open ssh\n") as run:
            lines = network.quick_scan()
        run.assert_called_once_with(["nmap", "-sT", "-Pn", "-F", "192.168.1.5"], network.SCAN_TIMEOUT)
        self.assertEqual(lines[-1], "22/tcp open ssh")


class RegistryTests(unittest.TestCase):
    def test_five_sources_in_display_order(self):
        sources = build_sources(Settings())
        self.assertEqual([s.key for s in sources], ["github", "vercel", "render", "device", "network"])
        self.assertIsNone(sources[0].last)


if __name__ == "__main__":
    unittest.main()
