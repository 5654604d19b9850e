#!/usr/bin/env python3
"""Thin entrypoint for the Termux status dashboard."""

from __future__ import annotations

from status_core.app import main


if __name__ == "__main__":
    raise SystemExit(main())
