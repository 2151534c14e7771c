"""
CLI module for netconf-ifstats.
"""

from __future__ import annotations

from netconf_ifstats.cli.main import app, cli

__all__ = ["app", "cli"]
