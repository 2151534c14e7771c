"""
Data models for netconf-ifstats.
"""

from __future__ import annotations

from netconf_ifstats.models.metrics import DeviceError, InterfaceStat, PollResult

__all__ = ["DeviceError", "InterfaceStat", "PollResult"]
