"""
Core module for netconf-ifstats.

Contains configuration management and the exception hierarchy.
"""

from __future__ import annotations

from netconf_ifstats.core.config import (
    DeviceConfig,
    IfStatsSettings,
    PollerConfig,
    get_settings,
    load_config,
)
from netconf_ifstats.core.exceptions import (
    ConfigurationError,
    ConnectError,
    DecodeError,
    IfStatsError,
    NetconfError,
    RpcError,
)

__all__ = [
    # Settings
    "get_settings",
    "load_config",
    "IfStatsSettings",
    "DeviceConfig",
    "PollerConfig",
    # Exceptions
    "IfStatsError",
    "ConfigurationError",
    "NetconfError",
    "ConnectError",
    "RpcError",
    "DecodeError",
]
