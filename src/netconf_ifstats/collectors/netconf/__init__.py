"""
NETCONF sessions for interface statistics collection.

Provides the ncclient-backed connector and session, and the store
that caches sessions between poll passes.
"""

from __future__ import annotations

from netconf_ifstats.collectors.netconf.client import (
    FingerprintPolicy,
    HostKeyPolicy,
    NetconfConnector,
    NetconfSession,
)
from netconf_ifstats.collectors.netconf.store import SessionStore

__all__ = [
    "FingerprintPolicy",
    "HostKeyPolicy",
    "NetconfConnector",
    "NetconfSession",
    "SessionStore",
]
