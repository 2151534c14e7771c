"""
Device data collectors for netconf-ifstats.

Provides NETCONF sessions, session caching and reply decoding.
"""

from __future__ import annotations

from netconf_ifstats.collectors.base import BaseSession

__all__ = ["BaseSession"]
