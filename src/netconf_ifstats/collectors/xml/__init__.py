"""
XML decoding for NETCONF replies.
"""

from __future__ import annotations

from netconf_ifstats.collectors.xml.parser import InterfaceStatsParser, decode_interface_stats

__all__ = ["InterfaceStatsParser", "decode_interface_stats"]
