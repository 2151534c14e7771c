"""
Constants and default values for netconf-ifstats.

This module provides centralized configuration for:
- NETCONF defaults and namespaces
- The fixed interface statistics filter
- Measurement and field names
"""

from __future__ import annotations

from typing import Final

# =============================================================================
# NETCONF Configuration
# =============================================================================


class NetconfDefaults:
    """NETCONF connection defaults."""

    PORT: Final[int] = 830
    CONNECT_TIMEOUT: Final[int] = 30
    RPC_TIMEOUT: Final[int] = 30
    DEVICE_PARAMS: Final[dict[str, str]] = {"name": "default"}


class Namespaces:
    """XML namespaces used in requests."""

    NETCONF_BASE: Final[str] = "urn:ietf:params:xml:ns:netconf:base:1.0"
    IETF_INTERFACES: Final[str] = "urn:ietf:params:xml:ns:yang:ietf-interfaces"


INTERFACE_STATS_FILTER: Final[str] = f"""\
<filter xmlns="{Namespaces.NETCONF_BASE}" type="subtree">
  <interfaces xmlns="{Namespaces.IETF_INTERFACES}">
    <interface>
      <statistics/>
    </interface>
  </interfaces>
</filter>"""


# =============================================================================
# Metric Output
# =============================================================================


class Measurements:
    """Measurement, tag and field names emitted to the metrics sink."""

    INTERFACE: Final[str] = "netconf_interface"

    TAG_INTERFACE: Final[str] = "interface"
    TAG_DEVICE: Final[str] = "device"

    FIELD_INPUT_BYTES: Final[str] = "input_bytes"
    FIELD_OUTPUT_BYTES: Final[str] = "output_bytes"


class ReplyElements:
    """Local element names read from the interface statistics reply."""

    INTERFACES: Final[str] = "interfaces"
    INTERFACE: Final[str] = "interface"
    NAME: Final[str] = "name"
    STATISTICS: Final[str] = "statistics"
    IN_OCTETS: Final[str] = "in-octets"
    OUT_OCTETS: Final[str] = "out-octets"


# Counters are unsigned 64-bit
COUNTER_MAX: Final[int] = 2**64 - 1
