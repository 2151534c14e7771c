"""
netconf-ifstats: interface counter polling over NETCONF.

Polls NETCONF-enabled devices over SSH for interface statistics and
emits input/output byte counters as `netconf_interface` measurements:
- Cached NETCONF sessions per device
- Per-device error isolation across a poll pass
- InfluxDB line protocol output for execd-style hosts
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
