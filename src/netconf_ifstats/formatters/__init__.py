"""
Metric sinks and output formatters for netconf-ifstats.
"""

from __future__ import annotations

from netconf_ifstats.formatters.output import (
    CollectingSink,
    LineProtocolSink,
    MetricsSink,
    format_line,
    print_result_json,
    print_result_table,
)

__all__ = [
    "CollectingSink",
    "LineProtocolSink",
    "MetricsSink",
    "format_line",
    "print_result_json",
    "print_result_table",
]
