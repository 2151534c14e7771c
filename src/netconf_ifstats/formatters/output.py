"""
Metric sinks and output formatting.

Provides the sink interface the poller emits into, an InfluxDB line
protocol writer for execd-style hosts, an in-memory sink, and
table/JSON printers for interactive use.
"""

from __future__ import annotations

import json
import logging
import sys
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TextIO

from influxdb import line_protocol
from rich.console import Console
from rich.table import Table

from netconf_ifstats.constants import Measurements
from netconf_ifstats.models.metrics import DeviceError, PollResult

logger = logging.getLogger(__name__)

FieldValue = int | float | bool | str


class MetricsSink(ABC):
    """
    Receiver for measurements and per-device errors.

    Mirrors the accumulator a metrics host hands to an input on each
    gather: one call per measurement, one call per recoverable error.
    """

    @abstractmethod
    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        """Record one measurement."""

    @abstractmethod
    def add_error(self, error: DeviceError) -> None:
        """Record a recoverable per-device error."""

    def flush(self) -> None:
        """Flush buffered output, if any."""


# =============================================================================
# Line Protocol
# =============================================================================


def _point(
    measurement: str,
    fields: Mapping[str, FieldValue],
    tags: Mapping[str, str],
    timestamp_ns: int | None = None,
) -> dict[str, Any]:
    if not fields:
        raise ValueError(f"measurement {measurement!r} has no fields")
    point: dict[str, Any] = {
        "measurement": measurement,
        "tags": dict(tags),
        "fields": dict(fields),
    }
    if timestamp_ns is not None:
        point["time"] = timestamp_ns
    return point


def format_line(
    measurement: str,
    fields: Mapping[str, FieldValue],
    tags: Mapping[str, str],
    timestamp_ns: int | None = None,
) -> str:
    """
    Format one measurement as an InfluxDB line protocol line.

    Serialization is done by ``influxdb.line_protocol``: tags and fields
    are sorted by key, empty tag values are dropped and integers carry
    the ``i`` suffix.

    Args:
        measurement: Measurement name
        fields: Field values (at least one)
        tags: Tag values
        timestamp_ns: Optional timestamp in nanoseconds

    Returns:
        Line protocol line without trailing newline
    """
    point = _point(measurement, fields, tags, timestamp_ns)
    return line_protocol.make_lines({"points": [point]}).rstrip("\n")


class LineProtocolSink(MetricsSink):
    """
    Write measurements as InfluxDB line protocol.

    Errors are reported through logging (stderr) so the metrics stream
    only ever carries line protocol.

    Attributes:
        output: Output stream (defaults to stdout)
        clock: Returns the timestamp in nanoseconds for each line
    """

    def __init__(
        self,
        output: TextIO | None = None,
        clock: Callable[[], int] = time.time_ns,
    ):
        self.output = output or sys.stdout
        self.clock = clock

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        point = _point(measurement, fields, tags, self.clock())
        self.output.write(line_protocol.make_lines({"points": [point]}))

    def add_error(self, error: DeviceError) -> None:
        logger.error(str(error.error))

    def flush(self) -> None:
        self.output.flush()


# =============================================================================
# In-memory
# =============================================================================


@dataclass
class Measurement:
    """A measurement captured by CollectingSink."""

    name: str
    fields: dict[str, FieldValue]
    tags: dict[str, str]


@dataclass
class CollectingSink(MetricsSink):
    """Keep measurements and errors in memory."""

    measurements: list[Measurement] = field(default_factory=list)
    errors: list[DeviceError] = field(default_factory=list)

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str],
    ) -> None:
        self.measurements.append(Measurement(measurement, dict(fields), dict(tags)))

    def add_error(self, error: DeviceError) -> None:
        self.errors.append(error)


# =============================================================================
# Interactive Output
# =============================================================================


def result_to_json(result: PollResult) -> dict[str, Any]:
    """
    Format a poll result for JSON output.

    Output format:
        {
            "metrics": [
                {"measurement": ..., "tags": {...}, "fields": {...}}
            ],
            "errors": [{"device": ..., "error": ...}]
        }
    """
    return {
        "metrics": [
            {
                "measurement": Measurements.INTERFACE,
                "tags": stat.tags(),
                "fields": stat.fields(),
            }
            for stat in result.stats
        ],
        "errors": [
            {"device": err.address, "error": str(err.error)} for err in result.errors
        ],
    }


def print_result_json(result: PollResult, output: TextIO | None = None) -> None:
    """Write a poll result as indented JSON."""
    out = output or sys.stdout
    out.write(json.dumps(result_to_json(result), indent=2) + "\n")
    out.flush()


def print_result_table(result: PollResult, console: Console | None = None) -> None:
    """Print a poll result as a rich table."""
    console = console or Console()

    table = Table(title=Measurements.INTERFACE)
    table.add_column("Device", style="cyan")
    table.add_column("Interface")
    table.add_column("Input Bytes", justify="right")
    table.add_column("Output Bytes", justify="right")

    for stat in result.stats:
        table.add_row(
            stat.device_address,
            stat.interface_name,
            f"{stat.input_octets:,}",
            f"{stat.output_octets:,}",
        )

    console.print(table)
