"""
Metric models for interface counter polling.

These models represent the interface counters decoded from a device
reply and the outcome of a poll pass across all configured devices.
"""

from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from netconf_ifstats.constants import COUNTER_MAX, Measurements
from netconf_ifstats.core.exceptions import IfStatsError

Counter = Annotated[int, Field(ge=0, le=COUNTER_MAX)]


class InterfaceStat(BaseModel):
    """
    Input/output octet counters for one interface on one device.

    Attributes:
        interface_name: Interface name as reported by the device
        device_address: Address of the device the counters came from
        input_octets: ietf-interfaces statistics/in-octets
        output_octets: ietf-interfaces statistics/out-octets
    """

    model_config = ConfigDict(frozen=True)

    interface_name: str = ""
    device_address: str = ""
    input_octets: Counter = 0
    output_octets: Counter = 0

    def tags(self) -> dict[str, str]:
        """Return the measurement tags for this interface."""
        return {
            Measurements.TAG_INTERFACE: self.interface_name,
            Measurements.TAG_DEVICE: self.device_address,
        }

    def fields(self) -> dict[str, int]:
        """Return the measurement fields for this interface."""
        return {
            Measurements.FIELD_INPUT_BYTES: self.input_octets,
            Measurements.FIELD_OUTPUT_BYTES: self.output_octets,
        }


class DeviceError(BaseModel):
    """A recoverable failure for one device during a poll pass."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    address: str
    error: IfStatsError

    def tags(self) -> dict[str, str]:
        return {Measurements.TAG_DEVICE: self.address}

    def __str__(self) -> str:
        return f"{self.address}: {self.error}"


class PollResult(BaseModel):
    """
    Outcome of one poll pass.

    Attributes:
        stats: Interface counters, in device-list then document order
        errors: Per-device failures, in device-list order
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    stats: list[InterfaceStat] = Field(default_factory=list)
    errors: list[DeviceError] = Field(default_factory=list)

    def extend(self, other: PollResult) -> None:
        """Append another result's stats and errors."""
        self.stats.extend(other.stats)
        self.errors.extend(other.errors)

    def devices_ok(self) -> set[str]:
        """Return addresses that produced at least one stat."""
        return {s.device_address for s in self.stats}

    def failed_devices(self) -> set[str]:
        """Return addresses that recorded an error."""
        return {e.address for e in self.errors}

    def tag_sets(self) -> list[tuple[tuple[str, str], ...]]:
        """Return the sorted tag set of every stat, for cross-cycle comparison."""
        return [tuple(sorted(s.tags().items())) for s in self.stats]

    def __len__(self) -> int:
        return len(self.stats)

    def __bool__(self) -> bool:
        """Return True if the pass produced any stats or errors."""
        return bool(self.stats or self.errors)
