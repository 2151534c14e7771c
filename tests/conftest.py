"""
Pytest fixtures shared across netconf-ifstats tests.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
from pydantic import SecretStr

from netconf_ifstats.collectors.base import BaseSession
from netconf_ifstats.core.config import DeviceConfig, reset_settings
from netconf_ifstats.core.exceptions import ConnectError, RpcError

SAMPLE_REPLY = b"""\
<data xmlns="urn:ietf:params:xml:ns:netconf:base:1.0">
  <interfaces xmlns="urn:ietf:params:xml:ns:yang:ietf-interfaces">
    <interface>
      <name>GigabitEthernet0/0/0</name>
      <statistics>
        <in-octets>1234567</in-octets>
        <out-octets>7654321</out-octets>
      </statistics>
    </interface>
    <interface>
      <name>GigabitEthernet0/0/1</name>
      <statistics>
        <in-octets>42</in-octets>
        <out-octets>0</out-octets>
      </statistics>
    </interface>
  </interfaces>
</data>
"""


class FakeSession(BaseSession):
    """In-memory session returning a canned reply or raising a canned error."""

    def __init__(self, address: str, reply: bytes = SAMPLE_REPLY, error: Exception | None = None):
        super().__init__(address)
        self.reply = reply
        self.error = error
        self.calls = 0
        self.closed = False

    @property
    def connected(self) -> bool:
        return not self.closed

    def fetch_interface_stats(self) -> bytes:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.reply

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """
    Connector that hands out FakeSessions.

    Attributes:
        replies: Per-address reply payloads
        rpc_errors: Per-address RpcError messages raised by the session
        connect_errors: Addresses whose connect fails
        calls: Addresses passed to connect(), in call order
        sessions: Every session handed out
    """

    def __init__(self) -> None:
        self.replies: dict[str, bytes] = {}
        self.rpc_errors: dict[str, str] = {}
        self.connect_errors: set[str] = set()
        self.calls: list[str] = []
        self.sessions: list[FakeSession] = []

    def connect(self, device: DeviceConfig) -> FakeSession:
        self.calls.append(device.address)
        if device.address in self.connect_errors:
            raise ConnectError(device.address, "connection refused")
        error = None
        if device.address in self.rpc_errors:
            error = RpcError(device.address, self.rpc_errors[device.address])
        session = FakeSession(
            device.address,
            reply=self.replies.get(device.address, SAMPLE_REPLY),
            error=error,
        )
        self.sessions.append(session)
        return session


@pytest.fixture
def make_device() -> Callable[..., DeviceConfig]:
    """Factory for DeviceConfig objects."""

    def _make(address: str = "192.0.2.1:830", **kwargs: object) -> DeviceConfig:
        values: dict[str, object] = {
            "address": address,
            "username": "admin",
            "password": SecretStr("secret"),
        }
        values.update(kwargs)
        return DeviceConfig(**values)  # type: ignore[arg-type]

    return _make


@pytest.fixture
def devices(make_device: Callable[..., DeviceConfig]) -> list[DeviceConfig]:
    """Three devices in polling order."""
    return [
        make_device("192.0.2.1:830"),
        make_device("192.0.2.2:830"),
        make_device("192.0.2.3:830"),
    ]


@pytest.fixture
def connector() -> FakeConnector:
    return FakeConnector()


@pytest.fixture
def make_session() -> Callable[..., FakeSession]:
    """Factory for FakeSession objects."""
    return FakeSession


@pytest.fixture
def sample_reply() -> bytes:
    return SAMPLE_REPLY


@pytest.fixture(autouse=True)
def _reset_settings() -> None:
    """Drop cached settings between tests."""
    reset_settings()
