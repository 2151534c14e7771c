"""
NETCONF client for interface statistics collection.

Provides the connector that opens password-authenticated NETCONF-over-SSH
sessions through ncclient, and the session wrapper that issues the fixed
ietf-interfaces statistics <get>.
"""

from __future__ import annotations

import logging
import socket
import threading
from collections.abc import Iterable
from typing import Any

from lxml import etree
from ncclient import manager
from ncclient.operations.errors import TimeoutExpiredError
from ncclient.transport.errors import AuthenticationError, SSHError, SSHUnknownHostError

from netconf_ifstats.collectors.base import BaseSession
from netconf_ifstats.constants import INTERFACE_STATS_FILTER, NetconfDefaults
from netconf_ifstats.core.config import DeviceConfig, normalize_fingerprint
from netconf_ifstats.core.exceptions import (
    AuthenticationFailedError,
    ConnectError,
    HostKeyError,
    RpcError,
    RpcTimeoutError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Host Key Verification
# =============================================================================


class HostKeyPolicy:
    """
    Decides whether to trust a server whose key is not in known_hosts.

    ncclient checks ~/.ssh/known_hosts first and only consults the policy
    for unknown hosts. The base policy rejects every unknown host.
    """

    def verify(self, host: str, fingerprint: str) -> bool:
        """Return True to accept the unknown host key."""
        return False

    def __call__(self, host: str, fingerprint: str) -> bool:
        accepted = self.verify(host, fingerprint)
        if not accepted:
            logger.warning(f"Rejecting unknown host key for {host} ({fingerprint})")
        return accepted


class FingerprintPolicy(HostKeyPolicy):
    """Accept unknown hosts whose key fingerprint is explicitly trusted."""

    def __init__(self, fingerprints: Iterable[str] = ()):
        self.fingerprints = frozenset(normalize_fingerprint(fp) for fp in fingerprints)

    def verify(self, host: str, fingerprint: str) -> bool:
        return normalize_fingerprint(fingerprint) in self.fingerprints


# =============================================================================
# Session
# =============================================================================


class NetconfSession(BaseSession):
    """
    An open NETCONF session to one device.

    Each session serializes its own RPCs, so a session shared between
    poll workers never has two requests in flight.

    Attributes:
        address: Device address (host:port)
        rpc_timeout: Timeout applied to each RPC in seconds
    """

    def __init__(self, address: str, nc_manager: Any, rpc_timeout: float):
        super().__init__(address)
        self.rpc_timeout = rpc_timeout
        self._manager = nc_manager
        self._lock = threading.Lock()
        self._closed = False
        self._manager.timeout = rpc_timeout

    @property
    def connected(self) -> bool:
        return not self._closed and bool(getattr(self._manager, "connected", False))

    @property
    def session_id(self) -> str | None:
        return getattr(self._manager, "session_id", None)

    def fetch_interface_stats(self) -> bytes:
        """
        Execute the interface statistics <get>.

        Returns:
            The reply's <data> element serialized as UTF-8 bytes

        Raises:
            RpcError: If the session is closed or the RPC fails
            RpcTimeoutError: If the RPC exceeds rpc_timeout
        """
        with self._lock:
            if not self.connected:
                raise RpcError(self.address, "session is closed")

            logger.debug(f"Sending interface statistics <get> to {self.address}")
            try:
                reply = self._manager.get(filter=INTERFACE_STATS_FILTER)
                data = reply.data_ele
            except TimeoutExpiredError as e:
                raise RpcTimeoutError(self.address, self.rpc_timeout) from e
            except Exception as e:
                raise RpcError(self.address, str(e) or e.__class__.__name__) from e

        if data is None:
            raise RpcError(self.address, "reply carried no <data> element")
        return etree.tostring(data, encoding="utf-8")

    def close(self) -> None:
        """Close the NETCONF session."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            try:
                self._manager.close_session()
                logger.debug(f"Disconnected from {self.address}")
            finally:
                self._manager = None


# =============================================================================
# Connector
# =============================================================================


class NetconfConnector:
    """
    Opens NETCONF sessions to devices.

    Authentication is password-only: SSH agent and key lookup are disabled.

    Attributes:
        connect_timeout: SSH connect timeout in seconds
        rpc_timeout: Timeout given to each session's RPCs
        host_key_policy: Policy for unknown host keys; when None each
            device gets a FingerprintPolicy built from its config
    """

    def __init__(
        self,
        connect_timeout: float = NetconfDefaults.CONNECT_TIMEOUT,
        rpc_timeout: float = NetconfDefaults.RPC_TIMEOUT,
        host_key_policy: HostKeyPolicy | None = None,
    ):
        self.connect_timeout = connect_timeout
        self.rpc_timeout = rpc_timeout
        self.host_key_policy = host_key_policy

    def policy_for(self, device: DeviceConfig) -> HostKeyPolicy:
        """Return the host key policy used for a device."""
        if self.host_key_policy is not None:
            return self.host_key_policy
        return FingerprintPolicy(device.host_key_fingerprints)

    def connect(self, device: DeviceConfig) -> NetconfSession:
        """
        Establish a NETCONF session to a device.

        Args:
            device: Device to connect to

        Returns:
            Connected NetconfSession

        Raises:
            HostKeyError: If the host key is not trusted
            AuthenticationFailedError: If the credentials are rejected
            ConnectError: For any other transport failure
        """
        if not device.hostkey_verify:
            logger.warning(
                f"Host key verification disabled for {device.address}; "
                "any server identity will be accepted"
            )

        logger.info(f"Connecting to {device.address}")
        try:
            nc_manager = manager.connect(
                host=device.host,
                port=device.port,
                username=device.username,
                password=device.password.get_secret_value(),
                hostkey_verify=device.hostkey_verify,
                unknown_host_cb=self.policy_for(device),
                timeout=self.connect_timeout,
                device_params=dict(NetconfDefaults.DEVICE_PARAMS),
                allow_agent=False,
                look_for_keys=False,
            )
        except SSHUnknownHostError as e:
            raise HostKeyError(device.address, getattr(e, "fingerprint", None)) from e
        except AuthenticationError as e:
            raise AuthenticationFailedError(device.address, device.username) from e
        except SSHError as e:
            raise ConnectError(device.address, f"SSH error: {e}") from e
        except socket.gaierror as e:
            raise ConnectError(device.address, f"DNS resolution failed: {e}") from e
        except TimeoutError as e:
            raise ConnectError(
                device.address, f"Connection timed out after {self.connect_timeout}s"
            ) from e
        except Exception as e:
            raise ConnectError(device.address, str(e) or e.__class__.__name__) from e

        session = NetconfSession(device.address, nc_manager, self.rpc_timeout)
        logger.info(f"Connected to {device.address} (session-id {session.session_id})")
        return session
