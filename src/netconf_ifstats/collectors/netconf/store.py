"""
Session store for cached NETCONF sessions.

Sessions are opened on first use and reused across poll passes until
they are evicted (after an RPC failure) or the store is closed.
"""

from __future__ import annotations

import logging
import threading
from typing import Protocol

from netconf_ifstats.collectors.base import BaseSession
from netconf_ifstats.core.config import DeviceConfig
from netconf_ifstats.core.exceptions import ConnectError

logger = logging.getLogger(__name__)


class Connector(Protocol):
    """Anything that can open a session for a device."""

    def connect(self, device: DeviceConfig) -> BaseSession: ...


class SessionStore:
    """
    Thread-safe mapping of device address to open session.

    The map itself is guarded by one lock. Connects are serialized per
    address with a keyed lock, so a slow connect to one device never
    blocks lookups or connects for another. At most one live session
    is cached per address.

    Attributes:
        connector: Opens new sessions on cache misses
    """

    def __init__(self, connector: Connector):
        self.connector = connector
        self._lock = threading.Lock()
        self._sessions: dict[str, BaseSession] = {}
        self._connect_locks: dict[str, threading.Lock] = {}
        # Bumped by close_all so connects that straddle it are discarded
        self._generation = 0

    def get_or_create(self, device: DeviceConfig) -> BaseSession:
        """
        Return the cached session for a device, connecting if needed.

        Args:
            device: Device to look up

        Returns:
            Open session bound to device.address

        Raises:
            ConnectError: If a new session cannot be established, or the
                store was closed while it was being established
        """
        address = device.address
        with self._lock:
            session = self._sessions.get(address)
            if session is not None:
                return session
            connect_lock = self._connect_locks.setdefault(address, threading.Lock())

        with connect_lock:
            with self._lock:
                # Another caller may have connected while we waited
                session = self._sessions.get(address)
                if session is not None:
                    return session
                generation = self._generation

            session = self.connector.connect(device)

            with self._lock:
                if generation == self._generation:
                    self._sessions[address] = session
                    return session

        logger.info(f"Session store closed while connecting to {address}; discarding session")
        self._close_quietly(session)
        raise ConnectError(address, "session store closed")

    def get(self, address: str) -> BaseSession | None:
        """Return the cached session for an address without connecting."""
        with self._lock:
            return self._sessions.get(address)

    def evict(self, address: str, session: BaseSession | None = None) -> bool:
        """
        Remove and close the cached session for an address.

        Args:
            address: Device address
            session: If given, only evict when this exact session is the
                cached one (a newer session is left alone)

        Returns:
            True if a session was evicted
        """
        with self._lock:
            cached = self._sessions.get(address)
            if cached is None or (session is not None and cached is not session):
                return False
            del self._sessions[address]

        logger.info(f"Evicted session for {address}")
        self._close_quietly(cached)
        return True

    def close_all(self) -> None:
        """Close every cached session and clear the store."""
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
            self._generation += 1

        for session in sessions:
            self._close_quietly(session)
        if sessions:
            logger.info(f"Closed {len(sessions)} session(s)")

    @staticmethod
    def _close_quietly(session: BaseSession) -> None:
        """Close a session, logging instead of raising on failure."""
        try:
            session.close()
        except Exception as e:
            logger.warning(f"Error closing session to {session.address}: {e}")

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, address: object) -> bool:
        with self._lock:
            return address in self._sessions
