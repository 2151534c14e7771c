"""
Abstract base class for device sessions.

A session is an open, authenticated channel to one device that can
fetch the interface statistics payload. The session store caches
sessions between poll passes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseSession(ABC):
    """
    Abstract base class for device sessions.

    Implements the context manager protocol so a session can be used
    directly in one-off scripts; the poller instead keeps sessions open
    in a SessionStore.

    Attributes:
        address: Device address (host:port) the session is bound to
    """

    def __init__(self, address: str):
        self.address = address

    @property
    @abstractmethod
    def connected(self) -> bool:
        """Return True if the underlying transport is still open."""

    @abstractmethod
    def fetch_interface_stats(self) -> bytes:
        """
        Fetch the raw interface statistics reply.

        Returns:
            Reply payload as UTF-8 encoded XML

        Raises:
            RpcError: If the request fails or times out
        """

    @abstractmethod
    def close(self) -> None:
        """Close the session."""

    def __enter__(self) -> BaseSession:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> bool:
        """Exit context manager - close the session."""
        self.close()
        # Don't suppress exceptions
        return False

    def __repr__(self) -> str:
        state = "connected" if self.connected else "closed"
        return f"<{self.__class__.__name__} {self.address} {state}>"
