"""
Exception hierarchy for netconf-ifstats.

All exceptions inherit from IfStatsError for unified error handling.
Per-device failures during a poll pass (ConnectError, RpcError,
DecodeError) are recoverable and are reported alongside the metrics
that were gathered.
"""

from __future__ import annotations

from typing import Any


class IfStatsError(Exception):
    """
    Base exception for all netconf-ifstats errors.

    Attributes:
        message: Human-readable error description
        context: Optional dictionary with additional error context
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx_str})"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(IfStatsError):
    """
    Error in configuration parsing or validation.

    Raised when:
    - YAML config file is malformed
    - Required fields are missing
    - Field values fail validation
    """

    pass


class ConfigFileNotFoundError(ConfigurationError):
    """Configuration file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Configuration file not found: {path}", context={"path": path})


class ConfigValidationError(ConfigurationError):
    """
    Configuration validation failed.

    Attributes:
        field: The field that failed validation
        reason: Why validation failed
    """

    def __init__(self, field: str, reason: str):
        super().__init__(
            f"Validation failed for '{field}': {reason}",
            context={"field": field},
        )
        self.field = field
        self.reason = reason


# =============================================================================
# NETCONF Errors
# =============================================================================


class NetconfError(IfStatsError):
    """Base class for NETCONF-related errors."""

    pass


class ConnectError(NetconfError):
    """Failed to establish a NETCONF session with a device."""

    def __init__(self, address: str, reason: str):
        super().__init__(
            f"Failed to connect to {address}: {reason}",
            context={"address": address},
        )
        self.address = address
        self.reason = reason


class AuthenticationFailedError(ConnectError):
    """The device rejected the configured username/password."""

    def __init__(self, address: str, username: str):
        super().__init__(address, f"authentication failed for user {username!r}")
        self.username = username


class HostKeyError(ConnectError):
    """The device's SSH host key was not trusted."""

    def __init__(self, address: str, fingerprint: str | None = None):
        reason = "host key not trusted"
        if fingerprint:
            reason += f" (fingerprint {fingerprint})"
        super().__init__(address, reason)
        self.fingerprint = fingerprint


class RpcError(NetconfError):
    """RPC request/response failed on an established session."""

    def __init__(self, address: str, reason: str):
        super().__init__(
            f"RPC to {address} failed: {reason}",
            context={"address": address},
        )
        self.address = address
        self.reason = reason


class RpcTimeoutError(RpcError):
    """RPC did not complete within the configured timeout."""

    def __init__(self, address: str, timeout: float):
        super().__init__(address, f"timed out after {timeout}s")
        self.timeout = timeout


# =============================================================================
# Data Parsing Errors
# =============================================================================


class DecodeError(IfStatsError):
    """Reply payload could not be decoded into interface statistics."""

    def __init__(self, reason: str, address: str | None = None):
        message = f"Failed to decode reply: {reason}"
        if address:
            message = f"Failed to decode reply from {address}: {reason}"
        super().__init__(message)
        self.reason = reason
        self.address = address
