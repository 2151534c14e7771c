"""
Configuration management for netconf-ifstats.

Handles loading the device list from a YAML config file and runtime
settings from environment variables and .env files.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from netconf_ifstats.constants import NetconfDefaults
from netconf_ifstats.core.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    ConfigValidationError,
)


def split_address(address: str) -> tuple[str, int]:
    """
    Split a device address into host and port.

    Accepts ``host:port``, ``[v6addr]:port``, a bare host or a bare IPv6
    address. A missing port defaults to the NETCONF port.

    Raises:
        ValueError: If the port is not a valid TCP port
    """
    address = address.strip()
    if address.startswith("["):
        host, sep, rest = address[1:].partition("]")
        if not sep:
            raise ValueError(f"unterminated IPv6 literal in {address!r}")
        port_str = rest[1:] if rest.startswith(":") else ""
        if rest and not rest.startswith(":"):
            raise ValueError(f"unexpected text after IPv6 literal in {address!r}")
    elif address.count(":") == 1:
        host, _, port_str = address.partition(":")
    else:
        # bare hostname or bare IPv6 address
        host, port_str = address, ""

    if not host:
        raise ValueError(f"missing host in {address!r}")
    if not port_str:
        return host, NetconfDefaults.PORT
    if not port_str.isdigit() or not 1 <= int(port_str) <= 65535:
        raise ValueError(f"invalid port {port_str!r} in {address!r}")
    return host, int(port_str)


def normalize_fingerprint(value: str) -> str:
    """Normalize a host key fingerprint to lowercase hex without separators."""
    value = value.strip().lower()
    if value.startswith("md5:"):
        value = value[4:]
    return value.replace(":", "")


# =============================================================================
# Device Configuration
# =============================================================================


class DeviceConfig(BaseModel):
    """
    A single NETCONF device to poll.

    Attributes:
        address: Device address as host:port (port defaults to 830)
        username: NETCONF username
        password: NETCONF password (password authentication only)
        hostkey_verify: Verify the SSH host key (known_hosts or fingerprints)
        host_key_fingerprints: Extra trusted fingerprints for hosts
            missing from known_hosts
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    address: Annotated[str, Field(min_length=1, description="host:port")]
    username: Annotated[str, Field(min_length=1)]
    password: SecretStr
    hostkey_verify: bool = True
    host_key_fingerprints: tuple[str, ...] = ()

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        """Address must split into a host and a valid port."""
        split_address(v)
        return v

    @field_validator("host_key_fingerprints")
    @classmethod
    def validate_fingerprints(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(normalize_fingerprint(fp) for fp in v if fp.strip())

    @property
    def host(self) -> str:
        return split_address(self.address)[0]

    @property
    def port(self) -> int:
        return split_address(self.address)[1]


class PollerConfig(BaseModel):
    """
    Polling configuration loaded from the config file.

    Attributes:
        devices: Devices to poll, in polling order
        connect_timeout: SSH/NETCONF connect timeout in seconds
        rpc_timeout: Per-RPC timeout in seconds
        workers: Number of devices polled concurrently (1 = sequential)
    """

    model_config = ConfigDict(frozen=True)

    devices: list[DeviceConfig] = Field(default_factory=list)
    connect_timeout: Annotated[int, Field(default=NetconfDefaults.CONNECT_TIMEOUT, ge=1, le=600)]
    rpc_timeout: Annotated[int, Field(default=NetconfDefaults.RPC_TIMEOUT, ge=1, le=600)]
    workers: Annotated[int, Field(default=1, ge=1, le=64)]


SAMPLE_CONFIG = """\
## NETCONF devices to poll, in order
devices:
  - address: "192.168.1.1:830"
    username: admin
    password: password
    ## SSH host keys are checked against ~/.ssh/known_hosts.
    ## Trust additional keys by fingerprint:
    # host_key_fingerprints:
    #   - "3f:4a:..."
    ## Disabling verification accepts any server identity. Lab use only.
    # hostkey_verify: false
  # - address: "192.168.1.2:830"
  #   username: admin
  #   password: password

## Timeouts in seconds
# connect_timeout: 30
# rpc_timeout: 30

## Devices polled concurrently (1 = one after another)
# workers: 1
"""


def load_config(path: Path | str) -> PollerConfig:
    """
    Load polling configuration from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        Validated PollerConfig

    Raises:
        ConfigFileNotFoundError: If the file does not exist
        ConfigurationError: If the file is not valid YAML or fails validation
    """
    path = Path(path)
    if not path.is_file():
        raise ConfigFileNotFoundError(str(path))

    try:
        with open(path, encoding="utf-8") as f:
            data: Any = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}", context={"path": str(path)}) from e

    if not isinstance(data, dict):
        raise ConfigValidationError("<root>", "expected a mapping at the top level")

    try:
        return PollerConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise ConfigValidationError(field, first["msg"]) from e


# =============================================================================
# Main Settings
# =============================================================================


class IfStatsSettings(BaseSettings):
    """
    Runtime settings, loaded from environment and .env files.

    Environment variables (prefix NCIF_):
        NCIF_CONFIG_FILE, NCIF_POLL_INTERVAL
        NCIF_DEBUG, NCIF_LOG_LEVEL
    """

    model_config = SettingsConfigDict(
        env_prefix="NCIF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    config_file: Path | None = None
    poll_interval: Annotated[float, Field(default=1.0, gt=0)]

    # Logging
    debug: bool = False
    log_level: Annotated[str, Field(default="INFO", pattern=r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")]


# =============================================================================
# Singleton Settings Access
# =============================================================================

_settings: IfStatsSettings | None = None


def get_settings() -> IfStatsSettings:
    """
    Get the global settings instance.

    Creates a new instance on first call, returns cached instance thereafter.
    """
    global _settings
    if _settings is None:
        _settings = IfStatsSettings()
    return _settings


def reset_settings() -> None:
    """Reset the global settings instance (useful for testing)."""
    global _settings
    _settings = None
