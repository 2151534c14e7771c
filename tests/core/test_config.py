"""
Tests for configuration loading and validation.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from pydantic import SecretStr, ValidationError

from netconf_ifstats.core.config import (
    SAMPLE_CONFIG,
    DeviceConfig,
    IfStatsSettings,
    PollerConfig,
    get_settings,
    load_config,
    normalize_fingerprint,
    split_address,
)
from netconf_ifstats.core.exceptions import (
    ConfigFileNotFoundError,
    ConfigurationError,
    ConfigValidationError,
)


class TestSplitAddress:
    """Tests for host:port parsing."""

    @pytest.mark.parametrize(
        ("address", "expected"),
        [
            ("192.168.1.1:830", ("192.168.1.1", 830)),
            ("router1.example.com:2830", ("router1.example.com", 2830)),
            ("router1", ("router1", 830)),
            ("[2001:db8::1]:830", ("2001:db8::1", 830)),
            ("[2001:db8::1]", ("2001:db8::1", 830)),
            ("2001:db8::1", ("2001:db8::1", 830)),
        ],
    )
    def test_valid(self, address, expected):
        """Test valid addresses."""
        assert split_address(address) == expected

    @pytest.mark.parametrize("address", ["router1:0", "router1:70000", "router1:ssh", ":830", "[::1", "[::1]x"])
    def test_invalid(self, address):
        """Test invalid addresses are rejected."""
        with pytest.raises(ValueError):
            split_address(address)


class TestDeviceConfig:
    """Tests for DeviceConfig."""

    def test_defaults(self):
        """Test defaults."""
        device = DeviceConfig(address="192.168.1.1:830", username="admin", password=SecretStr("pw"))

        assert device.host == "192.168.1.1"
        assert device.port == 830
        assert device.hostkey_verify is True
        assert device.host_key_fingerprints == ()

    def test_password_hidden_in_repr(self):
        """Test password hidden in repr."""
        device = DeviceConfig(address="r1:830", username="admin", password="hunter2")

        assert "hunter2" not in repr(device)
        assert device.password.get_secret_value() == "hunter2"

    def test_invalid_address(self):
        """Test invalid address."""
        with pytest.raises(ValidationError):
            DeviceConfig(address="r1:notaport", username="admin", password="pw")

    def test_fingerprints_normalized(self):
        """Test fingerprints normalized."""
        device = DeviceConfig(
            address="r1", username="admin", password="pw", host_key_fingerprints=["AA:BB:CC", " "]
        )

        assert device.host_key_fingerprints == ("aabbcc",)

    def test_frozen(self):
        """Test device config is immutable."""
        device = DeviceConfig(address="r1", username="admin", password="pw")

        with pytest.raises(ValidationError):
            device.address = "r2"  # type: ignore[misc]


class TestNormalizeFingerprint:
    def test_strips_prefix_and_separators(self):
        """Test strips prefix and separators."""
        assert normalize_fingerprint("MD5:AA:bb:CC") == "aabbcc"


class TestLoadConfig:
    """Tests for YAML config loading."""

    def test_load(self, tmp_path):
        """Test loading a YAML config."""
        path = tmp_path / "devices.yaml"
        path.write_text(
            "devices:\n"
            "  - address: 192.168.1.1:830\n"
            "    username: admin\n"
            "    password: secret\n"
            "  - address: 192.168.1.2:830\n"
            "    username: oper\n"
            "    password: secret2\n"
            "    hostkey_verify: false\n"
            "rpc_timeout: 15\n"
            "workers: 2\n"
        )

        config = load_config(path)

        assert [d.address for d in config.devices] == ["192.168.1.1:830", "192.168.1.2:830"]
        assert config.devices[1].hostkey_verify is False
        assert config.rpc_timeout == 15
        assert config.connect_timeout == 30
        assert config.workers == 2

    def test_empty_file(self, tmp_path):
        """Test empty file."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == PollerConfig()

    def test_missing_file(self, tmp_path):
        """Test missing file."""
        with pytest.raises(ConfigFileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test invalid YAML."""
        path = tmp_path / "bad.yaml"
        path.write_text("devices: [unclosed\n")

        with pytest.raises(ConfigurationError) as excinfo:
            load_config(path)

        assert "Invalid YAML" in str(excinfo.value)

    def test_top_level_not_mapping(self, tmp_path):
        """Test top level not mapping."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_missing_username(self, tmp_path):
        """Test missing username."""
        path = tmp_path / "nouser.yaml"
        path.write_text("devices:\n  - address: r1\n    password: pw\n")

        with pytest.raises(ConfigValidationError) as excinfo:
            load_config(path)

        assert excinfo.value.field == "devices.0.username"

    def test_workers_bounds(self, tmp_path):
        """Test workers bounds."""
        path = tmp_path / "workers.yaml"
        path.write_text("workers: 0\n")

        with pytest.raises(ConfigValidationError):
            load_config(path)

    def test_sample_config_is_valid(self, tmp_path):
        """The shipped sample config loads cleanly."""
        assert yaml.safe_load(SAMPLE_CONFIG)["devices"]
        path = tmp_path / "sample.yaml"
        path.write_text(SAMPLE_CONFIG)

        config = load_config(path)

        assert config.devices[0].address == "192.168.1.1:830"


class TestSettings:
    """Tests for environment settings."""

    def test_defaults(self, monkeypatch, tmp_path):
        """Test defaults."""
        monkeypatch.chdir(tmp_path)
        settings = IfStatsSettings()

        assert settings.poll_interval == 1.0
        assert settings.config_file is None
        assert settings.log_level == "INFO"

    def test_env_overrides(self, monkeypatch, tmp_path):
        """Test env overrides."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("NCIF_POLL_INTERVAL", "10")
        monkeypatch.setenv("NCIF_CONFIG_FILE", "/etc/nc-ifstats.yaml")

        settings = IfStatsSettings()

        assert settings.poll_interval == 10.0
        assert settings.config_file == Path("/etc/nc-ifstats.yaml")

    def test_get_settings_cached(self):
        """Test get settings cached."""
        assert get_settings() is get_settings()
