"""Tests for configuration loading and validation."""

import pytest

from displayconfig_mutter.config import Config, DBusConfig, LoggingConfig, OutputConfig
from displayconfig_mutter.exceptions import ConfigError, ConfigValidationError


class TestConfigDefaults:
    """Test that the tool works without a config file."""

    def test_defaults(self):
        config = Config()
        assert config.dbus.bus == "session"
        assert config.dbus.timeout_ms == -1
        assert config.logging.level == "WARNING"
        assert config.output.format == "table"

    def test_missing_file_gives_defaults(self, tmp_path):
        config = Config.load(config_file=tmp_path / "missing.toml")
        assert config == Config()

    def test_config_dir_follows_xdg(self, tmp_path, monkeypatch):
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert Config.get_config_file() == tmp_path / "displayconfig-mutter" / "config.toml"

    def test_config_dir_without_xdg(self, tmp_path, monkeypatch):
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert Config.get_config_dir() == tmp_path / ".config" / "displayconfig-mutter"


class TestConfigLoad:
    """Test loading TOML files."""

    def test_load_values(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("""
[dbus]
bus = "system"
timeout_ms = 5000

[logging]
level = "debug"

[output]
format = "json"
""")
        config = Config.load(config_file=config_file)
        assert config.dbus == DBusConfig(bus="system", timeout_ms=5000)
        assert config.logging == LoggingConfig(level="debug")
        assert config.output == OutputConfig(format="json")

    def test_partial_file(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[output]\nformat = "json"\n')
        config = Config.load(config_file=config_file)
        assert config.output.format == "json"
        assert config.dbus == DBusConfig()

    def test_malformed_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[dbus\nbus = ")
        with pytest.raises(ConfigError, match="Failed to parse"):
            Config.load(config_file=config_file)

    def test_unknown_section(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[monitors]\ncount = 2\n')
        with pytest.raises(ConfigError, match="Unknown config section 'monitors'"):
            Config.load(config_file=config_file)

    def test_unknown_key(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[dbus]\naddress = "unix:path=/run/bus"\n')
        with pytest.raises(ConfigError, match="Unknown key 'address'"):
            Config.load(config_file=config_file)

    def test_section_must_be_table(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('output = "json"\n')
        with pytest.raises(ConfigError, match="must be a table"):
            Config.load(config_file=config_file)

    @pytest.mark.parametrize("content", [
        '[dbus]\ntimeout_ms = "5000"\n',
        '[dbus]\ntimeout_ms = true\n',
        '[logging]\nlevel = 10\n',
    ])
    def test_wrong_type(self, tmp_path, content):
        config_file = tmp_path / "config.toml"
        config_file.write_text(content)
        with pytest.raises(ConfigError, match="must be of type"):
            Config.load(config_file=config_file)


class TestConfigValidation:
    """Test value validation."""

    def test_invalid_bus(self):
        with pytest.raises(ConfigValidationError, match="Invalid D-Bus bus"):
            Config(dbus=DBusConfig(bus="starter"))

    @pytest.mark.parametrize("timeout_ms", [0, -5])
    def test_invalid_timeout(self, timeout_ms):
        with pytest.raises(ConfigValidationError):
            Config(dbus=DBusConfig(timeout_ms=timeout_ms))

    def test_invalid_level(self):
        with pytest.raises(ConfigValidationError, match="Invalid log level"):
            Config(logging=LoggingConfig(level="VERBOSE"))

    def test_invalid_format(self):
        with pytest.raises(ConfigValidationError, match="Invalid output format"):
            Config(output=OutputConfig(format="yaml"))

    def test_validation_errors_are_config_errors(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[dbus]\nbus = "starter"\n')
        with pytest.raises(ConfigError):
            Config.load(config_file=config_file)


class TestConfigSave:
    """Test writing config files."""

    def test_save_and_load(self, tmp_path):
        config_file = tmp_path / "nested" / "config.toml"
        config = Config(dbus=DBusConfig(timeout_ms=2000), output=OutputConfig(format="json"))

        written = config.save(config_file)

        assert written == config_file
        assert "[dbus]" in config_file.read_text()
        assert Config.load(config_file=config_file) == config
