"""
Main Config class for displayconfig-mutter.
"""

import os
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomli
    import tomli_w
except ImportError:
    raise ImportError("Required packages 'tomli' and 'tomli-w' not found. Install with: pip install tomli tomli-w")

from ..exceptions import ConfigError, ConfigValidationError

from .dataclasses import (
    DBusConfig,
    LoggingConfig,
    OutputConfig,
)
from .validation import validate_toml_structure


VALID_BUSES = ('session', 'system')
VALID_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_OUTPUT_FORMATS = ('table', 'json')


@dataclass
class Config:
    """
    Main configuration class for displayconfig-mutter.

    Configuration is loaded from an optional TOML file. Every setting has a
    default, so the tool works without any config file.
    """

    dbus: DBusConfig = field(default_factory=DBusConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.dbus.bus not in VALID_BUSES:
            raise ConfigValidationError(
                f"Invalid D-Bus bus: {self.dbus.bus}\n"
                f"Must be one of: {list(VALID_BUSES)}"
            )

        if self.dbus.timeout_ms != -1 and self.dbus.timeout_ms <= 0:
            raise ConfigValidationError(
                f"D-Bus timeout ({self.dbus.timeout_ms}ms) must be positive, or -1 for the default."
            )

        if self.logging.level.upper() not in VALID_LEVELS:
            raise ConfigValidationError(
                f"Invalid log level: {self.logging.level}\n"
                f"Must be one of: {VALID_LEVELS}"
            )

        if self.output.format not in VALID_OUTPUT_FORMATS:
            raise ConfigValidationError(
                f"Invalid output format: {self.output.format}\n"
                f"Must be one of: {list(VALID_OUTPUT_FORMATS)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def get_config_dir(cls) -> Path:
        """
        Get user configuration directory.

        Uses XDG_CONFIG_HOME if set, otherwise defaults to ~/.config.
        """
        xdg_config = os.environ.get("XDG_CONFIG_HOME")
        if xdg_config:
            return Path(xdg_config) / "displayconfig-mutter"
        return Path.home() / ".config" / "displayconfig-mutter"

    @classmethod
    def get_config_file(cls) -> Path:
        return cls.get_config_dir() / "config.toml"

    @classmethod
    def load(cls, config_file: Optional[Path] = None) -> 'Config':
        """
        Load configuration from a TOML file.

        A missing file yields the defaults.

        Args:
            config_file: Optional path to config TOML file

        Returns:
            Config instance with loaded settings

        Raises:
            ConfigError: If the file cannot be parsed or has unknown keys
            ConfigValidationError: If a value is out of range
        """
        logger = logging.getLogger(__name__)

        if not config_file:
            config_file = cls.get_config_file()

        config_dict: Dict[str, Any] = {}
        if config_file.exists():
            try:
                with open(config_file, 'rb') as f:
                    config_dict = tomli.load(f)
            except tomli.TOMLDecodeError as e:
                raise ConfigError(f"Failed to parse {config_file}: {e}") from e
            except OSError as e:
                raise ConfigError(f"Failed to read {config_file}: {e}") from e

            validate_toml_structure(config_dict, config_file)
            logger.info(f"Loaded config from {config_file}")
        else:
            logger.debug(f"No config file at {config_file}, using defaults")

        return cls(
            dbus=DBusConfig(**config_dict.get('dbus', {})),
            logging=LoggingConfig(**config_dict.get('logging', {})),
            output=OutputConfig(**config_dict.get('output', {})),
        )

    def save(self, config_file: Optional[Path] = None) -> Path:
        """
        Write this configuration as TOML.

        Returns:
            Path of the written file

        Raises:
            ConfigError: If the file cannot be written
        """
        config_file = config_file or self.get_config_file()
        try:
            config_file.parent.mkdir(parents=True, exist_ok=True)
            with open(config_file, 'wb') as f:
                tomli_w.dump(self.to_dict(), f)
        except OSError as e:
            raise ConfigError(f"Failed to write config to {config_file}: {e}") from e
        return config_file
