"""
Configuration validation for displayconfig-mutter.
"""

from pathlib import Path
from typing import Any, Dict

from ..exceptions import ConfigError


VALID_STRUCTURE: Dict[str, Dict[str, type]] = {
    'dbus': {
        'bus': str,
        'timeout_ms': int,
    },
    'logging': {
        'level': str,
    },
    'output': {
        'format': str,
    },
}


def validate_toml_structure(config_dict: Dict[str, Any], config_file: Path) -> None:
    """
    Validate TOML structure before creating dataclasses.

    Checks for unknown sections and keys, providing helpful error messages.

    Args:
        config_dict: Loaded TOML configuration dictionary
        config_file: Path to config file for error messages

    Raises:
        ConfigError: If structure validation fails
    """
    for section in config_dict:
        if section not in VALID_STRUCTURE:
            raise ConfigError(
                f"Unknown config section '{section}' in {config_file}. "
                f"Valid sections: {list(VALID_STRUCTURE.keys())}"
            )

    for section_name, section_config in config_dict.items():
        if not isinstance(section_config, dict):
            raise ConfigError(
                f"Section '{section_name}' must be a table in {config_file}"
            )

        valid_keys = VALID_STRUCTURE[section_name]
        for key, value in section_config.items():
            if key not in valid_keys:
                raise ConfigError(
                    f"Unknown key '{key}' in section '{section_name}' in {config_file}. "
                    f"Valid keys: {list(valid_keys.keys())}"
                )

            # bool is a subclass of int, TOML booleans are never valid integers here
            expected_type = valid_keys[key]
            if not isinstance(value, expected_type) or (
                expected_type is int and isinstance(value, bool)
            ):
                raise ConfigError(
                    f"Key '{section_name}.{key}' must be of type {expected_type.__name__} "
                    f"in {config_file}, got {type(value).__name__}"
                )
