"""Initialization command."""

import logging
from pathlib import Path
from typing import Optional

from ..config import Config


def init_config(config: Config, config_file: Optional[Path] = None) -> Path:
    """
    Write a config file with the current settings, unless one exists.

    Returns:
        Path of the config file
    """
    logger = logging.getLogger(__name__)

    config_file = config_file or Config.get_config_file()
    if config_file.exists():
        print(f"Configuration already exists at {config_file}")
        return config_file

    config.save(config_file)
    logger.info(f"Wrote default config to {config_file}")
    print(f"Configuration initialized at {config_file}")
    return config_file
