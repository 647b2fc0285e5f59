"""
Configuration loader — reads gitseq.yml into a SequencerConfig.

Configuration is optional: without a file every setting takes its
default. A file that exists but cannot be read or validated is an
error, never silently ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from gitseq.core.models.config import SequencerConfig

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "gitseq.yml"

# Optional wrapper key: settings may sit under "gitseq:" or at top level
CONFIG_SECTION = "gitseq"

# Directories examined by find_config_file, starting directory included
MAX_SEARCH_DEPTH = 20


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for gitseq.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to gitseq.yml, or None if not found.
    """
    here = (start_dir or Path.cwd()).resolve()
    for directory in [here, *here.parents][:MAX_SEARCH_DEPTH]:
        if (directory / CONFIG_FILE).is_file():
            return directory / CONFIG_FILE
    return None


def load_config(path: Path | None = None, search: bool = True) -> SequencerConfig:
    """Load and validate the sequencer configuration.

    Args:
        path: Explicit path to a config file. Must exist if given.
        search: If True and no path is given, search upward from cwd.

    Returns:
        Validated SequencerConfig (defaults when no file is found).

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None:
        path = find_config_file() if search else None
        if path is None:
            logger.debug("No %s found, using defaults", CONFIG_FILE)
            return SequencerConfig()
    elif not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return SequencerConfig()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    if CONFIG_SECTION in data:
        data = data[CONFIG_SECTION] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping under '{CONFIG_SECTION}' in {path}")

    try:
        config = SequencerConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded config from %s", path)
    return config
