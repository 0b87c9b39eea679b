"""Configuration loader for hashline."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from hashline.config.models import HashlineConfig

CONFIG_ENV_VAR = "HASHLINE_CONFIG"
SECTIONS = ("paths", "read", "edit", "logging")


def _set_nested(config: dict[str, Any], dotted_key: str, value: Any) -> None:
    """Set ``config["a"]["b"] = value`` for ``dotted_key == "a.b"``."""
    parts = dotted_key.split(".")
    current = config
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value


def load_config_from_file(path: Path) -> HashlineConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the TOML configuration file.

    Returns:
        HashlineConfig instance with loaded configuration.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        ValueError: If the config file is invalid.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    return load_config(path)


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[dict[str, Any]] = None,
) -> HashlineConfig:
    """Load configuration with optional overrides.

    Args:
        config_path: Optional path to a TOML config file.
        overrides: Optional dictionary of configuration overrides; keys may
            be dotted (``"edit.enforce_references"``).

    Returns:
        HashlineConfig instance.
    """
    config_dict: dict[str, Any] = {}

    if config_path and config_path.exists():
        with open(config_path, "rb") as f:
            raw_config = tomllib.load(f)

        # Tables may sit at the top level or under [hashline].
        raw_config = raw_config.get("hashline", raw_config)
        for section in SECTIONS:
            if isinstance(raw_config.get(section), dict):
                config_dict[section] = dict(raw_config[section])

    if overrides:
        for key, value in overrides.items():
            _set_nested(config_dict, key, value)

    return HashlineConfig(**config_dict)


def find_config_file() -> Optional[Path]:
    """Find the configuration file in standard locations.

    Searches in order:
    1. $HASHLINE_CONFIG
    2. ./hashline.toml
    3. ./.hashline.toml
    4. ~/.config/hashline/config.toml

    Returns:
        Path to the config file if found, None otherwise.
    """
    search_paths = [
        Path.cwd() / "hashline.toml",
        Path.cwd() / ".hashline.toml",
        Path.home() / ".config" / "hashline" / "config.toml",
    ]
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        search_paths.insert(0, Path(env_path).expanduser())

    for path in search_paths:
        if path.exists():
            return path

    return None


def configure_logging(config: HashlineConfig, verbose: bool = False) -> None:
    """Configure root logging from *config*."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.logging.level,
        format=config.logging.format,
        stream=sys.stderr,
    )
