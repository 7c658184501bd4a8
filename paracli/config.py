"""Persisted PARA configuration: root directory and naming mode."""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from paracli.errors import ConfigError, ConfigMismatchError
from paracli.path_utils import validate_safe_path

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "PARA_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "para" / "config.yaml"


def default_config() -> Dict[str, Any]:
    """Configuration used when no file has been stored yet."""
    return {
        # Directory holding the four PARA folders
        "root_dir": Path.cwd(),

        # Prefix folder names with their ordinal (0_Projects, 1_Areas, ...)
        "use_prefix": False,
    }


def get_config_path(config_path: Optional[Path] = None) -> Path:
    """
    Determine the configuration file location.

    Priority order:
    1. Explicit ``config_path`` (the ``--config`` option)
    2. Environment variable PARA_CONFIG
    3. ~/.config/para/config.yaml
    """
    if config_path:
        return Path(config_path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def _check_extension(config_path: Path) -> None:
    if config_path.suffix.lower() not in ['.yaml', '.yml']:
        raise ConfigError(f"Configuration file must be YAML (.yaml or .yml): {config_path}")


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary with ``root_dir`` (Path) and ``use_prefix`` (bool)

    Raises:
        ConfigError: If the file is not YAML, unreadable, or malformed
    """
    config = default_config()
    config_path = get_config_path(config_path)

    try:
        config_path = validate_safe_path(config_path, must_exist=False)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration path: {e}") from e
    _check_extension(config_path)

    if not config_path.exists():
        logger.debug(f"No configuration file at {config_path}, using defaults")
        return config

    if not config_path.is_file():
        raise ConfigError(f"Configuration path is not a file: {config_path}")

    logger.debug(f"Parsing config file from {config_path}")
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read configuration {config_path}: {e}") from e

    if user_config is None:
        return config
    if not isinstance(user_config, dict):
        raise ConfigError(f"Configuration must be a mapping: {config_path}")

    if "root_dir" in user_config:
        root_dir = user_config["root_dir"]
        if not isinstance(root_dir, str) or not root_dir:
            raise ConfigError(f"'root_dir' must be a path string in {config_path}")
        root_dir = Path(root_dir).expanduser()
        if not root_dir.is_absolute():
            raise ConfigError(f"'root_dir' must be an absolute path in {config_path}: {root_dir}")
        config["root_dir"] = root_dir

    if "use_prefix" in user_config:
        use_prefix = user_config["use_prefix"]
        if not isinstance(use_prefix, bool):
            raise ConfigError(f"'use_prefix' must be true or false in {config_path}")
        config["use_prefix"] = use_prefix

    return config


def save_config(config: Dict[str, Any], config_path: Optional[Path] = None) -> Path:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Path to save configuration

    Returns:
        Path the configuration was written to
    """
    config_path = get_config_path(config_path)
    try:
        config_path = validate_safe_path(config_path, must_exist=False)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration path: {e}") from e
    _check_extension(config_path)

    data = {
        "root_dir": str(config["root_dir"]),
        "use_prefix": bool(config["use_prefix"]),
    }

    try:
        # Create parent directory if it doesn't exist
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False)
    except OSError as e:
        raise ConfigError(f"Could not write configuration {config_path}: {e}") from e

    logger.debug(f"Stored configuration in {config_path}")
    return config_path


def prepare_init_config(
    config: Dict[str, Any],
    current_dir: Path,
    force: bool = False,
    numbered: bool = False
) -> Dict[str, Any]:
    """
    Apply the re-initialization policy before ``init`` creates directories.

    Args:
        config: Loaded configuration
        current_dir: Directory ``init`` is run from
        force: Move the PARA root to ``current_dir`` if it differs
        numbered: Naming mode to store

    Returns:
        Updated copy of the configuration

    Raises:
        ConfigMismatchError: If the configured root differs from
            ``current_dir`` and ``force`` is not set
    """
    config = dict(config)
    root_dir = Path(config["root_dir"])

    if root_dir != current_dir:
        if not force:
            raise ConfigMismatchError(root_dir, current_dir)
        logger.warning("Existing config directory does not match current directory.")
        logger.debug(f"Config root: {root_dir}")
        logger.debug(f"Current directory: {current_dir}")
        logger.info(f"Setting new root directory for PARA folders: {current_dir}")
        config["root_dir"] = current_dir

    config["use_prefix"] = numbered
    return config
