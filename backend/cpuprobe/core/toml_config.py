"""
TOML configuration file access.
Reads config.toml (architecture table, scanner and output settings).
"""
from pathlib import Path
from typing import Optional, Dict, Any

import tomlkit
from tomlkit.exceptions import ParseError

from .errors import ConfigError
from .logger import setup_logger

logger = setup_logger(__name__)

TOML_FILENAME = "config.toml"


def get_toml_path(env_path: Optional[Path] = None) -> Path:
    """
    Get path to config.toml file.

    Args:
        env_path: Path to .env file (config.toml will be in same directory)

    Returns:
        Path to config.toml
    """
    if env_path:
        return env_path.parent / TOML_FILENAME

    from .config_manager import get_config_location
    env_location = get_config_location()
    return env_location.parent / TOML_FILENAME


def read_toml(toml_path: Path) -> Dict[str, Any]:
    """
    Read config.toml file.

    Args:
        toml_path: Path to config.toml

    Returns:
        Dictionary of configuration values (plain Python types), {} if the file is absent

    Raises:
        ConfigError: the file exists but is not valid TOML
    """
    if not toml_path.exists():
        logger.debug(f"config.toml not found at {toml_path}")
        return {}

    try:
        with open(toml_path, 'r', encoding='utf-8') as f:
            document = tomlkit.load(f)
    except ParseError as e:
        raise ConfigError(f"invalid TOML in {toml_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read {toml_path}: {e}") from e

    logger.debug(f"Loaded config.toml from {toml_path}")
    return document.unwrap()


def get_nested_value(config: Dict[str, Any], key_path: str, default: Any = None) -> Any:
    """
    Get a nested value from config dict using dot notation.

    Args:
        config: Configuration dictionary
        key_path: Dot-separated key path (e.g., "scanner.format" or "output.plain")
        default: Default value if key not found

    Returns:
        Value at key path, or default
    """
    keys = key_path.split('.')
    current = config

    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default

    return current
