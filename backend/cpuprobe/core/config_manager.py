"""
Configuration discovery and access: .env (environment overrides) plus config.toml.
"""
import os
from pathlib import Path
from typing import Any, Optional, Tuple

from dotenv import find_dotenv, load_dotenv
from platformdirs import user_config_dir

from .architectures import DEFAULT_ARCHITECTURES, ArchitectureEntry, load_architecture_table
from .errors import ConfigError
from .logger import setup_logger
from .probe import ProbeSettings
from .scanner import LineFormat, ScanLimits
from .toml_config import get_nested_value, get_toml_path, read_toml

logger = setup_logger(__name__)

APP_NAME = "cpuprobe"
CONFIG_DIR_ENV = "CPUPROBE_CONFIG_DIR"

TRUE_STRINGS = ("1", "true", "yes", "on")


def get_user_config_dir() -> Path:
    """OS-specific per-user config directory (not created)."""
    return Path(user_config_dir(APP_NAME))


def get_config_location() -> Path:
    """
    Locate the .env file; config.toml lives beside it.

    Priority:
        1. CPUPROBE_CONFIG_DIR env var
        2. a .env found from the current working directory upwards
        3. the OS user config directory
    """
    config_dir = os.getenv(CONFIG_DIR_ENV)
    if config_dir:
        return Path(config_dir).expanduser() / ".env"

    env_file = find_dotenv(usecwd=True)
    if env_file:
        return Path(env_file)

    return get_user_config_dir() / ".env"


class ConfigManager:
    """Loads .env into the environment and serves typed values from config.toml."""

    def __init__(self, env_path: Optional[str] = None, toml_path: Optional[str] = None):
        """
        Initialize ConfigManager.

        Args:
            env_path: Path to .env file (defaults to get_config_location())
            toml_path: Explicit config.toml (defaults to config.toml beside .env)

        Raises:
            ConfigError: config.toml exists but cannot be parsed
        """
        if toml_path and not env_path:
            self.toml_path = Path(toml_path)
            self.env_path = self.toml_path.parent / ".env"
        else:
            self.env_path = Path(env_path) if env_path else get_config_location()
            self.toml_path = Path(toml_path) if toml_path else get_toml_path(self.env_path)

        if self.env_path.exists():
            # Real environment variables win over .env entries
            load_dotenv(self.env_path, override=False)
            logger.debug(f"Loaded environment overrides from {self.env_path}")

        self._toml = read_toml(self.toml_path)

    def check_toml_file_exists(self) -> bool:
        """Check if config.toml exists."""
        return self.toml_path.exists()

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get a config.toml value by dotted path (e.g. "scanner.format")."""
        value = get_nested_value(self._toml, key_path, default)
        logger.debug(f"Config get: {key_path} = {value}")
        return value

    def get_bool(self, key_path: str, default: bool = False) -> bool:
        value = self.get(key_path)
        if value is None:
            return default
        if isinstance(value, bool):
            return value
        return str(value).strip().lower() in TRUE_STRINGS

    def get_limit(self, key_path: str) -> Optional[int]:
        """
        Get an optional positive integer.

        Raises:
            ConfigError: value present but not a positive integer
        """
        value = self.get(key_path)
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"{key_path} must be a positive integer, got {value!r}")
        return value

    def get_line_format(self) -> LineFormat:
        value = self.get("scanner.format", LineFormat.AUTO.value)
        try:
            return LineFormat(str(value).lower())
        except ValueError as e:
            choices = ", ".join(f.value for f in LineFormat)
            raise ConfigError(f"scanner.format must be one of {choices}, got {value!r}") from e

    def get_scan_limits(self) -> ScanLimits:
        return ScanLimits(
            key_limit=self.get_limit("scanner.key_limit"),
            value_limit=self.get_limit("scanner.value_limit"),
        )

    def get_architecture_table(self) -> Tuple[ArchitectureEntry, ...]:
        """The [[architectures]] table from config.toml, or the built-in default."""
        raw = self.get("architectures")
        if raw is None:
            return DEFAULT_ARCHITECTURES
        if not isinstance(raw, list):
            raise ConfigError("architectures must be an array of tables ([[architectures]])")
        table = load_architecture_table(raw)
        logger.info(f"Using {len(table)} architecture entries from {self.toml_path}")
        return table

    def probe_settings(self) -> ProbeSettings:
        """Assemble run-wide probe settings from config.toml."""
        return ProbeSettings(
            table=self.get_architecture_table(),
            line_format=self.get_line_format(),
            limits=self.get_scan_limits(),
        )
