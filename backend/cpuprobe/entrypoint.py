"""
Package-native CLI entry point for cpuprobe.

Used by the installed console script (cpuprobe) and `python -m cpuprobe`.
"""

import os
import sys
from typing import Optional


def _config_arg(argv: list[str]) -> Optional[str]:
    """Value of --config FILE / --config=FILE, if given."""
    for idx, arg in enumerate(argv):
        if arg.startswith("--config="):
            return arg.split("=", 1)[1] or None
        if arg == "--config" and idx + 1 < len(argv):
            return argv[idx + 1]
    return None


def _is_debug_mode(argv: list[str]) -> bool:
    """Resolve debug mode from CLI flag, env, or config (honouring --config)."""
    if "--debug" in argv:
        return True
    if os.getenv("LOG_LEVEL", "").lower() == "debug":
        return True

    from cpuprobe.core.config_manager import ConfigManager
    from cpuprobe.core.errors import ConfigError

    toml_path = _config_arg(argv)
    if toml_path and not os.path.isfile(toml_path):
        # Typer rejects the missing file itself
        return False
    try:
        return ConfigManager(toml_path=toml_path).get_bool("logging.debug", default=False)
    except ConfigError:
        # The command reports a broken config.toml itself
        return False


def main() -> None:
    """Entry point for the cpuprobe console script."""
    debug_mode = _is_debug_mode(sys.argv)
    from cpuprobe.core.tracebacks import install_traceback_handler, print_fracture_summary

    install_traceback_handler(debug=debug_mode)

    from cpuprobe.cli.app import app

    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        if debug_mode:
            raise
        print_fracture_summary("probe", e)
        sys.exit(1)
