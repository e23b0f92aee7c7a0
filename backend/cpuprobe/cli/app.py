"""
Root Typer app for the cpuprobe CLI.
"""
import platform
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer

from cpuprobe import __version__
from cpuprobe.cli.output import ProbeConsole
from cpuprobe.core.config_manager import ConfigManager
from cpuprobe.core.errors import ConfigError
from cpuprobe.core.logger import refresh_log_levels, setup_logger
from cpuprobe.core.probe import (
    ProbeResult,
    exit_status,
    probe_file,
    probe_system,
    system_info_path,
)
from cpuprobe.core.scanner import LineFormat
from cpuprobe.core.tracebacks import print_fracture_summary
from cpuprobe.utils.file_utils import iter_info_files

VERSION = __version__
APP_NAME = "cpuprobe"

logger = setup_logger(__name__)

app = typer.Typer(
    name=APP_NAME,
    help="Read processor and hardware-platform names out of cpuinfo-style files",
    add_completion=False,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"{APP_NAME} {VERSION}")
        raise typer.Exit()


@app.command()
def probe(
    ctx: typer.Context,
    paths: Optional[List[Path]] = typer.Argument(
        None,
        help="Info files to probe; directories are walked recursively",
        show_default=False,
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Announce each key and trace every scanned line"
    ),
    line_format: Optional[LineFormat] = typer.Option(
        None,
        "--format",
        "-f",
        case_sensitive=False,
        help="Line format (default: scanner.format from config, else auto)",
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", exists=True, dir_okay=False, help="Path to config.toml"
    ),
    system: bool = typer.Option(
        False, "--system", help="Probe this machine's /proc/cpuinfo (/proc/sysinfo on s390)"
    ),
    list_arches: bool = typer.Option(
        False, "--list-arches", help="Show the architecture table and exit"
    ),
    plain: bool = typer.Option(False, "--plain", help="Disable colors"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging and full tracebacks"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        help="Show version and exit",
        is_eager=True,
    ),
) -> None:
    """
    Probe info files for the processor and hardware-platform fields.

    The architecture is guessed from each file's name (or its directory,
    as in arm/cpuinfo), which selects the two keys to look for. Exit status
    is 0 when every file yields both fields, else the number of failed files.
    """
    if not paths and not system and not list_arches:
        ctx.fail("Missing argument 'PATHS...'. Name at least one info file, or use --system.")

    try:
        config_manager = ConfigManager(toml_path=str(config) if config else None)
        settings = config_manager.probe_settings()
    except ConfigError as e:
        print_fracture_summary("config", e)
        raise typer.Exit(code=1)

    debug = debug or config_manager.get_bool("logging.debug")
    refresh_log_levels(verbose=verbose, debug=debug)

    console = ProbeConsole(plain=plain or config_manager.get_bool("output.plain"))
    if line_format is not None:
        settings = replace(settings, line_format=line_format)

    if list_arches:
        source = (
            str(config_manager.toml_path)
            if config_manager.get("architectures") is not None
            else "built-in"
        )
        console.print_architectures(settings.table, source)
        raise typer.Exit()

    tracer = console.tracer() if verbose else None
    results: List[ProbeResult] = []

    if system:
        machine = platform.machine()
        console.print_parsing(system_info_path(machine))
        result = probe_system(settings, tracer, machine=machine)
        console.print_result(result)
        results.append(result)

    for path in iter_info_files(paths or []):
        console.print_parsing(path)
        result = probe_file(path, settings, tracer)
        console.print_result(result)
        results.append(result)

    if not results:
        logger.warning("No info files found.")
        raise typer.Exit()

    if len(results) > 1:
        console.print_summary(results)

    code = exit_status(results)
    if code:
        raise typer.Exit(code=code)
