"""
Rich traceback handler and one-line error summaries.

Reference: https://rich.readthedocs.io/en/stable/traceback.html
"""
import os
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.traceback import install as install_rich_traceback


def install_traceback_handler(debug: bool = False) -> None:
    """
    Install Rich traceback handler globally.

    Args:
        debug: If True, show more context lines around each frame.
    """
    console = Console(stderr=True)

    # Locals only on explicit opt-in
    show_locals = os.getenv("CPUPROBE_TRACEBACK_LOCALS", "").lower() in ("1", "true", "yes")

    install_rich_traceback(
        console=console,
        show_locals=show_locals,
        width=None,   # Use terminal width
        extra_lines=3 if debug else 1,
        word_wrap=True,
    )


def print_fracture_summary(
    stage: str,
    error: Exception,
    console: Optional[Console] = None
) -> None:
    """
    Print user-friendly error summary.

    Full tracebacks are only shown in debug mode; this is the normal-mode
    replacement.

    Args:
        stage: Stage name where error occurred (e.g., "config", "probe")
        error: The exception that was raised
        console: Optional Console instance (defaults to stderr)
    """
    if console is None:
        console = Console(stderr=True)

    console.print(f"[bold red]<x> {stage} | fracture detected[/bold red]")
    console.print(f"[red]    cause: {escape(str(error))}[/red]")

    # Hint for debug mode
    if os.getenv("LOG_LEVEL", "").lower() != "debug":
        console.print("[dim]    run with --debug for full traceback[/dim]")
