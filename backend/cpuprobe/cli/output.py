"""
Probe report console using Rich.
"""
import os
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from cpuprobe.core.architectures import ArchitectureEntry
from cpuprobe.core.probe import ProbeResult
from cpuprobe.core.scanner import InfoRecord, ScanTracer

OK_MARK = ">>>"
FAILED_MARK = "!!!"
TRACE_MARK = "###"


class ProbeConsole:
    """
    Centralized console for probe output.

    The report goes to stdout; logging and fractures use stderr. Everything read from
    info files is escaped so Rich never treats "[...]" in a value as markup,
    and long values are never wrapped.
    """

    def __init__(self, plain: bool = False):
        """
        Initialize ProbeConsole.

        Args:
            plain: If True, disable colors (for CI/logs). NO_COLOR forces it too.
        """
        self.plain = plain or os.getenv("NO_COLOR", "").lower() in ("1", "true", "yes")

        self.console = Console(
            force_terminal=not self.plain,
            no_color=self.plain,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

        self.colors = {
            "success": "green" if not self.plain else None,
            "processing": "cyan" if not self.plain else None,
            "trace": "dim" if not self.plain else None,
            "error": "bold red" if not self.plain else None,
        }

    def _print(self, text: str, style: Optional[str] = None) -> None:
        style_val = self.colors.get(style) if style else None
        if style_val:
            self.console.print(text, style=style_val)
        else:
            self.console.print(text)

    def print_parsing(self, file: Path) -> None:
        """Banner announcing the file about to be scanned."""
        self._print(f"{OK_MARK} Parsing data out of {escape(str(file))}", "processing")

    def print_result(self, result: ProbeResult) -> None:
        """Print both fields of one file, each marked as found or failed."""
        self._print(f"{OK_MARK} Results from {escape(str(result.file))}:", "processing")
        self._print_field("processor        ", result.processor, not result.processor_ok)
        self._print_field("hardware_platform", result.platform, not result.platform_ok)
        self.console.print()

    def _print_field(self, label: str, value: str, failed: bool) -> None:
        if failed:
            self._print(f"{FAILED_MARK} {label} = {escape(value)}", "error")
        else:
            self._print(f"{OK_MARK} {label} = {escape(value)}", "success")

    def print_summary(self, results: Sequence[ProbeResult]) -> None:
        """One-line batch summary, like the batch runner's closing line."""
        failed = sum(1 for r in results if not r.ok)
        style = "error" if failed else "success"
        self._print(
            f"Probe complete: {len(results) - failed} succeeded, {failed} failed, "
            f"{len(results)} total.",
            style,
        )

    def print_architectures(self, table: Sequence[ArchitectureEntry], source: str) -> None:
        """Show the active architecture table in lookup order."""
        grid = Table(title="Architecture Table", show_header=True, header_style="bold cyan")
        grid.add_column("#", justify="right", style="dim")
        grid.add_column("Prefix", style="cyan")
        grid.add_column("Processor key", style="green")
        grid.add_column("Platform key", style="green")

        for index, entry in enumerate(table, start=1):
            grid.add_row(str(index), escape(entry.arch), escape(entry.processor), escape(entry.platform))

        self.console.print()
        self.console.print(Panel(grid, border_style="green", subtitle=escape(source)))
        self.console.print()

    def print_trace(self, message: str) -> None:
        """Verbose trace line; `message` is escaped here."""
        self._print(f"{TRACE_MARK} {escape(message)}", "trace")

    def tracer(self) -> "ConsoleTracer":
        return ConsoleTracer(self)


class ConsoleTracer(ScanTracer):
    """Verbose mode: announce each sought key and echo every scanned record."""

    def __init__(self, probe_console: ProbeConsole):
        self.probe_console = probe_console

    def looking_for(self, key: str) -> None:
        self.probe_console.print_trace(f"Looking for '{key}':")

    def record(self, record: InfoRecord) -> None:
        self.probe_console.print_trace(f"\t{record.key} -> {record.value}")
