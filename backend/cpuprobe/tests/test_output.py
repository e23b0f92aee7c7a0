"""
Tests for the Rich probe console and the verbose tracer.
"""
import io
import sys
from pathlib import Path

from rich.console import Console

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cpuprobe.cli.output import ProbeConsole  # noqa: E402
from cpuprobe.core.scanner import InfoRecord  # noqa: E402


def _plain_console() -> ProbeConsole:
    probe_console = ProbeConsole(plain=True)
    probe_console.console = Console(
        file=io.StringIO(), no_color=True, highlight=False, emoji=False, soft_wrap=True
    )
    return probe_console


def test_tracer_lines_go_through_print_trace() -> None:
    probe_console = _plain_console()
    tracer = probe_console.tracer()
    tracer.looking_for("Processor")
    tracer.record(InfoRecord(key="Processor", value=" ARMv7"))
    lines = probe_console.console.file.getvalue().splitlines()
    assert lines[0] == "### Looking for 'Processor':"
    assert lines[1].startswith("### ")
    assert lines[1].endswith("Processor ->  ARMv7")


def test_trace_text_is_not_markup() -> None:
    probe_console = _plain_console()
    probe_console.print_trace("\t[bold]x[/bold] -> :smile:")
    output = probe_console.console.file.getvalue()
    assert output.startswith("### ")
    assert "[bold]x[/bold] -> :smile:" in output
