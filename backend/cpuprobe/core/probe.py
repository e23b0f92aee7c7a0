"""
Per-file probe: resolve the architecture, then look up both keys.

Every failure is recorded on the result instead of raised, so one bad file
(or one missing key) never stops the other lookups or the rest of a batch.
"""
import platform as platform_module
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .architectures import (
    DEFAULT_ARCHITECTURES,
    ArchitectureEntry,
    lookup_architecture,
    resolve_architecture,
)
from .errors import ArchitectureNotDetected, ProbeError
from .logger import setup_logger
from .scanner import LineFormat, ScanContext, ScanLimits, ScanTracer, scan_value

logger = setup_logger(__name__)

FAILED = "failed"

CPUINFO_PATH = Path("/proc/cpuinfo")
SYSINFO_PATH = Path("/proc/sysinfo")

# Exit statuses above 255 wrap around on POSIX.
MAX_EXIT_STATUS = 255


@dataclass(frozen=True)
class ProbeSettings:
    """Run-wide knobs, typically built from config.toml by ConfigManager."""

    table: Tuple[ArchitectureEntry, ...] = DEFAULT_ARCHITECTURES
    line_format: LineFormat = LineFormat.AUTO
    limits: ScanLimits = ScanLimits()


@dataclass
class ProbeResult:
    """Outcome for one file. Failed fields hold the literal "failed"."""

    file: Path
    architecture: Optional[str] = None
    processor: str = FAILED
    platform: str = FAILED
    architecture_error: Optional[ArchitectureNotDetected] = None
    processor_error: Optional[ProbeError] = None
    platform_error: Optional[ProbeError] = None

    @property
    def processor_ok(self) -> bool:
        return self.architecture is not None and self.processor_error is None

    @property
    def platform_ok(self) -> bool:
        return self.architecture is not None and self.platform_error is None

    @property
    def ok(self) -> bool:
        return self.processor_ok and self.platform_ok

    @property
    def errors(self) -> List[ProbeError]:
        candidates = (self.architecture_error, self.processor_error, self.platform_error)
        return [e for e in candidates if e is not None]


def _lookup(context: ScanContext, key: str) -> Tuple[str, Optional[ProbeError]]:
    try:
        return scan_value(context, key), None
    except ProbeError as e:
        logger.warning(str(e))
        return FAILED, e


def _probe_entry(
    path: Path,
    entry: ArchitectureEntry,
    settings: ProbeSettings,
    tracer: Optional[ScanTracer],
) -> ProbeResult:
    context = ScanContext.for_file(
        path, entry, line_format=settings.line_format, limits=settings.limits, tracer=tracer
    )
    logger.info(f"{path}: architecture {entry.arch}, {context.line_format.value} format")

    processor_key, platform_key = context.keys
    processor, processor_error = _lookup(context, processor_key)
    platform, platform_error = _lookup(context, platform_key)
    return ProbeResult(
        file=path,
        architecture=entry.arch,
        processor=processor,
        platform=platform,
        processor_error=processor_error,
        platform_error=platform_error,
    )


def probe_file(
    path: Union[str, Path],
    settings: ProbeSettings = ProbeSettings(),
    tracer: Optional[ScanTracer] = None,
) -> ProbeResult:
    """
    Probe one info file whose architecture is implied by its path.

    Architecture resolution uses the name only, so it still runs (and can
    succeed) for a file that does not exist; the scans then fail with
    FileUnreadable.
    """
    path = Path(path)
    try:
        entry = resolve_architecture(path, settings.table)
    except ArchitectureNotDetected as e:
        logger.warning(f"{path}: {e}")
        return ProbeResult(file=path, architecture_error=e)
    return _probe_entry(path, entry, settings, tracer)


def system_info_path(machine: str) -> Path:
    """The live info file for a machine name: /proc/sysinfo on s390, else /proc/cpuinfo."""
    return SYSINFO_PATH if machine.startswith("s390") else CPUINFO_PATH


def probe_system(
    settings: ProbeSettings = ProbeSettings(),
    tracer: Optional[ScanTracer] = None,
    machine: Optional[str] = None,
) -> ProbeResult:
    """
    Probe the running host's info file.

    The architecture comes from the machine name (platform.machine() unless
    given), not from the info file's path.
    """
    machine = machine or platform_module.machine()
    path = system_info_path(machine)
    try:
        entry = lookup_architecture(machine, settings.table)
    except ArchitectureNotDetected as e:
        logger.warning(f"{path}: {e}")
        return ProbeResult(file=path, architecture_error=e)
    return _probe_entry(path, entry, settings, tracer)


def count_failures(results: Iterable[ProbeResult]) -> int:
    return sum(1 for result in results if not result.ok)


def exit_status(results: Sequence[ProbeResult]) -> int:
    """0 when every file succeeded, else the number of failed files (capped)."""
    return min(count_failures(results), MAX_EXIT_STATUS)
