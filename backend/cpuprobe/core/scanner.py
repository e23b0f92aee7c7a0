"""
Key/value scanner for cpuinfo-style and sysinfo-style text files.

Pure parsing plus one file-reading entry point (scan_value). Each call opens
the file, walks it line by line and returns the first value whose key matches.
"""
import re
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Iterator, Optional, Tuple, Union

from .architectures import ArchitectureEntry, is_sysinfo_architecture
from .errors import FileUnreadable, KeyNotFound
from .logger import setup_logger

logger = setup_logger(__name__)


class LineFormat(str, Enum):
    """Delimiter convention of an info file."""

    AUTO = "auto"
    GENERIC = "generic"  # "model name\t: value" (/proc/cpuinfo)
    SYSINFO = "sysinfo"  # "Type:   2964" (/proc/sysinfo on s390)


# Key runs up to the first tab or colon; the colon may be preceded by whitespace.
_GENERIC_LINE = re.compile(r"(?P<key>[^\t:]+)\s*:(?P<value>.*)")
# Key runs up to the first tab, space or colon; then a run of spaces/colons.
_SYSINFO_LINE = re.compile(r"(?P<key>[^\t :]+)[ :]+(?P<value>.*)")

_LINE_PATTERNS = {
    LineFormat.GENERIC: _GENERIC_LINE,
    LineFormat.SYSINFO: _SYSINFO_LINE,
}

_WHITESPACE_RUN = re.compile(r"\s{2,}")

SYSINFO_FILENAME = "sysinfo"

# Historical fixed buffer sizes, for callers wanting byte-for-byte parity.
LEGACY_KEY_LIMIT = 64
LEGACY_VALUE_LIMIT = 256


@dataclass(frozen=True)
class ScanLimits:
    """Optional caps on captured key/value lengths. None means unbounded."""

    key_limit: Optional[int] = None
    value_limit: Optional[int] = None


@dataclass(frozen=True)
class InfoRecord:
    key: str
    value: str
    truncated: bool = False


class ScanTracer:
    """Receives scan events. The base class ignores them."""

    def looking_for(self, key: str) -> None:
        pass

    def record(self, record: InfoRecord) -> None:
        pass


@dataclass(frozen=True)
class ScanContext:
    """
    Everything a scan needs to know about one input file.

    Built fresh for each file, so nothing from one file's lookups can leak
    into the next.
    """

    path: Path
    keys: Tuple[str, str]
    line_format: LineFormat = LineFormat.GENERIC
    limits: ScanLimits = ScanLimits()
    tracer: Optional[ScanTracer] = None

    @classmethod
    def for_file(
        cls,
        path: Union[str, Path],
        entry: ArchitectureEntry,
        line_format: LineFormat = LineFormat.AUTO,
        limits: ScanLimits = ScanLimits(),
        tracer: Optional[ScanTracer] = None,
    ) -> "ScanContext":
        path = Path(path)
        return cls(
            path=path,
            keys=entry.keys,
            line_format=select_line_format(path, entry, line_format),
            limits=limits,
            tracer=tracer,
        )


def select_line_format(
    path: Union[str, Path],
    entry: Optional[ArchitectureEntry],
    requested: LineFormat = LineFormat.AUTO,
) -> LineFormat:
    """
    Resolve AUTO to a concrete format.

    s390 info files (by architecture, or a file literally named "sysinfo")
    use the sysinfo format; everything else is generic.
    """
    if requested is not LineFormat.AUTO:
        return requested
    if is_sysinfo_architecture(entry) or Path(path).name == SYSINFO_FILENAME:
        return LineFormat.SYSINFO
    return LineFormat.GENERIC


def normalize_key(key: str) -> str:
    return key.strip()


def normalize_value(value: str) -> str:
    """
    Strip surrounding whitespace and collapse internal whitespace runs.

    A run of two or more whitespace characters becomes its last character,
    so "  Intel(R)   Core(TM)2   " becomes "Intel(R) Core(TM)2". Applying
    this twice gives the same result as applying it once.
    """
    return _WHITESPACE_RUN.sub(lambda m: m.group()[-1], value.strip())


def parse_line(
    line: str, line_format: LineFormat, limits: ScanLimits = ScanLimits()
) -> Optional[InfoRecord]:
    """
    Split one physical line into a record, or None if it is not a key/value line.

    The key is whitespace-stripped; the value is returned raw (only the
    line terminator removed) so callers can trace it before normalizing.
    """
    if line_format is LineFormat.AUTO:
        raise ValueError("line format must be resolved before parsing")

    match = _LINE_PATTERNS[line_format].match(line.rstrip("\r\n"))
    if match is None:
        return None

    key = match.group("key")
    value = match.group("value")
    truncated = False
    if limits.key_limit is not None:
        key = key[: limits.key_limit]
    if limits.value_limit is not None and len(value) > limits.value_limit:
        # The rest of the physical line is dropped; the next record still
        # starts at the next line.
        value = value[: limits.value_limit]
        truncated = True
    return InfoRecord(key=normalize_key(key), value=value, truncated=truncated)


def iter_records(
    handle: IO[str], line_format: LineFormat, limits: ScanLimits = ScanLimits()
) -> Iterator[InfoRecord]:
    """Yield a record for every key/value line of an open text file."""
    for line in handle:
        record = parse_line(line, line_format, limits)
        if record is not None:
            yield record


@contextmanager
def open_info_file(path: Union[str, Path]) -> Iterator[IO[str]]:
    """
    Open an info file for text reading.

    Raises:
        FileUnreadable: the file is missing, a directory, or not permitted.
            Undecodable bytes are replaced, never raised.
    """
    try:
        handle = open(path, "r", encoding="utf-8", errors="replace")
    except OSError as e:
        raise FileUnreadable(path, e.strerror or str(e)) from e
    with handle:
        yield handle


def scan_value(context: ScanContext, key: str) -> str:
    """
    Return the normalized value of the first line whose key equals `key`.

    Raises:
        FileUnreadable: the file cannot be opened or read
        KeyNotFound: end of file reached without a matching key
    """
    tracer = context.tracer
    if tracer is not None:
        tracer.looking_for(key)

    with open_info_file(context.path) as handle:
        try:
            for record in iter_records(handle, context.line_format, context.limits):
                if tracer is not None:
                    tracer.record(record)
                if record.key == key:
                    value = normalize_value(record.value)
                    logger.debug(f"{context.path}: {key} = {value}")
                    return value
        except OSError as e:
            raise FileUnreadable(context.path, e.strerror or str(e)) from e

    raise KeyNotFound(key, context.path)
