"""
Architecture table and resolver.

Maps an info-file path (or a machine name) to the table entry naming the
processor and hardware-platform keys found in that architecture's info file.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from .errors import ArchitectureNotDetected, ConfigError
from .logger import setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class ArchitectureEntry:
    """One row of the architecture table: a token prefix and its two keys."""

    arch: str
    processor: str
    platform: str

    @property
    def keys(self) -> Tuple[str, str]:
        return (self.processor, self.platform)

    def matches(self, token: str) -> bool:
        return token.startswith(self.arch)


# Order matters: the first prefix match wins, so longer prefixes come first.
DEFAULT_ARCHITECTURES: Tuple[ArchitectureEntry, ...] = (
    ArchitectureEntry("alpha", "cpu model", "system type"),
    ArchitectureEntry("amd64", "model name", "vendor_id"),
    ArchitectureEntry("arm", "Processor", "Hardware"),
    ArchitectureEntry("bfin", "CPU", "BOARD Name"),
    ArchitectureEntry("cris", "cpu", "cpu model"),
    ArchitectureEntry("frv", "CPU-Core", "System"),
    ArchitectureEntry("i386", "model name", "vendor_id"),
    ArchitectureEntry("ia64", "family", "vendor"),
    ArchitectureEntry("hppa", "cpu", "model"),
    ArchitectureEntry("m68k", "CPU", "MMU"),
    ArchitectureEntry("mips", "cpu model", "system type"),
    ArchitectureEntry("powerpc64", "cpu", "machine"),
    ArchitectureEntry("powerpc", "cpu", "machine"),
    ArchitectureEntry("s390x", "Type", "Manufacturer"),
    ArchitectureEntry("s390", "Type", "Manufacturer"),
    ArchitectureEntry("sh", "cpu type", "machine"),
    ArchitectureEntry("sparc", "type", "cpu"),
    ArchitectureEntry("vax", "cpu type", "cpu"),
)

# (leading text, canonical name). ppc64 is listed before ppc so plain "ppc"
# only applies when "64" does not follow.
SYNONYMS: Tuple[Tuple[str, str], ...] = (
    ("blackfin", "bfin"),
    ("x86", "i386"),
    ("parisc", "hppa"),
    ("ppc64", "powerpc64"),
    ("ppc", "powerpc"),
)

SYSINFO_ARCH_PREFIX = "s390"


def canonical_token(name: str) -> str:
    """
    Rewrite common naming variants to the names used in the table.

    Only the leading text is replaced: "x86_64info" becomes "i386_64info".
    Names with no synonym pass through unchanged.
    """
    for variant, canonical in SYNONYMS:
        if name.startswith(variant):
            return canonical + name[len(variant):]
    return name


def match_entry(
    token: str, table: Sequence[ArchitectureEntry] = DEFAULT_ARCHITECTURES
) -> Optional[ArchitectureEntry]:
    """Return the first table entry whose prefix starts the token, or None."""
    for entry in table:
        if entry.matches(token):
            return entry
    return None


def lookup_architecture(
    name: str, table: Sequence[ArchitectureEntry] = DEFAULT_ARCHITECTURES
) -> ArchitectureEntry:
    """
    Resolve a bare architecture name (e.g. platform.machine()) to its entry.

    Raises:
        ArchitectureNotDetected: no entry matches the canonical token
    """
    token = canonical_token(name)
    entry = match_entry(token, table)
    if entry is None:
        raise ArchitectureNotDetected(token)
    return entry


def _candidate_segments(path: Path) -> List[str]:
    """Base name first, then the enclosing directory name when there is one."""
    segments = [path.name]
    if path.parent.name:
        segments.append(path.parent.name)
    return segments


def resolve_architecture(
    path: Union[str, Path], table: Sequence[ArchitectureEntry] = DEFAULT_ARCHITECTURES
) -> ArchitectureEntry:
    """
    Pick the architecture entry for an info file from its path alone.

    The base name is tried first; when it names no architecture (the usual
    "arm/cpuinfo" layout) the immediate parent directory is tried. Higher
    ancestors such as "/usr/share" are never consulted.
    The file itself is never opened.

    Raises:
        ArchitectureNotDetected: carrying the token derived from the base name
    """
    path = Path(path)
    for segment in _candidate_segments(path):
        entry = match_entry(canonical_token(segment), table)
        if entry is not None:
            logger.debug(f"{path}: segment '{segment}' resolved to {entry.arch}")
            return entry
    raise ArchitectureNotDetected(canonical_token(path.name))


def is_sysinfo_architecture(entry: Optional[ArchitectureEntry]) -> bool:
    """True for the s390 family, whose info file uses the sysinfo line format."""
    return entry is not None and entry.arch.startswith(SYSINFO_ARCH_PREFIX)


def find_shadowed(
    table: Sequence[ArchitectureEntry],
) -> List[Tuple[ArchitectureEntry, ArchitectureEntry]]:
    """
    List (earlier, later) pairs where the earlier prefix hides the later entry.

    With first-match-wins lookup, a later entry whose prefix starts with an
    earlier entry's prefix can never be selected.
    """
    shadowed = []
    for i, later in enumerate(table):
        for earlier in table[:i]:
            if later.arch.startswith(earlier.arch):
                shadowed.append((earlier, later))
                break
    return shadowed


def load_architecture_table(raw_entries: Iterable[Any]) -> Tuple[ArchitectureEntry, ...]:
    """
    Build a table from config.toml [[architectures]] entries, keeping their order.

    Raises:
        ConfigError: an entry is not a table or lacks a non-empty string field
    """
    table: List[ArchitectureEntry] = []
    for index, raw in enumerate(raw_entries):
        if not isinstance(raw, dict):
            raise ConfigError(f"architectures[{index}] must be a table, got {type(raw).__name__}")
        fields = {}
        for name in ("arch", "processor", "platform"):
            value = raw.get(name)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"architectures[{index}].{name} must be a non-empty string")
            fields[name] = value
        table.append(ArchitectureEntry(**fields))

    if not table:
        raise ConfigError("architectures table is empty")

    for earlier, later in find_shadowed(table):
        logger.warning(
            f"architecture '{later.arch}' is unreachable: "
            f"prefix '{earlier.arch}' is listed before it"
        )
    return tuple(table)
