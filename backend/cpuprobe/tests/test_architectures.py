"""
Tests for the architecture table and path-based resolver.

Pure functions only; no files are opened.
"""
import logging
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from cpuprobe.core import architectures as architectures_module  # noqa: E402
from cpuprobe.core.architectures import (  # noqa: E402
    DEFAULT_ARCHITECTURES,
    ArchitectureEntry,
    canonical_token,
    find_shadowed,
    is_sysinfo_architecture,
    load_architecture_table,
    lookup_architecture,
    resolve_architecture,
)
from cpuprobe.core.errors import ArchitectureNotDetected, ConfigError  # noqa: E402


@pytest.mark.parametrize("entry", DEFAULT_ARCHITECTURES, ids=lambda e: e.arch)
def test_every_default_token_resolves_to_its_own_entry(entry: ArchitectureEntry) -> None:
    assert resolve_architecture(f"{entry.arch}/cpuinfo") is entry


def test_default_table_has_no_shadowed_entries() -> None:
    assert find_shadowed(DEFAULT_ARCHITECTURES) == []


def test_longer_prefixes_win_in_default_table() -> None:
    assert resolve_architecture("powerpc64/cpuinfo").arch == "powerpc64"
    assert resolve_architecture("powerpc/cpuinfo").arch == "powerpc"
    assert resolve_architecture("s390x/sysinfo").arch == "s390x"
    assert resolve_architecture("s390/sysinfo").arch == "s390"


@pytest.mark.parametrize(
    "name, arch",
    [
        ("x86_64info", "i386"),
        ("x86", "i386"),
        ("ppc64-foo", "powerpc64"),
        ("ppcfoo", "powerpc"),
        ("blackfinX", "bfin"),
        ("parisc64", "hppa"),
    ],
)
def test_synonyms_rewrite_before_lookup(name: str, arch: str) -> None:
    assert resolve_architecture(name).arch == arch


def test_canonical_token_replaces_only_leading_text() -> None:
    assert canonical_token("x86_64info") == "i386_64info"
    assert canonical_token("ppc64le") == "powerpc64le"
    assert canonical_token("ppc32") == "powerpc32"
    assert canonical_token("sparc64") == "sparc64"
    assert canonical_token("") == ""


def test_prefix_match_is_not_full_equality() -> None:
    assert resolve_architecture("armv7l-cpuinfo").arch == "arm"
    assert resolve_architecture("mips64el").arch == "mips"


def test_base_name_is_preferred_over_directory() -> None:
    assert resolve_architecture("arm/mips-cpuinfo").arch == "mips"


def test_nearest_directory_wins() -> None:
    assert resolve_architecture("sparc/arm/cpuinfo").arch == "arm"


@pytest.mark.parametrize(
    "path",
    [
        "/usr/share/samples/cpuinfo",
        "/srv/armory/unknown/info",
        "share/unknown/cpuinfo",
    ],
)
def test_ancestors_above_parent_are_ignored(path: str) -> None:
    with pytest.raises(ArchitectureNotDetected):
        resolve_architecture(path)


def test_matching_is_case_sensitive() -> None:
    with pytest.raises(ArchitectureNotDetected):
        resolve_architecture("ARM/cpuinfo")


def test_unknown_architecture_carries_base_name_token() -> None:
    with pytest.raises(ArchitectureNotDetected) as exc_info:
        resolve_architecture("unknown/cpuinfo")
    assert exc_info.value.token == "cpuinfo"
    assert "cpuinfo" in str(exc_info.value)


def test_table_order_decides_between_overlapping_prefixes() -> None:
    powerpc = ArchitectureEntry("powerpc", "cpu", "machine")
    powerpc64 = ArchitectureEntry("powerpc64", "cpu", "model")
    assert resolve_architecture("powerpc64/cpuinfo", (powerpc, powerpc64)) is powerpc
    assert resolve_architecture("powerpc64/cpuinfo", (powerpc64, powerpc)) is powerpc64


def test_find_shadowed_reports_unreachable_entries() -> None:
    s390 = ArchitectureEntry("s390", "Type", "Manufacturer")
    s390x = ArchitectureEntry("s390x", "Type", "Manufacturer")
    assert find_shadowed((s390, s390x)) == [(s390, s390x)]
    assert find_shadowed((s390x, s390)) == []


def test_lookup_architecture_uses_machine_names() -> None:
    assert lookup_architecture("x86_64").arch == "i386"
    assert lookup_architecture("ppc64le").arch == "powerpc64"
    assert lookup_architecture("s390x").arch == "s390x"
    with pytest.raises(ArchitectureNotDetected):
        lookup_architecture("aarch64")


def test_is_sysinfo_architecture() -> None:
    assert is_sysinfo_architecture(lookup_architecture("s390"))
    assert is_sysinfo_architecture(lookup_architecture("s390x"))
    assert not is_sysinfo_architecture(lookup_architecture("arm"))
    assert not is_sysinfo_architecture(None)


class TestLoadArchitectureTable:
    """Tests for building a table from config.toml entries."""

    def test_preserves_declared_order(self) -> None:
        table = load_architecture_table(
            [
                {"arch": "avr32", "processor": "cpu", "platform": "board"},
                {"arch": "arm", "processor": "Processor", "platform": "Hardware"},
            ]
        )
        assert [e.arch for e in table] == ["avr32", "arm"]
        assert table[0].keys == ("cpu", "board")

    def test_rejects_non_table_entry(self) -> None:
        with pytest.raises(ConfigError):
            load_architecture_table(["arm"])

    def test_rejects_missing_field(self) -> None:
        with pytest.raises(ConfigError, match="platform"):
            load_architecture_table([{"arch": "arm", "processor": "Processor"}])

    def test_rejects_empty_field(self) -> None:
        with pytest.raises(ConfigError):
            load_architecture_table([{"arch": "", "processor": "a", "platform": "b"}])

    def test_rejects_empty_table(self) -> None:
        with pytest.raises(ConfigError):
            load_architecture_table([])

    def test_warns_about_shadowed_entries(self) -> None:
        messages = []

        class LogCapture(logging.Handler):
            def emit(self, record):
                messages.append(record.getMessage())

        test_logger = logging.getLogger(architectures_module.__name__)
        handler = LogCapture()
        test_logger.addHandler(handler)
        try:
            table = load_architecture_table(
                [
                    {"arch": "powerpc", "processor": "cpu", "platform": "machine"},
                    {"arch": "powerpc64", "processor": "cpu", "platform": "machine"},
                ]
            )
        finally:
            test_logger.removeHandler(handler)

        assert len(table) == 2
        assert any("powerpc64" in m and "unreachable" in m for m in messages)
