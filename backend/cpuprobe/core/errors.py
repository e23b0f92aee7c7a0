"""
Error types raised while probing info files.

ArchitectureNotDetected, FileUnreadable and KeyNotFound only ever degrade a
single field of a single file; callers catch them and keep going.
ConfigError is fatal for the run.
"""
from pathlib import Path
from typing import Union


class ProbeError(Exception):
    """Base class for all cpuprobe errors."""


class ArchitectureNotDetected(ProbeError):
    """No architecture table entry matched the token derived from a path."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"could not detect architecture from '{token}'")


class FileUnreadable(ProbeError):
    """The info file is missing, unopenable, or not text."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read {self.path}: {reason}")


class KeyNotFound(ProbeError):
    """The info file was readable but holds no line with the requested key."""

    def __init__(self, key: str, path: Union[str, Path]):
        self.key = key
        self.path = Path(path)
        super().__init__(f"key '{key}' not found in {self.path}")


class ConfigError(ProbeError):
    """config.toml holds a malformed architecture table or scanner setting."""
