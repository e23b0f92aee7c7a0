"""
Input path expansion: files as given, directories walked recursively.
"""
from pathlib import Path
from typing import Iterable, Iterator, Union

from cpuprobe.core.logger import setup_logger

logger = setup_logger(__name__)


def walk_directory(directory: Path) -> Iterator[Path]:
    """
    Depth-first walk yielding every non-directory entry, in lexical name order.

    A directory that cannot be listed is yielded itself so the probe reports
    it as unreadable instead of silently dropping it.
    """
    try:
        children = sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as e:
        logger.warning(f"Cannot list {directory}: {e}")
        yield directory
        return

    for child in children:
        if child.is_dir():
            yield from walk_directory(child)
        else:
            yield child


def iter_info_files(paths: Iterable[Union[str, Path]]) -> Iterator[Path]:
    """
    Expand command-line paths into the files to probe, preserving argument order.

    Paths that do not exist are passed through unchanged; probing them
    reports the missing file.
    """
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            logger.debug(f"Walking directory {path}")
            yield from walk_directory(path)
        else:
            yield path
