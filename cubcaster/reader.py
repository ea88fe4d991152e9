"""Reading of ``.cub`` scene files into lines."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, TextIO

from cubcaster.errors import CubError

SCENE_SUFFIX = ".cub"


def check_extension(path: str | Path) -> None:
    """Raise CubError unless ``path`` ends with ``.cub``."""
    if not str(path).endswith(SCENE_SUFFIX):
        raise CubError("Error in map extension only take .cub maps")


def iter_lines(stream: TextIO) -> Iterator[str]:
    """Yield the lines of ``stream`` without their ending newline.

    An empty line yields ``""``; a last line without a newline is still
    yielded, and a newline at the very end adds no extra line.
    """
    for line in stream:
        yield line[:-1] if line.endswith("\n") else line


def read_lines(path: str | Path) -> list[str]:
    """Return every line of the scene file at ``path``.

    Raises CubError for a wrong extension, an unreadable file or an
    empty file.
    """
    check_extension(path)
    try:
        with open(
            path, encoding="utf-8", errors="surrogateescape", newline="\n"
        ) as stream:
            lines = list(iter_lines(stream))
    except OSError:
        raise CubError("Error in file") from None
    if not lines:
        raise CubError("Empty file")
    return lines