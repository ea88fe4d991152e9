"""Error type for invalid scenes and resources, and its reporting."""

from __future__ import annotations

import sys
from typing import TextIO


class CubError(Exception):
    """A scene file, texture or argument that cannot be used."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


def report(error: BaseException, stream: TextIO | None = None) -> int:
    """Write the error's message to ``stream`` (stderr by default).

    Returns the exit status the program ends with.
    """
    out = sys.stderr if stream is None else stream
    if isinstance(error, MemoryError):
        out.write("Fatal: error in memory allocation\n")
    else:
        out.write(str(error))
    out.flush()
    return 1