"""Reading of XPM images used as wall textures."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator

from cubcaster.colornames import color_by_name
from cubcaster.errors import CubError

TRANSPARENT = 0xFF000000
"""Pixel value stored for the colour ``None``."""

_WORD_SEPARATORS = re.compile(r"[ \t]+")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_LEADING_HEX = re.compile(r"[0-9a-fA-F]*")


class XpmError(CubError):
    """An XPM image that cannot be read or decoded."""


@dataclass(frozen=True)
class XpmImage:
    """A decoded image: row-major 32-bit pixels in 0xAARRGGBB form."""

    width: int
    height: int
    pixels: tuple[int, ...]

    def pixel(self, x: int, y: int) -> int:
        """Return the pixel at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} image"
            )
        return self.pixels[y * self.width + x]


def split_words(text: str) -> list[str]:
    """Split ``text`` on runs of spaces and tabs, dropping empty words."""
    return [word for word in _WORD_SEPARATORS.split(text) if word]


def find(text: str, needle: str) -> int:
    """Return the index of the first ``needle`` in ``text``, or -1."""
    if len(needle) > len(text):
        return -1
    return text.find(needle)


def find_outside_quotes(text: str, needle: str) -> int:
    """Like :func:`find`, but skip matches inside double-quoted strings."""
    if len(needle) > len(text):
        return -1
    quoted = False
    for pos in range(len(text) - len(needle) + 1):
        if text[pos] == '"':
            quoted = not quoted
        if not quoted and text.startswith(needle, pos):
            return pos
    return -1


def _blank(text: str, start: int, stop: int) -> str:
    return text[:start] + " " * (stop - start) + text[stop:]


def strip_comments(text: str) -> str:
    """Replace C comments outside strings with spaces.

    The text keeps its length. A line comment is blanked together with the
    newline that ends it.
    """
    while (begin := find_outside_quotes(text, "/*")) != -1:
        end = find(text[begin + 2:], "*/")
        stop = len(text) if end == -1 else begin + end + 4
        text = _blank(text, begin, stop)
    while (begin := find_outside_quotes(text, "//")) != -1:
        end = find(text[begin + 2:], "\n")
        stop = len(text) if end == -1 else begin + end + 3
        text = _blank(text, begin, stop)
    return text


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value >= 1 << 31 else value


def text_rgb(name: str, end: str | None = None) -> int:
    """Return the colour a definition names.

    ``#`` starts a hexadecimal value; anything else is looked up as a colour
    name, joined with ``end`` by a space when given. Unknown names give 0 and
    ``None`` gives -1.
    """
    if name.startswith("#"):
        digits = _LEADING_HEX.match(name, 1).group()
        return _to_int32(int(digits, 16)) if digits else 0
    if end is not None:
        name = f"{name} {end}"[:63]
    try:
        return color_by_name(name)
    except KeyError:
        return 0


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def parse_xpm(lines: Iterable[str]) -> XpmImage:
    """Decode an XPM image from its strings: header, colours, pixel rows."""
    source = iter(lines)

    def next_line(what: str) -> str:
        try:
            return next(source)
        except StopIteration:
            raise XpmError(f"XPM data ends before {what}") from None

    header = split_words(next_line("the header"))
    if len(header) < 4:
        raise XpmError("XPM header needs width, height, colours and chars per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in header[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError("invalid XPM header")

    # With one or two characters per pixel a later definition replaces an
    # earlier one; with more, the first definition of a key is kept.
    later_wins = cpp <= 2
    colors: dict[str, int] = {}
    for _ in range(ncolors):
        line = next_line("a colour definition")
        if len(line) < cpp:
            raise XpmError(f"colour definition too short: {line!r}")
        words = split_words(line[cpp:])
        try:
            value_at = words.index("c") + 1
        except ValueError:
            raise XpmError(f"colour definition without 'c': {line!r}") from None
        if value_at >= len(words):
            raise XpmError(f"colour definition without a value: {line!r}")
        end = words[value_at + 1] if value_at + 1 < len(words) else None
        key = line[:cpp]
        if later_wins or key not in colors:
            colors[key] = text_rgb(words[value_at], end)

    pixels: list[int] = []
    for _ in range(height):
        row = next_line("a pixel row")
        if len(row) < width * cpp:
            raise XpmError(f"pixel row too short: {row!r}")
        for start in range(0, width * cpp, cpp):
            color = colors.get(row[start:start + cpp], 0)
            pixels.append(TRANSPARENT if color == -1 else color & 0xFFFFFFFF)
    return XpmImage(width, height, tuple(pixels))


def _quoted_strings(text: str) -> Iterator[str]:
    pos = 0
    while (start := text.find('"', pos)) != -1:
        end = text.find('"', start + 1)
        if end == -1:
            return
        yield text[start + 1:end]
        pos = end + 1


def parse_xpm_source(text: str) -> XpmImage:
    """Decode an image from the text of an XPM file."""
    return parse_xpm(_quoted_strings(strip_comments(text)))


def load_xpm(path: str | Path) -> XpmImage:
    """Read and decode the XPM file at ``path``."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise XpmError(f"cannot read image {path}: {exc.strerror}") from None
    return parse_xpm_source(raw.decode("latin-1"))