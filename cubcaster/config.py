"""Parsing of scene descriptions: wall textures, colours and the map."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

from cubcaster.errors import CubError
from cubcaster.reader import read_lines

TEXTURE_PREFIX = "./textures/"
"""Every texture path must start with this directory."""

_ELEMENTS = ("NO", "SO", "EA", "WE", "F", "C")
_TEXTURE_FIELDS = {"NO": "north", "SO": "south", "EA": "east", "WE": "west"}
_COLOR_ELEMENTS = ("F", "C")
_TRIM = "\t\v\r\f "
_SPACE = " \t\n\v\f\r"
_DIGITS = frozenset("0123456789")

OUTSIDE = "D"
"""Grid cell for a blank or padded position outside the playable area."""

_MAP_CELLS = frozenset("01DWENS")
_PLAYERS = frozenset("NSEW")
_BORDER = frozenset("D1")
_OPEN = frozenset("0WESN")


@dataclass(frozen=True)
class TexturePaths:
    """Paths of the four wall textures."""

    north: str
    south: str
    east: str
    west: str


@dataclass(frozen=True)
class CubeMap:
    """A rectangular grid of map cells and the player's facing letter."""

    grid: tuple[str, ...]
    player: str

    @property
    def width(self) -> int:
        return len(self.grid[0]) if self.grid else 0

    @property
    def height(self) -> int:
        return len(self.grid)


@dataclass(frozen=True)
class Scene:
    """Everything a scene file describes."""

    textures: TexturePaths
    floor: int
    ceiling: int
    map: CubeMap


def _is_blank(line: str) -> bool:
    return all(char in _SPACE for char in line)


def check_color_commas(text: str) -> None:
    """Raise CubError if a colour has more than three sections."""
    if text.count(",") >= 3:
        raise CubError("Error\ncolor has many section only takes RGB")


def _atoi(text: str) -> int:
    text = text.lstrip(_SPACE)
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for char in text:
        if char not in _DIGITS:
            break
        digits += char
    return sign * int(digits) if digits else 0


def color_out_of_range(text: str) -> bool:
    """Tell whether a colour component lies outside 0..255.

    Leading zeros are ignored; more than three significant digits is
    always out of range.
    """
    if len(text.lstrip("0")) > 3:
        return True
    return not 0 <= _atoi(text) <= 255


def rgb_to_int(parts: Iterable[str]) -> int:
    """Pack decimal colour components into one 0xRRGGBB integer."""
    value = 0
    for part in parts:
        value = (value << 8) | _atoi(part)
    return value


def parse_color(text: str) -> int:
    """Parse an ``R,G,B`` colour into a 0xRRGGBB integer."""
    check_color_commas(text)
    parts = [part for part in text.split(",") if part]
    for part in parts:
        if not all(char in _DIGITS for char in part):
            raise CubError("Error:\n in color")
        if color_out_of_range(part):
            raise CubError("Error:\n invalid color")
    if len(parts) != 3:
        raise CubError("Error:\n invalid RGB colors")
    return rgb_to_int(parts)


def parse_texture_path(text: str, check_file: bool = True) -> str:
    """Validate a texture path and return it.

    The path must start with ``./textures/`` with no space straight after;
    with ``check_file`` the file must also be readable.
    """
    if not text.startswith(TEXTURE_PREFIX):
        raise CubError("Error:\nInvalid texture")
    rest = text[len(TEXTURE_PREFIX):]
    if rest and rest[0] in _SPACE:
        raise CubError("Error:\nInvalid texture")
    if check_file:
        try:
            with open(text, "rb"):
                pass
        except OSError:
            raise CubError("Error:\nInvalid texture file") from None
    return text


def build_grid(lines: Iterable[str]) -> list[str]:
    """Turn the map lines into equal-width rows.

    Whitespace cells and the padding after short lines become ``D``. The
    map ends at the first blank line; any non-blank line after it is an
    error.
    """
    lines = list(lines)
    rows: list[str] = []
    for index, line in enumerate(lines):
        if _is_blank(line):
            if any(not _is_blank(rest) for rest in lines[index + 1:]):
                raise CubError("Error:\nMap have an empty line")
            break
        rows.append(line)
    width = max((len(row) for row in rows), default=0)
    return [
        "".join(OUTSIDE if char in _SPACE else char for char in row).ljust(
            width, OUTSIDE
        )
        for row in rows
    ]


def check_map(grid: Sequence[str]) -> str:
    """Check that a grid is closed and holds one player; return its letter."""
    player: str | None = None
    for row in grid:
        for cell in row:
            if cell not in _MAP_CELLS:
                raise CubError("Error\nuse of a different elem in the map")
            if cell in _PLAYERS:
                if player is not None:
                    raise CubError("Error\none player only accepted no more")
                player = cell
    if player is None:
        raise CubError("Error\nthe player not exist")
    if any(cell not in _BORDER for cell in grid[0]):
        raise CubError("error\nmap border are not close")
    if any(cell not in _BORDER for cell in grid[-1]):
        raise CubError("Error\nmap border are not close")
    for i in range(1, len(grid)):
        row = grid[i]
        if row[0] not in _BORDER:
            raise CubError("Error\nmap border are not close")
        last = max(1, len(row) - 1)
        for j in range(1, last):
            if row[j] in _OPEN and OUTSIDE in (
                grid[i - 1][j],
                grid[i + 1][j],
                row[j - 1],
                row[j + 1],
            ):
                raise CubError("Error\nmap coordinate not close")
        end = row[last] if last < len(row) else ""
        if end not in _BORDER:
            raise CubError("Error\nmap border are not close with 1")
    return player


def parse_map(lines: Iterable[str]) -> CubeMap:
    """Build and check the map from the lines that follow the elements."""
    grid = tuple(build_grid(lines))
    player = check_map(grid)
    return CubeMap(grid, player)


def _parse_element(
    line: str,
    textures: dict[str, str],
    colors: dict[str, int],
    check_files: bool,
) -> None:
    for element in _ELEMENTS:
        if line.startswith(element):
            break
    else:
        raise CubError("Error:\ndifferent element in the map")
    rest = line[len(element):]
    if not rest:
        raise CubError("Error:\nin the element")
    if rest[0] not in _SPACE:
        raise CubError("Error:\ndifferent element in the map")
    value = rest.lstrip(_SPACE)
    if not value:
        raise CubError("Error:\nin the element")
    if element in _COLOR_ELEMENTS:
        if element in colors:
            raise CubError(f"Error\n{element} already exist")
        colors[element] = parse_color(value)
    else:
        field = _TEXTURE_FIELDS[element]
        if field in textures:
            raise CubError(f"Error\n{element} already exist")
        textures[field] = parse_texture_path(value, check_files)


def parse_scene(lines: Iterable[str], check_files: bool = True) -> Scene:
    """Parse the lines of a scene file: six elements, then the map."""
    lines = list(lines)
    textures: dict[str, str] = {}
    colors: dict[str, int] = {}
    count = 0
    for index, raw in enumerate(lines):
        line = raw.strip(_TRIM)
        if not line:
            continue
        if count == len(_ELEMENTS):
            return Scene(
                TexturePaths(**textures),
                colors["F"],
                colors["C"],
                parse_map(lines[index:]),
            )
        count += 1
        _parse_element(line, textures, colors, check_files)
    raise CubError("Error\nno existing for the map")


def load_scene(path: str | Path) -> Scene:
    """Read and parse the ``.cub`` scene file at ``path``."""
    return parse_scene(read_lines(path))