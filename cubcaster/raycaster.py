"""Grid ray casting and textured wall projection into a frame."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Sequence

from cubcaster.geometry import (
    FOV,
    TILE_SIZE,
    WIN_H,
    WIN_W,
    deg2rad,
    is_view_down,
    is_view_right,
    is_view_up,
    rad2deg,
)
from cubcaster.xpm import XpmImage

_WALL = "1"


class Frame:
    """A width x height image of 32-bit pixels, row-major, initially black."""

    def __init__(self, width: int = WIN_W, height: int = WIN_H) -> None:
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid frame size {width}x{height}")
        self.width = width
        self.height = height
        self.pixels = [0] * (width * height)

    def put_pixel(self, x: int, y: int, color: int) -> None:
        """Set a pixel; positions outside the frame are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color & 0xFFFFFFFF

    def get_pixel(self, x: int, y: int) -> int:
        """Return the pixel at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(
                f"pixel ({x}, {y}) outside {self.width}x{self.height} frame"
            )
        return self.pixels[y * self.width + x]

    def _set_column(self, x: int, colors: Sequence[int]) -> None:
        if not 0 <= x < self.width:
            return
        column = [color & 0xFFFFFFFF for color in colors[: self.height]]
        stop = x + len(column) * self.width
        self.pixels[x:stop:self.width] = column


@dataclass
class View:
    """Where the player stands and looks.

    ``angle`` is the facing direction, ``ray_angle`` the direction of the
    leftmost ray and ``horizon`` the screen row of the eye level.
    """

    x: float
    y: float
    angle: float
    ray_angle: float
    horizon: float = float(WIN_H // 2)


@dataclass(frozen=True)
class RayHit:
    """Where one ray meets a wall.

    ``distance`` is corrected for the fish-eye effect; ``offset`` is the
    position along the wall cell, from 0 to TILE_SIZE - 1.
    """

    angle: float
    angle_chk: float
    x: float
    y: float
    raw_distance: float
    distance: float
    offset: int
    vertical: bool


def _div(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if not numerator:
        return math.nan
    return math.copysign(math.inf, numerator)


def _tile_offset(value: float) -> int:
    if not math.isfinite(value):
        return 0
    return int(math.fmod(int(value), TILE_SIZE))


def _trunc(value: float) -> int:
    return int(value) if math.isfinite(value) else 0


def find_player(grid: Sequence[str], player: str) -> tuple[float, float]:
    """Return the world position of the centre of the player's cell."""
    for row_index, row in enumerate(grid):
        column = row.find(player)
        if column != -1:
            half = TILE_SIZE // 2
            return float(column * TILE_SIZE + half), float(row_index * TILE_SIZE + half)
    raise ValueError(f"player {player!r} not on the map")


class Raycaster:
    """Casts rays through a map grid and draws textured walls.

    ``textures`` holds four images in the order east, north, west, south;
    horizontal hits use the first two and vertical hits the last two.
    """

    def __init__(
        self,
        grid: Sequence[str],
        textures: Sequence[XpmImage],
        floor: int,
        ceiling: int,
        width: int = WIN_W,
        height: int = WIN_H,
    ) -> None:
        if len(textures) != 4:
            raise ValueError("exactly four wall textures are needed")
        self.grid = tuple(grid)
        self.textures = tuple(textures)
        self.floor = floor
        self.ceiling = ceiling
        self.width = width
        self.height = height
        self.plane_distance = (width // 2) / math.tan(deg2rad(FOV // 3) * 2)

    def _probe(self, x: float, y: float) -> tuple[bool, bool]:
        """Return (open, outside) for a world position."""
        if not (math.isfinite(x) and math.isfinite(y)):
            return False, True
        column = math.floor(x / TILE_SIZE)
        row = math.floor(y / TILE_SIZE)
        if 0 <= row < len(self.grid) and 0 <= column < len(self.grid[row]):
            return self.grid[row][column] != _WALL, False
        return False, True

    def is_open(self, x: float, y: float) -> bool:
        """Tell whether a world position lies in a map cell that is not wall."""
        return self._probe(x, y)[0]

    def _prober(self) -> tuple[Callable[[float, float], bool], list[bool]]:
        left = [False]

        def open_at(x: float, y: float) -> bool:
            is_open, outside = self._probe(x, y)
            if outside:
                left[0] = True
            return is_open

        return open_at, left

    def _scan_horizontal(
        self, view: View, angle: float, angle_chk: float
    ) -> tuple[tuple[float, float], bool]:
        open_at, left = self._prober()
        tan = math.tan(angle)
        up = is_view_up(angle_chk)
        base = math.floor(view.y / TILE_SIZE) * TILE_SIZE
        y = float(base if up else base + TILE_SIZE)
        x = view.x + _div(y - view.y, tan)
        step_y = -TILE_SIZE if up else TILE_SIZE
        step_x = _div(step_y, tan)
        if open_at(x, y + 1) and open_at(x, y - 1):
            while True:
                y += step_y
                x += step_x
                if not open_at(x, y + 1) or not open_at(x, y - 1):
                    break
        return (x, y), left[0]

    def _scan_vertical(
        self, view: View, angle: float, angle_chk: float
    ) -> tuple[tuple[float, float], bool]:
        open_at, left = self._prober()
        tan = math.tan(angle)
        right = is_view_right(angle_chk)
        base = math.floor(view.x / TILE_SIZE) * TILE_SIZE
        x = float(base + TILE_SIZE if right else base)
        y = view.y + (x - view.x) * tan
        step_x = TILE_SIZE if right else -TILE_SIZE
        step_y = step_x * tan
        if open_at(x + 1, y) and open_at(x - 1, y):
            while True:
                x += step_x
                y += step_y
                if not open_at(x + 1, y) or not open_at(x - 1, y):
                    break
        return (x, y), left[0]

    def cast(self, view: View, angle: float) -> RayHit:
        """Follow one ray from the view's position until it meets a wall."""
        angle_chk = float(math.floor(rad2deg(angle)))
        prefer_vertical = False
        prefer_horizontal = False
        h_point: tuple[float, float] | None = None
        v_point: tuple[float, float] | None = None

        if angle_chk not in (0.0, 180.0):
            h_point, left = self._scan_horizontal(view, angle, angle_chk)
            prefer_vertical = prefer_vertical or left
        else:
            prefer_vertical = True
        if angle_chk not in (270.0, 90.0):
            v_point, left = self._scan_vertical(view, angle, angle_chk)
            prefer_horizontal = prefer_horizontal or left
        else:
            prefer_horizontal = True

        def dist(point: tuple[float, float]) -> float:
            return math.hypot(view.x - point[0], view.y - point[1])

        if prefer_vertical:
            vertical = v_point is not None
        elif prefer_horizontal:
            vertical = h_point is None
        else:
            vertical = not dist(h_point) < dist(v_point)

        point = v_point if vertical else h_point
        raw = dist(point)
        offset = _tile_offset(point[1] if vertical else point[0])
        return RayHit(
            angle=angle,
            angle_chk=angle_chk,
            x=point[0],
            y=point[1],
            raw_distance=raw,
            distance=raw * math.cos(angle - view.angle),
            offset=offset,
            vertical=vertical,
        )

    def _wall_height(self, distance: float) -> float:
        if distance == 0:
            return math.inf
        return abs(TILE_SIZE / distance * self.plane_distance)

    def _texture_for(self, hit: RayHit) -> XpmImage:
        if hit.vertical:
            return self.textures[2 if is_view_right(hit.angle_chk) else 3]
        return self.textures[0 if is_view_down(hit.angle_chk) else 1]

    def texture_color(self, hit: RayHit, view: View, y: float) -> int:
        """Return the texture pixel drawn at screen row ``y`` of a wall."""
        texture = self._texture_for(hit)
        height = self._wall_height(hit.distance)
        row = _trunc(y + height / 2 - view.horizon)
        column = _trunc(hit.offset / TILE_SIZE * texture.width)
        row = _trunc(row * (texture.height / height))
        index = _trunc(row * texture.height + column)
        index = min(max(index, 0), len(texture.pixels) - 1)
        return texture.pixels[index] & 0xFFFFFFFF

    def _draw_column(self, column: int, hit: RayHit, view: View, frame: Frame) -> None:
        height = self._wall_height(hit.distance)
        start = view.horizon - height / 2
        end = start + height
        colors = []
        for y in range(self.height + 1):
            if y < start:
                colors.append(self.ceiling)
            elif y <= end:
                colors.append(self.texture_color(hit, view, y))
            else:
                colors.append(self.floor)
        frame._set_column(column, colors)

    def render(self, view: View, frame: Frame) -> None:
        """Draw the ceiling, walls and floor seen from ``view`` into ``frame``."""
        angle = view.ray_angle
        step = deg2rad(FOV) / self.width
        for column in range(self.width + 1):
            hit = self.cast(view, angle)
            self._draw_column(column, hit, view, frame)
            if hit.angle_chk == 360.0:
                angle = 0.0
            angle += step