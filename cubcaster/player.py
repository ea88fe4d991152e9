"""Keyboard state and player movement, turning and looking up or down."""

from __future__ import annotations

import math
from enum import IntEnum
from typing import Protocol, Sequence

from cubcaster.geometry import FOV, WIN_H, deg2rad, rad2deg
from cubcaster.raycaster import View, find_player

SPEED = 100.0
"""Distance covered by one movement step, in world units."""

ROT_SPEED = 5.0
"""Angle turned by one rotation step, in degrees."""

LOOK_STEP = 5
"""Screen rows the horizon moves by one look step."""

LOOK_RANGE = 100
"""How far the horizon may move away from the screen centre."""

_PLAYER_ANGLES = {
    "E": 0.0,
    "N": math.pi / 2,
    "W": math.pi,
    "S": 3 * math.pi / 2,
}


class Key(IntEnum):
    """Game keys, numbered with their keyboard codes."""

    LEFT = 0
    DOWN = 1
    RIGHT = 2
    UP = 13
    ESC = 53
    ROT_RIGHT = 123
    ROT_LEFT = 124
    VIEW_DOWN = 125
    VIEW_UP = 126


class KeyState:
    """The set of game keys held down, and whether quitting was asked for."""

    def __init__(self) -> None:
        self.held: set[Key] = set()
        self.quit_requested = False

    def __contains__(self, key: object) -> bool:
        return key in self.held

    def press(self, key: Key) -> None:
        """Record a key going down; Escape asks to quit."""
        if key is Key.ESC:
            self.quit_requested = True
        else:
            self.held.add(Key(key))

    def release(self, key: Key) -> None:
        """Record a key coming up."""
        self.held.discard(key)


class _World(Protocol):
    def is_open(self, x: float, y: float) -> bool: ...


def _c_round(value: float) -> int:
    """Round half away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Controller:
    """Applies the held keys to a view, keeping the player out of walls."""

    def __init__(self, world: _World, view: View, keys: KeyState | None = None) -> None:
        self.world = world
        self.view = view
        self.keys = keys if keys is not None else KeyState()

    def can_move(self, dx: float, dy: float) -> bool:
        """Tell whether the player may move by ``(dx, dy)``."""
        x, y = self.view.x, self.view.y
        return (
            self.world.is_open(x + dx, y + dy)
            and self.world.is_open(x, y + dy)
            and self.world.is_open(x + dx, y)
        )

    def _try_step(self, dx: float, dy: float) -> bool:
        if not self.can_move(dx, dy):
            return False
        self.view.x += dx
        self.view.y += dy
        return True

    def _strafe(self) -> bool:
        sin, cos = math.sin(self.view.angle), math.cos(self.view.angle)
        if Key.RIGHT in self.keys and self._try_step(-sin * SPEED, cos * SPEED):
            return True
        if Key.LEFT in self.keys and self._try_step(sin * SPEED, -cos * SPEED):
            return True
        return False

    def _walk(self) -> bool:
        sin, cos = math.sin(self.view.angle), math.cos(self.view.angle)
        if Key.UP in self.keys and self._try_step(cos * SPEED, sin * SPEED):
            return True
        if Key.DOWN in self.keys and self._try_step(-cos * SPEED, -sin * SPEED):
            return True
        return False

    def move(self) -> bool:
        """Strafe, then walk, as the held keys ask; tell whether the player moved."""
        moved = False
        if Key.RIGHT in self.keys or Key.LEFT in self.keys:
            moved = self._strafe() or moved
        if Key.UP in self.keys or Key.DOWN in self.keys:
            moved = self._walk() or moved
        return moved

    def look(self) -> bool:
        """Move the horizon up or down; False when it reached its limit."""
        centre = WIN_H // 2
        if Key.VIEW_UP in self.keys:
            if not self.view.horizon <= centre + LOOK_RANGE:
                return False
            self.view.horizon += LOOK_STEP
        if Key.VIEW_DOWN in self.keys:
            if not self.view.horizon >= centre - LOOK_RANGE:
                return False
            self.view.horizon -= LOOK_STEP
        return True

    def rotate(self) -> bool:
        """Turn the view as the rotation keys ask; tell whether it turned."""
        view = self.view
        step = deg2rad(ROT_SPEED)
        turned = False
        if Key.ROT_RIGHT in self.keys:
            if _c_round(rad2deg(view.angle)) == 0:
                view.angle = 2 * math.pi
            view.angle = abs(view.angle - step)
            if _c_round(rad2deg(view.ray_angle)) == 0:
                view.ray_angle = 2 * math.pi
            view.ray_angle = abs(view.ray_angle - step)
            turned = True
        if Key.ROT_LEFT in self.keys:
            if _c_round(rad2deg(view.angle)) == 360:
                view.angle = 0.0
            view.angle += step
            if _c_round(rad2deg(view.ray_angle)) == 360:
                view.ray_angle = 0.0
            view.ray_angle += step
            turned = True
        return turned

    def step(self) -> bool:
        """Apply every held key once; tell whether the view changed."""
        changed = self.move()
        if Key.VIEW_UP in self.keys or Key.VIEW_DOWN in self.keys:
            changed = self.look() or changed
        if Key.ROT_RIGHT in self.keys or Key.ROT_LEFT in self.keys:
            changed = self.rotate() or changed
        return changed


def initial_view(grid: Sequence[str], player: str) -> View:
    """Return the starting view for the player letter found on ``grid``."""
    try:
        angle = _PLAYER_ANGLES[player]
    except KeyError:
        raise ValueError(f"unknown player letter {player!r}") from None
    degrees = rad2deg(angle)
    half_fov = FOV // 2
    if _c_round(degrees) == 0:
        ray_angle = deg2rad(360 - half_fov)
    elif _c_round(degrees) < half_fov:
        ray_angle = deg2rad(360 - abs(degrees - half_fov))
    else:
        ray_angle = angle - deg2rad(half_fov)
    x, y = find_player(grid, player)
    return View(x=x, y=y, angle=angle, ray_angle=ray_angle, horizon=float(WIN_H // 2))