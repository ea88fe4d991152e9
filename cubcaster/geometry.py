"""Screen constants, angle conversion and view-direction tests."""

from __future__ import annotations

import math

WIN_W = 1366
"""Width of the rendered view in pixels."""

WIN_H = 768
"""Height of the rendered view in pixels."""

FOV = 60
"""Field of view in degrees."""

TILE_SIZE = 500
"""Side of one map cell in world units."""


def deg2rad(degree: float) -> float:
    """Convert degrees to radians."""
    return degree * (math.pi / 180.0)


def rad2deg(radians: float) -> float:
    """Convert radians to degrees."""
    return radians * (180.0 / math.pi)


def is_view_up(angle_chk: float) -> bool:
    """Tell whether a ray at ``angle_chk`` degrees goes towards smaller y."""
    return 180.0 <= angle_chk <= 360.0


def is_view_down(angle_chk: float) -> bool:
    """Tell whether a ray at ``angle_chk`` degrees goes towards larger y."""
    return not is_view_up(angle_chk)


def is_view_right(angle_chk: float) -> bool:
    """Tell whether a ray at ``angle_chk`` degrees goes towards larger x."""
    return 270.0 <= angle_chk <= 360.0 or 0.0 <= angle_chk <= 90.0


def is_view_left(angle_chk: float) -> bool:
    """Tell whether a ray at ``angle_chk`` degrees goes towards smaller x."""
    return not is_view_right(angle_chk)