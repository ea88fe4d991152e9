import math

import pytest

from cubcaster.geometry import TILE_SIZE, deg2rad
from cubcaster.raycaster import Frame, Raycaster, View, find_player
from cubcaster.xpm import XpmImage

GRID = ("11111", "10001", "10N01", "10001", "11111")
FLOOR = 0x223344
CEILING = 0x556677
COLORS = (0x0000AA, 0x00AA00, 0xAA0000, 0xAAAA00)


def _solid(color):
    return XpmImage(2, 2, (color,) * 4)


def _raycaster(width=40, height=30, textures=None):
    textures = textures or [_solid(color) for color in COLORS]
    return Raycaster(GRID, textures, FLOOR, CEILING, width=width, height=height)


def _center_view(angle=0.0, horizon=15.0):
    x, y = find_player(GRID, "N")
    return View(x=x, y=y, angle=angle, ray_angle=angle - deg2rad(30), horizon=horizon)


def test_new_frame_is_black():
    frame = Frame(4, 3)
    assert frame.get_pixel(3, 2) == 0
    assert len(frame.pixels) == 12


def test_frame_put_and_get():
    frame = Frame(4, 3)
    frame.put_pixel(1, 2, CEILING)
    assert frame.get_pixel(1, 2) == CEILING


def test_frame_stores_unsigned_pixels():
    frame = Frame(2, 2)
    frame.put_pixel(0, 0, -1)
    assert frame.get_pixel(0, 0) == 0xFFFFFFFF


def test_frame_ignores_pixels_outside():
    frame = Frame(2, 2)
    frame.put_pixel(2, 0, FLOOR)
    frame.put_pixel(0, 2, FLOOR)
    frame.put_pixel(-1, 0, FLOOR)
    assert frame.pixels == [0, 0, 0, 0]


def test_frame_get_outside_raises():
    with pytest.raises(IndexError):
        Frame(2, 2).get_pixel(2, 1)


def test_frame_rejects_empty_size():
    with pytest.raises(ValueError):
        Frame(0, 5)


def test_find_player_is_cell_centre():
    x, y = find_player(GRID, "N")
    assert x % TILE_SIZE == TILE_SIZE // 2
    assert y % TILE_SIZE == TILE_SIZE // 2
    assert (x // TILE_SIZE, y // TILE_SIZE) == (2, 2)


def test_find_player_missing():
    with pytest.raises(ValueError):
        find_player(GRID, "S")


def test_raycaster_needs_four_textures():
    with pytest.raises(ValueError):
        Raycaster(GRID, [_solid(1)], FLOOR, CEILING)


def test_is_open():
    rc = _raycaster()
    x, y = find_player(GRID, "N")
    assert rc.is_open(x, y) is True
    assert rc.is_open(TILE_SIZE / 2, TILE_SIZE / 2) is False
    assert rc.is_open(-1.0, 0.0) is False
    assert rc.is_open(1e9, 0.0) is False


def test_cast_east_hits_vertical_wall():
    rc = _raycaster()
    view = _center_view(0.0)
    hit = rc.cast(view, 0.0)
    assert hit.vertical is True
    assert hit.x % TILE_SIZE == 0
    assert rc.is_open(hit.x + 1, hit.y) is False
    assert rc.is_open(hit.x - 1, hit.y) is True


def test_cast_south_hits_horizontal_wall():
    rc = _raycaster()
    view = _center_view(math.pi / 2)
    hit = rc.cast(view, math.pi / 2)
    assert hit.vertical is False
    assert hit.y % TILE_SIZE == pytest.approx(0.0, abs=1e-6)
    assert rc.is_open(hit.x, hit.y + 1) is False


def test_cast_distance_matches_hit_point():
    rc = _raycaster()
    view = _center_view(0.0)
    hit = rc.cast(view, deg2rad(20))
    assert hit.raw_distance == pytest.approx(
        math.hypot(hit.x - view.x, hit.y - view.y)
    )
    assert hit.distance == pytest.approx(hit.raw_distance * math.cos(deg2rad(20)))
    assert 0 <= hit.offset < TILE_SIZE


def test_cast_symmetric_room():
    rc = _raycaster()
    view = _center_view(0.0)
    east = rc.cast(view, 0.0)
    west = rc.cast(view, math.pi)
    south = rc.cast(view, math.pi / 2)
    north = rc.cast(view, 3 * math.pi / 2)
    assert east.raw_distance == pytest.approx(west.raw_distance)
    assert south.raw_distance == pytest.approx(north.raw_distance)
    assert east.raw_distance == pytest.approx(south.raw_distance)


def test_texture_color_is_a_texture_pixel():
    gradient = XpmImage(2, 2, (1, 2, 3, 4))
    rc = _raycaster(textures=[gradient] * 4)
    view = _center_view(0.0)
    hit = rc.cast(view, 0.0)
    for y in range(-10, 60):
        assert rc.texture_color(hit, view, y) in gradient.pixels


@pytest.mark.parametrize(
    "angle, texture",
    [(0.0, 2), (math.pi, 3), (math.pi / 2, 0), (3 * math.pi / 2, 1)],
)
def test_render_draws_ceiling_wall_floor(angle, texture):
    rc = _raycaster()
    frame = Frame(40, 30)
    rc.render(_center_view(angle), frame)
    assert frame.get_pixel(0, 0) == CEILING
    assert frame.get_pixel(0, 29) == FLOOR
    assert frame.get_pixel(20, 15) == COLORS[texture]


def test_render_only_uses_scene_colors():
    rc = _raycaster()
    frame = Frame(40, 30)
    rc.render(_center_view(deg2rad(37)), frame)
    allowed = {FLOOR, CEILING, *COLORS}
    assert set(frame.pixels) <= allowed
    assert FLOOR in frame.pixels and CEILING in frame.pixels
    assert set(frame.pixels) & set(COLORS)