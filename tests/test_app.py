import pygame
import pytest

from cubcaster.app import load_textures, main, translate_key
from cubcaster.config import CubeMap, Scene, TexturePaths
from cubcaster.errors import CubError
from cubcaster.player import Key

GRID = ("111", "1N1", "111")


def _write_xpm(path, color):
    path.write_text(
        "/* XPM */\n"
        "static char *t[] = {\n"
        '"1 1 1 1",\n'
        f'"a c #{color:06X}",\n'
        '"a"\n'
        "};\n"
    )
    return str(path)


def _scene(tmp_path, colors):
    paths = {
        side: _write_xpm(tmp_path / f"{side}.xpm", color)
        for side, color in colors.items()
    }
    return Scene(TexturePaths(**paths), 0x000000, 0xFFFFFF, CubeMap(GRID, "N"))


def test_load_textures_order_east_north_west_south(tmp_path):
    colors = {"north": 0x0000FF, "south": 0x00FF00, "east": 0xFF0000, "west": 0x123456}
    images = load_textures(_scene(tmp_path, colors))
    assert [image.pixel(0, 0) for image in images] == [
        colors["east"],
        colors["north"],
        colors["west"],
        colors["south"],
    ]


def test_load_textures_missing_file(tmp_path):
    scene = Scene(
        TexturePaths(*(str(tmp_path / f"{n}.xpm") for n in "abcd")),
        0,
        0,
        CubeMap(GRID, "N"),
    )
    with pytest.raises(CubError, match="in img"):
        load_textures(scene)


@pytest.mark.parametrize(
    "pygame_key, key",
    [
        (pygame.K_w, Key.UP),
        (pygame.K_s, Key.DOWN),
        (pygame.K_a, Key.LEFT),
        (pygame.K_d, Key.RIGHT),
        (pygame.K_LEFT, Key.ROT_RIGHT),
        (pygame.K_RIGHT, Key.ROT_LEFT),
        (pygame.K_UP, Key.VIEW_UP),
        (pygame.K_DOWN, Key.VIEW_DOWN),
        (pygame.K_ESCAPE, Key.ESC),
    ],
)
def test_translate_key(pygame_key, key):
    assert translate_key(pygame_key) is key


def test_translate_unknown_key():
    assert translate_key(pygame.K_z) is None


@pytest.mark.parametrize("argv", [[], ["a.cub", "b.cub"]])
def test_main_rejects_wrong_argument_count(argv, capsys):
    assert main(argv) == 1
    assert capsys.readouterr().err == "Invalid argument."


def test_main_rejects_wrong_extension(capsys):
    assert main(["scene.txt"]) == 1
    assert ".cub" in capsys.readouterr().err


def test_main_reports_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.cub")]) == 1
    assert capsys.readouterr().err == "Error in file"


def test_main_reports_bad_scene(tmp_path, capsys):
    path = tmp_path / "bad.cub"
    path.write_text("XX something\n")
    assert main([str(path)]) == 1
    assert "different element" in capsys.readouterr().err