import pytest

from cubcaster.config import (
    CubeMap,
    Scene,
    TexturePaths,
    build_grid,
    check_color_commas,
    check_map,
    color_out_of_range,
    load_scene,
    parse_color,
    parse_map,
    parse_scene,
    parse_texture_path,
    rgb_to_int,
)
from cubcaster.errors import CubError

HEADER = [
    "NO ./textures/north.xpm",
    "SO ./textures/south.xpm",
    "WE ./textures/west.xpm",
    "EA ./textures/east.xpm",
    "F 220,100,0",
    "C 225,30,0",
]
MAP = ["111111", "100001", "10N001", "111111"]


def _message(excinfo):
    return str(excinfo.value)


def test_three_commas_rejected():
    with pytest.raises(CubError) as excinfo:
        check_color_commas("1,2,3,")
    assert _message(excinfo) == "Error\ncolor has many section only takes RGB"


def test_color_range():
    assert color_out_of_range("255") is False
    assert color_out_of_range("0") is False
    assert color_out_of_range("000255") is False
    assert color_out_of_range("256") is True
    assert color_out_of_range("1000") is True


@pytest.mark.parametrize("red,green,blue", [(12, 34, 56), (0, 0, 0), (255, 1, 128)])
def test_rgb_round_trip(red, green, blue):
    value = rgb_to_int([str(red), str(green), str(blue)])
    assert (value >> 16) & 0xFF == red
    assert (value >> 8) & 0xFF == green
    assert value & 0xFF == blue
    assert parse_color(f"{red},{green},{blue}") == value


def test_white_is_full_value():
    assert parse_color("255,255,255") == 0xFFFFFF


def test_leading_zeros_accepted():
    assert parse_color("007,0010,000") == parse_color("7,10,0")


@pytest.mark.parametrize(
    "text,message",
    [
        ("1,,2", "Error:\n invalid RGB colors"),
        ("1,2", "Error:\n invalid RGB colors"),
        ("1, 2,3", "Error:\n in color"),
        ("1,a,3", "Error:\n in color"),
        ("300,0,0", "Error:\n invalid color"),
        ("1,2,3,4", "Error\ncolor has many section only takes RGB"),
    ],
)
def test_color_errors(text, message):
    with pytest.raises(CubError) as excinfo:
        parse_color(text)
    assert _message(excinfo) == message


def test_texture_path_without_file_check():
    assert parse_texture_path("./textures/a.xpm", False) == "./textures/a.xpm"


@pytest.mark.parametrize("text", ["textures/a.xpm", "./textures/ a.xpm", "/tmp/a.xpm"])
def test_texture_path_invalid(text):
    with pytest.raises(CubError) as excinfo:
        parse_texture_path(text, False)
    assert _message(excinfo) == "Error:\nInvalid texture"


def test_texture_file_must_exist(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "textures").mkdir()
    (tmp_path / "textures" / "wall.xpm").write_text("x")
    assert parse_texture_path("./textures/wall.xpm") == "./textures/wall.xpm"
    with pytest.raises(CubError) as excinfo:
        parse_texture_path("./textures/missing.xpm")
    assert _message(excinfo) == "Error:\nInvalid texture file"


def test_build_grid_pads_and_marks_spaces():
    grid = build_grid(["1111", "1N01", " 11", "", "   "])
    assert len(grid) == 3
    assert all(len(row) == 4 for row in grid)
    assert grid[2] == "D11D"
    assert grid[1] == "1N01"


def test_build_grid_rejects_text_after_blank_line():
    with pytest.raises(CubError) as excinfo:
        build_grid(["111", "1N1", "", "111"])
    assert _message(excinfo) == "Error:\nMap have an empty line"


def test_check_map_returns_player():
    assert check_map(build_grid(MAP)) == "N"
    assert check_map(build_grid(["1111", "1W01", "111"])) == "W"


@pytest.mark.parametrize(
    "rows,message",
    [
        (["111111", "1N00S1", "111111"], "Error\none player only accepted no more"),
        (["1111", "1001", "1111"], "Error\nthe player not exist"),
        (["1111", "1NX1", "1111"], "Error\nuse of a different elem in the map"),
        (["1101", "1N01", "1111"], "error\nmap border are not close"),
        (["1111", "1N01", "1101"], "Error\nmap border are not close"),
        (["1111", "0N01", "1111"], "Error\nmap border are not close"),
        (["11111", "10 01", "1N001", "11111"], "Error\nmap coordinate not close"),
        (["1111", "1N00", "1111"], "Error\nmap border are not close with 1"),
    ],
)
def test_check_map_errors(rows, message):
    with pytest.raises(CubError) as excinfo:
        check_map(build_grid(rows))
    assert _message(excinfo) == message


def test_empty_grid_has_no_player():
    with pytest.raises(CubError) as excinfo:
        check_map([])
    assert _message(excinfo) == "Error\nthe player not exist"


def test_parse_map_dimensions():
    cube = parse_map(MAP + ["", ""])
    assert isinstance(cube, CubeMap)
    assert cube.width == len(MAP[0])
    assert cube.height == len(MAP)
    assert cube.player == "N"
    assert cube.grid == tuple(MAP)


def test_parse_scene_valid():
    scene = parse_scene(HEADER + [""] + MAP, check_files=False)
    assert scene.textures == TexturePaths(
        north="./textures/north.xpm",
        south="./textures/south.xpm",
        east="./textures/east.xpm",
        west="./textures/west.xpm",
    )
    assert scene.floor == parse_color("220,100,0")
    assert scene.ceiling == parse_color("225,30,0")
    assert scene.map.grid == tuple(MAP)


def test_parse_scene_trims_and_accepts_tabs():
    header = ["\t" + line.replace(" ", "\t  ", 1) + "  " for line in HEADER]
    scene = parse_scene(header + MAP, check_files=False)
    assert scene.textures.west == "./textures/west.xpm"
    assert scene.map.player == "N"


def test_parse_scene_duplicate_color():
    lines = HEADER[:5] + ["F 1,2,3"] + MAP
    with pytest.raises(CubError) as excinfo:
        parse_scene(lines, check_files=False)
    assert _message(excinfo) == "Error\nF already exist"


def test_parse_scene_duplicate_texture():
    lines = HEADER[:1] + ["NO ./textures/other.xpm"] + HEADER[2:] + MAP
    with pytest.raises(CubError) as excinfo:
        parse_scene(lines, check_files=False)
    assert _message(excinfo) == "Error\nNO already exist"


def test_parse_scene_without_map():
    with pytest.raises(CubError) as excinfo:
        parse_scene(HEADER + ["", ""], check_files=False)
    assert _message(excinfo) == "Error\nno existing for the map"


@pytest.mark.parametrize(
    "line,message",
    [
        ("XX ./textures/a.xpm", "Error:\ndifferent element in the map"),
        ("NOX ./textures/a.xpm", "Error:\ndifferent element in the map"),
        ("F", "Error:\nin the element"),
    ],
)
def test_parse_scene_bad_element(line, message):
    with pytest.raises(CubError) as excinfo:
        parse_scene([line] + HEADER[1:] + MAP, check_files=False)
    assert _message(excinfo) == message


def test_load_scene_from_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    textures = tmp_path / "textures"
    textures.mkdir()
    for name in ("north", "south", "east", "west"):
        (textures / f"{name}.xpm").write_text("x")
    (tmp_path / "level.cub").write_text("\n".join(HEADER + [""] + MAP) + "\n")
    scene = load_scene("level.cub")
    assert isinstance(scene, Scene)
    assert scene.textures.north == "./textures/north.xpm"
    assert scene.map.height == len(MAP)


def test_load_scene_wrong_extension(tmp_path):
    path = tmp_path / "level.txt"
    path.write_text("\n".join(HEADER + MAP))
    with pytest.raises(CubError) as excinfo:
        load_scene(path)
    assert "extension" in _message(excinfo)