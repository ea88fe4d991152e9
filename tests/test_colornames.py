import pytest

from cubcaster.colornames import color_by_name


def test_known_names():
    assert color_by_name("snow") == 0xFFFAFA
    assert color_by_name("red") == 0xFF0000
    assert color_by_name("black") == 0x0


def test_lookup_ignores_case():
    assert color_by_name("SNOW") == color_by_name("snow")
    assert color_by_name("Ghost White") == color_by_name("ghost white")


def test_first_duplicate_wins():
    assert color_by_name("dark slate") == 0x2F4F4F
    assert color_by_name("light slate") == 0x778899
    assert color_by_name("light goldenrod") == 0xFAFAD2


def test_none_is_transparent_marker():
    assert color_by_name("none") == -1


def test_spelling_variants_agree():
    assert color_by_name("gray50") == color_by_name("grey50")
    assert color_by_name("lightgray") == color_by_name("light grey")


def test_unknown_name_raises():
    with pytest.raises(KeyError):
        color_by_name("not a colour")