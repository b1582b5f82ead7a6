import pytest

from rustyworld.text import FONT, GLYPH_HEIGHT, STRING_TABLE, get_string, glyph


def test_font_has_96_glyphs():
    glyphs = [glyph(code) for code in range(0x20, 0x80)]
    assert len(glyphs) == 96
    assert b"".join(glyphs) == FONT


def test_first_string():
    assert get_string(0x001) == b"P E A N U T  3000"


def test_later_entry_for_same_id_wins():
    assert get_string(0x193) == b"AU BOULOT !!!\n"


def test_multiline_string_keeps_newlines():
    assert get_string(0x032) == b"- Phase 1:\nParticle ACCELERATION."


def test_unknown_string_raises():
    with pytest.raises(KeyError):
        get_string(0x0009)


def test_space_glyph_is_blank():
    assert glyph(" ") == bytes(GLYPH_HEIGHT)


def test_letter_a_glyph():
    assert glyph("A") == bytes.fromhex("788484FC84848400")


def test_glyph_accepts_code_or_character():
    assert glyph(0x41) == glyph("A")
    assert glyph(ord("z")) == glyph("z")


def test_last_glyph_is_last_font_row():
    assert glyph(0x7F) == FONT[-GLYPH_HEIGHT:]


@pytest.mark.parametrize("code", [0x00, 0x0A, 0x1F, 0x80, 0xFF])
def test_characters_outside_font_raise(code):
    with pytest.raises(ValueError):
        glyph(code)


def test_every_string_is_drawable():
    for text in STRING_TABLE.values():
        for code in text:
            if code == 0x0A:
                continue
            assert len(glyph(code)) == GLYPH_HEIGHT