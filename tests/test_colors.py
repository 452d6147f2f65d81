import pytest

from core.colors import (
    DARK_TEXT,
    LIGHT_TEXT,
    Color,
    ColorCache,
    crc24,
    mix_offset,
    rgb_to_css,
    rgb_to_luminance,
    rgb_to_triple,
)


def test_crc24_feeds_byte_through_polynomial():
    assert crc24(0, 0) == 0
    assert crc24(0, 1) == 0xFA5711


def test_rgb_helpers():
    assert rgb_to_triple(0x0A0B0C) == (10, 11, 12)
    assert rgb_to_css(0x0A0B0C) == "rgb(10,11,12)"
    assert rgb_to_luminance(0xFFFFFF) == pytest.approx(255.0)
    assert rgb_to_luminance(0x000000) == 0.0


def test_offset_one_is_mixed_then_inverted():
    # crc24(1, 1) == 0xFA5611, luminance 127.17 pushes it through the 0xA5A5A5 inversion
    assert mix_offset(1) == 0x5FF3B4
    color = ColorCache().color_for(1)
    assert (color.red, color.green, color.blue) == (0x5F, 0xF3, 0xB4)
    assert color.is_light
    assert color.foreground == DARK_TEXT


def test_offset_zero_keeps_seed_color():
    color = ColorCache().color_for(0)
    assert color.rgb == 0
    assert color.css == "rgb(0,0,0)"
    assert color.foreground == LIGHT_TEXT


def test_color_for_is_memoized_and_deterministic():
    cache = ColorCache()
    first = cache.color_for(0x1234)
    assert cache.color_for(0x1234) is first
    assert ColorCache().color_for(0x1234) == first
    assert len(cache) == 1
    assert 0x1234 in cache


def test_get_does_not_insert():
    cache = ColorCache()
    assert cache.get(99) is None
    assert cache.get(None) is None
    assert len(cache) == 0
    color = cache.color_for(99)
    assert cache.get(99) is color


def test_clear_empties_cache():
    cache = ColorCache()
    for offset in range(10):
        cache.color_for(offset)
    cache.clear()
    assert len(cache) == 0


@pytest.mark.parametrize("offset", [0, 1, 42, 0xFF, 0x100, 0xDEADBEEF, 2**40, 2**70])
def test_colors_stay_within_24_bits(offset):
    assert 0 <= ColorCache().color_for(offset).rgb <= 0xFFFFFF


def test_negative_offset_terminates():
    color = ColorCache().color_for(-1)
    assert 0 <= color.rgb <= 0xFFFFFF


def test_foreground_is_one_of_two_values_split_at_128():
    assert Color.from_rgb(0x808080).luminance == pytest.approx(128.0)
    assert Color.from_rgb(0x808080).foreground == LIGHT_TEXT
    assert Color.from_rgb(0x818181).foreground == DARK_TEXT
    seen = {ColorCache().color_for(offset).foreground for offset in range(500)}
    assert seen <= {DARK_TEXT, LIGHT_TEXT}


def test_nearby_offsets_get_distinct_colors():
    cache = ColorCache()
    colors = {cache.color_for(offset).rgb for offset in range(1, 257)}
    assert len(colors) > 250
