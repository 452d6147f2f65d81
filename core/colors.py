from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple


CRC24_POLY = 0xFA5711
CRC24_MASK = 0xFFFFFF
INVERT_PATTERN = 0xA5A5A5
INVERT_THRESHOLD = 127
FOREGROUND_THRESHOLD = 128
DARK_TEXT = "#101010"
LIGHT_TEXT = "#dddddd"
MAX_OFFSET_BYTES = 8


def crc24(crc: int, byte: int) -> int:
    crc ^= byte << 16
    for _ in range(8):
        if crc & 0x800000:
            crc = ((crc << 1) ^ CRC24_POLY) & CRC24_MASK
        else:
            crc = (crc << 1) & CRC24_MASK
    return crc


def rgb_to_triple(rgb: int) -> Tuple[int, int, int]:
    return (rgb >> 16) & 0xFF, (rgb >> 8) & 0xFF, rgb & 0xFF


def rgb_to_luminance(rgb: int) -> float:
    # NTSC (YIQ) luma weights.
    r, g, b = rgb_to_triple(rgb)
    return (r * 299.0 + g * 587.0 + b * 114.0) / 1000.0


def rgb_to_css(rgb: int) -> str:
    return "rgb({},{},{})".format(*rgb_to_triple(rgb))


def mix_offset(offset: int) -> int:
    # Offset 0 never enters the loop and keeps its seed value.
    rgb = offset
    remaining = offset
    for _ in range(MAX_OFFSET_BYTES):
        if not remaining:
            break
        rgb = crc24(rgb, remaining & 0xFF)
        remaining >>= 8
    rgb &= CRC24_MASK
    if rgb_to_luminance(rgb) > INVERT_THRESHOLD:
        rgb ^= INVERT_PATTERN
    return rgb


@dataclass(frozen=True)
class Color:
    rgb: int
    luminance: float

    @classmethod
    def from_rgb(cls, rgb: int) -> "Color":
        return cls(rgb=rgb, luminance=rgb_to_luminance(rgb))

    @property
    def red(self) -> int:
        return rgb_to_triple(self.rgb)[0]

    @property
    def green(self) -> int:
        return rgb_to_triple(self.rgb)[1]

    @property
    def blue(self) -> int:
        return rgb_to_triple(self.rgb)[2]

    @property
    def is_light(self) -> bool:
        return self.luminance > FOREGROUND_THRESHOLD

    @property
    def foreground(self) -> str:
        return DARK_TEXT if self.is_light else LIGHT_TEXT

    @property
    def css(self) -> str:
        return rgb_to_css(self.rgb)


class ColorCache:
    def __init__(self) -> None:
        self._colors: Dict[int, Color] = {}

    def color_for(self, offset: int) -> Color:
        color = self._colors.get(offset)
        if color is not None:
            return color
        color = Color.from_rgb(mix_offset(offset))
        self._colors[offset] = color
        return color

    def get(self, offset: Optional[int]) -> Optional[Color]:
        if offset is None:
            return None
        return self._colors.get(offset)

    def clear(self) -> None:
        self._colors.clear()

    def __contains__(self, offset: object) -> bool:
        return offset in self._colors

    def __len__(self) -> int:
        return len(self._colors)
