"""Colour conversion between the host's HSB model and the device's RGB hex.

The device only accepts and reports 6-digit RGB hex strings, while the host
works with hue (0-360), saturation (0-100) and brightness (0-100).
"""

import math
import re

from core.errors import InvalidColorFormat
from models.types import RGB

HEX_COLOUR = re.compile(r'[0-9a-fA-F]{6}')


def hsb_to_rgb(hue: float, saturation: float, brightness: float) -> RGB:
    """Convert HSB to RGB using the standard HSV sector algorithm.

    Hue wraps modulo 360; saturation and brightness are clamped to 0-100.

    Args:
        hue: Hue in degrees
        saturation: Saturation percentage
        brightness: Brightness percentage

    Returns:
        RGB with 0-255 channels
    """
    h = hue % 360
    s = max(0, min(100, saturation)) / 100
    v = max(0, min(100, brightness)) / 100

    chroma = v * s
    sector_position = h / 60
    sector = math.floor(sector_position) % 6
    fraction = sector_position - math.floor(sector_position)

    p = v - chroma
    q = v - chroma * fraction
    t = v - chroma * (1 - fraction)

    if sector == 0:
        r, g, b = v, t, p
    elif sector == 1:
        r, g, b = q, v, p
    elif sector == 2:
        r, g, b = p, v, t
    elif sector == 3:
        r, g, b = p, q, v
    elif sector == 4:
        r, g, b = t, p, v
    else:
        r, g, b = v, p, q

    return RGB(round(r * 255), round(g * 255), round(b * 255))


def parse_hex(hex_colour: str) -> RGB:
    """Parse a 6-digit hex string (surrounding whitespace allowed)."""
    if not isinstance(hex_colour, str):
        raise InvalidColorFormat(f"Expected a hex colour string, got {type(hex_colour).__name__}")

    value = hex_colour.strip()
    if not HEX_COLOUR.fullmatch(value):
        raise InvalidColorFormat(f"Invalid hex colour: '{value}'. Expected 6 hex digits")

    return RGB(int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16))


def rgb_to_hsb(hex_colour: str) -> tuple[int, int, int]:
    """Convert a 6-digit hex colour to (hue, saturation, brightness).

    Greys (including white and black) report hue 0, and black reports
    saturation 0.
    """
    rgb = parse_hex(hex_colour)
    r, g, b = rgb.r / 255, rgb.g / 255, rgb.b / 255

    high = max(r, g, b)
    low = min(r, g, b)
    delta = high - low

    if delta == 0:
        hue = 0.0
    elif high == r:
        hue = 60 * (((g - b) / delta) % 6)
    elif high == g:
        hue = 60 * ((b - r) / delta + 2)
    else:
        hue = 60 * ((r - g) / delta + 4)

    saturation = 0.0 if high == 0 else delta / high

    return round(hue) % 360, round(saturation * 100), round(high * 100)


def rgb_to_hex(rgb: RGB) -> str:
    """Format RGB as six lowercase, zero-padded hex digits."""
    for channel in rgb:
        if not 0 <= channel <= 255:
            raise InvalidColorFormat(f"RGB channel out of range: {channel}. Must be 0-255")
    r, g, b = rgb
    return f"{r:02x}{g:02x}{b:02x}"
