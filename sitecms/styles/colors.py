"""
Colour helpers for the CSS variable system.

The stylesheet variables hold bare HSL triples ("262 83% 58%") so that
templates can write ``hsl(var(--primary) / 0.9)``.
"""
import math
import re

from sitecms.styles.errors import InvalidColor

HEX_COLOR_PATTERN = re.compile(r'^#?([0-9a-fA-F]{6})$')

BLACK = '#000000'
WHITE = '#ffffff'


def is_hex_color(value) -> bool:
    return isinstance(value, str) and bool(HEX_COLOR_PATTERN.match(value.strip()))


def normalize_hex(value: str) -> str:
    """Return ``value`` as lowercase ``#rrggbb`` or raise InvalidColor."""
    if not isinstance(value, str):
        raise InvalidColor(value)
    match = HEX_COLOR_PATTERN.match(value.strip())
    if not match:
        raise InvalidColor(value)
    return f"#{match.group(1).lower()}"


def _round_half_up(value: float) -> int:
    # Match browser Math.round rather than banker's rounding
    return int(math.floor(value + 0.5))


def hex_to_hsl(hex_color: str) -> str:
    """
    Convert a 6-digit RGB hex colour to an ``"H S% L%"`` string.

    H is an integer in [0, 360), S and L integers in [0, 100].

    Raises:
        InvalidColor: if the input is not six hex digits (``#`` optional)
    """
    digits = normalize_hex(hex_color)[1:]

    r = int(digits[0:2], 16) / 255
    g = int(digits[2:4], 16) / 255
    b = int(digits[4:6], 16) / 255

    high = max(r, g, b)
    low = min(r, g, b)
    h = 0.0
    s = 0.0
    l = (high + low) / 2

    if high != low:
        d = high - low
        s = d / (2 - high - low) if l > 0.5 else d / (high + low)
        if high == r:
            h = ((g - b) / d + (6 if g < b else 0)) / 6
        elif high == g:
            h = ((b - r) / d + 2) / 6
        else:
            h = ((r - g) / d + 4) / 6

    hue = _round_half_up(h * 360) % 360
    saturation = _round_half_up(s * 100)
    lightness = _round_half_up(l * 100)

    return f"{hue} {saturation}% {lightness}%"


def contrast_foreground(hex_color: str) -> str:
    """
    Foreground used when a theme stores no explicit pair colour.

    Only an exact ``#ffffff`` background gets a black foreground; every other
    colour, however light, gets white.
    """
    return BLACK if hex_color == WHITE else WHITE
