"""Terminal colour styling with profile detection and gradients."""

from __future__ import annotations

import enum
import math
import os
import re
import sys
from typing import Callable, Optional

from ticker.models import ConfigColorScheme, Styles

_MAX_PERCENT_CHANGE_COLOR_GRADIENT = 10.0
_COLOR_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}){1,2}$")

_ANSI_PALETTE = [
    (0, 0, 0), (128, 0, 0), (0, 128, 0), (128, 128, 0),
    (0, 0, 128), (128, 0, 128), (0, 128, 128), (192, 192, 192),
    (128, 128, 128), (255, 0, 0), (0, 255, 0), (255, 255, 0),
    (0, 0, 255), (255, 0, 255), (0, 255, 255), (255, 255, 255),
]
_CUBE_VALUES = [0x00, 0x5F, 0x87, 0xAF, 0xD7, 0xFF]


class ColorProfile(enum.Enum):
    """Colour capability of the terminal."""

    ASCII = "ascii"
    ANSI = "ansi"
    ANSI256 = "ansi256"
    TRUE_COLOR = "true_color"


def detect_color_profile() -> ColorProfile:
    """Determine the colour profile from the environment and standard output."""
    if os.environ.get("COLORTERM", "").lower() in ("truecolor", "24bit"):
        return ColorProfile.TRUE_COLOR
    isatty = getattr(sys.stdout, "isatty", None)
    if isatty is None or not isatty():
        return ColorProfile.ASCII
    term = os.environ.get("TERM", "")
    if "256color" in term:
        return ColorProfile.ANSI256
    if term in ("", "dumb"):
        return ColorProfile.ASCII
    return ColorProfile.ANSI


def _parse_hex(value: str) -> tuple[float, float, float]:
    digits = value[1:]
    if len(digits) == 3:
        factor = 1.0 / 15.0
        parts = [int(d, 16) for d in digits]
    else:
        factor = 1.0 / 255.0
        parts = [int(digits[i:i + 2], 16) for i in (0, 2, 4)]
    r, g, b = (p * factor for p in parts)
    return r, g, b


def _to_byte(channel: float) -> int:
    return max(0, min(255, int(channel * 255.0)))


def _cube_index(v: int) -> int:
    if v < 48:
        return 0
    if v < 115:
        return 1
    return (v - 35) // 40


def _rgb_to_ansi256(rgb: tuple[int, int, int]) -> int:
    r, g, b = rgb
    cr, cg, cb = _cube_index(r), _cube_index(g), _cube_index(b)
    cube = (_CUBE_VALUES[cr], _CUBE_VALUES[cg], _CUBE_VALUES[cb])
    cube_index = 16 + 36 * cr + 6 * cg + cb
    average = (r + g + b) // 3
    gray_index = 23 if average > 238 else max(0, (average - 3) // 10)
    gray_value = 8 + 10 * gray_index
    gray = (gray_value,) * 3

    def distance(other):
        return sum((a - o) ** 2 for a, o in zip(rgb, other))

    if distance(cube) <= distance(gray):
        return cube_index
    return 232 + gray_index


def _ansi256_rgb(index: int) -> tuple[int, int, int]:
    if index < 16:
        return _ANSI_PALETTE[index]
    if index < 232:
        n = index - 16
        return (_CUBE_VALUES[n // 36], _CUBE_VALUES[(n // 6) % 6], _CUBE_VALUES[n % 6])
    level = 8 + 10 * (index - 232)
    return (level, level, level)


def _ansi256_to_ansi(index: int) -> int:
    if index < 16:
        return index
    rgb = _ansi256_rgb(index)
    return min(
        range(16),
        key=lambda i: sum((a - b) ** 2 for a, b in zip(rgb, _ANSI_PALETTE[i])),
    )


def _ansi_sequence(index: int, background: bool) -> str:
    base = 40 if background else 30
    if index < 8:
        return str(base + index)
    return str(base + 60 + index - 8)


def _color_sequence(profile: ColorProfile, color: str, background: bool) -> Optional[str]:
    """SGR parameters for a colour, '' when the profile has no colour, None for no colour given."""
    if color == "":
        return None
    if profile is ColorProfile.ASCII:
        return ""
    prefix = "48" if background else "38"
    if color.startswith("#"):
        rgb = tuple(_to_byte(c) for c in _parse_hex(color))
        if profile is ColorProfile.TRUE_COLOR:
            return f"{prefix};2;{rgb[0]};{rgb[1]};{rgb[2]}"
        index = _rgb_to_ansi256(rgb)
    else:
        index = int(color)
        if index < 16:
            return _ansi_sequence(index, background)
    if profile is ColorProfile.ANSI:
        return _ansi_sequence(_ansi256_to_ansi(index), background)
    return f"{prefix};5;{index}"


def _styled(parts: list[str], text: str) -> str:
    sequence = ";".join(parts)
    if sequence == "":
        return text
    return f"\x1b[{sequence}m{text}\x1b[0m"


def new_style(fg: str, bg: str, bold: bool) -> Callable[[str], str]:
    """Build a function that wraps text in the given colours and weight."""
    profile = detect_color_profile()
    parts = [
        seq
        for seq in (
            _color_sequence(profile, fg, False),
            _color_sequence(profile, bg, True),
        )
        if seq is not None
    ]
    if bold:
        parts.append("1")

    def style(text: str) -> str:
        return _styled(parts, text)

    return style


def _foreground(text: str, color: str) -> str:
    seq = _color_sequence(detect_color_profile(), color, False)
    return _styled([] if seq is None else [seq], text)


def _hsv(r: float, g: float, b: float) -> tuple[float, float, float]:
    low = min(r, g, b)
    v = max(r, g, b)
    chroma = v - low
    s = chroma / v if v != 0.0 else 0.0
    h = 0.0
    if low != v:
        if v == r:
            h = math.fmod((g - b) / chroma, 6.0)
        if v == g:
            h = (b - r) / chroma + 2.0
        if v == b:
            h = (r - g) / chroma + 4.0
        h *= 60.0
        if h < 0.0:
            h += 360.0
    return h, s, v


def _from_hsv(h: float, s: float, v: float) -> tuple[float, float, float]:
    hp = h / 60.0
    chroma = v * s
    x = chroma * (1.0 - abs(math.fmod(hp, 2.0) - 1.0))
    m = v - chroma
    r = g = b = 0.0
    if 0.0 <= hp < 1.0:
        r, g = chroma, x
    elif 1.0 <= hp < 2.0:
        r, g = x, chroma
    elif 2.0 <= hp < 3.0:
        g, b = chroma, x
    elif 3.0 <= hp < 4.0:
        g, b = x, chroma
    elif 4.0 <= hp < 5.0:
        r, b = x, chroma
    elif 5.0 <= hp < 6.0:
        r, b = chroma, x
    return m + r, m + g, m + b


def _interp_angle(a0: float, a1: float, t: float) -> float:
    delta = math.fmod(math.fmod(a1 - a0, 360.0) + 540.0, 360.0) - 180.0
    return math.fmod(a0 + t * delta + 360.0, 360.0)


def _blend_hsv_hex(c1, c2, t: float) -> str:
    h1, s1, v1 = _hsv(*c1)
    h2, s2, v2 = _hsv(*c2)
    if s1 == 0 and s2 != 0:
        h1 = h2
    elif s2 == 0 and s1 != 0:
        h2 = h1
    rgb = _from_hsv(_interp_angle(h1, h2, t), s1 + t * (s2 - s1), v1 + t * (v2 - v1))
    return "#" + "".join(f"{max(0, min(255, int(c * 255.0 + 0.5))):02x}" for c in rgb)


def _normalized_percent(percent: float, max_percent: float) -> float:
    if abs(percent) >= max_percent:
        return 1.0
    return abs(percent / max_percent)


def _gradient(start_hex: str, end_hex: str) -> Callable[[float, str], str]:
    start = _parse_hex(start_hex)
    end = _parse_hex(end_hex)

    def style(percent: float, text: str) -> str:
        t = _normalized_percent(percent, _MAX_PERCENT_CHANGE_COLOR_GRADIENT)
        return _foreground(text, _blend_hsv_hex(start, end, t))

    return style


_style_price_positive = _gradient("#C6FF40", "#779929")
_style_price_negative = _gradient("#FF7940", "#994926")


def style_price(percent: float, text: str) -> str:
    """Colour text green or red depending on the size and sign of a change."""
    if percent == 0.0:
        return _foreground(text, "241")
    true_color = detect_color_profile() is ColorProfile.TRUE_COLOR
    if true_color and percent > 0.0:
        return _style_price_positive(percent, text)
    if true_color and percent < 0.0:
        return _style_price_negative(percent, text)
    if percent > 10.0:
        return _foreground(text, "70")
    if percent > 5:
        return _foreground(text, "76")
    if percent > 0.0:
        return _foreground(text, "82")
    if percent < -10.0:
        return _foreground(text, "124")
    if percent < -5.0:
        return _foreground(text, "160")
    return _foreground(text, "196")


def _color_or_default(color: str, default: str) -> str:
    return color if _COLOR_RE.search(color) else default


def get_color_scheme(color_scheme: ConfigColorScheme) -> Styles:
    """Styles from user colours, falling back to defaults for invalid or unset ones."""
    return Styles(
        text=new_style(_color_or_default(color_scheme.text, "#d0d0d0"), "", False),
        text_light=new_style(_color_or_default(color_scheme.text_light, "#8a8a8a"), "", False),
        text_bold=new_style(_color_or_default(color_scheme.text, "#d0d0d0"), "", True),
        text_label=new_style(_color_or_default(color_scheme.text_label, "#626262"), "", False),
        text_line=new_style(_color_or_default(color_scheme.text_line, "#3a3a3a"), "", False),
        text_price=style_price,
        tag=new_style(
            _color_or_default(color_scheme.text_tag, "#8a8a8a"),
            _color_or_default(color_scheme.background_tag, "#303030"),
            False,
        ),
    )