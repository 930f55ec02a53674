import logging
import math
import re
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_PRIMARY_COLOR = "#e4f4f5"
DEFAULT_THEME_COLOR = "#4caf50"

SUCCESS_BASE = "#4caf50"
ERROR_BASE = "#f44336"
WARNING_BASE = "#ff9800"

HEX_RE = re.compile(r"^#?([a-f\d]{2})([a-f\d]{2})([a-f\d]{2})$", re.IGNORECASE)
PRIMARY_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

# (dark, light) values of the scheme-dependent colours
SCHEME_COLORS = {
    "background": ("#1a1b1e", "#ffffff"),
    "surface": ("#25262b", "#f8f9fa"),
    "surface_variant": ("#2c2e33", "#e9ecef"),
    "text": ("#c1c2c5", "#000000"),
    "text_secondary": ("#909296", "#495057"),
    "text_muted": ("#5c5f66", "#868e96"),
    "border": ("#373a40", "#dee2e6"),
    "border_light": ("#2c2e33", "#e9ecef"),
    "color_light": ("#1a1b1e", "#f9f8f5"),
    "color_medium": ("#25262b", "#e9ecef"),
    "color_dark": ("#373a40", "#dee2e6"),
    "color_dark_hover": ("#424449", "#ced4da"),
    "color_card": ("#25262b", "#ffffff"),
    "color_text_dark": ("#ffffff", "#212529"),
    "color_text_medium": ("#c1c2c5", "#495057"),
    "color_text_light": ("#909296", "#6c757d"),
    "overlay_light": ("#ffffff", "#000000"),
    "overlay_dark": ("#000000", "#ffffff"),
}


def _round(value: float) -> int:
    # half-up, so .5 channels land on the same value in every renderer
    return int(math.floor(value + 0.5))


def _clamp_channel(value: float) -> int:
    return max(0, min(255, _round(value)))


def hex_to_rgb(color: str) -> Optional[tuple[int, int, int]]:
    match = HEX_RE.match(color or "")
    if not match:
        return None
    return tuple(int(part, 16) for part in match.groups())


def rgb_to_hex(r: float, g: float, b: float) -> str:
    return "#" + "".join(f"{_clamp_channel(c):02x}" for c in (r, g, b))


def normalize_hex(color: str) -> Optional[str]:
    """Return `#rrggbb` in lower case, expanding `#rgb`; None if not a colour."""
    if not color:
        return None
    value = color.strip()
    if not value.startswith("#"):
        value = "#" + value
    if re.fullmatch(r"#[A-Fa-f0-9]{3}", value):
        value = "#" + "".join(ch * 2 for ch in value[1:])
    rgb = hex_to_rgb(value)
    return rgb_to_hex(*rgb) if rgb else None


def lighten(color: str, percent: float) -> str:
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    return rgb_to_hex(*(min(255, c + (255 - c) * percent) for c in rgb))


def darken(color: str, percent: float) -> str:
    rgb = hex_to_rgb(color)
    if rgb is None:
        return color
    return rgb_to_hex(*(max(0, c * (1 - percent)) for c in rgb))


def mix_colors(color1: str, color2: str, weight: float = 0.5) -> str:
    """Blend `color2` into `color1`; weight 0 gives color1, weight 1 gives color2.

    The weight is clamped to [0, 1]. If either colour does not parse, color1 is
    returned unchanged.
    """
    rgb1 = hex_to_rgb(color1)
    rgb2 = hex_to_rgb(color2)
    if rgb1 is None or rgb2 is None:
        return color1

    w = max(0.0, min(1.0, weight))
    return rgb_to_hex(*(a * (1 - w) + b * w for a, b in zip(rgb1, rgb2)))


def validate_primary_color(color: Optional[str]) -> str:
    if color and PRIMARY_COLOR_RE.match(color):
        return normalize_hex(color)
    logger.warning(f"Invalid primary color {color!r}, falling back to {DEFAULT_PRIMARY_COLOR}")
    return DEFAULT_PRIMARY_COLOR


def shade(color: str, index: int = 8) -> str:
    """Pick step `index` (0-9) of a scale where 6 is the colour itself.

    Lower steps mix towards white, higher ones towards black.
    """
    index = max(0, min(9, index))
    if index == 6:
        return normalize_hex(color) or color
    if index < 6:
        return mix_colors(color, "#ffffff", (6 - index) / 6 * 0.9)
    return mix_colors(color, "#000000", (index - 6) / 3 * 0.4)


def primary_shades(color: str) -> list[str]:
    """Ten-step scale: four tints, the colour, then five shades."""
    rgb = hex_to_rgb(normalize_hex(color) or DEFAULT_PRIMARY_COLOR)
    shades = []
    for i in range(4):
        factor = 0.9 - i * 0.2
        shades.append(rgb_to_hex(*(255 - (255 - c) * factor for c in rgb)))
    shades.append(rgb_to_hex(*rgb))
    for i in range(1, 6):
        factor = i * 0.15
        shades.append(rgb_to_hex(*(c * (1 - factor) for c in rgb)))
    return shades


def semantic_colors(primary: str) -> dict[str, str]:
    return {
        "success": mix_colors(primary, SUCCESS_BASE, 0.3),
        "error": mix_colors(primary, ERROR_BASE, 0.4),
        "warning": mix_colors(primary, WARNING_BASE, 0.3),
        "info": primary,
    }


def generate_theme_colors(primary: str, is_dark: bool = False) -> dict[str, str]:
    primary = normalize_hex(primary) or DEFAULT_PRIMARY_COLOR
    colors = {
        "primary": primary,
        "primary_light": lighten(primary, 0.2),
        "primary_lighter": lighten(primary, 0.4),
        "primary_lightest": lighten(primary, 0.6),
        "primary_dark": darken(primary, 0.2),
        "primary_darker": darken(primary, 0.4),
        "primary_darkest": darken(primary, 0.6),
        "pure_white": "#ffffff",
        "pure_black": "#000000",
    }
    for name, (dark, light) in SCHEME_COLORS.items():
        colors[name] = dark if is_dark else light
    colors.update(semantic_colors(primary))
    return colors
