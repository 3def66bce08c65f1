"""Style-token defaults and WCAG colour helpers."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Any, Mapping, Optional, Sequence, Tuple

from .model import Palette

HEX6 = re.compile(r"^#[0-9A-Fa-f]{6}$")

DEFAULT_PRIMARY = "#1E40AF"
DEFAULT_ACCENT = "#F59E0B"
DEFAULT_NEUTRAL_9: Tuple[str, ...] = (
    "#0F172A",  # slate-900
    "#1E293B",
    "#334155",
    "#475569",
    "#64748B",
    "#94A3B8",
    "#CBD5E1",
    "#E2E8F0",
    "#F8FAFC",  # slate-50
)
DEFAULT_FONT = "Aptos"
DEFAULT_SIZES: Mapping[str, float] = MappingProxyType(
    {"step_-2": 12, "step_-1": 14, "step_0": 16, "step_1": 20, "step_2": 24, "step_3": 44}
)
DEFAULT_LINE_HEIGHTS: Mapping[str, float] = MappingProxyType({"compact": 1.2, "standard": 1.5})
DEFAULT_SPACING_BASE_PX = 8.0
DEFAULT_RADIUS_PX = 8.0
MIN_TEXT_CONTRAST = 7.0
MIN_UI_CONTRAST = 4.5

CALLOUT_FILLS = {
    "note": "#F3F4F6",
    "success": "#D1FAE5",
    "warning": "#FEF3C7",
    "danger": "#FEE2E2",
}


def is_hex6(value: Any) -> bool:
    return isinstance(value, str) and bool(HEX6.match(value))


def hex_to_rgb(value: str) -> Tuple[int, int, int]:
    clean = value.strip().lstrip("#")
    if not re.fullmatch(r"[0-9A-Fa-f]{6}", clean):
        raise ValueError(f"Not a #RRGGBB colour: {value!r}")
    return int(clean[0:2], 16), int(clean[2:4], 16), int(clean[4:6], 16)


def relative_luminance(value: str) -> float:
    def lin(c: float) -> float:
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    r, g, b = (c / 255 for c in hex_to_rgb(value))
    return 0.2126 * lin(r) + 0.7152 * lin(g) + 0.0722 * lin(b)


def contrast_ratio(first: str, second: str) -> float:
    """WCAG contrast ratio between two #RRGGBB colours (1.0 .. 21.0)."""
    l1 = relative_luminance(first)
    l2 = relative_luminance(second)
    return (max(l1, l2) + 0.05) / (min(l1, l2) + 0.05)


def normalize_palette(palette: Palette) -> Palette:
    """Replace invalid palette entries with defaults and pad neutral to nine steps."""
    primary = palette.primary if is_hex6(palette.primary) else DEFAULT_PRIMARY
    accent = palette.accent if is_hex6(palette.accent) else DEFAULT_ACCENT

    cleaned = [c for c in palette.neutral if is_hex6(c)]
    if len(cleaned) >= 5:
        cleaned = cleaned[:9]
        # pad toward the light end so backgrounds still resolve
        while len(cleaned) < 9:
            cleaned.append(DEFAULT_NEUTRAL_9[len(cleaned)])
        neutral = tuple(cleaned)
    else:
        neutral = DEFAULT_NEUTRAL_9
    return Palette(primary=primary, accent=accent, neutral=neutral)


def most_readable(background: str, candidates: Sequence[str], *, minimum: float = MIN_TEXT_CONTRAST) -> str:
    """Pick the first candidate meeting `minimum` contrast, else the best available."""
    valid = [c for c in candidates if is_hex6(c)]
    if not valid:
        return DEFAULT_NEUTRAL_9[0]
    for color in valid:
        if contrast_ratio(color, background) >= minimum:
            return color
    return max(valid, key=lambda c: contrast_ratio(c, background))


def size_or_default(sizes: Mapping[str, float], step: str) -> float:
    value: Optional[float] = sizes.get(step)
    if value is None or value <= 0:
        return float(DEFAULT_SIZES[step])
    return float(value)
