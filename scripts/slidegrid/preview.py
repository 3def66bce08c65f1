"""Pillow raster preview of a slide layout.

Uses the same geometry functions and the same strategy plan as the exported
document, so a box drawn here lands on the same pixels the document's
shapes occupy at 96 px per inch.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Tuple

from PIL import Image, ImageDraw

from .geometry import Rect, resolve_geometry
from .images import try_font
from .model import parse_spec
from .strategies import STRATEGY_REGISTRY, HeuristicStrategy, element_text
from .tokens import hex_to_rgb

logger = logging.getLogger(__name__)

_KIND_FILLS = {
    "title": 0,
    "subtitle": 2,
    "bullets": 3,
    "callout": 4,
    "table": 3,
    "chart": 1,
    "image": 5,
}


def _box(rect: Rect, scale: float) -> Tuple[float, float, float, float]:
    x, y, w, h = rect.to_px()
    return x * scale, y * scale, (x + w) * scale, (y + h) * scale


def render_preview(spec: Any, scale: float = 1.0, stage: str = HeuristicStrategy.name) -> Image.Image:
    """Rasterise region outlines and the element boxes `stage` would draw.

    Pass the `stage_name` of a build result to preview that build's layout.
    Raises the same errors as geometry resolution, and RenderError when
    `stage` itself refuses the specification.
    """
    if scale <= 0:
        raise ValueError("scale must be positive")
    if stage not in STRATEGY_REGISTRY:
        raise ValueError(f"unknown stage '{stage}' (available: {', '.join(STRATEGY_REGISTRY)})")
    parsed = parse_spec(spec)
    geometry = resolve_geometry(parsed)
    style = HeuristicStrategy().resolve_style(parsed)
    neutral = style.palette.neutral

    slide_w, slide_h = geometry.slide_rect.to_px()[2:]
    img = Image.new("RGB", (max(1, round(slide_w * scale)), max(1, round(slide_h * scale))), hex_to_rgb(style.background))
    draw = ImageDraw.Draw(img)
    label_font = try_font(max(8, int(11 * scale)))

    for name, rect in geometry.regions.items():
        draw.rectangle(_box(rect, scale), outline=hex_to_rgb(neutral[len(neutral) // 2]), width=1)
        x0, y0, _, _ = _box(rect, scale)
        draw.text((x0 + 3, y0 + 2), name, fill=hex_to_rgb(neutral[len(neutral) // 2]), font=label_font)

    for _, element, rect in STRATEGY_REGISTRY[stage]().plan(parsed, geometry):
        shade = neutral[min(_KIND_FILLS.get(element.kind, 3), len(neutral) - 1)]
        box = _box(rect, scale)
        draw.rectangle(box, outline=hex_to_rgb(style.palette.primary), width=max(1, round(scale)))
        first_line = element_text(element).split("\n", 1)[0][:80]
        draw.text((box[0] + 4, box[1] + 4), f"{element.kind}: {first_line}", fill=hex_to_rgb(shade), font=label_font)

    logger.debug("preview rendered at %sx%s px", img.width, img.height)
    return img


def save_preview(spec: Any, output_path: str | Path, scale: float = 1.0, stage: str = HeuristicStrategy.name) -> Path:
    out = Path(output_path).resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    render_preview(spec, scale=scale, stage=stage).save(out, format="PNG")
    return out
