"""Pillow helpers for image elements: generated placeholders and contain-fit boxes."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Tuple

from PIL import Image, ImageDraw, ImageFont

from .geometry import Rect
from .tokens import hex_to_rgb

_FONT_CANDIDATES = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
)

_ROLE_GLYPHS = {
    "hero": "HERO",
    "logo": "LOGO",
    "illustration": "ILLUSTRATION",
    "icon": "ICON",
    "background": "BACKGROUND",
}


def try_font(size: int) -> ImageFont.ImageFont:
    for path in _FONT_CANDIDATES:
        try:
            if Path(path).exists():
                return ImageFont.truetype(path, size=size)
        except OSError:
            continue
    return ImageFont.load_default()


def image_size(path: Path) -> Tuple[int, int]:
    """Return (width, height) in pixels; raises OSError when unreadable."""
    with Image.open(path) as im:
        return im.size


def contain_rect(size: Tuple[int, int], box: Rect) -> Rect:
    """Largest rectangle with the image's aspect ratio, centred inside `box`."""
    iw, ih = size
    if iw <= 0 or ih <= 0 or box.width <= 0 or box.height <= 0:
        return box
    ratio = iw / ih
    if ratio >= box.width / box.height:
        w, h = box.width, box.width / ratio
    else:
        w, h = box.height * ratio, box.height
    return Rect(box.x + (box.width - w) / 2, box.y + (box.height - h) / 2, w, h)


def render_placeholder(
    alt: str,
    role: str,
    size_px: Tuple[int, int],
    *,
    bg: str,
    accent: str,
    text: str,
) -> bytes:
    """Draw a neutral placeholder tile for an unresolved image and return PNG bytes."""
    w_px, h_px = max(16, int(size_px[0])), max(16, int(size_px[1]))
    bg_rgb, accent_rgb, text_rgb = hex_to_rgb(bg), hex_to_rgb(accent), hex_to_rgb(text)

    img = Image.new("RGB", (w_px, h_px), bg_rgb)
    draw = ImageDraw.Draw(img)
    inset = max(2, int(min(w_px, h_px) * 0.04))
    draw.rectangle([inset, inset, w_px - inset - 1, h_px - inset - 1], outline=accent_rgb, width=max(1, inset // 2))
    draw.line([(inset, inset), (w_px - inset, h_px - inset)], fill=accent_rgb, width=1)
    draw.line([(inset, h_px - inset), (w_px - inset, inset)], fill=accent_rgb, width=1)

    label = _ROLE_GLYPHS.get(role, role.upper() or "IMAGE")
    caption = f"{label}: {alt}" if alt else label
    font = try_font(max(10, int(min(w_px, h_px) * 0.07)))
    bbox = draw.textbbox((0, 0), caption, font=font)
    tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
    if tw > w_px - 4 * inset:
        caption = label
        bbox = draw.textbbox((0, 0), caption, font=font)
        tw, th = bbox[2] - bbox[0], bbox[3] - bbox[1]
    box = [(w_px - tw) / 2 - inset, (h_px - th) / 2 - inset, (w_px + tw) / 2 + inset, (h_px + th) / 2 + inset]
    draw.rectangle(box, fill=bg_rgb)
    draw.text(((w_px - tw) / 2, (h_px - th) / 2), caption, fill=text_rgb, font=font)

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()
