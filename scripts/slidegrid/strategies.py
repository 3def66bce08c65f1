"""Renderer strategies: interchangeable ways to turn geometry + content into a slide.

Each strategy renders into its own fresh SlideSurface, so a failed attempt
leaves nothing behind. Strategies are ordered from most faithful to most
robust; the last one in a chain must be total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import zip_longest
from pathlib import Path
from typing import Callable, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from pptx.enum.chart import XL_CHART_TYPE

from .animations import build_animation_table
from .errors import RenderError
from .geometry import ResolvedGeometry, Rect, in_to_pt, pt_to_in, px_to_in
from .images import contain_rect, image_size, render_placeholder
from .model import (
    BulletGroup,
    Callout,
    ChartElement,
    ContentElement,
    ImageElement,
    Palette,
    Specification,
    SubtitleElement,
    TableElement,
    TitleElement,
)
from .surface import RenderArtifact, SlideSurface, TextStyle
from .tokens import (
    CALLOUT_FILLS,
    DEFAULT_FONT,
    DEFAULT_LINE_HEIGHTS,
    DEFAULT_RADIUS_PX,
    DEFAULT_SPACING_BASE_PX,
    MIN_TEXT_CONTRAST,
    contrast_ratio,
    is_hex6,
    most_readable,
    normalize_palette,
    size_or_default,
)
from .typography import (
    Paragraph,
    TextRun,
    clean_font_name,
    estimate_text_height,
    highlight_accent_words,
    plain,
)

logger = logging.getLogger(__name__)

NATIVE_CHARTS: Mapping[str, XL_CHART_TYPE] = {
    "bar": XL_CHART_TYPE.COLUMN_CLUSTERED,
    "line": XL_CHART_TYPE.LINE,
    "pie": XL_CHART_TYPE.PIE,
    "doughnut": XL_CHART_TYPE.DOUGHNUT,
    "area": XL_CHART_TYPE.AREA,
}

# Kinds python-pptx cannot draw from category data, mapped to the closest native chart.
APPROXIMATE_CHARTS: Mapping[str, str] = {
    "scatter": "line",
    "combo": "bar",
    "waterfall": "bar",
    "funnel": "bar",
}

NUMBER_FORMATS: Mapping[str, Optional[str]] = {
    "number": "#,##0.##",
    "percent": "0%",
    "currency": "$#,##0",
    "auto": None,
}

_SINGLE_SERIES_CHARTS = {"pie", "doughnut"}

_TEXT_PAD = 0.1
_CALLOUT_PAD = 0.12
_CHART_MIN_HEIGHT = 1.5
_IMAGE_MIN_HEIGHT = 0.75
_MIN_FONT_PT = 8.0
_MAX_PLACEHOLDER_PX = 1600

_PRECISION_SIZE_STEPS = ("step_0", "step_1", "step_3")


@dataclass(frozen=True)
class RenderStyle:
    """Concrete drawing values derived from a specification's style tokens."""

    font: str
    palette: Palette
    title_pt: float
    subtitle_pt: float
    body_pt: float
    small_pt: float
    line_height: float
    bullet_line_height: float
    gap: float
    radius: float
    breathing_room: float
    background: str
    text: str
    muted: str
    title_align: str
    legend: Optional[str]
    data_labels: bool

    @property
    def chart_colors(self) -> Tuple[str, ...]:
        neutral = self.palette.neutral
        return (self.palette.primary, self.palette.accent, neutral[len(neutral) // 3], neutral[len(neutral) // 2])


@dataclass(frozen=True)
class _Block:
    element: ContentElement
    need: float
    flexible: bool = False


@dataclass(frozen=True)
class _Frame:
    """Where a handler may draw: the block rect plus the region it must stay inside."""

    region: str
    bounds: Rect
    rect: Rect
    scale: float
    alone: bool


def fallback_region(geometry: ResolvedGeometry) -> str:
    """Region that receives unanchored content: body if declared, else the largest."""
    if "body" in geometry.regions:
        return "body"
    return max(geometry.regions, key=lambda name: geometry.regions[name].area)


def assign_elements(
    spec: Specification, geometry: ResolvedGeometry, *, strict: bool, stage: str
) -> List[Tuple[str, List[ContentElement]]]:
    """Group content per region in render order.

    Within a region, elements follow ascending anchor order with ties kept in
    declaration order. Lenient mode ignores broken anchors and appends every
    element left unplaced to the fallback region; strict mode refuses them.
    """
    by_region = spec.layout.anchors_by_region()
    assignment: Dict[str, List[ContentElement]] = {
        name: [] for name in spec.layout.region_names if name in geometry.regions
    }
    placed: set[int] = set()

    for name, anchors in by_region.items():
        if name not in assignment:
            if strict:
                raise RenderError(stage, f"anchors reference undeclared region '{name}'")
            continue
        for anchor in anchors:
            matches = spec.content.find(anchor.ref_id)
            if strict and len(matches) != 1:
                raise RenderError(stage, f"anchor '{anchor.ref_id}' matches {len(matches)} content elements")
            for element in matches:
                if id(element) in placed:
                    if strict:
                        raise RenderError(stage, f"content '{anchor.ref_id}' is anchored more than once")
                    continue
                placed.add(id(element))
                assignment[name].append(element)

    leftovers = [el for el in spec.content.elements if id(el) not in placed]
    if leftovers:
        if strict:
            ids = ", ".join(el.id for el in leftovers)
            raise RenderError(stage, f"content is not anchored to any region: {ids}")
        target = fallback_region(geometry)
        logger.debug("placing %d unanchored element(s) in region '%s'", len(leftovers), target)
        assignment[target].extend(leftovers)

    return [(name, items) for name, items in assignment.items() if items]


def allocate(
    blocks: Sequence[_Block], area: Rect, gap: float, *, strict: bool, stage: str, region: str
) -> List[Tuple[_Block, Rect, float]]:
    """Stack blocks top-down inside `area`.

    Returns (block, rect, scale) triples. Strict mode raises RenderError when
    the minimum heights do not fit; lenient mode shrinks every block by one
    common factor. Height left over goes to flexible blocks (charts, images).
    """
    if not blocks:
        return []
    if len(blocks) == 1:
        block = blocks[0]
        if strict and block.need > area.height + 1e-6:
            raise RenderError(stage, f"content overflows region '{region}' (needs {block.need:.2f}in, has {area.height:.2f}in)")
        return [(block, area, min(1.0, area.height / block.need) if block.need > 0 else 1.0)]

    n = len(blocks)
    if not strict:
        gap = min(gap, 0.25 * area.height / (n - 1))
    available = area.height - gap * (n - 1)
    total = sum(b.need for b in blocks)
    if strict and (available <= 0 or total > available + 1e-6):
        raise RenderError(stage, f"content overflows region '{region}' (needs {total + gap * (n - 1):.2f}in, has {area.height:.2f}in)")

    scale = 1.0 if total <= available else available / total
    heights = [b.need * scale for b in blocks]
    flexible = [i for i, b in enumerate(blocks) if b.flexible]
    leftover = available - sum(heights)
    if flexible and leftover > 0:
        for i in flexible:
            heights[i] += leftover / len(flexible)

    out = []
    y = area.y
    for block, height in zip(blocks, heights):
        height = min(height, area.bottom - y)
        out.append((block, Rect(area.x, y, area.width, height), scale))
        y += height + gap
    return out


class RendererStrategy:
    """Base class: `render(spec, geometry)` returns an artifact or raises RenderError."""

    name = "base"
    total = False

    def render(self, spec: Specification, geometry: ResolvedGeometry) -> RenderArtifact:
        try:
            return self._render(spec, geometry)
        except RenderError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise RenderError(self.name, f"{type(exc).__name__}: {exc}") from exc

    def _render(self, spec: Specification, geometry: ResolvedGeometry) -> RenderArtifact:
        raise NotImplementedError

    def plan(self, spec: Specification, geometry: ResolvedGeometry) -> List[Tuple[str, ContentElement, Rect]]:
        """(region, element, rect) for every box this strategy would draw, in drawing order."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class _FlowStrategy(RendererStrategy):
    """Stacks each region's elements and draws them with per-kind handlers."""

    strict = False

    def __init__(self) -> None:
        self.handlers: Dict[str, Callable[[SlideSurface, ContentElement, _Frame, RenderStyle, Specification], None]] = {
            "title": self._draw_title,
            "subtitle": self._draw_subtitle,
            "bullets": self._draw_bullets,
            "callout": self._draw_callout,
            "table": self._draw_table,
            "chart": self._draw_chart,
            "image": self._draw_image,
        }

    def resolve_style(self, spec: Specification) -> RenderStyle:
        raise NotImplementedError

    def _frames(
        self, spec: Specification, geometry: ResolvedGeometry, style: RenderStyle
    ) -> Iterator[Tuple[ContentElement, _Frame]]:
        for region, elements in assign_elements(spec, geometry, strict=self.strict, stage=self.name):
            bounds = geometry.region(region)
            pad = min(style.breathing_room, 0.1 * bounds.width, 0.1 * bounds.height)
            area = bounds.inset(pad, pad)
            blocks = [self.measure(el, area.width, style) for el in elements]
            for block, rect, scale in allocate(
                blocks, area, style.gap, strict=self.strict, stage=self.name, region=region
            ):
                yield block.element, _Frame(region=region, bounds=bounds, rect=rect, scale=scale, alone=len(blocks) == 1)

    def plan(self, spec: Specification, geometry: ResolvedGeometry) -> List[Tuple[str, ContentElement, Rect]]:
        style = self.resolve_style(spec)
        return [(frame.region, element, frame.rect) for element, frame in self._frames(spec, geometry, style)]

    def _render(self, spec: Specification, geometry: ResolvedGeometry) -> RenderArtifact:
        style = self.resolve_style(spec)
        surface = SlideSurface(self.name, geometry.metrics.slide_width, geometry.metrics.slide_height)
        surface.set_background(style.background)

        order: List[Tuple[str, str]] = []
        for element, frame in self._frames(spec, geometry, style):
            self.handlers[element.kind](surface, element, frame, style, spec)
            order.append((element.id, element.kind))

        surface.set_notes(spec.content.speaker_notes)
        return surface.finish(build_animation_table(order))

    # ------------------------------------------------------------------ #
    # Measurement

    def measure(self, element: ContentElement, width: float, style: RenderStyle) -> _Block:
        inner = max(width - 2 * _TEXT_PAD, 0.1)
        if isinstance(element, TitleElement):
            need = estimate_text_height(element.text, inner, style.title_pt, style.line_height)
            return _Block(element, need + 2 * _TEXT_PAD)
        if isinstance(element, SubtitleElement):
            need = estimate_text_height(element.text, inner, style.subtitle_pt, style.line_height)
            return _Block(element, need + 2 * _TEXT_PAD)
        if isinstance(element, BulletGroup):
            need = sum(
                estimate_text_height("• " + item.text, inner, style.body_pt, style.bullet_line_height)
                for item in element.items
            ) or pt_to_in(style.body_pt) * style.bullet_line_height
            return _Block(element, need + 2 * _TEXT_PAD)
        if isinstance(element, Callout):
            inner = max(inner - 2 * _CALLOUT_PAD, 0.1)
            need = estimate_text_height(element.text, inner, style.body_pt, style.line_height)
            if element.title:
                need += estimate_text_height(element.title, inner, style.body_pt, style.line_height)
            return _Block(element, need + 2 * (_TEXT_PAD + _CALLOUT_PAD))
        if isinstance(element, TableElement):
            row_h = pt_to_in(style.small_pt) * 1.2 + 0.1
            need = row_h * (1 + len(element.rows))
            if element.title:
                need += pt_to_in(style.body_pt) * style.line_height + 2 * _TEXT_PAD
            return _Block(element, need)
        if isinstance(element, ChartElement):
            return _Block(element, _CHART_MIN_HEIGHT, flexible=True)
        return _Block(element, _IMAGE_MIN_HEIGHT, flexible=True)

    def _size(self, base_pt: float, frame: _Frame) -> float:
        if frame.scale >= 1.0:
            return base_pt
        return max(_MIN_FONT_PT, base_pt * frame.scale)

    # ------------------------------------------------------------------ #
    # Handlers

    def _draw_title(self, surface, element: TitleElement, frame: _Frame, style: RenderStyle, spec) -> None:
        surface.add_text(
            element.id,
            frame.rect,
            [Paragraph(runs=[TextRun(element.text)])],
            TextStyle(style.font, self._size(style.title_pt, frame), style.text, bold=True, align=style.title_align),
            region=frame.region,
            bounds=frame.bounds,
            fit=frame.scale < 1.0,
            anchor="middle" if frame.alone else "top",
        )

    def _draw_subtitle(self, surface, element: SubtitleElement, frame: _Frame, style: RenderStyle, spec) -> None:
        runs = highlight_accent_words(element.text, spec.content.accent_words, style.palette.accent)
        surface.add_text(
            element.id,
            frame.rect,
            [Paragraph(runs=runs)],
            TextStyle(style.font, self._size(style.subtitle_pt, frame), style.muted, align=style.title_align),
            region=frame.region,
            bounds=frame.bounds,
            fit=frame.scale < 1.0,
            anchor="middle" if frame.alone else "top",
        )

    def _draw_bullets(self, surface, element: BulletGroup, frame: _Frame, style: RenderStyle, spec) -> None:
        paragraphs = [
            Paragraph(
                runs=highlight_accent_words(item.text, spec.content.accent_words, style.palette.accent),
                level=max(0, min(item.level, 3) - 1),
                bullet=True,
            )
            for item in element.items
        ]
        surface.add_text(
            element.id,
            frame.rect,
            paragraphs,
            TextStyle(style.font, self._size(style.body_pt, frame), style.text, line_spacing=style.bullet_line_height),
            region=frame.region,
            bounds=frame.bounds,
            fit=frame.scale < 1.0,
        )

    def callout_fill(self, element: Callout) -> str:
        return CALLOUT_FILLS.get(element.variant, CALLOUT_FILLS["note"])

    def _draw_callout(self, surface, element: Callout, frame: _Frame, style: RenderStyle, spec) -> None:
        rect = frame.rect
        surface.add_box(
            element.id,
            rect,
            fill=self.callout_fill(element),
            region=frame.region,
            bounds=frame.bounds,
            radius_in=style.radius,
        )
        pad = min(_CALLOUT_PAD, rect.width / 4, rect.height / 4)
        paragraphs = []
        if element.title:
            paragraphs.append(Paragraph(runs=[TextRun(element.title, bold=True)]))
        paragraphs.append(
            Paragraph(runs=highlight_accent_words(element.text, spec.content.accent_words, style.palette.accent))
        )
        surface.add_text(
            element.id,
            rect.inset(pad, pad),
            paragraphs,
            TextStyle(style.font, self._size(style.body_pt, frame), style.text),
            region=frame.region,
            bounds=frame.bounds,
            fit=frame.scale < 1.0,
            anchor="middle",
        )

    def table_cells(self, element: TableElement) -> Tuple[List[str], List[List[str]]]:
        width = len(element.headers) or max((len(r) for r in element.rows), default=1)
        headers = [*element.headers, *[""] * (width - len(element.headers))][:width]
        rows = [[*row, *[""] * (width - len(row))][:width] for row in element.rows]
        return headers, rows

    def _draw_table(self, surface, element: TableElement, frame: _Frame, style: RenderStyle, spec) -> None:
        rect = frame.rect
        if element.title:
            title_h = min(
                (pt_to_in(style.body_pt) * style.line_height + 2 * _TEXT_PAD) * min(frame.scale, 1.0),
                rect.height / 3,
            )
            surface.add_text(
                element.id,
                Rect(rect.x, rect.y, rect.width, title_h),
                [Paragraph(runs=[TextRun(element.title, bold=True)])],
                TextStyle(style.font, self._size(style.body_pt, frame), style.text),
                region=frame.region,
                bounds=frame.bounds,
                fit=frame.scale < 1.0,
            )
            rect = Rect(rect.x, rect.y + title_h, rect.width, rect.height - title_h)

        headers, rows = self.table_cells(element)
        size = self._size(style.small_pt, frame)
        surface.add_table(
            element.id,
            rect,
            headers,
            rows,
            header_style=TextStyle(style.font, size, style.palette.neutral[-1], bold=True),
            body_style=TextStyle(style.font, size, style.text),
            header_fill=style.palette.primary,
            stripe_fill=style.palette.neutral[-2],
            region=frame.region,
            bounds=frame.bounds,
        )

    def chart_data(self, element: ChartElement) -> Tuple[str, List[str], List[Tuple[str, List[float]]]]:
        raise NotImplementedError

    def _draw_chart(self, surface, element: ChartElement, frame: _Frame, style: RenderStyle, spec) -> None:
        kind, labels, series = self.chart_data(element)
        legend = style.legend
        if legend is None:
            legend = "bottom" if kind in _SINGLE_SERIES_CHARTS else ("right" if len(series) > 1 else "none")
        surface.add_chart(
            element.id,
            frame.rect,
            NATIVE_CHARTS[kind],
            labels,
            series,
            region=frame.region,
            bounds=frame.bounds,
            title=element.title,
            legend=legend,
            number_format=NUMBER_FORMATS.get(element.value_format),
            data_labels=style.data_labels,
            font_face=style.font,
            colors=style.chart_colors,
        )

    def image_source(self, element: ImageElement) -> Optional[Path]:
        raise NotImplementedError

    def _draw_image(self, surface, element: ImageElement, frame: _Frame, style: RenderStyle, spec) -> None:
        path = self.image_source(element)
        if path is not None:
            rect = contain_rect(image_size(path), frame.rect)
            surface.add_picture(element.id, rect, path, region=frame.region, bounds=frame.bounds)
            return
        _, _, w_px, h_px = frame.rect.to_px()
        factor = min(1.0, _MAX_PLACEHOLDER_PX / max(w_px, h_px, 1.0))
        png = render_placeholder(
            element.alt,
            element.role,
            (int(w_px * factor), int(h_px * factor)),
            bg=style.palette.neutral[-2],
            accent=style.palette.accent,
            text=style.palette.neutral[2],
        )
        surface.add_picture(element.id, frame.rect, png, region=frame.region, bounds=frame.bounds)


class PrecisionStrategy(_FlowStrategy):
    """Honours declared tokens literally and refuses anything it would have to guess."""

    name = "precision"
    strict = True

    def resolve_style(self, spec: Specification) -> RenderStyle:
        tokens = spec.style_tokens
        palette = tokens.palette
        problems = []
        for key in ("primary", "accent"):
            if not is_hex6(getattr(palette, key)):
                problems.append(f"palette.{key}")
        if len(palette.neutral) < 5 or not all(is_hex6(c) for c in palette.neutral):
            problems.append("palette.neutral")
        sans = (tokens.typography.sans or "").strip()
        if not sans or clean_font_name(sans) != sans:
            problems.append("typography.fonts.sans")
        for step in _PRECISION_SIZE_STEPS:
            value = tokens.typography.size(step)
            if value is None or value <= 0:
                problems.append(f"typography.sizes.{step}")
        if tokens.spacing.base is None or tokens.spacing.base < 0:
            problems.append("spacing.base")
        if problems:
            raise RenderError(self.name, "missing or invalid style tokens: " + ", ".join(problems))

        background, text = palette.neutral[-1], palette.neutral[0]
        minimum = max(tokens.contrast.min_text_contrast or 0.0, MIN_TEXT_CONTRAST)
        ratio = contrast_ratio(text, background)
        if ratio < minimum:
            raise RenderError(self.name, f"text contrast {ratio:.2f}:1 is below the declared minimum {minimum:g}:1")

        sizes = tokens.typography.sizes
        line_heights = tokens.typography.line_heights
        compact = line_heights.get("compact", DEFAULT_LINE_HEIGHTS["compact"])
        standard = line_heights.get("standard", DEFAULT_LINE_HEIGHTS["standard"])
        comp = spec.components
        return RenderStyle(
            font=sans,
            palette=palette,
            title_pt=in_to_pt(px_to_in(sizes["step_3"])),
            subtitle_pt=in_to_pt(px_to_in(sizes["step_1"])),
            body_pt=in_to_pt(px_to_in(sizes["step_0"])),
            small_pt=in_to_pt(px_to_in(sizes.get("step_-1", sizes["step_0"]))),
            line_height=compact,
            bullet_line_height=standard if comp.bullet_variant == "spacious" else compact,
            gap=px_to_in(tokens.spacing.base) * 1.5,
            radius=px_to_in(tokens.radii.md or 0.0),
            breathing_room=spec.design.breathing_room or 0.0,
            background=background,
            text=text,
            muted=palette.neutral[2],
            title_align=comp.title_align if comp.title_align in ("left", "center", "right") else "left",
            legend=comp.chart_legend if comp.chart_legend in ("none", "right", "bottom") else None,
            data_labels=bool(comp.chart_data_labels),
        )

    def callout_fill(self, element: Callout) -> str:
        if element.variant not in CALLOUT_FILLS:
            raise RenderError(self.name, f"callout '{element.id}' has unknown variant '{element.variant}'")
        return CALLOUT_FILLS[element.variant]

    def table_cells(self, element: TableElement) -> Tuple[List[str], List[List[str]]]:
        if not element.headers:
            raise RenderError(self.name, f"table '{element.id}' has no headers")
        for idx, row in enumerate(element.rows):
            if len(row) != len(element.headers):
                raise RenderError(self.name, f"table '{element.id}' row {idx} does not match the header count")
        return list(element.headers), [list(r) for r in element.rows]

    def chart_data(self, element: ChartElement) -> Tuple[str, List[str], List[Tuple[str, List[float]]]]:
        if element.chart_kind not in NATIVE_CHARTS:
            raise RenderError(self.name, f"chart kind '{element.chart_kind}' is not supported")
        if not element.labels or not element.series:
            raise RenderError(self.name, f"chart '{element.id}' needs labels and at least one series")
        for s in element.series:
            if len(s.values) != len(element.labels):
                raise RenderError(self.name, f"chart series '{s.name}' length does not match labels")
        if element.chart_kind in _SINGLE_SERIES_CHARTS and len(element.series) > 1:
            raise RenderError(self.name, f"{element.chart_kind} chart '{element.id}' can show only one series")
        return element.chart_kind, list(element.labels), [(s.name, list(s.values)) for s in element.series]

    def image_source(self, element: ImageElement) -> Optional[Path]:
        if not element.path:
            return None
        path = Path(element.path).expanduser()
        try:
            image_size(path)
        except OSError as exc:
            raise RenderError(self.name, f"image '{element.id}' cannot be read: {path}") from exc
        return path


class HeuristicStrategy(_FlowStrategy):
    """Fills gaps with professional defaults and shrinks content to fit."""

    name = "heuristic"

    def resolve_style(self, spec: Specification) -> RenderStyle:
        tokens = spec.style_tokens
        palette = normalize_palette(tokens.palette)
        sizes = tokens.typography.sizes
        title_px = size_or_default(sizes, "step_3")
        subtitle_px = size_or_default(sizes, "step_1")
        body_px = size_or_default(sizes, "step_0")
        small_px = size_or_default(sizes, "step_-1")
        # keep the hierarchy readable when the declared steps are inverted
        subtitle_px = min(subtitle_px, title_px)
        body_px = min(body_px, subtitle_px)
        small_px = min(small_px, body_px)

        line_heights = tokens.typography.line_heights
        compact = line_heights.get("compact") or DEFAULT_LINE_HEIGHTS["compact"]
        standard = line_heights.get("standard") or DEFAULT_LINE_HEIGHTS["standard"]
        background = palette.neutral[-1]
        comp = spec.components
        base = tokens.spacing.base if tokens.spacing.base and tokens.spacing.base > 0 else DEFAULT_SPACING_BASE_PX
        radius = tokens.radii.md if tokens.radii.md is not None and tokens.radii.md >= 0 else DEFAULT_RADIUS_PX
        return RenderStyle(
            font=clean_font_name(tokens.typography.sans) or DEFAULT_FONT,
            palette=palette,
            title_pt=in_to_pt(px_to_in(title_px)),
            subtitle_pt=in_to_pt(px_to_in(subtitle_px)),
            body_pt=in_to_pt(px_to_in(body_px)),
            small_pt=in_to_pt(px_to_in(small_px)),
            line_height=compact,
            bullet_line_height=standard if comp.bullet_variant == "spacious" else compact,
            gap=px_to_in(base) * 1.5,
            radius=px_to_in(radius),
            breathing_room=max(0.0, spec.design.breathing_room or 0.0),
            background=background,
            text=most_readable(background, [palette.neutral[0], "#000000", "#FFFFFF"]),
            muted=most_readable(background, [palette.neutral[2], palette.neutral[0]], minimum=4.5),
            title_align=comp.title_align if comp.title_align in ("left", "center", "right") else "left",
            legend=comp.chart_legend if comp.chart_legend in ("none", "right", "bottom") else None,
            data_labels=bool(comp.chart_data_labels),
        )

    def chart_data(self, element: ChartElement) -> Tuple[str, List[str], List[Tuple[str, List[float]]]]:
        kind = element.chart_kind
        if kind not in NATIVE_CHARTS:
            kind = APPROXIMATE_CHARTS.get(kind, "bar")
            logger.debug("chart '%s': drawing kind '%s' as '%s'", element.id, element.chart_kind, kind)

        labels = list(element.labels)
        if not labels:
            longest = max((len(s.values) for s in element.series), default=0)
            labels = [f"Item {i + 1}" for i in range(max(1, longest))]

        series = [(s.name or f"Series {i + 1}", list(s.values)) for i, s in enumerate(element.series)]
        if not series:
            series = [("Series", [0.0] * len(labels))]
        if kind in _SINGLE_SERIES_CHARTS:
            series = series[:1]
        series = [(name, (values + [0.0] * len(labels))[: len(labels)]) for name, values in series]
        return kind, labels, series

    def image_source(self, element: ImageElement) -> Optional[Path]:
        if not element.path:
            return None
        path = Path(element.path).expanduser()
        try:
            image_size(path)
        except OSError:
            logger.debug("image '%s' unreadable at %s; using a placeholder", element.id, path)
            return None
        return path


class MinimalStrategy(RendererStrategy):
    """Plain text boxes only; succeeds for every structurally valid specification.

    Each region is split evenly among its elements and every element is
    reduced to text, so there is nothing left that could refuse to render.
    Text that would spill past its slice is cut short with an ellipsis.
    """

    name = "minimal"
    total = True

    _MIN_PT = 6.0
    _MAX_PT = 18.0
    _MAX_TITLE_PT = 32.0

    def plan(self, spec: Specification, geometry: ResolvedGeometry) -> List[Tuple[str, ContentElement, Rect]]:
        out = []
        for region, elements in assign_elements(spec, geometry, strict=False, stage=self.name):
            bounds = geometry.region(region)
            slice_h = bounds.height / len(elements)
            for idx, element in enumerate(elements):
                out.append((region, element, Rect(bounds.x, bounds.y + idx * slice_h, bounds.width, slice_h)))
        return out

    def _render(self, spec: Specification, geometry: ResolvedGeometry) -> RenderArtifact:
        palette = normalize_palette(spec.style_tokens.palette)
        declared = (spec.style_tokens.typography.sans or "").strip()
        font = declared if declared and clean_font_name(declared) == declared else DEFAULT_FONT
        surface = SlideSurface(self.name, geometry.metrics.slide_width, geometry.metrics.slide_height)

        for region, element, rect in self.plan(spec, geometry):
            text = element_text(element)
            lines = max(1, text.count("\n") + 1)
            cap = self._MAX_TITLE_PT if element.kind == "title" else self._MAX_PT
            size = max(self._MIN_PT, min(cap, in_to_pt(rect.height) / (lines * 1.3)))
            surface.add_text(
                element.id,
                rect,
                plain(text),
                TextStyle(font, size, palette.neutral[0], bold=element.kind == "title"),
                region=region,
                bounds=geometry.region(region),
                fit=True,
            )

        surface.set_notes(spec.content.speaker_notes)
        return surface.finish()


def _number(value: float) -> str:
    return f"{value:g}"


def element_text(element: ContentElement) -> str:
    """Reduce any content element to plain text."""
    if isinstance(element, (TitleElement, SubtitleElement)):
        return element.text
    if isinstance(element, BulletGroup):
        return "\n".join("  " * (max(1, item.level) - 1) + "• " + item.text for item in element.items)
    if isinstance(element, Callout):
        return f"{element.title}: {element.text}" if element.title else element.text
    if isinstance(element, TableElement):
        lines = [element.title] if element.title else []
        lines.append(" | ".join(element.headers))
        lines.extend(" | ".join(row) for row in element.rows)
        return "\n".join(lines)
    if isinstance(element, ChartElement):
        lines = [element.title] if element.title else []
        for series in element.series:
            pairs = zip_longest(element.labels, series.values, fillvalue=None)
            values = ", ".join(
                f"{label if label is not None else '?'} {_number(v) if v is not None else '-'}" for label, v in pairs
            )
            lines.append(f"{series.name}: {values}" if series.name else values)
        return "\n".join(lines) or element.chart_kind
    if isinstance(element, ImageElement):
        return f"[{element.role}] {element.alt}".strip()
    return str(getattr(element, "text", ""))


STRATEGY_REGISTRY: Mapping[str, type] = {
    PrecisionStrategy.name: PrecisionStrategy,
    HeuristicStrategy.name: HeuristicStrategy,
    MinimalStrategy.name: MinimalStrategy,
}


def default_strategies() -> List[RendererStrategy]:
    return [PrecisionStrategy(), HeuristicStrategy(), MinimalStrategy()]


def strategies_from_names(names: Sequence[str]) -> List[RendererStrategy]:
    """Instantiate strategies by registry name, keeping the given order."""
    out: List[RendererStrategy] = []
    for raw in names:
        name = raw.strip().lower()
        if not name:
            continue
        if name not in STRATEGY_REGISTRY:
            supported = ", ".join(STRATEGY_REGISTRY)
            raise ValueError(f"Unknown strategy '{raw}' (supported: {supported})")
        out.append(STRATEGY_REGISTRY[name]())
    return out
