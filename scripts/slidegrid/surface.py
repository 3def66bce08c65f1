"""python-pptx render surface and the artifact handle it produces.

A surface wraps one fresh Presentation holding a single slide. Every
primitive is placed through a method that checks the rectangle against the
region it belongs to, so a strategy cannot draw outside its declared bounds.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from pptx import Presentation
from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE, XL_LEGEND_POSITION
from pptx.enum.shapes import MSO_AUTO_SHAPE_TYPE
from pptx.enum.text import MSO_ANCHOR, MSO_AUTO_SIZE, PP_ALIGN
from pptx.util import Inches, Pt

from .animations import AnimationHint
from .errors import RenderError
from .geometry import Rect
from .typography import Paragraph, TextRun, clean_font_name, fit_paragraphs, sanitize_text

logger = logging.getLogger(__name__)

_ALIGN = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
}

LEGEND_POSITIONS = {
    "right": XL_LEGEND_POSITION.RIGHT,
    "bottom": XL_LEGEND_POSITION.BOTTOM,
}

_BLANK_LAYOUT_INDEX = 6

# Text box insets, matching PowerPoint's own defaults.
_INSET_X = 0.1
_INSET_Y = 0.05

# Single line spacing as a multiple of the font size.
_SINGLE_SPACING = 1.2


@dataclass(frozen=True)
class Placement:
    """Where one primitive for one content element landed."""

    element_id: str
    primitive: str
    rect: Rect
    region: str


@dataclass(frozen=True)
class TextStyle:
    font_face: str
    size_pt: float
    color: str
    bold: bool = False
    align: str = "left"
    line_spacing: Optional[float] = None


@dataclass
class RenderArtifact:
    """Opaque handle to a completed slide, ready for document serialization.

    `animations` is a side-table keyed by element id; it is returned next to
    the slide rather than attached to any shape.
    """

    presentation: Any
    stage_name: str
    placements: Tuple[Placement, ...]
    animations: Mapping[str, AnimationHint] = field(default_factory=dict)

    @property
    def slide(self):
        return self.presentation.slides[0]

    def placements_for(self, element_id: str) -> List[Placement]:
        return [p for p in self.placements if p.element_id == element_id]

    def element_ids(self) -> List[str]:
        seen: List[str] = []
        for p in self.placements:
            if p.element_id not in seen:
                seen.append(p.element_id)
        return seen

    def save(self, output_path: str | Path) -> Path:
        out = Path(output_path).resolve()
        out.parent.mkdir(parents=True, exist_ok=True)
        self.presentation.save(str(out))
        return out

    def to_bytes(self) -> bytes:
        buffer = io.BytesIO()
        self.presentation.save(buffer)
        return buffer.getvalue()


def rgb(value: str) -> RGBColor:
    return RGBColor.from_string(value.strip().lstrip("#").upper())


class SlideSurface:
    """A single-slide python-pptx canvas owned by one render attempt."""

    def __init__(self, stage: str, slide_width: float, slide_height: float):
        self.stage = stage
        self.prs = Presentation()
        self.prs.slide_width = Inches(slide_width)
        self.prs.slide_height = Inches(slide_height)
        layouts = self.prs.slide_layouts
        layout = layouts[_BLANK_LAYOUT_INDEX] if len(layouts) > _BLANK_LAYOUT_INDEX else layouts[-1]
        self.slide = self.prs.slides.add_slide(layout)
        self._placements: List[Placement] = []

    def _check(self, element_id: str, rect: Rect, region: str, bounds: Rect) -> None:
        if rect.width <= 0 or rect.height <= 0:
            raise RenderError(self.stage, f"element '{element_id}' has an empty box in region '{region}'")
        if not bounds.contains(rect):
            raise RenderError(
                self.stage,
                f"element '{element_id}' would render outside region '{region}' "
                f"({rect.x:.3f},{rect.y:.3f},{rect.width:.3f}x{rect.height:.3f}in)",
            )

    def _record(self, element_id: str, primitive: str, rect: Rect, region: str) -> None:
        self._placements.append(Placement(element_id=element_id, primitive=primitive, rect=rect, region=region))

    def set_background(self, color: str) -> None:
        fill = self.slide.background.fill
        fill.solid()
        fill.fore_color.rgb = rgb(color)

    def set_notes(self, text: str) -> None:
        cleaned = sanitize_text(text)
        if cleaned.strip():
            self.slide.notes_slide.notes_text_frame.text = cleaned

    def add_text(
        self,
        element_id: str,
        rect: Rect,
        paragraphs: Sequence[Paragraph],
        style: TextStyle,
        *,
        region: str,
        bounds: Rect,
        anchor: str = "top",
        fit: bool = False,
    ) -> None:
        """Add a text box; with `fit`, text that would spill past the box is cut short."""
        self._check(element_id, rect, region, bounds)
        box = self.slide.shapes.add_textbox(Inches(rect.x), Inches(rect.y), Inches(rect.width), Inches(rect.height))
        frame = box.text_frame
        frame.word_wrap = True
        inset_x = min(_INSET_X, rect.width / 4)
        inset_y = min(_INSET_Y, rect.height / 4)
        frame.margin_left = frame.margin_right = Inches(inset_x)
        frame.margin_top = frame.margin_bottom = Inches(inset_y)
        if fit:
            line_height = _SINGLE_SPACING * (style.line_spacing or 1.0)
            kept = fit_paragraphs(
                paragraphs, rect.width - 2 * inset_x, rect.height - 2 * inset_y, style.size_pt, line_height
            )
            if kept != list(paragraphs):
                logger.debug("element '%s': text cut to fit %.2fin", element_id, rect.height)
            paragraphs = kept
        frame.auto_size = MSO_AUTO_SIZE.TEXT_TO_FIT_SHAPE if fit else MSO_AUTO_SIZE.NONE
        frame.vertical_anchor = MSO_ANCHOR.MIDDLE if anchor == "middle" else MSO_ANCHOR.TOP
        self._fill_text_frame(frame, paragraphs, style)
        self._record(element_id, "text", rect, region)

    def _fill_text_frame(self, frame, paragraphs: Sequence[Paragraph], style: TextStyle) -> None:
        font_name = clean_font_name(style.font_face)
        for i, para in enumerate(paragraphs or [Paragraph(runs=[])]):
            p = frame.paragraphs[0] if i == 0 else frame.add_paragraph()
            p.alignment = _ALIGN.get(style.align, PP_ALIGN.LEFT)
            p.level = max(0, min(int(para.level), 8))
            if style.line_spacing:
                p.line_spacing = style.line_spacing
            runs = list(para.runs)
            if para.bullet:
                runs = [TextRun("• ")] + runs
            for run_spec in runs:
                run = p.add_run()
                run.text = sanitize_text(run_spec.text)
                font = run.font
                if font_name:
                    font.name = font_name
                font.size = Pt(style.size_pt)
                font.bold = style.bold or run_spec.bold
                font.color.rgb = rgb(run_spec.color or style.color)

    def add_box(
        self,
        element_id: str,
        rect: Rect,
        *,
        fill: str,
        region: str,
        bounds: Rect,
        line: Optional[str] = None,
        radius_in: float = 0.0,
    ) -> None:
        self._check(element_id, rect, region, bounds)
        shape_type = MSO_AUTO_SHAPE_TYPE.ROUNDED_RECTANGLE if radius_in > 0 else MSO_AUTO_SHAPE_TYPE.RECTANGLE
        shape = self.slide.shapes.add_shape(
            shape_type, Inches(rect.x), Inches(rect.y), Inches(rect.width), Inches(rect.height)
        )
        if radius_in > 0:
            shortest = max(min(rect.width, rect.height), 1e-6)
            shape.adjustments[0] = max(0.0, min(0.5, radius_in / shortest))
        shape.fill.solid()
        shape.fill.fore_color.rgb = rgb(fill)
        if line:
            shape.line.color.rgb = rgb(line)
            shape.line.width = Pt(1)
        else:
            shape.line.fill.background()
        shape.shadow.inherit = False
        self._record(element_id, "shape", rect, region)

    def add_table(
        self,
        element_id: str,
        rect: Rect,
        headers: Sequence[str],
        rows: Sequence[Sequence[str]],
        *,
        header_style: TextStyle,
        body_style: TextStyle,
        header_fill: str,
        stripe_fill: Optional[str],
        region: str,
        bounds: Rect,
    ) -> None:
        self._check(element_id, rect, region, bounds)
        n_cols = max(1, len(headers), *(len(r) for r in rows)) if rows else max(1, len(headers))
        n_rows = 1 + len(rows)
        frame = self.slide.shapes.add_table(
            n_rows, n_cols, Inches(rect.x), Inches(rect.y), Inches(rect.width), Inches(rect.height)
        )
        table = frame.table
        for r_idx in range(n_rows):
            source = headers if r_idx == 0 else rows[r_idx - 1]
            style = header_style if r_idx == 0 else body_style
            font_name = clean_font_name(style.font_face)
            for c_idx in range(n_cols):
                cell = table.cell(r_idx, c_idx)
                cell.text = sanitize_text(source[c_idx]) if c_idx < len(source) else ""
                for para in cell.text_frame.paragraphs:
                    for run in para.runs:
                        if font_name:
                            run.font.name = font_name
                        run.font.size = Pt(style.size_pt)
                        run.font.bold = style.bold
                        run.font.color.rgb = rgb(style.color)
                if r_idx == 0:
                    cell.fill.solid()
                    cell.fill.fore_color.rgb = rgb(header_fill)
                elif stripe_fill and r_idx % 2 == 0:
                    cell.fill.solid()
                    cell.fill.fore_color.rgb = rgb(stripe_fill)
        self._record(element_id, "table", rect, region)

    def add_chart(
        self,
        element_id: str,
        rect: Rect,
        chart_type: XL_CHART_TYPE,
        labels: Sequence[str],
        series: Sequence[Tuple[str, Sequence[float]]],
        *,
        region: str,
        bounds: Rect,
        title: Optional[str] = None,
        legend: Optional[str] = "right",
        number_format: Optional[str] = None,
        data_labels: bool = False,
        font_face: Optional[str] = None,
        colors: Sequence[str] = (),
    ) -> None:
        self._check(element_id, rect, region, bounds)
        chart_data = CategoryChartData()
        chart_data.categories = [sanitize_text(str(label)) for label in labels]
        for name, values in series:
            chart_data.add_series(sanitize_text(name), list(values), number_format=number_format)
        chart = self.slide.shapes.add_chart(
            chart_type, Inches(rect.x), Inches(rect.y), Inches(rect.width), Inches(rect.height), chart_data
        ).chart

        chart.has_legend = legend in LEGEND_POSITIONS
        if chart.has_legend:
            chart.legend.position = LEGEND_POSITIONS[legend]
            chart.legend.include_in_layout = False
        if title:
            chart.has_title = True
            chart.chart_title.text_frame.text = sanitize_text(title)
        else:
            chart.has_title = False
        font_name = clean_font_name(font_face)
        if font_name:
            chart.font.name = font_name
        if data_labels:
            plot = chart.plots[0]
            plot.has_data_labels = True
            if number_format:
                plot.data_labels.number_format = number_format
                plot.data_labels.number_format_is_linked = False
        if colors and chart_type not in (XL_CHART_TYPE.PIE, XL_CHART_TYPE.DOUGHNUT):
            for idx, plot_series in enumerate(chart.plots[0].series):
                fill = plot_series.format.fill
                fill.solid()
                fill.fore_color.rgb = rgb(colors[idx % len(colors)])
        self._record(element_id, "chart", rect, region)

    def add_picture(self, element_id: str, rect: Rect, image: bytes | Path, *, region: str, bounds: Rect) -> None:
        self._check(element_id, rect, region, bounds)
        source = io.BytesIO(image) if isinstance(image, (bytes, bytearray)) else str(image)
        self.slide.shapes.add_picture(source, Inches(rect.x), Inches(rect.y), Inches(rect.width), Inches(rect.height))
        self._record(element_id, "image", rect, region)

    def finish(self, animations: Optional[Dict[str, AnimationHint]] = None) -> RenderArtifact:
        return RenderArtifact(
            presentation=self.prs,
            stage_name=self.stage,
            placements=tuple(self._placements),
            animations=MappingProxyType(dict(animations or {})),
        )
