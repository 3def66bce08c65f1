"""Shared slide geometry: unit conversion, grid resolution and region positioning.

Both the exported document and the live preview import these functions.
Rectangles are authoritative in inches; pixel and point forms are always
derived through the converters below and never recomputed independently.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Dict, Mapping, Tuple

from .errors import BoundsError, GeometryError

if TYPE_CHECKING:
    from .model import Grid, Region, Specification

PX_PER_INCH = 96.0
PT_PER_INCH = 72.0

SLIDE_SIZES: Dict[str, Tuple[float, float]] = {
    "16:9": (10.0, 5.625),
    "4:3": (10.0, 7.5),
}


def px_to_in(px: float) -> float:
    return px / PX_PER_INCH


def in_to_px(inches: float) -> float:
    return inches * PX_PER_INCH


def px_to_pt(px: float) -> float:
    return px * PT_PER_INCH / PX_PER_INCH


def pt_to_px(pt: float) -> float:
    return pt * PX_PER_INCH / PT_PER_INCH


def in_to_pt(inches: float) -> float:
    return inches * PT_PER_INCH


def pt_to_in(pt: float) -> float:
    return pt / PT_PER_INCH


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in inches, origin at the slide's top-left corner."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    def contains(self, other: "Rect", *, tolerance: float = 1e-6) -> bool:
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )

    def overlaps(self, other: "Rect") -> bool:
        return not (
            other.x >= self.right or other.right <= self.x or other.y >= self.bottom or other.bottom <= self.y
        )

    def inset(self, dx: float, dy: float) -> "Rect":
        dx = max(0.0, min(dx, self.width / 2))
        dy = max(0.0, min(dy, self.height / 2))
        return Rect(self.x + dx, self.y + dy, self.width - 2 * dx, self.height - 2 * dy)

    def to_px(self) -> Tuple[float, float, float, float]:
        return in_to_px(self.x), in_to_px(self.y), in_to_px(self.width), in_to_px(self.height)

    def to_pt(self) -> Tuple[float, float, float, float]:
        return in_to_pt(self.x), in_to_pt(self.y), in_to_pt(self.width), in_to_pt(self.height)


@dataclass(frozen=True)
class GridMetrics:
    """A grid resolved against concrete slide dimensions (inches)."""

    rows: int
    cols: int
    slide_width: float
    slide_height: float
    cell_width: float
    cell_height: float
    gutter: float
    margin_top: float
    margin_right: float
    margin_bottom: float
    margin_left: float


@dataclass(frozen=True)
class ResolvedGeometry:
    """Cell size plus one rectangle per declared region. Derived, never persisted."""

    metrics: GridMetrics
    regions: Mapping[str, Rect]

    @property
    def cell_width(self) -> float:
        return self.metrics.cell_width

    @property
    def cell_height(self) -> float:
        return self.metrics.cell_height

    @property
    def slide_rect(self) -> Rect:
        return Rect(0.0, 0.0, self.metrics.slide_width, self.metrics.slide_height)

    def region(self, name: str) -> Rect:
        return self.regions[name]


def slide_size(aspect_ratio: str) -> Tuple[float, float]:
    """Return (width, height) in inches for a supported aspect ratio."""
    try:
        return SLIDE_SIZES[aspect_ratio]
    except KeyError as exc:
        supported = ", ".join(sorted(SLIDE_SIZES))
        raise ValueError(f"Unsupported aspect ratio '{aspect_ratio}' (supported: {supported})") from exc


def resolve_grid(grid: "Grid", aspect_ratio: str) -> GridMetrics:
    """Derive per-cell width and height from a grid config and the slide size.

    Raises GeometryError when either cell dimension comes out non-positive.
    """
    slide_w, slide_h = slide_size(aspect_ratio)
    if grid.rows < 1:
        raise GeometryError("height", 0.0)
    if grid.cols < 1:
        raise GeometryError("width", 0.0)

    gutter = px_to_in(grid.gutter)
    margin_t = px_to_in(grid.margin.t)
    margin_r = px_to_in(grid.margin.r)
    margin_b = px_to_in(grid.margin.b)
    margin_l = px_to_in(grid.margin.l)

    available_w = slide_w - margin_l - margin_r
    available_h = slide_h - margin_t - margin_b
    cell_w = (available_w - (grid.cols - 1) * gutter) / grid.cols
    cell_h = (available_h - (grid.rows - 1) * gutter) / grid.rows

    if cell_w <= 0:
        raise GeometryError("width", cell_w)
    if cell_h <= 0:
        raise GeometryError("height", cell_h)

    return GridMetrics(
        rows=grid.rows,
        cols=grid.cols,
        slide_width=slide_w,
        slide_height=slide_h,
        cell_width=cell_w,
        cell_height=cell_h,
        gutter=gutter,
        margin_top=margin_t,
        margin_right=margin_r,
        margin_bottom=margin_b,
        margin_left=margin_l,
    )


def check_region_bounds(metrics: GridMetrics, region: "Region") -> None:
    row_end = region.row_start + region.row_span - 1
    col_end = region.col_start + region.col_span - 1
    if region.row_start < 1 or region.row_span < 1 or row_end > metrics.rows:
        raise BoundsError(region.name, "rows", row_end, metrics.rows)
    if region.col_start < 1 or region.col_span < 1 or col_end > metrics.cols:
        raise BoundsError(region.name, "cols", col_end, metrics.cols)


def position_region(metrics: GridMetrics, region: "Region") -> Rect:
    """Turn one region's 1-indexed grid coordinates into an absolute rectangle."""
    check_region_bounds(metrics, region)
    step_x = metrics.cell_width + metrics.gutter
    step_y = metrics.cell_height + metrics.gutter
    return Rect(
        x=metrics.margin_left + (region.col_start - 1) * step_x,
        y=metrics.margin_top + (region.row_start - 1) * step_y,
        width=region.col_span * metrics.cell_width + (region.col_span - 1) * metrics.gutter,
        height=region.row_span * metrics.cell_height + (region.row_span - 1) * metrics.gutter,
    )


def resolve_geometry(spec: "Specification") -> ResolvedGeometry:
    """Resolve the grid and every declared region of a specification."""
    metrics = resolve_grid(spec.layout.grid, spec.meta.aspect_ratio)
    regions = {region.name: position_region(metrics, region) for region in spec.layout.regions}
    return ResolvedGeometry(metrics=metrics, regions=MappingProxyType(regions))
