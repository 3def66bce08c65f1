from __future__ import annotations

import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from slidegrid.errors import BoundsError, GeometryError  # noqa: E402
from slidegrid.geometry import (  # noqa: E402
    Rect,
    in_to_pt,
    in_to_px,
    position_region,
    pt_to_in,
    pt_to_px,
    px_to_in,
    px_to_pt,
    resolve_grid,
    slide_size,
)
from slidegrid.model import Grid, Margin, Region  # noqa: E402

GRID = Grid(rows=8, cols=12, gutter=8, margin=Margin(t=24, r=24, b=24, l=24))


@pytest.mark.parametrize("px", [0.0, 1.0, 8.0, 24.0, 96.0, 333.33, 1920.0])
def test_unit_conversions_round_trip(px: float) -> None:
    assert in_to_px(px_to_in(px)) == pytest.approx(px, abs=1e-9)
    assert pt_to_px(px_to_pt(px)) == pytest.approx(px, abs=1e-9)


def test_point_and_inch_conversions() -> None:
    assert px_to_in(96) == 1.0
    assert px_to_pt(96) == 72.0
    assert in_to_pt(1.5) == 108.0
    assert pt_to_in(in_to_pt(0.37)) == pytest.approx(0.37, abs=1e-12)


def test_slide_sizes() -> None:
    assert slide_size("16:9") == (10.0, 5.625)
    assert slide_size("4:3") == (10.0, 7.5)
    with pytest.raises(ValueError):
        slide_size("21:9")


def test_resolve_grid_cell_size() -> None:
    metrics = resolve_grid(GRID, "16:9")
    assert metrics.cell_width == pytest.approx(0.715, abs=1e-3)
    assert metrics.cell_height == pytest.approx(0.568, abs=1e-3)
    assert metrics.gutter == pytest.approx(1 / 12)
    assert metrics.margin_left == 0.25


def test_header_region_rectangle() -> None:
    metrics = resolve_grid(GRID, "16:9")
    rect = position_region(metrics, Region("header", row_start=1, col_start=1, row_span=2, col_span=12))
    assert rect.x == pytest.approx(0.25)
    assert rect.y == pytest.approx(0.25)
    assert rect.width == pytest.approx(9.5)
    assert rect.height == pytest.approx(1.219, abs=1e-3)
    assert rect.to_px()[:3] == pytest.approx((24.0, 24.0, 912.0))


def test_region_rectangles_are_deterministic() -> None:
    region = Region("body", row_start=3, col_start=2, row_span=4, col_span=7)
    first = position_region(resolve_grid(GRID, "16:9"), region)
    second = position_region(resolve_grid(GRID, "16:9"), region)
    assert first == second


def test_full_width_region_ends_at_right_margin() -> None:
    metrics = resolve_grid(GRID, "4:3")
    rect = position_region(metrics, Region("body", row_start=1, col_start=1, row_span=8, col_span=12))
    assert rect.right == pytest.approx(10.0 - 0.25)
    assert rect.bottom == pytest.approx(7.5 - 0.25)


def test_region_past_last_column_raises_bounds_error() -> None:
    metrics = resolve_grid(GRID, "16:9")
    with pytest.raises(BoundsError) as exc:
        position_region(metrics, Region("aside", row_start=1, col_start=11, row_span=1, col_span=3))
    assert exc.value.region == "aside"
    assert exc.value.axis == "cols"
    assert "aside" in str(exc.value)


def test_region_past_last_row_raises_bounds_error() -> None:
    metrics = resolve_grid(GRID, "16:9")
    with pytest.raises(BoundsError) as exc:
        position_region(metrics, Region("footer", row_start=8, col_start=1, row_span=2, col_span=12))
    assert exc.value.axis == "rows"


def test_oversized_margins_raise_geometry_error() -> None:
    grid = Grid(rows=2, cols=2, gutter=0, margin=Margin(t=0, r=500, b=0, l=500))
    with pytest.raises(GeometryError) as exc:
        resolve_grid(grid, "16:9")
    assert exc.value.axis == "width"
    assert "cellWidth" in str(exc.value)


def test_oversized_gutter_raises_geometry_error_on_height() -> None:
    grid = Grid(rows=20, cols=1, gutter=40, margin=Margin())
    with pytest.raises(GeometryError) as exc:
        resolve_grid(grid, "16:9")
    assert exc.value.axis == "height"


def test_rect_helpers() -> None:
    outer = Rect(0, 0, 4, 2)
    inner = outer.inset(0.5, 0.5)
    assert inner == Rect(0.5, 0.5, 3, 1)
    assert outer.contains(inner)
    assert not inner.contains(outer)
    assert outer.overlaps(Rect(3.5, 1.5, 2, 2))
    assert not outer.overlaps(Rect(4, 0, 1, 1))
