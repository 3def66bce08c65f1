"""Slide layout resolution and tiered rendering."""

from .api import build_slide, export_pptx, render_preview_file
from .cli import run_cli
from .errors import (
    AggregateFailure,
    BoundsError,
    GeometryError,
    RenderError,
    SlideBuildError,
    StructuralError,
)
from .geometry import Rect, ResolvedGeometry, position_region, resolve_geometry, resolve_grid
from .model import Specification, load_spec_file, parse_spec
from .orchestrator import BuildResult, StageAttempt, TieredBuildOrchestrator, build_with_fallback
from .strategies import HeuristicStrategy, MinimalStrategy, PrecisionStrategy, RendererStrategy, strategies_from_names
from .typography import highlight_accent_words
from .validation import ValidationReport, validate_spec

__all__ = [
    "AggregateFailure",
    "BoundsError",
    "BuildResult",
    "GeometryError",
    "HeuristicStrategy",
    "MinimalStrategy",
    "PrecisionStrategy",
    "Rect",
    "RenderError",
    "RendererStrategy",
    "ResolvedGeometry",
    "SlideBuildError",
    "Specification",
    "StageAttempt",
    "StructuralError",
    "TieredBuildOrchestrator",
    "ValidationReport",
    "build_slide",
    "build_with_fallback",
    "export_pptx",
    "highlight_accent_words",
    "load_spec_file",
    "parse_spec",
    "position_region",
    "render_preview_file",
    "resolve_geometry",
    "resolve_grid",
    "run_cli",
    "strategies_from_names",
    "validate_spec",
]
