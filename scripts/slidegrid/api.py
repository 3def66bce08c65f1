"""Public API helpers for programmatic slide builds."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Optional

from .model import load_spec_file
from .orchestrator import BuildResult, TelemetrySink, build_with_fallback
from .preview import save_preview
from .strategies import HeuristicStrategy, RendererStrategy


def build_slide(
    spec: Any,
    *,
    strategies: Optional[Iterable[RendererStrategy]] = None,
    telemetry: Optional[TelemetrySink] = None,
) -> BuildResult:
    """Build one slide from a specification mapping (or parsed Specification)."""
    return build_with_fallback(spec, strategies=strategies, telemetry=telemetry)


def export_pptx(
    spec: Any,
    output_path: Path,
    *,
    strategies: Optional[Iterable[RendererStrategy]] = None,
    telemetry: Optional[TelemetrySink] = None,
) -> Path:
    """Build and save a .pptx; raises the build's first error when nothing was produced."""
    result = build_slide(spec, strategies=strategies, telemetry=telemetry)
    result.raise_for_failure()
    return result.artifact.save(output_path)


def render_preview_file(spec: Any, output_path: Path, *, scale: float = 1.0, stage: Optional[str] = None) -> Path:
    """Save a PNG preview; `stage` picks whose layout to draw (heuristic by default)."""
    return save_preview(spec, output_path, scale=scale, stage=stage or HeuristicStrategy.name)


__all__ = ["build_slide", "export_pptx", "load_spec_file", "render_preview_file"]
