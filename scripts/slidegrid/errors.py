"""Error taxonomy for slide layout resolution and rendering."""

from __future__ import annotations

from typing import Any, Iterable, Sequence


class SlideBuildError(ValueError):
    """Base class for every failure raised by the slide build pipeline."""


class StructuralError(SlideBuildError):
    """Raised when a specification is missing required sections or references."""

    def __init__(self, issues: Iterable[Any]):
        self.issues = [str(i).strip() for i in issues if str(i).strip()]
        if not self.issues:
            self.issues = ["Invalid specification"]
        super().__init__(self._format())

    def _format(self) -> str:
        lines = ["Specification validation failed:"]
        for issue in self.issues:
            lines.append(f"- {issue}")
        return "\n".join(lines)


class GeometryError(SlideBuildError):
    """Raised when the grid, as configured, leaves no room for a cell."""

    def __init__(self, axis: str, value: float):
        self.axis = axis
        self.value = value
        dimension = "cellWidth" if axis == "width" else "cellHeight"
        super().__init__(f"Grid {dimension} is non-positive ({value:.4f}in); margins and gutters exceed the slide {axis}")


class BoundsError(SlideBuildError):
    """Raised when a region extends past the grid."""

    def __init__(self, region: str, axis: str, extent: int, limit: int):
        self.region = region
        self.axis = axis
        self.extent = extent
        self.limit = limit
        super().__init__(f"Region '{region}' exceeds grid {axis} (ends at {extent}, grid has {limit})")


class RenderError(SlideBuildError):
    """Raised by a renderer strategy that could not complete an artifact."""

    def __init__(self, stage: str, message: str):
        self.stage = stage
        self.message = message
        super().__init__(f"[{stage}] {message}")


class AggregateFailure(SlideBuildError):
    """Raised when every configured strategy failed."""

    def __init__(self, attempts: Sequence[Any]):
        self.attempts = list(attempts)
        stages = ", ".join(getattr(a, "stage", "?") for a in self.attempts) or "none"
        last = self.attempts[-1].error if self.attempts else "no strategies configured"
        super().__init__(f"All renderer strategies failed ({stages}). Last error: {last}")
