"""Tiered build: validate, resolve geometry, then try renderer strategies in order."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional

from .errors import AggregateFailure, BoundsError, GeometryError, RenderError, SlideBuildError, StructuralError
from .geometry import resolve_geometry
from .strategies import RendererStrategy, default_strategies
from .surface import RenderArtifact
from .validation import ValidationReport, validate_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StageAttempt:
    stage: str
    success: bool
    duration_ms: float
    error: Optional[str] = None


@dataclass
class BuildResult:
    """Outcome of one build. On success `artifact` is set; otherwise `errors` explains why."""

    success: bool
    stage_name: Optional[str] = None
    artifact: Optional[RenderArtifact] = None
    errors: List[SlideBuildError] = field(default_factory=list)
    attempts: List[StageAttempt] = field(default_factory=list)
    report: Optional[ValidationReport] = None
    total_duration_ms: float = 0.0

    def raise_for_failure(self) -> None:
        if not self.success:
            raise self.errors[0] if self.errors else SlideBuildError("Build failed")


TelemetrySink = Callable[[StageAttempt], Any]


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


class TieredBuildOrchestrator:
    """Runs an ordered chain of renderer strategies until one produces an artifact.

    The last strategy must be total, so a structurally valid specification
    always yields an artifact.
    """

    def __init__(
        self,
        strategies: Optional[Iterable[RendererStrategy]] = None,
        *,
        telemetry: Optional[TelemetrySink] = None,
    ):
        chain = list(strategies) if strategies is not None else default_strategies()
        if not chain:
            raise ValueError("At least one renderer strategy is required")
        if not getattr(chain[-1], "total", False):
            raise ValueError(
                f"The last renderer strategy must be total; '{getattr(chain[-1], 'name', chain[-1])}' is not"
            )
        self.strategies = chain
        self.telemetry = telemetry

    @property
    def stage_names(self) -> List[str]:
        return [s.name for s in self.strategies]

    def _record(self, attempt: StageAttempt, exc: Optional[BaseException] = None) -> None:
        extra = {
            "stage": attempt.stage,
            "success": attempt.success,
            "duration_ms": attempt.duration_ms,
            "error_code": type(exc).__name__ if exc is not None else None,
        }
        if attempt.success:
            logger.info("stage %s succeeded in %.1fms", attempt.stage, attempt.duration_ms, extra=extra)
        else:
            logger.warning("stage %s failed: %s", attempt.stage, attempt.error, extra=extra)
        if self.telemetry is not None:
            self.telemetry(attempt)

    def build(self, spec: Any) -> BuildResult:
        started = time.perf_counter()

        report = validate_spec(spec)
        if not report.valid:
            error = StructuralError(report.errors)
            logger.warning("specification rejected (%d issue(s))", len(report.errors), extra={"error_code": "StructuralError"})
            return BuildResult(success=False, errors=[error], report=report, total_duration_ms=_elapsed_ms(started))
        for warning in report.warnings:
            logger.info("advisory: %s", warning)

        parsed = report.spec
        try:
            geometry = resolve_geometry(parsed)
        except (GeometryError, BoundsError) as exc:
            logger.warning("geometry rejected: %s", exc, extra={"error_code": type(exc).__name__})
            return BuildResult(success=False, errors=[exc], report=report, total_duration_ms=_elapsed_ms(started))

        attempts: List[StageAttempt] = []
        failures: List[RenderError] = []
        for strategy in self.strategies:
            stage_started = time.perf_counter()
            try:
                artifact = strategy.render(parsed, geometry)
            except RenderError as exc:
                attempt = StageAttempt(strategy.name, False, _elapsed_ms(stage_started), str(exc))
                attempts.append(attempt)
                failures.append(exc)
                self._record(attempt, exc)
                continue

            attempt = StageAttempt(strategy.name, True, _elapsed_ms(stage_started))
            attempts.append(attempt)
            self._record(attempt)
            return BuildResult(
                success=True,
                stage_name=strategy.name,
                artifact=artifact,
                attempts=attempts,
                report=report,
                total_duration_ms=_elapsed_ms(started),
            )

        aggregate = AggregateFailure(attempts)
        logger.error("%s", aggregate, extra={"error_code": "AggregateFailure"})
        return BuildResult(
            success=False,
            errors=[aggregate, *failures],
            attempts=attempts,
            report=report,
            total_duration_ms=_elapsed_ms(started),
        )


def build_with_fallback(
    spec: Any,
    strategies: Optional[Iterable[RendererStrategy]] = None,
    telemetry: Optional[TelemetrySink] = None,
) -> BuildResult:
    return TieredBuildOrchestrator(strategies, telemetry=telemetry).build(spec)
