"""Structural and advisory validation of slide specifications."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .errors import StructuralError
from .model import (
    CALLOUT_VARIANTS,
    CHART_KINDS,
    IMAGE_ROLES,
    REGION_NAMES,
    VALUE_FORMATS,
    Specification,
    parse_spec,
)
from .tokens import MIN_TEXT_CONTRAST, MIN_UI_CONTRAST, contrast_ratio, is_hex6
from .typography import clean_font_name

ERROR = "error"
WARNING = "warning"

_TITLE_MAX = 60
_SUBTITLE_MAX = 100
_BULLET_MAX = 80
_MIN_NEUTRAL = 5

_TITLE_ALIGNS = {"left", "center", "right"}
_BULLET_VARIANTS = {"compact", "spacious"}
_CHART_LEGENDS = {"none", "right", "bottom"}


@dataclass(frozen=True)
class ValidationIssue:
    path: str
    message: str
    severity: str = ERROR

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of validating one specification.

    `valid` is False only when a structural (error-severity) issue exists;
    warnings never block rendering.
    """

    valid: bool
    issues: List[ValidationIssue] = field(default_factory=list)
    spec: Optional[Specification] = None

    @property
    def errors(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        return [i for i in self.issues if i.severity == WARNING]

    def raise_for_errors(self) -> None:
        if not self.valid:
            raise StructuralError(self.errors)

    def summary(self) -> str:
        lines = [f"Status: {'valid' if self.valid else 'invalid'}"]
        if self.errors:
            lines.append(f"Errors ({len(self.errors)}):")
            lines.extend(f"  - {issue}" for issue in self.errors)
        if self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            lines.extend(f"  - {issue}" for issue in self.warnings)
        return "\n".join(lines)


def _check_anchors(spec: Specification, issues: list[ValidationIssue]) -> None:
    declared = set(spec.layout.region_names)
    anchored = Counter(spec.layout.anchored_ids())

    for idx, anchor in enumerate(spec.layout.anchors):
        prefix = f"layout.anchors[{idx}]"
        if anchor.region not in declared:
            if anchor.region in REGION_NAMES:
                msg = f"region '{anchor.region}' is not declared in layout.regions"
            else:
                msg = f"region '{anchor.region}' is unknown (allowed: {', '.join(REGION_NAMES)})"
            issues.append(ValidationIssue(f"{prefix}.region", msg))

        matches = spec.content.find(anchor.ref_id)
        if not matches:
            issues.append(ValidationIssue(f"{prefix}.refId", f"refId '{anchor.ref_id}' does not match any content id"))
        elif len(matches) > 1:
            issues.append(
                ValidationIssue(f"{prefix}.refId", f"refId '{anchor.ref_id}' matches {len(matches)} content elements")
            )

    for ref_id, count in anchored.items():
        if count > 1:
            issues.append(ValidationIssue("layout.anchors", f"refId '{ref_id}' is anchored {count} times"))


def _check_content(spec: Specification, issues: list[ValidationIssue]) -> None:
    content = spec.content
    anchored = set(spec.layout.anchored_ids())
    ids = Counter(el.id for el in content.elements)

    for element in content.elements:
        if ids[element.id] > 1 and element.id not in anchored:
            issues.append(ValidationIssue("content", f"content id '{element.id}' is declared more than once", WARNING))
        if element.id not in anchored:
            issues.append(
                ValidationIssue(
                    "content",
                    f"{element.kind} '{element.id}' is not anchored; it will be placed in a fallback region",
                    WARNING,
                )
            )

    if len(content.title.text) > _TITLE_MAX:
        issues.append(ValidationIssue("content.title.text", f"title is longer than {_TITLE_MAX} characters", WARNING))
    if content.subtitle is not None and len(content.subtitle.text) > _SUBTITLE_MAX:
        issues.append(
            ValidationIssue("content.subtitle.text", f"subtitle is longer than {_SUBTITLE_MAX} characters", WARNING)
        )

    for g_idx, group in enumerate(content.bullets):
        for i_idx, item in enumerate(group.items):
            path = f"content.bullets[{g_idx}].items[{i_idx}]"
            if len(item.text) > _BULLET_MAX:
                issues.append(ValidationIssue(path, f"bullet is longer than {_BULLET_MAX} characters", WARNING))
            if item.level not in (1, 2, 3):
                issues.append(ValidationIssue(f"{path}.level", "bullet level should be 1, 2 or 3", WARNING))

    for c_idx, callout in enumerate(content.callouts):
        if callout.variant not in CALLOUT_VARIANTS:
            issues.append(
                ValidationIssue(
                    f"content.callouts[{c_idx}].variant",
                    f"unknown variant '{callout.variant}' (supported: {', '.join(CALLOUT_VARIANTS)})",
                    WARNING,
                )
            )

    chart = content.chart
    if chart is not None:
        if chart.chart_kind not in CHART_KINDS:
            issues.append(ValidationIssue("content.dataViz.kind", f"unknown chart kind '{chart.chart_kind}'", WARNING))
        if chart.value_format not in VALUE_FORMATS:
            issues.append(
                ValidationIssue("content.dataViz.valueFormat", f"unknown value format '{chart.value_format}'", WARNING)
            )
        if not chart.series:
            issues.append(ValidationIssue("content.dataViz.series", "chart has no series", WARNING))
        for s_idx, series in enumerate(chart.series):
            if len(series.values) != len(chart.labels):
                issues.append(
                    ValidationIssue(
                        f"content.dataViz.series[{s_idx}].values",
                        f"series length ({len(series.values)}) differs from labels length ({len(chart.labels)})",
                        WARNING,
                    )
                )

    for i_idx, image in enumerate(content.images):
        if image.role not in IMAGE_ROLES:
            issues.append(
                ValidationIssue(f"content.imagePlaceholders[{i_idx}].role", f"unknown image role '{image.role}'", WARNING)
            )

    if content.table is not None:
        width = len(content.table.headers)
        for r_idx, row in enumerate(content.table.rows):
            if len(row) != width:
                issues.append(
                    ValidationIssue(
                        f"content.table.rows[{r_idx}]",
                        f"row has {len(row)} cells but the table has {width} headers",
                        WARNING,
                    )
                )


def _check_regions(spec: Specification, issues: list[ValidationIssue]) -> None:
    regions = spec.layout.regions
    for i, a in enumerate(regions):
        for b in regions[i + 1 :]:
            rows_overlap = not (a.row_start + a.row_span - 1 < b.row_start or b.row_start + b.row_span - 1 < a.row_start)
            cols_overlap = not (a.col_start + a.col_span - 1 < b.col_start or b.col_start + b.col_span - 1 < a.col_start)
            if rows_overlap and cols_overlap:
                issues.append(
                    ValidationIssue("layout.regions", f"region '{b.name}' overlaps with region '{a.name}'", WARNING)
                )


def _check_palette(spec: Specification, issues: list[ValidationIssue]) -> None:
    palette = spec.style_tokens.palette
    for key in ("primary", "accent"):
        value = getattr(palette, key)
        if value is None:
            issues.append(ValidationIssue(f"styleTokens.palette.{key}", "colour is missing", WARNING))
        elif not is_hex6(value):
            issues.append(ValidationIssue(f"styleTokens.palette.{key}", f"'{value}' is not a #RRGGBB colour", WARNING))

    for idx, value in enumerate(palette.neutral):
        if not is_hex6(value):
            issues.append(
                ValidationIssue(f"styleTokens.palette.neutral[{idx}]", f"'{value}' is not a #RRGGBB colour", WARNING)
            )
    if len(palette.neutral) < _MIN_NEUTRAL:
        issues.append(
            ValidationIssue(
                "styleTokens.palette.neutral",
                f"neutral scale has {len(palette.neutral)} colours; at least {_MIN_NEUTRAL} expected",
                WARNING,
            )
        )


def _check_typography(spec: Specification, issues: list[ValidationIssue]) -> None:
    typography = spec.style_tokens.typography
    for key in ("sans", "serif", "mono"):
        name = getattr(typography, key)
        if name and clean_font_name(name) != name.strip():
            issues.append(
                ValidationIssue(
                    f"styleTokens.typography.fonts.{key}",
                    "font name contains control characters a presentation file cannot store",
                    WARNING,
                )
            )
    sizes = typography.sizes
    title, subtitle, body = sizes.get("step_3"), sizes.get("step_1"), sizes.get("step_0")
    if title is None or subtitle is None or body is None:
        issues.append(
            ValidationIssue(
                "styleTokens.typography.sizes",
                "step_3 (title), step_1 (subtitle) and step_0 (body) sizes should all be declared",
                WARNING,
            )
        )
        return
    if not (title > subtitle > body):
        issues.append(
            ValidationIssue(
                "styleTokens.typography.sizes",
                f"sizes should decrease title > subtitle > body (got {title:g} / {subtitle:g} / {body:g})",
                WARNING,
            )
        )


def _check_contrast(spec: Specification, issues: list[ValidationIssue]) -> None:
    tokens = spec.style_tokens
    min_text = tokens.contrast.min_text_contrast
    min_ui = tokens.contrast.min_ui_contrast
    if min_text is None or min_text < MIN_TEXT_CONTRAST:
        issues.append(
            ValidationIssue("styleTokens.contrast.minTextContrast", f"should be at least {MIN_TEXT_CONTRAST:g}", WARNING)
        )
    if min_ui is None or min_ui < MIN_UI_CONTRAST:
        issues.append(
            ValidationIssue("styleTokens.contrast.minUiContrast", f"should be at least {MIN_UI_CONTRAST:g}", WARNING)
        )

    neutral = tokens.palette.neutral
    if len(neutral) < 2 or not (is_hex6(neutral[0]) and is_hex6(neutral[-1])):
        return
    background = neutral[-1]
    text_ratio = contrast_ratio(neutral[0], background)
    if text_ratio < max(min_text or 0.0, MIN_TEXT_CONTRAST):
        issues.append(
            ValidationIssue(
                "styleTokens.palette.neutral",
                f"text/background contrast is {text_ratio:.2f}:1, below the text minimum",
                WARNING,
            )
        )
    if is_hex6(tokens.palette.primary):
        ui_ratio = contrast_ratio(tokens.palette.primary, background)
        if ui_ratio < max(min_ui or 0.0, MIN_UI_CONTRAST):
            issues.append(
                ValidationIssue(
                    "styleTokens.palette.primary",
                    f"primary/background contrast is {ui_ratio:.2f}:1, below the UI minimum",
                    WARNING,
                )
            )


def _check_components(spec: Specification, issues: list[ValidationIssue]) -> None:
    comp = spec.components
    for path, value, allowed in (
        ("components.title.align", comp.title_align, _TITLE_ALIGNS),
        ("components.bulletList.variant", comp.bullet_variant, _BULLET_VARIANTS),
        ("components.chart.legend", comp.chart_legend, _CHART_LEGENDS),
    ):
        if value is not None and value not in allowed:
            issues.append(ValidationIssue(path, f"unsupported value '{value}' is ignored", WARNING))


def validate_spec(data: Any) -> ValidationReport:
    """Validate a Specification or its raw JSON mapping.

    Structural problems (missing sections, broken anchors) mark the report
    invalid. Advisory problems are returned as warnings only.
    """
    try:
        spec = parse_spec(data)
    except StructuralError as exc:
        return ValidationReport(valid=False, issues=[ValidationIssue("", issue) for issue in exc.issues])

    issues: list[ValidationIssue] = []
    _check_anchors(spec, issues)
    _check_content(spec, issues)
    _check_regions(spec, issues)
    _check_palette(spec, issues)
    _check_typography(spec, issues)
    _check_contrast(spec, issues)
    _check_components(spec, issues)

    valid = not any(issue.severity == ERROR for issue in issues)
    return ValidationReport(valid=valid, issues=issues, spec=spec)
