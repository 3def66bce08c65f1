"""Immutable slide specification model and its JSON boundary parser."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from .errors import StructuralError

ASPECT_RATIOS = ("16:9", "4:3")
REGION_NAMES = ("header", "body", "footer", "aside")
CALLOUT_VARIANTS = ("note", "success", "warning", "danger")
CHART_KINDS = ("bar", "line", "pie", "doughnut", "area", "scatter", "combo", "waterfall", "funnel")
VALUE_FORMATS = ("number", "percent", "currency", "auto")
IMAGE_ROLES = ("hero", "logo", "illustration", "icon", "background")
SIZE_STEPS = ("step_-2", "step_-1", "step_0", "step_1", "step_2", "step_3")


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True)
class Meta:
    aspect_ratio: str
    version: str = "1.0"
    locale: str = "en-US"
    theme: str = ""


@dataclass(frozen=True)
class TitleElement:
    id: str
    text: str
    kind: ClassVar[str] = "title"


@dataclass(frozen=True)
class SubtitleElement:
    id: str
    text: str
    kind: ClassVar[str] = "subtitle"


@dataclass(frozen=True)
class BulletItem:
    text: str
    level: int = 1


@dataclass(frozen=True)
class BulletGroup:
    id: str
    items: Tuple[BulletItem, ...]
    kind: ClassVar[str] = "bullets"


@dataclass(frozen=True)
class Callout:
    id: str
    text: str
    title: Optional[str] = None
    variant: str = "note"
    kind: ClassVar[str] = "callout"


@dataclass(frozen=True)
class TableElement:
    id: str
    headers: Tuple[str, ...]
    rows: Tuple[Tuple[str, ...], ...]
    title: Optional[str] = None
    kind: ClassVar[str] = "table"


@dataclass(frozen=True)
class ChartSeries:
    name: str
    values: Tuple[float, ...]


@dataclass(frozen=True)
class ChartElement:
    id: str
    chart_kind: str
    labels: Tuple[str, ...]
    series: Tuple[ChartSeries, ...]
    title: Optional[str] = None
    value_format: str = "auto"
    kind: ClassVar[str] = "chart"


@dataclass(frozen=True)
class ImageElement:
    id: str
    role: str = "illustration"
    alt: str = ""
    path: Optional[str] = None
    kind: ClassVar[str] = "image"


ContentElement = Union[TitleElement, SubtitleElement, BulletGroup, Callout, TableElement, ChartElement, ImageElement]


@dataclass(frozen=True)
class Content:
    title: TitleElement
    subtitle: Optional[SubtitleElement] = None
    bullets: Tuple[BulletGroup, ...] = ()
    callouts: Tuple[Callout, ...] = ()
    table: Optional[TableElement] = None
    chart: Optional[ChartElement] = None
    images: Tuple[ImageElement, ...] = ()
    speaker_notes: str = ""
    accent_words: Tuple[str, ...] = ()

    @property
    def elements(self) -> Tuple[ContentElement, ...]:
        """Every placeable element, in declaration order."""
        out: List[ContentElement] = [self.title]
        if self.subtitle is not None:
            out.append(self.subtitle)
        out.extend(self.bullets)
        out.extend(self.callouts)
        if self.table is not None:
            out.append(self.table)
        if self.chart is not None:
            out.append(self.chart)
        out.extend(self.images)
        return tuple(out)

    def find(self, element_id: str) -> List[ContentElement]:
        return [el for el in self.elements if el.id == element_id]


@dataclass(frozen=True)
class Margin:
    t: float = 0.0
    r: float = 0.0
    b: float = 0.0
    l: float = 0.0  # noqa: E741


@dataclass(frozen=True)
class Grid:
    rows: int
    cols: int
    gutter: float = 0.0
    margin: Margin = field(default_factory=Margin)


@dataclass(frozen=True)
class Region:
    name: str
    row_start: int
    col_start: int
    row_span: int
    col_span: int


@dataclass(frozen=True)
class Anchor:
    ref_id: str
    region: str
    order: int = 0


@dataclass(frozen=True)
class Layout:
    grid: Grid
    regions: Tuple[Region, ...]
    anchors: Tuple[Anchor, ...] = ()

    @property
    def region_names(self) -> Tuple[str, ...]:
        return tuple(r.name for r in self.regions)

    def anchors_by_region(self) -> Dict[str, List[Anchor]]:
        """Group anchors per region, ascending by order; ties keep declaration order."""
        grouped: Dict[str, List[Anchor]] = {}
        for anchor in self.anchors:
            grouped.setdefault(anchor.region, []).append(anchor)
        return {name: sorted(items, key=lambda a: a.order) for name, items in grouped.items()}

    def anchored_ids(self) -> Tuple[str, ...]:
        return tuple(a.ref_id for a in self.anchors)


@dataclass(frozen=True)
class Palette:
    primary: Optional[str] = None
    accent: Optional[str] = None
    neutral: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Typography:
    sans: Optional[str] = None
    serif: Optional[str] = None
    mono: Optional[str] = None
    sizes: Mapping[str, float] = field(default_factory=_empty_mapping)
    weights: Mapping[str, float] = field(default_factory=_empty_mapping)
    line_heights: Mapping[str, float] = field(default_factory=_empty_mapping)

    def size(self, step: str) -> Optional[float]:
        return self.sizes.get(step)


@dataclass(frozen=True)
class Spacing:
    base: Optional[float] = None
    steps: Tuple[float, ...] = ()


@dataclass(frozen=True)
class Radii:
    sm: Optional[float] = None
    md: Optional[float] = None
    lg: Optional[float] = None


@dataclass(frozen=True)
class Contrast:
    min_text_contrast: Optional[float] = None
    min_ui_contrast: Optional[float] = None


@dataclass(frozen=True)
class StyleTokens:
    palette: Palette = field(default_factory=Palette)
    typography: Typography = field(default_factory=Typography)
    spacing: Spacing = field(default_factory=Spacing)
    radii: Radii = field(default_factory=Radii)
    contrast: Contrast = field(default_factory=Contrast)


@dataclass(frozen=True)
class Design:
    pattern: Optional[str] = None
    whitespace_strategy: Optional[str] = None
    breathing_room: Optional[float] = None


@dataclass(frozen=True)
class Components:
    title_align: Optional[str] = None
    bullet_variant: Optional[str] = None
    chart_legend: Optional[str] = None
    chart_data_labels: Optional[bool] = None


@dataclass(frozen=True)
class Specification:
    meta: Meta
    content: Content
    layout: Layout
    style_tokens: StyleTokens
    design: Design = field(default_factory=Design)
    components: Components = field(default_factory=Components)


# --------------------------------------------------------------------------- #
# Boundary parsing


def _is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _ensure_list_of_str(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def _opt_str(obj: Mapping[str, Any], key: str, prefix: str, issues: list[str]) -> Optional[str]:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        issues.append(f"{prefix}.{key} must be a string when provided")
        return None
    return value


def _opt_number(obj: Mapping[str, Any], key: str, prefix: str, issues: list[str]) -> Optional[float]:
    value = obj.get(key)
    if value is None:
        return None
    if not _is_number(value):
        issues.append(f"{prefix}.{key} must be a finite number when provided")
        return None
    return float(value)


def _opt_mapping(obj: Mapping[str, Any], key: str, prefix: str, issues: list[str]) -> Mapping[str, Any]:
    value = obj.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        issues.append(f"{prefix}.{key} must be an object when provided")
        return {}
    return value


def _number_map(obj: Mapping[str, Any], key: str, prefix: str, issues: list[str]) -> Mapping[str, float]:
    raw = _opt_mapping(obj, key, prefix, issues)
    out: Dict[str, float] = {}
    for name, value in raw.items():
        if not _is_number(value):
            issues.append(f"{prefix}.{key}.{name} must be a finite number")
            continue
        out[str(name)] = float(value)
    return MappingProxyType(out)


def _element_id(obj: Mapping[str, Any], prefix: str, issues: list[str]) -> str:
    value = obj.get("id")
    if not _is_non_empty_str(value):
        issues.append(f"{prefix}.id is required and must be a non-empty string")
        return ""
    return value.strip()


def _text(obj: Mapping[str, Any], key: str, prefix: str, issues: list[str], *, default: Optional[str] = None) -> str:
    value = obj.get(key, default)
    if not isinstance(value, str):
        issues.append(f"{prefix}.{key} is required and must be a string")
        return ""
    return value


def _objects(value: Any, prefix: str, issues: list[str]) -> list[tuple[str, Dict[str, Any]]]:
    if value is None:
        return []
    if not isinstance(value, list):
        issues.append(f"{prefix} must be a list when provided")
        return []
    out = []
    for idx, item in enumerate(value):
        item_prefix = f"{prefix}[{idx}]"
        if not isinstance(item, dict):
            issues.append(f"{item_prefix} must be an object")
            continue
        out.append((item_prefix, item))
    return out


def _parse_meta(raw: Dict[str, Any], issues: list[str]) -> Optional[Meta]:
    aspect = raw.get("aspectRatio")
    if aspect not in ASPECT_RATIOS:
        issues.append(f"meta.aspectRatio must be one of {', '.join(ASPECT_RATIOS)}")
        return None
    return Meta(
        aspect_ratio=aspect,
        version=_opt_str(raw, "version", "meta", issues) or "1.0",
        locale=_opt_str(raw, "locale", "meta", issues) or "en-US",
        theme=_opt_str(raw, "theme", "meta", issues) or "",
    )


def _parse_bullets(value: Any, issues: list[str]) -> Tuple[BulletGroup, ...]:
    groups = []
    for prefix, raw in _objects(value, "content.bullets", issues):
        items = []
        raw_items = raw.get("items")
        if not isinstance(raw_items, list):
            issues.append(f"{prefix}.items must be a list of bullet objects")
            raw_items = []
        for i_idx, item in enumerate(raw_items):
            i_prefix = f"{prefix}.items[{i_idx}]"
            if isinstance(item, str):
                items.append(BulletItem(text=item))
                continue
            if not isinstance(item, dict):
                issues.append(f"{i_prefix} must be an object or a string")
                continue
            level = item.get("level", 1)
            if not _is_int(level):
                issues.append(f"{i_prefix}.level must be an integer")
                level = 1
            items.append(BulletItem(text=_text(item, "text", i_prefix, issues), level=level))
        groups.append(BulletGroup(id=_element_id(raw, prefix, issues), items=tuple(items)))
    return tuple(groups)


def _parse_callouts(value: Any, issues: list[str]) -> Tuple[Callout, ...]:
    return tuple(
        Callout(
            id=_element_id(raw, prefix, issues),
            text=_text(raw, "text", prefix, issues),
            title=_opt_str(raw, "title", prefix, issues),
            variant=_opt_str(raw, "variant", prefix, issues) or "note",
        )
        for prefix, raw in _objects(value, "content.callouts", issues)
    )


def _cell_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if _is_number(value):
        return f"{value:g}" if isinstance(value, float) else str(value)
    return None


def _parse_table(raw: Any, issues: list[str]) -> Optional[TableElement]:
    if raw is None:
        return None
    prefix = "content.table"
    if not isinstance(raw, dict):
        issues.append(f"{prefix} must be an object when provided")
        return None
    headers = raw.get("headers")
    if not _ensure_list_of_str(headers):
        issues.append(f"{prefix}.headers must be a list of strings")
        headers = []
    rows: List[Tuple[str, ...]] = []
    raw_rows = raw.get("rows")
    if not isinstance(raw_rows, list):
        issues.append(f"{prefix}.rows must be a list of rows")
        raw_rows = []
    for r_idx, row in enumerate(raw_rows):
        cells = [_cell_text(c) for c in row] if isinstance(row, list) else None
        if cells is None or any(c is None for c in cells):
            issues.append(f"{prefix}.rows[{r_idx}] must be a list of strings or numbers")
            continue
        rows.append(tuple(cells))  # type: ignore[arg-type]
    return TableElement(
        id=_element_id(raw, prefix, issues),
        headers=tuple(headers),
        rows=tuple(rows),
        title=_opt_str(raw, "title", prefix, issues),
    )


def _parse_chart(raw: Any, issues: list[str]) -> Optional[ChartElement]:
    if raw is None:
        return None
    prefix = "content.dataViz"
    if not isinstance(raw, dict):
        issues.append(f"{prefix} must be an object when provided")
        return None
    kind = raw.get("kind", "bar")
    if not isinstance(kind, str):
        issues.append(f"{prefix}.kind must be a string")
        kind = "bar"
    labels = raw.get("labels", [])
    if not _ensure_list_of_str(labels):
        issues.append(f"{prefix}.labels must be a list of strings")
        labels = []
    series = []
    for s_prefix, item in _objects(raw.get("series", []), f"{prefix}.series", issues):
        values = item.get("values")
        if not isinstance(values, list) or not all(_is_number(v) for v in values):
            issues.append(f"{s_prefix}.values must be a list of finite numbers")
            values = []
        name = _opt_str(item, "name", s_prefix, issues) or ""
        series.append(ChartSeries(name=name, values=tuple(float(v) for v in values)))
    return ChartElement(
        id=_element_id(raw, prefix, issues),
        chart_kind=kind.strip().lower(),
        labels=tuple(labels),
        series=tuple(series),
        title=_opt_str(raw, "title", prefix, issues),
        value_format=_opt_str(raw, "valueFormat", prefix, issues) or "auto",
    )


def _parse_images(value: Any, issues: list[str]) -> Tuple[ImageElement, ...]:
    return tuple(
        ImageElement(
            id=_element_id(raw, prefix, issues),
            role=_opt_str(raw, "role", prefix, issues) or "illustration",
            alt=_opt_str(raw, "alt", prefix, issues) or "",
            path=_opt_str(raw, "path", prefix, issues),
        )
        for prefix, raw in _objects(value, "content.imagePlaceholders", issues)
    )


def _parse_content(raw: Dict[str, Any], issues: list[str]) -> Optional[Content]:
    title_raw = raw.get("title")
    if not isinstance(title_raw, dict):
        issues.append("content.title is required and must be an object with id + text")
        return None
    title = TitleElement(id=_element_id(title_raw, "content.title", issues), text=_text(title_raw, "text", "content.title", issues))

    subtitle = None
    subtitle_raw = raw.get("subtitle")
    if subtitle_raw is not None:
        if isinstance(subtitle_raw, dict):
            subtitle = SubtitleElement(
                id=_element_id(subtitle_raw, "content.subtitle", issues),
                text=_text(subtitle_raw, "text", "content.subtitle", issues),
            )
        else:
            issues.append("content.subtitle must be an object when provided")

    notes_raw = raw.get("speakerNotes")
    notes = ""
    if isinstance(notes_raw, str):
        notes = notes_raw
    elif isinstance(notes_raw, dict):
        notes = _text(notes_raw, "text", "content.speakerNotes", issues)
    elif notes_raw is not None:
        issues.append("content.speakerNotes must be an object or a string when provided")

    accent_words = raw.get("accentWords", [])
    if not _ensure_list_of_str(accent_words):
        issues.append("content.accentWords must be a list of strings when provided")
        accent_words = []

    return Content(
        title=title,
        subtitle=subtitle,
        bullets=_parse_bullets(raw.get("bullets"), issues),
        callouts=_parse_callouts(raw.get("callouts"), issues),
        table=_parse_table(raw.get("table"), issues),
        chart=_parse_chart(raw.get("dataViz"), issues),
        images=_parse_images(raw.get("imagePlaceholders"), issues),
        speaker_notes=notes,
        accent_words=tuple(w for w in accent_words if w.strip()),
    )


def _parse_grid(raw: Any, issues: list[str]) -> Optional[Grid]:
    if not isinstance(raw, dict):
        issues.append("layout.grid is required and must be an object")
        return None
    ok = True
    for key in ("rows", "cols"):
        value = raw.get(key)
        if not _is_int(value) or value < 1:
            issues.append(f"layout.grid.{key} is required and must be an integer >= 1")
            ok = False
    gutter = raw.get("gutter", 0)
    if not _is_number(gutter) or gutter < 0:
        issues.append("layout.grid.gutter must be a number >= 0")
        ok = False
    margin_raw = _opt_mapping(raw, "margin", "layout.grid", issues)
    sides = {}
    for side in ("t", "r", "b", "l"):
        value = margin_raw.get(side, 0)
        if not _is_number(value) or value < 0:
            issues.append(f"layout.grid.margin.{side} must be a number >= 0")
            ok = False
            continue
        sides[side] = float(value)
    if not ok:
        return None
    return Grid(rows=raw["rows"], cols=raw["cols"], gutter=float(gutter), margin=Margin(**sides))


def _parse_regions(value: Any, issues: list[str]) -> Tuple[Region, ...]:
    if not isinstance(value, list) or not value:
        issues.append("layout.regions is required and must be a non-empty list")
        return ()
    regions = []
    seen: set[str] = set()
    for prefix, raw in _objects(value, "layout.regions", issues):
        name = raw.get("name")
        if name not in REGION_NAMES:
            issues.append(f"{prefix}.name must be one of {', '.join(REGION_NAMES)}")
            continue
        if name in seen:
            issues.append(f"{prefix}.name '{name}' is declared more than once")
            continue
        seen.add(name)
        coords = {}
        for key in ("rowStart", "colStart", "rowSpan", "colSpan"):
            v = raw.get(key)
            if not _is_int(v) or v < 1:
                issues.append(f"{prefix}.{key} is required and must be an integer >= 1")
            else:
                coords[key] = v
        if len(coords) == 4:
            regions.append(
                Region(
                    name=name,
                    row_start=coords["rowStart"],
                    col_start=coords["colStart"],
                    row_span=coords["rowSpan"],
                    col_span=coords["colSpan"],
                )
            )
    return tuple(regions)


def _parse_anchors(value: Any, issues: list[str]) -> Tuple[Anchor, ...]:
    anchors = []
    for prefix, raw in _objects(value if value is not None else [], "layout.anchors", issues):
        ref_id = raw.get("refId")
        region = raw.get("region")
        order = raw.get("order", 0)
        if not _is_non_empty_str(ref_id):
            issues.append(f"{prefix}.refId is required and must be a non-empty string")
            continue
        if not isinstance(region, str):
            issues.append(f"{prefix}.region is required and must be a string")
            continue
        if not _is_int(order):
            issues.append(f"{prefix}.order must be an integer")
            continue
        anchors.append(Anchor(ref_id=ref_id.strip(), region=region, order=order))
    return tuple(anchors)


def _parse_layout(raw: Dict[str, Any], issues: list[str]) -> Optional[Layout]:
    grid = _parse_grid(raw.get("grid"), issues)
    regions = _parse_regions(raw.get("regions"), issues)
    anchors_raw = raw.get("anchors")
    if anchors_raw is not None and not isinstance(anchors_raw, list):
        issues.append("layout.anchors must be a list when provided")
        anchors_raw = []
    anchors = _parse_anchors(anchors_raw, issues)
    if grid is None or not regions:
        return None
    return Layout(grid=grid, regions=regions, anchors=anchors)


def _parse_style_tokens(raw: Dict[str, Any], issues: list[str]) -> StyleTokens:
    prefix = "styleTokens"
    palette_raw = _opt_mapping(raw, "palette", prefix, issues)
    neutral = palette_raw.get("neutral", [])
    if not _ensure_list_of_str(neutral):
        issues.append(f"{prefix}.palette.neutral must be a list of strings when provided")
        neutral = []
    palette = Palette(
        primary=_opt_str(palette_raw, "primary", f"{prefix}.palette", issues),
        accent=_opt_str(palette_raw, "accent", f"{prefix}.palette", issues),
        neutral=tuple(neutral),
    )

    typo_raw = _opt_mapping(raw, "typography", prefix, issues)
    typo_prefix = f"{prefix}.typography"
    fonts = _opt_mapping(typo_raw, "fonts", typo_prefix, issues)
    typography = Typography(
        sans=_opt_str(fonts, "sans", f"{typo_prefix}.fonts", issues),
        serif=_opt_str(fonts, "serif", f"{typo_prefix}.fonts", issues),
        mono=_opt_str(fonts, "mono", f"{typo_prefix}.fonts", issues),
        sizes=_number_map(typo_raw, "sizes", typo_prefix, issues),
        weights=_number_map(typo_raw, "weights", typo_prefix, issues),
        line_heights=_number_map(typo_raw, "lineHeights", typo_prefix, issues),
    )

    spacing_raw = _opt_mapping(raw, "spacing", prefix, issues)
    steps = spacing_raw.get("steps", [])
    if not isinstance(steps, list) or not all(_is_number(s) for s in steps):
        issues.append(f"{prefix}.spacing.steps must be a list of numbers when provided")
        steps = []
    spacing = Spacing(base=_opt_number(spacing_raw, "base", f"{prefix}.spacing", issues), steps=tuple(float(s) for s in steps))

    radii_raw = _opt_mapping(raw, "radii", prefix, issues)
    radii = Radii(**{k: _opt_number(radii_raw, k, f"{prefix}.radii", issues) for k in ("sm", "md", "lg")})

    contrast_raw = _opt_mapping(raw, "contrast", prefix, issues)
    contrast = Contrast(
        min_text_contrast=_opt_number(contrast_raw, "minTextContrast", f"{prefix}.contrast", issues),
        min_ui_contrast=_opt_number(contrast_raw, "minUiContrast", f"{prefix}.contrast", issues),
    )
    return StyleTokens(palette=palette, typography=typography, spacing=spacing, radii=radii, contrast=contrast)


def _parse_design(raw: Mapping[str, Any], issues: list[str]) -> Design:
    whitespace = _opt_mapping(raw, "whitespace", "design", issues)
    return Design(
        pattern=_opt_str(raw, "pattern", "design", issues),
        whitespace_strategy=_opt_str(whitespace, "strategy", "design.whitespace", issues),
        breathing_room=_opt_number(whitespace, "breathingRoom", "design.whitespace", issues),
    )


def _parse_components(raw: Mapping[str, Any], issues: list[str]) -> Components:
    title = _opt_mapping(raw, "title", "components", issues)
    bullets = _opt_mapping(raw, "bulletList", "components", issues)
    chart = _opt_mapping(raw, "chart", "components", issues)
    data_labels = chart.get("dataLabels")
    if data_labels is not None and not isinstance(data_labels, bool):
        issues.append("components.chart.dataLabels must be a boolean when provided")
        data_labels = None
    return Components(
        title_align=_opt_str(title, "align", "components.title", issues),
        bullet_variant=_opt_str(bullets, "variant", "components.bulletList", issues),
        chart_legend=_opt_str(chart, "legend", "components.chart", issues),
        chart_data_labels=data_labels,
    )


def parse_spec(data: Any) -> Specification:
    """Convert a JSON mapping into an immutable Specification.

    Raises StructuralError listing every shape/type problem found.
    """
    if isinstance(data, Specification):
        return data
    if not isinstance(data, dict):
        raise StructuralError(["Root JSON value must be an object"])

    issues: list[str] = []
    sections: Dict[str, Dict[str, Any]] = {}
    for key in ("meta", "content", "layout", "styleTokens"):
        value = data.get(key)
        if not isinstance(value, dict):
            issues.append(f"{key} is required and must be an object")
            continue
        sections[key] = value

    meta = _parse_meta(sections["meta"], issues) if "meta" in sections else None
    content = _parse_content(sections["content"], issues) if "content" in sections else None
    layout = _parse_layout(sections["layout"], issues) if "layout" in sections else None
    tokens = _parse_style_tokens(sections["styleTokens"], issues) if "styleTokens" in sections else None
    design = _parse_design(_opt_mapping(data, "design", "root", issues), issues)
    components = _parse_components(_opt_mapping(data, "components", "root", issues), issues)

    if issues or meta is None or content is None or layout is None or tokens is None:
        raise StructuralError(issues)

    return Specification(
        meta=meta,
        content=content,
        layout=layout,
        style_tokens=tokens,
        design=design,
        components=components,
    )


def load_spec_file(spec_path: Path) -> Dict[str, Any]:
    """Load a JSON specification file without interpreting it."""
    try:
        raw = Path(spec_path).read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise StructuralError([f"Specification file not found: {spec_path}"]) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise StructuralError([f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"]) from exc
    if not isinstance(data, dict):
        raise StructuralError(["Root JSON value must be an object"])
    return data
