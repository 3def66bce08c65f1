from __future__ import annotations

import copy
import json
import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from pptx.enum.chart import XL_CHART_TYPE  # noqa: E402

from slidegrid.errors import RenderError  # noqa: E402
from slidegrid.geometry import resolve_geometry  # noqa: E402
from slidegrid.model import parse_spec  # noqa: E402
from slidegrid.orchestrator import TieredBuildOrchestrator  # noqa: E402
from slidegrid.strategies import (  # noqa: E402
    HeuristicStrategy,
    MinimalStrategy,
    PrecisionStrategy,
    RendererStrategy,
    assign_elements,
    element_text,
    strategies_from_names,
)
from slidegrid.tokens import DEFAULT_FONT  # noqa: E402
from slidegrid.typography import estimate_text_height  # noqa: E402

SAMPLE_PATH = Path(__file__).resolve().parents[1] / "assets" / "sample_spec.json"


def _sample() -> dict:
    return copy.deepcopy(json.loads(SAMPLE_PATH.read_text(encoding="utf-8")))


def _prepare(data: dict):
    spec = parse_spec(data)
    return spec, resolve_geometry(spec)


def _assert_contained(artifact, geometry) -> None:
    assert artifact.placements
    for placement in artifact.placements:
        assert geometry.region(placement.region).contains(placement.rect), placement


def _ids_in_region(artifact, region: str) -> list:
    out = []
    for placement in artifact.placements:
        if placement.region == region and (not out or out[-1] != placement.element_id):
            out.append(placement.element_id)
    return out


def _run_fonts(artifact) -> set:
    return {
        run.font.name
        for shape in artifact.slide.shapes
        if shape.has_text_frame
        for paragraph in shape.text_frame.paragraphs
        for run in paragraph.runs
    }


def _assert_text_fits(artifact) -> None:
    for shape in artifact.slide.shapes:
        frame = shape.text_frame
        sizes = [run.font.size.pt for p in frame.paragraphs for run in p.runs if run.font.size is not None]
        if not frame.text or not sizes:
            continue
        width = shape.width.inches - frame.margin_left.inches - frame.margin_right.inches
        height = shape.height.inches - frame.margin_top.inches - frame.margin_bottom.inches
        assert estimate_text_height(frame.text, width + 1e-4, max(sizes)) <= height + 1e-5, frame.text[:40]


def test_precision_renders_sample_inside_regions() -> None:
    spec, geometry = _prepare(_sample())
    artifact = PrecisionStrategy().render(spec, geometry)
    assert artifact.stage_name == "precision"
    _assert_contained(artifact, geometry)
    assert set(artifact.element_ids()) == {el.id for el in spec.content.elements}
    assert artifact.to_bytes()[:2] == b"PK"


def test_precision_fills_animation_side_table() -> None:
    spec, geometry = _prepare(_sample())
    artifact = PrecisionStrategy().render(spec, geometry)
    assert set(artifact.animations) == set(artifact.element_ids())
    assert artifact.animations["title"].effect == "fade-in"
    assert artifact.animations["title"].delay_ms == 0
    assert artifact.animations["revenue-chart"].effect == "zoom-in"


def test_speaker_notes_land_in_notes_slide() -> None:
    spec, geometry = _prepare(_sample())
    artifact = HeuristicStrategy().render(spec, geometry)
    notes = artifact.slide.notes_slide.notes_text_frame.text
    assert notes == "Open with the renewal numbers, then the SMB risk."


def test_accent_words_are_emphasised_in_bullets() -> None:
    spec, geometry = _prepare(_sample())
    artifact = HeuristicStrategy().render(spec, geometry)
    emphasized = []
    for shape in artifact.slide.shapes:
        if not shape.has_text_frame:
            continue
        for paragraph in shape.text_frame.paragraphs:
            for run in paragraph.runs:
                if run.text.lower() == "revenue" and run.font.bold:
                    emphasized.append(run.text)
    assert emphasized


def test_anchor_order_with_ties_in_declaration_order() -> None:
    data = _sample()
    data["content"]["bullets"] = [
        {"id": "b1", "items": [{"text": "first declared"}]},
        {"id": "b2", "items": [{"text": "second declared"}]},
        {"id": "b3", "items": [{"text": "third declared"}]},
    ]
    data["layout"]["anchors"] = [
        {"refId": "title", "region": "header", "order": 0},
        {"refId": "subtitle", "region": "footer", "order": 0},
        {"refId": "revenue-chart", "region": "aside", "order": 0},
        {"refId": "b1", "region": "body", "order": 2},
        {"refId": "b2", "region": "body", "order": 0},
        {"refId": "risk", "region": "body", "order": 0},
        {"refId": "b3", "region": "body", "order": 1},
    ]
    spec, geometry = _prepare(data)
    expected = ["b2", "risk", "b3", "b1"]

    grouped = dict(assign_elements(spec, geometry, strict=True, stage="test"))
    assert [el.id for el in grouped["body"]] == expected

    for strategy in (PrecisionStrategy(), HeuristicStrategy(), MinimalStrategy()):
        artifact = strategy.render(spec, geometry)
        assert _ids_in_region(artifact, "body") == expected, strategy.name


def test_precision_refuses_missing_tokens_and_heuristic_substitutes() -> None:
    data = _sample()
    data["styleTokens"] = {}
    spec, geometry = _prepare(data)
    with pytest.raises(RenderError) as exc:
        PrecisionStrategy().render(spec, geometry)
    assert exc.value.stage == "precision"
    assert "missing or invalid style tokens" in str(exc.value)

    artifact = HeuristicStrategy().render(spec, geometry)
    _assert_contained(artifact, geometry)


def test_precision_refuses_unanchored_content_and_heuristic_uses_body() -> None:
    data = _sample()
    data["layout"]["anchors"] = [a for a in data["layout"]["anchors"] if a["refId"] != "risk"]
    spec, geometry = _prepare(data)
    with pytest.raises(RenderError) as exc:
        PrecisionStrategy().render(spec, geometry)
    assert "not anchored" in str(exc.value)

    artifact = HeuristicStrategy().render(spec, geometry)
    assert {p.region for p in artifact.placements_for("risk")} == {"body"}


def test_unanchored_content_goes_to_largest_region_without_body() -> None:
    data = _sample()
    data["layout"]["regions"] = [r for r in data["layout"]["regions"] if r["name"] != "body"]
    data["layout"]["anchors"] = [a for a in data["layout"]["anchors"] if a["region"] != "body"]
    spec, geometry = _prepare(data)
    grouped = dict(assign_elements(spec, geometry, strict=False, stage="test"))
    assert [el.id for el in grouped["aside"]][-2:] == ["highlights", "risk"]


def test_unsupported_chart_kind_is_mapped_by_heuristic() -> None:
    data = _sample()
    data["content"]["dataViz"]["kind"] = "waterfall"
    spec, geometry = _prepare(data)
    with pytest.raises(RenderError):
        PrecisionStrategy().render(spec, geometry)

    artifact = HeuristicStrategy().render(spec, geometry)
    charts = [s.chart for s in artifact.slide.shapes if s.has_chart]
    assert len(charts) == 1
    assert charts[0].chart_type == XL_CHART_TYPE.COLUMN_CLUSTERED


def test_series_mismatch_is_padded_by_heuristic() -> None:
    data = _sample()
    data["content"]["dataViz"]["series"].append({"name": "Target", "values": [1.0]})
    spec, geometry = _prepare(data)
    with pytest.raises(RenderError) as exc:
        PrecisionStrategy().render(spec, geometry)
    assert "length does not match labels" in str(exc.value)

    artifact = HeuristicStrategy().render(spec, geometry)
    assert artifact.placements_for("revenue-chart")


def test_overflow_is_refused_by_precision_and_shrunk_by_heuristic() -> None:
    data = _sample()
    data["content"]["bullets"][0]["items"] = [{"text": f"Point number {i} about the quarter"} for i in range(40)]
    spec, geometry = _prepare(data)
    with pytest.raises(RenderError) as exc:
        PrecisionStrategy().render(spec, geometry)
    assert "overflows region 'body'" in str(exc.value)

    artifact = HeuristicStrategy().render(spec, geometry)
    _assert_contained(artifact, geometry)


def test_unreadable_image_path_falls_back_to_placeholder(tmp_path: Path) -> None:
    data = _sample()
    data["content"]["imagePlaceholders"] = [
        {"id": "hero", "role": "hero", "alt": "Team photo", "path": str(tmp_path / "missing.png")}
    ]
    data["layout"]["anchors"].append({"refId": "hero", "region": "aside", "order": 1})
    spec, geometry = _prepare(data)
    with pytest.raises(RenderError) as exc:
        PrecisionStrategy().render(spec, geometry)
    assert "cannot be read" in str(exc.value)

    artifact = HeuristicStrategy().render(spec, geometry)
    assert [p.primitive for p in artifact.placements_for("hero")] == ["image"]
    _assert_contained(artifact, geometry)


def test_minimal_renders_plain_text_without_animations() -> None:
    spec, geometry = _prepare(_sample())
    artifact = MinimalStrategy().render(spec, geometry)
    assert {p.primitive for p in artifact.placements} == {"text"}
    assert dict(artifact.animations) == {}
    _assert_contained(artifact, geometry)


def _skeleton(regions, anchors=(), content=None, tokens=None) -> dict:
    return {
        "meta": {"aspectRatio": "16:9"},
        "content": content or {"title": {"id": "t", "text": "Title"}},
        "layout": {
            "grid": {"rows": 8, "cols": 12, "gutter": 8, "margin": {"t": 24, "r": 24, "b": 24, "l": 24}},
            "regions": list(regions),
            "anchors": list(anchors),
        },
        "styleTokens": tokens if tokens is not None else {},
    }


EVERYTHING = {
    "title": {"id": "t", "text": "Tiny \x00\x07 title " * 10},
    "subtitle": {"id": "s", "text": ""},
    "bullets": [{"id": f"b{i}", "items": [{"text": "x" * 200, "level": 5}]} for i in range(12)],
    "callouts": [{"id": "c", "text": "careful", "variant": "mystery"}],
    "table": {"id": "tab", "headers": ["a"], "rows": [["1", "2", "3"], []]},
    "dataViz": {"id": "ch", "kind": "funnel", "labels": [], "series": [{"name": "", "values": [1, 2, 3]}]},
    "imagePlaceholders": [{"id": "img", "role": "mascot", "path": "/nonexistent/x.png"}],
    "speakerNotes": "notes \x0b here",
}

FUZZ_SPECS = [
    _skeleton([{"name": "footer", "rowStart": 8, "colStart": 12, "rowSpan": 1, "colSpan": 1}]),
    _skeleton([{"name": "aside", "rowStart": 1, "colStart": 1, "rowSpan": 1, "colSpan": 1}], content=EVERYTHING),
    _skeleton(
        [
            {"name": "header", "rowStart": 1, "colStart": 1, "rowSpan": 1, "colSpan": 2},
            {"name": "footer", "rowStart": 8, "colStart": 1, "rowSpan": 1, "colSpan": 12},
        ],
        anchors=[{"refId": "b3", "region": "header", "order": -5}],
        content=EVERYTHING,
        tokens={"palette": {"primary": "nope", "neutral": ["#FFFFFF"] * 5}, "typography": {"sizes": {"step_0": 400}}},
    ),
    _skeleton(
        [{"name": "body", "rowStart": 1, "colStart": 1, "rowSpan": 8, "colSpan": 12}],
        anchors=[{"refId": "t", "region": "body", "order": 0}],
    ),
    _skeleton(
        [{"name": "body", "rowStart": 1, "colStart": 1, "rowSpan": 8, "colSpan": 12}],
        content=EVERYTHING,
        tokens={"typography": {"fonts": {"sans": "Inter\x01"}}},
    ),
]


@pytest.mark.parametrize("data", FUZZ_SPECS)
def test_minimal_never_fails_and_drops_nothing(data: dict) -> None:
    spec, geometry = _prepare(data)
    artifact = MinimalStrategy().render(spec, geometry)
    assert set(artifact.element_ids()) == {el.id for el in spec.content.elements}
    _assert_contained(artifact, geometry)
    artifact.to_bytes()


@pytest.mark.parametrize("data", FUZZ_SPECS)
def test_minimal_text_stays_inside_its_box(data: dict) -> None:
    spec, geometry = _prepare(data)
    _assert_text_fits(MinimalStrategy().render(spec, geometry))


@pytest.mark.parametrize("data", FUZZ_SPECS)
def test_default_chain_always_produces_an_artifact(data: dict) -> None:
    result = TieredBuildOrchestrator().build(data)
    assert result.success is True
    assert result.artifact is not None
    assert set(result.artifact.element_ids()) == {el.id for el in result.report.spec.content.elements}


def test_element_text_degrades_every_kind() -> None:
    spec = parse_spec(_skeleton([{"name": "body", "rowStart": 1, "colStart": 1, "rowSpan": 1, "colSpan": 1}], content=EVERYTHING))
    texts = {el.id: element_text(el) for el in spec.content.elements}
    assert texts["tab"].splitlines()[0] == "a"
    assert texts["ch"] == "? 1, ? 2, ? 3"
    assert texts["img"] == "[mascot]"
    assert texts["b0"].lstrip().startswith("• ")


def test_unexpected_exceptions_become_render_errors() -> None:
    class Exploding(RendererStrategy):
        name = "exploding"

        def _render(self, spec, geometry):
            raise KeyError("boom")

    spec, geometry = _prepare(_sample())
    with pytest.raises(RenderError) as exc:
        Exploding().render(spec, geometry)
    assert exc.value.stage == "exploding"
    assert "KeyError" in str(exc.value)


def test_strategies_from_names() -> None:
    chain = strategies_from_names(["heuristic", " Minimal "])
    assert [s.name for s in chain] == ["heuristic", "minimal"]
    assert chain[-1].total is True
    with pytest.raises(ValueError) as exc:
        strategies_from_names(["fancy"])
    assert "Unknown strategy 'fancy'" in str(exc.value)


def test_unclean_font_name_is_refused_then_cleaned_then_replaced() -> None:
    data = _sample()
    data["styleTokens"]["typography"]["fonts"]["sans"] = "Inter\x01"
    spec, geometry = _prepare(data)
    with pytest.raises(RenderError) as exc:
        PrecisionStrategy().render(spec, geometry)
    assert "typography.fonts.sans" in str(exc.value)

    assert _run_fonts(HeuristicStrategy().render(spec, geometry)) == {"Inter"}
    assert _run_fonts(MinimalStrategy().render(spec, geometry)) == {DEFAULT_FONT}

    result = TieredBuildOrchestrator().build(data)
    assert result.success is True
    assert result.stage_name == "heuristic"


@pytest.mark.parametrize("strategy", [PrecisionStrategy(), HeuristicStrategy(), MinimalStrategy()], ids=lambda s: s.name)
def test_plan_matches_rendered_boxes(strategy: RendererStrategy) -> None:
    spec, geometry = _prepare(_sample())
    planned = strategy.plan(spec, geometry)
    artifact = strategy.render(spec, geometry)

    assert [element.id for _, element, _ in planned] == artifact.element_ids()
    for region, element, rect in planned:
        first = artifact.placements_for(element.id)[0]
        assert (first.region, first.rect) == (region, rect)
