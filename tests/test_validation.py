from __future__ import annotations

import copy
import json
import sys
from pathlib import Path

import pytest

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from slidegrid import StructuralError, parse_spec, validate_spec  # noqa: E402
from slidegrid.model import Typography, load_spec_file  # noqa: E402

SAMPLE_PATH = Path(__file__).resolve().parents[1] / "assets" / "sample_spec.json"


def _sample() -> dict:
    return copy.deepcopy(json.loads(SAMPLE_PATH.read_text(encoding="utf-8")))


def _messages(report) -> str:
    return "\n".join(str(issue) for issue in report.issues)


def test_validate_spec_accepts_sample_spec() -> None:
    report = validate_spec(_sample())
    assert report.valid is True
    assert report.errors == []
    assert report.spec is not None
    assert report.spec.meta.aspect_ratio == "16:9"


def test_parse_spec_keeps_declaration_order() -> None:
    spec = parse_spec(_sample())
    assert [el.id for el in spec.content.elements] == ["title", "subtitle", "highlights", "risk", "revenue-chart"]
    assert spec.content.speaker_notes.startswith("Open with")


def test_missing_section_is_structural() -> None:
    data = _sample()
    del data["styleTokens"]
    report = validate_spec(data)
    assert report.valid is False
    assert "styleTokens is required" in _messages(report)


def test_unknown_region_name_is_structural() -> None:
    data = _sample()
    data["layout"]["regions"][0]["name"] = "sidebar"
    with pytest.raises(StructuralError) as exc:
        parse_spec(data)
    assert "layout.regions[0].name must be one of" in str(exc.value)


def test_anchor_to_undeclared_region_is_structural() -> None:
    data = _sample()
    data["layout"]["regions"] = [r for r in data["layout"]["regions"] if r["name"] != "footer"]
    report = validate_spec(data)
    assert report.valid is False
    assert "region 'footer' is not declared" in _messages(report)


def test_dangling_ref_id_is_structural() -> None:
    data = _sample()
    data["layout"]["anchors"].append({"refId": "ghost", "region": "body", "order": 4})
    report = validate_spec(data)
    assert report.valid is False
    assert "refId 'ghost' does not match any content id" in _messages(report)


def test_double_anchor_is_structural() -> None:
    data = _sample()
    data["layout"]["anchors"].append({"refId": "risk", "region": "aside", "order": 1})
    report = validate_spec(data)
    assert report.valid is False
    assert "refId 'risk' is anchored 2 times" in _messages(report)


def test_bad_grid_values_are_structural() -> None:
    data = _sample()
    data["layout"]["grid"]["rows"] = 0
    data["layout"]["grid"]["gutter"] = -4
    with pytest.raises(StructuralError) as exc:
        parse_spec(data)
    message = str(exc.value)
    assert message.startswith("Specification validation failed:")
    assert "layout.grid.rows is required and must be an integer >= 1" in message
    assert "layout.grid.gutter must be a number >= 0" in message


def test_palette_problems_are_advisory() -> None:
    data = _sample()
    data["styleTokens"]["palette"]["primary"] = "blue"
    data["styleTokens"]["palette"]["neutral"] = ["#000000", "#FFFFFF"]
    report = validate_spec(data)
    assert report.valid is True
    paths = {w.path for w in report.warnings}
    assert "styleTokens.palette.primary" in paths
    assert "styleTokens.palette.neutral" in paths


def test_non_monotonic_typography_is_advisory() -> None:
    data = _sample()
    data["styleTokens"]["typography"]["sizes"]["step_1"] = 48
    report = validate_spec(data)
    assert report.valid is True
    assert "sizes should decrease" in _messages(report)


def test_control_characters_in_font_name_are_advisory() -> None:
    data = _sample()
    data["styleTokens"]["typography"]["fonts"]["sans"] = "Inter\x01"
    report = validate_spec(data)
    assert report.valid is True
    assert "styleTokens.typography.fonts.sans" in {w.path for w in report.warnings}


def test_typography_defaults_to_empty_read_only_maps() -> None:
    first, second = Typography(), Typography()
    assert dict(first.sizes) == {}
    assert first.size("step_0") is None
    assert first.line_heights == second.line_heights
    with pytest.raises(TypeError):
        first.sizes["step_0"] = 16  # type: ignore[index]


def test_low_contrast_is_advisory() -> None:
    data = _sample()
    data["styleTokens"]["palette"]["neutral"] = ["#AAAAAA", "#BBBBBB", "#CCCCCC", "#DDDDDD", "#EEEEEE"]
    data["styleTokens"]["contrast"]["minTextContrast"] = 3
    report = validate_spec(data)
    assert report.valid is True
    messages = _messages(report)
    assert "minTextContrast: should be at least 7" in messages
    assert "text/background contrast" in messages


def test_unanchored_content_and_overlap_are_advisory() -> None:
    data = _sample()
    data["layout"]["anchors"] = [a for a in data["layout"]["anchors"] if a["refId"] != "risk"]
    data["layout"]["regions"][1]["colSpan"] = 9
    report = validate_spec(data)
    assert report.valid is True
    messages = _messages(report)
    assert "callout 'risk' is not anchored" in messages
    assert "overlaps" in messages


def test_series_length_mismatch_is_advisory() -> None:
    data = _sample()
    data["content"]["dataViz"]["series"][0]["values"] = [1, 2]
    report = validate_spec(data)
    assert report.valid is True
    assert "series length (2) differs from labels length (4)" in _messages(report)


def test_raise_for_errors_formats_issue_list() -> None:
    data = _sample()
    data["layout"]["anchors"][0]["region"] = "nowhere"
    report = validate_spec(data)
    with pytest.raises(StructuralError) as exc:
        report.raise_for_errors()
    assert "Specification validation failed" in str(exc.value)
    assert "region 'nowhere' is unknown" in str(exc.value)
    assert "Status: invalid" in report.summary()


def test_load_spec_file_reports_bad_json(tmp_path: Path) -> None:
    bad = tmp_path / "bad.json"
    bad.write_text("{not json", encoding="utf-8")
    with pytest.raises(StructuralError) as exc:
        load_spec_file(bad)
    assert "Invalid JSON" in str(exc.value)

    with pytest.raises(StructuralError) as exc:
        load_spec_file(tmp_path / "missing.json")
    assert "not found" in str(exc.value)
