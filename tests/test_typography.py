from __future__ import annotations

import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).resolve().parents[1] / "scripts"
if str(SCRIPT_DIR) not in sys.path:
    sys.path.insert(0, str(SCRIPT_DIR))

from slidegrid.typography import (  # noqa: E402
    ELLIPSIS,
    Paragraph,
    TextRun,
    clean_font_name,
    estimate_lines,
    estimate_text_height,
    fit_paragraphs,
    highlight_accent_words,
    plain,
    sanitize_text,
)

ACCENT = "#F59E0B"


def _joined(runs) -> str:
    return "".join(run.text for run in runs)


def test_accent_word_splits_into_three_runs() -> None:
    text = "Grow revenue by 40%"
    runs = highlight_accent_words(text, ["revenue"], ACCENT)
    assert [r.text for r in runs] == ["Grow ", "revenue", " by 40%"]
    assert runs[1] == TextRun("revenue", bold=True, color=ACCENT)
    assert not runs[0].emphasized and not runs[2].emphasized
    assert _joined(runs) == text


def test_matching_is_case_insensitive_and_keeps_source_case() -> None:
    runs = highlight_accent_words("Revenue rose; REVENUE matters", ["revenue"], ACCENT)
    emphasized = [r.text for r in runs if r.emphasized]
    assert emphasized == ["Revenue", "REVENUE"]


def test_matching_respects_word_boundaries() -> None:
    runs = highlight_accent_words("revenues and prerevenue", ["revenue"], ACCENT)
    assert runs == [TextRun("revenues and prerevenue")]


def test_longer_phrases_win_over_their_prefixes() -> None:
    text = "Our data platform scales"
    runs = highlight_accent_words(text, ["data", "data platform"], ACCENT)
    assert [r.text for r in runs if r.emphasized] == ["data platform"]
    assert _joined(runs) == text


def test_no_accent_words_returns_single_run() -> None:
    assert highlight_accent_words("Plain text", [], ACCENT) == [TextRun("Plain text")]
    assert highlight_accent_words("Plain text", None, ACCENT) == [TextRun("Plain text")]
    assert highlight_accent_words("", ["x"], ACCENT) == [TextRun("")]


def test_regex_characters_in_accent_words_are_literal() -> None:
    text = "Margin (net) improved"
    runs = highlight_accent_words(text, ["(net)", "margin"], ACCENT)
    assert _joined(runs) == text
    assert "Margin" in [r.text for r in runs if r.emphasized]


def test_sanitize_text_strips_xml_illegal_characters() -> None:
    assert sanitize_text("ok\x00\x07 text\x1f") == "ok text"
    assert sanitize_text("tab\tand\nnewline") == "tab\tand\nnewline"


def test_estimate_lines_grows_with_text_length() -> None:
    short = estimate_lines("short", 4.0, 12)
    long = estimate_lines("word " * 80, 4.0, 12)
    assert short == 1
    assert long > short
    assert estimate_lines("a\nb\nc", 4.0, 12) == 3


def test_plain_splits_lines_into_paragraphs() -> None:
    paragraphs = plain("one\ntwo")
    assert [p.text for p in paragraphs] == ["one", "two"]


def test_clean_font_name_drops_control_characters() -> None:
    assert clean_font_name(" Inter\x01 ") == "Inter"
    assert clean_font_name("\x00") == ""
    assert clean_font_name(None) == ""


def test_fit_paragraphs_keeps_text_that_already_fits() -> None:
    paragraphs = plain("one\ntwo")
    assert fit_paragraphs(paragraphs, 4.0, 2.0, 12) == paragraphs


def test_fit_paragraphs_cuts_to_the_available_lines() -> None:
    paragraphs = [Paragraph(runs=[TextRun("word " * 60)], bullet=True), *plain("dropped\nalso dropped")]
    width, height, size = 2.0, 0.5, 12
    kept = fit_paragraphs(paragraphs, width, height, size)

    assert len(kept) == 1
    assert kept[0].bullet is True
    assert kept[0].text.endswith(ELLIPSIS)
    text = "\n".join("• " + p.text if p.bullet else p.text for p in kept)
    assert estimate_text_height(text, width, size) <= height


def test_fit_paragraphs_marks_dropped_tail_on_last_kept_line() -> None:
    kept = fit_paragraphs(plain("a\nb\nc"), 4.0, 0.4, 12)
    assert [p.text for p in kept] == ["a", ELLIPSIS]


def test_fit_paragraphs_keeps_run_emphasis() -> None:
    runs = [TextRun("plain " * 2), TextRun("bold " * 30, bold=True)]
    kept = fit_paragraphs([Paragraph(runs=runs)], 2.0, 0.4, 12)
    assert kept[0].runs[0] == runs[0]
    assert kept[0].runs[-1].bold is True


def test_fit_paragraphs_returns_nothing_when_no_line_fits() -> None:
    assert fit_paragraphs(plain("text"), 4.0, 0.05, 12) == []
