"""Text runs, accent-word emphasis and rough text measurement."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from .geometry import pt_to_in

# Characters XML 1.0 cannot carry; python-pptx rejects them.
_XML_ILLEGAL = re.compile("[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff\ud800-\udfff]")

# Average glyph advance as a fraction of the font size, for proportional sans faces.
_AVG_CHAR_EM = 0.52

ELLIPSIS = "\u2026"


@dataclass(frozen=True)
class TextRun:
    text: str
    bold: bool = False
    color: Optional[str] = None

    @property
    def emphasized(self) -> bool:
        return self.bold or self.color is not None


@dataclass(frozen=True)
class Paragraph:
    runs: Sequence[TextRun]
    level: int = 0
    bullet: bool = False

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


def highlight_accent_words(text: str, accent_words: Optional[Iterable[str]], color: Optional[str]) -> List[TextRun]:
    """Split `text` into runs, emphasising whole-word, case-insensitive accent matches.

    Unmatched stretches are copied verbatim, so joining every run's text
    always reproduces `text` exactly.
    """
    words = sorted({w.strip() for w in (accent_words or []) if w and w.strip()}, key=len, reverse=True)
    if not text or not words:
        return [TextRun(text)]

    pattern = re.compile(r"\b(" + "|".join(re.escape(w) for w in words) + r")\b", re.IGNORECASE)
    runs: List[TextRun] = []
    last = 0
    for match in pattern.finditer(text):
        start, end = match.span()
        if start == end:
            continue
        if start > last:
            runs.append(TextRun(text[last:start]))
        runs.append(TextRun(text[start:end], bold=True, color=color))
        last = end
    if last < len(text):
        runs.append(TextRun(text[last:]))
    return runs or [TextRun(text)]


def sanitize_text(text: str) -> str:
    return _XML_ILLEGAL.sub("", text or "")


def estimate_lines(text: str, width_in: float, size_pt: float) -> int:
    """Estimate wrapped line count for `text` in a box `width_in` wide."""
    if width_in <= 0 or size_pt <= 0:
        return max(1, len((text or "").splitlines()))
    chars_per_line = max(1, int(width_in / (pt_to_in(size_pt) * _AVG_CHAR_EM)))
    total = 0
    for line in (text or "").split("\n") or [""]:
        total += max(1, math.ceil(len(line) / chars_per_line))
    return max(1, total)


def estimate_text_height(text: str, width_in: float, size_pt: float, line_height: float = 1.2) -> float:
    return estimate_lines(text, width_in, size_pt) * pt_to_in(size_pt) * line_height


def plain(text: str) -> List[Paragraph]:
    return [Paragraph(runs=[TextRun(line)]) for line in (text or "").split("\n")]


def clean_font_name(name: Optional[str]) -> str:
    """Font family name with XML-illegal characters and surrounding blanks removed."""
    return sanitize_text(name or "").strip()


def _truncate_runs(runs: Sequence[TextRun], limit: int) -> List[TextRun]:
    kept: List[TextRun] = []
    used = 0
    for run in runs:
        if used >= limit:
            break
        text = run.text[: limit - used]
        kept.append(replace(run, text=text))
        used += len(text)
    if kept:
        kept[-1] = replace(kept[-1], text=kept[-1].text + ELLIPSIS)
    else:
        kept.append(TextRun(ELLIPSIS))
    return kept


def fit_paragraphs(
    paragraphs: Sequence[Paragraph], width_in: float, height_in: float, size_pt: float, line_height: float = 1.2
) -> List[Paragraph]:
    """Keep the leading paragraphs whose estimated height fits in `height_in`.

    A paragraph that only partly fits is cut short and ends with an ellipsis;
    later paragraphs are dropped. Returns an empty list when not even one
    line fits.
    """
    line_in = pt_to_in(size_pt) * line_height
    if width_in <= 0 or height_in <= 0 or line_in <= 0:
        return []
    budget = int(height_in / line_in + 1e-9)
    kept: List[Paragraph] = []
    for para in paragraphs:
        if budget <= 0:
            if kept and kept[-1].text:
                last = kept[-1]
                kept[-1] = replace(last, runs=_truncate_runs(last.runs, len(last.text) - 1))
            break
        prefix = "• " if para.bullet else ""
        needed = estimate_lines(prefix + para.text, width_in, size_pt)
        if needed <= budget:
            kept.append(para)
            budget -= needed
            continue

        def fits(n: int) -> bool:
            return estimate_lines(prefix + para.text[:n] + ELLIPSIS, width_in, size_pt) <= budget

        lo, hi = 0, len(para.text)
        while lo < hi:
            mid = (lo + hi + 1) // 2
            if fits(mid):
                lo = mid
            else:
                hi = mid - 1
        if fits(lo):
            kept.append(replace(para, runs=_truncate_runs(para.runs, lo)))
        break
    return kept
