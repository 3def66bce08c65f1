"""Entrance-animation hints, kept as a side-table keyed by element id."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Mapping

_STAGGER_MS = 100


@dataclass(frozen=True)
class AnimationHint:
    effect: str
    duration_ms: int
    delay_ms: int = 0


_RECOMMENDED: Mapping[str, AnimationHint] = {
    "title": AnimationHint("fade-in", 600, 0),
    "subtitle": AnimationHint("fade-in", 500, 200),
    "bullets": AnimationHint("slide-in-left", 400, 300),
    "callout": AnimationHint("fade-in", 500, 300),
    "table": AnimationHint("fade-in", 500, 300),
    "chart": AnimationHint("zoom-in", 700, 400),
    "image": AnimationHint("fade-in", 500, 300),
}


def recommended_animation(kind: str) -> AnimationHint:
    return _RECOMMENDED.get(kind, AnimationHint("fade-in", 500, 0))


def build_animation_table(elements: Iterable[tuple[str, str]]) -> Dict[str, AnimationHint]:
    """Map (element_id, kind) pairs, in render order, to staggered hints."""
    table: Dict[str, AnimationHint] = {}
    for index, (element_id, kind) in enumerate(elements):
        base = recommended_animation(kind)
        table[element_id] = AnimationHint(base.effect, base.duration_ms, base.delay_ms + index * _STAGGER_MS)
    return table
