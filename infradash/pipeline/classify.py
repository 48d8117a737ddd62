"""Infer structure kind from free-text signals with a dimension fallback.

Keyword matching is approximate: a structure id such as ``"B-12"`` is read as
a bridge even when the asset is something else. The vocabularies below are
plain data so they can be tuned without touching the matching logic.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable

from infradash.common.constants import BRIDGE, CULVERT, UNKNOWN
from infradash.common.models import CanonicalFeature, FeatureCollection


@dataclass(frozen=True)
class KindVocabulary:
    kind: str
    keywords: tuple[str, ...]
    passage_hints: tuple[str, ...]
    id_markers: tuple[str, ...]


VOCABULARIES: tuple[KindVocabulary, ...] = (
    KindVocabulary(
        kind=BRIDGE,
        keywords=("bridge", "slab", "truss", "girder"),
        passage_hints=("bridge",),
        id_markers=("b",),
    ),
    KindVocabulary(
        kind=CULVERT,
        keywords=("culvert", "box", "pipe", "arch"),
        passage_hints=("irrigation", "drain", "channel"),
        id_markers=("c",),
    ),
)

CULVERT_MAX_LENGTH = 20.0
CULVERT_MAX_WIDTH = 10.0


def _contains_any(text: str, needles: Iterable[str]) -> bool:
    return any(needle in text for needle in needles)


def _matches(vocabulary: KindVocabulary, construction: str, passage: str, structure_id: str) -> bool:
    signals = (construction, passage, structure_id)
    if any(_contains_any(signal, vocabulary.keywords) for signal in signals):
        return True
    if _contains_any(passage, vocabulary.passage_hints):
        return True
    return _contains_any(structure_id, vocabulary.id_markers)


def kind_from_dimensions(total_length: float | None, total_width: float | None) -> str:
    length = total_length or 0.0
    width = total_width or 0.0
    if length < CULVERT_MAX_LENGTH and width < CULVERT_MAX_WIDTH:
        return CULVERT
    return BRIDGE


def infer_kind(
    construction_type: str,
    passage_type: str,
    structure_id: str,
    total_length: float | None,
    total_width: float | None,
) -> str:
    construction = (construction_type or "").lower()
    passage = (passage_type or "").lower()
    ident = (structure_id or "").lower()

    for vocabulary in VOCABULARIES:
        if _matches(vocabulary, construction, passage, ident):
            return vocabulary.kind
    return kind_from_dimensions(total_length, total_width)


def classify_feature(feature: CanonicalFeature) -> CanonicalFeature:
    if feature.structure_kind != UNKNOWN:
        return feature
    kind = infer_kind(
        feature.construction_type,
        feature.passage_type,
        feature.structure_id,
        feature.total_length,
        feature.total_width,
    )
    return replace(feature, structure_kind=kind)


def classify_features(features: Iterable[CanonicalFeature]) -> FeatureCollection:
    return tuple(classify_feature(feature) for feature in features)
