"""Conjunctive filtering of canonical features against dashboard criteria."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping

from infradash.common.constants import (
    ALL,
    ATTRIBUTE_LABELS,
    CONDITION_RATINGS,
    FILTERABLE_KINDS,
    NUMERIC_ATTRIBUTES,
    UNKNOWN,
)
from infradash.common.models import CanonicalFeature, FeatureCollection
from infradash.pipeline.normalise import clean_text, normalise_district, safe_float


@dataclass(frozen=True)
class Range:
    """Inclusive numeric range. A single-sided ``{max}`` range keeps ``min=0``."""

    min: float = 0.0
    max: float = math.inf

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def to_dict(self) -> dict[str, float | None]:
        return {"min": self.min, "max": None if math.isinf(self.max) else self.max}


@dataclass(frozen=True)
class FilterCriteria:
    district: str = ALL
    structure_kind: str = ALL
    condition_rating: str = ALL
    total_length: Range = field(default_factory=Range)
    total_width: Range = field(default_factory=Range)
    max_clear_span: Range = field(default_factory=Range)

    def range_for(self, attribute: str) -> Range:
        return getattr(self, attribute)

    def with_changes(self, **changes: Any) -> "FilterCriteria":
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "district": self.district,
            "structureKind": self.structure_kind,
            "conditionRating": self.condition_rating,
        }
        for attribute in NUMERIC_ATTRIBUTES:
            out[ATTRIBUTE_LABELS[attribute]] = self.range_for(attribute).to_dict()
        return out


def _is_all(value: Any) -> bool:
    return value is None or clean_text(value).lower() == ALL


def parse_range(value: Any) -> Range:
    if isinstance(value, Range):
        return value
    if not isinstance(value, Mapping):
        return Range()
    low = safe_float(value.get("min"))
    high = safe_float(value.get("max"))
    return Range(
        min=low if low is not None else 0.0,
        max=high if high is not None else math.inf,
    )


def parse_kind(value: Any) -> str:
    if _is_all(value):
        return ALL
    kind = clean_text(value).upper()
    if kind not in FILTERABLE_KINDS:
        raise ValueError(f"Unknown structure kind: {value!r}")
    return kind


def parse_rating(value: Any) -> str:
    if _is_all(value):
        return ALL
    rating = clean_text(value).upper()
    if rating not in (*CONDITION_RATINGS, UNKNOWN):
        raise ValueError(f"Unknown condition rating: {value!r}")
    return rating


def parse_district(value: Any) -> str:
    if _is_all(value):
        return ALL
    return normalise_district(value)


_RANGE_KEYS = {attribute: (attribute, ATTRIBUTE_LABELS[attribute]) for attribute in NUMERIC_ATTRIBUTES}


def parse_criteria(payload: Mapping[str, Any] | None, base: FilterCriteria | None = None) -> FilterCriteria:
    """Build criteria from a UI-style mapping, keeping ``base`` for absent keys.

    Accepts snake_case or camelCase keys; range values may be ``{"min", "max"}``
    or ``{"max"}`` alone.
    """
    criteria = base or FilterCriteria()
    payload = payload or {}
    changes: dict[str, Any] = {}

    if "district" in payload:
        changes["district"] = parse_district(payload["district"])
    for key in ("structure_kind", "structureKind", "kind"):
        if key in payload:
            changes["structure_kind"] = parse_kind(payload[key])
    for key in ("condition_rating", "conditionRating", "condition"):
        if key in payload:
            changes["condition_rating"] = parse_rating(payload[key])
    for attribute, keys in _RANGE_KEYS.items():
        for key in keys:
            if key in payload:
                changes[attribute] = parse_range(payload[key])

    return criteria.with_changes(**changes)


def matches(feature: CanonicalFeature, criteria: FilterCriteria) -> bool:
    if criteria.district != ALL and feature.district_name != normalise_district(criteria.district):
        return False
    if criteria.structure_kind != ALL and feature.structure_kind != criteria.structure_kind:
        return False
    if criteria.condition_rating != ALL and feature.condition_rating != criteria.condition_rating:
        return False
    for attribute in NUMERIC_ATTRIBUTES:
        value = getattr(feature, attribute)
        # Missing measurements never exclude a feature.
        if value is not None and not criteria.range_for(attribute).contains(value):
            return False
    return True


def filter_features(features: Iterable[CanonicalFeature], criteria: FilterCriteria) -> FeatureCollection:
    return tuple(feature for feature in features if matches(feature, criteria))
