"""Condition tallies, attribute means, and range bounds over a feature set."""

from __future__ import annotations

import math
from collections import Counter
from typing import Iterable, Sequence

from infradash.common.constants import (
    ATTRIBUTE_LABELS,
    BRIDGE,
    CONDITION_RATINGS,
    CULVERT,
    NUMERIC_ATTRIBUTES,
    RANGE_BOUND_RULES,
)
from infradash.common.models import AggregateStats, CanonicalFeature, ConditionTally
from infradash.pipeline.filters import Range


def tally_conditions(features: Iterable[CanonicalFeature]) -> ConditionTally:
    counts = Counter(
        feature.condition_rating for feature in features if feature.condition_rating in CONDITION_RATINGS
    )
    return ConditionTally(**{rating: counts.get(rating, 0) for rating in CONDITION_RATINGS})


def _present_values(features: Iterable[CanonicalFeature], attribute: str) -> list[float]:
    values = []
    for feature in features:
        value = getattr(feature, attribute)
        if value is not None and math.isfinite(value):
            values.append(value)
    return values


def mean_attribute(features: Iterable[CanonicalFeature], attribute: str) -> str:
    values = _present_values(features, attribute)
    if not values:
        return "0.0"
    return f"{sum(values) / len(values):.1f}"


def aggregate(features: Sequence[CanonicalFeature]) -> AggregateStats:
    return AggregateStats(
        count=len(features),
        conditions=tally_conditions(features),
        averages={ATTRIBUTE_LABELS[attr]: mean_attribute(features, attr) for attr in NUMERIC_ATTRIBUTES},
    )


def summarize(
    features: Sequence[CanonicalFeature],
    partitions: Iterable[str] = (BRIDGE, CULVERT),
) -> dict[str, AggregateStats]:
    """Stats for the whole set under ``"all"`` plus one entry per structure kind."""
    summary = {"all": aggregate(features)}
    for kind in partitions:
        summary[kind] = aggregate([feature for feature in features if feature.structure_kind == kind])
    return summary


def compute_range_bounds(features: Sequence[CanonicalFeature]) -> dict[str, Range]:
    bounds: dict[str, Range] = {}
    for attribute in NUMERIC_ATTRIBUTES:
        floor, padding = RANGE_BOUND_RULES[attribute]
        values = _present_values(features, attribute)
        observed = math.ceil(max(values)) if values else 0
        lowest = min(0, math.floor(min(values))) if values else 0
        bounds[attribute] = Range(min=float(lowest), max=float(max(floor, observed + padding)))
    return bounds
