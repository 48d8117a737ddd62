"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from infradash.common.constants import UNKNOWN


@dataclass(frozen=True)
class RawRecord:
    source_name: str
    kind_hint: str
    field_profile: str
    properties: dict[str, Any]
    geometry: dict[str, Any] | None = None


@dataclass(frozen=True)
class CanonicalFeature:
    longitude: float = 0.0
    latitude: float = 0.0
    district_name: str = ""
    structure_id: str = ""
    road_name: str = ""
    construction_type: str = ""
    passage_type: str = ""
    total_length: float | None = None
    total_width: float | None = None
    max_clear_span: float | None = None
    condition_rating: str = UNKNOWN
    structure_kind: str = UNKNOWN
    source_dataset: str = ""

    @property
    def geometry(self) -> dict[str, Any]:
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    def to_properties(self) -> dict[str, Any]:
        return {
            "structureId": self.structure_id,
            "roadName": self.road_name,
            "districtName": self.district_name,
            "constructionType": self.construction_type,
            "passageType": self.passage_type,
            "totalLength": self.total_length,
            "totalWidth": self.total_width,
            "maxClearSpan": self.max_clear_span,
            "conditionRating": self.condition_rating,
            "structureKind": self.structure_kind,
            "sourceDataset": self.source_dataset,
        }

    def to_geojson(self) -> dict[str, Any]:
        return {"type": "Feature", "geometry": self.geometry, "properties": self.to_properties()}


FeatureCollection = tuple[CanonicalFeature, ...]


def to_feature_collection(features: FeatureCollection) -> dict[str, Any]:
    return {"type": "FeatureCollection", "features": [feature.to_geojson() for feature in features]}


@dataclass(frozen=True)
class ConditionTally:
    EXCELLENT: int = 0
    GOOD: int = 0
    FAIR: int = 0
    POOR: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"EXCELLENT": self.EXCELLENT, "GOOD": self.GOOD, "FAIR": self.FAIR, "POOR": self.POOR}


@dataclass(frozen=True)
class AggregateStats:
    count: int
    conditions: ConditionTally
    averages: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "conditions": self.conditions.to_dict(),
            "averages": dict(self.averages),
        }
