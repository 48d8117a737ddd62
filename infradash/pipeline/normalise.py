"""Normalise raw source records onto the canonical feature schema.

Every canonical attribute is resolved from an ordered list of candidate
property names. The lists differ per field profile so that a culvert
inventory's own spelling outranks the bridge spelling when parsing culverts,
and the other way round. All profiles end with the canonical camelCase names
written by the exporter.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from infradash.common.constants import (
    CONDITION_RATINGS,
    FILTERABLE_KINDS,
    NULLISH_TEXT,
    UNKNOWN,
)
from infradash.common.models import CanonicalFeature, FeatureCollection, RawRecord

FIELD_CANDIDATES: dict[str, dict[str, list[str]]] = {
    "bridge": {
        "longitude": ["LONGITUDE_", "LONGITUDE", "longitude"],
        "latitude": ["LATITUDE_N", "LATITUDE", "latitude"],
        "district_name": ["DISTRICT", "District", "districtName"],
        "structure_id": ["BRIDGEID", "CULVERET_I", "structureId"],
        "road_name": ["ROADNAME", "ROAD_NAME", "roadName"],
        "construction_type": ["MAIN_CONST", "MAINCONSTR", "constructionType"],
        "passage_type": ["PASSAGE_TY", "PASSAGETYP", "passageType"],
        "total_length": ["TOTAL_LENG", "totalLength"],
        "total_width": ["TOTAL_WIDT", "totalWidth"],
        "max_clear_span": ["MAX_CLEAR_", "maxClearSpan"],
        "condition_rating": ["Rating", "rating", "conditionRating"],
    },
    "culvert": {
        "longitude": ["LONGITUDE", "LONGITUDE_", "longitude"],
        "latitude": ["LATITUDE", "LATITUDE_N", "latitude"],
        "district_name": ["DISTRICT", "District", "districtName"],
        "structure_id": ["CULVERET_I", "BRIDGEID", "structureId"],
        "road_name": ["ROADNAME", "ROAD_NAME", "roadName"],
        "construction_type": ["MAINCONSTR", "MAIN_CONST", "constructionType"],
        "passage_type": ["PASSAGETYP", "PASSAGE_TY", "passageType"],
        "total_length": ["MAX_CLEAR_", "TOTAL_LENG", "totalLength"],
        "total_width": ["CLEARROADW", "TOTAL_WIDT", "totalWidth"],
        "max_clear_span": ["CULVERTLEN", "MAX_CLEAR_", "maxClearSpan"],
        "condition_rating": ["Rating", "rating", "conditionRating"],
    },
    # A combined inventory mixes both spellings. MAX_CLEAR_ is a span in
    # bridge rows, so it is never read as a length here.
    "combined": {
        "longitude": ["LONGITUDE_", "LONGITUDE", "longitude"],
        "latitude": ["LATITUDE_N", "LATITUDE", "latitude"],
        "district_name": ["DISTRICT", "District", "districtName"],
        "structure_id": ["BRIDGEID", "CULVERET_I", "structureId"],
        "road_name": ["ROADNAME", "ROAD_NAME", "roadName"],
        "construction_type": ["MAIN_CONST", "MAINCONSTR", "constructionType"],
        "passage_type": ["PASSAGE_TY", "PASSAGETYP", "passageType"],
        "total_length": ["TOTAL_LENG", "totalLength"],
        "total_width": ["TOTAL_WIDT", "CLEARROADW", "totalWidth"],
        "max_clear_span": ["MAX_CLEAR_", "CULVERTLEN", "maxClearSpan"],
        "condition_rating": ["Rating", "rating", "conditionRating"],
    },
}

KIND_CANDIDATES = ["structureKind", "dataType"]
SOURCE_DATASET_CANDIDATES = ["sourceDataset"]


def resolve_candidates(profile: str, overrides: Mapping[str, list[str]] | None = None) -> dict[str, list[str]]:
    candidates = {name: list(keys) for name, keys in FIELD_CANDIDATES.get(profile, FIELD_CANDIDATES["combined"]).items()}
    for name, keys in (overrides or {}).items():
        candidates[name] = list(keys)
    return candidates


def safe_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def clean_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    text = str(value).strip()
    if text.lower() in NULLISH_TEXT:
        return ""
    return text


def normalise_district(value: Any) -> str:
    return clean_text(value).upper()


def normalise_rating(value: Any) -> str:
    rating = clean_text(value).upper()
    return rating if rating in CONDITION_RATINGS else UNKNOWN


def normalise_kind(value: Any) -> str:
    kind = clean_text(value).upper()
    return kind if kind in FILTERABLE_KINDS else UNKNOWN


def _lookup_text(properties: Mapping[str, Any], candidates: Iterable[str]) -> str:
    for key in candidates:
        text = clean_text(properties.get(key))
        if text:
            return text
    return ""


def _lookup_number(properties: Mapping[str, Any], candidates: Iterable[str]) -> float | None:
    for key in candidates:
        number = safe_float(properties.get(key))
        if number is not None:
            return number
    return None


def point_from_geometry(geometry: Mapping[str, Any] | None) -> tuple[float, float] | None:
    if not geometry or geometry.get("type") != "Point":
        return None
    coordinates = geometry.get("coordinates")
    if not isinstance(coordinates, (list, tuple)) or len(coordinates) < 2:
        return None
    lon = safe_float(coordinates[0])
    lat = safe_float(coordinates[1])
    if lon is None or lat is None:
        return None
    return lon, lat


def _resolve_point(record: RawRecord, candidates: dict[str, list[str]]) -> tuple[float, float]:
    point = point_from_geometry(record.geometry)
    if point is not None:
        return point
    lon = _lookup_number(record.properties, candidates["longitude"])
    lat = _lookup_number(record.properties, candidates["latitude"])
    return (lon if lon is not None else 0.0, lat if lat is not None else 0.0)


def _resolve_kind(record: RawRecord) -> str:
    hinted = normalise_kind(record.kind_hint)
    if hinted != UNKNOWN:
        return hinted
    return normalise_kind(_lookup_text(record.properties, KIND_CANDIDATES))


def normalise_record(record: RawRecord, overrides: Mapping[str, list[str]] | None = None) -> CanonicalFeature:
    candidates = resolve_candidates(record.field_profile, overrides)
    properties = record.properties
    lon, lat = _resolve_point(record, candidates)

    return CanonicalFeature(
        longitude=lon,
        latitude=lat,
        district_name=normalise_district(_lookup_text(properties, candidates["district_name"])),
        structure_id=_lookup_text(properties, candidates["structure_id"]),
        road_name=_lookup_text(properties, candidates["road_name"]),
        construction_type=_lookup_text(properties, candidates["construction_type"]),
        passage_type=_lookup_text(properties, candidates["passage_type"]),
        total_length=_lookup_number(properties, candidates["total_length"]),
        total_width=_lookup_number(properties, candidates["total_width"]),
        max_clear_span=_lookup_number(properties, candidates["max_clear_span"]),
        condition_rating=normalise_rating(_lookup_text(properties, candidates["condition_rating"])),
        structure_kind=_resolve_kind(record),
        source_dataset=_lookup_text(properties, SOURCE_DATASET_CANDIDATES) or record.source_name,
    )


def normalise_records(
    records: Iterable[RawRecord],
    overrides_by_source: Mapping[str, Mapping[str, list[str]]] | None = None,
) -> FeatureCollection:
    overrides_by_source = overrides_by_source or {}
    return tuple(normalise_record(record, overrides_by_source.get(record.source_name)) for record in records)
