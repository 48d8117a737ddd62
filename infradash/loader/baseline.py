"""Embedded baseline inventory used whenever a live source is unavailable."""

from __future__ import annotations

from infradash.common.constants import BASELINE_SOURCE, BRIDGE, CULVERT
from infradash.common.models import RawRecord

BASELINE_FEATURES: dict[str, list[dict]] = {
    BRIDGE: [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [68.109304, 24.290852]},
            "properties": {
                "OBJECTID": 1,
                "BRIDGEID": "10B",
                "ROADNAME": "LADIUN-CHACH JEHAN KHAN TO HAJI ABDUL SATTAR KEHER",
                "DISTRICT": "SUJAWAL",
                "MAIN_CONST": "CONT. RC SLAB BRIDGE",
                "TOTAL_LENG": 7.3,
                "TOTAL_WIDT": 5.7,
                "MAX_CLEAR_": 2.7,
                "Rating": "EXCELLENT",
            },
        },
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [71.5249, 30.1575]},
            "properties": {
                "OBJECTID": 2,
                "BRIDGEID": "20B",
                "ROADNAME": "MULTAN HIGHWAY BRIDGE",
                "DISTRICT": "MULTAN",
                "MAIN_CONST": "STEEL TRUSS BRIDGE",
                "TOTAL_LENG": 85.0,
                "TOTAL_WIDT": 15.0,
                "MAX_CLEAR_": 75.0,
                "Rating": "FAIR",
            },
        },
    ],
    CULVERT: [
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [67.0011, 24.8607]},
            "properties": {
                "OBJECTID": 3,
                "CULVERET_I": "30C",
                "ROADNAME": "KARACHI BOX CULVERT",
                "DISTRICT": "KARACHI",
                "MAINCONSTR": "BOX CULVERT",
                "MAX_CLEAR_": 15.0,
                "CLEARROADW": 8.5,
                "CULVERTLEN": 4.2,
                "Rating": "GOOD",
            },
        },
        {
            "type": "Feature",
            "geometry": {"type": "Point", "coordinates": [74.3587, 31.5204]},
            "properties": {
                "OBJECTID": 4,
                "CULVERET_I": "40C",
                "ROADNAME": "LAHORE PIPE CULVERT",
                "DISTRICT": "LAHORE",
                "MAINCONSTR": "PIPE CULVERT",
                "MAX_CLEAR_": 8.0,
                "CLEARROADW": 6.0,
                "CULVERTLEN": 3.5,
                "Rating": "POOR",
            },
        },
    ],
}

_PROFILE_BY_KIND = {BRIDGE: "bridge", CULVERT: "culvert"}


def baseline_records(kind: str | None = None) -> list[RawRecord]:
    """Baseline slice for one structure kind, or the whole baseline when ``kind`` is None."""
    kinds = [kind] if kind is not None else list(BASELINE_FEATURES)
    records: list[RawRecord] = []
    for slice_kind in kinds:
        for feature in BASELINE_FEATURES.get(slice_kind, []):
            records.append(
                RawRecord(
                    source_name=BASELINE_SOURCE,
                    kind_hint=slice_kind,
                    field_profile=_PROFILE_BY_KIND[slice_kind],
                    properties=dict(feature["properties"]),
                    geometry=dict(feature["geometry"]),
                )
            )
    return records
