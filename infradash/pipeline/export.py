"""On-demand JSON export of the loaded collection, partitioned by kind."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, Iterable

from infradash.common.constants import BRIDGE, CULVERT
from infradash.common.fs import write_json
from infradash.common.models import CanonicalFeature
from infradash.common.time_utils import utc_timestamp_iso


def build_export_document(
    features: Iterable[CanonicalFeature],
    exported_at: datetime | None = None,
) -> dict[str, Any]:
    bridges: list[dict] = []
    culverts: list[dict] = []
    others: list[dict] = []
    for feature in features:
        if feature.structure_kind == BRIDGE:
            bridges.append(feature.to_geojson())
        elif feature.structure_kind == CULVERT:
            culverts.append(feature.to_geojson())
        else:
            others.append(feature.to_geojson())

    document: dict[str, Any] = {
        "bridges": bridges,
        "culverts": culverts,
        "metadata": {
            "totalBridges": len(bridges),
            "totalCulverts": len(culverts),
            "exportDate": utc_timestamp_iso(exported_at),
        },
    }
    if others:
        document["others"] = others
        document["metadata"]["totalOthers"] = len(others)
    return document


def write_export(path: Path, document: dict[str, Any]) -> Path:
    write_json(path, document)
    return path
