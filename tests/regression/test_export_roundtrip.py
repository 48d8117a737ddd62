from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from infradash.common.config_loader import SourceConfig
from infradash.common.constants import BRIDGE, CULVERT, OTHER
from infradash.common.fs import read_json
from infradash.common.models import CanonicalFeature
from infradash.loader.baseline import baseline_records
from infradash.loader.sources import extract_records
from infradash.pipeline.dashboard import build_collection
from infradash.pipeline.export import build_export_document, write_export

FIXED_MOMENT = datetime(2026, 2, 17, 8, 30, tzinfo=timezone.utc)


def _reimport(path: Path):
    source = SourceConfig("export", str(path), None, "combined", {})
    records, skipped = extract_records(read_json(path), source)
    assert skipped == 0
    return build_collection(records)


@pytest.mark.regression
def test_exported_baseline_reimports_with_same_values(tmp_path: Path):
    original = build_collection(baseline_records())
    path = write_export(tmp_path / "infrastructure_data.json", build_export_document(original, FIXED_MOMENT))

    restored = _reimport(path)

    assert restored == original


@pytest.mark.regression
def test_missing_measurements_and_other_kind_survive_export(tmp_path: Path):
    original = (
        CanonicalFeature(longitude=67.2, latitude=24.9, structure_id="7", district_name="KARACHI",
                         total_length=None, total_width=3.0, structure_kind=OTHER, source_dataset="survey"),
        CanonicalFeature(structure_id="8", total_length=40.0, structure_kind=BRIDGE, source_dataset="survey"),
    )
    document = build_export_document(original, FIXED_MOMENT)
    assert document["metadata"] == {
        "totalBridges": 1,
        "totalCulverts": 0,
        "totalOthers": 1,
        "exportDate": "2026-02-17T08:30:00.000+00:00",
    }

    restored = _reimport(write_export(tmp_path / "bundle.json", document))

    by_id = {feature.structure_id: feature for feature in restored}
    assert by_id["7"] == original[0]
    assert by_id["7"].total_length is None
    assert by_id["8"] == original[1]


@pytest.mark.regression
def test_export_partitions_follow_structure_kind():
    features = build_collection(baseline_records())

    document = build_export_document(features, FIXED_MOMENT)

    assert [f["properties"]["structureId"] for f in document["bridges"]] == ["10B", "20B"]
    assert [f["properties"]["structureId"] for f in document["culverts"]] == ["30C", "40C"]
    assert {f["properties"]["structureKind"] for f in document["culverts"]} == {CULVERT}
    assert "others" not in document
