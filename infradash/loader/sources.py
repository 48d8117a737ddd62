"""Fetch one source document and pull raw records out of its top-level shape."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from infradash.common.config_loader import SourceConfig
from infradash.common.constants import BRIDGE, CULVERT, OTHER, UNKNOWN
from infradash.common.errors import SourceFetchError, SourceShapeError
from infradash.common.fs import read_json
from infradash.common.http import HttpClient
from infradash.common.models import RawRecord

EXPORT_PARTITIONS = {"bridges": BRIDGE, "culverts": CULVERT, "others": OTHER}


def _is_remote(location: str) -> bool:
    return location.startswith(("http://", "https://"))


def fetch_document(location: str, client: HttpClient) -> Any:
    if _is_remote(location):
        return client.get_json(location)

    path = Path(location)
    try:
        return read_json(path)
    except OSError as exc:
        raise SourceFetchError(f"Cannot read {path}: {exc}") from exc
    except ValueError as exc:
        raise SourceFetchError(f"Invalid JSON payload in {path}") from exc


def _describe(payload: Any) -> str:
    if isinstance(payload, dict):
        doc_type = payload.get("type")
        if doc_type:
            return f"object of type {doc_type!r}"
        keys = ", ".join(sorted(str(k) for k in payload)[:5])
        return f"object with keys [{keys}]"
    return type(payload).__name__


def _record_from_item(item: Any, source: SourceConfig, kind_hint: str) -> RawRecord | None:
    if not isinstance(item, dict):
        return None

    geometry = item.get("geometry")
    properties = item.get("properties")
    if not isinstance(properties, dict):
        # Bare inventory rows carry their attributes at the top level.
        properties = {k: v for k, v in item.items() if k not in ("geometry", "type")}

    return RawRecord(
        source_name=source.name,
        kind_hint=kind_hint,
        field_profile=source.field_profile,
        properties=properties,
        geometry=geometry if isinstance(geometry, dict) else None,
    )


def _records_from_items(items: list, source: SourceConfig, kind_hint: str) -> tuple[list[RawRecord], int]:
    records: list[RawRecord] = []
    skipped = 0
    for item in items:
        record = _record_from_item(item, source, kind_hint)
        if record is None:
            skipped += 1
            continue
        records.append(record)
    return records, skipped


def _is_export_bundle(payload: dict) -> bool:
    return "type" not in payload and any(isinstance(payload.get(key), list) for key in EXPORT_PARTITIONS)


def extract_records(payload: Any, source: SourceConfig) -> tuple[list[RawRecord], int]:
    """Return ``(records, skipped)`` for a parsed source document.

    Accepts a bare array, a FeatureCollection (the ``type`` member may be
    absent), a single Feature, or an export bundle. Non-object array entries
    are dropped and counted in ``skipped``.
    """
    kind_hint = source.kind or UNKNOWN

    if isinstance(payload, list):
        return _records_from_items(payload, source, kind_hint)

    if isinstance(payload, dict):
        doc_type = payload.get("type")
        if doc_type in ("FeatureCollection", None) and isinstance(payload.get("features"), list):
            return _records_from_items(payload["features"], source, kind_hint)
        if doc_type == "Feature" or (doc_type is None and isinstance(payload.get("geometry"), dict)):
            return _records_from_items([payload], source, kind_hint)
        if _is_export_bundle(payload):
            records: list[RawRecord] = []
            skipped = 0
            for key, partition_kind in EXPORT_PARTITIONS.items():
                part_records, part_skipped = _records_from_items(payload.get(key) or [], source, partition_kind)
                records.extend(part_records)
                skipped += part_skipped
            return records, skipped

    raise SourceShapeError(f"{source.name}: unrecognized top-level shape ({_describe(payload)})")


def load_source(source: SourceConfig, client: HttpClient) -> tuple[list[RawRecord], int]:
    return extract_records(fetch_document(source.location, client), source)
