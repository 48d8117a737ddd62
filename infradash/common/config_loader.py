"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from infradash.common.constants import BRIDGE, CULVERT
from infradash.common.errors import ConfigError
from infradash.common.fs import read_yaml
from infradash.common.schema import validate_dashboard_config

DEFAULT_PROFILE_BY_KIND = {BRIDGE: "bridge", CULVERT: "culvert", None: "combined"}
# Split-mode records concatenate bridges first.
SOURCE_ORDER = {BRIDGE: 0, CULVERT: 1, None: 2}


@dataclass(frozen=True)
class SourceConfig:
    name: str
    location: str
    kind: str | None
    field_profile: str
    fields: dict[str, list[str]]


@dataclass(frozen=True)
class DashboardConfig:
    mode: str
    sources: tuple[SourceConfig, ...]
    http: dict


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    if not path.exists():
        raise ConfigError(f"Missing config file: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def build_config(cfg: dict, *, allow_unknown: bool = False) -> DashboardConfig:
    validated = validate_dashboard_config(cfg, allow_unknown=allow_unknown)
    sources = tuple(
        SourceConfig(
            name=source["name"],
            location=str(source["location"]),
            kind=source.get("kind"),
            field_profile=source.get("field_profile") or DEFAULT_PROFILE_BY_KIND[source.get("kind")],
            fields=dict(source.get("fields") or {}),
        )
        for source in sorted(validated["sources"], key=lambda source: SOURCE_ORDER[source.get("kind")])
    )
    return DashboardConfig(mode=validated["mode"], sources=sources, http=dict(validated.get("http") or {}))


def load_config(
    path: Path,
    *,
    allow_unknown: bool = False,
    overlay_path: Path | None = None,
) -> DashboardConfig:
    return build_config(_load_yaml_with_overlay(path, overlay_path), allow_unknown=allow_unknown)
