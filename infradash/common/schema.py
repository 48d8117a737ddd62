"""Minimal strict schema for dashboard YAML config validation."""

from __future__ import annotations

from infradash.common.constants import BRIDGE, CULVERT, FIELD_PROFILES, MODES
from infradash.common.errors import ConfigError

SOURCE_KINDS = (BRIDGE, CULVERT)
CANONICAL_FIELDS = (
    "longitude",
    "latitude",
    "district_name",
    "structure_id",
    "road_name",
    "construction_type",
    "passage_type",
    "total_length",
    "total_width",
    "max_clear_span",
    "condition_rating",
)


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _validate_fields_override(fields: dict, ctx: str) -> None:
    if not isinstance(fields, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    _assert_no_unknown_keys(fields, set(CANONICAL_FIELDS), ctx, allow_unknown=False)
    for name, candidates in fields.items():
        if not isinstance(candidates, list) or not all(isinstance(c, str) for c in candidates):
            raise ConfigError(f"{ctx}.{name} must be a list of field names")


def validate_source_config(source: dict, idx: int, *, mode: str, allow_unknown: bool = False) -> dict:
    ctx = f"sources[{idx}]"
    _assert_required_keys(source, {"name", "location"}, ctx)
    _assert_no_unknown_keys(
        source,
        {"name", "location", "kind", "field_profile", "fields"},
        ctx,
        allow_unknown,
    )

    kind = source.get("kind")
    if mode == "split" and kind not in SOURCE_KINDS:
        raise ConfigError(f"{ctx}.kind must be one of {', '.join(SOURCE_KINDS)} in split mode")
    if mode == "combined" and kind is not None:
        raise ConfigError(f"{ctx}.kind is not allowed in combined mode")

    profile = source.get("field_profile")
    if profile is not None and profile not in FIELD_PROFILES:
        raise ConfigError(f"{ctx}.field_profile must be one of {', '.join(FIELD_PROFILES)}")
    _validate_fields_override(source.get("fields") or {}, f"{ctx}.fields")
    return source


def validate_dashboard_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_required_keys(cfg, {"mode", "sources"}, "dashboard config")
    _assert_no_unknown_keys(cfg, {"mode", "sources", "http"}, "dashboard config", allow_unknown)

    mode = cfg["mode"]
    if mode not in MODES:
        raise ConfigError(f"mode must be one of {', '.join(MODES)}")

    sources = cfg["sources"]
    if not isinstance(sources, list):
        raise ConfigError("sources must be a list")
    expected = 2 if mode == "split" else 1
    if len(sources) != expected:
        raise ConfigError(f"{mode} mode needs exactly {expected} source(s), got {len(sources)}")

    for idx, source in enumerate(sources):
        validate_source_config(source, idx, mode=mode, allow_unknown=allow_unknown)

    names = [source["name"] for source in sources]
    if len(set(names)) != len(names):
        raise ConfigError(f"Duplicate source names: {', '.join(names)}")
    if mode == "split" and {source["kind"] for source in sources} != set(SOURCE_KINDS):
        raise ConfigError("split mode needs one BRIDGE source and one CULVERT source")

    http = cfg.get("http") or {}
    _assert_no_unknown_keys(http, {"timeout", "retry"}, "http", allow_unknown)
    _assert_no_unknown_keys(http.get("timeout") or {}, {"connect", "read"}, "http.timeout", allow_unknown)
    _assert_no_unknown_keys(
        http.get("retry") or {},
        {"max_attempts", "multiplier", "max_wait"},
        "http.retry",
        allow_unknown,
    )
    return cfg
