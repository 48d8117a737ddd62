import copy

import pytest

from infradash.common.errors import ConfigError
from infradash.common.schema import validate_dashboard_config

BASE_CONFIG = {
    "mode": "split",
    "sources": [
        {"name": "bridges", "location": "BRIDGES.json", "kind": "BRIDGE", "field_profile": "bridge"},
        {"name": "culverts", "location": "CULVERTS.json", "kind": "CULVERT", "field_profile": "culvert"},
    ],
}


def _config(**changes):
    cfg = copy.deepcopy(BASE_CONFIG)
    cfg.update(changes)
    return cfg


def test_validate_dashboard_config_accepts_valid_shape():
    validated = validate_dashboard_config(_config())
    assert validated["mode"] == "split"


def test_validate_dashboard_config_rejects_unknown_key_by_default():
    with pytest.raises(ConfigError):
        validate_dashboard_config(_config(unexpected=True))


def test_validate_dashboard_config_allows_unknown_when_enabled():
    validate_dashboard_config(_config(extra=1), allow_unknown=True)


def test_split_mode_needs_one_source_per_kind():
    cfg = _config()
    cfg["sources"][1]["kind"] = "BRIDGE"
    with pytest.raises(ConfigError):
        validate_dashboard_config(cfg)

    with pytest.raises(ConfigError):
        validate_dashboard_config(_config(sources=BASE_CONFIG["sources"][:1]))


def test_combined_mode_rejects_preset_kind():
    cfg = _config(mode="combined", sources=[{"name": "all", "location": "ALL.json", "kind": "BRIDGE"}])
    with pytest.raises(ConfigError):
        validate_dashboard_config(cfg)

    okay = _config(mode="combined", sources=[{"name": "all", "location": "ALL.json"}])
    assert validate_dashboard_config(okay)["sources"][0]["name"] == "all"


def test_field_overrides_must_name_canonical_fields():
    cfg = _config()
    cfg["sources"][0]["fields"] = {"total_length": ["LEN_M"]}
    validate_dashboard_config(cfg)

    cfg["sources"][0]["fields"] = {"colour": ["COLOR"]}
    with pytest.raises(ConfigError):
        validate_dashboard_config(cfg)


def test_unknown_mode_and_non_mapping_are_rejected():
    with pytest.raises(ConfigError):
        validate_dashboard_config(_config(mode="triple"))
    with pytest.raises(ConfigError):
        validate_dashboard_config(None)
