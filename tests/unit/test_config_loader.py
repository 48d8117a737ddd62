from pathlib import Path

import pytest

from infradash.common.config_loader import load_config
from infradash.common.constants import BRIDGE, CULVERT
from infradash.common.errors import ConfigError

SPLIT_YAML = """mode: split
sources:
  - name: bridges
    location: data/BRIDGES.json
    kind: BRIDGE
  - name: culverts
    location: data/CULVERTS.json
    kind: CULVERT
"""


def test_load_config_from_repo_config_dir():
    config = load_config(Path("config/dashboard.yml"))

    assert config.mode == "split"
    assert [(s.name, s.kind, s.field_profile) for s in config.sources] == [
        ("bridges", BRIDGE, "bridge"),
        ("culverts", CULVERT, "culvert"),
    ]
    assert config.http["retry"]["max_attempts"] == 3


def test_load_combined_config_from_repo_config_dir():
    config = load_config(Path("config/combined.yml"))

    assert config.mode == "combined"
    assert config.sources[0].kind is None
    assert config.sources[0].field_profile == "combined"


def test_field_profile_defaults_from_kind(tmp_path: Path):
    path = tmp_path / "dashboard.yml"
    path.write_text(SPLIT_YAML, encoding="utf-8")

    config = load_config(path)

    assert [s.field_profile for s in config.sources] == ["bridge", "culvert"]
    assert config.http == {}


def test_load_config_applies_overlay_values(tmp_path: Path):
    base = tmp_path / "dashboard.yml"
    overlay = tmp_path / "live.yml"
    base.write_text(SPLIT_YAML, encoding="utf-8")
    overlay.write_text(
        """http:
  retry:
    max_attempts: 5
""",
        encoding="utf-8",
    )

    config = load_config(base, overlay_path=overlay)

    assert config.http["retry"]["max_attempts"] == 5
    assert config.sources[0].location == "data/BRIDGES.json"


def test_load_config_ignores_empty_overlay_file(tmp_path: Path):
    base = tmp_path / "dashboard.yml"
    overlay = tmp_path / "empty.yml"
    base.write_text(SPLIT_YAML, encoding="utf-8")
    overlay.write_text("", encoding="utf-8")

    config = load_config(base, overlay_path=overlay)

    assert len(config.sources) == 2


def test_load_config_missing_file_raises_config_error(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yml")


def test_split_sources_are_ordered_bridges_first(tmp_path: Path):
    path = tmp_path / "dashboard.yml"
    path.write_text(
        """mode: split
sources:
  - name: culverts
    location: data/CULVERTS.json
    kind: CULVERT
  - name: bridges
    location: data/BRIDGES.json
    kind: BRIDGE
""",
        encoding="utf-8",
    )

    config = load_config(path)

    assert [s.name for s in config.sources] == ["bridges", "culverts"]
