from __future__ import annotations

import threading
from pathlib import Path

import pytest

from infradash.common.config_loader import SourceConfig
from infradash.common.constants import BASELINE_SOURCE, BRIDGE, CULVERT
from infradash.common.fs import write_json
from infradash.common.http import HttpClient
from infradash.loader import runner


def _sources(tmp_path: Path) -> tuple[SourceConfig, SourceConfig]:
    return (
        SourceConfig("bridges", str(tmp_path / "BRIDGES.json"), BRIDGE, "bridge", {}),
        SourceConfig("culverts", str(tmp_path / "CULVERTS.json"), CULVERT, "culvert", {}),
    )


@pytest.mark.integration
def test_failing_source_falls_back_to_its_own_baseline_slice(tmp_path: Path):
    write_json(tmp_path / "BRIDGES.json", [{"BRIDGEID": "1B", "Rating": "GOOD"}, {"BRIDGEID": "2B"}])

    report = runner.load_sources(_sources(tmp_path), HttpClient())

    assert [outcome.ok for outcome in report.outcomes] == [True, False]
    assert report.degraded is True
    assert report.all_failed is False
    assert [r.source_name for r in report.records] == ["bridges", "bridges", BASELINE_SOURCE, BASELINE_SOURCE]
    assert {r.kind_hint for r in report.records[2:]} == {CULVERT}
    assert report.outcomes[1].error_code == "SOURCE_FETCH_ERROR"
    assert "culverts: unavailable, using baseline data" in report.status_message()


@pytest.mark.integration
def test_all_sources_failing_yields_full_baseline(tmp_path: Path):
    report = runner.load_sources(_sources(tmp_path), HttpClient())

    assert report.all_failed is True
    assert len(report.records) == 4
    assert report.status_message().startswith("All sources unavailable; showing baseline data (4 structures)")


@pytest.mark.integration
def test_unrecognised_shape_is_reported_distinctly(tmp_path: Path):
    write_json(tmp_path / "BRIDGES.json", {"rows": [1, 2, 3]})
    write_json(tmp_path / "CULVERTS.json", {"type": "FeatureCollection", "features": [{"properties": {}}, 5]})

    report = runner.load_sources(_sources(tmp_path), HttpClient())

    assert report.outcomes[0].error_code == "UNRECOGNIZED_SHAPE"
    assert report.outcomes[1].ok is True
    assert report.outcomes[1].skipped == 1
    message = report.status_message()
    assert "bridges: unrecognized top-level shape, using baseline data" in message
    assert "culverts: skipped 1 malformed record(s)" in message


@pytest.mark.integration
def test_sources_are_fetched_concurrently(monkeypatch, tmp_path: Path):
    barrier = threading.Barrier(2, timeout=5)

    def fake_load_source(source, _client):
        # Both workers must be in flight at once for the barrier to release.
        barrier.wait()
        return [], 0

    monkeypatch.setattr(runner, "load_source", fake_load_source)

    report = runner.load_sources(_sources(tmp_path), HttpClient())

    assert [outcome.ok for outcome in report.outcomes] == [True, True]


@pytest.mark.integration
def test_unexpected_error_still_degrades_to_baseline(monkeypatch, tmp_path: Path):
    def explode(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(runner, "load_source", explode)

    report = runner.load_sources(_sources(tmp_path), HttpClient())

    assert {outcome.error_code for outcome in report.outcomes} == {"UNEXPECTED_ERROR"}
    assert len(report.records) == 4
