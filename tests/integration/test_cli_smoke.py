import json
from pathlib import Path

import pytest

from infradash.cli import main, parse_args, run_command
from infradash.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from infradash.common.fs import write_json


def _write_config(tmp_path: Path) -> Path:
    config_path = tmp_path / "dashboard.yml"
    config_path.write_text(
        "\n".join(
            [
                "mode: split",
                "sources:",
                "  - name: bridges",
                f"    location: {tmp_path / 'BRIDGES.json'}",
                "    kind: BRIDGE",
                "  - name: culverts",
                f"    location: {tmp_path / 'CULVERTS.json'}",
                "    kind: CULVERT",
                "",
            ]
        ),
        encoding="utf-8",
    )
    return config_path


def _write_inventories(tmp_path: Path) -> None:
    write_json(
        tmp_path / "BRIDGES.json",
        [
            {"BRIDGEID": "1B", "DISTRICT": "Thatta", "TOTAL_LENG": 30, "TOTAL_WIDT": 8, "Rating": "GOOD"},
            {"BRIDGEID": "2B", "DISTRICT": "Badin", "TOTAL_LENG": 12, "TOTAL_WIDT": 6, "Rating": "POOR"},
        ],
    )
    write_json(
        tmp_path / "CULVERTS.json",
        {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "geometry": {"type": "Point", "coordinates": [68.0, 24.7]},
                    "properties": {"CULVERET_I": "3C", "DISTRICT": "thatta", "MAX_CLEAR_": 6, "Rating": "FAIR"},
                }
            ],
        },
    )


@pytest.mark.integration
def test_cli_summary_reports_full_collection(tmp_path: Path, capsys):
    _write_inventories(tmp_path)
    args = parse_args(["summary", "--config", str(_write_config(tmp_path)), "--run-id", "run-test"])

    exit_code = run_command(args)

    assert exit_code == EXIT_SUCCESS
    payload = json.loads(capsys.readouterr().out)
    assert payload["count"] == 3
    assert payload["stats"]["BRIDGE"]["count"] == 2
    assert payload["stats"]["all"]["conditions"]["FAIR"] == 1


@pytest.mark.integration
def test_cli_filter_applies_district_and_kind(tmp_path: Path, capsys):
    _write_inventories(tmp_path)
    args = parse_args(
        ["filter", "--config", str(_write_config(tmp_path)), "--district", "THATTA", "--kind", "BRIDGE"]
    )

    assert run_command(args) == EXIT_SUCCESS

    payload = json.loads(capsys.readouterr().out)
    ids = [feature["properties"]["structureId"] for feature in payload["collection"]["features"]]
    assert ids == ["1B"]
    assert payload["criteria"]["district"] == "THATTA"


@pytest.mark.integration
def test_cli_export_writes_bundle(tmp_path: Path, capsys):
    _write_inventories(tmp_path)
    output = tmp_path / "out" / "infrastructure_data.json"
    args = parse_args(["export", "--config", str(_write_config(tmp_path)), "--output", str(output)])

    assert run_command(args) == EXIT_SUCCESS
    capsys.readouterr()

    document = json.loads(output.read_text(encoding="utf-8"))
    assert document["metadata"]["totalBridges"] == 2
    assert document["metadata"]["totalCulverts"] == 1


@pytest.mark.integration
def test_cli_missing_sources_exit_partial_with_baseline(tmp_path: Path, capsys):
    args = parse_args(["districts", "--config", str(_write_config(tmp_path))])

    assert run_command(args) == EXIT_PARTIAL

    payload = json.loads(capsys.readouterr().out)
    assert payload["districts"] == ["KARACHI", "LAHORE", "MULTAN", "SUJAWAL"]


@pytest.mark.integration
def test_cli_missing_config_is_hard_failure(tmp_path: Path, capsys):
    assert main(["summary", "--config", str(tmp_path / "absent.yml")]) == EXIT_HARD_FAIL
    assert "CONFIG_ERROR" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_unknown_kind_is_hard_failure(tmp_path: Path, capsys):
    _write_inventories(tmp_path)
    code = main(["filter", "--config", str(_write_config(tmp_path)), "--kind", "TUNNEL"])

    assert code == EXIT_HARD_FAIL
    assert "INVALID_ARGUMENT" in capsys.readouterr().err


@pytest.mark.integration
def test_cli_unexpected_error_is_hard_failure(tmp_path: Path, capsys):
    _write_inventories(tmp_path)
    output_dir = tmp_path / "already_a_directory"
    output_dir.mkdir()

    code = main(["export", "--config", str(_write_config(tmp_path)), "--output", str(output_dir)])

    assert code == EXIT_HARD_FAIL
    assert "UNEXPECTED_ERROR" in capsys.readouterr().err
