"""CLI entrypoint for the bridge and culvert condition dashboard core."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from infradash.common.config_loader import load_config
from infradash.common.constants import ALL, EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS
from infradash.common.errors import PipelineError
from infradash.common.ids import generate_run_id
from infradash.common.logging import build_logger, log_event
from infradash.pipeline.dashboard import Dashboard
from infradash.pipeline.export import write_export

COMMANDS = ("summary", "filter", "districts", "export", "debug")


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=COMMANDS)
    parser.add_argument("--config", default="./config/dashboard.yml")
    parser.add_argument("--overlay-config", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    parser.add_argument("--district", default=ALL)
    parser.add_argument("--kind", default=ALL)
    parser.add_argument("--condition", default=ALL)
    for attribute in ("length", "width", "span"):
        parser.add_argument(f"--min-{attribute}", type=float, default=None)
        parser.add_argument(f"--max-{attribute}", type=float, default=None)

    parser.add_argument("--output", default="infrastructure_data.json")
    return parser.parse_args(argv)


def _range_change(current, low: float | None, high: float | None) -> dict | None:
    if low is None and high is None:
        return None
    return {
        "min": low if low is not None else current.min,
        "max": high if high is not None else current.max,
    }


def criteria_changes(args: argparse.Namespace, dashboard: Dashboard) -> dict:
    changes: dict = {"district": args.district, "kind": args.kind, "condition": args.condition}
    for attribute, key in (("length", "total_length"), ("width", "total_width"), ("span", "max_clear_span")):
        change = _range_change(
            dashboard.criteria.range_for(key),
            getattr(args, f"min_{attribute}"),
            getattr(args, f"max_{attribute}"),
        )
        if change is not None:
            changes[key] = change
    return changes


def _summary_payload(view) -> dict:
    return {
        "state": view.state,
        "status": view.status,
        "count": len(view.features),
        "criteria": view.criteria.to_dict(),
        "stats": {key: stats.to_dict() for key, stats in view.stats.items()},
    }


def _emit(payload: dict) -> None:
    json.dump(payload, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level)

    overlay = Path(args.overlay_config) if args.overlay_config else None
    config = load_config(Path(args.config), overlay_path=overlay)

    dashboard = Dashboard(config, logger=logger, run_id=run_id)
    try:
        view = dashboard.load()
        if args.command == "summary":
            _emit(_summary_payload(view))
        elif args.command == "filter":
            view = dashboard.update_criteria(criteria_changes(args, dashboard))
            _emit(view.to_dict())
        elif args.command == "districts":
            _emit({"districts": list(view.districts)})
        elif args.command == "export":
            out_path = write_export(Path(args.output), dashboard.export())
            log_event(logger, f"exported to {out_path}", run_id=run_id, stage="export", event="EXPORT", status="ok")
            _emit({"output": str(out_path), "status": view.status})
        elif args.command == "debug":
            _emit(dashboard.debug_summary())
        else:
            raise ValueError(f"Unknown command: {args.command}")
    finally:
        dashboard.close()

    if dashboard.degraded:
        return EXIT_PARTIAL
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except PipelineError as exc:
        sys.stderr.write(f"{exc.error_code}: {exc}\n")
        return EXIT_HARD_FAIL
    except ValueError as exc:
        sys.stderr.write(f"INVALID_ARGUMENT: {exc}\n")
        return EXIT_HARD_FAIL
    except Exception as exc:
        sys.stderr.write(f"UNEXPECTED_ERROR: {exc}\n")
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
