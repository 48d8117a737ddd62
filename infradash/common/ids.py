"""Run identifier helpers."""

from __future__ import annotations

from infradash.common.time_utils import utc_now


def generate_run_id() -> str:
    # Lexically sortable so log files list in run order.
    return utc_now().strftime("run-%Y%m%dT%H%M%S%fZ")
