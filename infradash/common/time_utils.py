"""UTC-focused helpers for run and export metadata."""

from __future__ import annotations

from datetime import datetime, timezone


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_timestamp_iso(moment: datetime | None = None) -> str:
    return (moment or utc_now()).isoformat(timespec="milliseconds")
