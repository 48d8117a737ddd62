"""Load orchestration with per-source fail-soft semantics."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from infradash.common.config_loader import SourceConfig
from infradash.common.errors import PipelineError
from infradash.common.http import HttpClient
from infradash.common.models import RawRecord
from infradash.loader.baseline import baseline_records
from infradash.loader.sources import load_source


@dataclass(frozen=True)
class SourceOutcome:
    name: str
    ok: bool
    record_count: int
    skipped: int = 0
    error_code: str | None = None
    message: str | None = None

    @property
    def used_baseline(self) -> bool:
        return not self.ok

    def describe(self) -> str | None:
        notes = []
        if not self.ok:
            if self.error_code == "UNRECOGNIZED_SHAPE":
                notes.append("unrecognized top-level shape")
            else:
                notes.append("unavailable")
            notes.append("using baseline data")
        if self.skipped:
            notes.append(f"skipped {self.skipped} malformed record(s)")
        if not notes:
            return None
        return f"{self.name}: " + ", ".join(notes)


@dataclass(frozen=True)
class LoadReport:
    records: tuple[RawRecord, ...]
    outcomes: tuple[SourceOutcome, ...]

    @property
    def degraded(self) -> bool:
        return any(outcome.used_baseline for outcome in self.outcomes)

    @property
    def all_failed(self) -> bool:
        return bool(self.outcomes) and all(outcome.used_baseline for outcome in self.outcomes)

    @property
    def skipped(self) -> int:
        return sum(outcome.skipped for outcome in self.outcomes)

    def status_message(self) -> str:
        if self.all_failed:
            head = f"All sources unavailable; showing baseline data ({len(self.records)} structures)"
        else:
            head = f"Loaded {len(self.records)} structures"
        notes = [note for note in (outcome.describe() for outcome in self.outcomes) if note]
        return "; ".join([head, *notes])


def _load_one(source: SourceConfig, client: HttpClient) -> tuple[list[RawRecord], SourceOutcome]:
    try:
        records, skipped = load_source(source, client)
    except PipelineError as exc:
        fallback = baseline_records(source.kind)
        return fallback, SourceOutcome(
            name=source.name,
            ok=False,
            record_count=len(fallback),
            error_code=exc.error_code,
            message=str(exc),
        )
    except Exception as exc:
        fallback = baseline_records(source.kind)
        return fallback, SourceOutcome(
            name=source.name,
            ok=False,
            record_count=len(fallback),
            error_code="UNEXPECTED_ERROR",
            message=str(exc),
        )
    return records, SourceOutcome(name=source.name, ok=True, record_count=len(records), skipped=skipped)


def load_sources(sources: tuple[SourceConfig, ...] | list[SourceConfig], client: HttpClient) -> LoadReport:
    """Fetch every source concurrently and join on all of them.

    A failing source is replaced by its own baseline slice; the others still
    contribute. Records keep configured source order.
    """
    if not sources:
        fallback = baseline_records()
        return LoadReport(records=tuple(fallback), outcomes=())

    with ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix="infradash-load") as pool:
        futures = [pool.submit(_load_one, source, client) for source in sources]
        results = [future.result() for future in futures]

    records: list[RawRecord] = []
    outcomes: list[SourceOutcome] = []
    for source_records, outcome in results:
        records.extend(source_records)
        outcomes.append(outcome)
    return LoadReport(records=tuple(records), outcomes=tuple(outcomes))
