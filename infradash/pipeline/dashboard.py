"""Dashboard orchestration: load, reload, filter, aggregate, notify sinks."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from infradash.common.config_loader import DashboardConfig, SourceConfig
from infradash.common.constants import BRIDGE, CULVERT, NUMERIC_ATTRIBUTES
from infradash.common.http import HttpClient
from infradash.common.logging import log_event
from infradash.common.models import AggregateStats, FeatureCollection, RawRecord, to_feature_collection
from infradash.loader.baseline import baseline_records
from infradash.loader.runner import LoadReport, load_sources
from infradash.pipeline.aggregate import compute_range_bounds, summarize
from infradash.pipeline.classify import classify_features
from infradash.pipeline.export import build_export_document
from infradash.pipeline.filters import FilterCriteria, Range, filter_features, parse_criteria
from infradash.pipeline.normalise import normalise_records
from infradash.pipeline.store import FeatureStore, StoreSnapshot

Loader = Callable[[tuple[SourceConfig, ...]], LoadReport]


@dataclass(frozen=True)
class DashboardView:
    features: FeatureCollection
    stats: dict[str, AggregateStats]
    districts: tuple[str, ...]
    criteria: FilterCriteria
    state: str
    status: str
    generation: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "status": self.status,
            "generation": self.generation,
            "criteria": self.criteria.to_dict(),
            "districts": list(self.districts),
            "stats": {key: stats.to_dict() for key, stats in self.stats.items()},
            "collection": to_feature_collection(self.features),
        }


Sink = Callable[[DashboardView], None]


def build_collection(
    records: Iterable[RawRecord],
    overrides_by_source: Mapping[str, Mapping[str, list[str]]] | None = None,
) -> FeatureCollection:
    return classify_features(normalise_records(records, overrides_by_source))


def initial_criteria(features: FeatureCollection) -> FilterCriteria:
    return FilterCriteria(**compute_range_bounds(features))


def rebase_criteria(criteria: FilterCriteria, features: FeatureCollection) -> FilterCriteria:
    """Resize each range maximum to ``features``; other selections are kept."""
    bounds = compute_range_bounds(features)
    return criteria.with_changes(
        **{
            attribute: Range(min=criteria.range_for(attribute).min, max=bounds[attribute].max)
            for attribute in NUMERIC_ATTRIBUTES
        }
    )


class Dashboard:
    """Owns the store, the active criteria and the render sinks.

    Reloads may run on several threads. A store commit and the criteria that
    go with it are applied under one lock, so a superseded reload never
    leaves its criteria behind.
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        client: HttpClient | None = None,
        loader: Loader | None = None,
        store: FeatureStore | None = None,
        logger: logging.Logger | None = None,
        run_id: str | None = None,
    ) -> None:
        self.config = config
        self.client = client or HttpClient.from_config(config.http)
        self.store = store or FeatureStore()
        self.logger = logger or logging.getLogger("infradash")
        self.run_id = run_id
        self.criteria = FilterCriteria()
        self.last_report: LoadReport | None = None
        self._loader = loader or (lambda sources: load_sources(sources, self.client))
        self._sinks: list[Sink] = []
        self._lock = threading.Lock()
        self._overrides = {source.name: source.fields for source in config.sources if source.fields}

    def add_sink(self, sink: Sink) -> None:
        self._sinks.append(sink)

    def close(self) -> None:
        self.client.close()

    def _log(self, message: str, **fields: Any) -> None:
        log_event(self.logger, message, run_id=self.run_id, **fields)

    def load(self) -> DashboardView:
        return self.reload()

    def reload(self) -> DashboardView:
        token = self.store.begin_reload()
        self._log("load start", stage="load", event="LOAD_START", status="ok", generation=token)

        try:
            report = self._loader(self.config.sources)
            features = build_collection(report.records, self._overrides)
        except Exception as exc:
            status = f"Reload failed ({exc}); showing last good data"
            fallback = build_collection(baseline_records())
            with self._lock:
                failed = self.store.fail(token, fallback, status=status)
                if failed and self.last_report is None:
                    self.criteria = initial_criteria(self.store.features)
            if failed:
                self._log(
                    "reload failed",
                    stage="load",
                    event="RELOAD_FAIL",
                    status="error",
                    generation=token,
                    error_code=getattr(exc, "error_code", "UNEXPECTED_ERROR"),
                )
            return self.refresh()

        for outcome in report.outcomes:
            self._log(
                outcome.message or "source loaded",
                stage="load",
                source=outcome.name,
                event="SOURCE_OK" if outcome.ok else "SOURCE_FALLBACK",
                status="ok" if outcome.ok else "degraded",
                generation=token,
                rows_out=outcome.record_count,
                error_code=outcome.error_code,
            )

        with self._lock:
            committed = self.store.commit(token, features, status=report.status_message(), degraded=report.degraded)
            if committed:
                if self.last_report is None:
                    self.criteria = initial_criteria(features)
                else:
                    self.criteria = rebase_criteria(self.criteria, features)
                self.last_report = report
        if not committed:
            self._log("superseded reload discarded", stage="load", event="RELOAD_STALE", status="skipped", generation=token)
            return self.view()

        self._log(
            "load end",
            stage="load",
            event="LOAD_END",
            status="degraded" if report.degraded else "ok",
            generation=token,
            rows_in=len(report.records),
            rows_out=len(features),
        )
        return self.refresh()

    @property
    def degraded(self) -> bool:
        return self.store.snapshot().degraded

    def set_criteria(self, criteria: FilterCriteria) -> DashboardView:
        with self._lock:
            self.criteria = criteria
        return self.refresh()

    def update_criteria(self, changes: Mapping[str, Any] | None = None, **kwargs: Any) -> DashboardView:
        payload = dict(changes or {})
        payload.update(kwargs)
        return self.set_criteria(parse_criteria(payload, base=self.criteria))

    def reset_criteria(self) -> DashboardView:
        return self.set_criteria(initial_criteria(self.store.features))

    def _build_view(self, snapshot: StoreSnapshot) -> DashboardView:
        filtered = filter_features(snapshot.features, self.criteria)
        return DashboardView(
            features=filtered,
            stats=summarize(filtered),
            districts=snapshot.districts,
            criteria=self.criteria,
            state=snapshot.state,
            status=snapshot.status,
            generation=snapshot.generation,
        )

    def view(self) -> DashboardView:
        return self._build_view(self.store.snapshot())

    def refresh(self) -> DashboardView:
        """Run one full filter+aggregate pass and hand the result to every sink."""
        snapshot = self.store.snapshot()
        view = self._build_view(snapshot)
        self._log(
            "filter applied",
            stage="filter",
            event="FILTER",
            status="ok",
            generation=snapshot.generation,
            rows_in=len(snapshot.features),
            rows_out=len(view.features),
        )
        for sink in self._sinks:
            sink(view)
        return view

    def export(self) -> dict[str, Any]:
        return build_export_document(self.store.features)

    def debug_summary(self) -> dict[str, Any]:
        features = self.store.features
        bridges = [feature for feature in features if feature.structure_kind == BRIDGE]
        culverts = [feature for feature in features if feature.structure_kind == CULVERT]
        return {
            "bridges": len(bridges),
            "culverts": len(culverts),
            "others": len(features) - len(bridges) - len(culverts),
            "total": len(features),
            "districts": list(self.store.districts),
            "first_bridge": bridges[0].to_properties() if bridges else None,
            "first_culvert": culverts[0].to_properties() if culverts else None,
        }
