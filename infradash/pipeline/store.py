"""Feature store holding the current canonical collection and district index."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Iterable

from infradash.common.models import CanonicalFeature, FeatureCollection
from infradash.pipeline.normalise import normalise_district

LOADING = "loading"
READY = "ready"
RELOADING = "reloading"
FAILED = "failed"


def build_district_index(features: Iterable[CanonicalFeature]) -> tuple[str, ...]:
    districts = {normalise_district(feature.district_name) for feature in features}
    districts.discard("")
    return tuple(sorted(districts))


@dataclass(frozen=True)
class StoreSnapshot:
    features: FeatureCollection
    districts: tuple[str, ...]
    generation: int
    state: str
    status: str
    degraded: bool


class FeatureStore:
    """Holds one immutable collection at a time.

    Each reload takes a token from :meth:`begin_reload`. Only the most recently
    issued token may commit, so a slow response from a superseded reload can
    never overwrite fresher data.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._features: FeatureCollection = ()
        self._districts: tuple[str, ...] = ()
        self._state = LOADING
        self._status = "Loading data..."
        self._degraded = False
        self._latest_token = 0
        self._generation = 0

    def begin_reload(self) -> int:
        with self._lock:
            self._latest_token += 1
            if self._state != LOADING:
                self._state = RELOADING
            return self._latest_token

    def is_current(self, token: int) -> bool:
        with self._lock:
            return token == self._latest_token

    def commit(self, token: int, features: Iterable[CanonicalFeature], *, status: str, degraded: bool = False) -> bool:
        collection = tuple(features)
        districts = build_district_index(collection)
        with self._lock:
            if token != self._latest_token:
                return False
            self._features = collection
            self._districts = districts
            self._generation = token
            self._state = READY
            self._status = status
            self._degraded = degraded
            return True

    def fail(self, token: int, fallback: Iterable[CanonicalFeature], *, status: str) -> bool:
        """Mark the reload failed, keeping the last good collection or ``fallback``."""
        fallback_collection = tuple(fallback)
        with self._lock:
            if token != self._latest_token:
                return False
            if not self._features:
                self._features = fallback_collection
                self._districts = build_district_index(fallback_collection)
                self._generation = token
                self._degraded = True
            self._state = FAILED
            self._status = status
            return True

    def snapshot(self) -> StoreSnapshot:
        with self._lock:
            return StoreSnapshot(
                features=self._features,
                districts=self._districts,
                generation=self._generation,
                state=self._state,
                status=self._status,
                degraded=self._degraded,
            )

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    @property
    def features(self) -> FeatureCollection:
        with self._lock:
            return self._features

    @property
    def districts(self) -> tuple[str, ...]:
        with self._lock:
            return self._districts
