"""Caller-side memoization of computed rating views."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Hashable
from typing import Any, Generic, TypeVar

from domain.ratings.config import RatingConfig

logger = logging.getLogger(__name__)

V = TypeVar("V")


class RatingViewCache(Generic[V]):
    """Views computed for one (result set version, configuration) generation.

    Every view belongs to the current generation. When either the result set
    version or the configuration fingerprint changes, the whole generation is
    replaced at once, so readers never mix fresh and stale views.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._generation: tuple[Hashable, tuple[Any, ...]] | None = None
        self._views: dict[Hashable, V] = {}

    def get_or_compute(
        self,
        view: Hashable,
        *,
        result_set_version: Hashable,
        config: RatingConfig,
        compute: Callable[[], V],
    ) -> V:
        """Return the cached view, computing it outside the lock on a miss.

        Views of one generation may be computed concurrently. A value computed
        for a generation that was replaced meanwhile is returned but not stored.
        """
        generation = (result_set_version, config.fingerprint())
        with self._lock:
            if generation != self._generation:
                if self._generation is not None:
                    logger.debug(
                        "Rating view generation changed; dropping %d cached views",
                        len(self._views),
                    )
                self._generation = generation
                self._views = {}
            elif view in self._views:
                return self._views[view]

        value = compute()

        with self._lock:
            if generation != self._generation:
                logger.debug("Discarding view %r computed for a replaced generation", view)
                return value
            return self._views.setdefault(view, value)

    def invalidate(self) -> None:
        """Drop every cached view."""
        with self._lock:
            self._generation = None
            self._views = {}

    def cached_views(self) -> list[Hashable]:
        with self._lock:
            return list(self._views)


__all__ = ["RatingViewCache"]
