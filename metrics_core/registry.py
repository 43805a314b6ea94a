"""Registry of collectors.

Most code registers into the process-wide default registry. Private
registries behave identically and are mainly useful in tests.

Every series name a collector exposes is indexed, so two collectors can
never emit the same series. Names are compared ignoring case, so series
that differ only in case collide too. Registration checks all names and
installs them under one lock, which makes it all-or-nothing. Collecting takes only a
snapshot of the registered collectors under that lock and calls them
outside it, so scrapes never block registration or instrumentation.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from metrics_core.errors import DuplicateRegistrationError
from metrics_core.logging.structured import get_logger
from metrics_core.samples import MetricFamilySamples

if TYPE_CHECKING:
    from metrics_core.collector import Collector

logger = get_logger(__name__)


def _index_key(name: str) -> str:
    return name.lower()


class CollectorRegistry:
    """Registry for collectors."""

    def __init__(self) -> None:
        # Insertion ordered, so collection follows registration order
        self._collector_to_names: Dict["Collector", Tuple[str, ...]] = {}
        self._names_to_collectors: Dict[str, "Collector"] = {}
        self._lock = threading.Lock()

    def register(self, collector: "Collector") -> None:
        """Register a collector.

        Raises:
            DuplicateRegistrationError: another collector already exposes one
                of this collector's series names. Nothing is registered.
        """
        names = tuple(collector.exposed_names())
        with self._lock:
            for name in names:
                if _index_key(name) in self._names_to_collectors:
                    logger.warning(
                        "duplicate collector registration rejected",
                        collector=collector.name,
                        series=name,
                    )
                    raise DuplicateRegistrationError(name)
            for name in names:
                self._names_to_collectors[_index_key(name)] = collector
            self._collector_to_names[collector] = names
        logger.debug("collector registered", collector=collector.name, series=list(names))

    def unregister(self, collector: "Collector") -> None:
        """Unregister a collector; no-op if it isn't registered."""
        with self._lock:
            names = self._collector_to_names.pop(collector, None)
            if names is None:
                return
            for name in names:
                self._names_to_collectors.pop(_index_key(name), None)
        logger.debug("collector unregistered", collector=collector.name)

    def collectors(self) -> List["Collector"]:
        """Registered collectors in registration order."""
        with self._lock:
            return list(self._collector_to_names)

    def collect(self) -> List[MetricFamilySamples]:
        """Collect all registered collectors."""
        families: List[MetricFamilySamples] = []
        for collector in self.collectors():
            families.extend(collector.collect())
        return families

    def get_sample_value(
        self, name: str, labels: Optional[Dict[str, str]] = None
    ) -> Optional[float]:
        """Return the value of one sample, or None if there is none.

        Scans a full collection, so it is meant for tests.
        """
        for family in self.collect():
            sample = family.find(name, labels)
            if sample is not None:
                return sample.value
        return None

    def __contains__(self, collector: object) -> bool:
        with self._lock:
            return collector in self._collector_to_names

    def __len__(self) -> int:
        with self._lock:
            return len(self._collector_to_names)


# Process-wide default registry, created once at import and never torn down
REGISTRY = CollectorRegistry()


def get_default_registry() -> CollectorRegistry:
    """Get the default collector registry."""
    return REGISTRY
