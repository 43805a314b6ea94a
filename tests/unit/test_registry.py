"""Tests for CollectorRegistry."""

import pytest

from metrics_core.counter import Counter
from metrics_core.errors import DuplicateRegistrationError, ErrorCode
from metrics_core.gauge import Gauge
from metrics_core.histogram import Histogram
from metrics_core.registry import REGISTRY, CollectorRegistry, get_default_registry


class TestRegister:
    """Tests for CollectorRegistry.register."""

    def test_register(self, registry):
        """Test a registered collector is reported."""
        counter = Counter("x", "help")

        registry.register(counter)

        assert registry.collectors() == [counter]
        assert counter in registry

    def test_duplicate_name_rejected(self, registry):
        """Test a second collector exposing the same name is rejected."""
        registry.register(Counter("x", "help"))

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            registry.register(Gauge("x", "other help"))

        assert exc_info.value.series_name == "x"
        assert exc_info.value.code == ErrorCode.DUPLICATE_REGISTRATION
        assert len(registry) == 1

    def test_names_differing_in_case_collide(self, registry):
        """Test series names are compared ignoring case."""
        registry.register(Counter("requests_total", "help"))
        registry.register(Histogram("h", "help"))

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            registry.register(Gauge("Requests_Total", "help"))
        assert exc_info.value.series_name == "Requests_Total"

        with pytest.raises(DuplicateRegistrationError):
            registry.register(Gauge("H_SUM", "help"))
        assert len(registry) == 2

    def test_unregister_frees_names_ignoring_case(self, registry):
        """Test unregistering frees the names for any casing."""
        counter = Counter("x", "help")
        registry.register(counter)
        registry.unregister(counter)

        registry.register(Gauge("X", "help"))

        assert len(registry) == 1

    def test_same_collector_twice_rejected(self, registry):
        """Test registering one collector twice fails."""
        counter = Counter("x", "help")
        registry.register(counter)

        with pytest.raises(DuplicateRegistrationError):
            registry.register(counter)

    def test_histogram_suffix_collision(self, registry):
        """Test a histogram's derived names collide with other collectors."""
        registry.register(Histogram("h", "help"))

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            registry.register(Gauge("h_sum", "help"))

        assert exc_info.value.series_name == "h_sum"

    def test_registration_is_all_or_nothing(self, registry):
        """Test a rejected histogram indexes none of its names."""
        registry.register(Gauge("h_count", "help"))

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            registry.register(Histogram("h", "help"))
        assert exc_info.value.series_name == "h_count"

        # "h", "h_sum" and "h_bucket" remain free
        registry.register(Counter("h", "help"))
        registry.register(Counter("h_sum", "help"))
        registry.register(Counter("h_bucket", "help"))
        assert len(registry) == 4

    def test_builder_register(self, registry):
        """Test the builder registers into the given registry."""
        counter = Counter.build("jobs_total", "Jobs").register(registry)
        assert registry.collectors() == [counter]


class TestUnregister:
    """Tests for CollectorRegistry.unregister."""

    def test_unregister_frees_names(self, registry):
        """Test all names of an unregistered collector become free."""
        histogram = Histogram("h", "help")
        registry.register(histogram)

        registry.unregister(histogram)

        assert len(registry) == 0
        registry.register(Gauge("h_bucket", "help"))

    def test_unregister_unknown_is_noop(self, registry):
        """Test unregistering an unknown collector does nothing."""
        registry.register(Counter("x", "help"))

        registry.unregister(Counter("y", "help"))

        assert len(registry) == 1

    def test_unregister_does_not_free_other_names(self, registry):
        """Test an unregistered lookalike does not release a registered name."""
        registered = Counter("x", "help")
        registry.register(registered)

        registry.unregister(Counter("x", "help"))

        with pytest.raises(DuplicateRegistrationError):
            registry.register(Gauge("x", "help"))


class TestCollect:
    """Tests for CollectorRegistry.collect."""

    def test_registration_order(self, registry):
        """Test families follow registration order."""
        for name in ("b", "a", "c"):
            registry.register(Counter(name, "help"))

        assert [f.name for f in registry.collect()] == ["b", "a", "c"]

    def test_empty(self, registry):
        """Test an empty registry collects nothing."""
        assert registry.collect() == []

    def test_collect_is_idempotent(self, registry):
        """Test two collects without mutation are equal."""
        counter = Counter("requests_total", "Requests", ["method"])
        histogram = Histogram("latency_seconds", "Latency", buckets=[1, 2])
        registry.register(counter)
        registry.register(histogram)
        counter.labels("GET").inc(2)
        histogram.observe(1.5)

        assert registry.collect() == registry.collect()

    def test_collector_registered_during_collect_is_absent(self, registry):
        """Test collection works over a snapshot of registered collectors."""
        late = Counter("late_total", "Late")

        class RegisteringGauge(Gauge):
            def collect(self):
                registry.register(late)
                return super().collect()

        registry.register(RegisteringGauge("early", "Early"))

        first = registry.collect()
        second = registry.collect()

        assert [f.name for f in first] == ["early"]
        assert [f.name for f in second] == ["early", "late_total"]

    def test_get_sample_value(self, registry):
        """Test looking up one sample value."""
        counter = Counter("requests_total", "Requests", ["method"])
        registry.register(counter)
        counter.labels("GET").inc(4)

        assert registry.get_sample_value("requests_total", {"method": "GET"}) == 4
        assert registry.get_sample_value("requests_total", {"method": "PUT"}) is None
        assert registry.get_sample_value("missing") is None


class TestDefaultRegistry:
    """Tests for the process-wide default registry."""

    def test_singleton(self):
        """Test the default registry is one shared instance."""
        assert get_default_registry() is REGISTRY
        assert isinstance(REGISTRY, CollectorRegistry)

    def test_builder_registers_into_default(self):
        """Test register() without a registry uses the default."""
        counter = Counter.build("default_registry_test_total", "help").register()
        try:
            assert counter in get_default_registry()
        finally:
            get_default_registry().unregister(counter)

    def test_private_registries_are_independent(self, registry):
        """Test a private registry does not see default registrations."""
        other = CollectorRegistry()
        registry.register(Counter("x", "help"))
        other.register(Counter("x", "help"))

        assert len(registry) == 1
        assert len(other) == 1
