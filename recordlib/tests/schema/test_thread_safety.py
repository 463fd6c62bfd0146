"""Tests for concurrent parsing and reference resolution."""

import threading
import time

import pytest

from recordlib.schema import ResolutionCache, SchemaBuilder

THREADS = 10
PARSES_PER_THREAD = 5


class TestConcurrentParsing:
    """Test parsing from many threads at once."""

    def test_concurrent_first_resolution(self, registry):
        """Test threads racing on an unresolved reference all succeed."""
        order = SchemaBuilder("Order", namespace="shop", registry=registry)
        order.attribute("id", int)
        order.attribute("customer", "Customer")
        order_schema = order.build()
        customer = SchemaBuilder("Customer", namespace="shop", registry=registry).attribute("name", str).build()

        barrier = threading.Barrier(THREADS)
        results = []
        errors = []
        lock = threading.Lock()

        def worker(worker_id):
            barrier.wait()
            for i in range(PARSES_PER_THREAD):
                try:
                    record = order_schema.parse({"id": str(i), "customer": {"name": f"c{worker_id}"}})
                except Exception as e:
                    with lock:
                        errors.append(e)
                else:
                    with lock:
                        results.append(record)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        assert len(results) == THREADS * PARSES_PER_THREAD
        assert all(customer.is_instance(record.customer) for record in results)
        assert order_schema.cache.get("Customer") is customer


class TestResolutionCache:
    """Test the per-schema resolution cache."""

    def test_get_or_resolve_caches(self):
        """Test the resolver runs once per key."""
        cache = ResolutionCache()
        calls = []

        def resolve():
            calls.append(1)
            return "value"

        assert cache.get_or_resolve("a", resolve) == "value"
        assert cache.get_or_resolve("a", resolve) == "value"
        assert calls == [1]
        assert "a" in cache
        assert len(cache) == 1

    def test_failures_are_not_cached(self):
        """Test a raising resolver leaves no entry."""
        cache = ResolutionCache()

        def fail():
            raise LookupError("missing")

        with pytest.raises(LookupError, match="missing"):
            cache.get_or_resolve("a", fail)

        assert "a" not in cache
        assert cache.get_or_resolve("a", lambda: 1) == 1

    def test_concurrent_get_or_resolve(self):
        """Test racing threads observe a single resolved value."""
        cache = ResolutionCache()
        barrier = threading.Barrier(THREADS)
        calls = []
        seen = []
        lock = threading.Lock()

        def resolve():
            calls.append(1)
            time.sleep(0.01)
            return object()

        def worker():
            barrier.wait()
            value = cache.get_or_resolve("key", resolve)
            with lock:
                seen.append(value)

        threads = [threading.Thread(target=worker) for _ in range(THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len(seen) == THREADS
        assert all(value is seen[0] for value in seen)

    def test_clear(self):
        """Test clearing drops every entry."""
        cache = ResolutionCache()
        cache.get_or_resolve("a", lambda: 1)

        cache.clear()

        assert len(cache) == 0
        assert cache.get("a") is None
