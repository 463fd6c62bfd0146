"""Tests for the registry system."""

import threading

import pytest

from recordlib.core.errors import DuplicateSchema
from recordlib.core.registry import BaseRegistry, SchemaRegistry, schema_registry
from recordlib.core.settings import RecordlibSettings, set_settings


class TestBaseRegistry:
    """Test the abstract registry interface."""

    def test_cannot_instantiate_abstract_registry(self):
        """Test BaseRegistry is abstract."""
        with pytest.raises(TypeError):
            BaseRegistry()

    def test_schema_registry_implements_interface(self):
        """Test SchemaRegistry is a BaseRegistry."""
        assert isinstance(SchemaRegistry(), BaseRegistry)
        assert isinstance(schema_registry, SchemaRegistry)


class TestSchemaRegistry:
    """Test SchemaRegistry operations."""

    def test_register_and_get(self, registry):
        """Test basic registration and retrieval."""
        obj = object()
        registry.register("shop.Order", obj)

        assert registry.get("shop.Order") is obj
        assert registry.contains("shop.Order")
        assert len(registry) == 1

    def test_get_missing_raises_key_error(self, registry):
        """Test retrieving an unknown name."""
        with pytest.raises(KeyError, match="shop.Missing"):
            registry.get("shop.Missing")

    def test_get_with_expected_type(self, registry):
        """Test type checking on retrieval."""
        registry.register("answer", 42)

        assert registry.get("answer", expected_type=int) == 42
        with pytest.raises(TypeError):
            registry.get("answer", expected_type=str)

    def test_lookup_returns_none_for_unknown(self, registry):
        """Test non-raising lookup."""
        assert registry.lookup("nothing") is None

    def test_metadata(self, registry):
        """Test metadata is stored with the registration."""
        registry.register("shop.Order", object(), namespace="shop")

        assert registry.get_metadata("shop.Order") == {"namespace": "shop"}

    def test_list_and_namespace_filter(self, registry):
        """Test listing names, optionally by namespace."""
        registry.register("shop.Order", object())
        registry.register("shop.Customer", object())
        registry.register("shop.billing.Invoice", object())
        registry.register("Root", object())

        assert registry.list() == ["Root", "shop.Customer", "shop.Order", "shop.billing.Invoice"]
        assert registry.list({"namespace": "shop"}) == ["shop.Customer", "shop.Order"]
        assert registry.list({"namespace": ""}) == ["Root"]

    def test_remove(self, registry):
        """Test removing registrations."""
        registry.register("shop.Order", object())

        assert registry.remove("shop.Order") is True
        assert registry.remove("shop.Order") is False
        assert not registry.contains("shop.Order")

    def test_clear(self, registry):
        """Test clearing the registry."""
        registry.register("a", object())
        registry.register("b", object())
        registry.clear()

        assert registry.list() == []

    def test_redefinition_replaces_by_default(self, registry):
        """Test a second registration replaces the first."""
        first, second = object(), object()
        registry.register("shop.Order", first)
        registry.register("shop.Order", second)

        assert registry.get("shop.Order") is second

    def test_redefinition_forbidden(self):
        """Test DuplicateSchema when redefinition is disabled."""
        registry = SchemaRegistry(allow_redefinition=False)
        registry.register("shop.Order", object())

        with pytest.raises(DuplicateSchema) as exc_info:
            registry.register("shop.Order", object())

        assert exc_info.value.registry_context.qualified_name == "shop.Order"

    def test_reregistering_same_object_is_allowed(self):
        """Test registering the identical object twice is not a conflict."""
        registry = SchemaRegistry(allow_redefinition=False)
        obj = object()
        registry.register("shop.Order", obj)
        registry.register("shop.Order", obj)

        assert registry.get("shop.Order") is obj

    def test_redefinition_policy_follows_settings(self):
        """Test the default policy comes from settings."""
        set_settings(RecordlibSettings(allow_schema_redefinition=False))
        registry = SchemaRegistry()
        registry.register("shop.Order", object())

        assert registry.allow_redefinition is False
        with pytest.raises(DuplicateSchema):
            registry.register("shop.Order", object())

    def test_concurrent_registration(self, registry):
        """Test registrations from many threads are all kept."""

        def worker(index):
            for j in range(20):
                registry.register(f"ns{index}.Schema{j}", object())

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(registry) == 160
