"""Tests for dynamic loading of import paths."""

import os.path
from decimal import Decimal

import pytest

from recordlib.core.loader import DynamicLoader


class TestDynamicLoader:
    """Test DynamicLoader path parsing and loading."""

    def test_load_with_colon_notation(self):
        """Test 'module:attr' paths."""
        assert DynamicLoader.load_object("decimal:Decimal") is Decimal

    def test_load_with_dotted_notation(self):
        """Test 'module.attr' paths."""
        assert DynamicLoader.load_object("decimal.Decimal") is Decimal

    def test_load_nested_attribute(self):
        """Test attribute chains after the module."""
        assert DynamicLoader.load_object("os:path.join") is os.path.join

    def test_load_longest_module_first(self):
        """Test dotted paths prefer the longest importable module."""
        assert DynamicLoader.load_object("os.path.join") is os.path.join

    def test_load_fixture_schema(self):
        """Test loading a module-level schema."""
        from recordlib.tests.fixtures import shop

        assert DynamicLoader.load_object("recordlib.tests.fixtures.shop.Tag") is shop.Tag

    def test_missing_module(self):
        """Test unknown modules raise ImportError."""
        with pytest.raises(ImportError, match="no_such_module"):
            DynamicLoader.load_object("no_such_module.Thing")

    def test_missing_attribute(self):
        """Test unknown attributes raise ImportError."""
        with pytest.raises(ImportError):
            DynamicLoader.load_object("decimal.NoSuchThing")

    @pytest.mark.parametrize("path", ["Decimal", "decimal:", ":Decimal", "decimal..Decimal"])
    def test_invalid_paths(self, path):
        """Test malformed paths raise ImportError."""
        with pytest.raises(ImportError):
            DynamicLoader.load_object(path)

    def test_try_load_object(self):
        """Test the non-raising variant."""
        assert DynamicLoader.try_load_object("decimal.Decimal") is Decimal
        assert DynamicLoader.try_load_object("no_such_module.Thing") is None
        assert DynamicLoader.try_load_object("Decimal") is None

    def test_parse_path_candidates(self):
        """Test the module/attribute splits tried for a dotted path."""
        infos = DynamicLoader._parse_path("a.b.C")

        assert [(i.module_name, i.attribute_path) for i in infos] == [
            ("a.b", ["C"]),
            ("a", ["b", "C"]),
        ]

    def test_import_failure_inside_module_propagates(self):
        """Test a module failing on a missing dependency is not reported as absent."""
        with pytest.raises(ImportError) as exc_info:
            DynamicLoader.load_object("recordlib.tests.fixtures.broken.Widget")

        assert exc_info.value.name == "recordlib_missing_dependency"

    def test_try_load_object_reraises_broken_module(self):
        """Test the non-raising variant only hides missing paths."""
        with pytest.raises(ModuleNotFoundError, match="recordlib_missing_dependency"):
            DynamicLoader.try_load_object("recordlib.tests.fixtures.broken.Widget")

    def test_missing_submodule_is_absent(self):
        """Test a missing module under an existing package counts as absent."""
        assert DynamicLoader.try_load_object("recordlib.tests.fixtures.no_such_module.Thing") is None
