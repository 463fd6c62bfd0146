"""Tests for schema definition operations."""

from decimal import Decimal

import pytest

from recordlib.core.errors import RecordConstructionError, ValueTypeMismatch
from recordlib.schema import SELF, SchemaBuilder, SchemaSignature


@pytest.fixture
def book(registry):
    author = SchemaBuilder("Author", namespace="library", registry=registry)
    author.attribute("name", str, nullable=False)
    author_schema = author.build()

    builder = SchemaBuilder("Book", namespace="library", registry=registry)
    builder.attribute("title", str, nullable=False)
    builder.attribute("pages", int)
    builder.attribute("authors", [author_schema], default=[])
    builder.attribute("price", Decimal, default=Decimal("0"))
    builder.optional_attribute("subtitle", str)
    builder.attribute("in_print", bool, default=True)
    return builder.build()


class TestNew:
    """Test direct construction."""

    def test_new_bypasses_coercion(self, book):
        """Test values are stored as given."""
        record = book.new(title="Dune", pages="412")

        assert record.pages == "412"

    def test_new_fills_defaults(self, book):
        """Test omitted attributes with defaults or optional ones."""
        record = book.new(title="Dune", pages=412)

        assert record.subtitle is None
        assert record.authors == []
        assert record.price == Decimal("0")
        assert record.in_print is True

    def test_new_missing_required(self, book):
        """Test required attributes must be supplied."""
        with pytest.raises(RecordConstructionError) as exc_info:
            book.new(title="Dune")

        assert "pages" in str(exc_info.value)

    def test_new_unknown_field(self, book):
        """Test unknown fields are rejected."""
        with pytest.raises(RecordConstructionError) as exc_info:
            book.new(title="Dune", pages=1, isbn="x")

        assert "isbn" in str(exc_info.value)

    def test_new_does_not_run_hook(self, registry):
        """Test the post-parse hook is a parse-only step."""
        calls = []
        builder = SchemaBuilder("Hooked", registry=registry).attribute("a")
        builder.after_parse(calls.append)
        schema = builder.build()

        schema.new(a=1)

        assert calls == []


class TestLoadDump:
    """Test the load/dump coder pair."""

    def test_load_none(self, book):
        """Test None passes through load."""
        assert book.load(None) is None

    def test_dump_none(self, book):
        """Test None passes through dump."""
        assert book.dump(None) is None

    def test_round_trip(self, book):
        """Test dump(load(h)) == h for directly representable values."""
        data = {
            "title": "Dune",
            "pages": 412,
            "authors": [{"name": "Frank Herbert"}],
            "price": Decimal("9.99"),
            "subtitle": None,
            "in_print": True,
        }

        assert book.dump(book.load(data)) == data

    def test_load_is_idempotent(self, book):
        """Test load(dump(load(h))) equals load(h)."""
        data = {"title": "Dune", "pages": "412", "authors": [{"name": "Frank Herbert"}]}
        loaded = book.load(data)

        assert book.load(book.dump(loaded)) == loaded

    def test_dump_rejects_other_values(self, book):
        """Test dump only accepts records of the schema."""
        with pytest.raises(ValueTypeMismatch):
            book.dump({"title": "Dune"})

        with pytest.raises(TypeError):
            book.dump("Dune")


class TestToPlain:
    """Test recursive conversion to plain data."""

    def test_nested_records_are_unwrapped(self, book):
        """Test nested records and arrays of them become dictionaries."""
        record = book.parse({"title": "Dune", "pages": 1, "authors": [{"name": "A"}, {"name": "B"}]})
        plain = book.to_plain(record)

        assert plain["authors"] == [{"name": "A"}, {"name": "B"}]
        assert type(plain["authors"][0]) is dict

    def test_record_to_dict(self, book):
        """Test the instance spelling."""
        record = book.parse({"title": "Dune", "pages": 1})

        assert record.to_dict() == book.to_plain(record)

    def test_non_records_pass_through(self, book):
        """Test plain values are returned unchanged."""
        assert book.to_plain(5) == 5
        assert book.to_plain({"a": [1, 2]}) == {"a": [1, 2]}

    def test_records_inside_dict_values(self, registry):
        """Test records nested in mapping values are unwrapped."""
        leaf = SchemaBuilder("Leaf", registry=registry).attribute("v", int).build()
        holder = SchemaBuilder("Holder", registry=registry).attribute("by_key", dict).build()

        record = holder.parse({"by_key": {"x": leaf.parse({"v": 1})}})

        assert record.to_dict() == {"by_key": {"x": {"v": 1}}}


class TestSignature:
    """Test signature metadata."""

    def test_signature(self, book):
        """Test names, rendered types and requiredness."""
        signature = book.signature()

        assert isinstance(signature, SchemaSignature)
        assert signature.name == "Book"
        assert signature.namespace == "library"
        assert signature.attribute_names == ["title", "pages", "authors", "price", "subtitle", "in_print"]
        assert signature.required_names == ["title", "pages"]

        by_name = {a.name: a for a in signature.attributes}
        assert by_name["title"].type == "str"
        assert by_name["title"].nullable is False
        assert by_name["authors"].type == "list[Author]"
        assert by_name["price"].type == "Decimal"
        assert by_name["price"].has_default is True
        assert by_name["subtitle"].optional is True
        assert by_name["in_print"].type == "bool"
        assert signature.predicates == ["is_in_print"]

    def test_self_reference_signature(self, registry):
        """Test self references render as the schema name."""
        builder = SchemaBuilder("Node", registry=registry)
        builder.attribute("children", [SELF])
        builder.attribute("raw")

        signature = builder.build().signature()

        assert signature.attributes[0].type == "list[Node]"
        assert signature.attributes[1].type == "Any"
        assert signature.attributes[1].descriptor is None


class TestExtend:
    """Test schema extension."""

    def test_extend_adds_attributes(self, book):
        """Test extending keeps the base attributes first."""
        builder = book.extend("EBook")
        builder.attribute("file_size", int)
        ebook = builder.build()

        assert ebook.attribute_names[-1] == "file_size"
        assert ebook.attribute_names[:-1] == book.attribute_names
        assert ebook.qualified_name == "library.EBook"
        assert ebook.registry is book.registry

    def test_extend_is_independent(self, book):
        """Test the base schema is unchanged."""
        book.extend("EBook").attribute("file_size", int).build()

        assert "file_size" not in book.attribute_names
        assert not book.is_instance(None)

    def test_extend_carries_hook_and_methods(self, registry):
        """Test hooks and methods are copied."""
        calls = []
        builder = SchemaBuilder("Base", registry=registry).attribute("n", int)
        builder.after_parse(calls.append)
        builder.method(name="twice")(lambda self: self.n * 2)
        base = builder.build()

        derived = base.extend("Derived").build()
        record = derived.parse({"n": "3"})

        assert record.twice() == 6
        assert calls == [record]
        assert not base.is_instance(record)


class TestDefinitionAccessors:
    """Test read-only accessors."""

    def test_attribute_lookup(self, book):
        """Test looking up attribute specs by name."""
        assert book.attribute("title").nullable is False
        with pytest.raises(KeyError):
            book.attribute("missing")

    def test_call_is_parse(self, book):
        """Test calling a schema parses."""
        assert book({"title": "Dune", "pages": 1}) == book.parse({"title": "Dune", "pages": 1})

    def test_record_class_parse(self, book):
        """Test the record class exposes parse."""
        record = book.record_type.parse({"title": "Dune", "pages": "2"})

        assert book.is_instance(record)
        assert record.pages == 2

    def test_predicates_are_read_only(self, book):
        """Test the predicate map cannot be changed."""
        with pytest.raises(TypeError):
            book.predicates["is_x"] = "x"

    def test_repr(self, book):
        """Test the representation names the schema."""
        assert "library.Book" in repr(book)
