"""Tests for schema-directed deserialization."""

from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import NamedTuple, Optional, TypedDict

import pytest
from pydantic import BaseModel, Field

from yamlizer.core.deserialize import deserialize, deserialize_file
from yamlizer.core.errors import (
    ArityMismatch,
    ConversionFailure,
    DuplicateKey,
    KeyMismatch,
    NestingTooDeep,
    ScanError,
    SchemaError,
    UnexpectedEnd,
    UnexpectedTokenKind,
)
from yamlizer.core.lexer import TokenStream
from yamlizer.core.reader_impl import Reader, ReadResult
from yamlizer.core.schema import fixed, mapping, optional, record, scalar, sequence
from yamlizer.core.settings import ReaderSettings


@dataclass
class Book:
    name: str
    price: int


@dataclass
class Shelf:
    label: str
    books: list[Book]


class Point(NamedTuple):
    x: int
    y: int


class Movie(TypedDict):
    title: str
    year: int


class Package(BaseModel):
    package_name: str = Field(alias="name")
    version: Optional[str] = None


class Port(BaseModel):
    number: int = Field(gt=0)


# ---------------------------------------------------------------------------
# Basic documents
# ---------------------------------------------------------------------------


class TestBasicDocuments:
    """The reference documents every reader must handle."""

    def test_scalar_int(self):
        assert deserialize(scalar(int), "123") == 123

    def test_scalar_int_rejects_text(self):
        with pytest.raises(ConversionFailure):
            deserialize(scalar(int), "Hello, World!")

    def test_record(self, book_schema):
        result = deserialize(book_schema, "name: Book\nprice: 819\n")

        assert result == {"name": "Book", "price": 819}

    def test_record_missing_field(self, book_schema):
        with pytest.raises(KeyMismatch, match="Missing field 'price'"):
            deserialize(book_schema, "name: Book\n")

    def test_fixed_sequence_block(self):
        assert deserialize(fixed(int, int, int), "- 1\n- 2\n- 3\n") == (1, 2, 3)

    def test_growable_sequence_flow(self):
        assert deserialize(sequence(str), "[foo, bar, baz]") == ["foo", "bar", "baz"]


class TestScalars:
    def test_float(self):
        assert deserialize(float, "2.5") == 2.5

    def test_decimal(self):
        assert deserialize(Decimal, "0.1") == Decimal("0.1")

    def test_bool(self):
        assert deserialize(bool, "yes") is True

    def test_quoted_string_keeps_digits(self):
        assert deserialize(str, "'123'") == "123"

    def test_empty_document(self):
        with pytest.raises(UnexpectedEnd):
            deserialize(int, "")

    def test_collection_where_scalar_expected(self):
        with pytest.raises(UnexpectedTokenKind, match="Expected int scalar"):
            deserialize(int, "[1]")


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


class TestRecords:
    def test_dataclass_target(self):
        assert deserialize(Book, "name: Book\nprice: 819\n") == Book("Book", 819)

    def test_keys_out_of_order(self, book_schema):
        with pytest.raises(KeyMismatch, match="expected 'name', got 'price'"):
            deserialize(book_schema, "price: 819\nname: Book\n")

    def test_extra_key(self, book_schema):
        with pytest.raises(KeyMismatch, match="Unexpected key 'isbn'"):
            deserialize(book_schema, "name: Book\nprice: 819\nisbn: x\n")

    def test_sequence_where_record_expected(self, book_schema):
        with pytest.raises(UnexpectedTokenKind, match="mapping for record 'book'"):
            deserialize(book_schema, "- Book\n- 819\n")

    def test_named_tuple(self):
        assert deserialize(Point, "x: 1\ny: 2\n") == Point(1, 2)

    def test_typed_dict(self):
        assert deserialize(Movie, "title: Heat\nyear: 1995\n") == {"title": "Heat", "year": 1995}

    def test_pydantic_model_by_alias(self):
        result = deserialize(Package, "name: yamlizer\nversion: '1.0'\n")

        assert result.package_name == "yamlizer"
        assert result.version == "1.0"

    def test_pydantic_validation_failure(self):
        with pytest.raises(ConversionFailure, match="Cannot build record 'Port'"):
            deserialize(Port, "number: -1\n")

    def test_record_with_block_sequence(self):
        text = "label: top\nbooks:\n  - name: A\n    price: 1\n  - name: B\n    price: 2\n"

        assert deserialize(Shelf, text) == Shelf("top", [Book("A", 1), Book("B", 2)])

    def test_record_with_indentless_sequence(self):
        text = "label: top\nbooks:\n- name: A\n  price: 1\n"

        assert deserialize(Shelf, text) == Shelf("top", [Book("A", 1)])

    def test_record_with_flow_sequence(self):
        text = "label: top\nbooks: [{name: A, price: 1}]\n"

        assert deserialize(Shelf, text) == Shelf("top", [Book("A", 1)])

    def test_fixed_sequence_of_records(self, book_schema):
        text = "- name: A\n  price: 1\n- name: B\n  price: 2\n"

        assert deserialize(fixed(book_schema, book_schema), text) == (
            {"name": "A", "price": 1},
            {"name": "B", "price": 2},
        )


class TestFlowRecords:
    """Flow mappings match fields by name."""

    def test_any_key_order(self, book_schema):
        result = deserialize(book_schema, "{price: 819, name: Book}")

        assert list(result) == ["name", "price"]
        assert result == {"name": "Book", "price": 819}

    def test_unknown_key(self, book_schema):
        with pytest.raises(KeyMismatch, match="Unknown key 'pages'"):
            deserialize(book_schema, "{name: Book, price: 1, pages: 3}")

    def test_missing_field(self, book_schema):
        with pytest.raises(KeyMismatch, match="Missing field 'price'"):
            deserialize(book_schema, "{name: Book}")

    def test_repeated_key(self, book_schema):
        with pytest.raises(DuplicateKey):
            deserialize(book_schema, "{name: A, name: B, price: 1}")

    def test_missing_optional_field(self, book_with_optional_price):
        result = deserialize(book_with_optional_price, "{name: Book}")

        assert result.price is None


class TestOptionalFields:
    def test_present(self, book_with_optional_price):
        result = deserialize(book_with_optional_price, "name: Book\nprice: 819\n")

        assert result.price == 819

    def test_omitted(self, book_with_optional_price):
        result = deserialize(book_with_optional_price, "name: Book\n")

        assert result.name == "Book"
        assert result.price is None

    def test_empty_value(self, book_with_optional_price):
        result = deserialize(book_with_optional_price, "name: Book\nprice:\n")

        assert result.price is None

    def test_omitted_before_required_field(self):
        schema = record("item", [("label", optional(str)), ("count", int)])

        assert deserialize(schema, "count: 5\n") == {"label": None, "count": 5}

    def test_unreadable_value_is_left_for_the_record(self, book_with_optional_price):
        # The optional value rolls back; the record then trips over the leftover scalar
        with pytest.raises(UnexpectedTokenKind, match="scalar 'lots'"):
            deserialize(book_with_optional_price, "name: Book\nprice: lots\n")


# ---------------------------------------------------------------------------
# Sequences
# ---------------------------------------------------------------------------


class TestSequences:
    def test_heterogeneous_tuple(self):
        assert deserialize(tuple[int, float, str], "[1, 2.5, x]") == (1, 2.5, "x")

    def test_too_few_elements(self):
        with pytest.raises(ArityMismatch, match="Expected 3 elements, got 2"):
            deserialize(fixed(int, int, int), "- 1\n- 2\n")

    def test_too_many_elements(self):
        with pytest.raises(ArityMismatch, match="got more"):
            deserialize(fixed(int, int, int), "[1, 2, 3, 4]")

    def test_empty_fixed_sequence(self):
        with pytest.raises(ArityMismatch):
            deserialize(fixed(int, int), "[]")

    def test_trailing_comma(self):
        assert deserialize(fixed(int, int, int), "[1, 2, 3,]") == (1, 2, 3)

    def test_empty_growable_sequence(self):
        assert deserialize(list[int], "[]") == []

    def test_order_and_duplicates_kept(self):
        assert deserialize(list[int], "- 3\n- 1\n- 3\n") == [3, 1, 3]

    def test_tuple_of_any_length(self):
        assert deserialize(tuple[str, ...], "- a\n- b\n") == ("a", "b")

    def test_element_conversion_failure(self):
        with pytest.raises(ConversionFailure):
            deserialize(list[int], "[1, two, 3]")

    def test_missing_separator(self):
        with pytest.raises(UnexpectedTokenKind):
            deserialize(list[list[int]], "[[1] [2]]")


class TestIndentlessSequences:
    """Sequences written at the same indentation as their key."""

    def test_ends_at_enclosing_mapping_end(self):
        text = "- key:\n  - 1\n  - 2\n- key:\n  - 3\n"

        assert deserialize(list[dict[str, list[int]]], text) == [
            {"key": [1, 2]},
            {"key": [3]},
        ]

    def test_followed_by_empty_entry(self):
        text = "- key:\n  - 1\n- \n"

        assert deserialize(list[Optional[dict[str, list[int]]]], text) == [
            {"key": [1]},
            None,
        ]

    def test_empty_elements(self):
        assert deserialize(dict[str, list[Optional[int]]], "key:\n- \n- 1\n") == {
            "key": [None, 1]
        }

    def test_nested_sequence_after_empty_element(self):
        with pytest.raises(UnexpectedTokenKind):
            deserialize(dict[str, list[list[int]]], "key:\n- \n- 1\n")


class TestEmptyBlockEntries:
    """An empty "- " entry never starts a sequence of its own."""

    def test_nested_sequence(self):
        with pytest.raises(UnexpectedTokenKind):
            deserialize(sequence(sequence(int)), "- \n- 1\n")

    def test_optional_nested_sequence(self):
        result = deserialize(sequence(optional(sequence(int))), "- \n- [1]\n")

        assert result == [None, [1]]

    def test_optional_nested_sequence_with_scalar_sibling(self):
        # The second entry is not a sequence either; the outer list then trips over it
        with pytest.raises(UnexpectedTokenKind, match="scalar '1'"):
            deserialize(sequence(optional(sequence(int))), "- \n- 1\n")


# ---------------------------------------------------------------------------
# Maps
# ---------------------------------------------------------------------------


class TestMaps:
    def test_block(self):
        assert deserialize(dict[str, int], "a: 1\nb: 2\n") == {"a": 1, "b": 2}

    def test_flow(self):
        assert deserialize(dict[str, int], "{a: 1, b: 2}") == {"a": 1, "b": 2}

    def test_empty_flow(self):
        assert deserialize(dict[str, int], "{}") == {}

    def test_duplicate_key(self):
        with pytest.raises(DuplicateKey, match="Duplicate key 'a'"):
            deserialize(dict[str, int], "a: 1\na: 2\n")

    def test_keys_compare_by_value(self):
        with pytest.raises(DuplicateKey):
            deserialize(dict[int, str], "1: a\n01: b\n")

    def test_fixed_sequence_keys(self):
        text = "? [1, 2]\n: a\n? [3, 4]\n: b\n"

        assert deserialize(mapping(fixed(int, int), str), text) == {(1, 2): "a", (3, 4): "b"}

    def test_empty_value(self):
        with pytest.raises(UnexpectedTokenKind):
            deserialize(dict[str, int], "a:\n")

    def test_map_of_records(self):
        text = "first:\n  name: A\n  price: 1\n"

        assert deserialize(dict[str, Book], text) == {"first": Book("A", 1)}


# ---------------------------------------------------------------------------
# Optional values
# ---------------------------------------------------------------------------


class TestOptional:
    def test_present(self):
        assert deserialize(Optional[int], "123") == 123

    def test_absent(self):
        assert deserialize(Optional[int], "") is None

    def test_rollback_leaves_tokens_for_the_caller(self):
        with pytest.raises(UnexpectedTokenKind, match="end of stream after the value"):
            deserialize(Optional[int], "abc")

    def test_rollback_restores_position(self):
        with TokenStream("[1]") as stream:
            assert Reader(stream).read(optional(int), 1) == ReadResult(None, 1)

    def test_scan_errors_are_not_swallowed(self):
        with pytest.raises(ScanError):
            deserialize(Optional[dict[str, str]], "a: 'oops")


# ---------------------------------------------------------------------------
# Document level
# ---------------------------------------------------------------------------


class TestDocument:
    def test_reader_returns_position_after_value(self):
        with TokenStream("[1, 2]") as stream:
            assert Reader(stream).read(sequence(int), 1) == ReadResult([1, 2], 6)

    def test_trailing_document(self):
        with pytest.raises(UnexpectedTokenKind):
            deserialize(int, "1\n--- 2\n")

    @pytest.mark.parametrize("text", ["!!int 3", "&anchor 3", "--- 3"])
    def test_unsupported_tokens(self, text):
        with pytest.raises(UnexpectedTokenKind, match="not supported"):
            deserialize(int, text)

    def test_alias(self):
        with pytest.raises(UnexpectedTokenKind, match="not supported"):
            deserialize(dict[str, int], "a: 1\nb: *x\n")

    def test_unclassifiable_type(self):
        with pytest.raises(SchemaError):
            deserialize(complex, "1")


class TestNesting:
    def test_within_limit(self):
        assert deserialize(list[list[list[int]]], "[[[1]]]") == [[[1]]]

    def test_too_deep(self):
        with pytest.raises(NestingTooDeep, match="deeper than 2"):
            deserialize(
                list[list[list[int]]], "[[[1]]]", settings=ReaderSettings(max_depth=2)
            )

    def test_optional_does_not_hide_nesting_limit(self):
        with pytest.raises(NestingTooDeep):
            deserialize(
                Optional[list[list[int]]], "[[1]]", settings=ReaderSettings(max_depth=1)
            )


class TestErrorLocation:
    def test_line_and_column(self, book_schema):
        with pytest.raises(ConversionFailure) as exc_info:
            deserialize(book_schema, "name: Book\nprice: lots\n")

        context = exc_info.value.context
        assert (context.line, context.column) == (2, 8)
        assert str(exc_info.value).startswith("<string>:2:8")

    def test_file_path(self, tmp_path: Path):
        path = tmp_path / "bad.yml"
        path.write_text("name: Book\nprice: lots\n", encoding="utf-8")

        with pytest.raises(ConversionFailure) as exc_info:
            deserialize_file(Book, path)

        assert exc_info.value.context.file == path

    def test_deserialize_file(self, book_file: Path):
        assert deserialize_file(Book, book_file) == Book("Book", 819)
