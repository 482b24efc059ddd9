"""Shared pytest fixtures for yamlizer tests."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from yamlizer.core.schema import RecordSchema, field, optional, record
from yamlizer.core.settings import LOG_LEVEL_ENV_VAR, MAX_DEPTH_ENV_VAR


@dataclass
class Book:
    name: str
    price: int


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep YAMLIZER_* variables from the host environment out of every test."""
    monkeypatch.delenv(MAX_DEPTH_ENV_VAR, raising=False)
    monkeypatch.delenv(LOG_LEVEL_ENV_VAR, raising=False)


@pytest.fixture
def book_schema() -> RecordSchema:
    """Return the book record schema (name, then price)."""
    return record("book", [field("name", str), field("price", int)])


@pytest.fixture
def book_with_optional_price() -> RecordSchema:
    """Return a book record whose price may be omitted."""
    return record("book", [field("name", str), field("price", optional(int))], target=Book)


@pytest.fixture
def book_file(tmp_path: Path) -> Path:
    """Write a small book document and return its path."""
    path = tmp_path / "book.yml"
    path.write_text("name: Book\nprice: 819\n", encoding="utf-8")
    return path
