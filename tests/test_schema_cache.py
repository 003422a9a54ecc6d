"""
Tests for the compiled schema cache.

The cache must compile each identifier at most once, hand out the same
CompiledSchema instance to every caller, and never remember failures.
"""
from unittest.mock import Mock

import pytest

from schema.cache import SchemaCache
from validation.errors import SchemaLoadError


def test_compiles_once_per_identifier():
    """Repeated lookups are served from the cache."""
    compiled = object()
    compile_schema = Mock(return_value=compiled)
    cache = SchemaCache(compile_schema)

    results = [cache.get_or_compile("https://example.com/s.json") for _ in range(3)]

    compile_schema.assert_called_once_with("https://example.com/s.json")
    assert all(result is compiled for result in results)
    assert cache.misses == 1
    assert cache.hits == 2
    assert "https://example.com/s.json" in cache
    assert len(cache) == 1


def test_identifiers_compared_as_exact_strings():
    """Identifiers differing only in spelling are compiled separately."""
    compile_schema = Mock(side_effect=lambda identifier: object())
    cache = SchemaCache(compile_schema)

    first = cache.get_or_compile("schemas/a.json")
    second = cache.get_or_compile("./schemas/a.json")

    assert first is not second
    assert compile_schema.call_count == 2
    assert cache.hits == 0


def test_failures_are_not_cached():
    """A failed compilation is retried on the next lookup."""
    compiled = object()
    compile_schema = Mock(side_effect=[
        SchemaLoadError("temporary outage", identifier="https://example.com/s.json"),
        compiled,
    ])
    cache = SchemaCache(compile_schema)

    with pytest.raises(SchemaLoadError):
        cache.get_or_compile("https://example.com/s.json")
    assert "https://example.com/s.json" not in cache

    assert cache.get_or_compile("https://example.com/s.json") is compiled
    assert compile_schema.call_count == 2
    assert cache.misses == 1


def test_empty_cache():
    cache = SchemaCache(Mock())

    assert len(cache) == 0
    assert cache.hits == 0
    assert cache.misses == 0
