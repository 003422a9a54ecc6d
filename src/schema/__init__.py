"""Schema Package - Schema Loading, Caching and Resolution.

This package decides which JSON Schema governs a document and makes sure
each schema is fetched and compiled only once per run.

Architecture:
    - SchemaLoader (loader.py): turns an identifier (URI or path) into a
      CompiledSchema using jsonschema, referencing and requests
    - SchemaCache (cache.py): identifier -> CompiledSchema, compile-once,
      failures not cached
    - SchemaResolver (resolver.py): forced schema, declared $schema, or skip

Usage:
    from schema import SchemaCache, SchemaLoader, SchemaResolver

    loader = SchemaLoader()
    resolver = SchemaResolver(SchemaCache(loader.compile), require_declared=True)
    resolution = resolver.resolve(document)
"""
from .cache import SchemaCache
from .loader import CompiledSchema, SchemaLoader
from .resolver import Declared, Forced, Resolution, SchemaResolver, Skip

__all__ = [
    "CompiledSchema",
    "Declared",
    "Forced",
    "Resolution",
    "SchemaCache",
    "SchemaLoader",
    "SchemaResolver",
    "Skip",
]
