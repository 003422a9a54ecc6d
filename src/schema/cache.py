"""
Compiled Schema Cache.

Maps schema identifiers to compiled schemas so each identifier is compiled
at most once per run. Identifiers are compared as exact strings; no URI
normalization happens here.

Failures are never cached: a schema that failed to load (for example
because of a transient network error) is compiled again the next time a
document references it.

The cache is owned by a single run and used from a single thread. Sharing
it between threads would need a lock around get_or_compile to keep the
compile-once guarantee.
"""
import logging
from typing import Callable, Dict

from schema.loader import CompiledSchema

logger = logging.getLogger(__name__)


class SchemaCache:
    """Lookup-or-compile cache of CompiledSchema objects.

    Attributes:
        hits: Number of lookups served from the cache
        misses: Number of successful compilations
    """

    def __init__(self, compile_schema: Callable[[str], CompiledSchema]):
        """Initialize an empty cache.

        Args:
            compile_schema: Callable compiling an identifier into a
                CompiledSchema, raising SchemaLoadError on failure
                (normally SchemaLoader.compile)
        """
        self._compile = compile_schema
        self._schemas: Dict[str, CompiledSchema] = {}
        self.hits = 0
        self.misses = 0

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._schemas

    def __len__(self) -> int:
        return len(self._schemas)

    def get_or_compile(self, identifier: str) -> CompiledSchema:
        """Return the compiled schema for identifier, compiling it on first use.

        Raises:
            SchemaLoadError: If compilation fails (nothing is stored)
        """
        schema = self._schemas.get(identifier)
        if schema is not None:
            self.hits += 1
            logger.debug(f"Schema cache hit for {identifier}")
            return schema

        schema = self._compile(identifier)
        self._schemas[identifier] = schema
        self.misses += 1
        return schema
