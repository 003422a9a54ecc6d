"""
Schema Resolution.

Decides which schema governs a document. The answer is one of three
variants:

    Forced(schema)               a schema configured for every document
    Declared(identifier, schema) the schema named by the document's $schema
    Skip(reason)                 no schema applies; the document is not validated

Precedence:
    1. A forced schema always wins; the document's $schema is ignored.
    2. Otherwise the top-level $schema field is consulted:
       - missing   -> MissingSchemaDeclaration if declarations are required, else Skip
       - blank     -> EmptySchemaDeclaration if declarations are required, else Skip
       - non-blank -> compiled (once) through the schema cache

A $schema value that is not a string is converted to text and used as an
identifier anyway; a warning is logged so the data can be fixed.
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Union

from schema.cache import SchemaCache
from schema.loader import CompiledSchema
from validation.document import Document
from validation.errors import EmptySchemaDeclaration, MissingSchemaDeclaration, SchemaLoadError

logger = logging.getLogger(__name__)

SCHEMA_FIELD = "$schema"


@dataclass(frozen=True)
class Forced:
    schema: CompiledSchema


@dataclass(frozen=True)
class Declared:
    identifier: str
    schema: CompiledSchema


@dataclass(frozen=True)
class Skip:
    reason: str


Resolution = Union[Forced, Declared, Skip]


def stringify_declaration(value: Any) -> str:
    """Convert a $schema value of any JSON type into an identifier string."""
    if isinstance(value, str):
        return value
    if value is None or isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (int, Decimal)):
        return str(value)
    return json.dumps(value, separators=(",", ":"), default=str)


class SchemaResolver:
    """Resolves the governing schema of each document.

    Attributes:
        cache: SchemaCache used to compile declared schemas
        forced: Schema applied to every document, or None
        require_declared: Whether a missing or blank $schema is an error
    """

    def __init__(self, cache: SchemaCache, forced: Optional[CompiledSchema] = None,
                 require_declared: bool = False):
        self.cache = cache
        self.forced = forced
        self.require_declared = require_declared

    def resolve(self, document: Document) -> Resolution:
        """Determine the schema for a document.

        Returns:
            Forced, Declared or Skip

        Raises:
            MissingSchemaDeclaration: No $schema field and declarations are required
            EmptySchemaDeclaration: Blank $schema field and declarations are required
            SchemaLoadError: The declared schema failed to load
        """
        if self.forced is not None:
            return Forced(self.forced)

        value = document.value
        if not isinstance(value, dict) or SCHEMA_FIELD not in value:
            if self.require_declared:
                raise MissingSchemaDeclaration(
                    f"no schema reference found in {document.path} and schemas are required",
                    path=document.path,
                )
            return Skip("no schema declared")

        declared = value[SCHEMA_FIELD]
        if not isinstance(declared, str):
            logger.warning(
                f"Non-string $schema value {declared!r} in {document.path}; using its text form as identifier"
            )
        identifier = stringify_declaration(declared)

        if not identifier.strip():
            if self.require_declared:
                raise EmptySchemaDeclaration(
                    f"empty schema declaration found in {document.path} and schemas are required",
                    path=document.path,
                )
            return Skip("empty schema declaration")

        try:
            schema = self.cache.get_or_compile(identifier)
        except SchemaLoadError as e:
            e.path = document.path
            raise
        return Declared(identifier, schema)
