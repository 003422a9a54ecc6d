"""Validation Package - Documents, Errors and Structural Validation.

Exported:
    Document, load_document, is_candidate: reading JSON/GeoJSON files with
        exact (Decimal) numbers
    DocumentValidator: runs a document through a compiled schema and
        reports failures as a detailed output tree
    SchemaWalkError and subclasses: the per-file error taxonomy
"""
from .errors import (
    ConfigurationError,
    DocumentIOError,
    DocumentSyntaxError,
    EmptySchemaDeclaration,
    MissingSchemaDeclaration,
    SchemaLoadError,
    SchemaWalkError,
    ValidationFailure,
)
from .document import Document, is_candidate, load_document
from .validator import DocumentValidator

__all__ = [
    "ConfigurationError",
    "Document",
    "DocumentIOError",
    "DocumentSyntaxError",
    "DocumentValidator",
    "EmptySchemaDeclaration",
    "MissingSchemaDeclaration",
    "SchemaLoadError",
    "SchemaWalkError",
    "ValidationFailure",
    "is_candidate",
    "load_document",
]
