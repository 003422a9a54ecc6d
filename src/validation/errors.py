"""
Error Taxonomy for Document Validation.

Every per-file failure is represented by a subclass of SchemaWalkError.
Errors keep their structure (kind, path, cause) while they travel from the
point of failure to the reporter; nothing is formatted into a final string
until the console report is printed.

Kinds:
    IOError: the document file could not be opened or read
    SyntaxError: the document is not well-formed JSON
    MissingSchemaDeclaration: no $schema field and schemas are required
    EmptySchemaDeclaration: blank $schema field and schemas are required
    SchemaLoadError: the referenced schema could not be fetched or compiled
    ValidationFailure: the document violates its schema
    ConfigurationError: invalid settings, raised before any file is walked
"""
import json
from typing import Any, Dict, Optional


class SchemaWalkError(Exception):
    """Base class for all errors recorded against a document.

    Attributes:
        kind: Stable tag naming the error category (used by tests and reports)
        path: Path of the document being processed, when known
        cause: Underlying exception that triggered this error, if any
    """

    kind = "SchemaWalkError"

    def __init__(self, message: str, path: Optional[str] = None, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.cause = cause

    def render(self) -> str:
        """Return the human-readable detail text for the console report."""
        return f"{self.kind}: {self.message}"


class DocumentIOError(SchemaWalkError):
    """Raised when a document file cannot be opened or read."""

    kind = "IOError"


class DocumentSyntaxError(SchemaWalkError):
    """Raised when a document is not valid JSON."""

    kind = "SyntaxError"


class MissingSchemaDeclaration(SchemaWalkError):
    kind = "MissingSchemaDeclaration"


class EmptySchemaDeclaration(SchemaWalkError):
    kind = "EmptySchemaDeclaration"


class SchemaLoadError(SchemaWalkError):
    """Raised when a schema cannot be retrieved, parsed, or compiled.

    Attributes:
        identifier: The schema identifier that failed to load
    """

    kind = "SchemaLoadError"

    def __init__(self, message: str, identifier: str, path: Optional[str] = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, path=path, cause=cause)
        self.identifier = identifier


class ValidationFailure(SchemaWalkError):
    """Raised when a document structurally violates its schema.

    Attributes:
        detail: Detailed output tree (keywordLocation, instanceLocation,
            nested errors) describing every violated keyword
    """

    kind = "ValidationFailure"

    def __init__(self, detail: Dict[str, Any], path: Optional[str] = None):
        count = len(detail.get("errors", []))
        super().__init__(f"document does not match schema ({count} error(s))", path=path)
        self.detail = detail

    def render(self) -> str:
        return json.dumps(self.detail, indent=2)


class ConfigurationError(SchemaWalkError):
    kind = "ConfigurationError"
