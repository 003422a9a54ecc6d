"""
Document Validation with Detailed Output.

Runs a document through its compiled schema and, when it does not match,
builds a report in the shape of JSON Schema's "detailed" output format so
CI logs show exactly which keyword failed and where:

    {
      "valid": false,
      "keywordLocation": "",
      "instanceLocation": "",
      "errors": [
        {
          "keywordLocation": "/$ref/properties/name/type",
          "instanceLocation": "/name",
          "keyword": "type",
          "error": "5 is not of type 'string'"
        }
      ]
    }

Compiled schemas are entered through a $ref to the schema document, so
every keywordLocation starts with /$ref. Combinators (anyOf, oneOf, ...)
carry the failures of their branches in a nested "errors" list.
"""
import logging
from typing import TYPE_CHECKING, Any, Dict, Iterable, List

import referencing.exceptions
from jsonschema.exceptions import ValidationError

from validation.document import Document
from validation.errors import SchemaLoadError, ValidationFailure

if TYPE_CHECKING:
    from schema.loader import CompiledSchema

logger = logging.getLogger(__name__)


def json_pointer(parts: Iterable[Any]) -> str:
    """Build an RFC 6901 JSON pointer from path components."""
    return "".join(
        "/" + str(part).replace("~", "~0").replace("/", "~1") for part in parts
    )


def _output_unit(error: ValidationError) -> Dict[str, Any]:
    unit: Dict[str, Any] = {
        "keywordLocation": json_pointer(error.absolute_schema_path),
        "instanceLocation": json_pointer(error.absolute_path),
        "keyword": error.validator,
        "error": error.message,
    }
    if error.context:
        unit["errors"] = [_output_unit(sub) for sub in error.context]
    return unit


def detailed_output(errors: List[ValidationError]) -> Dict[str, Any]:
    """Convert jsonschema errors into a detailed output tree."""
    return {
        "valid": False,
        "keywordLocation": "",
        "instanceLocation": "",
        "errors": [_output_unit(error) for error in errors],
    }


class DocumentValidator:
    """Validates documents against compiled schemas."""

    def validate(self, document: Document, schema: "CompiledSchema") -> None:
        """Validate a document, raising on any violation.

        Args:
            document: Parsed document
            schema: Compiled schema governing the document

        Raises:
            ValidationFailure: The document violates the schema; carries the
                detailed output tree
            SchemaLoadError: A $ref inside the schema could not be resolved
        """
        try:
            errors = list(schema.validator.iter_errors(document.value))
        except referencing.exceptions.Unresolvable as e:
            raise SchemaLoadError(
                f"unable to resolve reference in schema {schema.identifier}: {e}",
                identifier=schema.identifier,
                path=document.path,
                cause=e,
            ) from e

        if errors:
            logger.debug(f"{document.path}: {len(errors)} schema violation(s)")
            raise ValidationFailure(detailed_output(errors), path=document.path)
