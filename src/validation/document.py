"""
Document Loading.

Reads a JSON or GeoJSON file from disk and decodes it without losing
numeric precision: numbers with a fraction or exponent become
decimal.Decimal, integers stay int. The NaN/Infinity literals accepted by
Python's json module are not JSON and are rejected.
"""
import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from validation.errors import DocumentIOError, DocumentSyntaxError

logger = logging.getLogger(__name__)

# File suffixes treated as candidate documents (case-sensitive)
DOCUMENT_SUFFIXES = (".json", ".geojson")


@dataclass(frozen=True)
class Document:
    """A parsed JSON value together with the path it was read from."""

    path: str
    value: Any


def _reject_constant(name: str) -> Any:
    raise ValueError(f"invalid JSON literal {name}")


def decode_json(text: str) -> Any:
    """Decode JSON text, keeping non-integral numbers as Decimal.

    Raises:
        ValueError: If the text is not valid JSON (json.JSONDecodeError is a
            subclass of ValueError)
    """
    return json.loads(text, parse_float=Decimal, parse_constant=_reject_constant)


def is_candidate(name: str) -> bool:
    """Return True if a file name looks like a JSON or GeoJSON document."""
    return name.endswith(DOCUMENT_SUFFIXES)


def load_document(path: str) -> Document:
    """Read and parse a document file.

    Args:
        path: Filesystem path of the document

    Returns:
        Document holding the decoded value

    Raises:
        DocumentIOError: If the file cannot be opened or read
        DocumentSyntaxError: If the content is not valid UTF-8 JSON
    """
    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        raise DocumentIOError(f"Error opening file: {e}", path=path, cause=e) from e

    try:
        value = decode_json(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise DocumentSyntaxError(f"Syntax error: file is not valid UTF-8: {e}", path=path, cause=e) from e
    except ValueError as e:
        raise DocumentSyntaxError(f"Syntax error: {e}", path=path, cause=e) from e

    logger.debug(f"Parsed document {path}")
    return Document(path=path, value=value)
