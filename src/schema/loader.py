"""
Schema Loading and Compilation.

This module turns a schema identifier (a URI or a filesystem path) into a
CompiledSchema: a ready-to-use jsonschema validator plus the schema it was
built from. It is the only place that talks to the outside world on behalf
of schemas.

Retrieval:
    - Well-known meta-schema URIs (draft 3 through 2020-12) are served from
      the copies bundled with jsonschema, without network access
    - http(s) URIs are fetched with requests
    - file URIs and plain paths are read from disk; relative paths are
      resolved against the loader's base directory

Compilation:
    - The draft is picked from the schema's own $schema keyword, falling
      back to Draft 2020-12
    - The schema is checked against its meta-schema before use
    - $refs to other documents are resolved lazily through a
      referencing.Registry that retrieves with this same loader
    - JSON numbers are decoded as Decimal on both sides (schemas and
      documents), so the validator class is extended to accept integral
      Decimals as JSON integers

Error Handling:
    Every failure (network, filesystem, JSON syntax, invalid schema,
    unresolvable fragment) is raised as SchemaLoadError.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional, Type
from urllib.parse import urldefrag, urlsplit
from urllib.request import url2pathname

import requests
import referencing.exceptions
from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import SchemaError
from referencing import Registry, Resource
from referencing.jsonschema import DRAFT202012

from validation.document import decode_json
from validation.errors import SchemaLoadError

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ("http", "https")

DEFAULT_VALIDATOR = Draft202012Validator


@dataclass(frozen=True, eq=False)
class CompiledSchema:
    """A schema compiled once and shared read-only by every document using it.

    Attributes:
        identifier: The identifier the schema was requested with (cache key)
        uri: Absolute URI the identifier resolved to
        contents: The decoded root schema document
        validator: jsonschema validator instance bound to the schema
    """

    identifier: str
    uri: str
    contents: Any
    validator: Any


@lru_cache(maxsize=None)
def decimal_aware(validator_class: Type) -> Type:
    """Extend a jsonschema validator class so integral Decimals are integers."""
    base_checker = validator_class.TYPE_CHECKER

    def is_integer(checker, instance):
        if isinstance(instance, Decimal):
            return instance.is_finite() and instance == instance.to_integral_value()
        return base_checker.is_type(instance, "integer")

    return validators.extend(
        validator_class,
        type_checker=base_checker.redefine("integer", is_integer),
    )


def _bundled_meta_schema(uri: str) -> Optional[Any]:
    """Return the bundled meta-schema published at uri, if jsonschema ships one."""
    base = uri.rstrip("#")
    for candidate in (base, base + "#"):
        validator_class = validators.validator_for({"$schema": candidate}, default=None)
        if validator_class is not None:
            return validator_class.META_SCHEMA
    return None


def _check_dialect(contents: Any, uri: str) -> None:
    """Reject a $schema keyword that is not a string before jsonschema sees it."""
    if isinstance(contents, dict) and "$schema" in contents:
        dialect = contents["$schema"]
        if not isinstance(dialect, str):
            raise ValueError(f"$schema of {uri} must be a string, got {type(dialect).__name__}")


class SchemaLoader:
    """Fetches and compiles JSON Schemas for the schema cache.

    Attributes:
        base_dir: Directory relative schema paths are resolved against
        timeout: Timeout in seconds for remote schema requests
        session: requests.Session used for http(s) retrieval
    """

    DEFAULT_TIMEOUT = 30  # seconds

    def __init__(
        self,
        base_dir: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_dir = Path(base_dir) if base_dir else Path.cwd()
        self.timeout = timeout if timeout is not None else self.DEFAULT_TIMEOUT
        self.session = session if session is not None else requests.Session()

    def close(self) -> None:
        """Release the underlying HTTP session."""
        self.session.close()

    def to_uri(self, identifier: str) -> str:
        """Turn a schema identifier into an absolute URI.

        URIs with a scheme are returned unchanged; anything else is treated
        as a filesystem path (optionally followed by a #fragment).
        """
        scheme = urlsplit(identifier).scheme
        # Single-letter schemes are Windows drive letters, not URIs
        if len(scheme) > 1:
            return identifier

        location, _, fragment = identifier.partition("#")
        path = Path(location)
        if not path.is_absolute():
            path = self.base_dir / path
        uri = path.resolve().as_uri()
        return f"{uri}#{fragment}" if fragment else uri

    def fetch(self, uri: str) -> Any:
        """Retrieve and decode the schema document at uri (without fragment).

        Raises:
            requests.RequestException: On HTTP failures
            OSError: When a local file cannot be read
            ValueError: On malformed JSON or an unsupported URI scheme
        """
        meta_schema = _bundled_meta_schema(uri)
        if meta_schema is not None:
            logger.debug(f"Using bundled meta-schema for {uri}")
            return meta_schema

        parts = urlsplit(uri)
        if parts.scheme in REMOTE_SCHEMES:
            logger.info(f"Fetching remote schema {uri}")
            response = self.session.get(uri, timeout=self.timeout)
            response.raise_for_status()
            return decode_json(response.content.decode("utf-8"))

        if parts.scheme == "file":
            path = url2pathname(parts.path)
            logger.debug(f"Reading schema file {path}")
            with open(path, "rb") as f:
                return decode_json(f.read().decode("utf-8"))

        raise ValueError(f"unsupported schema URI scheme {parts.scheme!r} in {uri}")

    def retrieve(self, uri: str) -> Resource:
        """Registry retrieve hook used to resolve $refs to other documents."""
        contents = self.fetch(uri)
        _check_dialect(contents, uri)
        return Resource.from_contents(contents, default_specification=DRAFT202012)

    def compile(self, identifier: str) -> CompiledSchema:
        """Fetch, check and compile the schema named by identifier.

        Args:
            identifier: Schema URI or path, possibly with a #fragment

        Returns:
            CompiledSchema ready to validate documents

        Raises:
            SchemaLoadError: If the schema cannot be retrieved, is not valid
                JSON, fails its meta-schema check, or the fragment does not
                resolve
        """
        try:
            uri = self.to_uri(identifier)
            base_uri, _ = urldefrag(uri)
            contents = self.fetch(base_uri)
        except (requests.RequestException, OSError, ValueError) as e:
            raise SchemaLoadError(
                f"unable to load declared schema {identifier}: {e}",
                identifier=identifier,
                cause=e,
            ) from e

        if not isinstance(contents, (dict, bool)):
            raise SchemaLoadError(
                f"schema {identifier} must be a JSON object or boolean, got {type(contents).__name__}",
                identifier=identifier,
            )

        try:
            _check_dialect(contents, uri)
        except ValueError as e:
            raise SchemaLoadError(
                f"schema {identifier} is not a valid JSON Schema: {e}",
                identifier=identifier,
                cause=e,
            ) from e

        validator_class = validators.validator_for(contents, default=DEFAULT_VALIDATOR)
        try:
            validator_class.check_schema(contents)
        except SchemaError as e:
            raise SchemaLoadError(
                f"schema {identifier} is not a valid JSON Schema: {e.message}",
                identifier=identifier,
                cause=e,
            ) from e

        resource = Resource.from_contents(contents, default_specification=DRAFT202012)
        registry = Registry(retrieve=self.retrieve).with_resource(base_uri, resource)

        # Fail now rather than on the first document if the fragment is bogus
        try:
            registry.resolver().lookup(uri)
        except referencing.exceptions.Unresolvable as e:
            raise SchemaLoadError(
                f"unable to resolve {identifier}: {e}",
                identifier=identifier,
                cause=e,
            ) from e

        # Referencing the root through $ref keeps relative $refs anchored at
        # the schema's own location even when it has no $id
        validator = decimal_aware(validator_class)({"$ref": uri}, registry=registry)
        logger.info(f"Compiled schema {identifier} ({validator_class.__name__})")
        return CompiledSchema(identifier=identifier, uri=uri, contents=contents, validator=validator)
