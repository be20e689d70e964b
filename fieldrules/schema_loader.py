"""
Schema document loading.

Loads field schemas from local files, file:// URIs or http(s) URLs, in YAML
or JSON, checks them against SCHEMA_DOCUMENT_SCHEMA, and builds a Schema.

Supports:
- Mapping - an already-parsed document
- Relative or absolute paths - ./schemas/user.yaml
- file:// - Local filesystem (absolute paths)
- https:// / http:// - Remote documents, fetched with requests
"""

import json
import logging
import urllib.parse
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import jsonschema
import requests
import yaml

from .exceptions import SchemaError
from .schema import Schema

logger = logging.getLogger(__name__)

# Meta-schema for schema documents. A field entry is an expression string,
# a list of rule segments, or a mapping with rules/message/cascade.
SCHEMA_DOCUMENT_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$ref": "#/definitions/schema",
    "definitions": {
        "schema": {
            "type": "object",
            "required": ["fields"],
            "properties": {
                "fields": {
                    "type": "object",
                    "additionalProperties": {"$ref": "#/definitions/field"},
                },
            },
        },
        "rules": {
            "oneOf": [
                {"type": "string"},
                {"type": "array", "items": {"type": "string", "minLength": 1}},
                {"type": "null"},
            ]
        },
        "field": {
            "oneOf": [
                {"$ref": "#/definitions/rules"},
                {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "rules": {"$ref": "#/definitions/rules"},
                        "message": {
                            "oneOf": [
                                {"type": "string"},
                                {"type": "object", "additionalProperties": {"type": "string"}},
                            ]
                        },
                        "cascade": {"$ref": "#/definitions/schema"},
                    },
                },
            ]
        },
    },
}


class SchemaLoader:
    """Fetches, parses and checks schema documents."""

    def __init__(self, timeout: float = 10, session=None):
        """
        Initialize schema loader.

        Args:
            timeout: Timeout in seconds for http(s) fetches
            session: Optional requests.Session (defaults to module-level requests)
        """
        self.timeout = timeout
        self.session = session
        self._validator = jsonschema.Draft7Validator(SCHEMA_DOCUMENT_SCHEMA)

    def load(self, source: Union[str, Path, Mapping[str, Any]]) -> Schema:
        """
        Load a Schema from a document, path or URI.

        Raises:
            SchemaError: If the document cannot be read, parsed or is invalid
        """
        if isinstance(source, Mapping):
            document = source
            origin = "<mapping>"
        else:
            origin = str(source)
            document = self._parse(self._read(origin), origin)

        self.check(document, origin)
        schema = Schema.from_dict(document)
        logger.info(f"Loaded schema with {len(schema)} top-level field(s) from {origin}")
        return schema

    def check(self, document: Any, origin: str = "<mapping>") -> None:
        """Validate a document against the meta-schema."""
        first = jsonschema.exceptions.best_match(self._validator.iter_errors(document))
        if first is not None:
            location = "/".join(str(p) for p in first.path) or "root"
            raise SchemaError(
                f"Invalid schema document {origin} at {location}: {first.message}"
            )

    def _read(self, uri: str) -> str:
        parsed = urllib.parse.urlparse(uri)

        if parsed.scheme in ("http", "https"):
            return self._fetch(uri)

        if parsed.scheme == "file":
            path = Path(urllib.parse.unquote(parsed.path))
        elif not parsed.scheme or len(parsed.scheme) == 1:
            # No scheme, or a Windows drive letter
            path = Path(uri)
        else:
            raise SchemaError(f"Unsupported URI scheme: {parsed.scheme} in {uri}")

        try:
            return path.expanduser().read_text(encoding="utf-8")
        except OSError as e:
            raise SchemaError(f"Failed to read schema document {uri}: {e}") from e

    def _fetch(self, uri: str) -> str:
        getter = self.session.get if self.session is not None else requests.get
        try:
            response = getter(uri, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise SchemaError(f"Failed to fetch schema document from {uri}: {e}") from e
        return response.text

    def _parse(self, text: str, origin: str) -> Any:
        """Parse JSON when the source says so, YAML otherwise (YAML also reads JSON)."""
        try:
            if origin.lower().endswith(".json"):
                return json.loads(text)
            return yaml.safe_load(text)
        except (ValueError, yaml.YAMLError) as e:
            raise SchemaError(f"Failed to parse schema document {origin}: {e}") from e
