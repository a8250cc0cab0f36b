"""JSON Schema document loading and basic validation."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path

import requests
import yaml
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for

from .json_types import JSONObject, JSONValue

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

_YAML_SUFFIXES = {".yaml", ".yml"}


class SchemaLoadError(RuntimeError):
    """Raised when a source schema document cannot be loaded."""


def parse_schema_text(text: str, *, source: str = "<inline>") -> JSONObject:
    """Parse JSON schema text and validate it.

    Args:
        text (str): JSON document text.
        source (str): Description of the origin, used in error messages.

    Returns:
        JSONObject: The parsed schema document.
    """
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaLoadError(f"Failed to parse JSON in {source}: {exc}") from exc
    return validate_schema_document(payload, source=source)


def load_schema_file(path: Path) -> JSONObject:
    """Load and validate a schema document from a JSON or YAML file."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            if path.suffix.lower() in _YAML_SUFFIXES:
                payload = yaml.safe_load(handle)
            else:
                payload = json.load(handle)
    except OSError as exc:
        raise SchemaLoadError(f"Failed to read schema file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise SchemaLoadError(f"Failed to parse YAML in {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SchemaLoadError(f"Failed to parse JSON in {path}: {exc}") from exc

    logger.debug("Loaded schema from %s", path)
    return validate_schema_document(payload, source=str(path))


def load_schema_url(url: str, *, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> JSONObject:
    """Fetch and validate a schema document over HTTP(S).

    Args:
        url (str): Location of the schema document.
        timeout (float): Request timeout in seconds.

    Returns:
        JSONObject: The fetched schema document.
    """
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise SchemaLoadError(f"Failed to fetch schema from {url}: {exc}") from exc

    logger.debug("Fetched schema from %s (%d bytes)", url, len(response.content))
    return parse_schema_text(response.text, source=url)


def validate_schema_document(payload: JSONValue, *, source: str) -> JSONObject:
    """Ensure a parsed payload is a mapping and a valid JSON Schema."""
    if not isinstance(payload, Mapping):
        raise SchemaLoadError(
            f"Schema document must deserialize to a mapping, got {type(payload).__name__} in {source}"
        )

    try:
        validator_for(payload).check_schema(payload)
    except SchemaError as exc:
        raise SchemaLoadError(f"JSON Schema validation failed for {source}: {exc.message}") from exc

    return payload
