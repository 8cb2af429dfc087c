"""
Content Codec

Parses a configuration payload according to its declared content type.
"""

import json
from typing import Any

import yaml

from confsync.utils.exceptions import ParseError


def _is_json(content_type: str) -> bool:
    return "json" in content_type


def _is_yaml(content_type: str) -> bool:
    return "yaml" in content_type or "yml" in content_type


def parse_content(raw: str, content_type: str | None = None) -> Any:
    """
    Parse raw configuration text.

    JSON and YAML content types are decoded strictly and raise ParseError
    on malformed input. Any other (or missing) content type is tried as
    JSON and falls back to the raw text.

    Args:
        raw: Decoded payload text
        content_type: Content type declared by the provider

    Returns:
        Structured value, or raw text for undeclared non-JSON payloads
    """
    ct = (content_type or "").lower()

    if _is_json(ct):
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise ParseError(f"Invalid JSON payload: {e}", content_type=content_type) from e

    if _is_yaml(ct):
        try:
            return yaml.safe_load(raw)
        except (yaml.YAMLError, RecursionError) as e:
            raise ParseError(f"Invalid YAML payload: {e}", content_type=content_type) from e

    try:
        return json.loads(raw)
    except (ValueError, RecursionError):
        return raw
