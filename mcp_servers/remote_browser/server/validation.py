"""Argument contract enforcement, driven by the tool ``inputSchema``.

Runs before any handler, so malformed input never causes a side effect.
"""

from __future__ import annotations

import urllib.parse
from typing import Any

from ..config import GatewayConfig
from ..errors import InvalidArgumentError

_URL_FIELDS = ("url",)


def _matches(value: Any, expected: str) -> bool:
    # bool is an int subclass; JSON booleans are never numbers.
    if expected == "string":
        return isinstance(value, str)
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "integer":
        return isinstance(value, int) and not isinstance(value, bool)
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected == "object":
        return isinstance(value, dict)
    if expected == "array":
        return isinstance(value, list)
    return True


def validate_arguments(tool: dict[str, Any], arguments: Any) -> dict[str, Any]:
    """Check ``arguments`` against ``tool['inputSchema']``; return them unchanged."""
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise InvalidArgumentError("Tool arguments must be an object")

    schema = tool.get("inputSchema") or {}
    properties: dict[str, Any] = schema.get("properties") or {}

    for name in schema.get("required") or []:
        value = arguments.get(name)
        # An empty string is no value for fields that declare minLength.
        if value is None or (value == "" and (properties.get(name) or {}).get("minLength", 0) > 0):
            raise InvalidArgumentError(f"Missing required argument: {name}", field=name)

    if schema.get("additionalProperties") is False:
        unknown = sorted(k for k in arguments if k not in properties)
        if unknown:
            raise InvalidArgumentError(f"Unknown argument: {unknown[0]}", field=unknown[0])

    for name, value in arguments.items():
        prop = properties.get(name) or {}
        expected = prop.get("type")
        if value is None or not expected:
            continue
        if not _matches(value, expected):
            raise InvalidArgumentError(f"Argument {name} must be of type {expected}", field=name)
        if isinstance(value, str) and len(value) < prop.get("minLength", 0):
            raise InvalidArgumentError(f"Argument {name} must not be empty", field=name)
        if expected in ("number", "integer") and "minimum" in prop and value < prop["minimum"]:
            raise InvalidArgumentError(f"Argument {name} must be at least {prop['minimum']}", field=name)

    return arguments


def ensure_allowed_target(url: str, config: GatewayConfig) -> None:
    """Only http(s) targets on the allowlist may be sent to a provider."""
    parsed = urllib.parse.urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise InvalidArgumentError(f"Unsupported URL scheme: {parsed.scheme or '(none)'} (allowed: http, https)", field="url")
    if not parsed.hostname:
        raise InvalidArgumentError(f"URL has no host: {url}", field="url")
    if not config.is_host_allowed(parsed.hostname):
        raise InvalidArgumentError(f"Host {parsed.hostname} is not in allowlist", field="url")


def check_targets(arguments: dict[str, Any], config: GatewayConfig) -> None:
    for name in _URL_FIELDS:
        value = arguments.get(name)
        if isinstance(value, str):
            ensure_allowed_target(value, config)
