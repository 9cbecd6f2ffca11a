"""Redaction utilities for logging and frame-dumps.

Prefers safety over fidelity: provider credentials travel in query strings
(``token=``, ``api_key=``), so every URL that reaches a log goes through
``redact_url`` first. Screenshot payloads are replaced by size placeholders.
"""

from __future__ import annotations

import os
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_SENSITIVE_SUBSTRINGS = (
    "token",
    "secret",
    "password",
    "passwd",
    "pwd",
    "authorization",
    "cookie",
    "session",
    "jwt",
    "bearer",
    "api-key",
    "api_key",
    "apikey",
)

# Avoid false-positives like "author" while still protecting obvious keys.
_SENSITIVE_EXACT = {"auth", "pass"}


def is_sensitive_key(key: str) -> bool:
    k = (key or "").strip().lower()
    if not k:
        return False
    if k in _SENSITIVE_EXACT:
        return True
    return any(s in k for s in _SENSITIVE_SUBSTRINGS)


def _redact_pairs(raw: str) -> tuple[str, bool]:
    pairs = parse_qsl(raw, keep_blank_values=True)
    redacted_any = False
    out_pairs: list[tuple[str, str]] = []
    for k, v in pairs:
        if is_sensitive_key(k) and v:
            out_pairs.append((k, "<redacted>"))
            redacted_any = True
        else:
            out_pairs.append((k, v))
    if not redacted_any:
        return raw, False
    return urlencode(out_pairs, doseq=True), True


def redact_url(url: str) -> str:
    """Redact credential-like URL parameters without destroying normal queries.

    Also strips userinfo (``user:pass@host``). Returns the input unchanged when
    nothing needed redaction.
    """
    if not isinstance(url, str) or not url:
        return url
    try:
        parts = urlsplit(url)
    except ValueError:
        return url

    changed = False
    netloc = parts.netloc
    query = parts.query
    fragment = parts.fragment

    if "@" in netloc:
        netloc = netloc.split("@", 1)[1]
        changed = True
    if query:
        query, hit = _redact_pairs(query)
        changed = changed or hit
    if fragment and "=" in fragment:
        fragment, hit = _redact_pairs(fragment)
        changed = changed or hit

    if not changed:
        return url
    return urlunsplit((parts.scheme, netloc, parts.path, query, fragment))


def _redacted_summary(value: Any) -> str:
    if value is None:
        return "<redacted>"
    if isinstance(value, (bytes, bytearray)):
        return f"<redacted bytes len={len(value)}>"
    if isinstance(value, str):
        return f"<redacted str len={len(value)}>"
    if isinstance(value, (list, tuple, set)):
        return f"<redacted list len={len(value)}>"
    if isinstance(value, dict):
        return f"<redacted dict keys={len(value)}>"
    return "<redacted>"


def _redact_any(value: Any, *, tool: str, key: str | None) -> Any:
    if isinstance(value, dict):
        return {k: _redact_any(v, tool=tool, key=str(k)) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact_any(v, tool=tool, key=key) for v in value]

    lk = (key or "").lower()
    if isinstance(value, str) and lk == "url":
        return redact_url(value)
    # Filled values are frequently credentials; never log them.
    if tool == "browser_fill" and lk == "value":
        return _redacted_summary(value)
    if is_sensitive_key(lk):
        return _redacted_summary(value)
    return value


def redact_tool_arguments(tool: str, args: dict[str, Any]) -> dict[str, Any]:
    """Redact tool arguments for safe logging."""
    if not isinstance(args, dict):
        return {}
    return _redact_any(args, tool=tool, key=None)


def _dump_max_chars() -> int:
    raw = os.environ.get("MCP_DUMP_FRAMES_MAX_CHARS", "5000").strip()
    try:
        return max(0, int(raw))
    except ValueError:
        return 5000


def _redact_content_items(items: list[Any], max_text_chars: int | None) -> list[Any]:
    out: list[Any] = []
    for item in items:
        if not isinstance(item, dict):
            out.append(item)
            continue
        it = dict(item)
        if it.get("type") == "image" and isinstance(it.get("data"), str):
            it["data"] = f"<omitted image base64 len={len(it['data'])}>"
        if isinstance(it.get("blob"), str):
            it["blob"] = f"<omitted blob base64 len={len(it['blob'])}>"
        text = it.get("text")
        if isinstance(text, str) and max_text_chars is not None and len(text) > max_text_chars:
            it["text"] = text[:max_text_chars] + f"… <truncated len={len(text)}>"
        out.append(it)
    return out


def redact_jsonrpc_for_dump(payload: dict[str, Any], *, max_text_chars: int | None = None) -> dict[str, Any]:
    """Redact a JSON-RPC message for file dumps.

    - tools/call arguments are redacted based on tool name.
    - Image content and resource blobs become short placeholders.
    - Large text blobs are truncated.
    """
    max_text_chars = max_text_chars if max_text_chars is not None else _dump_max_chars()
    msg = dict(payload) if isinstance(payload, dict) else {}

    params = msg.get("params")
    if msg.get("method") == "tools/call" and isinstance(params, dict):
        name = params.get("name")
        args = params.get("arguments")
        if isinstance(name, str) and isinstance(args, dict):
            msg["params"] = {**params, "arguments": redact_tool_arguments(name, args)}

    result = msg.get("result")
    if isinstance(result, dict):
        result = dict(result)
        for key in ("content", "contents"):
            if isinstance(result.get(key), list):
                result[key] = _redact_content_items(result[key], max_text_chars)
        msg["result"] = result

    return msg


def redact_jsonrpc_for_log(payload: dict[str, Any]) -> dict[str, Any]:
    """Stricter redaction for logs (shorter + safer)."""
    return redact_jsonrpc_for_dump(payload, max_text_chars=512)


__all__ = [
    "is_sensitive_key",
    "redact_jsonrpc_for_dump",
    "redact_jsonrpc_for_log",
    "redact_tool_arguments",
    "redact_url",
]
