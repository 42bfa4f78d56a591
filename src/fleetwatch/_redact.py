"""Mask credentials before request/response bodies reach DEBUG logs.

Fleet payloads are plain telemetry; only credential-like keys (API keys,
auth headers, cookies) are hidden. Long strings such as serialized
prompts are shortened.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_CREDENTIAL_KEYS: frozenset[str] = frozenset(
    {
        "apikey",
        "api_key",
        "x-goog-api-key",
        "authorization",
        "cookie",
        "set-cookie",
        "password",
    }
)

_MAX_DEPTH = 20


def _is_credential(key: object) -> bool:
    return str(key).lower() in _CREDENTIAL_KEYS


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a log-safe copy of *value*.

    Mappings keep their keys with credential values replaced by
    ``"<redacted>"``; lists and tuples are walked element-wise; strings
    longer than *max_string* are cut. Anything else that is not a JSON
    scalar is rendered with ``repr``.
    """

    def walk(node: Any, depth: int) -> Any:
        if depth > _MAX_DEPTH:
            return "<max-depth>"
        if node is None or isinstance(node, (bool, int, float)):
            return node
        if isinstance(node, str):
            return node if len(node) <= max_string else f"{node[:max_string]}…<truncated>"
        if isinstance(node, (bytes, bytearray)):
            return f"<bytes:{len(node)}b>"
        if isinstance(node, Mapping):
            return {
                str(key): "<redacted>" if _is_credential(key) else walk(item, depth + 1)
                for key, item in node.items()
            }
        if isinstance(node, (list, tuple)):
            return [walk(item, depth + 1) for item in node]
        return repr(node)

    return walk(value, 0)
