"""Path template interpolation and query string building."""

import json
import re
from typing import Any, List, Mapping, Optional
from urllib.parse import quote

from ..errors import MissingParameter

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


def _encode(value: Any) -> str:
    return quote(value if isinstance(value, str) else _scalar(value), safe="")


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def path_placeholders(template: str) -> List[str]:
    """Return placeholder names in the order they appear in template"""
    return _PLACEHOLDER.findall(template)


def interpolate_path(template: str, params: Mapping[str, Any]) -> str:
    """Fill {name} placeholders with percent-encoded values

    Slashes inside values are encoded so a value never adds a path segment.

    Raises:
        MissingParameter: If a placeholder has no value (absent or None)
    """
    def _replace(match: "re.Match") -> str:
        key = match.group(1)
        value = params.get(key)
        if value is None:
            raise MissingParameter(key)
        return _encode(value)

    return _PLACEHOLDER.sub(_replace, template)


def build_query(params: Optional[Mapping[str, Any]]) -> str:
    """Serialize a flat mapping into "?k=v&..." or "" when nothing remains

    None values and blank strings are dropped, lists expand to repeated keys
    and dicts are sent as JSON text.
    """
    if not params:
        return ""
    parts = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, str) and value.strip() == "":
            continue
        name = quote(str(key), safe="")
        if isinstance(value, (list, tuple)):
            for item in value:
                if item is None:
                    continue
                parts.append(f"{name}={_encode(item)}")
        elif isinstance(value, dict):
            parts.append(f"{name}={quote(json.dumps(value, separators=(',', ':')), safe='')}")
        else:
            parts.append(f"{name}={_encode(value)}")
    return f"?{'&'.join(parts)}" if parts else ""


__all__ = [
    "path_placeholders",
    "interpolate_path",
    "build_query",
]
