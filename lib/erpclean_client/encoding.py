from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Iterable, Mapping
from urllib.parse import quote_plus


@dataclass(frozen=True)
class QueryParam:
    name: str
    value: Any


def coerce_param(item: Any) -> QueryParam:
    if isinstance(item, QueryParam):
        return item
    if isinstance(item, Mapping):
        return QueryParam(str(item.get("name") or ""), item.get("value"))
    name, value = item
    return QueryParam(str(name or ""), value)


def coerce_params(params: Iterable[Any] | Mapping[str, Any] | None) -> list[QueryParam]:
    if not params:
        return []
    if isinstance(params, Mapping):
        return [QueryParam(str(k), v) for k, v in params.items()]
    return [coerce_param(item) for item in params]


def without_param(params: Iterable[Any] | Mapping[str, Any] | None, name: str) -> list[QueryParam]:
    return [p for p in coerce_params(params) if p.name != name]


def scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


def _is_blank(value: Any) -> bool:
    # zero is a real value here, only absent/empty ones are dropped
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple, dict)):
        return not value
    return False


def build_query_string(params: Iterable[Any] | Mapping[str, Any] | None) -> str:
    pairs: list[str] = []
    for param in coerce_params(params):
        if not param.name or _is_blank(param.value):
            continue
        # False is kept but carries no value: name=
        value = "" if param.value is False else scalar_text(param.value)
        pairs.append(f"{quote_plus(param.name)}={quote_plus(value)}")
    return "&".join(pairs)


def _is_structured(value: Any) -> bool:
    return isinstance(value, (Mapping, list))


def _items(value: Any):
    if isinstance(value, Mapping):
        return value.items()
    return enumerate(value)


def flatten_form_data(data: Mapping[str, Any] | list | None) -> dict[str, Any]:
    """Flatten nested payloads to multipart field names.

    One nesting level is unwrapped per pass; passes repeat until no structured
    value is left at the top level, so ``{"items": [{"name": "x"}]}`` becomes
    ``{"items[0][name]": "x"}``.
    """
    flat: dict[str, Any] = {}
    nested = False
    for key, value in _items(data or {}):
        if not _is_structured(value):
            flat[str(key)] = value
            continue
        for subkey, subvalue in _items(value):
            flat[f"{key}[{subkey}]"] = subvalue
            if _is_structured(subvalue):
                nested = True
    if nested:
        return flatten_form_data(flat)
    return flat


def form_parts(flat: Mapping[str, Any]) -> list[tuple[str, tuple]]:
    """Turn flattened fields into httpx multipart parts.

    Tuples are passed through as file specs ``(filename, content[, content_type])``,
    open files become file parts named after the file, everything else is a
    plain form field.
    """
    parts: list[tuple[str, tuple]] = []
    for name, value in flat.items():
        if isinstance(value, tuple):
            parts.append((name, value))
        elif hasattr(value, "read"):
            filename = os.path.basename(str(getattr(value, "name", "") or "")) or "upload"
            parts.append((name, (filename, value)))
        elif isinstance(value, (bytes, bytearray)):
            parts.append((name, (None, bytes(value))))
        else:
            parts.append((name, (None, scalar_text(value))))
    return parts
