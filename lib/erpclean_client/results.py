from __future__ import annotations

import json
from typing import Any

from .errors import RemoteError, UnrecognizedResponseError
from .executor import NormalizedResponse


def _json_default(value: Any) -> Any:
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8", errors="replace")
    return str(value)


def serialize_response(resp: NormalizedResponse) -> str:
    return json.dumps(resp.to_dict(), ensure_ascii=False, default=_json_default)


def join_errors(errors: Any) -> str:
    # {"field": ["msg", ...]} validation bags are flattened in order
    if isinstance(errors, dict):
        lines: list[str] = []
        for value in errors.values():
            if isinstance(value, (list, tuple)):
                lines.extend(str(v) for v in value)
            else:
                lines.append(str(value))
        return "\r\n".join(lines)
    if isinstance(errors, (list, tuple)):
        return "\r\n".join(str(e) for e in errors)
    return str(errors)


def interpret_response(resp: NormalizedResponse) -> NormalizedResponse:
    """Return the response on 200, raise the matching ApiError otherwise."""
    if resp.http_code == 200:
        return resp

    body = resp.body
    details = serialize_response(resp)
    if isinstance(body, dict):
        if body.get("message") is not None:
            raise RemoteError(resp.http_code, str(body["message"]), details, resp)
        if body.get("errors") is not None:
            raise RemoteError(resp.http_code, join_errors(body["errors"]), details, resp)
    raise UnrecognizedResponseError(resp.http_code, details, details, resp)
