from __future__ import annotations

import json
import logging
import secrets
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Iterable, Mapping

import httpx

from .config_types import ClientConfig, RequestOptions
from .encoding import QueryParam, build_query_string, coerce_params, flatten_form_data, form_parts
from .errors import ConfigurationError, TransportError

log = logging.getLogger(__name__)

METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS")
BODY_METHODS = ("POST", "PUT")

Header = tuple[str, str]


@dataclass(frozen=True)
class RequestSpec:
    path: str
    method: str = "GET"
    body: Any = None
    params: list[QueryParam] = field(default_factory=list)
    headers: list[Header] = field(default_factory=list)


@dataclass(frozen=True)
class NormalizedResponse:
    http_code: int
    body: Any
    info: dict[str, Any] | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"body": self.body, "httpCode": self.http_code}
        if self.info is not None:
            data["info"] = self.info
        return data


def coerce_headers(headers: Iterable[Any] | Mapping[str, str] | None) -> list[Header]:
    """Accept a mapping, (name, value) pairs or raw "Name: value" lines."""
    if not headers:
        return []
    if isinstance(headers, Mapping):
        return [(str(k), str(v)) for k, v in headers.items()]
    out: list[Header] = []
    for item in headers:
        if isinstance(item, str):
            name, sep, value = item.partition(":")
            if not sep:
                raise ConfigurationError(f"Invalid header line: {item!r}")
            out.append((name.strip(), value.strip()))
        else:
            name, value = item
            out.append((str(name), str(value)))
    return out


def build_headers(
        cfg: ClientConfig,
        *,
        upload: bool,
        extra: Iterable[Header] = (),
        boundary: str | None = None,
) -> list[Header]:
    headers: list[Header] = [
        ("access-token", cfg.token or ""),
        ("Authorization", f"Bearer {cfg.user_token or ''}"),
        ("Accept", "application/json"),
    ]
    if not upload:
        headers.append(("Content-Type", "application/json"))
    elif boundary:
        headers.append(("Content-Type", f"multipart/form-data; boundary={boundary}"))
    else:
        headers.append(("Content-Type", "multipart/form-data"))
    headers.extend(extra)
    return headers


def check_headers(headers: Iterable[Header]) -> None:
    for name, value in headers:
        try:
            name.encode("ascii")
            value.encode("ascii")
        except UnicodeEncodeError as e:
            raise ConfigurationError(f"Header {name} must be ASCII", field=name) from e


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise TypeError(f"Decimal {value} is not a JSON number")
        return float(value)
    if isinstance(value, (date, datetime, time)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def encode_json_body(body: Any) -> bytes:
    """Serialize a request body; Decimal becomes a number, dates ISO 8601 strings."""
    try:
        return json.dumps(body, ensure_ascii=False, default=_json_default, allow_nan=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Request body is not JSON serializable: {e}") from e


def build_url(cfg: ClientConfig, path: str, params: Iterable[Any] | Mapping[str, Any] | None = None) -> str:
    if not path.startswith("/"):
        path = "/" + path
    url = cfg.base_url() + path
    query = build_query_string(params)
    if query:
        url = f"{url}?{query}"
    return url


def _decode_body(r: httpx.Response) -> Any:
    if not r.content:
        return None
    try:
        return r.json()
    except ValueError:
        return r.text


def _debug_info(r: httpx.Response, elapsed_s: float | None) -> dict[str, Any]:
    req = r.request
    return {
        "url": str(req.url),
        "method": req.method,
        "http_code": r.status_code,
        "content_type": r.headers.get("content-type"),
        "http_version": r.http_version,
        "total_time": elapsed_s,
        "size_download": len(r.content),
        "request_headers": list(req.headers.multi_items()),
        "response_headers": list(r.headers.multi_items()),
    }


class RequestExecutor:
    def __init__(self, cfg: ClientConfig, *, transport: httpx.BaseTransport | None = None):
        self._cfg = cfg
        self._client = httpx.Client(
            headers={"User-Agent": "erpclean-client/0.1.0"},
            transport=transport,
        )

    @property
    def config(self) -> ClientConfig:
        return self._cfg

    def close(self) -> None:
        self._client.close()

    def execute(self, spec: RequestSpec, options: RequestOptions | None = None) -> NormalizedResponse:
        method = spec.method.upper()
        if method not in METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {spec.method}")
        opts = (options or RequestOptions()).resolve(self._cfg)
        url = build_url(self._cfg, spec.path, spec.params)

        kwargs: dict[str, Any] = {}
        boundary = None
        if method in BODY_METHODS:
            if opts.upload:
                boundary = secrets.token_hex(16)
                kwargs["files"] = form_parts(flatten_form_data(spec.body))
            else:
                body = spec.body if spec.body is not None else {}
                kwargs["content"] = encode_json_body(body)

        headers = build_headers(self._cfg, upload=bool(opts.upload), extra=spec.headers, boundary=boundary)
        check_headers(headers)
        log.debug("%s %s upload=%s decode=%s", method, url, opts.upload, opts.decode)
        try:
            r = self._client.request(method, url, headers=headers, timeout=self._cfg.timeout_s, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {url} timed out: {e}") from e
        except httpx.RequestError as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        if not opts.decode and r.status_code == 200:
            body = r.content
        else:
            body = _decode_body(r)

        elapsed_s = None
        try:
            elapsed_s = r.elapsed.total_seconds()
        except RuntimeError:
            pass
        log.debug("%s %s -> %s", method, url, r.status_code)

        info = _debug_info(r, elapsed_s) if self._cfg.debug else None
        return NormalizedResponse(http_code=r.status_code, body=body, info=info)

    def get(self, path: str, params=None, headers=None, *, options: RequestOptions | None = None) -> NormalizedResponse:
        return self.execute(
            RequestSpec(path, "GET", params=coerce_params(params), headers=coerce_headers(headers)), options
        )

    def post(self, path: str, body: Any = None, params=None, headers=None, *,
             options: RequestOptions | None = None) -> NormalizedResponse:
        return self.execute(
            RequestSpec(path, "POST", body=body, params=coerce_params(params), headers=coerce_headers(headers)),
            options,
        )

    def put(self, path: str, body: Any = None, params=None, headers=None, *,
            options: RequestOptions | None = None) -> NormalizedResponse:
        return self.execute(
            RequestSpec(path, "PUT", body=body, params=coerce_params(params), headers=coerce_headers(headers)),
            options,
        )

    def delete(self, path: str, params=None, headers=None, *,
               options: RequestOptions | None = None) -> NormalizedResponse:
        return self.execute(
            RequestSpec(path, "DELETE", params=coerce_params(params), headers=coerce_headers(headers)), options
        )

    def options(self, path: str, params=None, headers=None, *,
                options: RequestOptions | None = None) -> NormalizedResponse:
        return self.execute(
            RequestSpec(path, "OPTIONS", params=coerce_params(params), headers=coerce_headers(headers)), options
        )
