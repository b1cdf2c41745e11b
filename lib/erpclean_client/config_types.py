from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping

from .errors import ConfigurationError


class Environment(IntEnum):
    PRODUCTION = 1
    LOCAL = 2
    SANDBOX = 3
    DUSK = 4

    @classmethod
    def parse(cls, value: Any) -> "Environment":
        """Accept an Environment, its int value, a numeric string or a name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ConfigurationError(f"Invalid environment: {value!r}", field="environment")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ConfigurationError(f"Invalid environment: {value!r}", field="environment") from None
        text = str(value or "").strip()
        if text.isdigit():
            return cls.parse(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ConfigurationError(f"Invalid environment: {value!r}", field="environment") from None


DEFAULT_BASE_URLS: Mapping[Environment, str] = {
    Environment.PRODUCTION: "https://api.fuganholi-easy.com.br/api",
    Environment.LOCAL: "http://api.nfservice.com.br/api",
    Environment.SANDBOX: "https://api.sandbox.fuganholi-easy.com.br/api",
    Environment.DUSK: "https://api.dusk.fuganholi-easy.com.br/api",
}


@dataclass
class ClientConfig:
    token: str = ""
    user_token: str = ""
    environment: Environment | None = None
    upload: bool = False
    debug: bool = False
    decode: bool = True
    timeout_s: float = 30.0
    base_urls: Mapping[Environment, str] = field(default_factory=lambda: dict(DEFAULT_BASE_URLS))

    def base_url(self) -> str:
        if self.environment is None:
            raise ConfigurationError("Environment is not set", field="environment")
        env = Environment.parse(self.environment)
        base = self.base_urls.get(env)
        if not base:
            raise ConfigurationError(f"No base URL configured for environment {env.name}", field="environment")
        return base.rstrip("/")


@dataclass(frozen=True)
class RequestOptions:
    """Per-call overrides; None falls back to the session value in ClientConfig."""

    upload: bool | None = None
    decode: bool | None = None

    def resolve(self, cfg: ClientConfig) -> "RequestOptions":
        return RequestOptions(
            upload=cfg.upload if self.upload is None else self.upload,
            decode=cfg.decode if self.decode is None else self.decode,
        )
