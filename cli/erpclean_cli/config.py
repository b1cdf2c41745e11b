from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from typing import Any

import tomli_w
from platformdirs import user_config_dir

from erpclean_client import ConfigurationError, Environment

APP_NAME = "erpclean"
CONFIG_FILENAME = "config.toml"
DEFAULT_TIMEOUT_S = 30.0

ENV_TOKEN = "ERPCLEAN_TOKEN"
ENV_USER_TOKEN = "ERPCLEAN_USER_TOKEN"
ENV_ENVIRONMENT = "ERPCLEAN_ENVIRONMENT"


@dataclass
class AuthConfig:
    token: str = ""
    user_token: str = ""


@dataclass
class AppConfig:
    environment: str
    auth: AuthConfig
    timeout_s: float = DEFAULT_TIMEOUT_S
    debug: bool = False
    base_urls: dict[str, str] = field(default_factory=dict)


def config_path() -> str:
    return f"{user_config_dir(APP_NAME)}/{CONFIG_FILENAME}"


def default_config() -> AppConfig:
    return AppConfig(
        environment="",
        auth=AuthConfig(token="", user_token=""),
        timeout_s=DEFAULT_TIMEOUT_S,
        debug=False,
        base_urls={},
    )


def normalize_environment(raw: Any) -> str:
    """Canonical lower-case environment name, or "" when unset."""
    text = str(raw or "").strip()
    if not text:
        return ""
    return Environment.parse(text).name.lower()


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)


def to_toml(cfg: AppConfig) -> dict[str, Any]:
    data: dict[str, Any] = {
        "environment": cfg.environment,
        "timeout_s": float(cfg.timeout_s),
        "debug": bool(cfg.debug),
        "auth": {
            "token": cfg.auth.token,
            "user_token": cfg.auth.user_token,
        },
    }
    if cfg.base_urls:
        data["base_urls"] = dict(cfg.base_urls)
    return data


def from_toml(data: dict[str, Any]) -> AppConfig:
    cfg = default_config()
    try:
        cfg.environment = normalize_environment(data.get("environment"))
    except ConfigurationError:
        cfg.environment = ""
    timeout = data.get("timeout_s")
    if isinstance(timeout, (int, float)) and not isinstance(timeout, bool) and timeout > 0:
        cfg.timeout_s = float(timeout)
    if isinstance(data.get("debug"), bool):
        cfg.debug = data["debug"]
    auth_raw = data.get("auth") or {}
    if isinstance(auth_raw, dict):
        cfg.auth = AuthConfig(
            token=str(auth_raw.get("token") or ""),
            user_token=str(auth_raw.get("user_token") or ""),
        )
    urls_raw = data.get("base_urls") or {}
    if isinstance(urls_raw, dict):
        for name, url in urls_raw.items():
            if not isinstance(url, str) or not url.strip():
                continue
            try:
                cfg.base_urls[normalize_environment(name)] = url.strip().rstrip("/")
            except ConfigurationError:
                continue
    return cfg


def apply_env(cfg: AppConfig) -> AppConfig:
    token = os.getenv(ENV_TOKEN, "").strip()
    user_token = os.getenv(ENV_USER_TOKEN, "").strip()
    environment = os.getenv(ENV_ENVIRONMENT, "").strip()
    if token:
        cfg.auth.token = token
    if user_token:
        cfg.auth.user_token = user_token
    if environment:
        cfg.environment = normalize_environment(environment)
    return cfg


def load_config(*, with_env: bool = True) -> AppConfig:
    path = config_path()
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        cfg = from_toml(data)
    except FileNotFoundError:
        cfg = default_config()
    return apply_env(cfg) if with_env else cfg


def save_config(cfg: AppConfig) -> str:
    path = config_path()
    ensure_parent_dir(path)
    with open(path, "wb") as f:
        f.write(tomli_w.dumps(to_toml(cfg)).encode("utf-8"))
    os.chmod(path, 0o600)
    return path
