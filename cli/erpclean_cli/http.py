from __future__ import annotations

from typing import NoReturn

import typer
from erpclean_client import ClientConfig, ConfigurationError, Environment, ERPCleanClient, ERPCleanError

from . import console
from .config import AppConfig


def make_client(cfg: AppConfig, *, environment: str | None = None) -> ERPCleanClient:
    env_name = (environment or cfg.environment or "").strip()
    base_urls = {}
    for name, url in cfg.base_urls.items():
        base_urls[Environment.parse(name)] = url
    client_cfg = ClientConfig(
        token=cfg.auth.token,
        user_token=cfg.auth.user_token,
        environment=Environment.parse(env_name) if env_name else None,
        debug=cfg.debug,
        timeout_s=cfg.timeout_s,
    )
    if base_urls:
        client_cfg.base_urls = {**client_cfg.base_urls, **base_urls}
    return ERPCleanClient(client_cfg)


def fail(action: str, exc: ERPCleanError) -> NoReturn:
    if isinstance(exc, ConfigurationError):
        console.err(f"{action}: {exc}")
        if exc.field == "environment":
            console.info("Run `erpclean settings set --environment <production|local|sandbox|dusk>`.")
        raise typer.Exit(code=2)
    console.err(f"{action}: {exc}")
    raise typer.Exit(code=1)
