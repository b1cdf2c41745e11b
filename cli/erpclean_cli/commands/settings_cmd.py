from __future__ import annotations

import os

import typer
from erpclean_client import ConfigurationError

from .. import console
from ..config import config_path, default_config, load_config, normalize_environment, save_config

app = typer.Typer(help="Manage local CLI settings (~/.config/erpclean/config.toml).")

ENVIRONMENT_HELP = "API environment: production, local, sandbox, dusk (or 1-4)."


def _parse_environment(value: str) -> str:
    try:
        return normalize_environment(value)
    except ConfigurationError as exc:
        console.err(str(exc))
        raise typer.Exit(code=2)


@app.command("init")
def init_settings(
        force: bool = typer.Option(False, "--force", help="Overwrite existing config."),
        environment: str = typer.Option(..., "--environment", prompt="Environment", help=ENVIRONMENT_HELP),
        token: str = typer.Option(..., "--token", prompt="Access token", hide_input=True, help="access-token header."),
        user_token: str = typer.Option("", "--user-token", help="User bearer token."),
):
    path = config_path()
    if os.path.exists(path) and not force:
        console.info(f"Config already exists: {path}")
        console.info("Use --force to overwrite.")
        return

    cfg = default_config()
    cfg.environment = _parse_environment(environment)
    if not cfg.environment:
        console.err("Environment cannot be empty.")
        raise typer.Exit(code=2)
    cfg.auth.token = token.strip()
    cfg.auth.user_token = user_token.strip()
    saved = save_config(cfg)
    console.ok(f"Config written: {saved}")


@app.command("show")
def show_settings():
    cfg = load_config(with_env=False)
    token_state = "(set)" if cfg.auth.token.strip() else "(empty)"
    user_token_state = "(set)" if cfg.auth.user_token.strip() else "(empty)"
    console.print(
        f"environment={cfg.environment or '(unset)'} token={token_state} user_token={user_token_state} "
        f"timeout_s={cfg.timeout_s} debug={cfg.debug}"
    )
    for name, url in sorted(cfg.base_urls.items()):
        console.print(f"base_urls.{name}={url}")


@app.command("get")
def get_setting(
        key: str = typer.Argument(..., help="Setting key (environment, timeout_s, debug)."),
):
    cfg = load_config(with_env=False)
    k = key.strip().lower()
    if k == "environment":
        console.print(cfg.environment)
        return
    if k == "timeout_s":
        console.print(str(cfg.timeout_s))
        return
    if k == "debug":
        console.print(str(cfg.debug).lower())
        return
    console.err(f"Unknown setting: {key}")
    raise typer.Exit(code=2)


@app.command("set")
def set_setting(
        environment: str | None = typer.Option(None, "--environment", help=ENVIRONMENT_HELP),
        token: str | None = typer.Option(None, "--token", help="access-token header."),
        user_token: str | None = typer.Option(None, "--user-token", help="User bearer token."),
        timeout_s: float | None = typer.Option(None, "--timeout", help="Transport timeout in seconds."),
        debug: bool | None = typer.Option(None, "--debug/--no-debug", help="Attach transport diagnostics."),
        base_url: str | None = typer.Option(
            None, "--base-url", help="Override the base URL of the selected --environment."
        ),
):
    cfg = load_config(with_env=False)
    if environment is not None:
        cfg.environment = _parse_environment(environment)
    if token is not None:
        cfg.auth.token = token.strip()
    if user_token is not None:
        cfg.auth.user_token = user_token.strip()
    if timeout_s is not None:
        if timeout_s <= 0:
            console.err("--timeout must be > 0.")
            raise typer.Exit(code=2)
        cfg.timeout_s = timeout_s
    if debug is not None:
        cfg.debug = debug
    if base_url is not None:
        if not cfg.environment:
            console.err("--base-url needs an environment; pass --environment too.")
            raise typer.Exit(code=2)
        url = base_url.strip().rstrip("/")
        if url:
            cfg.base_urls[cfg.environment] = url
        else:
            cfg.base_urls.pop(cfg.environment, None)
    saved = save_config(cfg)
    console.ok(f"Settings updated: {saved}")
