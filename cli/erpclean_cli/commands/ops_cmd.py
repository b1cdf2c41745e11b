from __future__ import annotations

import json

import typer
from erpclean_client import ConfigurationError, ERPCleanError
from erpclean_client.operations import OPERATIONS
from rich.table import Table

from .. import console
from ..config import load_config
from ..http import fail, make_client

OPS_USAGE = """\
Usage:
  erpclean ops list
  erpclean ops call <name> [--data JSON|@file.json] [--param name=value]... [--header "Name: value"]... [--env ENV]
"""

app = typer.Typer(help="ERPClean API operations.\n\n" + OPS_USAGE)


def _load_data(raw: str | None) -> dict | None:
    if raw is None:
        return None
    text = raw
    if raw.startswith("@"):
        try:
            with open(raw[1:], "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as exc:
            console.err(f"Cannot read {raw[1:]}: {exc}")
            raise typer.Exit(code=2)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        console.err(f"--data is not valid JSON: {exc}")
        raise typer.Exit(code=2)
    if not isinstance(data, dict):
        console.err("--data must be a JSON object.")
        raise typer.Exit(code=2)
    return data


def _parse_params(values: list[str] | None) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = []
    for item in values or []:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            console.err(f"Invalid --param {item!r}, expected name=value.")
            raise typer.Exit(code=2)
        params.append((name.strip(), value))
    return params


@app.command("list")
def list_operations(
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    ops = sorted(OPERATIONS.values(), key=lambda o: o.name)
    if json_out:
        console.print_json(
            [
                {
                    "name": op.name,
                    "method": op.method,
                    "route": op.route,
                    "upload": op.upload,
                    "required": [name for name, _ in op.required],
                }
                for op in ops
            ]
        )
        return

    table = Table(title="Operations")
    table.add_column("name", style="bold")
    table.add_column("method")
    table.add_column("route")
    table.add_column("required")
    for op in ops:
        method = f"{op.method} (upload)" if op.upload else op.method
        table.add_row(op.name, method, op.route, ", ".join(name for name, _ in op.required) or "-")
    console.print(table)


@app.command("call")
def call_operation(
        name: str = typer.Argument(..., help="Operation name, see `erpclean ops list`."),
        data: str | None = typer.Option(None, "--data", help="JSON body, or @path to a JSON file."),
        param: list[str] | None = typer.Option(None, "--param", help="Query parameter name=value (repeatable)."),
        header: list[str] | None = typer.Option(None, "--header", help='Extra header "Name: value" (repeatable).'),
        environment: str | None = typer.Option(None, "--env", help="Override the configured environment."),
        body_only: bool = typer.Option(False, "--body", help="Print only the response body."),
):
    payload = _load_data(data)
    params = _parse_params(param)

    try:
        client = make_client(load_config(), environment=environment)
    except ConfigurationError as exc:
        fail("Invalid configuration", exc)

    try:
        resp = client.call(name, payload, params, header or None)
    except ERPCleanError as exc:
        fail(f"{name} failed", exc)
    finally:
        client.close()

    if body_only:
        console.print_json(resp.body)
        return
    console.print_json(resp.to_dict())
