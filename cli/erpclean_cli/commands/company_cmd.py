from __future__ import annotations

import typer
from erpclean_client import ConfigurationError, ERPCleanError

from .. import console
from ..config import load_config
from ..http import fail, make_client

app = typer.Typer(help="Company lookups.")


@app.command("check")
def check_company(
        cnpj: str = typer.Argument(..., help="Company CNPJ."),
        environment: str | None = typer.Option(None, "--env", help="Override the configured environment."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    try:
        client = make_client(load_config(), environment=environment)
    except ConfigurationError as exc:
        fail("Invalid configuration", exc)

    try:
        resp = client.consulta_empresa_cnpj(cnpj)
    except ERPCleanError as exc:
        fail("Company lookup failed", exc)
    finally:
        client.close()

    if json_out:
        console.print_json(resp.body)
        return
    body = resp.body if isinstance(resp.body, dict) else {}
    console.ok(f"Company found: id={body.get('id', '-')} cnpj={cnpj}")


@app.command("logo")
def fetch_logo(
        cnpj: str = typer.Argument(..., help="Company CNPJ."),
        out: str = typer.Option(..., "--out", "-o", help="Where to write the logo."),
        environment: str | None = typer.Option(None, "--env", help="Override the configured environment."),
):
    try:
        client = make_client(load_config(), environment=environment)
    except ConfigurationError as exc:
        fail("Invalid configuration", exc)

    try:
        logo = client.consulta_logo(cnpj)
    except ERPCleanError as exc:
        fail("Logo lookup failed", exc)
    finally:
        client.close()

    if logo is None:
        console.warn(f"No logo available for {cnpj}.")
        raise typer.Exit(code=1)
    data = logo if isinstance(logo, (bytes, bytearray)) else str(logo).encode("utf-8")
    with open(out, "wb") as f:
        f.write(data)
    console.ok(f"Logo written: {out} ({len(data)} bytes)")
