from __future__ import annotations

import os

import typer
from erpclean_client import ConfigurationError, ERPCleanError

from .. import console
from ..config import load_config
from ..http import fail, make_client

app = typer.Typer(help="NFe invoices.")


@app.command("import")
def import_xml(
        files: list[str] = typer.Argument(..., help="NFe XML files to import."),
        environment: str | None = typer.Option(None, "--env", help="Override the configured environment."),
        json_out: bool = typer.Option(False, "--json", help="Print raw JSON."),
):
    xmls = []
    for path in files:
        try:
            with open(path, "rb") as f:
                xmls.append((os.path.basename(path), f.read(), "application/xml"))
        except OSError as exc:
            console.err(f"Cannot read {path}: {exc}")
            raise typer.Exit(code=2)

    try:
        client = make_client(load_config(), environment=environment)
    except ConfigurationError as exc:
        fail("Invalid configuration", exc)

    try:
        resp = client.importa_xml_nfe({"xmls": xmls})
    except ERPCleanError as exc:
        fail("Import failed", exc)
    finally:
        client.close()

    if json_out:
        console.print_json(resp.body)
        return
    console.ok(f"Imported {len(xmls)} file(s).")
