from __future__ import annotations

import typer

from .commands import company_cmd, invoices_cmd, ops_cmd, settings_cmd
from .logging_ import setup_logging


def _build_app() -> typer.Typer:
    app = typer.Typer(
        name="erpclean",
        help="ERPClean Easy API CLI",
        no_args_is_help=True,
    )

    app.add_typer(settings_cmd.app, name="settings")
    app.add_typer(ops_cmd.app, name="ops")
    app.add_typer(company_cmd.app, name="company")
    app.add_typer(invoices_cmd.app, name="invoices")

    @app.callback()
    def _main(
            verbose: bool = typer.Option(False, "-v", "--verbose", help="Verbose logs."),
    ):
        setup_logging(verbose)

    return app


app = _build_app()
