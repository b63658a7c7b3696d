"""Flask CLI commands for seeding and importing claims."""
from __future__ import annotations

import json

import click
from flask import Flask

from claimflow.errors import ClaimFlowError


def register_commands(app: Flask) -> None:
    @app.cli.command("seed-demo")
    def seed_demo() -> None:
        """Insert demo users and claims into an empty database."""
        from claimflow.seed import seed_demo_data

        click.echo(seed_demo_data())

    @app.cli.command("import-claims")
    @click.argument("path", type=click.Path(exists=True, dir_okay=False))
    def import_claims_command(path: str) -> None:
        """Import claims from a JSON export (a list of claim records)."""
        from claimflow.services.legacy_import import import_claims

        with open(path, encoding="utf-8") as handle:
            records = json.load(handle)
        if not isinstance(records, list):
            raise click.ClickException("Expected a JSON list of claim records.")
        try:
            count = import_claims(records)
        except ClaimFlowError as exc:
            raise click.ClickException(exc.message) from exc
        click.echo(f"Imported {count} claims")
