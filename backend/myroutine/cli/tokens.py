"""Flask CLI commands for the invalid-token ledger."""

from __future__ import annotations

from datetime import timedelta

import click
from flask import current_app
from flask.cli import with_appcontext

from myroutine.core.extensions import get_token_provider
from myroutine.services.session.service import SessionService


@click.group("tokens")
def tokens_cli() -> None:
    """Session token maintenance commands."""


@tokens_cli.command("purge")
@click.option(
    "--older-than-days",
    type=click.IntRange(min=0),
    default=None,
    help="Retention in days. Defaults to the refresh-token lifetime.",
)
@with_appcontext
def purge_command(older_than_days: int | None) -> None:
    """Delete ledger entries that no live token can match anymore."""
    if older_than_days is None:
        retention = current_app.config["INVALID_TOKEN_RETENTION"]
    else:
        retention = timedelta(days=older_than_days)
    count = SessionService(token_provider=get_token_provider()).purge_ledger(retention)
    click.echo(f"Purged {count} invalid token(s).")
