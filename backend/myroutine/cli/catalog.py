"""Flask CLI commands for the fixed Day and MuscleGroup catalogs."""

from __future__ import annotations

import click
from flask.cli import with_appcontext

from myroutine.services.catalog.service import CatalogService


@click.group("catalog")
def catalog_cli() -> None:
    """Catalog maintenance commands."""


@catalog_cli.command("seed")
@with_appcontext
def seed_command() -> None:
    """Insert the weekdays and muscle groups that are missing. Safe to rerun."""
    result = CatalogService().seed()
    click.echo("Catalog seed summary:")
    click.echo(f"  days           created={result.days:>2}")
    click.echo(f"  muscle_groups  created={result.muscle_groups:>2}")
