"""CLI error handling helpers."""

import click

from storeledger.domain.errors import DomainError, PeriodNotClosableError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, PeriodNotClosableError):
        click.echo("Error: period cannot be closed:", err=True)
        for issue in error.issues:
            click.echo(f"  - {issue}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
