"""CLI error handling helpers."""

import click

from debtsync.domain.errors import AuthorizationError, DomainError, StalePlanError

# Next step to suggest for errors the operator can act on
HINTS = {
    StalePlanError: "Run 'debtsync receivables analyze' again and review the new plan.",
    AuthorizationError: "Commit as a company_admin or accounting user.",
}


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error, with a hint where one applies, and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    for error_type, hint in HINTS.items():
        if isinstance(error, error_type):
            click.echo(hint, err=True)
            break
    ctx.exit(1)
