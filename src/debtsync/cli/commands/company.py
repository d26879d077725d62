"""Company management commands."""

import click
from debtsync.domain.company import CompanyService, DEFAULT_CURRENCIES, DEFAULT_DEBT_TYPES
from debtsync.domain.errors import DomainError
from debtsync.cli.error_handling import handle_domain_error


@click.group()
def company_group():
    """Manage companies."""
    pass


@company_group.command("create")
@click.argument("name", metavar="COMPANY_NAME")
@click.option("--base-currency", default="TRY", show_default=True, help="Fallback currency for imports")
@click.option(
    "--currency",
    "currencies",
    multiple=True,
    help=f"Accepted currency code, repeatable (default: {', '.join(DEFAULT_CURRENCIES)})",
)
@click.option(
    "--debt-type",
    "debt_types",
    multiple=True,
    help=f"Debt type, repeatable (default: {', '.join(DEFAULT_DEBT_TYPES)})",
)
@click.pass_context
def create_company(ctx, name: str, base_currency: str, currencies: tuple, debt_types: tuple):
    """Create a new company.

    Examples:
        debtsync company create "Acme Dağıtım"
        debtsync company create "Acme" --base-currency USD --currency USD --currency EUR
    """
    db = ctx.obj["db"]
    service = CompanyService(db)

    try:
        company_id = service.create_company(
            name=name,
            base_currency=base_currency,
            currencies=currencies or None,
            debt_types=debt_types or None,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Created company '{name.strip()}' (ID: {company_id})")


@company_group.command("list")
@click.pass_context
def list_companies(ctx):
    """List all companies."""
    db = ctx.obj["db"]
    service = CompanyService(db)

    companies = service.list_companies()
    if not companies:
        click.echo("No companies found.")
        return

    click.echo("\nCompanies:")
    click.echo("-" * 70)
    for c in companies:
        click.echo(
            f"ID: {c.id:3d} | {c.name:20s} | Base: {c.base_currency} | "
            f"Currencies: {', '.join(c.currencies)}"
        )


def register_commands(cli):
    """Register company commands with main CLI."""
    cli.add_command(company_group, name="company")
