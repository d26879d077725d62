"""Customer commands."""

import click
from debtsync.domain.company import CompanyService
from debtsync.cli.company_resolution import resolve_company_or_exit


@click.command("customers")
@click.option("--company", required=True, help="Company name or ID")
@click.pass_context
def list_customers(ctx, company: str):
    """List customers of a company."""
    db = ctx.obj["db"]
    service = CompanyService(db)
    target = resolve_company_or_exit(ctx, service, company)

    customers = service.list_customers(target.id)
    if not customers:
        click.echo("No customers found.")
        return

    users = {u.id: u.name for u in service.list_users(target.id)}
    click.echo(f"\nCustomers of {target.name}:")
    click.echo("-" * 60)
    for c in customers:
        rep = users.get(c.assigned_user_id, "-")
        click.echo(f"ID: {c.id:4d} | {c.name:30s} | Rep: {rep}")


def register_commands(cli):
    """Register customer commands with main CLI."""
    cli.add_command(list_customers)
