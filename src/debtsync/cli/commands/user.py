"""User (sales rep) commands."""

import click
from debtsync.domain.company import CompanyService
from debtsync.domain.entities import UserRole
from debtsync.domain.errors import DomainError
from debtsync.cli.company_resolution import resolve_company_or_exit
from debtsync.cli.error_handling import handle_domain_error


@click.group()
def user_group():
    """Manage company users."""
    pass


@user_group.command("add")
@click.argument("name", metavar="USER_NAME")
@click.option("--company", required=True, help="Company name or ID")
@click.option(
    "--role",
    type=click.Choice([r.value for r in UserRole]),
    default=UserRole.SELLER.value,
    show_default=True,
    help="User role",
)
@click.pass_context
def add_user(ctx, name: str, company: str, role: str):
    """Add a user to a company.

    Import rows name their sales rep; add missing ones here and re-run the
    analysis.

    Examples:
        debtsync user add "Ahmet Yılmaz" --company Acme
        debtsync user add "Ayşe Demir" --company Acme --role accounting
    """
    db = ctx.obj["db"]
    service = CompanyService(db)
    target = resolve_company_or_exit(ctx, service, company)

    try:
        user_id = service.add_user(target.id, name, role)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Added user '{name.strip()}' as {role} (ID: {user_id})")


@user_group.command("list")
@click.option("--company", required=True, help="Company name or ID")
@click.pass_context
def list_users(ctx, company: str):
    """List users of a company."""
    db = ctx.obj["db"]
    service = CompanyService(db)
    target = resolve_company_or_exit(ctx, service, company)

    users = service.list_users(target.id)
    if not users:
        click.echo("No users found.")
        return

    click.echo(f"\nUsers of {target.name}:")
    click.echo("-" * 60)
    for u in users:
        click.echo(f"ID: {u.id:3d} | {u.name:25s} | {u.role.value}")


def register_commands(cli):
    """Register user commands with main CLI."""
    cli.add_command(user_group, name="user")
