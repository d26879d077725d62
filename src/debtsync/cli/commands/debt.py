"""Debt listing command."""

import click
from debtsync.domain.company import CompanyService
from debtsync.domain.entities import DebtStatus
from debtsync.cli.company_resolution import resolve_company_or_exit
from debtsync.utils.amount_parser import format_amount


@click.command("debts")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--customer", "customer_id", type=int, help="Only this customer ID")
@click.option(
    "--status",
    type=click.Choice([s.value for s in DebtStatus]),
    help="Only debts with this status",
)
@click.pass_context
def list_debts(ctx, company: str, customer_id: int | None, status: str | None):
    """List debts ordered by due date."""
    db = ctx.obj["db"]
    target = resolve_company_or_exit(ctx, CompanyService(db), company)

    debts = db.list_debts(
        company_id=target.id,
        customer_id=customer_id,
        status=DebtStatus(status) if status else None,
    )
    if not debts:
        click.echo("No debts found.")
        return

    click.echo(f"\n{'ID':>5} | {'Due':10s} | {'Customer':25s} | {'Type':6s} | {'Remaining':>14s} | Status")
    click.echo("-" * 85)
    for d in debts:
        amount = f"{format_amount(d.remaining_amount)} {d.currency}"
        click.echo(
            f"{d.id:5d} | {d.due_date.isoformat()} | {(d.customer_name or '-')[:25]:25s} | "
            f"{d.debt_type[:6]:6s} | {amount:>14s} | {d.status.value}"
        )


def register_commands(cli):
    """Register debt commands with main CLI."""
    cli.add_command(list_debts)
