"""Payment command."""

from datetime import date

import click
from debtsync.domain.errors import DomainError
from debtsync.domain.payment import PaymentService, PAYMENT_METHODS
from debtsync.cli.error_handling import handle_domain_error
from debtsync.utils.amount_parser import format_amount


@click.group()
def payment_group():
    """Record customer payments."""
    pass


@payment_group.command("add")
@click.option("--customer", "customer_id", type=int, required=True, help="Customer ID")
@click.option("--amount", required=True, help="Amount received")
@click.option("--currency", required=True, help="Currency code (e.g. TRY)")
@click.option("--date", "payment_date", help="Payment date (default: today)")
@click.option(
    "--method",
    type=click.Choice(PAYMENT_METHODS),
    default=PAYMENT_METHODS[0],
    show_default=True,
    help="Payment method",
)
@click.option("--reference", help="Bank or receipt reference")
@click.pass_context
def add_payment(
    ctx,
    customer_id: int,
    amount: str,
    currency: str,
    payment_date: str | None,
    method: str,
    reference: str | None,
):
    """Record a payment and apply it to the customer's oldest debts first.

    Examples:
        debtsync payment add --customer 3 --amount 1500 --currency TRY
        debtsync payment add --customer 3 --amount 250 --currency USD --method Havale/EFT --reference EFT-991
    """
    db = ctx.obj["db"]
    service = PaymentService(db)

    try:
        result = service.record_payment(
            customer_id=customer_id,
            amount=amount,
            currency=currency,
            payment_date=payment_date or date.today(),
            method=method,
            reference=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    payment = result.payment
    click.echo(
        f"Recorded payment {payment.id}: {format_amount(payment.amount)} {payment.currency} "
        f"on {payment.payment_date.isoformat()}"
    )
    for a in result.allocations:
        click.echo(
            f"  Debt {a.debt_id}: -{format_amount(a.deducted)} -> "
            f"{format_amount(a.remaining_amount)} ({a.status.value})"
        )
    if result.unallocated > 0:
        click.echo(
            f"  Unallocated: {format_amount(result.unallocated)} {payment.currency} "
            "(exceeds open debts, not kept as credit)"
        )
    for error in result.errors:
        click.echo(f"  {error}", err=True)


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")
