"""CLI helpers for company resolution."""

from __future__ import annotations

import click
from debtsync.domain.company import CompanyService
from debtsync.domain.entities import Company
from debtsync.domain.errors import NotFoundError


def resolve_company_or_exit(
    ctx: click.Context, company_service: CompanyService, company: str
) -> Company:
    """Resolve company name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return company_service.resolve_company(company)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
