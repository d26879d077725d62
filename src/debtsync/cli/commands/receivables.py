"""Receivables import commands: analyze and commit."""

import click
from debtsync.domain.company import CompanyService
from debtsync.domain.errors import DomainError
from debtsync.domain.plan import RowStatus
from debtsync.domain.reconciliation import AnalysisResult, ReconciliationService
from debtsync.utils.import_file import read_import_file
from debtsync.cli.company_resolution import resolve_company_or_exit
from debtsync.cli.error_handling import handle_domain_error

STATUS_LABELS = {
    RowStatus.CREATE: "CREATE",
    RowStatus.UPDATE: "UPDATE",
    RowStatus.SKIP: "SKIP",
    RowStatus.DELETE: "DELETE",
    RowStatus.ERROR: "ERROR",
}


@click.group()
def receivables_group():
    """Synchronize open debts with a receivables import file."""
    pass


def _print_summary(analysis: AnalysisResult) -> None:
    summary = analysis.summary
    click.echo("\nAnalysis:")
    click.echo(f"  Create: {summary.to_create}")
    click.echo(f"  Update: {summary.to_update}")
    click.echo(f"  Skip:   {summary.to_skip}")
    click.echo(f"  Delete: {summary.to_delete}")
    click.echo(f"  Errors: {summary.errors}")
    if summary.to_delete:
        click.secho(
            f"\nWARNING: {summary.to_delete} open debt(s) are not in the file and will be "
            "DELETED on commit, together with their notes, promises and payments.",
            fg="red",
            bold=True,
            err=True,
        )


def _print_rows(analysis: AnalysisResult, show_all: bool) -> None:
    rows = [r for r in analysis.rows if show_all or r.status != RowStatus.SKIP]
    if not rows:
        return
    click.echo(f"\n{'Row':>5} | {'Action':6s} | {'Customer':25s} | {'Due':10s} | {'Amount':>14s} | Note")
    click.echo("-" * 90)
    for r in rows:
        data = r.data()
        row_label = "-" if r.original_index < 0 else str(r.original_index + 1)
        amount = f"{data.get('amount') or ''} {data.get('currency') or ''}".strip()
        click.echo(
            f"{row_label:>5} | {STATUS_LABELS[r.status]:6s} | "
            f"{str(data.get('customer_name') or '')[:25]:25s} | {str(data.get('due_date') or '')[:10]:10s} | "
            f"{amount[:14]:>14s} | {r.message or ''}"
        )


def _analyze_file(ctx, company: str, import_file: str):
    db = ctx.obj["db"]
    company_service = CompanyService(db)
    target = resolve_company_or_exit(ctx, company_service, company)
    try:
        rows = read_import_file(import_file)
        analysis = ReconciliationService(db).analyze(target.id, rows)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    except DomainError as e:
        handle_domain_error(ctx, e)
    return target, analysis


@receivables_group.command("analyze")
@click.argument("import_file", type=click.Path(exists=True))
@click.option("--company", required=True, help="Company name or ID")
@click.option("--show-all", is_flag=True, help="Also list rows that would be skipped")
@click.pass_context
def analyze(ctx, import_file: str, company: str, show_all: bool):
    """Preview what committing IMPORT_FILE would change. Writes nothing.

    The file is treated as the complete list of the company's open debts:
    any open debt missing from it is reported for deletion.
    """
    _, analysis = _analyze_file(ctx, company, import_file)

    _print_rows(analysis, show_all)
    _print_summary(analysis)
    click.echo(f"\nPlan fingerprint: {analysis.fingerprint}")
    if not analysis.can_commit:
        click.echo("Fix the rows with errors before committing.", err=True)


@receivables_group.command("commit")
@click.argument("import_file", type=click.Path(exists=True))
@click.option("--company", required=True, help="Company name or ID")
@click.option("--as-user", "as_user", required=True, help="Name of the user performing the import")
@click.option("--fingerprint", help="Fingerprint printed by 'analyze'; refuse to commit if the plan changed")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def commit(ctx, import_file: str, company: str, as_user: str, fingerprint: str | None, yes: bool):
    """Apply IMPORT_FILE: create, update and delete open debts.

    The analysis is re-run first; nothing is written while any row has an
    error. Commit is not atomic: if a row fails, earlier changes stay and the
    failure is listed.
    """
    db = ctx.obj["db"]
    target, analysis = _analyze_file(ctx, company, import_file)

    actor = CompanyService(db).find_user(target.id, as_user)
    if actor is None:
        click.echo(f"Error: User '{as_user}' not found in company '{target.name}'", err=True)
        ctx.exit(1)

    _print_summary(analysis)
    if not analysis.can_commit:
        _print_rows(analysis, show_all=False)
        click.echo("\nError: Fix the rows with errors before committing.", err=True)
        ctx.exit(1)

    if not yes:
        click.confirm("\nApply these changes?", abort=True)

    try:
        result = ReconciliationService(db).commit(
            company_id=target.id,
            actor_user_id=actor.id,
            rows=analysis.committable_rows(),
            expected_fingerprint=fingerprint or analysis.fingerprint,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nCommit complete:")
    click.echo(f"  Created: {result.stats.created}")
    click.echo(f"  Updated: {result.stats.updated}")
    click.echo(f"  Skipped: {result.stats.skipped}")
    click.echo(f"  Deleted: {result.stats.deleted}")
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)
    if not result.success:
        ctx.exit(1)


def register_commands(cli):
    """Register receivables commands with main CLI."""
    cli.add_command(receivables_group, name="receivables")
