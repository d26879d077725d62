"""Bulk receivables reconciliation service.

Two passes with no shared state:

* ``analyze`` builds a plan from a fresh snapshot and never writes;
* ``commit`` checks the caller, builds the plan again from a new snapshot
  and applies it.

Nothing locks the company's debts between the two passes. Another writer can
change them in between, in which case commit acts on what it sees at commit
time. Pass the fingerprint returned by ``analyze`` to ``commit`` to have it
refuse a plan that no longer matches the one the operator reviewed.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from debtsync.database.base import Database
from debtsync.domain.entities import Company, DebtStatus, UserRole
from debtsync.domain.errors import (
    AuthorizationError,
    NotFoundError,
    StalePlanError,
    company_not_found,
    role_not_allowed,
    stale_plan,
    user_not_found,
)
from debtsync.domain.executor import CommitResult, ReconciliationExecutor
from debtsync.domain.normalizer import ImportRow
from debtsync.domain.plan import (
    PlannedRow,
    PlanSummary,
    ReconciliationPlan,
    StoreSnapshot,
    build_plan,
)

logger = logging.getLogger(__name__)

COMMIT_ROLES = (UserRole.COMPANY_ADMIN, UserRole.ACCOUNTING)


@dataclass(frozen=True)
class AnalysisResult:
    """Read-only preview of what a commit would do."""

    plan: ReconciliationPlan
    success: bool = True
    message: str = "Analysis completed"

    @property
    def rows(self) -> tuple[PlannedRow, ...]:
        return self.plan.rows

    @property
    def summary(self) -> PlanSummary:
        return self.plan.summary

    @property
    def fingerprint(self) -> str:
        return self.plan.fingerprint

    @property
    def can_commit(self) -> bool:
        """Commit must not be offered while any row has an error."""
        return self.summary.errors == 0

    def committable_rows(self) -> list[ImportRow]:
        return self.plan.committable_rows()

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "fingerprint": self.fingerprint,
            "rows": [r.as_dict() for r in self.rows],
            "summary": self.summary.as_dict(),
        }


class ReconciliationService:
    """Service for synchronizing a company's open debts with an import."""

    def __init__(self, db: Database):
        """Initialize reconciliation service.

        Args:
            db: Database instance
        """
        self.db = db

    def load_snapshot(self, company_id: int) -> StoreSnapshot:
        """Read the company state a plan is built against.

        Raises:
            NotFoundError: If the company does not exist
        """
        company = self.db.get_company(company_id)
        if company is None:
            raise NotFoundError(company_not_found(company_id))
        return self._snapshot(company)

    def _snapshot(self, company: Company) -> StoreSnapshot:
        return StoreSnapshot(
            company=company,
            users=tuple(self.db.list_users(company.id)),
            customers=tuple(self.db.list_customers(company.id)),
            open_debts=tuple(
                self.db.list_debts(company_id=company.id, status=DebtStatus.OPEN)
            ),
        )

    def analyze(self, company_id: int, rows: Sequence[ImportRow]) -> AnalysisResult:
        """Classify import rows against the company's open debts without writing.

        Args:
            company_id: Company ID
            rows: Import rows in file order

        Returns:
            AnalysisResult with per-row classification, summary and fingerprint

        Raises:
            NotFoundError: If the company does not exist
        """
        snapshot = self.load_snapshot(company_id)
        plan = build_plan(rows, snapshot)
        logger.info(
            "Analyzed %d rows for company %s: %s",
            len(rows),
            company_id,
            plan.summary.as_dict(),
        )
        return AnalysisResult(plan=plan)

    def commit(
        self,
        company_id: int,
        actor_user_id: int,
        rows: Sequence[ImportRow],
        expected_fingerprint: Optional[str] = None,
    ) -> CommitResult:
        """Apply an import to the store.

        ``rows`` are the rows the analysis classified as create, update or
        skip. The plan is rebuilt from the current store, so every open debt
        not matched by these rows is deleted.

        Args:
            company_id: Company ID
            actor_user_id: ID of the user running the commit
            rows: Committable import rows
            expected_fingerprint: Fingerprint of the reviewed analysis, if any

        Returns:
            CommitResult with stats and per-row errors

        Raises:
            NotFoundError: If the company or acting user does not exist
            AuthorizationError: If the acting user may not commit imports
            StalePlanError: If the rebuilt plan differs from the reviewed one
        """
        company = self.db.get_company(company_id)
        if company is None:
            raise NotFoundError(company_not_found(company_id))

        actor = self.db.get_user(actor_user_id)
        if actor is None or actor.company_id != company_id:
            raise NotFoundError(user_not_found(actor_user_id))
        if actor.role not in COMMIT_ROLES:
            raise AuthorizationError(
                role_not_allowed(actor.role.value, tuple(r.value for r in COMMIT_ROLES))
            )

        logger.info(
            "Starting commit for company %s with %d rows (user %s)",
            company_id,
            len(rows),
            actor_user_id,
        )
        plan = build_plan(rows, self._snapshot(company))
        if expected_fingerprint is not None and plan.fingerprint != expected_fingerprint:
            raise StalePlanError(stale_plan(expected_fingerprint, plan.fingerprint))

        return ReconciliationExecutor(self.db, company).execute(plan)
