"""Applies a reconciliation plan to the store."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, time, UTC
from typing import Any, Optional

from debtsync.database.base import Database
from debtsync.domain.entities import Company
from debtsync.domain.errors import DomainError
from debtsync.domain.plan import (
    CreateRow,
    ErrorRow,
    ReconciliationPlan,
    SkipRow,
    UpdateRow,
)
from debtsync.domain.resolver import ExistingCustomer, name_key

logger = logging.getLogger(__name__)


@dataclass
class CommitStats:
    """Running count of applied mutations."""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    skipped: int = 0

    @property
    def mutations(self) -> int:
        return self.created + self.updated + self.deleted

    def as_dict(self) -> dict[str, int]:
        return {
            "created": self.created,
            "updated": self.updated,
            "deleted": self.deleted,
            "skipped": self.skipped,
        }


@dataclass
class CommitResult:
    """Outcome of a commit.

    Commit is not atomic: mutations made before a failure stay applied.
    ``success`` is True when nothing failed or at least one mutation went
    through, so partial success has to be read from ``errors``.
    """

    stats: CommitStats = field(default_factory=CommitStats)
    errors: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors or self.stats.mutations > 0

    @property
    def message(self) -> str:
        if self.errors:
            return "Completed with errors"
        return "Import completed successfully"

    def as_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "message": self.message,
            "stats": self.stats.as_dict(),
            "errors": list(self.errors),
        }


class ReconciliationExecutor:
    """Replays a plan row by row, then deletes unmatched debts in one batch.

    A failing row is recorded in the result and the run carries on with the
    next one.
    """

    def __init__(self, db: Database, company: Company):
        self.db = db
        self.company = company
        # New customers created during this run, by name key
        self._created_customers: dict[str, int] = {}

    def execute(self, plan: ReconciliationPlan) -> CommitResult:
        result = CommitResult()

        for planned in plan.rows:
            if isinstance(planned, ErrorRow):
                result.errors.append(f"Row {planned.index + 1}: {planned.message}")
            elif isinstance(planned, CreateRow):
                self._create(planned, result)
            elif isinstance(planned, UpdateRow):
                self._update(planned, result)
            elif isinstance(planned, SkipRow):
                result.stats.skipped += 1

        self._delete(plan, result)

        logger.info(
            "Commit for company %s: %s, %d errors",
            self.company.id,
            result.stats.as_dict(),
            len(result.errors),
        )
        return result

    def _customer_id(self, planned: CreateRow) -> int:
        if isinstance(planned.customer, ExistingCustomer):
            return planned.customer.id
        key = name_key(planned.customer.name)
        customer_id = self._created_customers.get(key)
        if customer_id is None:
            customer_id = self.db.create_customer(
                company_id=self.company.id,
                name=planned.customer.name,
                assigned_user_id=planned.sales_rep_id,
            )
            self._created_customers[key] = customer_id
            logger.info("Created customer '%s' (ID: %s)", planned.customer.name, customer_id)
        return customer_id

    def _create(self, planned: CreateRow, result: CommitResult) -> None:
        row_num = planned.index + 1
        try:
            customer_id = self._customer_id(planned)
        except DomainError as e:
            logger.warning("Row %d: customer creation failed: %s", row_num, e)
            result.errors.append(f"Row {row_num}: Customer could not be created - {e}")
            return

        created_at: Optional[datetime] = None
        if planned.row.transaction_date is not None:
            created_at = datetime.combine(planned.row.transaction_date, time.min, tzinfo=UTC)

        try:
            self.db.create_debt(
                company_id=self.company.id,
                customer_id=customer_id,
                debt_type=planned.row.debt_type,
                currency=planned.row.currency,
                amount=planned.row.amount,
                due_date=planned.row.due_date,
                created_at=created_at,
            )
        except DomainError as e:
            logger.warning("Row %d: debt creation failed: %s", row_num, e)
            result.errors.append(f"Row {row_num}: Create failed - {e}")
            return
        result.stats.created += 1

    def _update(self, planned: UpdateRow, result: CommitResult) -> None:
        row_num = planned.index + 1
        try:
            self.db.replace_debt_amount(
                debt_id=planned.debt_id,
                amount=planned.row.amount,
                currency=planned.row.currency,
                debt_type=planned.row.debt_type,
            )
        except DomainError as e:
            logger.warning("Row %d: update of debt %s failed: %s", row_num, planned.debt_id, e)
            result.errors.append(f"Row {row_num}: Update failed - {e}")
            return
        result.stats.updated += 1

    def _delete(self, plan: ReconciliationPlan, result: CommitResult) -> None:
        debt_ids = [d.debt.id for d in plan.deletes]
        if not debt_ids:
            return
        try:
            result.stats.deleted = self.db.delete_debts(debt_ids)
        except DomainError as e:
            logger.warning("Deleting %d debts failed: %s", len(debt_ids), e)
            result.errors.append(f"Delete failed - {e}")
