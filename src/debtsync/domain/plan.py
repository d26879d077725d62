"""Reconciliation planning: matching import rows to open debts and diffing them.

Everything here is pure. ``build_plan`` looks only at the rows it is given and
at a ``StoreSnapshot``, so running it twice over the same inputs yields the
same plan.

The import is a full sync: the rows are the complete set of a company's
open debts, and every open debt no row matches is planned for deletion.
"""

import hashlib
import json
import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, ClassVar, Iterable, Optional, Sequence

from debtsync.domain.entities import Company, Customer, Debt, DebtStatus, User
from debtsync.domain.errors import RowErrorCode, sales_rep_not_found
from debtsync.domain.normalizer import ImportRow, NormalizedRow, RowError, normalize_row
from debtsync.domain.resolver import (
    CustomerRef,
    EntityResolver,
    ExistingCustomer,
    PendingCustomer,
    name_key,
)
from debtsync.utils.amount_parser import format_amount
from debtsync.utils.date_parser import format_date

logger = logging.getLogger(__name__)

UNKNOWN_CUSTOMER = "Unknown customer"


class RowStatus(str, Enum):
    """Classification of a planned row."""

    CREATE = "create"
    UPDATE = "update"
    SKIP = "skip"
    DELETE = "delete"
    ERROR = "error"


@dataclass(frozen=True)
class StoreSnapshot:
    """Company state a plan is computed against."""

    company: Company
    users: tuple[User, ...]
    customers: tuple[Customer, ...]
    open_debts: tuple[Debt, ...]


class _PlannedRow:
    status: ClassVar[RowStatus]

    @property
    def original_index(self) -> int:
        return self.index

    @property
    def message(self) -> Optional[str]:
        return None

    def data(self) -> dict[str, Any]:
        raise NotImplementedError

    def as_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status.value,
            "original_index": self.original_index,
            "data": self.data(),
        }
        if self.message is not None:
            result["message"] = self.message
        return result


@dataclass(frozen=True)
class CreateRow(_PlannedRow):
    """Row with no matching open debt; commit creates it."""

    status: ClassVar[RowStatus] = RowStatus.CREATE

    index: int
    row: NormalizedRow
    customer: CustomerRef
    sales_rep_id: int

    @property
    def is_new_customer(self) -> bool:
        return isinstance(self.customer, PendingCustomer)

    def data(self) -> dict[str, Any]:
        return self.row.as_dict()


@dataclass(frozen=True)
class UpdateRow(_PlannedRow):
    """Row matching an open debt whose remaining amount differs."""

    status: ClassVar[RowStatus] = RowStatus.UPDATE

    index: int
    row: NormalizedRow
    debt_id: int
    old_amount: Decimal

    @property
    def message(self) -> str:
        return f"{format_amount(self.old_amount)} -> {format_amount(self.row.amount)}"

    def data(self) -> dict[str, Any]:
        return self.row.as_dict()


@dataclass(frozen=True)
class SkipRow(_PlannedRow):
    """Row matching an open debt with exactly the same remaining amount."""

    status: ClassVar[RowStatus] = RowStatus.SKIP

    index: int
    row: NormalizedRow
    debt_id: int

    def data(self) -> dict[str, Any]:
        return self.row.as_dict()


@dataclass(frozen=True)
class DeleteRow(_PlannedRow):
    """Open debt that no import row matched."""

    status: ClassVar[RowStatus] = RowStatus.DELETE

    debt: Debt

    @property
    def original_index(self) -> int:
        return -1

    def data(self) -> dict[str, Any]:
        return {
            "customer_name": self.debt.customer_name or UNKNOWN_CUSTOMER,
            "due_date": format_date(self.debt.due_date),
            "amount": format_amount(self.debt.remaining_amount),
            "currency": self.debt.currency,
            "debt_type": self.debt.debt_type or "-",
            "sales_rep_name": "-",
            "transaction_date": None,
        }


@dataclass(frozen=True)
class ErrorRow(_PlannedRow):
    """Row that failed validation; never committed."""

    status: ClassVar[RowStatus] = RowStatus.ERROR

    index: int
    source: ImportRow
    code: RowErrorCode
    error_message: str

    @property
    def message(self) -> str:
        return self.error_message

    def data(self) -> dict[str, Any]:
        return self.source.as_dict()

    def as_dict(self) -> dict[str, Any]:
        result = super().as_dict()
        result["error_code"] = self.code.value
        return result


PlannedRow = CreateRow | UpdateRow | SkipRow | DeleteRow | ErrorRow


@dataclass(frozen=True)
class PlanSummary:
    """Count of planned rows per classification."""

    to_create: int = 0
    to_update: int = 0
    to_delete: int = 0
    to_skip: int = 0
    errors: int = 0

    def as_dict(self) -> dict[str, int]:
        return {
            "to_create": self.to_create,
            "to_update": self.to_update,
            "to_delete": self.to_delete,
            "to_skip": self.to_skip,
            "errors": self.errors,
        }


@dataclass(frozen=True)
class ReconciliationPlan:
    """Ordered planned rows: input rows first, then deletions."""

    rows: tuple[PlannedRow, ...]
    summary: PlanSummary
    fingerprint: str

    def of(self, status: RowStatus) -> list[PlannedRow]:
        return [r for r in self.rows if r.status == status]

    @property
    def deletes(self) -> list[DeleteRow]:
        return self.of(RowStatus.DELETE)

    @property
    def errors(self) -> list[ErrorRow]:
        return self.of(RowStatus.ERROR)

    def committable_rows(self) -> list[ImportRow]:
        """Rows to submit for commit: everything except deletions and errors."""
        return [
            r.row.to_import_row()
            for r in self.rows
            if isinstance(r, (CreateRow, UpdateRow, SkipRow))
        ]


class DebtMatcher:
    """Finds the open debt an import row refers to.

    Key is (customer id, due date). Only open debts of the company take part;
    partial and paid debts are never matched, so the import cannot touch
    them. Open debts are expected to have unique keys; if not, the debt with
    the lowest id wins.
    """

    def __init__(self, company_id: int, debts: Iterable[Debt]):
        self.debts: list[Debt] = sorted(
            (d for d in debts if d.company_id == company_id and d.status == DebtStatus.OPEN),
            key=lambda d: d.id,
        )
        self._by_key: dict[tuple[int, date], Debt] = {}
        for debt in self.debts:
            key = (debt.customer_id, debt.due_date)
            if key in self._by_key:
                logger.warning(
                    "Open debts %s and %s share customer %s and due date %s",
                    self._by_key[key].id,
                    debt.id,
                    debt.customer_id,
                    debt.due_date,
                )
                continue
            self._by_key[key] = debt

    def match(self, customer: CustomerRef, due_date: date) -> Optional[Debt]:
        # New customers cannot have debts yet
        if isinstance(customer, PendingCustomer):
            return None
        return self._by_key.get((customer.id, due_date))


def build_plan(rows: Sequence[ImportRow], snapshot: StoreSnapshot) -> ReconciliationPlan:
    """Classify every row as create/update/skip/error, then add deletions.

    Args:
        rows: Import rows in file order
        snapshot: Company state to diff against

    Returns:
        The reconciliation plan
    """
    resolver = EntityResolver(snapshot.users, snapshot.customers)
    matcher = DebtMatcher(snapshot.company.id, snapshot.open_debts)

    planned: list[PlannedRow] = []
    matched_ids: set[int] = set()

    for index, raw in enumerate(rows):
        result = normalize_row(raw, snapshot.company)
        if isinstance(result, RowError):
            planned.append(ErrorRow(index, raw, result.code, result.message))
            continue

        sales_rep = resolver.find_sales_rep(result.sales_rep_name)
        if sales_rep is None:
            planned.append(
                ErrorRow(
                    index,
                    raw,
                    RowErrorCode.SALES_REP_NOT_FOUND,
                    sales_rep_not_found(result.sales_rep_name),
                )
            )
            continue

        customer = resolver.resolve_customer(result.customer_name)
        debt = matcher.match(customer, result.due_date)

        if debt is None:
            planned.append(CreateRow(index, result, customer, sales_rep.id))
        elif debt.remaining_amount == result.amount:
            matched_ids.add(debt.id)
            planned.append(SkipRow(index, result, debt.id))
        else:
            matched_ids.add(debt.id)
            planned.append(UpdateRow(index, result, debt.id, debt.remaining_amount))
        logger.debug("Row %d classified as %s", index + 1, planned[-1].status.value)

    for debt in matcher.debts:
        if debt.id not in matched_ids:
            planned.append(DeleteRow(debt))

    counts = Counter(r.status for r in planned)
    summary = PlanSummary(
        to_create=counts[RowStatus.CREATE],
        to_update=counts[RowStatus.UPDATE],
        to_delete=counts[RowStatus.DELETE],
        to_skip=counts[RowStatus.SKIP],
        errors=counts[RowStatus.ERROR],
    )
    return ReconciliationPlan(tuple(planned), summary, plan_fingerprint(planned))


def plan_fingerprint(rows: Iterable[PlannedRow]) -> str:
    """Digest of the mutations a plan would make.

    Row positions and error rows are left out, so the plan rebuilt at commit
    time from the committable rows alone has the same fingerprint as long as
    the store has not changed.
    """
    entries = []
    for r in rows:
        if isinstance(r, CreateRow):
            entries.append(
                [
                    "create",
                    name_key(r.row.customer_name),
                    r.customer.id if isinstance(r.customer, ExistingCustomer) else None,
                    format_date(r.row.due_date),
                    format_amount(r.row.amount),
                    r.row.currency,
                    r.row.debt_type,
                ]
            )
        elif isinstance(r, UpdateRow):
            entries.append(
                [
                    "update",
                    r.debt_id,
                    format_amount(r.old_amount),
                    format_amount(r.row.amount),
                    r.row.currency,
                    r.row.debt_type,
                ]
            )
        elif isinstance(r, SkipRow):
            entries.append(["skip", r.debt_id, format_amount(r.row.amount)])
        elif isinstance(r, DeleteRow):
            entries.append(["delete", r.debt.id, format_amount(r.debt.remaining_amount)])

    encoded = sorted(json.dumps(entry, ensure_ascii=False) for entry in entries)
    return hashlib.sha256("\n".join(encoded).encode("utf-8")).hexdigest()
