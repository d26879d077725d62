"""Tests for ReconciliationService analyze and commit against a real store."""

import pytest
from datetime import date
from decimal import Decimal

from debtsync.domain.entities import DebtStatus
from debtsync.domain.errors import AuthorizationError, NotFoundError, StalePlanError
from debtsync.domain.plan import RowStatus


class TestAnalyze:
    """Analysis classifies rows and never writes."""

    def test_new_debt_is_create(self, reconciliation_service, sample_company, sample_users, make_row):
        analysis = reconciliation_service.analyze(sample_company.id, [make_row()])

        assert [r.status for r in analysis.rows] == [RowStatus.CREATE]
        assert analysis.can_commit
        assert analysis.success
        assert analysis.message == "Analysis completed"

    def test_changed_amount_is_update(
        self, reconciliation_service, sample_company, sample_users, make_row, add_debt
    ):
        add_debt(amount="10000")

        analysis = reconciliation_service.analyze(sample_company.id, [make_row(amount=15000)])

        row = analysis.rows[0]
        assert row.status == RowStatus.UPDATE
        assert row.message == "10000 -> 15000"

    def test_unmatched_open_debt_is_delete(
        self, reconciliation_service, sample_company, sample_users, make_row, add_debt
    ):
        add_debt(customer_name="Globex", due=date(2024, 3, 1), amount="500")

        analysis = reconciliation_service.analyze(sample_company.id, [make_row()])

        assert analysis.summary.to_create == 1
        assert analysis.summary.to_delete == 1
        delete = analysis.rows[-1]
        assert delete.status == RowStatus.DELETE
        assert delete.original_index == -1
        assert delete.data()["customer_name"] == "Globex"

    def test_partial_debts_are_left_alone(
        self, temp_db, reconciliation_service, sample_company, sample_users, add_debt
    ):
        debt = add_debt(amount="1000")
        temp_db.update_debt_balance(debt.id, Decimal("400"), DebtStatus.PARTIAL)

        analysis = reconciliation_service.analyze(sample_company.id, [])

        assert analysis.rows == ()
        assert analysis.summary.to_delete == 0

    def test_analyze_does_not_write(
        self, temp_db, reconciliation_service, sample_company, sample_users, make_row, add_debt
    ):
        add_debt(customer_name="Globex", amount="500")

        reconciliation_service.analyze(sample_company.id, [make_row(customer_name="Brand New")])

        assert [c.name for c in temp_db.list_customers(sample_company.id)] == ["Globex"]
        assert len(temp_db.list_debts(company_id=sample_company.id)) == 1

    def test_error_rows_block_commit(self, reconciliation_service, sample_company, sample_users, make_row):
        analysis = reconciliation_service.analyze(
            sample_company.id, [make_row(), make_row(sales_rep_name="Nobody")]
        )

        assert analysis.summary.errors == 1
        assert not analysis.can_commit
        assert len(analysis.committable_rows()) == 1

    def test_unknown_company(self, reconciliation_service, make_row):
        with pytest.raises(NotFoundError):
            reconciliation_service.analyze(999, [make_row()])


class TestCommit:
    """Commit applies the plan rebuilt from the store."""

    def test_commit_creates_customer_and_debt(
        self, temp_db, reconciliation_service, sample_company, accountant, seller, make_row
    ):
        rows = [make_row(customer_name="Yeni Müşteri", transaction_date="15.01.2024")]

        result = reconciliation_service.commit(sample_company.id, accountant.id, rows)

        assert result.success
        assert result.errors == []
        assert result.stats.created == 1
        customers = temp_db.list_customers(sample_company.id)
        assert [c.name for c in customers] == ["Yeni Müşteri"]
        assert customers[0].assigned_user_id == seller.id
        debts = temp_db.list_debts(company_id=sample_company.id)
        assert len(debts) == 1
        assert debts[0].original_amount == Decimal("15000")
        assert debts[0].status == DebtStatus.OPEN
        assert debts[0].created_at.date() == date(2024, 1, 15)

    def test_new_customer_created_once(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row
    ):
        rows = [
            make_row(customer_name="Yeni Müşteri", due_date="2024-05-20"),
            make_row(customer_name="yeni müşteri ", due_date="2024-06-20"),
        ]

        result = reconciliation_service.commit(sample_company.id, accountant.id, rows)

        assert result.stats.created == 2
        customers = temp_db.list_customers(sample_company.id)
        assert len(customers) == 1
        assert len(temp_db.list_debts(customer_id=customers[0].id)) == 2

    def test_commit_then_analyze_is_all_skips(
        self, reconciliation_service, sample_company, accountant, make_row
    ):
        rows = [
            make_row(customer_name="Acme", amount="15000"),
            make_row(customer_name="Globex", amount="2500", currency="USD"),
        ]
        reconciliation_service.commit(sample_company.id, accountant.id, rows)

        analysis = reconciliation_service.analyze(sample_company.id, rows)

        assert analysis.summary.as_dict() == {
            "to_create": 0,
            "to_update": 0,
            "to_delete": 0,
            "to_skip": 2,
            "errors": 0,
        }

    def test_update_replaces_amount(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row, add_debt
    ):
        debt = add_debt(amount="10000")

        result = reconciliation_service.commit(
            sample_company.id, accountant.id, [make_row(amount="15000", debt_type="Senet")]
        )

        assert result.stats.updated == 1
        updated = temp_db.get_debt(debt.id)
        assert updated.original_amount == Decimal("15000")
        assert updated.remaining_amount == Decimal("15000")
        assert updated.debt_type == "Senet"

    def test_delete_removes_dependents(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row, add_debt
    ):
        kept = add_debt()
        doomed = add_debt(customer_name="Globex", due=date(2024, 3, 1), amount="500")
        temp_db.create_note(sample_company.id, doomed.id, "Called twice")
        temp_db.create_promise(sample_company.id, doomed.id, Decimal("100"), date(2024, 3, 15))

        result = reconciliation_service.commit(sample_company.id, accountant.id, [make_row()])

        assert result.success
        assert result.stats.as_dict() == {"created": 0, "updated": 0, "deleted": 1, "skipped": 1}
        assert temp_db.get_debt(doomed.id) is None
        assert temp_db.list_notes(doomed.id) == []
        assert temp_db.list_promises(doomed.id) == []
        assert temp_db.get_debt(kept.id) is not None

    def test_empty_import_deletes_all_open_debts(
        self, temp_db, reconciliation_service, sample_company, accountant, add_debt
    ):
        add_debt(due=date(2024, 1, 1))
        add_debt(due=date(2024, 2, 1))

        result = reconciliation_service.commit(sample_company.id, accountant.id, [])

        assert result.stats.deleted == 2
        assert temp_db.list_debts(company_id=sample_company.id) == []

    def test_seller_cannot_commit(
        self, temp_db, reconciliation_service, sample_company, seller, make_row, add_debt
    ):
        add_debt(customer_name="Globex", amount="500")

        with pytest.raises(AuthorizationError):
            reconciliation_service.commit(sample_company.id, seller.id, [make_row()])

        debts = temp_db.list_debts(company_id=sample_company.id)
        assert [d.customer_name for d in debts] == ["Globex"]

    def test_admin_can_commit(self, reconciliation_service, sample_company, sample_users, make_row):
        admin = sample_users["Mehmet Kaya"]

        result = reconciliation_service.commit(sample_company.id, admin.id, [make_row()])

        assert result.stats.created == 1

    def test_user_from_other_company(
        self, company_service, reconciliation_service, sample_company, sample_users, make_row
    ):
        other_id = company_service.create_company("Başka Şirket")
        outsider_id = company_service.add_user(other_id, "Zeynep", "accounting")

        with pytest.raises(NotFoundError):
            reconciliation_service.commit(sample_company.id, outsider_id, [make_row()])

    def test_unknown_user(self, reconciliation_service, sample_company, make_row):
        with pytest.raises(NotFoundError):
            reconciliation_service.commit(sample_company.id, 999, [make_row()])

    def test_fingerprint_from_analysis_is_accepted(
        self, reconciliation_service, sample_company, accountant, make_row, add_debt
    ):
        add_debt(amount="10000")
        analysis = reconciliation_service.analyze(sample_company.id, [make_row()])

        result = reconciliation_service.commit(
            sample_company.id,
            accountant.id,
            analysis.committable_rows(),
            expected_fingerprint=analysis.fingerprint,
        )

        assert result.stats.updated == 1

    def test_store_change_after_analysis_is_stale(
        self, reconciliation_service, sample_company, accountant, make_row, add_debt
    ):
        analysis = reconciliation_service.analyze(sample_company.id, [make_row()])
        doomed = add_debt(customer_name="Globex", amount="500")

        with pytest.raises(StalePlanError):
            reconciliation_service.commit(
                sample_company.id,
                accountant.id,
                analysis.committable_rows(),
                expected_fingerprint=analysis.fingerprint,
            )

        assert reconciliation_service.db.get_debt(doomed.id) is not None

    def test_error_rows_are_reported(
        self, reconciliation_service, sample_company, accountant, make_row
    ):
        rows = [make_row(), make_row(customer_name="Other", amount="abc")]

        result = reconciliation_service.commit(sample_company.id, accountant.id, rows)

        assert result.stats.created == 1
        assert result.errors == ["Row 2: Invalid amount (abc)"]
        assert result.success
        assert result.message == "Completed with errors"

    def test_sub_cent_amount_is_rejected_not_rounded(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row
    ):
        """An amount the store would round never reaches it."""
        result = reconciliation_service.commit(
            sample_company.id, accountant.id, [make_row(amount="100.005")]
        )

        assert result.errors == ["Row 1: Invalid amount (100.005)"]
        assert result.stats.created == 0
        assert temp_db.list_debts(company_id=sample_company.id) == []

    def test_commit_then_analyze_with_cents_is_all_skips(
        self, reconciliation_service, sample_company, accountant, make_row
    ):
        rows = [
            make_row(customer_name="Acme", amount="1.234,56"),
            make_row(customer_name="Globex", amount="99.9"),
        ]
        reconciliation_service.commit(sample_company.id, accountant.id, rows)

        analysis = reconciliation_service.analyze(sample_company.id, rows)

        assert analysis.summary.to_skip == 2
        assert analysis.summary.to_update == 0


class TestCommitStoreFailures:
    """A failing store operation is recorded and the commit carries on."""

    def test_failed_create_continues_with_next_row(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row, fail_on
    ):
        fail_on("create_debt", lambda **kwargs: kwargs["amount"] == Decimal("666"))
        rows = [make_row(customer_name="Broken", amount="666"), make_row()]

        result = reconciliation_service.commit(sample_company.id, accountant.id, rows)

        assert result.errors == ["Row 1: Create failed - create_debt unavailable"]
        assert result.stats.created == 1
        assert result.success
        assert result.message == "Completed with errors"
        debts = temp_db.list_debts(company_id=sample_company.id)
        assert [d.customer_name for d in debts] == ["Acme"]

    def test_failed_customer_creation(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row, fail_on
    ):
        fail_on("create_customer", lambda **kwargs: kwargs["name"] == "Broken")
        rows = [
            make_row(customer_name="Broken", due_date="2024-05-20"),
            make_row(customer_name="Broken", due_date="2024-06-20"),
            make_row(),
        ]

        result = reconciliation_service.commit(sample_company.id, accountant.id, rows)

        assert result.errors == [
            "Row 1: Customer could not be created - create_customer unavailable",
            "Row 2: Customer could not be created - create_customer unavailable",
        ]
        assert result.stats.created == 1
        assert [c.name for c in temp_db.list_customers(sample_company.id)] == ["Acme"]

    def test_failed_update_leaves_debt_unchanged(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row, add_debt, fail_on
    ):
        acme = add_debt(customer_name="Acme", amount="10000")
        globex = add_debt(customer_name="Globex", amount="100")
        fail_on("replace_debt_amount", lambda **kwargs: kwargs["debt_id"] == acme.id)
        rows = [make_row(amount="15000"), make_row(customer_name="Globex", amount="200")]

        result = reconciliation_service.commit(sample_company.id, accountant.id, rows)

        assert result.errors == ["Row 1: Update failed - replace_debt_amount unavailable"]
        assert result.stats.updated == 1
        assert temp_db.get_debt(acme.id).remaining_amount == Decimal("10000")
        assert temp_db.get_debt(globex.id).remaining_amount == Decimal("200")

    def test_failed_delete_batch(
        self, temp_db, reconciliation_service, sample_company, accountant, make_row, add_debt, fail_on
    ):
        stale = add_debt(customer_name="Globex", amount="500")
        fail_on("delete_debts")

        result = reconciliation_service.commit(sample_company.id, accountant.id, [make_row()])

        assert result.errors == ["Delete failed - delete_debts unavailable"]
        assert result.stats.as_dict() == {"created": 1, "updated": 0, "deleted": 0, "skipped": 0}
        assert result.success
        assert temp_db.get_debt(stale.id) is not None

    def test_nothing_applied_is_not_success(
        self, reconciliation_service, sample_company, accountant, make_row, fail_on
    ):
        fail_on("create_debt")

        result = reconciliation_service.commit(sample_company.id, accountant.id, [make_row()])

        assert not result.success
        assert result.stats.mutations == 0
        assert result.as_dict()["errors"] == ["Row 1: Create failed - create_debt unavailable"]
