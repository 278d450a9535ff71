"""
Unit tests for the normalizer.

Covers minor-unit conversion, priority tiers, the threshold predicate and
default-on-absence handling of nested Ramp fields.
"""

from decimal import Decimal

import pytest

from ramp_approvals.services.approval_query import ApprovalQuery
from ramp_approvals.services.normalizer import (
    approval_id,
    normalize,
    normalize_page,
    passes_threshold,
)

OVER_10K = ApprovalQuery(threshold_cents=1_000_000)
NO_FLOOR = ApprovalQuery()


class TestReferenceRecords:
    def test_large_transaction_is_included(self):
        """$12,500 clears the $10,000 floor but sits in the low priority tier"""
        raw = {"id": "txn_abcdefgh12345678", "amount": 1250000, "merchant_name": "Acme"}

        approval = normalize(raw, "transaction", OVER_10K)

        assert approval is not None
        assert approval.id == "TXN-12345678"
        assert approval.amount == Decimal("12500")
        assert approval.amount_minor_units == 1250000
        assert approval.priority == "low"
        assert approval.description == "Acme"
        assert approval.type == "transaction"

    def test_small_reimbursement_is_excluded(self):
        raw = {"id": "r_1", "amount": {"amount": 400000}}
        assert normalize(raw, "reimbursement", OVER_10K) is None


class TestAmountsAndPriority:
    @pytest.mark.parametrize("cents,expected", [
        (0, Decimal("0")),
        (1, Decimal("0.01")),
        (1999, Decimal("19.99")),
        (5000000, Decimal("50000")),
    ])
    def test_amount_is_minor_units_over_100(self, cents, expected):
        approval = normalize({"id": "txn_1", "amount": cents}, "transaction", NO_FLOOR)
        assert approval.amount == expected

    @pytest.mark.parametrize("cents,priority", [
        (4_999_999, "low"),
        (5_000_000, "medium"),
        (9_999_999, "medium"),
        (10_000_000, "high"),
        (22_000_000, "high"),
    ])
    def test_priority_tiers(self, cents, priority):
        approval = normalize({"id": "txn_1", "amount": cents}, "transaction", NO_FLOOR)
        assert approval.priority == priority

    def test_small_amounts_are_not_guessed_as_dollars(self):
        """No "values under 1000 are already dollars" heuristic"""
        approval = normalize({"id": "txn_1", "amount": 500}, "transaction", NO_FLOOR)
        assert approval.amount == Decimal("5")

    def test_nested_amount_on_transaction(self):
        raw = {"id": "txn_1", "amount": {"amount": 250000, "currency_code": "EUR"}}
        approval = normalize(raw, "transaction", NO_FLOOR)
        assert approval.amount == Decimal("2500")
        assert approval.currency == "EUR"

    def test_flat_amount_on_reimbursement(self):
        approval = normalize({"id": "r_1", "amount": 250000}, "reimbursement", NO_FLOOR)
        assert approval.amount == Decimal("2500")

    def test_missing_amount_is_zero(self):
        approval = normalize({"id": "r_1", "amount": {}}, "reimbursement", NO_FLOOR)
        assert approval.amount == Decimal("0")
        assert approval.priority == "low"

    def test_negative_amount_is_discarded(self):
        assert normalize({"id": "txn_1", "amount": -1000}, "transaction", NO_FLOOR) is None


class TestThreshold:
    def test_exactly_at_threshold_is_included(self):
        raw = {"id": "txn_1", "amount": 1_000_000}
        assert normalize(raw, "transaction", OVER_10K) is not None

    def test_one_cent_below_threshold_is_excluded(self):
        raw = {"id": "txn_1", "amount": 999_999}
        assert normalize(raw, "transaction", OVER_10K) is None

    def test_no_threshold_includes_everything(self):
        assert passes_threshold(0, None)
        assert passes_threshold(1, None)

    def test_five_thousand_floor(self):
        query = ApprovalQuery(threshold_cents=500_000)
        assert normalize({"id": "r_1", "amount": {"amount": 500_000}}, "reimbursement", query) is not None
        assert normalize({"id": "r_2", "amount": {"amount": 499_999}}, "reimbursement", query) is None


class TestFieldMapping:
    def test_transaction_fields(self):
        raw = {
            "id": "txn_0000aaaa",
            "amount": 100,
            "merchant_descriptor": "AWS EMEA",
            "card_holder": {"first_name": "Ada", "last_name": "Lovelace", "department_name": "Engineering"},
            "accounting_date": "2024-01-05T10:00:00Z",
            "state": "CLEARED",
        }

        approval = normalize(raw, "transaction", NO_FLOOR)

        assert approval.id == "TXN-0000AAAA"
        assert approval.department == "engineering"
        assert approval.description == "AWS EMEA"
        assert approval.requestor == "Ada Lovelace"
        assert approval.date_submitted == "2024-01-05T10:00:00Z"
        assert approval.status == "CLEARED"

    def test_user_transaction_time_preferred_over_accounting_date(self):
        raw = {
            "id": "txn_1",
            "amount": 100,
            "user_transaction_time": "2024-01-04T09:00:00Z",
            "accounting_date": "2024-01-05T10:00:00Z",
        }
        assert normalize(raw, "transaction", NO_FLOOR).date_submitted == "2024-01-04T09:00:00Z"

    def test_transaction_defaults_when_nested_fields_absent(self):
        approval = normalize({"id": "txn_1", "amount": 100}, "transaction", NO_FLOOR)

        assert approval.department == "unknown"
        assert approval.requestor == ""
        assert approval.description == "Card Transaction"
        assert approval.status == "completed"
        assert approval.date_submitted is None
        assert approval.currency == "USD"

    def test_reimbursement_fields_and_defaults(self):
        raw = {
            "id": "reimb_12345678abcd",
            "amount": {"amount": 123456},
            "user": {"first_name": "Grace"},
            "created_at": "2024-01-06T12:00:00Z",
        }

        approval = normalize(raw, "reimbursement", NO_FLOOR)

        assert approval.id == "REIMB-5678ABCD"
        assert approval.requestor == "Grace"
        assert approval.department == "unknown"
        assert approval.description == "Employee Reimbursement"
        assert approval.status == "pending"
        assert approval.type == "reimbursement"

    def test_null_sub_objects_do_not_fail(self):
        raw = {"id": "r_1", "amount": None, "user": None, "memo": None}
        approval = normalize(raw, "reimbursement", NO_FLOOR)
        assert approval.requestor == ""
        assert approval.department == "unknown"

    def test_status_override(self):
        query = ApprovalQuery(status_override="pending")
        approval = normalize({"id": "txn_1", "amount": 100, "state": "CLEARED"}, "transaction", query)
        assert approval.status == "pending"

    def test_department_mapping(self):
        query = ApprovalQuery(department_mapping={"Engineering": "it", "Accounting": "finance"})
        raw = {"id": "txn_1", "amount": 100, "card_holder": {"department_name": "Engineering"}}
        assert normalize(raw, "transaction", query).department == "it"

    def test_short_ids_are_kept_whole(self):
        assert approval_id("reimbursement", "r_1") == "REIMB-R_1"


class TestDiscardedRecords:
    def test_record_without_id(self):
        assert normalize({"amount": 100}, "transaction", NO_FLOOR) is None

    def test_malformed_amount(self):
        assert normalize({"id": "txn_1", "amount": "lots"}, "transaction", NO_FLOOR) is None

    def test_non_mapping_record(self):
        assert normalize("not-a-record", "transaction", NO_FLOOR) is None

    def test_normalize_page_keeps_positions(self):
        page = {"data": [
            {"id": "txn_1", "amount": 2_000_000},
            {"id": "txn_2", "amount": 100},
        ]}
        results = normalize_page(page, "transaction", OVER_10K)
        assert [r.id if r else None for r in results] == ["TXN-TXN_1", None]

    def test_normalize_page_without_data(self):
        assert normalize_page({}, "transaction", NO_FLOOR) == []
        assert normalize_page(None, "transaction", NO_FLOOR) == []
