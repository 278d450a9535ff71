"""
Maps raw Ramp records onto the Approval shape.

Amounts are always read as minor units (cents), whether Ramp sends a flat
integer or a nested ``{"amount": ..., "currency_code": ...}`` object. The
major-unit value is derived exactly with Decimal, and the minor-unit source
value travels with the Approval so clients never have to guess the unit.
"""

from decimal import Decimal
from typing import Any, Literal

from loguru import logger
from pydantic import ValidationError

from ..models.approval import Approval, calculate_priority
from ..models.raw import RampAmount, RampPerson, RampReimbursement, RampTransaction
from .approval_query import ApprovalQuery

RecordKind = Literal["transaction", "reimbursement"]

ID_PREFIXES = {"transaction": "TXN", "reimbursement": "REIMB"}
MINOR_UNITS_PER_MAJOR = Decimal(100)


def minor_units(amount: int | RampAmount | None) -> tuple[int, str | None]:
    """Return (cents, currency code if the amount object carried one)"""
    if amount is None:
        return 0, None
    if isinstance(amount, RampAmount):
        return amount.amount or 0, amount.currency_code
    return amount, None


def to_major_units(cents: int) -> Decimal:
    return Decimal(cents) / MINOR_UNITS_PER_MAJOR


def approval_id(kind: RecordKind, source_id: str) -> str:
    """TXN-/REIMB- prefix plus the trailing 8 characters of the Ramp id"""
    return f"{ID_PREFIXES[kind]}-{source_id[-8:].upper()}"


def passes_threshold(cents: int, threshold_cents: int | None) -> bool:
    """Records exactly at the threshold are included"""
    return threshold_cents is None or cents >= threshold_cents


def _department(person: RampPerson | None, mapping: dict[str, str]) -> str:
    name = person.department_name if person else None
    if not name:
        return "unknown"
    return mapping.get(name, name).lower()


def _build(
    kind: RecordKind,
    source_id: str,
    cents: int,
    currency: str | None,
    person: RampPerson | None,
    description: str,
    date_submitted: str | None,
    status: str,
    query: ApprovalQuery,
) -> Approval | None:
    if cents < 0:
        logger.debug("Skipping negative amount", kind=kind, source_id=source_id, cents=cents)
        return None
    if not passes_threshold(cents, query.threshold_cents):
        return None

    amount = to_major_units(cents)
    return Approval(
        id=approval_id(kind, source_id),
        department=_department(person, query.department_mapping),
        description=description,
        amount=amount,
        amount_minor_units=cents,
        currency=currency or "USD",
        requestor=person.full_name if person else "",
        date_submitted=date_submitted,
        priority=calculate_priority(amount),
        status=query.status_override or status,
        type=kind,
    )


def normalize_transaction(raw: dict[str, Any], query: ApprovalQuery) -> Approval | None:
    txn = RampTransaction.model_validate(raw)
    if not txn.id:
        logger.warning("Skipping transaction without id")
        return None

    cents, currency = minor_units(txn.amount)
    return _build(
        kind="transaction",
        source_id=txn.id,
        cents=cents,
        currency=currency or txn.currency_code,
        person=txn.card_holder,
        description=txn.merchant_name or txn.merchant_descriptor or "Card Transaction",
        date_submitted=txn.user_transaction_time or txn.accounting_date,
        status=txn.state or "completed",
        query=query,
    )


def normalize_reimbursement(raw: dict[str, Any], query: ApprovalQuery) -> Approval | None:
    reimb = RampReimbursement.model_validate(raw)
    if not reimb.id:
        logger.warning("Skipping reimbursement without id")
        return None

    cents, currency = minor_units(reimb.amount)
    return _build(
        kind="reimbursement",
        source_id=reimb.id,
        cents=cents,
        currency=currency or reimb.currency,
        person=reimb.user,
        description=reimb.memo or "Employee Reimbursement",
        date_submitted=reimb.created_at,
        status=reimb.status or "pending",
        query=query,
    )


_NORMALIZERS = {
    "transaction": normalize_transaction,
    "reimbursement": normalize_reimbursement,
}


def normalize(raw: dict[str, Any], kind: RecordKind, query: ApprovalQuery) -> Approval | None:
    """
    Normalize one raw Ramp record.

    Returns None when the record is below the query threshold, has a
    negative amount, lacks an id, or does not validate.
    """
    try:
        return _NORMALIZERS[kind](raw, query)
    except ValidationError as e:
        logger.warning("Skipping malformed Ramp record", kind=kind, errors=e.error_count())
        return None


def normalize_page(page: dict[str, Any] | None, kind: RecordKind, query: ApprovalQuery) -> list[Approval | None]:
    """Normalize every record under a page's "data" key"""
    records = (page or {}).get("data") or []
    return [normalize(record, kind, query) for record in records]
