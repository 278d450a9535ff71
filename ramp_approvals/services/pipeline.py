"""
Approval refresh pipeline: token -> fetch -> normalize -> combine.

Transactions and reimbursements are fetched concurrently; if either request
fails the other is cancelled, the whole refresh fails and no partial list is
returned.
"""

import asyncio
from typing import Any, Awaitable

from loguru import logger
from pydantic import BaseModel, ValidationError

from ..models.approval import Approval
from ..models.raw import RampReimbursement, RampTransaction
from .aggregator import combine
from .approval_query import ApprovalQuery
from .normalizer import RecordKind, normalize_page, minor_units, to_major_units
from .ramp_client import CollectionFilters, RampClient

DEBUG_PAGE_LIMIT = 50
DEBUG_SAMPLE_SIZE = 5
DEBUG_THRESHOLDS_CENTS = {"10K": 1_000_000, "1K": 100_000}


async def fetch_all(*requests: Awaitable[Any]) -> list[Any]:
    """
    Await requests concurrently, returning their results in order.

    The first failure cancels the requests still in flight and is re-raised
    unwrapped, so callers see the client's own exception types.
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(request) for request in requests]
    except ExceptionGroup as errors:
        raise errors.exceptions[0] from None
    return [task.result() for task in tasks]


def collection_filters(query: ApprovalQuery) -> tuple[CollectionFilters, CollectionFilters]:
    """Upstream filters for (transactions, reimbursements)"""
    window = query.date_window()
    start, end = window if window else (None, None)
    min_amount = query.threshold_cents / 100 if query.threshold_cents else None

    transactions = CollectionFilters(
        min_amount=min_amount,
        start_date=start,
        end_date=end,
        limit=query.fetch_limit,
    )
    reimbursements = CollectionFilters(
        min_amount=min_amount,
        status=query.reimbursement_status,
        limit=query.fetch_limit,
    )
    return transactions, reimbursements


async def fetch_approvals(client: RampClient, query: ApprovalQuery) -> list[Approval]:
    """
    Fetch both collections and reduce them to the display list for ``query``.

    Raises:
        Whatever the client raises; nothing is swallowed here.
    """
    txn_filters, reimb_filters = collection_filters(query)
    transactions, reimbursements = await fetch_all(
        client.get_transactions(txn_filters),
        client.get_reimbursements(reimb_filters),
    )

    approvals = combine(
        normalize_page(transactions, "transaction", query),
        normalize_page(reimbursements, "reimbursement", query),
        sort=query.sort,
        limit=query.limit,
    )
    logger.info(
        "Built approvals list",
        transactions=len((transactions or {}).get("data") or []),
        reimbursements=len((reimbursements or {}).get("data") or []),
        returned=len(approvals),
        sort=query.sort,
        threshold_cents=query.threshold_cents,
    )
    return approvals


def _parse(raw: Any, model: type[BaseModel], kind: RecordKind) -> BaseModel | None:
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        logger.warning("Malformed Ramp record in debug dump", kind=kind, errors=e.error_count())
        return None


def _invalid_summary(raw: Any) -> dict[str, Any]:
    return {
        "id": raw.get("id") if isinstance(raw, dict) else None,
        "amount": None,
        "invalid": True,
    }


def _transaction_summary(txn: RampTransaction) -> dict[str, Any]:
    cents, _ = minor_units(txn.amount)
    holder = txn.card_holder
    return {
        "id": txn.id,
        "amount": float(to_major_units(cents)),
        "merchant": txn.merchant_name or txn.merchant_descriptor,
        "date": txn.user_transaction_time or txn.accounting_date,
        "cardHolder": holder.full_name if holder else "",
        "department": holder.department_name if holder else None,
    }


def _reimbursement_summary(reimb: RampReimbursement) -> dict[str, Any]:
    cents, _ = minor_units(reimb.amount)
    user = reimb.user
    return {
        "id": reimb.id,
        "amount": float(to_major_units(cents)),
        "memo": reimb.memo,
        "status": reimb.status,
        "date": reimb.created_at,
        "user": user.full_name if user else "",
        "department": user.department_name if user else None,
    }


def _count_at_or_above(records: list[BaseModel | None], threshold_cents: int) -> int:
    """Invalid records (None) are never counted"""
    return sum(
        1 for record in records
        if record is not None and minor_units(record.amount)[0] >= threshold_cents
    )


async def fetch_debug_snapshot(client: RampClient) -> dict[str, Any]:
    """
    Raw pages plus the counts used to troubleshoot threshold filtering.

    Records that do not validate are kept in the raw pages, summarised with
    ``invalid: true`` and left out of the threshold counts.
    """
    limit = CollectionFilters(limit=DEBUG_PAGE_LIMIT)
    transactions, reimbursements = await fetch_all(
        client.get_transactions(limit),
        client.get_reimbursements(limit),
    )
    txn_data = (transactions or {}).get("data") or []
    reimb_data = (reimbursements or {}).get("data") or []
    txn_parsed = [_parse(raw, RampTransaction, "transaction") for raw in txn_data]
    reimb_parsed = [_parse(raw, RampReimbursement, "reimbursement") for raw in reimb_data]

    filtering = {}
    for label, cents in DEBUG_THRESHOLDS_CENTS.items():
        filtering[f"transactionsOver{label}"] = _count_at_or_above(txn_parsed, cents)
        filtering[f"reimbursementsOver{label}"] = _count_at_or_above(reimb_parsed, cents)

    sample_transactions = [
        _transaction_summary(txn) if txn is not None else _invalid_summary(raw)
        for raw, txn in zip(txn_data[:DEBUG_SAMPLE_SIZE], txn_parsed)
    ]
    sample_reimbursements = [
        _reimbursement_summary(reimb) if reimb is not None else _invalid_summary(raw)
        for raw, reimb in zip(reimb_data[:DEBUG_SAMPLE_SIZE], reimb_parsed)
    ]

    return {
        "debug": {
            "environment": client.context.config.environment,
            "baseURL": client.base_url,
            "transactionCount": len(txn_data),
            "reimbursementCount": len(reimb_data),
            "invalidTransactions": sum(1 for txn in txn_parsed if txn is None),
            "invalidReimbursements": sum(1 for reimb in reimb_parsed if reimb is None),
            "sampleTransactions": sample_transactions,
            "sampleReimbursements": sample_reimbursements,
            "filtering": filtering,
        },
        "rawData": {
            "transactions": transactions,
            "reimbursements": reimbursements,
        },
    }
