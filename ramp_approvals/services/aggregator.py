from datetime import datetime, UTC
from typing import Iterable

from ..models.approval import Approval
from .approval_query import SortOrder

# Undated approvals sort as the oldest
UNDATED = datetime.min.replace(tzinfo=UTC)


def parse_submitted(value: str | None) -> datetime:
    """Parse an ISO date or timestamp; naive values are taken as UTC"""
    if not value:
        return UNDATED
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return UNDATED
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def sort_approvals(approvals: Iterable[Approval], sort: SortOrder) -> list[Approval]:
    """Stable sort into a new list; equal keys keep their input order"""
    field, _, direction = sort.partition("-")
    if field == "amount":
        key = lambda a: a.amount
    elif field == "date":
        key = lambda a: parse_submitted(a.date_submitted)
    else:
        raise ValueError(f"Unsupported sort order: {sort}")
    return sorted(approvals, key=key, reverse=direction == "desc")


def combine(
    transactions: Iterable[Approval | None],
    reimbursements: Iterable[Approval | None],
    sort: SortOrder = "date-desc",
    limit: int | None = None,
) -> list[Approval]:
    """
    Merge normalized transactions and reimbursements into one display list.

    None entries (records the normalizer discarded) are dropped. Neither
    input is modified.
    """
    merged = [a for a in transactions if a is not None]
    merged += [a for a in reimbursements if a is not None]
    ordered = sort_approvals(merged, sort)
    return ordered if limit is None else ordered[:limit]
