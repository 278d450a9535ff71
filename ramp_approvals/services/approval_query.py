"""
Pipeline parameters and the named presets built from them.

Each preset reproduces one historical version of the approvals handler
(no floor / $10,000 floor / $5,000 floor) as data instead of a separate
code path.
"""

from datetime import datetime, timedelta, UTC
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

SortOrder = Literal["amount-desc", "amount-asc", "date-desc", "date-asc"]


class ApprovalQuery(BaseModel):
    """Everything that varies between approval views"""
    model_config = ConfigDict(frozen=True)

    threshold_cents: int | None = None  # None = include every amount
    sort: SortOrder = "date-desc"
    limit: int | None = None  # None = unbounded
    lookback_days: int | None = None  # None = no date window
    fetch_limit: int | None = None  # page size requested from Ramp
    status_override: str | None = None
    reimbursement_status: str | None = None
    department_mapping: dict[str, str] = Field(default_factory=dict)

    def date_window(self, now: datetime | None = None) -> tuple[str, str] | None:
        """ISO start/end pair covering the lookback window, or None"""
        if self.lookback_days is None:
            return None
        end = now or datetime.now(UTC)
        start = end - timedelta(days=self.lookback_days)
        return start.isoformat(), end.isoformat()


PRESETS: dict[str, ApprovalQuery] = {
    "dashboard": ApprovalQuery(
        threshold_cents=None,
        sort="date-desc",
        limit=5,
        fetch_limit=20,
    ),
    "over-10k": ApprovalQuery(
        threshold_cents=1_000_000,
        sort="amount-desc",
        limit=None,
        lookback_days=7,
        status_override="pending",
        reimbursement_status="PENDING_APPROVAL",
    ),
    "over-5k": ApprovalQuery(
        threshold_cents=500_000,
        sort="amount-desc",
        limit=None,
        lookback_days=7,
        status_override="pending",
        reimbursement_status="PENDING_APPROVAL",
    ),
}


def build_query(
    preset: str = "dashboard",
    threshold_dollars: float | None = None,
    limit: int | None = None,
    lookback_days: int | None = None,
    department_mapping: dict[str, str] | None = None,
) -> ApprovalQuery:
    """
    Resolve a preset by name and apply any explicit overrides.

    Raises:
        KeyError: if the preset name is unknown
    """
    if preset not in PRESETS:
        raise KeyError(f"Unknown approvals preset '{preset}' (expected one of {sorted(PRESETS)})")

    overrides = {}
    if threshold_dollars is not None:
        overrides["threshold_cents"] = round(threshold_dollars * 100)
    if limit is not None:
        overrides["limit"] = limit
    if lookback_days is not None:
        overrides["lookback_days"] = lookback_days
    if department_mapping:
        overrides["department_mapping"] = dict(department_mapping)

    return PRESETS[preset].model_copy(update=overrides)


def query_from_settings(settings) -> ApprovalQuery:
    """Build the active query from application settings"""
    return build_query(
        preset=settings.approvals_preset,
        threshold_dollars=settings.approvals_threshold_dollars,
        limit=settings.approvals_limit,
        lookback_days=settings.approvals_lookback_days,
        department_mapping=settings.approvals_department_mapping,
    )
