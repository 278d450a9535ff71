"""
Dashboard controller: loads approvals from the API (or sample data), then
filters, sorts and decorates them for display without re-fetching.

Usage:
    async with httpx.AsyncClient() as http:
        controller = DashboardController(http, api_url="http://127.0.0.1:8000/api/approvals")
        await controller.load()
        controller.filter_by_department("finance")
        controller.set_sort("amount-desc")
        for row in controller.rows():
            ...
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Callable, Literal, get_args

import httpx
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from ..models.approval import Approval
from ..services.aggregator import sort_approvals
from ..services.approval_query import SortOrder
from .formatting import (
    days_pending,
    format_currency,
    format_date,
    is_high_amount,
    is_overdue,
    week_range_label,
)
from .sample_data import sample_approvals

DEFAULT_REFRESH_SECONDS = 5 * 60
ALL_DEPARTMENTS = "all"

DataSource = Literal["live", "sample"]

_approval_list = TypeAdapter(list[Approval])


@dataclass(frozen=True)
class ApprovalRow:
    """One table row: the approval plus fields derived for display"""
    approval: Approval
    days_pending: int
    overdue: bool
    high_amount: bool
    amount_display: str
    date_display: str


@dataclass(frozen=True)
class SummaryStats:
    total_amount: Decimal
    count: int
    average_amount: Decimal

    @property
    def pending_label(self) -> str:
        return f"{self.count} items pending approval"


class DashboardController:
    def __init__(
        self,
        http: httpx.AsyncClient,
        api_url: str,
        refresh_seconds: float = DEFAULT_REFRESH_SECONDS,
        now: Callable[[], datetime] | None = None,
    ):
        self.http = http
        self.api_url = api_url
        self.refresh_seconds = refresh_seconds
        self._now = now
        self.approvals: list[Approval] = sample_approvals()
        self.source: DataSource = "sample"
        self.error: str | None = None
        self.department: str = ALL_DEPARTMENTS
        self.sort: SortOrder = "amount-desc"

    async def fetch(self) -> tuple[list[Approval], DataSource]:
        """
        Ask the API for approvals, degrading to sample data on any failure.

        The fallback flag from the server is an expected outcome and does not
        set ``error``; transport failures and malformed payloads do.
        """
        try:
            response = await self.http.get(self.api_url, headers={"Accept": "application/json"})
            result = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Approvals API unreachable, using sample data: {e}")
            self.error = str(e)
            return sample_approvals(), "sample"

        if isinstance(result, dict) and result.get("useSampleData"):
            logger.info("API returned sample data flag - using fallback", status_code=response.status_code)
            return sample_approvals(), "sample"

        if response.is_success and isinstance(result, dict) and result.get("success"):
            try:
                approvals = _approval_list.validate_python(result.get("data") or [])
            except ValidationError as e:
                logger.error(f"Approvals API returned malformed data: {e.error_count()} errors")
                self.error = "Malformed approvals data"
                return sample_approvals(), "sample"
            logger.info(f"Loaded {len(approvals)} approvals from API", count=result.get("count"))
            return approvals, "live"

        message = result.get("error") if isinstance(result, dict) else None
        self.error = message or f"API request failed: {response.status_code}"
        logger.error("Approvals API error, using sample data", error=self.error)
        return sample_approvals(), "sample"

    async def load(self) -> DataSource:
        """Initial load; the returned source decides whether polling starts"""
        return await self.refresh()

    async def refresh(self) -> DataSource:
        """Re-fetch approvals; also the retry action behind the error banner"""
        self.error = None
        self.approvals, self.source = await self.fetch()
        return self.source

    def filter_by_department(self, department: str) -> None:
        self.department = department

    def set_sort(self, sort: SortOrder) -> None:
        if sort not in get_args(SortOrder):
            raise ValueError(f"Unsupported sort order: {sort}")
        self.sort = sort

    def visible(self) -> list[Approval]:
        """Loaded approvals after the department filter and current sort"""
        if self.department == ALL_DEPARTMENTS:
            selected = list(self.approvals)
        else:
            selected = [a for a in self.approvals if a.department == self.department]
        return sort_approvals(selected, self.sort)

    def departments(self) -> list[str]:
        return sorted({a.department for a in self.approvals})

    def rows(self) -> list[ApprovalRow]:
        now = self._now() if self._now else None
        rows = []
        for approval in self.visible():
            days = days_pending(approval.date_submitted, now=now)
            rows.append(ApprovalRow(
                approval=approval,
                days_pending=days,
                overdue=is_overdue(days),
                high_amount=is_high_amount(approval.amount),
                amount_display=format_currency(approval.amount),
                date_display=format_date(approval.date_submitted),
            ))
        return rows

    def summary(self) -> SummaryStats:
        visible = self.visible()
        total = sum((a.amount for a in visible), Decimal(0))
        count = len(visible)
        average = total / count if count else Decimal(0)
        return SummaryStats(total_amount=total, count=count, average_amount=average)

    def week_label(self) -> str:
        today: date | None = self._now().date() if self._now else None
        return f"Week of {week_range_label(today)}"

    async def poll(self, on_refresh: Callable[["DashboardController"], None] | None = None, max_refreshes: int | None = None) -> None:
        """
        Re-fetch every ``refresh_seconds`` while the live source is in use.

        Returns immediately if the last load used sample data.
        """
        if self.source != "live":
            logger.info("Auto-refresh disabled - not using the live API")
            return

        logger.info(f"Auto-refresh enabled ({self.refresh_seconds:g}s interval)")
        refreshes = 0
        while max_refreshes is None or refreshes < max_refreshes:
            await asyncio.sleep(self.refresh_seconds)
            await self.refresh()
            refreshes += 1
            if on_refresh is not None:
                on_refresh(self)
