#!/usr/bin/env python3
"""
Approvals Watcher - Terminal Dashboard

Loads pending approvals from the approvals API (falling back to the built-in
sample data), prints them as a table, and re-polls while the live API is in use.

Usage:
    python approvals_watcher.py --api-url http://127.0.0.1:8000/api/approvals
    python approvals_watcher.py --department finance --sort date-desc --once
"""

import argparse
import asyncio
from typing import get_args

import httpx

from ramp_approvals.core.config import settings
from ramp_approvals.core.logging import setup_logging
from ramp_approvals.dashboard.controller import ALL_DEPARTMENTS, DashboardController
from ramp_approvals.dashboard.formatting import format_currency
from ramp_approvals.services.approval_query import SortOrder


def print_dashboard(controller: DashboardController):
    """Render the current view of the controller"""
    summary = controller.summary()

    print("\n" + "="*100)
    print(f"💼 PENDING APPROVALS - {controller.week_label()}")
    print("="*100)
    source = "Ramp API" if controller.source == "live" else "sample data"
    print(f"Source: {source} | Department: {controller.department} | Sort: {controller.sort}")
    if controller.error:
        print(f"⚠️  Error loading data: {controller.error} (showing sample data)")
    print(
        f"Total: {format_currency(summary.total_amount)} | "
        f"Count: {summary.count} | Average: {format_currency(summary.average_amount)}"
    )
    print(f"{summary.pending_label}")
    print("-"*100)
    print(f"{'ID':<15} {'Dept':<12} {'Description':<34} {'Amount':>12}  {'Submitted':<13} {'Days':>5}  Priority")
    print("-"*100)

    for row in controller.rows():
        approval = row.approval
        amount = row.amount_display + (" ⬆" if row.high_amount else "")
        days = f"{row.days_pending}{'!' if row.overdue else ''}"
        print(
            f"{approval.id:<15} {approval.department.capitalize():<12} "
            f"{approval.description[:34]:<34} {amount:>12}  {row.date_display:<13} "
            f"{days:>5}  {approval.priority}"
        )

    print("="*100)


async def run(args):
    async with httpx.AsyncClient(timeout=args.timeout) as http:
        controller = DashboardController(
            http,
            api_url=args.api_url,
            refresh_seconds=args.interval,
        )
        controller.filter_by_department(args.department)
        controller.set_sort(args.sort)

        await controller.load()
        print_dashboard(controller)

        if args.once:
            return

        await controller.poll(on_refresh=print_dashboard)


def main():
    parser = argparse.ArgumentParser(
        description='Show pending approvals from the approvals API in the terminal'
    )
    parser.add_argument(
        '--api-url',
        default=settings.dashboard_api_url,
        help=f'Approvals endpoint (default: {settings.dashboard_api_url})'
    )
    parser.add_argument(
        '--department',
        default=ALL_DEPARTMENTS,
        help='Only show one department, e.g. finance (default: all)'
    )
    parser.add_argument(
        '--sort',
        default='amount-desc',
        choices=get_args(SortOrder),
        help='Sort order (default: amount-desc)'
    )
    parser.add_argument(
        '--interval',
        type=float,
        default=settings.dashboard_refresh_seconds,
        help=f'Refresh interval in seconds while using the live API (default: {settings.dashboard_refresh_seconds:g})'
    )
    parser.add_argument(
        '--timeout',
        type=float,
        default=30.0,
        help='HTTP timeout in seconds (default: 30)'
    )
    parser.add_argument(
        '--once',
        action='store_true',
        help='Print the table once and exit'
    )

    args = parser.parse_args()
    setup_logging()

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        print("\n\n👋 Stopping watcher...")


if __name__ == "__main__":
    main()
