"""Dashboard and report aggregation over recorded transactions.

Every function here is pure: it reads the transactions and menus it is given
and returns a new value.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Literal
from zoneinfo import ZoneInfo

from resto_pos.config import POS_TIMEZONE, REVENUE_SERIES_DAYS, TOP_MENU_NONE
from resto_pos.models import DailyRevenue, DashboardStats, MenuItem, ReportSummary, Transaction, User, UserRole

HistoryView = Literal["history", "report"]


def local_date(moment: datetime | date, tz: tzinfo | None = None) -> date:
    """Calendar date of ``moment`` in the POS timezone.

    Naive datetimes are taken to already be in that zone.
    """
    if not isinstance(moment, datetime):
        return moment
    zone = tz or ZoneInfo(POS_TIMEZONE)
    if moment.tzinfo is None:
        return moment.date()
    return moment.astimezone(zone).date()


def dashboard_stats(
    transactions: Iterable[Transaction],
    menus: Iterable[MenuItem],
    reference: datetime | date,
    tz: tzinfo | None = None,
) -> DashboardStats:
    """Revenue, count and best seller for the reference day, plus active menus.

    The best seller is the name with the highest summed quantity; on a tie the
    name that was counted first keeps the lead.
    """
    day = local_date(reference, tz)
    todays = [t for t in transactions if local_date(t.created_at, tz) == day]

    quantities: dict[str, int] = {}
    for transaction in todays:
        for line in transaction.lines:
            quantities[line.name] = quantities.get(line.name, 0) + line.quantity

    top_menu = TOP_MENU_NONE
    best = 0
    for name, quantity in quantities.items():
        if quantity > best:
            best = quantity
            top_menu = name

    return DashboardStats(
        revenue=sum(t.total for t in todays),
        count=len(todays),
        active_menus=sum(1 for menu in menus if menu.is_active),
        top_menu=top_menu,
    )


def revenue_series(
    transactions: Iterable[Transaction],
    reference: datetime | date,
    days: int = REVENUE_SERIES_DAYS,
    tz: tzinfo | None = None,
) -> list[DailyRevenue]:
    """Daily revenue for the ``days`` dates ending at ``reference``, oldest first."""
    if days < 1:
        raise ValueError(f"days must be at least 1, got {days}")
    last = local_date(reference, tz)
    first = last - timedelta(days=days - 1)

    totals = {first + timedelta(days=offset): 0 for offset in range(days)}
    for transaction in transactions:
        day = local_date(transaction.created_at, tz)
        if day in totals:
            totals[day] += transaction.total
    return [DailyRevenue(day=day, revenue=revenue) for day, revenue in totals.items()]


def filter_range(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
    cashier_id: str | None = None,
) -> list[Transaction]:
    """Transactions whose recorded date lies in ``[start, end]``.

    The date is the date portion of the stored timestamp, without any zone
    conversion.
    """
    matched = [t for t in transactions if start <= t.created_at.date() <= end]
    if cashier_id is not None:
        matched = [t for t in matched if t.cashier_id == cashier_id]
    return matched


def range_summary(
    transactions: Iterable[Transaction],
    start: date,
    end: date,
    cashier_id: str | None = None,
) -> ReportSummary:
    matched = filter_range(transactions, start, end, cashier_id)
    revenue = sum(t.total for t in matched)
    count = len(matched)
    if count:
        average = int((Decimal(revenue) / count).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    else:
        average = 0
    return ReportSummary(
        total_revenue=revenue,
        total_discount=sum(t.discount for t in matched),
        total_transactions=count,
        avg_order_value=average,
    )


def cashier_scope(user: User, view: HistoryView) -> str | None:
    """Cashier id to filter by: cashiers only see their own sales history."""
    if view == "history" and user.role is UserRole.CASHIER:
        return user.user_id
    return None
