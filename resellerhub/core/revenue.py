"""Read-only revenue and commission rollups for dashboards and reports.

Revenue always means the sum of paid order amounts. Day and month buckets
are cut in the reporting time zone from the stored UTC order_date.
Nothing in this module writes.
"""
import datetime
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from resellerhub.core.commission_ledger import commission_amount
from resellerhub.core.exceptions import ValidationError
from resellerhub.core.tier_policy import rate as tier_rate
from resellerhub.core.timeutils import local_date, local_day_bounds, local_today, month_key, utcnow
from resellerhub.crud import crud_commission, crud_order, crud_user
from resellerhub.models.commission import CommissionStatus
from resellerhub.models.order import PaymentStatus

logger = logging.getLogger(__name__)

PAID = PaymentStatus.PAID.value


def _window(days: int, today: Optional[datetime.date]):
    if days < 1:
        raise ValidationError("days must be at least 1")
    today = today or local_today()
    first_day = today - datetime.timedelta(days=days - 1)
    start, _ = local_day_bounds(first_day)
    _, end = local_day_bounds(today)
    buckets = OrderedDict((first_day + datetime.timedelta(days=i), 0) for i in range(days))
    return start, end, buckets


async def daily_revenue(
    db: Session, *, reseller_id: Optional[int] = None, days: int = 7, today: Optional[datetime.date] = None
) -> List[dict]:
    """
    Exactly `days` buckets ending today, oldest first, zero-filled.
    Each bucket sums paid orders whose order_date falls on that local day.
    """
    start, end, buckets = _window(days, today)
    orders = crud_order.get_orders(
        db, reseller_id=reseller_id, payment_status=PAID, date_from=start, date_to=end, limit=None
    )
    for order in orders:
        day = local_date(order.order_date)
        if day in buckets:
            buckets[day] += order.amount
    return [{"date": day, "revenue": total} for day, total in buckets.items()]


async def daily_commission(
    db: Session, *, reseller_id: int, days: int = 7, today: Optional[datetime.date] = None
) -> List[dict]:
    """Commission amounts by created_at day, same bucketing as daily_revenue (sub-agent dashboard)."""
    start, end, buckets = _window(days, today)
    commissions = crud_commission.get_commissions(
        db, reseller_id=reseller_id, created_from=start, created_to=end, limit=None
    )
    for commission in commissions:
        day = local_date(commission.created_at)
        if day in buckets:
            buckets[day] += commission.amount
    return [{"date": day, "commission": total} for day, total in buckets.items()]


async def monthly_revenue(db: Session, *, reseller_id: Optional[int] = None) -> Dict[str, dict]:
    """YYYY-MM -> {"orders": count, "revenue": sum} over paid orders, newest month first."""
    orders = crud_order.get_orders(db, reseller_id=reseller_id, payment_status=PAID, limit=None)
    months: Dict[str, dict] = {}
    for order in orders:
        bucket = months.setdefault(month_key(order.order_date), {"orders": 0, "revenue": 0})
        bucket["orders"] += 1
        bucket["revenue"] += order.amount
    return dict(sorted(months.items(), key=lambda item: item[0], reverse=True))


async def monthly_revenue_with_tiers(db: Session, *, reseller_id: int) -> List[dict]:
    """
    Monthly revenue plus the tier percent that month's revenue reaches and the
    commission it would earn at that percent. Informational: stored commissions
    keep the percent they were created with.
    """
    months = await monthly_revenue(db, reseller_id=reseller_id)
    rows = []
    for month, bucket in months.items():
        rate = tier_rate(bucket["revenue"])
        rows.append({
            "month": month,
            "orders": bucket["orders"],
            "revenue": bucket["revenue"],
            "commission_rate": rate,
            "commission": commission_amount(bucket["revenue"], rate),
        })
    return rows


async def top_entities(
    db: Session, *, n: int = 5, entity: str = "reseller", reseller_id: Optional[int] = None
) -> List[dict]:
    """
    Resellers (or customers) ranked by total paid revenue, truncated to n.
    Ties keep the order in which entities first appear, scanning orders oldest first.
    """
    if n < 1:
        raise ValidationError("n must be at least 1")
    if entity not in ("reseller", "customer"):
        raise ValidationError(f"Unknown entity '{entity}'")

    orders = crud_order.get_orders(
        db,
        reseller_id=reseller_id,
        payment_status=PAID,
        has_reseller=True if entity == "reseller" else None,
        newest_first=False,
        limit=None,
    )
    totals: Dict[int, dict] = {}
    for order in orders:
        related = order.reseller if entity == "reseller" else order.customer
        key = order.reseller_id if entity == "reseller" else order.customer_id
        current = totals.setdefault(key, {"id": key, "name": related.name if related else None, "total": 0})
        current["total"] += order.amount

    ranked = sorted(totals.values(), key=lambda row: row["total"], reverse=True)
    return ranked[:n]


async def customer_summary(db: Session, *, reseller_id: int) -> List[dict]:
    """Per-customer order counts and paid spend for one seller, customers in order of first purchase."""
    orders = crud_order.get_orders(db, reseller_id=reseller_id, newest_first=False, limit=None)
    customers: Dict[int, dict] = {}
    for order in orders:
        row = customers.setdefault(order.customer_id, {
            "customer": order.customer,
            "total_orders": 0,
            "paid_orders": 0,
            "total_spent": 0,
        })
        row["total_orders"] += 1
        if order.payment_status == PAID:
            row["paid_orders"] += 1
            row["total_spent"] += order.amount
    return list(customers.values())


async def admin_dashboard(db: Session) -> dict:
    total_revenue = crud_order.get_paid_revenue(db)
    pending = crud_commission.get_commissions(db, status=CommissionStatus.PENDING.value, limit=None)
    return {
        "total_revenue": total_revenue,
        "total_orders": crud_order.count_orders(db),
        "total_users": crud_user.count_users(db),
        "pending_commissions": sum(c.amount for c in pending),
    }


async def commission_totals(db: Session, *, reseller_id: int) -> dict:
    commissions = crud_commission.get_commissions(db, reseller_id=reseller_id, limit=None)
    by_status = {status.value: 0 for status in CommissionStatus}
    for commission in commissions:
        by_status[commission.status] += commission.amount
    return {
        "total": sum(by_status.values()),
        "pending": by_status[CommissionStatus.PENDING.value],
        "approved": by_status[CommissionStatus.APPROVED.value],
        "paid": by_status[CommissionStatus.PAID.value],
        "total_orders": crud_order.count_orders(db, reseller_id=reseller_id),
    }


async def period_report(db: Session, *, date_from: datetime.date, date_to: datetime.date) -> dict:
    """Orders and commissions created between two local dates, both inclusive."""
    if date_from > date_to:
        raise ValidationError("date_from must not be after date_to")
    start, _ = local_day_bounds(date_from)
    _, end = local_day_bounds(date_to)

    orders = crud_order.get_orders(db, date_from=start, date_to=end, limit=None)
    commissions = crud_commission.get_commissions(db, created_from=start, created_to=end, limit=None)
    total_revenue = sum(o.amount for o in orders if o.payment_status == PAID)
    logger.info(f"Period report {date_from}..{date_to}: {len(orders)} orders, revenue {total_revenue}")
    return {
        "date_from": date_from,
        "date_to": date_to,
        "total_revenue": total_revenue,
        "total_orders": len(orders),
        "total_commissions": sum(c.amount for c in commissions),
        "orders": orders,
        "commissions": commissions,
    }


async def active_packages(db: Session, *, customer_id: int, now: Optional[datetime.datetime] = None) -> list:
    """A customer's paid orders that have not expired yet, soonest expiry first."""
    orders = crud_order.get_orders(
        db, customer_id=customer_id, payment_status=PAID, expiry_after=now or utcnow(), limit=None
    )
    return sorted(orders, key=lambda o: o.expiry_date)
