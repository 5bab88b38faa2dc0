"""Commission records paired 1:1 with reseller-owned orders.

A commission is created in the same transaction as its order, with its
percent and amount locked at that moment. Afterwards only an administrator
moves it along pending -> approved -> paid.
"""
import datetime
import logging
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from resellerhub.core import config
from resellerhub.core.actor import Actor
from resellerhub.core.exceptions import (
    ConflictError,
    InvalidTransitionError,
    LedgerError,
    NotFoundError,
    ValidationError,
)
from resellerhub.core.tier_policy import rate_policy_for_role
from resellerhub.core.timeutils import local_month_start, utcnow
from resellerhub.crud import crud_commission, crud_order, crud_user
from resellerhub.models.commission import Commission, CommissionStatus, COMMISSION_TRANSITIONS
from resellerhub.models.order import Order
from resellerhub.schemas.commission import CommissionCreate

logger = logging.getLogger(__name__)


def commission_amount(order_amount: int, percent: int) -> int:
    """order_amount * percent / 100, rounded half up to whole VND."""
    raw = Decimal(order_amount) * Decimal(percent) / Decimal(100)
    return int(raw.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def month_to_date_revenue(db: Session, *, reseller_id: int, at: datetime.datetime) -> int:
    """Paid revenue of a reseller from the start of at's local month up to (excluding) at."""
    return crud_order.get_paid_revenue(
        db, reseller_id=reseller_id, date_from=local_month_start(at), date_to=at
    )


async def create_for_order(db: Session, order: Order, *, commit: bool = True) -> Optional[Commission]:
    """
    Create the commission paired with an order.

    Returns None for direct sales (no reseller). The percent comes from the
    seller's role: sub-agents get the flat rate, resellers the tier of their
    paid revenue earlier in the order's month (or the flat rate when tiered
    pricing at creation is switched off).
    With commit=False the row is only flushed and the caller owns the commit.
    """
    if order.reseller_id is None:
        logger.info(f"Order ID: {order.id} has no reseller. No commission recorded.")
        return None

    reseller = crud_user.get_user(db, user_id=order.reseller_id)
    if reseller is None:
        raise NotFoundError(f"Reseller {order.reseller_id} of order {order.id} not found")

    policy = rate_policy_for_role(reseller.role, tiered=config.COMMISSION_TIERED_AT_CREATION)
    revenue = 0
    if policy.needs_revenue:
        revenue = month_to_date_revenue(db, reseller_id=reseller.id, at=order.order_date)
    percent = policy.percent(revenue)
    amount = commission_amount(order.amount, percent)

    commission_in = CommissionCreate(
        order_id=order.id,
        reseller_id=reseller.id,
        percent=percent,
        amount=amount,
        status=CommissionStatus.PENDING,
    )
    commission = crud_commission.create_commission(db=db, obj_in=commission_in, commit=commit)
    logger.info(
        f"Created commission for order ID: {order.id}, reseller ID: {reseller.id} ({reseller.role}), "
        f"month-to-date revenue: {revenue}, percent: {percent}, amount: {amount}"
    )
    return commission


def _parse_status(value) -> CommissionStatus:
    try:
        return CommissionStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown commission status '{value}'")


async def set_commission_status(
    db: Session,
    *,
    actor: Actor,
    commission_id: int,
    target_status: str,
    expected_status: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> Commission:
    """
    Move a commission one step along pending -> approved -> paid.
    Reaching paid stamps paid_at. The caller is responsible for checking the actor is an admin.
    """
    target = _parse_status(target_status)
    expected = _parse_status(expected_status) if expected_status is not None else None

    commission = crud_commission.get_commission(db, commission_id=commission_id)
    if commission is None:
        raise NotFoundError(f"Commission {commission_id} not found")

    current = CommissionStatus(commission.status)
    if expected is not None and expected != current:
        raise ConflictError(
            f"Commission {commission_id} is '{current.value}', expected '{expected.value}'"
        )
    if (current, target) not in COMMISSION_TRANSITIONS:
        logger.warning(
            f"User {actor.id} tried illegal commission transition {current.value} -> {target.value} on commission {commission_id}"
        )
        raise InvalidTransitionError("commission", current.value, target.value)

    paid_at = None
    if target == CommissionStatus.PAID:
        paid_at = now or utcnow()

    updated = crud_commission.update_commission_status(
        db,
        commission_id=commission_id,
        current_status=current.value,
        new_status=target.value,
        paid_at=paid_at,
    )
    if updated is None:
        raise ConflictError(f"Commission {commission_id} was modified concurrently")

    logger.info(f"User {actor.id} moved commission {commission_id} from {current.value} to {target.value}")
    return updated


@dataclass
class ReconcileResult:
    created: List[Commission] = field(default_factory=list)
    failed: List[Tuple[int, str]] = field(default_factory=list) # (order_id, reason)


async def reconcile_missing_commissions(db: Session) -> ReconcileResult:
    """
    Create the commission for every reseller-owned order that lacks one.
    Each order is its own transaction; failures are reported per order, not raised.
    Running it again after success finds nothing to do.
    """
    result = ReconcileResult()
    orphans = crud_order.get_orders_without_commission(db)
    logger.info(f"Reconciliation found {len(orphans)} order(s) without a commission")

    for order in orphans:
        order_id = order.id
        try:
            commission = await create_for_order(db, order, commit=True)
        except LedgerError as e:
            db.rollback()
            logger.error(f"Could not reconcile commission for order ID: {order_id}: {e.message}")
            result.failed.append((order_id, e.message))
            continue
        if commission is not None:
            result.created.append(commission)

    logger.info(f"Reconciliation created {len(result.created)} commission(s), {len(result.failed)} failure(s)")
    return result
