"""Order creation and payment status changes.

An order snapshots its package's price and computes its expiry once, at
creation. Orders sold by a reseller or sub-agent get their commission in
the same transaction, so neither row can exist without the other.
"""
import datetime
import logging
from typing import Optional

from sqlalchemy.orm import Session

from resellerhub.core import commission_ledger
from resellerhub.core.actor import Actor
from resellerhub.core.exceptions import (
    AuthorizationError,
    CommissionWriteError,
    ConflictError,
    GatewayError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from resellerhub.core.timeutils import add_months, utcnow
from resellerhub.crud import crud_order, crud_package, crud_user
from resellerhub.crud.base import gateway_errors
from resellerhub.models.order import Order, PaymentMethod, PaymentStatus, ORDER_TRANSITIONS
from resellerhub.models.user import UserRole, SELLER_ROLES
from resellerhub.schemas.order import OrderCreateInternal

logger = logging.getLogger(__name__)


def _resolve_seller(actor: Actor, reseller_id: Optional[int]) -> Optional[int]:
    # Sellers always sell as themselves; only admins may attribute or leave unattributed
    if actor.is_admin:
        return reseller_id
    if actor.is_seller:
        if reseller_id is not None and reseller_id != actor.id:
            raise AuthorizationError("Sellers can only create orders attributed to themselves")
        return actor.id
    raise AuthorizationError(f"Role '{actor.role}' cannot create orders")


def _parse_status(value) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise ValidationError(f"Unknown payment status '{value}'")


async def create_order(
    db: Session,
    *,
    actor: Actor,
    customer_id: int,
    package_id: int,
    payment_method: str,
    reseller_id: Optional[int] = None,
    notes: Optional[str] = None,
    now: Optional[datetime.datetime] = None,
) -> Order:
    """
    Create a pending order for a customer and, when it has a seller, its commission.

    amount is the package price at this moment; activation is now and expiry
    is activation plus the package duration in calendar months. Both rows are
    committed together. If the commission cannot be written the order is
    rolled back and CommissionWriteError is raised.
    """
    reseller_id = _resolve_seller(actor, reseller_id)

    try:
        method = PaymentMethod(payment_method)
    except ValueError:
        raise ValidationError(f"Unsupported payment method '{payment_method}'")

    package = crud_package.get_package(db, package_id=package_id, show_inactive=True)
    if package is None or not package.is_active:
        raise ValidationError(f"Package {package_id} not found or not active")
    if package.duration < 1:
        raise ValidationError(f"Package {package_id} has an invalid duration of {package.duration} month(s)")
    if package.price < 0:
        raise ValidationError(f"Package {package_id} has a negative price")

    customer = crud_user.get_user(db, user_id=customer_id)
    if customer is None:
        raise NotFoundError(f"Customer {customer_id} not found")
    if customer.role != UserRole.CUSTOMER.value:
        raise ValidationError(f"User {customer_id} is not a customer")

    if reseller_id is not None:
        seller = crud_user.get_user(db, user_id=reseller_id)
        if seller is None:
            raise NotFoundError(f"Reseller {reseller_id} not found")
        if seller.role not in SELLER_ROLES:
            raise ValidationError(f"User {reseller_id} is not a reseller or sub-agent")

    activation_date = now or utcnow()
    order_in = OrderCreateInternal(
        customer_id=customer.id,
        package_id=package.id,
        reseller_id=reseller_id,
        amount=package.price, # Price at time of purchase, never recomputed
        payment_status=PaymentStatus.PENDING,
        payment_method=method,
        order_date=activation_date,
        activation_date=activation_date,
        expiry_date=add_months(activation_date, package.duration),
        notes=notes,
    )

    # Order first (flushed so its id exists), then the commission, then one commit
    order = crud_order.create_order(db=db, obj_in=order_in, commit=False)
    order_id = order.id
    try:
        await commission_ledger.create_for_order(db, order, commit=False)
    except (GatewayError, ConflictError) as e:
        db.rollback()
        logger.error(f"Commission write failed for new order (id {order_id}); order rolled back: {e.message}")
        raise CommissionWriteError(
            f"Order was not created: its commission could not be recorded ({e.message})"
        ) from e
    except Exception:
        db.rollback()
        raise

    with gateway_errors(db, f"commit order {order_id}"):
        db.commit()

    logger.info(
        f"User {actor.id} ({actor.role}) created order ID: {order_id} for customer {customer.id}, "
        f"package {package.id}, amount {package.price}, reseller {reseller_id}"
    )
    return crud_order.get_order(db, order_id=order_id)


async def set_order_status(
    db: Session,
    *,
    actor: Actor,
    order_id: int,
    target_status: str,
    expected_status: Optional[str] = None,
) -> Order:
    """
    Move an order from pending to paid or cancelled; both are terminal.

    The write is guarded by the status read here (or expected_status when the
    caller passes one), so a stale request fails with ConflictError instead of
    overwriting. The commission is left untouched; approving it is a separate step.
    """
    target = _parse_status(target_status)
    expected = _parse_status(expected_status) if expected_status is not None else None

    order = crud_order.get_order(db, order_id=order_id)
    if order is None:
        raise NotFoundError(f"Order {order_id} not found")

    current = PaymentStatus(order.payment_status)
    if expected is not None and expected != current:
        raise ConflictError(f"Order {order_id} is '{current.value}', expected '{expected.value}'")
    if (current, target) not in ORDER_TRANSITIONS:
        logger.warning(
            f"User {actor.id} tried illegal order transition {current.value} -> {target.value} on order {order_id}"
        )
        raise InvalidTransitionError("order", current.value, target.value)

    updated = crud_order.update_order_status(
        db, order_id=order_id, current_status=current.value, new_status=target.value
    )
    if updated is None:
        raise ConflictError(f"Order {order_id} was modified concurrently")

    logger.info(f"User {actor.id} moved order {order_id} from {current.value} to {target.value}")
    return updated
