import datetime
from sqlalchemy.orm import Session, joinedload
from typing import Optional, List

from resellerhub.models.order import Order
from resellerhub.models.commission import Commission
from resellerhub.schemas.order import OrderCreateInternal
from resellerhub.crud.base import gateway_errors, persist

def _with_relations(query):
    # Embedded shapes the read paths rely on: customer, package, reseller, commission
    return query.options(
        joinedload(Order.customer),
        joinedload(Order.package),
        joinedload(Order.reseller),
        joinedload(Order.commission),
    )

def create_order(db: Session, *, obj_in: OrderCreateInternal, commit: bool = True) -> Order:
    """
    Create a new order from a fully derived OrderCreateInternal.
    With commit=False the row is flushed only, so a paired commission can join the same transaction.
    """
    data = obj_in.model_dump(exclude_none=True)
    db_obj = Order(**data)
    with gateway_errors(db, f"create order for customer {obj_in.customer_id}"):
        return persist(db, db_obj, commit=commit)

def get_order(db: Session, order_id: int) -> Optional[Order]:
    """
    Get a single order by ID with customer, package, reseller and commission eagerly loaded.
    """
    return _with_relations(db.query(Order)).filter(Order.id == order_id).first()

def get_orders(
    db: Session,
    *,
    reseller_id: Optional[int] = None,
    customer_id: Optional[int] = None,
    payment_status: Optional[str] = None,
    has_reseller: Optional[bool] = None,
    date_from: Optional[datetime.datetime] = None,
    date_to: Optional[datetime.datetime] = None,
    expiry_after: Optional[datetime.datetime] = None,
    newest_first: bool = True,
    skip: int = 0,
    limit: Optional[int] = 100,
) -> List[Order]:
    """
    Filtered order listing. date_from is inclusive and date_to exclusive, both
    compared against order_date. limit=None returns every matching row (reports).
    """
    query = _with_relations(db.query(Order))
    if reseller_id is not None:
        query = query.filter(Order.reseller_id == reseller_id)
    if customer_id is not None:
        query = query.filter(Order.customer_id == customer_id)
    if payment_status:
        query = query.filter(Order.payment_status == payment_status)
    if has_reseller is True:
        query = query.filter(Order.reseller_id.isnot(None))
    elif has_reseller is False:
        query = query.filter(Order.reseller_id.is_(None))
    if date_from is not None:
        query = query.filter(Order.order_date >= date_from)
    if date_to is not None:
        query = query.filter(Order.order_date < date_to)
    if expiry_after is not None:
        query = query.filter(Order.expiry_date >= expiry_after)

    ordering = (Order.order_date.desc(), Order.id.desc()) if newest_first else (Order.order_date.asc(), Order.id.asc())
    query = query.order_by(*ordering).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def get_paid_revenue(
    db: Session,
    *,
    reseller_id: Optional[int] = None,
    date_from: Optional[datetime.datetime] = None,
    date_to: Optional[datetime.datetime] = None,
) -> int:
    """Sum of paid order amounts, optionally for one reseller and an order_date window."""
    orders = get_orders(
        db, reseller_id=reseller_id, payment_status="paid",
        date_from=date_from, date_to=date_to, limit=None,
    )
    return sum(o.amount for o in orders)

def count_orders(db: Session, *, reseller_id: Optional[int] = None) -> int:
    query = db.query(Order)
    if reseller_id is not None:
        query = query.filter(Order.reseller_id == reseller_id)
    return query.count()

def update_order_status(
    db: Session, *, order_id: int, current_status: str, new_status: str, commit: bool = True
) -> Optional[Order]:
    """
    Compare-and-swap the payment_status.
    Returns None when the row is no longer in current_status (someone else moved it).
    """
    with gateway_errors(db, f"update order {order_id} status"):
        affected = (
            db.query(Order)
            .filter(Order.id == order_id, Order.payment_status == current_status)
            .update({Order.payment_status: new_status}, synchronize_session=False)
        )
        if affected == 0:
            db.rollback()
            return None
        if commit:
            db.commit()
        else:
            db.flush()
    db.expire_all()
    return get_order(db, order_id=order_id)

def get_orders_without_commission(db: Session, *, limit: Optional[int] = None) -> List[Order]:
    """Reseller-owned orders that have no paired commission row."""
    query = (
        db.query(Order)
        .outerjoin(Commission, Commission.order_id == Order.id)
        .filter(Order.reseller_id.isnot(None), Commission.id.is_(None))
        .order_by(Order.id.asc())
    )
    if limit is not None:
        query = query.limit(limit)
    return query.all()
