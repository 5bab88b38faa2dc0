import datetime
from sqlalchemy.orm import Session, joinedload
from typing import Optional, List

from resellerhub.models.commission import Commission
from resellerhub.schemas.commission import CommissionCreate
from resellerhub.crud.base import gateway_errors, persist

def _with_relations(query):
    return query.options(
        joinedload(Commission.order),
        joinedload(Commission.reseller),
    )

def create_commission(db: Session, *, obj_in: CommissionCreate, commit: bool = True) -> Commission:
    """
    Create a new commission record.
    A second commission for the same order violates the unique order_id and raises ConflictError.
    """
    db_obj = Commission(**obj_in.model_dump(exclude_none=True))
    with gateway_errors(db, f"create commission for order {obj_in.order_id}"):
        return persist(db, db_obj, commit=commit)

def get_commission(db: Session, commission_id: int) -> Optional[Commission]:
    """
    Get a single commission by ID with its order and reseller eagerly loaded.
    """
    return _with_relations(db.query(Commission)).filter(Commission.id == commission_id).first()

def get_commission_by_order_id(db: Session, *, order_id: int) -> Optional[Commission]:
    return _with_relations(db.query(Commission)).filter(Commission.order_id == order_id).first()

def get_commissions(
    db: Session,
    *,
    reseller_id: Optional[int] = None,
    status: Optional[str] = None,
    created_from: Optional[datetime.datetime] = None,
    created_to: Optional[datetime.datetime] = None,
    skip: int = 0,
    limit: Optional[int] = 100,
) -> List[Commission]:
    """
    Commissions newest first, optionally for one reseller, one status and a
    created_at window (from inclusive, to exclusive).
    """
    query = _with_relations(db.query(Commission))
    if reseller_id is not None:
        query = query.filter(Commission.reseller_id == reseller_id)
    if status:
        query = query.filter(Commission.status == status)
    if created_from is not None:
        query = query.filter(Commission.created_at >= created_from)
    if created_to is not None:
        query = query.filter(Commission.created_at < created_to)
    query = query.order_by(Commission.created_at.desc(), Commission.id.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()

def update_commission_status(
    db: Session,
    *,
    commission_id: int,
    current_status: str,
    new_status: str,
    paid_at: Optional[datetime.datetime] = None,
) -> Optional[Commission]:
    """
    Compare-and-swap the status of a commission; paid_at is written alongside when given.
    Returns None if the stored status no longer equals current_status.
    """
    values = {Commission.status: new_status}
    if paid_at is not None:
        values[Commission.paid_at] = paid_at
    with gateway_errors(db, f"update commission {commission_id} status"):
        affected = (
            db.query(Commission)
            .filter(Commission.id == commission_id, Commission.status == current_status)
            .update(values, synchronize_session=False)
        )
        if affected == 0:
            db.rollback()
            return None
        db.commit()
    db.expire_all()
    return get_commission(db, commission_id=commission_id)
