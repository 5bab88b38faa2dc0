from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from resellerhub.crud import crud_order
from resellerhub.core import order_ledger
from resellerhub.core.actor import Actor
from resellerhub.core.dependencies import (
    get_current_active_admin,
    get_current_active_user,
    get_current_seller_or_admin,
)
from resellerhub.db.session import get_db
from resellerhub.models.order import PaymentStatus
from resellerhub.models.user import User as UserModel, UserRole
from resellerhub.schemas.order import Order, OrderCreate, OrderStatusUpdate

router = APIRouter()

@router.post("/", response_model=Order, status_code=201)
async def create_new_order(
    order_in: OrderCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin)
):
    """
    Create an order. Resellers and sub-agents sell as themselves; admins may
    name a reseller_id or leave it empty for a direct sale.
    Price, activation and expiry come from the package; the commission is
    created alongside and returned nested in the order.
    """
    return await order_ledger.create_order(
        db,
        actor=Actor.from_user(current_user),
        customer_id=order_in.customer_id,
        package_id=order_in.package_id,
        reseller_id=order_in.reseller_id,
        payment_method=order_in.payment_method.value,
        notes=order_in.notes,
    )

@router.get("/", response_model=List[Order], tags=["Admin Orders"])
async def admin_read_orders(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin),
    payment_status: Optional[PaymentStatus] = Query(None),
    reseller_id: Optional[int] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    """
    Admin: every order, newest first, optionally filtered by status or reseller.
    """
    return crud_order.get_orders(
        db,
        payment_status=payment_status.value if payment_status else None,
        reseller_id=reseller_id,
        skip=skip,
        limit=limit,
    )

@router.get("/mine", response_model=List[Order])
async def read_my_orders(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    """
    Sellers get the orders they sold; customers get their purchase history.
    """
    if current_user.role == UserRole.CUSTOMER.value:
        return crud_order.get_orders(db, customer_id=current_user.id, skip=skip, limit=limit)
    return crud_order.get_orders(db, reseller_id=current_user.id, skip=skip, limit=limit)

@router.get("/{order_id}", response_model=Order)
async def read_order_details(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user)
):
    """
    Retrieve details for a specific order.
    Sellers see their own sales, customers their own purchases, admins everything.
    """
    db_order = crud_order.get_order(db, order_id=order_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")

    if not current_user.is_admin and current_user.id not in (db_order.reseller_id, db_order.customer_id):
        raise HTTPException(status_code=403, detail="Not authorized to view this order")

    return db_order

@router.patch("/{order_id}/status", response_model=Order, tags=["Admin Orders"])
async def update_order_status(
    order_id: int,
    status_in: OrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: mark a pending order paid or cancelled.
    Does not touch the commission; approve it separately.
    """
    return await order_ledger.set_order_status(
        db,
        actor=Actor.from_user(current_user),
        order_id=order_id,
        target_status=status_in.payment_status.value,
        expected_status=status_in.expected_status.value if status_in.expected_status else None,
    )
