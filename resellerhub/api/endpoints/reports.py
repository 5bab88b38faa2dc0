import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from resellerhub.core import revenue
from resellerhub.core.dependencies import (
    get_current_active_admin,
    get_current_active_user,
    get_current_seller_or_admin,
)
from resellerhub.db.session import get_db
from resellerhub.models.user import User as UserModel, UserRole
from resellerhub.schemas.order import Order
from resellerhub.schemas.report import (
    CommissionPoint,
    CommissionTotals,
    CustomerSummary,
    DashboardStats,
    MonthlyRevenue,
    PeriodReport,
    RevenuePoint,
    TopEntity,
)

router = APIRouter()

def _owner_scope(current_user: UserModel, reseller_id: Optional[int]) -> Optional[int]:
    # Admins choose the scope (None = whole platform); sellers only ever see their own numbers
    if current_user.is_admin:
        return reseller_id
    return current_user.id

def _required_owner(current_user: UserModel, reseller_id: Optional[int]) -> int:
    owner = _owner_scope(current_user, reseller_id)
    if owner is None:
        raise HTTPException(status_code=400, detail="reseller_id is required for this report")
    return owner

@router.get("/daily", response_model=List[RevenuePoint])
async def read_daily_revenue(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin),
    reseller_id: Optional[int] = Query(None),
    days: int = Query(7, ge=1, le=366)
):
    """
    Paid revenue per day for the last `days` days, oldest first.
    """
    return await revenue.daily_revenue(db, reseller_id=_owner_scope(current_user, reseller_id), days=days)

@router.get("/daily-commission", response_model=List[CommissionPoint])
async def read_daily_commission(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin),
    reseller_id: Optional[int] = Query(None),
    days: int = Query(7, ge=1, le=366)
):
    return await revenue.daily_commission(db, reseller_id=_required_owner(current_user, reseller_id), days=days)

@router.get("/monthly", response_model=List[MonthlyRevenue])
async def read_monthly_revenue(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin),
    reseller_id: Optional[int] = Query(None)
):
    """
    Paid revenue per month, newest first. For a single reseller each month
    also carries the tier percent it reached and the commission at that percent.
    """
    owner = _owner_scope(current_user, reseller_id)
    if owner is not None:
        return await revenue.monthly_revenue_with_tiers(db, reseller_id=owner)
    months = await revenue.monthly_revenue(db)
    return [{"month": month, **bucket} for month, bucket in months.items()]

@router.get("/top", response_model=List[TopEntity])
async def read_top_entities(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin),
    entity: str = Query("reseller", pattern="^(reseller|customer)$"),
    n: int = Query(5, ge=1, le=100),
    reseller_id: Optional[int] = Query(None)
):
    """
    Top resellers (admin) or top customers by paid revenue.
    """
    if entity == "reseller" and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Only admins can rank resellers")
    return await revenue.top_entities(
        db, n=n, entity=entity, reseller_id=_owner_scope(current_user, reseller_id)
    )

@router.get("/customers", response_model=List[CustomerSummary])
async def read_customer_summary(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin),
    reseller_id: Optional[int] = Query(None)
):
    """
    The seller's customers with order counts and paid spend.
    """
    return await revenue.customer_summary(db, reseller_id=_required_owner(current_user, reseller_id))

@router.get("/dashboard", response_model=DashboardStats, tags=["Admin Reports"])
async def read_admin_dashboard(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    return await revenue.admin_dashboard(db)

@router.get("/commissions", response_model=CommissionTotals)
async def read_commission_totals(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin),
    reseller_id: Optional[int] = Query(None)
):
    """
    Commission sums by status for one seller.
    """
    return await revenue.commission_totals(db, reseller_id=_required_owner(current_user, reseller_id))

@router.get("/period", response_model=PeriodReport, tags=["Admin Reports"])
async def read_period_report(
    date_from: datetime.date = Query(...),
    date_to: datetime.date = Query(...),
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: orders and commissions between two dates (inclusive) with totals.
    """
    return await revenue.period_report(db, date_from=date_from, date_to=date_to)

@router.get("/active-packages", response_model=List[Order])
async def read_active_packages(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_user),
    customer_id: Optional[int] = Query(None)
):
    """
    Packages a customer has paid for that have not expired yet, soonest expiry first.
    """
    if current_user.is_admin:
        if customer_id is None:
            raise HTTPException(status_code=400, detail="customer_id is required")
        target = customer_id
    elif current_user.role == UserRole.CUSTOMER.value:
        target = current_user.id
    else:
        raise HTTPException(status_code=403, detail="Only customers and admins can view active packages")
    return await revenue.active_packages(db, customer_id=target)
