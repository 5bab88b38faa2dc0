from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import List, Optional, Tuple

from resellerhub.crud import crud_commission
from resellerhub.core import commission_ledger
from resellerhub.core.actor import Actor
from resellerhub.core.dependencies import get_current_active_admin, get_current_seller_or_admin
from resellerhub.db.session import get_db
from resellerhub.models.commission import CommissionStatus
from resellerhub.models.user import User as UserModel
from resellerhub.schemas.commission import Commission, CommissionStatusUpdate

router = APIRouter()

class ReconcileResponse(BaseModel):
    created: List[Commission]
    failed: List[Tuple[int, str]]

@router.get("/", response_model=List[Commission], tags=["Admin Commissions"])
async def admin_read_commissions(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin),
    status: Optional[CommissionStatus] = Query(None),
    reseller_id: Optional[int] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    """
    Admin: every commission, newest first, optionally by status or reseller.
    """
    return crud_commission.get_commissions(
        db, reseller_id=reseller_id, status=status.value if status else None, skip=skip, limit=limit
    )

@router.get("/mine", response_model=List[Commission])
async def read_my_commissions(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_seller_or_admin),
    status: Optional[CommissionStatus] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200)
):
    """
    Commissions earned by the current reseller or sub-agent. Empty list if none.
    """
    return crud_commission.get_commissions(
        db, reseller_id=current_user.id, status=status.value if status else None, skip=skip, limit=limit
    )

@router.patch("/{commission_id}/status", response_model=Commission, tags=["Admin Commissions"])
async def update_commission_status(
    commission_id: int,
    status_in: CommissionStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: approve a pending commission or pay an approved one.
    """
    return await commission_ledger.set_commission_status(
        db,
        actor=Actor.from_user(current_user),
        commission_id=commission_id,
        target_status=status_in.status.value,
        expected_status=status_in.expected_status.value if status_in.expected_status else None,
    )

@router.post("/reconcile", response_model=ReconcileResponse, tags=["Admin Commissions"])
async def reconcile_commissions(
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Admin: create commissions for reseller orders that are missing one.
    """
    result = await commission_ledger.reconcile_missing_commissions(db)
    return ReconcileResponse(
        created=[Commission.model_validate(c) for c in result.created],
        failed=result.failed,
    )
