from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from resellerhub.crud import crud_user
from resellerhub.core import dependencies
from resellerhub.db.session import get_db
from resellerhub.models.user import User as UserModel, UserRole
from resellerhub.schemas.user import User, UserBrief, UserCreate

router = APIRouter()

@router.get("/me", response_model=User)
async def read_user_me(
    current_user: UserModel = Depends(dependencies.get_current_active_user)
):
    """
    Get the current logged-in user's profile.
    """
    return current_user

@router.post("/", response_model=User, status_code=201)
def create_user(
    user_in: UserCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(dependencies.get_current_active_admin)
):
    """
    Register a user of any role. Admin only; roles cannot be changed afterwards.
    """
    if crud_user.get_user_by_email(db, email=user_in.email):
        raise HTTPException(
            status_code=400,
            detail="A user with this email already exists in the system.",
        )
    return crud_user.create_user(db=db, obj_in=user_in)

@router.get("/", response_model=List[User])
def read_users(
    db: Session = Depends(get_db),
    role: Optional[UserRole] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    current_user: UserModel = Depends(dependencies.get_current_active_admin)
):
    """
    Admin: list users, optionally filtered by role.
    """
    return crud_user.get_users(db, role=role.value if role else None, skip=skip, limit=limit)

@router.get("/customers", response_model=List[UserBrief])
def read_customers(
    db: Session = Depends(get_db),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    current_user: UserModel = Depends(dependencies.get_current_seller_or_admin)
):
    """
    Customers a seller can pick from when creating an order, by name.
    """
    return crud_user.get_users(db, role=UserRole.CUSTOMER.value, skip=skip, limit=limit)
