from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from resellerhub.crud import crud_package
from resellerhub.schemas.package import Package, PackageCreate, PackageUpdate
from resellerhub.db.session import get_db
from resellerhub.core.dependencies import get_current_active_admin, get_current_user
from resellerhub.models.user import User as UserModel

router = APIRouter()

@router.post("/", response_model=Package, status_code=201)
def create_package(
    package_in: PackageCreate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Create a new package. Admin only.
    """
    return crud_package.create_package(db=db, obj_in=package_in)

@router.get("/", response_model=List[Package])
def read_packages(
    db: Session = Depends(get_db),
    is_active: Optional[bool] = Query(True, description="Admins may pass false, or omit with include_all, to see inactive packages."),
    include_all: bool = Query(False, description="Admin only: ignore is_active and list every package."),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=200),
    current_user: Optional[UserModel] = Depends(get_current_user)
):
    """
    Retrieve packages, shortest duration first.
    Non-admins always see active packages only.
    """
    is_admin = bool(current_user and current_user.is_admin)
    effective_is_active = is_active
    if not is_admin:
        effective_is_active = True
    elif include_all:
        effective_is_active = None
    return crud_package.get_packages(db, is_active=effective_is_active, skip=skip, limit=limit)

@router.get("/{package_id}", response_model=Package)
def read_package(
    package_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[UserModel] = Depends(get_current_user)
):
    """
    Get a package by ID. Inactive packages are only visible to admins.
    """
    show_inactive = bool(current_user and current_user.is_admin)
    db_package = crud_package.get_package(db, package_id=package_id, show_inactive=show_inactive)
    if not db_package:
        raise HTTPException(status_code=404, detail="Package not found or not accessible")
    return db_package

@router.put("/{package_id}", response_model=Package)
def update_package(
    package_id: int,
    package_in: PackageUpdate,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Update a package. Admin only. Orders already placed keep their price snapshot.
    """
    db_package = crud_package.get_package(db, package_id=package_id, show_inactive=True)
    if not db_package:
        raise HTTPException(status_code=404, detail="Package not found")
    return crud_package.update_package(db=db, db_obj=db_package, obj_in=package_in)

@router.delete("/{package_id}", response_model=Package)
def delete_package(
    package_id: int,
    db: Session = Depends(get_db),
    current_user: UserModel = Depends(get_current_active_admin)
):
    """
    Logically delete a package (set as inactive). Admin only.
    """
    deleted = crud_package.deactivate_package(db=db, package_id=package_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Package not found")
    return deleted
