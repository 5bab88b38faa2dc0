from sqlalchemy.orm import Session
from typing import Optional, List

from resellerhub.models.package import Package
from resellerhub.schemas.package import PackageCreate, PackageUpdate
from resellerhub.crud.base import gateway_errors, persist

def get_package(db: Session, package_id: int, *, show_inactive: bool = False) -> Optional[Package]:
    """
    Get a single package by ID.
    By default, only active packages are returned unless show_inactive is True.
    """
    query = db.query(Package).filter(Package.id == package_id)
    if not show_inactive:
        query = query.filter(Package.is_active == True)
    return query.first()

def get_packages(
    db: Session, *, is_active: Optional[bool] = None, skip: int = 0, limit: int = 100
) -> List[Package]:
    """
    Get all packages ordered by duration, like the sales form lists them.
    If is_active is None, returns active and inactive ones.
    """
    query = db.query(Package)
    if is_active is not None:
        query = query.filter(Package.is_active == is_active)
    return query.order_by(Package.duration, Package.id).offset(skip).limit(limit).all()

def create_package(db: Session, *, obj_in: PackageCreate) -> Package:
    db_obj = Package(**obj_in.model_dump())
    with gateway_errors(db, f"create package {obj_in.name}"):
        return persist(db, db_obj)

def update_package(db: Session, *, db_obj: Package, obj_in: PackageUpdate) -> Package:
    """
    Partial update. Existing orders keep their own amount snapshot, so
    price changes here never touch them.
    """
    update_data = obj_in.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(db_obj, field, value)
    with gateway_errors(db, f"update package {db_obj.id}"):
        return persist(db, db_obj)

def deactivate_package(db: Session, *, package_id: int) -> Optional[Package]:
    """
    Logically delete a package by clearing is_active.
    Returns the package whether it was active or already inactive, None if missing.
    """
    db_obj = db.query(Package).filter(Package.id == package_id).first()
    if db_obj is None:
        return None
    if db_obj.is_active:
        db_obj.is_active = False
        with gateway_errors(db, f"deactivate package {package_id}"):
            persist(db, db_obj)
    return db_obj
