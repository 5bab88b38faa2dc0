from sqlalchemy.orm import Session
from typing import Optional, List

from resellerhub.models.user import User
from resellerhub.schemas.user import UserCreate
from resellerhub.core.security import get_password_hash
from resellerhub.crud.base import gateway_errors, persist

def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()

def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == email).first()

def get_users(
    db: Session, *, role: Optional[str] = None, skip: int = 0, limit: int = 100
) -> List[User]:
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return query.order_by(User.name).offset(skip).limit(limit).all()

def count_users(db: Session) -> int:
    return db.query(User).count()

def create_user(db: Session, *, obj_in: UserCreate) -> User:
    db_obj = User(
        email=obj_in.email,
        name=obj_in.name,
        phone=obj_in.phone,
        role=obj_in.role.value,
        hashed_password=get_password_hash(obj_in.password) if obj_in.password else None,
        is_active=True, # Default to active on creation
    )
    with gateway_errors(db, f"create user {obj_in.email}"):
        return persist(db, db_obj)
