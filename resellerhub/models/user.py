import enum

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from resellerhub.db.base_class import Base
from resellerhub.core.timeutils import utcnow


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    RESELLER = "reseller"
    SUB_AGENT = "ctv" # "cộng tác viên", secondary selling partner
    CUSTOMER = "customer"


SELLER_ROLES = (UserRole.RESELLER.value, UserRole.SUB_AGENT.value)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    role = Column(String(20), nullable=False, index=True) # One of UserRole; never changed after creation
    hashed_password = Column(String, nullable=True) # Customers may exist without a login
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @property
    def is_seller(self) -> bool:
        return self.role in SELLER_ROLES

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
