import enum

from sqlalchemy import Column, Integer, String, DateTime, BigInteger, ForeignKey
from sqlalchemy.orm import relationship
from resellerhub.db.base_class import Base
from resellerhub.core.timeutils import utcnow


class CommissionStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    PAID = "paid"


# Strictly sequential, no skipping or reversal
COMMISSION_TRANSITIONS = {
    (CommissionStatus.PENDING, CommissionStatus.APPROVED),
    (CommissionStatus.APPROVED, CommissionStatus.PAID),
}


class Commission(Base):
    __tablename__ = "commissions"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, unique=True, index=True) # One commission per order
    reseller_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True) # Same as the order's reseller

    percent = Column(Integer, nullable=False) # Rate applied, snapshotted at creation
    amount = Column(BigInteger, nullable=False) # order.amount * percent / 100, rounded half up
    status = Column(String(20), nullable=False, default=CommissionStatus.PENDING.value, index=True)
    paid_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationships
    order = relationship("Order", back_populates="commission")
    reseller = relationship("User")

    def __repr__(self):
        return f"<Commission(id={self.id}, order_id={self.order_id}, reseller_id={self.reseller_id}, percent={self.percent}, amount={self.amount})>"
