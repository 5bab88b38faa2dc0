import enum

from sqlalchemy import Column, Integer, String, Text, DateTime, BigInteger, ForeignKey
from sqlalchemy.orm import relationship
from resellerhub.db.base_class import Base
from resellerhub.core.timeutils import utcnow


class PaymentStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    BANK_TRANSFER = "bank_transfer"
    CASH = "cash"
    MOMO = "momo"
    ZALOPAY = "zalopay"


# Allowed payment_status edges; paid and cancelled are terminal
ORDER_TRANSITIONS = {
    (PaymentStatus.PENDING, PaymentStatus.PAID),
    (PaymentStatus.PENDING, PaymentStatus.CANCELLED),
}


class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    package_id = Column(Integer, ForeignKey("packages.id"), nullable=False)
    reseller_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True) # NULL for direct/admin sales

    amount = Column(BigInteger, nullable=False) # Snapshot of package.price, never recomputed
    payment_status = Column(String(20), nullable=False, default=PaymentStatus.PENDING.value, index=True)
    payment_method = Column(String(20), nullable=True)

    order_date = Column(DateTime, default=utcnow, nullable=False, index=True)
    activation_date = Column(DateTime, nullable=True)
    expiry_date = Column(DateTime, nullable=True, index=True) # activation_date + package.duration months
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    customer = relationship("User", foreign_keys=[customer_id])
    package = relationship("Package")
    reseller = relationship("User", foreign_keys=[reseller_id])
    commission = relationship("Commission", back_populates="order", uselist=False)

    def __repr__(self):
        return f"<Order(id={self.id}, customer_id={self.customer_id}, package_id={self.package_id}, status='{self.payment_status}')>"
