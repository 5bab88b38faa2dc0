from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, BigInteger, CheckConstraint
from resellerhub.db.base_class import Base
from resellerhub.core.timeutils import utcnow

class Package(Base):
    __tablename__ = "packages"
    __table_args__ = (
        CheckConstraint("duration >= 1", name="ck_packages_duration_positive"),
        CheckConstraint("price >= 0", name="ck_packages_price_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    description = Column(Text, nullable=True)
    duration = Column(Integer, nullable=False) # Whole months
    price = Column(BigInteger, nullable=False) # VND, no minor unit
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    def __repr__(self):
        return f"<Package(id={self.id}, name='{self.name}', duration={self.duration}, price={self.price})>"
