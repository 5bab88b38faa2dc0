from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from resellerhub.models.commission import CommissionStatus
from resellerhub.schemas.user import UserBrief

class CommissionNestedOrder(BaseModel):
    """A simplified Order schema for nesting within Commission."""
    id: int
    amount: int
    payment_status: str
    order_date: datetime

    class Config:
        from_attributes = True

class CommissionCreate(BaseModel):
    """Schema for creating a commission record. Only the commission ledger builds these."""
    order_id: int
    reseller_id: int
    percent: int = Field(..., ge=0, le=100)
    amount: int = Field(..., ge=0)
    status: CommissionStatus = CommissionStatus.PENDING
    created_at: Optional[datetime] = None

    class Config:
        use_enum_values = True

class CommissionStatusUpdate(BaseModel):
    """Schema for an admin status change; expected_status guards against stale writes."""
    status: CommissionStatus
    expected_status: Optional[CommissionStatus] = None

class Commission(BaseModel):
    """Full schema for returning commission data to the client."""
    id: int
    order_id: int
    reseller_id: int
    percent: int
    amount: int
    status: CommissionStatus
    paid_at: Optional[datetime] = None
    created_at: datetime

    order: Optional[CommissionNestedOrder] = None
    reseller: Optional[UserBrief] = None

    class Config:
        from_attributes = True
