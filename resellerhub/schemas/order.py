from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from resellerhub.models.order import PaymentMethod, PaymentStatus
from resellerhub.schemas.user import UserBrief
from resellerhub.schemas.package import PackageBrief

class OrderBase(BaseModel):
    customer_id: int
    package_id: int
    payment_method: PaymentMethod
    notes: Optional[str] = None

class OrderCreate(OrderBase):
    """
    Schema for data provided by the client when creating an order.
    - reseller_id is only honoured for admins; sellers always sell as themselves.
    - amount, activation and expiry dates are derived from the package.
    """
    reseller_id: Optional[int] = None

class OrderCreateInternal(BaseModel): # Used by CRUD operations internally
    """
    Row as written by the ledger, with every derived field already computed.
    """
    customer_id: int
    package_id: int
    reseller_id: Optional[int] = None
    amount: int = Field(..., ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_method: Optional[PaymentMethod] = None
    order_date: Optional[datetime] = None
    activation_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    notes: Optional[str] = None

    class Config:
        use_enum_values = True

class OrderStatusUpdate(BaseModel):
    """Admin status change. expected_status turns the update into a compare-and-swap."""
    payment_status: PaymentStatus
    expected_status: Optional[PaymentStatus] = None

class OrderCommission(BaseModel):
    id: int
    percent: int
    amount: int
    status: str

    class Config:
        from_attributes = True

class Order(BaseModel): # Full schema for returning order data to the client
    id: int
    customer_id: int
    package_id: int
    reseller_id: Optional[int] = None
    amount: int
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    order_date: datetime
    activation_date: Optional[datetime] = None
    expiry_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime

    customer: Optional[UserBrief] = None
    package: Optional[PackageBrief] = None
    reseller: Optional[UserBrief] = None
    commission: Optional[OrderCommission] = None

    class Config:
        from_attributes = True
