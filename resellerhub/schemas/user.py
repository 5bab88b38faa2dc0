from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime

from resellerhub.models.user import UserRole

class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(..., max_length=255)
    phone: Optional[str] = Field(default=None, max_length=32)
    role: UserRole

class UserCreate(UserBase):
    password: Optional[str] = None # Customers can be registered without a login

class UserBrief(BaseModel):
    """Embedded shape used when a user is joined onto an order or commission."""
    id: int
    name: str
    email: EmailStr

    class Config:
        from_attributes = True

class User(UserBase):
    id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
