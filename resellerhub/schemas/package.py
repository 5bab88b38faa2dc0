from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class PackageBase(BaseModel):
    name: str = Field(..., max_length=255)
    description: Optional[str] = None
    duration: int = Field(..., ge=1) # Whole months
    price: int = Field(..., ge=0) # VND
    is_active: bool = True

class PackageCreate(PackageBase):
    pass

class PackageUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=255)
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=1)
    price: Optional[int] = Field(default=None, ge=0)
    is_active: Optional[bool] = None

class PackageBrief(BaseModel):
    id: int
    name: str
    duration: int

    class Config:
        from_attributes = True

class Package(PackageBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True
