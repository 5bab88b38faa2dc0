from pydantic import BaseModel
from typing import List, Optional
from datetime import date

from resellerhub.schemas.user import UserBrief
from resellerhub.schemas.order import Order
from resellerhub.schemas.commission import Commission

class RevenuePoint(BaseModel):
    date: date
    revenue: int

class CommissionPoint(BaseModel):
    date: date
    commission: int

class MonthlyRevenue(BaseModel):
    month: str # YYYY-MM
    orders: int
    revenue: int
    commission_rate: Optional[int] = None
    commission: Optional[int] = None

class TopEntity(BaseModel):
    id: int
    name: Optional[str] = None
    total: int

class CustomerSummary(BaseModel):
    customer: UserBrief
    total_orders: int
    paid_orders: int
    total_spent: int

class DashboardStats(BaseModel):
    total_revenue: int
    total_orders: int
    total_users: int
    pending_commissions: int

class CommissionTotals(BaseModel):
    total: int
    pending: int
    approved: int
    paid: int
    total_orders: int

class PeriodReport(BaseModel):
    date_from: date
    date_to: date
    total_revenue: int
    total_orders: int
    total_commissions: int
    orders: List[Order] = []
    commissions: List[Commission] = []
