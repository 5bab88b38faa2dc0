from .token import Token, TokenData
from .user import (
    UserBase,
    UserCreate,
    UserBrief,
    User
)
from .package import (
    PackageBase,
    PackageCreate,
    PackageUpdate,
    PackageBrief,
    Package
)
from .order import (
    OrderBase,
    OrderCreate,
    OrderCreateInternal,
    OrderStatusUpdate,
    OrderCommission,
    Order
)
from .commission import (
    CommissionNestedOrder,
    CommissionCreate,
    CommissionStatusUpdate,
    Commission as CommissionSchema # Alias to avoid clash if Commission model is also imported directly
)
from .report import (
    RevenuePoint,
    CommissionPoint,
    MonthlyRevenue,
    TopEntity,
    CustomerSummary,
    DashboardStats,
    CommissionTotals,
    PeriodReport
)
