from .user import User, UserRole, SELLER_ROLES
from .package import Package
from .order import Order, PaymentStatus, PaymentMethod, ORDER_TRANSITIONS
from .commission import Commission, CommissionStatus, COMMISSION_TRANSITIONS
