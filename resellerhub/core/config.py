import os
from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./resellerhub.db")
SQLALCHEMY_DATABASE_URI = DATABASE_URL

# JWT Settings
SECRET_KEY: str = os.getenv("SECRET_KEY", "change_me_in_the_env_file_to_a_long_random_value") # In a real deployment, use a strong, randomly generated key
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))

# Reporting
# Day and month buckets are cut in this time zone; timestamps are stored as naive UTC.
REPORT_TIMEZONE: str = os.getenv("REPORT_TIMEZONE", "Asia/Ho_Chi_Minh")

# Commission policy
# When true, a reseller's commission percent is locked at order creation from the
# tier of their month-to-date paid revenue. When false, every commission uses the
# flat sub-agent percent and tiers are only shown in the monthly report.
COMMISSION_TIERED_AT_CREATION: bool = os.getenv("COMMISSION_TIERED_AT_CREATION", "true").lower() in ("1", "true", "yes")
SUB_AGENT_COMMISSION_PERCENT: int = int(os.getenv("SUB_AGENT_COMMISSION_PERCENT", 10))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
