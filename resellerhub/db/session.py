import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from resellerhub.core.config import SQLALCHEMY_DATABASE_URI

logger = logging.getLogger(__name__)

# SQLite connections are shared across the threadpool FastAPI runs sync deps in
is_sqlite = SQLALCHEMY_DATABASE_URI.startswith("sqlite")

connect_args = {}
if is_sqlite:
    connect_args = {"check_same_thread": False}

engine = create_engine(SQLALCHEMY_DATABASE_URI, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """Request-scoped session; every ledger call in a request shares it."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None) -> None:
    """Create any missing tables. Models must be imported so they register on Base."""
    from resellerhub.db.base_class import Base
    import resellerhub.models  # noqa: F401

    target = bind or engine
    Base.metadata.create_all(bind=target)
    logger.info(f"Database schema ensured on {target.url}")
