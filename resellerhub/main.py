import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from resellerhub.api.endpoints import auth as auth_api
from resellerhub.api.endpoints import users as users_api
from resellerhub.api.endpoints import packages as packages_api
from resellerhub.api.endpoints import orders as orders_api
from resellerhub.api.endpoints import commissions as commissions_api
from resellerhub.api.endpoints import reports as reports_api
from resellerhub.core.config import LOG_LEVEL
from resellerhub.core.exceptions import LedgerError
from resellerhub.db.session import init_db

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="ResellerHub API", version="0.1.0")

@app.on_event("startup")
def on_startup():
    init_db()

@app.exception_handler(LedgerError)
async def ledger_error_handler(request: Request, exc: LedgerError):
    # Each ledger failure class carries its own HTTP status
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected ({type(exc).__name__}): {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": type(exc).__name__},
    )

# Include API routers
app.include_router(auth_api.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(users_api.router, prefix="/api/v1/users", tags=["Users"])
app.include_router(packages_api.router, prefix="/api/v1/packages", tags=["Packages"])
app.include_router(orders_api.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(commissions_api.router, prefix="/api/v1/commissions", tags=["Commissions"])
app.include_router(reports_api.router, prefix="/api/v1/reports", tags=["Reports"])

@app.get("/ping", tags=["Health Check"])
async def ping():
    return {"message": "pong"}
