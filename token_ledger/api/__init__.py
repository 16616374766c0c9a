"""
Token Ledger API Application Factory
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from .. import __version__
from ..errors import (
    LedgerError, InvalidConfiguration, InvalidAmount, InsufficientBalance,
    DuplicateDeposit, NoDeposit, InsufficientInterestPool, ClockRegression, Overflow
)
from ..ledger import LedgerEngine
from .accounts import router as accounts_router
from .operations import router as operations_router
from .admin import router as admin_router


ERROR_STATUS = {
    InvalidConfiguration: status.HTTP_400_BAD_REQUEST,
    InvalidAmount: status.HTTP_400_BAD_REQUEST,
    NoDeposit: status.HTTP_404_NOT_FOUND,
    InsufficientBalance: status.HTTP_409_CONFLICT,
    DuplicateDeposit: status.HTTP_409_CONFLICT,
    InsufficientInterestPool: status.HTTP_409_CONFLICT,
    ClockRegression: 422,
    Overflow: 422,
}


def create_app(engine: Optional[LedgerEngine] = None) -> FastAPI:
    """
    Create and configure the FastAPI application

    Args:
        engine: Ledger to serve; one is built from configuration if omitted
    """
    app = FastAPI(
        title="Token Ledger API",
        description="Single-asset token ledger with interest-bearing deposits",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )

    if engine is None:
        from ..ledger import build_engine
        engine = build_engine()
    app.state.engine = engine

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        return JSONResponse(
            status_code=ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST),
            content={"error": exc.code, "detail": str(exc)}
        )

    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(operations_router, tags=["Operations"])
    app.include_router(admin_router, tags=["Admin"])

    @app.get("/health")
    def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "token_ledger_api",
            "version": __version__
        }

    @app.get("/")
    def get_token_info():
        """Token metadata and global counters"""
        ledger: LedgerEngine = app.state.engine
        return {
            "name": ledger.name(),
            "symbol": ledger.symbol(),
            "owner": ledger.owner(),
            "total_supply": ledger.total_supply(),
            "total_deposited": ledger.total_deposited(),
            "interest_pool": ledger.interest_pool()
        }

    return app
