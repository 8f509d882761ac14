"""
Savings Ledger API Application Factory
"""

from typing import Optional
import uuid

from fastapi import FastAPI, Request
import uvicorn

from .deps import LedgerSystem
from .accounts import router as accounts_router
from .admin import router as admin_router
from .. import __version__
from ..logging_config import request_id_var


def create_app(system: Optional[LedgerSystem] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    app = FastAPI(
        title="Savings Ledger API",
        description="Interest-bearing savings balances with lock-period withdrawals",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc"
    )
    app.state.ledger_system = system or LedgerSystem()

    @app.middleware("http")
    async def bind_request_id(request: Request, call_next):
        """Tag log records and the response with one id per request"""
        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
        token = request_id_var.set(request_id)
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)
        response.headers["X-Request-ID"] = request_id
        return response

    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(admin_router, prefix="/admin", tags=["Admin"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "savings_ledger_api",
            "version": __version__
        }

    @app.get("/")
    async def get_api_info():
        """Get API information"""
        return {
            "name": "Savings Ledger API",
            "version": __version__,
            "endpoints": {
                "docs": "/docs",
                "health": "/health",
                "accounts": "/accounts",
                "admin": "/admin",
            }
        }

    return app


def run_server(host: str = "0.0.0.0", port: int = 8090, system: Optional[LedgerSystem] = None):
    """Run the API server with uvicorn"""
    uvicorn.run(create_app(system), host=host, port=port)
