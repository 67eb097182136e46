"""FastAPI application factory"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from paygate.api.dependencies import get_request_id
from paygate.api.middleware import RequestIDMiddleware, MetricsMiddleware
from paygate.api.v1 import cards, companies, payments, transactions
from paygate.api.v1.schemas import ErrorResponse
from paygate.config import settings
from paygate.domain.exceptions import (
    AdapterError,
    BankCardNotFoundError,
    CompanyNotFoundError,
    GatewayError,
    InvalidReceiptError,
    InvalidServiceTypeError,
    MethodCompanyNotFoundError,
    MethodsNotFoundError,
    PayoutRejectedError,
    ProviderNotFoundError,
    TransactionNotFoundError,
)
from paygate.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)

# First matching class wins, so subclasses go before their bases
ERROR_STATUSES = [
    (CompanyNotFoundError, 404),
    (MethodsNotFoundError, 404),
    (MethodCompanyNotFoundError, 404),
    (ProviderNotFoundError, 404),
    (BankCardNotFoundError, 404),
    (TransactionNotFoundError, 404),
    (PayoutRejectedError, 422),
    (InvalidServiceTypeError, 400),
    (InvalidReceiptError, 400),
    (AdapterError, 502),
]


def error_status(error: GatewayError) -> int:
    for error_class, status in ERROR_STATUSES:
        if isinstance(error, error_class):
            return status
    return 502


async def gateway_error_handler(request: Request, exc: GatewayError) -> JSONResponse:
    status = error_status(exc)
    log = logging.warning if status < 500 else logging.error
    log(
        f"Gateway error: {exc}",
        extra={"request_id": get_request_id(request), "error": type(exc).__name__},
    )
    return JSONResponse(
        status_code=status,
        content=ErrorResponse(error=type(exc).__name__, detail=str(exc)).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Payment Gateway",
        description="Payment method resolution, transactions and stored bank cards",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(GatewayError, gateway_error_handler)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(companies.router, prefix="/v1", tags=["companies"])
    app.include_router(transactions.router, prefix="/v1", tags=["transactions"])
    app.include_router(cards.router, prefix="/v1", tags=["cards"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])

    return app


app = create_app()
