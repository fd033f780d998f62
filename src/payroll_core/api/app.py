"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_core.api.routes import (
    disbursements_router,
    health_router,
    paychecks_router,
)
from payroll_core.calculators.engine import PayrollCalculator
from payroll_core.calculators.rates import RATES_2024, TaxRateSet, load_rate_set
from payroll_core.config import get_settings
from payroll_core.disbursement.router import DisbursementRouter
from payroll_core.disbursement.status import DisbursementStatusResolver
from payroll_core.disbursement.stub import StubPaymentGateway
from payroll_core.errors import InvalidInput, RateSetNotValid

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    rate_set: TaxRateSet = app.state.rate_set
    logger.info("Serving payroll core with tax rate set %s", rate_set.version)
    yield


def create_app(
    gateway: StubPaymentGateway | None = None,
    rate_set: TaxRateSet | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Without a gateway the in-memory stub is used. The rate set comes from
    ``TAX_RATES_PATH`` when set, otherwise the built-in 2024 rates.
    """
    settings = get_settings()
    if rate_set is None:
        rate_set = (
            load_rate_set(settings.tax_rates_path)
            if settings.tax_rates_path
            else RATES_2024
        )
    gateway = gateway or StubPaymentGateway(currency=settings.currency)

    app = FastAPI(
        title="Payroll Core API",
        description="Paycheck calculation and disbursement",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.rate_set = rate_set
    app.state.gateway = gateway
    app.state.calculator = PayrollCalculator(rate_set=rate_set)
    app.state.router = DisbursementRouter(gateway, gateway, currency=settings.currency)
    app.state.resolver = DisbursementStatusResolver(gateway)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(InvalidInput)
    async def invalid_input_handler(
        request: Request, exc: InvalidInput
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "code": "INVALID_INPUT", "field": exc.field},
        )

    @app.exception_handler(RateSetNotValid)
    async def rate_set_handler(
        request: Request, exc: RateSetNotValid
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_409_CONFLICT,
            content={"detail": str(exc), "code": "RATE_SET_NOT_VALID"},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(paychecks_router, prefix="/api/v1")
    app.include_router(disbursements_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
