"""API routes."""

from payroll_core.api.routes.disbursements import router as disbursements_router
from payroll_core.api.routes.health import router as health_router
from payroll_core.api.routes.paychecks import router as paychecks_router

__all__ = ["disbursements_router", "health_router", "paychecks_router"]
