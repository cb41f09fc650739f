"""API route modules."""

from faktura.api.routes.calculations import router as calculations_router
from faktura.api.routes.health import router as health_router
from faktura.api.routes.invoices import router as invoices_router

__all__ = [
    "health_router",
    "invoices_router",
    "calculations_router",
]
