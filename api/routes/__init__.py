"""API route modules."""

from .health_routes import router as health_router
from .legacy_redirects import LegacyRedirectHandler
from .redirect_routes import RedirectHandler

__all__ = [
    "health_router",
    "LegacyRedirectHandler",
    "RedirectHandler",
]
