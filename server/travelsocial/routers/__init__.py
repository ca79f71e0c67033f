"""FastAPI routers package."""

from .bookings import router as bookings_router
from .content import router as content_router
from .metrics import router as metrics_router
from .notifications import router as notifications_router
from .packages import router as packages_router
from .social import router as social_router

__all__ = [
    "bookings_router",
    "content_router",
    "metrics_router",
    "notifications_router",
    "packages_router",
    "social_router",
]
