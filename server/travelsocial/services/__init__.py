"""Services module for business logic."""

from .actor_resolver import ActorResolver
from .booking_service import BookingService
from .content_service import ContentService
from .inventory_service import InventoryDrift, InventoryService
from .notification_service import NotificationService
from .package_service import PackageService
from .social_service import SocialService

__all__ = [
    "ActorResolver",
    "BookingService",
    "ContentService",
    "InventoryDrift",
    "InventoryService",
    "NotificationService",
    "PackageService",
    "SocialService",
]
