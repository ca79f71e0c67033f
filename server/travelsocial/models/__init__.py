"""Models module exporting all database models."""

from .actor import ActorRef, ActorType
from .booking import Booking, BookingStatus
from .content import Comment, Post, Tweet
from .edge import Edge, EdgeKind, LikeTargetKind
from .notification import Notification, NotificationType, RelatedEntityType
from .package import Package
from .profile import Agency, Traveler

__all__ = [
    # Actor identity
    "ActorRef",
    "ActorType",
    "Traveler",
    "Agency",

    # Inventory and bookings
    "Package",
    "Booking",
    "BookingStatus",

    # Notifications
    "Notification",
    "NotificationType",
    "RelatedEntityType",

    # Social graph
    "Edge",
    "EdgeKind",
    "LikeTargetKind",

    # Content
    "Post",
    "Tweet",
    "Comment",
]
