"""Pydantic schemas for request/response validation."""

from .actor import *  # noqa: F403
from .booking import *  # noqa: F403
from .common import *  # noqa: F403
from .health import *  # noqa: F403
from .notification import *  # noqa: F403
from .package import *  # noqa: F403
from .social import *  # noqa: F403
