"""FastAPI dependencies for database sessions, actor identity, and path ids."""

from typing import AsyncGenerator, Optional
from uuid import UUID

import jwt
from fastapi import Depends, Header
from jwt import PyJWTError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models.actor import ActorRef, ActorType
from .config import settings
from .database import get_async_session
from .exceptions import AuthenticationError, AuthorizationError, ValidationError


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database dependency that provides async database sessions.

    Yields:
        AsyncSession: Database session
    """
    async for session in get_async_session():
        yield session


def decode_access_token(token: str) -> ActorRef:
    """
    Verify a bearer access token and turn its claims into an actor.

    The token must carry ``sub`` (the actor id) and ``actor_type``
    (``Traveler`` or ``Agency``).

    Raises:
        AuthenticationError: If the token is invalid, expired, or lacks claims
    """
    try:
        payload = jwt.decode(
            token,
            settings.access_token_secret,
            algorithms=[settings.access_token_algorithm],
        )
    except PyJWTError:
        raise AuthenticationError("Invalid or expired access token")

    subject = payload.get("sub")
    actor_type = payload.get("actor_type")
    if subject is None or actor_type is None:
        raise AuthenticationError("Invalid token payload")

    try:
        return ActorRef(actor_type=ActorType(actor_type), actor_id=UUID(str(subject)))
    except ValueError:
        raise AuthenticationError("Invalid token payload")


async def get_current_actor(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> ActorRef:
    """
    Authentication dependency that resolves the calling actor.

    Args:
        authorization: Authorization header with Bearer token

    Returns:
        ActorRef: The authenticated traveler or agency

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
    """
    if not authorization:
        raise AuthenticationError("Authorization header missing")

    try:
        scheme, token = authorization.split()
    except ValueError:
        raise AuthenticationError("Invalid authorization header format")

    if scheme.lower() != "bearer":
        raise AuthenticationError("Invalid authentication scheme")

    return decode_access_token(token)


CURRENT_ACTOR = Depends(get_current_actor)


async def require_traveler(actor: ActorRef = CURRENT_ACTOR) -> ActorRef:
    if not actor.is_traveler:
        raise AuthorizationError("Only travelers can perform this action.")
    return actor


async def require_agency(actor: ActorRef = CURRENT_ACTOR) -> ActorRef:
    if not actor.is_agency:
        raise AuthorizationError("Only agencies can perform this action.")
    return actor


def parse_uuid(value: str, name: str = "id") -> UUID:
    """
    Parse an id taken from a path or query string.

    Raises:
        ValidationError: If the value is not a well-formed UUID
    """
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise ValidationError(
            f"Invalid {name} format",
            errors=[{"path": name, "message": "Must be a valid UUID"}],
        )


DatabaseSession = Depends(get_db)
CurrentActor = CURRENT_ACTOR
TravelerActor = Depends(require_traveler)
AgencyActor = Depends(require_agency)
