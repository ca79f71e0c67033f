"""Social router: follow and like toggles."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import CurrentActor, DatabaseSession, parse_uuid
from ..core.exceptions import ApiException, InternalServerError, ValidationError
from ..models.actor import ActorRef
from ..models.edge import LikeTargetKind
from ..schemas.common import envelope
from ..schemas.social import ToggleState
from ..services.social_service import SocialService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["social"])


def _parse_kind(kind: str) -> LikeTargetKind:
    """Accept singular or plural kind names, e.g. ``post`` or ``posts``."""
    value = kind.lower()
    if value.endswith("s") and value[:-1] in LikeTargetKind._value2member_map_:
        value = value[:-1]
    try:
        return LikeTargetKind(value)
    except ValueError:
        raise ValidationError(
            f"Invalid content kind '{kind}'.",
            errors=[{"path": "kind", "message": "Must be one of post, comment, tweet, package"}],
        )


@router.post("/follow/{user_name}")
async def toggle_follow(
    user_name: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Follow the actor holding ``user_name``, or unfollow if already following."""
    try:
        result = await SocialService(db).toggle_follow(actor, user_name)
        message = (
            "Followed successfully." if result.state == ToggleState.ADDED
            else "Unfollowed successfully."
        )
        return JSONResponse(status_code=200, content=envelope(result, message))

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in follow toggle",
            extra={"actor": str(actor), "user_name": user_name, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("/follow/{user_name}/followers")
async def list_followers(
    user_name: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    try:
        followers = await SocialService(db).list_followers(user_name)
        return JSONResponse(
            status_code=200,
            content=envelope(followers, "Followers retrieved successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in follower listing",
            extra={"user_name": user_name, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("/follow/{user_name}/following")
async def list_following(
    user_name: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    try:
        following = await SocialService(db).list_following(user_name)
        return JSONResponse(
            status_code=200,
            content=envelope(following, "Following retrieved successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in following listing",
            extra={"user_name": user_name, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.get("/likes/{kind}")
async def list_liked(
    kind: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """List the items of one kind the calling actor has liked."""
    target_kind = _parse_kind(kind)

    try:
        items = await SocialService(db).list_liked(actor, target_kind)
        return JSONResponse(
            status_code=200,
            content=envelope(items, "Liked items retrieved successfully."),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in liked item listing",
            extra={"actor": str(actor), "kind": kind, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e


@router.post("/{kind}/{target_id}/like")
async def toggle_like(
    kind: str,
    target_id: str,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """
    Like a post, comment, tweet, or package, or remove an existing like.

    Responds 201 when a like is added and 200 when it is removed.
    """
    target_kind = _parse_kind(kind)
    target_uuid = parse_uuid(target_id, "target_id")

    try:
        result = await SocialService(db).toggle_like(actor, target_kind, target_uuid)
        if result.state == ToggleState.ADDED:
            status_code, message = 201, f"Liked {target_kind.value} successfully."
        else:
            status_code, message = 200, f"Removed like from {target_kind.value}."
        return JSONResponse(
            status_code=status_code,
            content=envelope(result, message, status_code),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in like toggle",
            extra={"actor": str(actor), "kind": kind, "target_id": target_id, "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e
