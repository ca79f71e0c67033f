"""Content router for comments on posts."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.dependencies import CurrentActor, DatabaseSession, parse_uuid
from ..core.exceptions import ApiException, InternalServerError
from ..models.actor import ActorRef
from ..schemas.common import envelope
from ..schemas.social import Comment, CreateCommentRequest
from ..services.content_service import ContentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/posts", tags=["content"])


@router.post("/{post_id}/comments", status_code=201)
async def add_comment(
    post_id: str,
    request: CreateCommentRequest,
    actor: ActorRef = CurrentActor,
    db: AsyncSession = DatabaseSession,
) -> JSONResponse:
    """Comment on a post; the post owner is notified unless they wrote the comment."""
    post_uuid = parse_uuid(post_id, "post_id")

    try:
        comment = await ContentService(db).add_comment(actor, post_uuid, request.content)
        return JSONResponse(
            status_code=201,
            content=envelope(Comment.model_validate(comment), "Comment added successfully.", 201),
        )

    except ApiException:
        raise

    except Exception as e:
        logger.error(
            "Unexpected error in comment creation",
            extra={"post_id": post_id, "actor": str(actor), "error": str(e)},
            exc_info=True
        )
        raise InternalServerError() from e
