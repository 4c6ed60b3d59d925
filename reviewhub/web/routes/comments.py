"""
Comment routes. Comments are append-only and listed newest first.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict, Field

from reviewhub.domain.errors import ValidationError
from reviewhub.infrastructure.persistence import Database, parse_object_id, serialize_document

from ..auth import get_db, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comment", tags=["comments"])


class CommentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    review: Optional[str] = None
    video_id: Optional[str] = Field(None, alias="videoId")
    user_id: Optional[str] = Field(None, alias="userId")


@router.post("")
def create_comment(
    body: CommentRequest,
    session_user: str = Depends(require_user),
    db: Database = Depends(get_db),
):
    if not body.review or not body.review.strip() or not body.video_id or not body.user_id:
        raise ValidationError("Missing required fields")

    video_id = parse_object_id(body.video_id, "Invalid videoId format")
    user_id = parse_object_id(body.user_id, "Invalid userId format")

    comment = db.add_comment(video_id, user_id, body.review.strip())
    logger.info(f"Comment {comment['_id']} added to {video_id} by session user {session_user}")
    return serialize_document(comment)


@router.get("")
def list_comments(
    video_id: Optional[str] = Query(None, alias="videoId"),
    db: Database = Depends(get_db),
):
    if not video_id:
        raise ValidationError("videoId query parameter is required")
    oid = parse_object_id(video_id, "Invalid videoId format")

    return [serialize_document(comment) for comment in db.list_comments(oid)]
