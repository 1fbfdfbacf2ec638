"""
Comment endpoints.

Comments hang off exactly one project or forum.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, Response, status

from portfolio_api.api.deps import Comments, CurrentUser
from portfolio_api.schemas.comment import CommentCreate, CommentResponse, CommentUpdate

router = APIRouter()


@router.get("", response_model=List[CommentResponse])
async def list_comments(
    comments: Comments,
    project_id: Optional[str] = Query(None, alias="projectId"),
    forum_id: Optional[str] = Query(None, alias="forumId"),
):
    """List the comments of one project or forum, oldest first."""
    items = await comments.list(project_id=project_id, forum_id=forum_id)
    return [CommentResponse.from_entity(comment) for comment in items]


@router.post("", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def create_comment(data: CommentCreate, comments: Comments, current_user: CurrentUser):
    comment = await comments.create(
        current_user.id,
        data.content,
        project_id=data.project_id,
        forum_id=data.forum_id,
    )
    return CommentResponse.from_entity(comment)


@router.put("/{comment_id}", response_model=CommentResponse)
async def update_comment(
    comment_id: str,
    data: CommentUpdate,
    comments: Comments,
    current_user: CurrentUser,
):
    """Edit a comment's content. Author only."""
    comment = await comments.update(current_user.id, comment_id, data.content)
    return CommentResponse.from_entity(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: str, comments: Comments, current_user: CurrentUser):
    await comments.delete(current_user.id, comment_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
