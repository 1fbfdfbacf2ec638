"""
Forum endpoints.
"""

from fastapi import APIRouter, Query, Response, status

from portfolio_api.api.deps import CurrentUser, Forums
from portfolio_api.schemas.common import PaginatedResponse
from portfolio_api.schemas.content import ForumCreate, ForumResponse, ForumUpdate, LikeResponse

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ForumResponse])
async def list_forums(
    forums: Forums,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    result = await forums.list(page=page, limit=limit)
    return PaginatedResponse[ForumResponse].from_page(
        result, [ForumResponse.from_entity(forum) for forum in result.items]
    )


@router.get("/{forum_id}", response_model=ForumResponse)
async def get_forum(forum_id: str, forums: Forums):
    return ForumResponse.from_entity(await forums.get(forum_id))


@router.post("", response_model=ForumResponse, status_code=status.HTTP_201_CREATED)
async def create_forum(data: ForumCreate, forums: Forums, current_user: CurrentUser):
    forum = await forums.create(current_user.id, data.model_dump())
    return ForumResponse.from_entity(forum)


@router.put("/{forum_id}", response_model=ForumResponse)
async def update_forum(
    forum_id: str,
    data: ForumUpdate,
    forums: Forums,
    current_user: CurrentUser,
):
    """Update a forum's title or description. Owner only."""
    forum = await forums.update(current_user.id, forum_id, data.model_dump(exclude_unset=True))
    return ForumResponse.from_entity(forum)


@router.delete("/{forum_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_forum(forum_id: str, forums: Forums, current_user: CurrentUser):
    await forums.delete(current_user.id, forum_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{forum_id}/like", response_model=LikeResponse)
async def toggle_forum_like(forum_id: str, forums: Forums, current_user: CurrentUser):
    result = await forums.toggle_like(current_user.id, forum_id)
    return LikeResponse.from_result(forums.label, result)
