"""
Project endpoints.
"""

from fastapi import APIRouter, Query, Response, status

from portfolio_api.api.deps import CurrentUser, Projects
from portfolio_api.schemas.common import PaginatedResponse
from portfolio_api.schemas.content import (
    LikeResponse,
    ProjectCreate,
    ProjectResponse,
    ProjectUpdate,
)

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ProjectResponse])
async def list_projects(
    projects: Projects,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """List projects, newest first."""
    result = await projects.list(page=page, limit=limit)
    return PaginatedResponse[ProjectResponse].from_page(
        result, [ProjectResponse.from_entity(project) for project in result.items]
    )


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: str, projects: Projects):
    return ProjectResponse.from_entity(await projects.get(project_id))


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(data: ProjectCreate, projects: Projects, current_user: CurrentUser):
    """Create a project owned by the current user."""
    project = await projects.create(current_user.id, data.model_dump())
    return ProjectResponse.from_entity(project)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: str,
    data: ProjectUpdate,
    projects: Projects,
    current_user: CurrentUser,
):
    """
    Update a project. Owner only.

    Only fields present in the body are changed.
    """
    project = await projects.update(current_user.id, project_id, data.model_dump(exclude_unset=True))
    return ProjectResponse.from_entity(project)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(project_id: str, projects: Projects, current_user: CurrentUser):
    """Delete a project with its comments and likes. Owner only."""
    await projects.delete(current_user.id, project_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{project_id}/like", response_model=LikeResponse)
async def toggle_project_like(project_id: str, projects: Projects, current_user: CurrentUser):
    """Like the project, or unlike it if already liked."""
    result = await projects.toggle_like(current_user.id, project_id)
    return LikeResponse.from_result(projects.label, result)
