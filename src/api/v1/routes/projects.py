"""Project and membership API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_member_service, get_project_service
from api.v1.schemas.project import (
    CreateProjectRequest,
    MemberBlockedResponse,
    MemberListResponse,
    MemberRemovedResponse,
    MemberResponse,
    ProjectDeletedResponse,
    ProjectListResponse,
    ProjectResponse,
    ProjectWrapperResponse,
    UpdateProjectRequest,
    WrappersSyncedResponse,
)
from core.rate_limit import limiter
from domain.services.member_service import MemberService
from domain.services.project_service import ProjectService

router = APIRouter(prefix="/projects", tags=["projects"])


@router.post(
    "",
    response_model=ProjectResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_project(
    request: Request,
    body: CreateProjectRequest,
    user: CurrentUser,
    service: ProjectService = Depends(get_project_service),
) -> ProjectResponse:
    """Create a project owned by the current user."""
    project = (
        await service.create_project(
            user.id, body.name, image_url=body.image_url, description=body.description
        )
    ).get_or_raise()
    return ProjectResponse.model_validate(project)


@router.get(
    "",
    response_model=ProjectListResponse,
    summary="List my projects",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_projects(
    request: Request,
    user: CurrentUser,
    service: ProjectService = Depends(get_project_service),
) -> ProjectListResponse:
    """List the projects the current user belongs to."""
    wrappers = (await service.get_user_projects(user.id)).get_or_raise()
    data = [ProjectWrapperResponse.model_validate(w) for w in wrappers]
    return ProjectListResponse(data=data, meta={"total": len(data)})


@router.patch(
    "/{project_id}",
    response_model=WrappersSyncedResponse,
    summary="Update project name or image",
    responses={403: {"description": "Owner only"}},
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_project(
    request: Request,
    project_id: str,
    body: UpdateProjectRequest,
    user: CurrentUser,
    service: ProjectService = Depends(get_project_service),
) -> WrappersSyncedResponse:
    """Rename a project or change its image and refresh every member's list."""
    synced = (
        await service.sync_project_wrappers(
            project_id, name=body.name, image_url=body.image_url, updated_by=user.id
        )
    ).get_or_raise()
    return WrappersSyncedResponse.model_validate(synced)


@router.delete(
    "/{project_id}",
    response_model=ProjectDeletedResponse,
    summary="Delete project",
    responses={
        403: {"description": "Owner only"},
        404: {"description": "Project not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_project(
    request: Request,
    project_id: str,
    user: CurrentUser,
    service: ProjectService = Depends(get_project_service),
) -> ProjectDeletedResponse:
    """Soft-delete a project. Owner only."""
    deleted = (await service.delete_project(project_id, user.id)).get_or_raise()
    return ProjectDeletedResponse.model_validate(deleted)


@router.get(
    "/{project_id}/members",
    response_model=MemberListResponse,
    summary="List project members",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    project_id: str,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> MemberListResponse:
    """List the members of a project. Requires membership."""
    members = (await service.get_members(project_id, user.id)).get_or_raise()
    data = [MemberResponse.model_validate(m) for m in members]
    return MemberListResponse(data=data, meta={"total": len(data)})


@router.delete(
    "/{project_id}/members/{member_user_id}",
    response_model=MemberRemovedResponse,
    summary="Remove member",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    project_id: str,
    member_user_id: str,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> MemberRemovedResponse:
    """Remove another member from the project."""
    removed = (await service.remove_member(project_id, member_user_id, user.id)).get_or_raise()
    return MemberRemovedResponse.model_validate(removed)


@router.post(
    "/{project_id}/members/{member_user_id}/block",
    response_model=MemberBlockedResponse,
    summary="Block member",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def block_member(
    request: Request,
    project_id: str,
    member_user_id: str,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> MemberBlockedResponse:
    """Block a member; they cannot rejoin with an invite."""
    blocked = (await service.block_member(project_id, member_user_id, user.id)).get_or_raise()
    return MemberBlockedResponse.model_validate(blocked)


@router.post(
    "/{project_id}/leave",
    response_model=MemberRemovedResponse,
    summary="Leave project",
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def leave_project(
    request: Request,
    project_id: str,
    user: CurrentUser,
    service: MemberService = Depends(get_member_service),
) -> MemberRemovedResponse:
    """Leave a project as the current user."""
    left = (await service.leave_member(project_id, user.id)).get_or_raise()
    return MemberRemovedResponse.model_validate(left)
