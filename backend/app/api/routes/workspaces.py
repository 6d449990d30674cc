"""
Workspace API routes
"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_required
from app.core.config import get_settings
from app.core.database import get_db
from app.core.errors import (ApplicationError, DatabaseConflictError,
                             DatabaseError, DatabaseValidationError,
                             ForbiddenFormError, ForbiddenWorkspaceError,
                             FormNotFoundError, WorkspaceNotFoundError)
from app.core.logging_config import LoggingConfig
from app.core.metrics import workspace_operations_total
from app.models.user import User
from app.services.workspace_service import WorkspaceService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v3/admin/workspaces", tags=["workspaces"])

DELETE_SUCCESS_MESSAGE = "Successfully deleted workspace"


# Request/Response models
class WorkspaceTitleRequest(BaseModel):
    """Body for creating a workspace or renaming one"""
    title: str

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Workspace title is required")
        max_length = get_settings().workspace_title_max_length
        if len(v) > max_length:
            raise ValueError(f"Workspace title must be at most {max_length} characters")
        return v


class DeleteWorkspaceRequest(BaseModel):
    shouldDeleteForms: bool = False


class MoveFormsRequest(BaseModel):
    formIds: List[UUID] = Field(..., min_length=1)


class WorkspaceResponse(BaseModel):
    """Workspace response model"""
    id: str
    title: str
    admin: str
    form_ids: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class MessageResponse(BaseModel):
    message: str


# Status for each error kind; anything unlisted is a 500
_ERROR_STATUS = (
    (WorkspaceNotFoundError, status.HTTP_404_NOT_FOUND),
    (FormNotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenWorkspaceError, status.HTTP_403_FORBIDDEN),
    (ForbiddenFormError, status.HTTP_403_FORBIDDEN),
    (DatabaseConflictError, status.HTTP_409_CONFLICT),
    (DatabaseValidationError, status.HTTP_400_BAD_REQUEST),
    (DatabaseError, status.HTTP_500_INTERNAL_SERVER_ERROR),
)


def map_route_error(error: ApplicationError) -> int:
    """HTTP status code for an error raised by the workspace service"""
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(error, error_type):
            return status_code
    logger.error(
        "Unknown route error observed",
        extra={"action": "map_route_error", "error_type": type(error).__name__}
    )
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(action: str, error: ApplicationError) -> JSONResponse:
    status_code = map_route_error(error)
    workspace_operations_total.labels(operation=action, status=type(error).__name__).inc()
    logger.warning(
        "Workspace request failed",
        extra={"action": action, "status_code": status_code, "error": error.message}
    )
    return JSONResponse(status_code=status_code, content={"message": error.message})


def _serialize(workspace) -> dict:
    return WorkspaceResponse(**workspace.to_dict()).model_dump(mode="json")


@router.get("", response_model=List[WorkspaceResponse])
async def get_workspaces(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """List the session user's workspaces"""
    try:
        workspaces = WorkspaceService(db).get_workspaces(current_user.id)
    except ApplicationError as e:
        return _error_response("get_workspaces", e)

    workspace_operations_total.labels(operation="get_workspaces", status="success").inc()
    return [_serialize(workspace) for workspace in workspaces]


@router.post("", response_model=WorkspaceResponse)
async def create_workspace(
    request: WorkspaceTitleRequest,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Create a workspace owned by the session user"""
    try:
        workspace = WorkspaceService(db).create_workspace(current_user.id, request.title)
    except ApplicationError as e:
        return _error_response("create_workspace", e)

    workspace_operations_total.labels(operation="create_workspace", status="success").inc()
    return _serialize(workspace)


@router.put("/{workspace_id}/title", response_model=WorkspaceResponse)
async def update_workspace_title(
    workspace_id: UUID,
    request: WorkspaceTitleRequest,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Rename a workspace; only its admin may do so"""
    service = WorkspaceService(db)
    try:
        workspace = service.get_workspace(workspace_id)
        service.verify_workspace_admin(workspace, current_user.id)
        workspace = service.update_workspace_title(workspace_id, request.title)
    except ApplicationError as e:
        return _error_response("update_workspace_title", e)

    workspace_operations_total.labels(operation="update_workspace_title", status="success").inc()
    return _serialize(workspace)


@router.delete("/{workspace_id}", response_model=MessageResponse)
async def delete_workspace(
    workspace_id: UUID,
    request: Optional[DeleteWorkspaceRequest] = None,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Delete a workspace, archiving its forms when shouldDeleteForms is set"""
    should_delete_forms = request.shouldDeleteForms if request else False
    try:
        WorkspaceService(db).delete_workspace(workspace_id, current_user.id, should_delete_forms)
    except ApplicationError as e:
        return _error_response("delete_workspace", e)

    workspace_operations_total.labels(operation="delete_workspace", status="success").inc()
    return {"message": DELETE_SUCCESS_MESSAGE}


@router.post("/{workspace_id}/move", response_model=WorkspaceResponse)
async def move_forms(
    workspace_id: UUID,
    request: MoveFormsRequest,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Move the session user's forms into this workspace"""
    try:
        workspace = WorkspaceService(db).move_forms(current_user.id, workspace_id, request.formIds)
    except ApplicationError as e:
        return _error_response("move_forms", e)

    workspace_operations_total.labels(operation="move_forms", status="success").inc()
    return _serialize(workspace)
