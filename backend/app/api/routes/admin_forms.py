"""
Admin form API routes
"""
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_required
from app.core.database import get_db
from app.core.errors import (ApplicationError, DatabaseError,
                             ForbiddenFormError, FormNotFoundError)
from app.core.logging_config import LoggingConfig
from app.models.form import FormStatus
from app.models.user import User
from app.services.form_service import FormService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v3/admin/forms", tags=["admin-forms"])


class LogicCondition(BaseModel):
    field: str
    state: str
    value: Any


class FormLogic(BaseModel):
    """A showFields or preventSubmit logic unit"""
    id: Optional[str] = Field(None, alias="_id")
    logicType: str = Field(..., pattern="^(showFields|preventSubmit)$")
    conditions: List[LogicCondition] = Field(..., min_length=1)
    show: List[str] = Field(default_factory=list)
    preventSubmitMessage: Optional[str] = None


class FormField(BaseModel):
    id: str = Field(..., alias="_id")
    fieldType: str
    title: str
    required: bool = True
    model_config = {"extra": "allow"}


class CreateFormRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    form_fields: List[FormField] = Field(default_factory=list)
    form_logics: List[FormLogic] = Field(default_factory=list)


class UpdateFormRequest(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    status: Optional[FormStatus] = None
    form_fields: Optional[List[FormField]] = None
    form_logics: Optional[List[FormLogic]] = None


class FormResponse(BaseModel):
    id: str
    title: str
    admin: str
    status: str
    form_fields: List[Dict[str, Any]]
    form_logics: List[Dict[str, Any]]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


def map_route_error(error: ApplicationError) -> int:
    if isinstance(error, FormNotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, ForbiddenFormError):
        return status.HTTP_403_FORBIDDEN
    if not isinstance(error, DatabaseError):
        logger.error("Unknown route error observed", extra={"error_type": type(error).__name__})
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(error: ApplicationError) -> JSONResponse:
    return JSONResponse(status_code=map_route_error(error), content={"message": error.message})


def _dump(items: Optional[List[BaseModel]]) -> Optional[List[Dict[str, Any]]]:
    if items is None:
        return None
    return [item.model_dump(by_alias=True, exclude_none=True) for item in items]


@router.get("", response_model=List[FormResponse])
async def list_forms(
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    try:
        forms = FormService(db).list_forms(current_user.id)
    except ApplicationError as e:
        return _error_response(e)
    return [form.to_dict() for form in forms]


@router.post("", response_model=FormResponse)
async def create_form(
    request: CreateFormRequest,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Create a private form owned by the session user"""
    try:
        form = FormService(db).create_form(
            current_user.id,
            request.title,
            form_fields=_dump(request.form_fields),
            form_logics=_dump(request.form_logics),
        )
    except ApplicationError as e:
        return _error_response(e)
    return form.to_dict()


@router.get("/{form_id}", response_model=FormResponse)
async def get_form(
    form_id: UUID,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    try:
        form = FormService(db).get_admin_form(current_user.id, form_id)
    except ApplicationError as e:
        return _error_response(e)
    return form.to_dict()


@router.put("/{form_id}", response_model=FormResponse)
async def update_form(
    form_id: UUID,
    request: UpdateFormRequest,
    current_user: User = Depends(get_current_user_required),
    db: Session = Depends(get_db)
):
    """Update title, status, fields or logic of a form"""
    try:
        form = FormService(db).update_form(
            current_user.id,
            form_id,
            title=request.title,
            status=request.status.value if request.status else None,
            form_fields=_dump(request.form_fields),
            form_logics=_dump(request.form_logics),
        )
    except ApplicationError as e:
        return _error_response(e)
    return form.to_dict()
