"""
Public form API routes: rendering data and submissions
"""
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.errors import (ApplicationError, FormNotFoundError,
                             InvalidSubmissionError, PrivateFormError,
                             SubmissionPreventedError)
from app.core.logging_config import LoggingConfig
from app.services.form_service import FormService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/v3/forms", tags=["public-forms"])

SUBMISSION_SUCCESS_MESSAGE = "Form submission successful."


class SubmissionRequest(BaseModel):
    responses: Dict[str, Any] = Field(default_factory=dict)


class PublicFormResponse(BaseModel):
    id: str
    title: str
    form_fields: List[Dict[str, Any]]
    form_logics: List[Dict[str, Any]]


class SubmissionResponse(BaseModel):
    message: str
    submissionId: str


def map_route_error(error: ApplicationError) -> int:
    if isinstance(error, (FormNotFoundError, PrivateFormError)):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, (SubmissionPreventedError, InvalidSubmissionError)):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(error: ApplicationError) -> JSONResponse:
    content = {"message": error.message}
    if isinstance(error, PrivateFormError):
        content["formTitle"] = error.form_title
    return JSONResponse(status_code=map_route_error(error), content=content)


@router.get("/{form_id}", response_model=PublicFormResponse)
async def get_public_form(form_id: UUID, db: Session = Depends(get_db)):
    """Fields and logic needed to render a public form"""
    try:
        form = FormService(db).get_public_form(form_id)
    except ApplicationError as e:
        return _error_response(e)
    return form.to_public_dict()


@router.post("/{form_id}/submissions", response_model=SubmissionResponse)
async def submit_form(form_id: UUID, request: SubmissionRequest, db: Session = Depends(get_db)):
    """Submit a response; rejected when form logic prevents submission"""
    try:
        submission = FormService(db).submit_response(form_id, request.responses)
    except ApplicationError as e:
        return _error_response(e)
    return {"message": SUBMISSION_SUCCESS_MESSAGE, "submissionId": str(submission.id)}
