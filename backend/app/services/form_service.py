"""
Form service: admin form management and public submissions
"""
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (DatabaseError, ForbiddenFormError,
                             FormNotFoundError, InvalidSubmissionError,
                             PrivateFormError, SubmissionPreventedError)
from app.core.logging_config import LoggingConfig
from app.core.metrics import db_errors_total, form_submissions_total
from app.models.form import Form, FormStatus, FormSubmission
from app.services.form_logic import (get_logic_unit_preventing_submit,
                                     get_visible_field_ids)

logger = LoggingConfig.get_logger(__name__)


class FormService:
    """Service for form definitions and the responses collected on them"""

    def __init__(self, db: Session):
        self.db = db

    def _database_error(self, action: str, exc: SQLAlchemyError, **meta) -> DatabaseError:
        self.db.rollback()
        db_errors_total.labels(error_type=type(exc).__name__).inc()
        logger.error("Database error", exc_info=True, extra={"action": action, "meta": meta})
        return DatabaseError()

    def _commit(self, action: str, instance, **meta):
        try:
            self.db.commit()
            self.db.refresh(instance)
        except SQLAlchemyError as e:
            raise self._database_error(action, e, **meta) from e

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    def create_form(
        self,
        admin_id: UUID,
        title: str,
        form_fields: Optional[List[Dict[str, Any]]] = None,
        form_logics: Optional[List[Dict[str, Any]]] = None,
    ) -> Form:
        form = Form(
            title=title,
            admin_id=admin_id,
            status=FormStatus.PRIVATE.value,
            form_fields=form_fields or [],
            form_logics=form_logics or [],
        )
        self.db.add(form)
        self._commit("create_form", form, admin_id=str(admin_id))
        logger.info("Created form", extra={"action": "create_form", "form_id": str(form.id)})
        return form

    def list_forms(self, admin_id: UUID) -> List[Form]:
        try:
            return (
                self.db.query(Form)
                .filter(Form.admin_id == admin_id)
                .order_by(Form.updated_at.desc())
                .all()
            )
        except SQLAlchemyError as e:
            raise self._database_error("list_forms", e, admin_id=str(admin_id)) from e

    def get_form(self, form_id: UUID) -> Form:
        """
        Raises:
            FormNotFoundError: No form with this id
        """
        try:
            form = self.db.query(Form).filter(Form.id == form_id).first()
        except SQLAlchemyError as e:
            raise self._database_error("get_form", e, form_id=str(form_id)) from e
        if form is None:
            raise FormNotFoundError()
        return form

    def get_admin_form(self, admin_id: UUID, form_id: UUID) -> Form:
        """Form the given user administers, else ForbiddenFormError"""
        form = self.get_form(form_id)
        if form.admin_id != admin_id:
            raise ForbiddenFormError()
        return form

    def update_form(self, admin_id: UUID, form_id: UUID, **changes) -> Form:
        """Apply the non-None changes among title, status, form_fields, form_logics"""
        form = self.get_admin_form(admin_id, form_id)
        for key in ("title", "status", "form_fields", "form_logics"):
            value = changes.get(key)
            if value is not None:
                setattr(form, key, value)
        self._commit("update_form", form, form_id=str(form_id))
        return form

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    def get_public_form(self, form_id: UUID) -> Form:
        """
        Raises:
            FormNotFoundError: No form with this id
            PrivateFormError: The form is not accepting responses
        """
        form = self.get_form(form_id)
        if form.status != FormStatus.PUBLIC.value:
            raise PrivateFormError(form_title=form.title)
        return form

    def submit_response(self, form_id: UUID, responses: Dict[str, Any]) -> FormSubmission:
        """
        Store a response after checking form logic and required answers

        Only answers to visible fields are kept.

        Raises:
            FormNotFoundError, PrivateFormError,
            SubmissionPreventedError, InvalidSubmissionError, DatabaseError
        """
        form = self.get_public_form(form_id)
        form_fields = form.form_fields or []
        form_logics = form.form_logics or []

        prevent_logic = get_logic_unit_preventing_submit(form_fields, form_logics, responses)
        if prevent_logic is not None:
            form_submissions_total.labels(status="prevented").inc()
            logger.info(
                "Submission prevented by form logic",
                extra={"action": "submit_response", "form_id": str(form_id), "logic_id": prevent_logic.get("_id")}
            )
            raise SubmissionPreventedError(prevent_logic.get("preventSubmitMessage") or None)

        visible = get_visible_field_ids(form_fields, form_logics, responses)
        missing = [
            field.get("title") or str(field.get("_id"))
            for field in form_fields
            if field.get("required", True)
            and str(field.get("_id")) in visible
            and _is_unanswered(responses.get(str(field.get("_id"))))
        ]
        if missing:
            form_submissions_total.labels(status="invalid").inc()
            raise InvalidSubmissionError(f"Missing answers for required fields: {', '.join(missing)}")

        submission = FormSubmission(
            form_id=form.id,
            responses={field_id: value for field_id, value in responses.items() if field_id in visible},
        )
        self.db.add(submission)
        self._commit("submit_response", submission, form_id=str(form_id))

        form_submissions_total.labels(status="accepted").inc()
        logger.info(
            "Form submission saved",
            extra={"action": "submit_response", "form_id": str(form_id), "submission_id": str(submission.id)}
        )
        return submission


def _is_unanswered(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False
