"""
Workspace service: CRUD and ownership checks for workspaces
"""
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.errors import (DatabaseConflictError, DatabaseError,
                             ForbiddenFormError, ForbiddenWorkspaceError,
                             FormNotFoundError, WorkspaceNotFoundError)
from app.core.logging_config import LoggingConfig
from app.core.metrics import db_errors_total
from app.models.form import Form, FormStatus
from app.models.workspace import Workspace

logger = LoggingConfig.get_logger(__name__)

TITLE_CONFLICT_MESSAGE = "A workspace with this title already exists"


class WorkspaceService:
    """Service for managing workspaces owned by admin users"""

    def __init__(self, db: Session):
        self.db = db

    def _database_error(
        self,
        action: str,
        exc: SQLAlchemyError,
        conflict_message: Optional[str] = None,
        **meta
    ) -> DatabaseError:
        """
        Roll back, log and translate a SQLAlchemy failure

        Integrity violations become DatabaseConflictError carrying
        ``conflict_message``, or its default message when none is given.
        """
        self.db.rollback()
        db_errors_total.labels(error_type=type(exc).__name__).inc()
        if isinstance(exc, IntegrityError):
            logger.warning(
                "Database conflict",
                extra={"action": action, "meta": meta, "error": str(exc.orig)}
            )
            return DatabaseConflictError(conflict_message)
        logger.error(
            "Database error",
            exc_info=True,
            extra={"action": action, "meta": meta}
        )
        return DatabaseError()

    def get_workspaces(self, user_id: UUID) -> List[Workspace]:
        """All workspaces administered by the user, ordered by title"""
        try:
            return (
                self.db.query(Workspace)
                .filter(Workspace.admin_id == user_id)
                .order_by(Workspace.title)
                .all()
            )
        except SQLAlchemyError as e:
            raise self._database_error("get_workspaces", e, user_id=str(user_id)) from e

    def create_workspace(self, user_id: UUID, title: str) -> Workspace:
        """
        Create a workspace for the user

        Raises:
            DatabaseConflictError: The user already has a workspace with this title
            DatabaseError: Any other database failure
        """
        workspace = Workspace(title=title, admin_id=user_id)
        try:
            self.db.add(workspace)
            self.db.commit()
            self.db.refresh(workspace)
        except SQLAlchemyError as e:
            raise self._database_error(
                "create_workspace", e, TITLE_CONFLICT_MESSAGE, user_id=str(user_id), title=title
            ) from e

        logger.info(
            "Created workspace",
            extra={"action": "create_workspace", "workspace_id": str(workspace.id)}
        )
        return workspace

    def get_workspace(self, workspace_id: UUID) -> Workspace:
        """
        Raises:
            WorkspaceNotFoundError: No workspace with this id
        """
        try:
            workspace = self.db.query(Workspace).filter(Workspace.id == workspace_id).first()
        except SQLAlchemyError as e:
            raise self._database_error("get_workspace", e, workspace_id=str(workspace_id)) from e

        if workspace is None:
            raise WorkspaceNotFoundError()
        return workspace

    def verify_workspace_admin(self, workspace: Workspace, user_id: UUID) -> bool:
        """
        Raises:
            ForbiddenWorkspaceError: The user is not the workspace admin
        """
        if workspace.admin_id != user_id:
            logger.warning(
                "User is not workspace admin",
                extra={"workspace_id": str(workspace.id), "user_id": str(user_id)}
            )
            raise ForbiddenWorkspaceError()
        return True

    def update_workspace_title(self, workspace_id: UUID, title: str) -> Workspace:
        workspace = self.get_workspace(workspace_id)
        workspace.title = title
        try:
            self.db.commit()
            self.db.refresh(workspace)
        except SQLAlchemyError as e:
            raise self._database_error(
                "update_workspace_title", e, TITLE_CONFLICT_MESSAGE, workspace_id=str(workspace_id), title=title
            ) from e
        return workspace

    def delete_workspace(
        self,
        workspace_id: UUID,
        user_id: UUID,
        should_delete_forms: bool = False,
    ) -> int:
        """
        Delete a workspace, optionally archiving the forms it holds

        Returns:
            Number of workspaces deleted

        Raises:
            WorkspaceNotFoundError, ForbiddenWorkspaceError, DatabaseError
        """
        workspace = self.get_workspace(workspace_id)
        self.verify_workspace_admin(workspace, user_id)

        try:
            if should_delete_forms:
                for form in workspace.forms:
                    form.status = FormStatus.ARCHIVED.value
            self.db.delete(workspace)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._database_error("delete_workspace", e, workspace_id=str(workspace_id)) from e

        logger.info(
            "Deleted workspace",
            extra={
                "action": "delete_workspace",
                "workspace_id": str(workspace_id),
                "should_delete_forms": should_delete_forms,
            }
        )
        return 1

    def move_forms(self, user_id: UUID, workspace_id: UUID, form_ids: Sequence[UUID]) -> Workspace:
        """
        Move forms into a workspace, detaching them from any other one

        Raises:
            WorkspaceNotFoundError, ForbiddenWorkspaceError,
            FormNotFoundError, ForbiddenFormError, DatabaseError
        """
        workspace = self.get_workspace(workspace_id)
        self.verify_workspace_admin(workspace, user_id)

        unique_ids = list(dict.fromkeys(form_ids))
        try:
            forms = self.db.query(Form).filter(Form.id.in_(unique_ids)).all()
        except SQLAlchemyError as e:
            raise self._database_error("move_forms", e, workspace_id=str(workspace_id)) from e

        if len(forms) != len(unique_ids):
            raise FormNotFoundError()
        if any(form.admin_id != user_id for form in forms):
            raise ForbiddenFormError()

        try:
            for form in forms:
                form.workspaces = [workspace]
            self.db.commit()
            self.db.refresh(workspace)
        except SQLAlchemyError as e:
            raise self._database_error("move_forms", e, workspace_id=str(workspace_id)) from e

        logger.info(
            "Moved forms into workspace",
            extra={"action": "move_forms", "workspace_id": str(workspace_id), "form_count": len(forms)}
        )
        return workspace
