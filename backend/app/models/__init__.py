"""
SQLAlchemy models
"""
from app.core.database import Base
# Import all models here so Alembic can detect them
from app.models.form import (Form, FormStatus, FormSubmission,  # noqa: F401
                             LogicType)
from app.models.user import Session, User  # noqa: F401
from app.models.workspace import Workspace, workspace_forms  # noqa: F401

__all__ = [
    "Base",
    # Users
    "User",
    "Session",
    # Workspaces
    "Workspace",
    "workspace_forms",
    # Forms
    "Form",
    "FormStatus",
    "FormSubmission",
    "LogicType",
]
