"""
Form and submission models
"""
from datetime import datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base
from app.models.workspace import workspace_forms


class FormStatus(str, Enum):
    """Form lifecycle status"""
    PRIVATE = "private"
    PUBLIC = "public"
    ARCHIVED = "archived"


class LogicType(str, Enum):
    SHOW_FIELDS = "showFields"
    PREVENT_SUBMIT = "preventSubmit"


class Form(Base):
    """Form definition: fields plus the logic units that gate them"""
    __tablename__ = "forms"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(255), nullable=False)
    admin_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default=FormStatus.PRIVATE.value, index=True)
    form_fields = Column(JSON, nullable=False, default=list)
    form_logics = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    workspaces = relationship("Workspace", secondary=workspace_forms, back_populates="forms")
    submissions = relationship("FormSubmission", back_populates="form", cascade="all, delete-orphan")

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "admin": str(self.admin_id),
            "status": self.status,
            "form_fields": self.form_fields or [],
            "form_logics": self.form_logics or [],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def to_public_dict(self) -> dict:
        """View served to respondents"""
        return {
            "id": str(self.id),
            "title": self.title,
            "form_fields": self.form_fields or [],
            "form_logics": self.form_logics or [],
        }

    def __repr__(self):
        return f"<Form(id={self.id}, title={self.title}, status={self.status})>"


class FormSubmission(Base):
    __tablename__ = "form_submissions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    form_id = Column(Uuid(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False, index=True)
    responses = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    form = relationship("Form", back_populates="submissions")

    def __repr__(self):
        return f"<FormSubmission(id={self.id}, form_id={self.form_id})>"
