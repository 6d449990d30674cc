"""
Workspace model: a named grouping of forms owned by one admin
"""
from datetime import datetime
from typing import List
from uuid import uuid4

from sqlalchemy import (Column, DateTime, ForeignKey, String, Table,
                        UniqueConstraint, Uuid)
from sqlalchemy.orm import relationship

from app.core.database import Base

# A form is a member of at most one workspace, hence the unique form_id
workspace_forms = Table(
    "workspace_forms",
    Base.metadata,
    Column("workspace_id", Uuid(as_uuid=True), ForeignKey("workspaces.id", ondelete="CASCADE"), primary_key=True),
    Column("form_id", Uuid(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), primary_key=True, unique=True),
)


class Workspace(Base):
    __tablename__ = "workspaces"
    __table_args__ = (
        UniqueConstraint("admin_id", "title", name="uq_workspaces_admin_title"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid4)
    title = Column(String(255), nullable=False)
    admin_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    admin_user = relationship("User", back_populates="workspaces")
    forms = relationship("Form", secondary=workspace_forms, back_populates="workspaces", order_by="Form.created_at")

    @property
    def form_ids(self) -> List[str]:
        return [str(form.id) for form in self.forms]

    def to_dict(self) -> dict:
        return {
            "id": str(self.id),
            "title": self.title,
            "admin": str(self.admin_id),
            "form_ids": self.form_ids,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f"<Workspace(id={self.id}, title={self.title}, admin_id={self.admin_id})>"
