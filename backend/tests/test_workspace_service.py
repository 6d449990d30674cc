"""
Tests for WorkspaceService against an in-memory database
"""
from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from app.core.errors import (DatabaseConflictError, DatabaseError,
                             ForbiddenFormError, ForbiddenWorkspaceError,
                             FormNotFoundError, WorkspaceNotFoundError)
from app.models.form import Form, FormStatus
from app.models.workspace import Workspace, workspace_forms
from app.services.workspace_service import (TITLE_CONFLICT_MESSAGE,
                                            WorkspaceService)


@pytest.fixture
def service(db):
    return WorkspaceService(db)


def test_create_workspace(service, admin):
    workspace = service.create_workspace(admin.id, "Workspace1")

    assert workspace.id is not None
    assert workspace.title == "Workspace1"
    assert workspace.admin_id == admin.id
    assert workspace.form_ids == []


def test_create_workspace_duplicate_title_conflicts(service, admin):
    service.create_workspace(admin.id, "Workspace1")

    with pytest.raises(DatabaseConflictError) as exc_info:
        service.create_workspace(admin.id, "Workspace1")

    assert exc_info.value.message == TITLE_CONFLICT_MESSAGE

    # Session is usable again after the rollback
    assert [w.title for w in service.get_workspaces(admin.id)] == ["Workspace1"]


def test_same_title_allowed_for_different_admins(service, admin, other_admin):
    service.create_workspace(admin.id, "Workspace1")
    workspace = service.create_workspace(other_admin.id, "Workspace1")

    assert workspace.admin_id == other_admin.id


def test_get_workspaces_only_returns_own_sorted_by_title(service, admin, other_admin):
    service.create_workspace(admin.id, "b")
    service.create_workspace(admin.id, "a")
    service.create_workspace(other_admin.id, "c")

    workspaces = service.get_workspaces(admin.id)

    assert [w.title for w in workspaces] == ["a", "b"]


def test_get_workspaces_wraps_database_errors(service, admin, db):
    with patch.object(db, "query", side_effect=OperationalError("SELECT", {}, Exception("down"))):
        with pytest.raises(DatabaseError):
            service.get_workspaces(admin.id)


def test_get_workspace_not_found(service):
    with pytest.raises(WorkspaceNotFoundError) as exc_info:
        service.get_workspace(uuid4())

    assert exc_info.value.message == "Workspace not found"


def test_verify_workspace_admin(service, admin, other_admin):
    workspace = service.create_workspace(admin.id, "Workspace1")

    assert service.verify_workspace_admin(workspace, admin.id) is True
    with pytest.raises(ForbiddenWorkspaceError):
        service.verify_workspace_admin(workspace, other_admin.id)


def test_update_workspace_title(service, admin):
    workspace = service.create_workspace(admin.id, "Workspace1")

    updated = service.update_workspace_title(workspace.id, "Renamed")

    assert updated.id == workspace.id
    assert updated.title == "Renamed"


def test_update_workspace_title_to_existing_title_conflicts(service, admin):
    service.create_workspace(admin.id, "Workspace1")
    second = service.create_workspace(admin.id, "Workspace2")

    with pytest.raises(DatabaseConflictError):
        service.update_workspace_title(second.id, "Workspace1")


def test_update_missing_workspace(service):
    with pytest.raises(WorkspaceNotFoundError):
        service.update_workspace_title(uuid4(), "Renamed")


class TestDeleteWorkspace:

    def test_deletes_workspace_and_keeps_forms(self, service, admin, make_form, db):
        form = make_form(admin)
        workspace = service.create_workspace(admin.id, "Workspace1")
        service.move_forms(admin.id, workspace.id, [form.id])

        assert service.delete_workspace(workspace.id, admin.id) == 1

        assert db.query(Workspace).count() == 0
        assert db.execute(workspace_forms.select()).fetchall() == []
        db.refresh(form)
        assert form.status == FormStatus.PRIVATE.value

    def test_should_delete_forms_archives_them(self, service, admin, make_form, db):
        form = make_form(admin, status=FormStatus.PUBLIC.value)
        workspace = service.create_workspace(admin.id, "Workspace1")
        service.move_forms(admin.id, workspace.id, [form.id])

        service.delete_workspace(workspace.id, admin.id, should_delete_forms=True)

        db.refresh(form)
        assert form.status == FormStatus.ARCHIVED.value

    def test_not_found(self, service, admin):
        with pytest.raises(WorkspaceNotFoundError):
            service.delete_workspace(uuid4(), admin.id)

    def test_forbidden_for_other_admin(self, service, admin, other_admin, db):
        workspace = service.create_workspace(admin.id, "Workspace1")

        with pytest.raises(ForbiddenWorkspaceError):
            service.delete_workspace(workspace.id, other_admin.id)

        assert db.query(Workspace).count() == 1


class TestMoveForms:

    def test_moves_forms_into_workspace(self, service, admin, make_form):
        first = make_form(admin, title="First")
        second = make_form(admin, title="Second")
        workspace = service.create_workspace(admin.id, "Workspace1")

        result = service.move_forms(admin.id, workspace.id, [first.id, second.id])

        assert set(result.form_ids) == {str(first.id), str(second.id)}

    def test_moving_detaches_from_previous_workspace(self, service, admin, make_form, db):
        form = make_form(admin)
        source = service.create_workspace(admin.id, "Source")
        destination = service.create_workspace(admin.id, "Destination")
        service.move_forms(admin.id, source.id, [form.id])

        service.move_forms(admin.id, destination.id, [form.id])

        db.refresh(source)
        assert source.form_ids == []
        assert destination.form_ids == [str(form.id)]

    def test_duplicate_ids_are_collapsed(self, service, admin, make_form):
        form = make_form(admin)
        workspace = service.create_workspace(admin.id, "Workspace1")

        result = service.move_forms(admin.id, workspace.id, [form.id, form.id])

        assert result.form_ids == [str(form.id)]

    def test_unknown_form(self, service, admin):
        workspace = service.create_workspace(admin.id, "Workspace1")

        with pytest.raises(FormNotFoundError):
            service.move_forms(admin.id, workspace.id, [uuid4()])

    def test_form_of_another_admin(self, service, admin, other_admin, make_form, db):
        foreign = make_form(other_admin)
        workspace = service.create_workspace(admin.id, "Workspace1")

        with pytest.raises(ForbiddenFormError):
            service.move_forms(admin.id, workspace.id, [foreign.id])

        assert db.get(Form, foreign.id).workspaces == []

    def test_workspace_of_another_admin(self, service, admin, other_admin, make_form):
        form = make_form(other_admin)
        workspace = service.create_workspace(admin.id, "Workspace1")

        with pytest.raises(ForbiddenWorkspaceError):
            service.move_forms(other_admin.id, workspace.id, [form.id])

    def test_integrity_error_uses_generic_conflict_message(self, service, admin, make_form, db):
        form = make_form(admin)
        workspace = service.create_workspace(admin.id, "Workspace1")
        integrity_error = IntegrityError("INSERT INTO workspace_forms", {}, Exception("UNIQUE constraint failed"))

        with patch.object(db, "commit", side_effect=integrity_error):
            with pytest.raises(DatabaseConflictError) as exc_info:
                service.move_forms(admin.id, workspace.id, [form.id])

        assert exc_info.value.message == DatabaseConflictError.default_message
        assert exc_info.value.message != TITLE_CONFLICT_MESSAGE
