"""
Pytest configuration and fixtures
"""
import os
import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from uuid import uuid4

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Test settings must be in place before app modules read them
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ["LOG_FORMAT"] = "text"
os.environ["ENABLE_TRACING"] = "false"

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

import app.models  # noqa: F401,E402 - register models with Base.metadata
from app.core.auth import get_current_user_required
from app.core.database import Base, get_db, get_engine, get_session_local
from app.models.form import Form, FormStatus
from app.models.user import User
from app.models.workspace import Workspace


@pytest.fixture(scope="function")
def db() -> Session:
    """Fresh in-memory schema and a session on it"""
    engine = get_engine()
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = get_session_local()()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin(db: Session) -> User:
    user = User(email=f"admin-{uuid4().hex[:8]}@example.com", password_hash="not-a-real-hash")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def other_admin(db: Session) -> User:
    user = User(email=f"other-{uuid4().hex[:8]}@example.com", password_hash="not-a-real-hash")
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_client(client, admin):
    """Test client whose requests carry ``admin`` as the session user"""
    client.app.dependency_overrides[get_current_user_required] = lambda: admin
    return client


@pytest.fixture
def session_user():
    """Stand-in session user for tests that never touch the database"""
    return SimpleNamespace(id=uuid4(), email="exists@example.com")


@pytest.fixture
def mock_user_client(client, session_user):
    client.app.dependency_overrides[get_current_user_required] = lambda: session_user
    return client


@pytest.fixture
def make_form(db: Session):
    """Factory persisting a form for an admin"""
    def _make_form(admin: User, title: str = "Feedback", status: str = FormStatus.PRIVATE.value,
                   form_fields=None, form_logics=None) -> Form:
        form = Form(
            title=title,
            admin_id=admin.id,
            status=status,
            form_fields=form_fields or [],
            form_logics=form_logics or [],
        )
        db.add(form)
        db.commit()
        db.refresh(form)
        return form
    return _make_form


def build_workspace(title: str = "Workspace1", admin_id=None, forms=None) -> Workspace:
    """Unsaved workspace for use as a mocked service result"""
    now = datetime.utcnow()
    workspace = Workspace(
        id=uuid4(),
        title=title,
        admin_id=admin_id or uuid4(),
        created_at=now,
        updated_at=now,
    )
    workspace.forms = forms or []
    return workspace
