"""
Authentication service for admin users and their login sessions
"""
import secrets
from datetime import datetime, timedelta
from typing import Optional
from uuid import UUID

import bcrypt
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.errors import DatabaseConflictError
from app.core.logging_config import LoggingConfig
from app.models.user import Session as UserSession
from app.models.user import User

logger = LoggingConfig.get_logger(__name__)


class AuthService:
    """Service for user authentication and session management"""

    def __init__(self, db: Session):
        self.db = db
        self.session_duration_hours = get_settings().session_duration_hours

    def register_user(self, email: str, password: str) -> User:
        """
        Register a new admin user

        Args:
            email: Email address, stored lowercased
            password: Plain text password

        Returns:
            Created User object

        Raises:
            DatabaseConflictError: If the email is already registered
        """
        email = email.strip().lower()
        if self.db.query(User).filter(User.email == email).first():
            raise DatabaseConflictError(f"Email '{email}' is already registered")

        user = User(
            email=email,
            password_hash=self._hash_password(password),
            is_active=True
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        logger.info("Registered new user", extra={"user_id": str(user.id)})
        return user

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate a user by email and password

        Returns:
            User object if authentication successful, None otherwise
        """
        user = self.db.query(User).filter(User.email == email.strip().lower()).first()

        if not user:
            logger.warning("Authentication failed: unknown email")
            return None

        if not user.is_active:
            logger.warning("Authentication failed: inactive user", extra={"user_id": str(user.id)})
            return None

        if not self._verify_password(password, user.password_hash):
            logger.warning("Authentication failed: invalid password", extra={"user_id": str(user.id)})
            return None

        user.last_login = datetime.utcnow()
        self.db.commit()

        logger.info("User authenticated", extra={"user_id": str(user.id)})
        return user

    def create_session(self, user_id: UUID, duration_hours: Optional[int] = None) -> UserSession:
        """Create a new login session for a user"""
        duration = duration_hours or self.session_duration_hours
        session = UserSession(
            user_id=user_id,
            token=secrets.token_urlsafe(32),
            expires_at=datetime.utcnow() + timedelta(hours=duration)
        )

        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)

        logger.info("Created session", extra={"user_id": str(user_id)})
        return session

    def validate_session(self, token: str) -> Optional[User]:
        """
        Validate a session token and return the associated user

        Expired sessions are deleted on sight.
        """
        session = self.db.query(UserSession).filter(UserSession.token == token).first()
        if not session:
            return None

        if session.expires_at < datetime.utcnow():
            logger.info("Session expired", extra={"session_id": str(session.id)})
            self.db.delete(session)
            self.db.commit()
            return None

        session.last_activity = datetime.utcnow()
        self.db.commit()

        user = self.db.query(User).filter(User.id == session.user_id).first()
        if not user or not user.is_active:
            return None
        return user

    def logout(self, token: str) -> bool:
        """Invalidate a session; returns whether one was found"""
        session = self.db.query(UserSession).filter(UserSession.token == token).first()
        if not session:
            return False

        self.db.delete(session)
        self.db.commit()
        logger.info("Session invalidated", extra={"session_id": str(session.id)})
        return True

    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt"""
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def _verify_password(self, password: str, password_hash: str) -> bool:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
