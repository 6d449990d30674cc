"""
Session authentication dependencies
"""
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.database import get_db
from app.core.logging_config import LoggingConfig
from app.models.user import User
from app.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)

# HTTP Bearer security scheme
security = HTTPBearer(auto_error=False)


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
) -> Optional[str]:
    """Token from the Authorization header, falling back to the session cookie"""
    if credentials:
        return credentials.credentials
    return request.cookies.get(get_settings().session_cookie_name)


async def get_current_user_optional(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[User]:
    """
    Get the session user if authenticated, otherwise None

    Returns:
        User object if authenticated, None otherwise
    """
    token = get_session_token(request, credentials)
    if not token:
        return None
    return AuthService(db).validate_session(token)


async def get_current_user_required(
    user: Optional[User] = Depends(get_current_user_optional),
) -> User:
    """
    Require authentication: return User or raise 401
    """
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    LoggingConfig.set_context(user_id=str(user.id))
    return user
