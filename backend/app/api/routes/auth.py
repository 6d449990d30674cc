"""
Authentication API routes
"""
from datetime import datetime
from typing import Optional

from fastapi import (APIRouter, Depends, HTTPException, Request, Response,
                     status)
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import BaseModel, EmailStr, Field
from sqlalchemy.orm import Session

from app.core.auth import get_current_user_required, get_session_token, security
from app.core.config import get_settings
from app.core.database import get_db
from app.core.errors import DatabaseConflictError
from app.core.logging_config import LoggingConfig
from app.models.user import User
from app.services.auth_service import AuthService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


# Request/Response models
class RegisterRequest(BaseModel):
    """Admin registration request"""
    email: EmailStr
    password: str = Field(..., min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """User response model"""
    id: str
    email: str
    is_active: bool
    created_at: datetime
    last_login: Optional[datetime] = None


class LoginResponse(BaseModel):
    token: str
    user: UserResponse
    expires_at: datetime


def _user_response(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        is_active=user.is_active,
        created_at=user.created_at,
        last_login=user.last_login,
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """Register a new admin user"""
    try:
        user = AuthService(db).register_user(email=request.email, password=request.password)
    except DatabaseConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)
    return _user_response(user)


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Login and create a session"""
    settings = get_settings()
    auth_service = AuthService(db)

    user = auth_service.authenticate(request.email, request.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    session = auth_service.create_session(user.id)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=session.token,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        max_age=settings.session_duration_hours * 60 * 60
    )

    return LoginResponse(
        token=session.token,
        user=_user_response(user),
        expires_at=session.expires_at
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    request: Request,
    response: Response,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
):
    """Logout and invalidate session"""
    token = get_session_token(request, credentials)
    if token:
        AuthService(db).logout(token)
    response.delete_cookie(key=get_settings().session_cookie_name)
    return None


@router.get("/me", response_model=UserResponse)
async def get_current_user_info(current_user: User = Depends(get_current_user_required)):
    """Get the session user"""
    return _user_response(current_user)
