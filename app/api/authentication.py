# app/api/authentication.py

import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.dependencies import get_current_user, get_settings_dep
from app.core.rate_limit import rate_limit
from app.core.security import token_max_age
from app.db.db_access import UserService
from app.models.auth_models import (
    MessageResponse,
    SecondarySignUpRequest,
    SignInRequest,
    SignUpRequest,
    TokenResponse,
    UserResponse,
)
from app.models.user import User
from app.services.auth_service import AuthService

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"], dependencies=[Depends(rate_limit)])


def _set_auth_cookie(response: Response, settings: Settings, token: str) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=token,
        max_age=token_max_age(settings),
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def signup(
    data: SignUpRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    user = AuthService(db, settings).sign_up(data)
    return UserResponse(message="User created successfully", user=user)


@router.post("/signup-secondary", response_model=TokenResponse)
def signup_secondary(
    data: SecondarySignUpRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    token, user = AuthService(db, settings).sign_up_secondary(data)
    _set_auth_cookie(response, settings, token)
    return TokenResponse(message="User registered successfully", token=token, user=user)


@router.post("/signin", response_model=TokenResponse)
def signin(
    data: SignInRequest,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings_dep),
):
    token, user = AuthService(db, settings).sign_in(data)
    _set_auth_cookie(response, settings, token)
    return TokenResponse(message="User signed in successfully", token=token, user=user)


@router.get("/logout", response_model=MessageResponse)
def logout(response: Response, settings: Settings = Depends(get_settings_dep)):
    response.delete_cookie(settings.cookie_name)
    return MessageResponse(message="User logged out successfully")


@router.get("/user/{user_id}", response_model=User)
def get_user(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return UserService(db).find_by_id(user_id)
