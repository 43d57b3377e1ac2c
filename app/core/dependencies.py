# app/core/dependencies.py

import logging
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.database import get_db
from app.core.exceptions import BadgeFinderError, ErrorKind
from app.core.security import decode_token
from app.db.db_access import UserService
from app.models.user import User

logger = logging.getLogger(__name__)

# auto_error=False so a missing header can fall through to the cookie
security = HTTPBearer(auto_error=False)


def get_settings_dep(request: Request) -> Settings:
    """FastAPI dependency: the Settings that create_app was built with."""
    return request.app.state.settings


def _resolve_user(db: Session, payload: dict) -> User:
    try:
        return UserService(db).find_by_id(payload["sub"])
    except BadgeFinderError as e:
        if e.kind is ErrorKind.USER_NOT_FOUND:
            raise BadgeFinderError(ErrorKind.TOKEN_INVALID)
        raise


def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """
    FastAPI dependency: the authenticated user.

    A bearer header wins and reports why it was rejected (missing, invalid,
    expired). Otherwise the `jwt` cookie is tried and any failure there is a
    plain "Unauthorized".
    """
    settings: Settings = request.app.state.settings

    if credentials is not None:
        if not credentials.credentials:
            raise BadgeFinderError(ErrorKind.TOKEN_MISSING)
        payload = decode_token(settings, credentials.credentials)
        user = _resolve_user(db, payload)
    else:
        cookie = request.cookies.get(settings.cookie_name)
        if not cookie:
            raise BadgeFinderError(ErrorKind.TOKEN_MISSING)
        try:
            user = _resolve_user(db, decode_token(settings, cookie))
        except BadgeFinderError as e:
            logger.debug(f"Cookie authentication failed: {e.kind.name}")
            raise BadgeFinderError(ErrorKind.UNAUTHENTICATED)

    request.state.user = user
    return user
