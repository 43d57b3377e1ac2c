# services/auth_service.py
import logging
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.config import Settings
from app.core.security import create_access_token
from app.db.db_access import UserService
from app.models.auth_models import SecondarySignUpRequest, SignInRequest, SignUpRequest
from app.models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    """Service layer for signup, signin and token issuance"""

    def __init__(self, db: Session, settings: Settings):
        self.settings = settings
        self.users = UserService(db)

    def issue_token(self, user: User, claims: Optional[Dict[str, Any]] = None) -> str:
        return create_access_token(self.settings, user.id, claims)

    def sign_up(self, data: SignUpRequest) -> User:
        """First step: profile only, no credentials yet"""
        user = self.users.register_user(
            first_name=data.first_name,
            last_name=data.last_name,
            email=data.email,
            membership_number=data.membership_number,
        )
        logger.info(f"User {user.id} created")
        return user

    def sign_up_secondary(self, data: SecondarySignUpRequest) -> Tuple[str, User]:
        """Second step: credentials and initial badges; returns a token for the new session"""
        user = self.users.register_secondary_user(
            user_id=data.user_id,
            username=data.username,
            password=data.password,
            earned_badges=data.earned_badges,
            required_badges=data.required_badges,
        )
        logger.info(f"User {user.id} completed signup as {user.username!r}")
        return self.issue_token(user, {"email": user.email}), user

    def sign_in(self, data: SignInRequest) -> Tuple[str, User]:
        user = self.users.authenticate_user(data.username, data.password)
        user = self.users.record_login(user.id)
        token = self.issue_token(
            user,
            {"email": user.email, "firstName": user.first_name, "lastName": user.last_name},
        )
        logger.info(f"User {user.id} signed in")
        return token, user
