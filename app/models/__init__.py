# models/__init__.py
"""
Pydantic models for request/response validation
"""

from .auth_models import (
    SignUpRequest,
    SecondarySignUpRequest,
    SignInRequest,
    AddBadgeRequest,
    CompletionUpdateRequest,
    MessageResponse,
    UserResponse,
    TokenResponse,
)

from .badge import BadgeBase, Badge, Requirement

from .user import (
    UserRequirement,
    UserBadge,
    User,
    BadgeProgress,
)

__all__ = [
    # Auth
    "SignUpRequest",
    "SecondarySignUpRequest",
    "SignInRequest",
    "AddBadgeRequest",
    "CompletionUpdateRequest",
    "MessageResponse",
    "UserResponse",
    "TokenResponse",

    # Catalog
    "BadgeBase",
    "Badge",
    "Requirement",

    # User
    "UserRequirement",
    "UserBadge",
    "User",
    "BadgeProgress",
]
