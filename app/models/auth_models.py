# models/auth_models.py
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, StrictBool

from app.models.user import User


class SignUpRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName", min_length=1)
    last_name: str = Field(alias="lastName", min_length=1)
    email: EmailStr
    membership_number: str = Field(alias="membershipNumber", min_length=1)


class SecondarySignUpRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(validation_alias=AliasChoices("userId", "_id", "user_id"), min_length=1)
    username: str = Field(min_length=1)
    password: str = Field(min_length=8)
    earned_badges: List[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("earnedBadges", "earned_badges"),
    )
    required_badges: List[int] = Field(
        default_factory=list,
        validation_alias=AliasChoices("requiredBadges", "required_badges"),
    )


class SignInRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class AddBadgeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    badge_id: Optional[int] = Field(default=None, alias="badgeId")


class CompletionUpdateRequest(BaseModel):
    completed: Optional[StrictBool] = None


class MessageResponse(BaseModel):
    message: str


class UserResponse(BaseModel):
    message: str
    user: User


class TokenResponse(BaseModel):
    message: str
    token: str
    user: User
