# models/user.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.models.badge import BadgeBase


class UserRequirement(BaseModel):
    requirement_id: int
    requirement_string: str
    completed: bool = False


class UserBadge(BadgeBase):
    """A catalog badge as held by a user, with per-requirement completion."""
    requirements: List[UserRequirement] = []


class User(BaseModel):
    """Public view of a user; the password hash is never part of it."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    membership_number: str = Field(alias="membershipNumber")
    username: Optional[str] = None
    last_login: Optional[datetime] = Field(default=None, alias="lastLogin")
    earned_badges: List[UserBadge] = []
    required_badges: List[UserBadge] = []

    def find_earned_badge(self, badge_id: int) -> Optional[UserBadge]:
        return next((b for b in self.earned_badges if b.badge_id == badge_id), None)


class BadgeProgress(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    badge_id: int
    badge_name: str
    completed: int
    total: int
    status: str  # 'complete' | 'partial' | 'untouched'
    border_color: str = Field(alias="borderColor")
