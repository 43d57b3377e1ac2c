# models/badge.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class BadgeBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    badge_id: int
    badge_name: str
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    categories: Optional[str] = None  # free text, e.g. "Outdoors, At Camp"


class Badge(BadgeBase):
    pass


class Requirement(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    requirement_id: int
    badge_id: int
    requirement_string: str
