# db/models.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.core.database import Base
import uuid

EARNED = "earned"
REQUIRED = "required"


def generate_uuid():
    return str(uuid.uuid4())


# User related models
class User(Base):
    __tablename__ = 'users'

    id                = Column(String(36), primary_key=True, default=generate_uuid)
    first_name        = Column(String(255), nullable=False)
    last_name         = Column(String(255), nullable=False)
    email             = Column(String(255), unique=True, index=True, nullable=False)
    membership_number = Column(String(100), nullable=False)
    # username/password_hash stay NULL until the second signup step
    username          = Column(String(255), unique=True, index=True, nullable=True)
    password_hash     = Column(String(255), nullable=True)
    created_at        = Column(DateTime(timezone=True), server_default=func.now())
    last_login        = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    badges = relationship(
        "UserBadge",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserBadge.id",
    )


# Catalog models (seeded out of band, read-only to the API)
class Badge(Base):
    __tablename__ = 'badges'

    badge_id   = Column(Integer, primary_key=True, autoincrement=False)
    badge_name = Column(String(255), nullable=False, index=True)
    image_url  = Column(Text, nullable=True)
    categories = Column(Text, nullable=True)  # free text, e.g. "Outdoors, At Camp"

    # Relationships
    requirements = relationship(
        "Requirement",
        back_populates="badge",
        cascade="all, delete-orphan",
        order_by="Requirement.requirement_id",
    )


class Requirement(Base):
    __tablename__ = 'requirements'

    id                 = Column(Integer, primary_key=True, index=True)
    badge_id           = Column(Integer, ForeignKey('badges.badge_id', ondelete='CASCADE'), nullable=False)
    requirement_id     = Column(Integer, nullable=False)
    requirement_string = Column(Text, nullable=False)

    # Relationships
    badge = relationship("Badge", back_populates="requirements")

    __table_args__ = (
        Index('idx_requirements_badge_requirement', 'badge_id', 'requirement_id', unique=True),
    )


# Achievement models
class UserBadge(Base):
    __tablename__ = 'user_badges'

    id       = Column(Integer, primary_key=True, index=True)
    user_id  = Column(String(36), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    badge_id = Column(Integer, ForeignKey('badges.badge_id', ondelete='CASCADE'), nullable=False)
    kind     = Column(String(20), nullable=False, default=EARNED)  # 'earned' | 'required'
    added_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    user         = relationship("User", back_populates="badges")
    badge        = relationship("Badge")
    requirements = relationship(
        "UserRequirement",
        back_populates="user_badge",
        cascade="all, delete-orphan",
        order_by="UserRequirement.id",
    )

    # Unique constraint
    __table_args__ = (
        Index('idx_user_badges_unique', 'user_id', 'badge_id', 'kind', unique=True),
    )


class UserRequirement(Base):
    __tablename__ = 'user_requirements'

    id             = Column(Integer, primary_key=True, index=True)
    user_badge_id  = Column(Integer, ForeignKey('user_badges.id', ondelete='CASCADE'), nullable=False)
    requirement_pk = Column(Integer, ForeignKey('requirements.id', ondelete='CASCADE'), nullable=False)
    completed      = Column(Boolean, nullable=False, default=False)
    updated_at     = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # Relationships
    user_badge  = relationship("UserBadge", back_populates="requirements")
    requirement = relationship("Requirement")

    __table_args__ = (
        Index('idx_user_requirements_unique', 'user_badge_id', 'requirement_pk', unique=True),
    )
