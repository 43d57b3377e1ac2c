# app/db/db_access.py

import logging
from datetime import datetime, timezone
from typing import Iterable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import BadgeFinderError, ErrorKind
from app.core.security import get_password_hash, verify_password
from app.db.catalog import BadgeCatalog
from app.models import validation as schemas
from app.models.user import User, UserBadge, UserRequirement
from .models import (
    EARNED,
    REQUIRED,
    Requirement as DBRequirement,
    User as DBUser,
    UserBadge as DBUserBadge,
    UserRequirement as DBUserRequirement,
)

logger = logging.getLogger(__name__)

_QUERY_COLUMNS = {
    "user_id": DBUser.id,
    "email": DBUser.email,
    "username": DBUser.username,
    "membership_number": DBUser.membership_number,
}


class UserService:
    """
    Typed operations over the users table and the per-user badge progress.

    Every public method validates its input first, performs one logical
    read or write, and returns a `User` model (never the password hash).
    Failures are raised as `BadgeFinderError` with a specific kind.
    """

    def __init__(self, db: Session, catalog: Optional[BadgeCatalog] = None):
        self.db = db
        self.catalog = catalog or BadgeCatalog(db)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def to_user(user: DBUser) -> User:
        earned, required = [], []
        for ub in user.badges:
            badge = ub.badge
            item = UserBadge(
                badge_id=badge.badge_id,
                badge_name=badge.badge_name,
                image_url=badge.image_url,
                categories=badge.categories,
                requirements=sorted(
                    (
                        UserRequirement(
                            requirement_id=ur.requirement.requirement_id,
                            requirement_string=ur.requirement.requirement_string,
                            completed=bool(ur.completed),
                        )
                        for ur in ub.requirements
                    ),
                    key=lambda r: r.requirement_id,
                ),
            )
            (earned if ub.kind == EARNED else required).append(item)

        return User(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            membership_number=user.membership_number,
            username=user.username,
            last_login=user.last_login,
            earned_badges=earned,
            required_badges=required,
        )

    def _get(self, user_id: str) -> DBUser:
        user = self.db.get(DBUser, user_id)
        if not user:
            raise BadgeFinderError(ErrorKind.USER_NOT_FOUND)
        return user

    @staticmethod
    def _held(user: DBUser, badge_id: int, kind: str = EARNED) -> Optional[DBUserBadge]:
        return next((ub for ub in user.badges if ub.badge_id == badge_id and ub.kind == kind), None)

    def _attach(self, user: DBUser, badge_id: int, kind: str) -> DBUserBadge:
        """Add a catalog badge to the user with one open entry per requirement."""
        requirements = (
            self.db.query(DBRequirement)
            .filter(DBRequirement.badge_id == badge_id)
            .order_by(DBRequirement.requirement_id)
            .all()
        )
        user_badge = DBUserBadge(
            badge_id=badge_id,
            kind=kind,
            requirements=[DBUserRequirement(requirement_pk=r.id, completed=False) for r in requirements],
        )
        user.badges.append(user_badge)
        return user_badge

    @staticmethod
    def _apply_changes(user: DBUser, changes: dict) -> dict:
        changed = {k: v for k, v in changes.items() if getattr(user, k) != v}
        for key, value in changed.items():
            setattr(user, key, value)
        return changed

    def _commit_profile(self, changed: dict) -> None:
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            if "username" in changed and "email" not in changed:
                raise BadgeFinderError(ErrorKind.DUPLICATE_USERNAME)
            raise BadgeFinderError(ErrorKind.DUPLICATE_EMAIL)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_by_query(self, **criteria) -> User:
        query = schemas.validate(schemas.FindByQuery, **criteria)
        filters = query.model_dump(exclude_none=True)
        if not filters:
            raise BadgeFinderError(ErrorKind.USER_NOT_FOUND)

        logger.info(f"Searching for user with query {sorted(filters)}")
        q = self.db.query(DBUser)
        for key, value in filters.items():
            q = q.filter(_QUERY_COLUMNS[key] == value)
        user = q.first()
        if not user:
            raise BadgeFinderError(ErrorKind.USER_NOT_FOUND)
        return self.to_user(user)

    def find_by_id(self, user_id: str) -> User:
        query = schemas.validate(schemas.FindById, user_id=user_id)
        logger.info(f"Searching for user with id {query.user_id}")
        return self.to_user(self._get(query.user_id))

    def find_by_email(self, email: str) -> User:
        schemas.validate(schemas.FindByEmail, email=email)
        logger.info(f"Searching for user with email {email}")
        return self.find_by_query(email=email)

    def find_by_username(self, username: str) -> User:
        schemas.validate(schemas.FindByUsername, username=username)
        return self.find_by_query(username=username)

    def exists(self, **criteria) -> bool:
        try:
            self.find_by_query(**criteria)
        except BadgeFinderError as e:
            if e.kind is ErrorKind.USER_NOT_FOUND:
                return False
            raise
        return True

    # ------------------------------------------------------------------
    # Generic writes
    # ------------------------------------------------------------------

    def create(self, first_name: str, last_name: str, email: str, membership_number: str) -> str:
        """Insert a profile-only user and return its id."""
        data = schemas.validate(
            schemas.CreateUser,
            first_name=first_name,
            last_name=last_name,
            email=email,
            membership_number=membership_number,
        )
        user = DBUser(**data.model_dump())
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(f"Duplicate email on create: {data.email}")
            raise BadgeFinderError(ErrorKind.DUPLICATE_EMAIL)
        return user.id

    def update(self, user_id: str, **changes) -> None:
        """Apply a partial profile update; raises NO_CHANGES when nothing differs."""
        data = schemas.validate(schemas.UpdateUser, user_id=user_id, **changes)
        user = self._get(data.user_id)
        changed = self._apply_changes(user, data.model_dump(exclude_none=True, exclude={"user_id"}))
        if not changed:
            raise BadgeFinderError(ErrorKind.NO_CHANGES)
        self._commit_profile(changed)

    def find_one_and_update(self, user_id: str, **changes) -> User:
        data = schemas.validate(schemas.UpdateUser, user_id=user_id, **changes)
        user = self._get(data.user_id)
        changed = self._apply_changes(user, data.model_dump(exclude_none=True, exclude={"user_id"}))
        if changed:
            self._commit_profile(changed)
            self.db.refresh(user)
        return self.to_user(user)

    def delete_by_id(self, user_id: str) -> None:
        query = schemas.validate(schemas.DeleteById, user_id=user_id)
        user = self._get(query.user_id)
        self.db.delete(user)
        self.db.commit()
        logger.info(f"Deleted user {query.user_id}")

    # ------------------------------------------------------------------
    # Signup / signin
    # ------------------------------------------------------------------

    def register_user(self, first_name: str, last_name: str, email: str, membership_number: str) -> User:
        data = schemas.validate(
            schemas.RegisterUser,
            first_name=first_name,
            last_name=last_name,
            email=email,
            membership_number=membership_number,
        )
        user_id = self.create(**data.model_dump())
        return self.find_by_id(user_id)

    def register_secondary_user(
        self,
        user_id: str,
        username: str,
        password: str,
        earned_badges: Optional[Iterable[int]] = None,
        required_badges: Optional[Iterable[int]] = None,
    ) -> User:
        """
        Second signup step: set credentials and the initial badge lists.
        Badge ids missing from the catalog are skipped.
        """
        data = schemas.validate(
            schemas.RegisterSecondaryUser,
            user_id=user_id,
            username=username,
            password=password,
            earned_badges=[] if earned_badges is None else earned_badges,
            required_badges=[] if required_badges is None else required_badges,
        )
        user = self._get(data.user_id)
        if user.username:
            raise BadgeFinderError(ErrorKind.ALREADY_REGISTERED)

        user.username = data.username
        user.password_hash = get_password_hash(data.password)
        for badge in self.catalog.get_badges(data.earned_badges):
            self._attach(user, badge.badge_id, EARNED)
        for badge in self.catalog.get_badges(data.required_badges):
            self._attach(user, badge.badge_id, REQUIRED)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise BadgeFinderError(ErrorKind.DUPLICATE_USERNAME)
        self.db.refresh(user)
        return self.to_user(user)

    def authenticate_user(self, username: str, password: str) -> User:
        data = schemas.validate(schemas.AuthenticateUser, username=username, password=password)
        user = self.db.query(DBUser).filter(DBUser.username == data.username).first()
        if not user:
            raise BadgeFinderError(ErrorKind.USER_NOT_FOUND)
        if not verify_password(data.password, user.password_hash):
            raise BadgeFinderError(ErrorKind.INVALID_CREDENTIALS)
        return self.to_user(user)

    def record_login(self, user_id: str) -> User:
        query = schemas.validate(schemas.FindById, user_id=user_id)
        user = self._get(query.user_id)
        user.last_login = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(user)
        return self.to_user(user)

    # ------------------------------------------------------------------
    # Badges & requirements
    # ------------------------------------------------------------------

    def add_badge(self, user_id: str, badge_id: int) -> User:
        """Add a catalog badge to the user's earned badges (no-op if already held)."""
        data = schemas.validate(schemas.AddBadge, user_id=user_id, badge_id=badge_id)
        if self.catalog.get_badge(data.badge_id) is None:
            raise BadgeFinderError(ErrorKind.BADGE_NOT_FOUND)
        user = self._get(data.user_id)

        if self._held(user, data.badge_id) is None:
            self._attach(user, data.badge_id, EARNED)
            self.db.commit()
            self.db.refresh(user)
            logger.info(f"Badge {data.badge_id} added to user {data.user_id}")
        return self.to_user(user)

    def remove_badge(self, user_id: str, badge_id: int) -> User:
        """Drop a badge from the user's earned badges; 400 unless the user holds it."""
        data = schemas.validate(schemas.RemoveBadge, user_id=user_id, badge_id=badge_id)
        user = self._get(data.user_id)

        # held badges reference the catalog by FK, so no separate catalog lookup
        user_badge = self._held(user, data.badge_id)
        if user_badge is None:
            raise BadgeFinderError(ErrorKind.DOES_NOT_HAVE_BADGE)
        user.badges.remove(user_badge)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Badge {data.badge_id} removed from user {data.user_id}")
        return self.to_user(user)

    def update_badge_requirement(self, user_id: str, badge_id: int, requirement_id: int) -> User:
        """Add a catalog requirement to the requirement list of a badge the user holds."""
        data = schemas.validate(
            schemas.UpdateBadgeRequirement,
            user_id=user_id,
            badge_id=badge_id,
            requirement_id=requirement_id,
        )
        requirement = self.catalog.get_requirement_row(data.badge_id, data.requirement_id)
        if requirement is None:
            raise BadgeFinderError(ErrorKind.REQUIREMENT_NOT_FOUND)
        user = self._get(data.user_id)
        user_badge = self._held(user, data.badge_id)
        if user_badge is None:
            raise BadgeFinderError(ErrorKind.BADGE_NOT_FOUND)

        if not any(ur.requirement_pk == requirement.id for ur in user_badge.requirements):
            user_badge.requirements.append(DBUserRequirement(requirement_pk=requirement.id, completed=False))
            self.db.commit()
            self.db.refresh(user)
        return self.to_user(user)

    def set_requirement_completion(
        self,
        user_id: str,
        badge_id: int,
        requirement_id: int,
        completed: bool,
    ) -> User:
        """
        Set the completion flag of one requirement inside one of the user's
        earned badges. Checks run user -> badge -> requirement; the write is a
        single UPDATE of that flag, so the last write wins.
        """
        data = schemas.validate(
            schemas.SetRequirementCompletion,
            user_id=user_id,
            badge_id=badge_id,
            requirement_id=requirement_id,
            completed=completed,
        )
        user = self._get(data.user_id)
        user_badge = self._held(user, data.badge_id)
        if user_badge is None:
            raise BadgeFinderError(ErrorKind.BADGE_NOT_FOUND, f"Badge with id {data.badge_id} not found")
        if not user_badge.requirements:
            raise BadgeFinderError(ErrorKind.BADGE_HAS_NO_REQUIREMENTS)

        target = next(
            (ur for ur in user_badge.requirements if ur.requirement.requirement_id == data.requirement_id),
            None,
        )
        if target is None:
            raise BadgeFinderError(
                ErrorKind.REQUIREMENT_NOT_FOUND,
                f"Requirement with id {data.requirement_id} not found",
            )

        target.completed = data.completed
        self.db.commit()
        self.db.refresh(user)
        logger.info(
            f"Requirement {data.requirement_id} of badge {data.badge_id} "
            f"set to completed={data.completed} for user {data.user_id}"
        )
        return self.to_user(user)
