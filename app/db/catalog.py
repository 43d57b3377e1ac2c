# app/db/catalog.py

import logging
import re
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.db.models import Badge as DBBadge, Requirement as DBRequirement
from app.models.badge import Badge, Requirement
from app.services.achievements import filter_badges_by_categories

logger = logging.getLogger(__name__)


def _contains(column, text: str):
    """Case-insensitive substring match that treats % and _ literally."""
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return func.lower(column).like(f"%{escaped.lower()}%", escape="\\")


class BadgeCatalog:
    """Read-only queries over the Badges and Requirements tables."""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Badges
    # ------------------------------------------------------------------

    def list_badges(self, categories: Optional[Iterable[str]] = None) -> List[Badge]:
        rows = self.db.query(DBBadge).order_by(DBBadge.badge_id).all()
        badges = [Badge.model_validate(r) for r in rows]
        logger.info(f"{len(badges)} badges found.")
        return filter_badges_by_categories(badges, categories or [])

    def get_badge(self, badge_id: int) -> Optional[Badge]:
        row = self.db.get(DBBadge, badge_id)
        return Badge.model_validate(row) if row else None

    def get_badges(self, badge_ids: Iterable[int]) -> List[Badge]:
        ids = list(dict.fromkeys(badge_ids))
        if not ids:
            return []
        rows = (
            self.db.query(DBBadge)
            .filter(DBBadge.badge_id.in_(ids))
            .order_by(DBBadge.badge_id)
            .all()
        )
        return [Badge.model_validate(r) for r in rows]

    def search_by_name(self, name: str) -> List[Badge]:
        logger.info(f"Searching for badge with name: {name!r}")
        rows = (
            self.db.query(DBBadge)
            .filter(_contains(DBBadge.badge_name, name))
            .order_by(DBBadge.badge_id)
            .all()
        )
        return [Badge.model_validate(r) for r in rows]

    def search_by_category(self, category: str) -> List[Badge]:
        """Badges whose category text contains `category` as a whole word."""
        logger.info(f"Searching for badges in category: {category!r}")
        word = re.compile(rf"\b{re.escape(category)}\b", re.IGNORECASE)
        rows = (
            self.db.query(DBBadge)
            .filter(DBBadge.categories.isnot(None), _contains(DBBadge.categories, category))
            .order_by(DBBadge.badge_id)
            .all()
        )
        return [Badge.model_validate(r) for r in rows if word.search(r.categories)]

    def search_by_requirement(self, text: str) -> List[Badge]:
        """Badges owning at least one requirement whose text contains `text`."""
        logger.info(f"Searching for badges with requirement: {text!r}")
        badge_ids = (
            self.db.query(DBRequirement.badge_id)
            .filter(_contains(DBRequirement.requirement_string, text))
            .distinct()
        )
        rows = (
            self.db.query(DBBadge)
            .filter(DBBadge.badge_id.in_(badge_ids))
            .order_by(DBBadge.badge_id)
            .all()
        )
        logger.info(f"{len(rows)} matching badges found")
        return [Badge.model_validate(r) for r in rows]

    # ------------------------------------------------------------------
    # Requirements
    # ------------------------------------------------------------------

    def requirements_for_badge(self, badge_id: int) -> List[Requirement]:
        rows = (
            self.db.query(DBRequirement)
            .filter(DBRequirement.badge_id == badge_id)
            .order_by(DBRequirement.requirement_id)
            .all()
        )
        logger.info(f"{len(rows)} requirements found for badge ID: {badge_id}")
        return [Requirement.model_validate(r) for r in rows]

    def get_requirement_row(self, badge_id: int, requirement_id: int) -> Optional[DBRequirement]:
        return (
            self.db.query(DBRequirement)
            .filter(
                DBRequirement.badge_id == badge_id,
                DBRequirement.requirement_id == requirement_id,
            )
            .first()
        )
