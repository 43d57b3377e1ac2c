# app/api/badges.py
from fastapi import APIRouter, Depends, Query
from typing import List
import logging

from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.exceptions import BadgeFinderError, ErrorKind
from app.core.rate_limit import rate_limit
from app.db.catalog import BadgeCatalog
from app.models.badge import Badge

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/badges", tags=["Badges"], dependencies=[Depends(rate_limit)])


@router.get("", response_model=List[Badge])
def get_all_badges(
    categories: List[str] = Query(default=[]),
    db: Session = Depends(get_db),
):
    """Get all available badges, optionally narrowed to those in every selected category."""
    return BadgeCatalog(db).list_badges(categories)


@router.get("/search", response_model=List[Badge])
def search_badges(badge: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    badges = BadgeCatalog(db).search_by_name(badge)
    if not badges:
        raise BadgeFinderError(ErrorKind.BADGE_NOT_FOUND)
    return badges


@router.get("/category", response_model=List[Badge])
def badges_by_category(categories: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    badges = BadgeCatalog(db).search_by_category(categories)
    if not badges:
        raise BadgeFinderError(ErrorKind.BADGE_NOT_FOUND, "No badges found in this category")
    return badges


@router.get("/requirements", response_model=List[Badge])
def badges_by_requirement(query: str = Query(..., min_length=1), db: Session = Depends(get_db)):
    return BadgeCatalog(db).search_by_requirement(query)
