# app/api/requirements.py
from fastapi import APIRouter, Depends, Query
from typing import List

from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.rate_limit import rate_limit
from app.db.catalog import BadgeCatalog
from app.models.badge import Requirement

router = APIRouter(prefix="/requirements", tags=["Requirements"], dependencies=[Depends(rate_limit)])


@router.get("", response_model=List[Requirement])
def get_requirements(badge_id: int = Query(...), db: Session = Depends(get_db)):
    """Requirements of one badge; an unknown badge yields an empty list."""
    return BadgeCatalog(db).requirements_for_badge(badge_id)
