# app/api/users.py
from typing import List
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import BadgeFinderError, ErrorKind
from app.core.rate_limit import rate_limit
from app.db.db_access import UserService
from app.models.auth_models import AddBadgeRequest, CompletionUpdateRequest
from app.models.user import BadgeProgress, User
from app.services.achievements import badge_progress

logger = logging.getLogger(__name__)
router = APIRouter(
    prefix="/user",
    tags=["Users"],
    dependencies=[Depends(rate_limit), Depends(get_current_user)],
)


@router.get("/{user_id}", response_model=User)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return UserService(db).find_by_id(user_id)


@router.get("/{user_id}/progress", response_model=List[BadgeProgress])
def get_user_progress(user_id: str, db: Session = Depends(get_db)):
    """Per-badge requirement counts and the border colour shown in the badge grid."""
    return badge_progress(UserService(db).find_by_id(user_id))


@router.post("/{user_id}/badge", response_model=User, status_code=status.HTTP_201_CREATED)
def add_badge(user_id: str, data: AddBadgeRequest, db: Session = Depends(get_db)):
    if data.badge_id is None:
        raise BadgeFinderError(ErrorKind.INVALID_BADGE_ID)
    return UserService(db).add_badge(user_id, data.badge_id)


@router.delete("/{user_id}/badge/{badge_id}", response_model=User)
def remove_badge(user_id: str, badge_id: int, db: Session = Depends(get_db)):
    return UserService(db).remove_badge(user_id, badge_id)


@router.patch("/{user_id}/badge/{badge_id}/requirement/{requirement_id}", response_model=User)
def update_requirement_completion(
    user_id: str,
    badge_id: int,
    requirement_id: int,
    data: CompletionUpdateRequest,
    db: Session = Depends(get_db),
):
    """Mark one requirement of an earned badge as completed or not."""
    if data.completed is None:
        raise BadgeFinderError(ErrorKind.INVALID_COMPLETION_STATUS)
    return UserService(db).set_requirement_completion(user_id, badge_id, requirement_id, data.completed)


@router.put("/{user_id}/badge/{badge_id}/requirement/{requirement_id}", response_model=User)
def add_badge_requirement(
    user_id: str,
    badge_id: int,
    requirement_id: int,
    db: Session = Depends(get_db),
):
    return UserService(db).update_badge_requirement(user_id, badge_id, requirement_id)
