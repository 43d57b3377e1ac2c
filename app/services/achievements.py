# services/achievements.py
"""
Badge progress helpers shared by the catalog and user routes.

A user's achievement state is the set of completed requirement ids per
badge. The border colour is how the badge grid shows progress.
"""
from typing import Dict, FrozenSet, Iterable, List, Sequence, TypeVar

from app.models.user import BadgeProgress, User

COMPLETE = "complete"
PARTIAL = "partial"
UNTOUCHED = "untouched"

BORDER_COLORS = {
    COMPLETE: "navy",
    PARTIAL: "#ffe627",
    UNTOUCHED: "white",
}

AchievementState = Dict[int, FrozenSet[int]]

B = TypeVar("B")


def filter_badges_by_categories(badges: Sequence[B], selected: Iterable[str]) -> List[B]:
    """
    Keep badges whose category text contains every selected category
    (case-insensitive substring). No selection means no filtering.
    """
    wanted = [c.lower() for c in selected if c and c.strip()]
    if not wanted:
        return list(badges)

    result = []
    for badge in badges:
        text = (getattr(badge, "categories", None) or "").lower()
        if text and all(c in text for c in wanted):
            result.append(badge)
    return result


def progress_status(completed: int, total: int) -> str:
    if total <= 0 or completed <= 0:
        return UNTOUCHED
    if completed >= total:
        return COMPLETE
    return PARTIAL


def border_color(completed: int, total: int) -> str:
    return BORDER_COLORS[progress_status(completed, total)]


def achievement_state(user: User) -> AchievementState:
    return {
        badge.badge_id: frozenset(r.requirement_id for r in badge.requirements if r.completed)
        for badge in user.earned_badges
    }


def merge_completion(
    state: AchievementState,
    badge_id: int,
    requirement_id: int,
    completed: bool,
) -> AchievementState:
    """Return a copy of `state` with one requirement flag applied."""
    merged = dict(state)
    current = set(merged.get(badge_id, frozenset()))
    if completed:
        current.add(requirement_id)
    else:
        current.discard(requirement_id)
    merged[badge_id] = frozenset(current)
    return merged


def badge_progress(user: User) -> List[BadgeProgress]:
    state = achievement_state(user)
    progress = []
    for badge in user.earned_badges:
        total = len(badge.requirements)
        done = len(state.get(badge.badge_id, ()))
        status = progress_status(done, total)
        progress.append(BadgeProgress(
            badge_id=badge.badge_id,
            badge_name=badge.badge_name,
            completed=done,
            total=total,
            status=status,
            border_color=BORDER_COLORS[status],
        ))
    return progress
