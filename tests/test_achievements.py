"""
Unit tests for badge filtering and progress helpers.
"""
import pytest

from app.models.badge import Badge
from app.models.user import User, UserBadge, UserRequirement
from app.services.achievements import (
    COMPLETE,
    PARTIAL,
    UNTOUCHED,
    achievement_state,
    badge_progress,
    border_color,
    filter_badges_by_categories,
    merge_completion,
    progress_status,
)

BADGES = [
    Badge(badge_id=1, badge_name="Camper", categories="Outdoors, Activity"),
    Badge(badge_id=2, badge_name="Hikes Away", categories="Outdoors, Staged"),
    Badge(badge_id=3, badge_name="Chef", categories="Skills, Activity"),
    Badge(badge_id=4, badge_name="Mystery", categories=None),
]


def ids(badges):
    return [b.badge_id for b in badges]


class TestCategoryFilter:
    def test_no_selection_returns_everything(self):
        assert ids(filter_badges_by_categories(BADGES, [])) == [1, 2, 3, 4]

    def test_single_category(self):
        assert ids(filter_badges_by_categories(BADGES, ["Activity"])) == [1, 3]

    def test_every_selected_category_must_match(self):
        assert ids(filter_badges_by_categories(BADGES, ["outdoors", "activity"])) == [1]

    def test_badge_without_categories_never_matches(self):
        assert 4 not in ids(filter_badges_by_categories(BADGES, ["o"]))

    def test_blank_selections_are_ignored(self):
        assert ids(filter_badges_by_categories(BADGES, ["", "  "])) == [1, 2, 3, 4]


class TestProgress:
    @pytest.mark.parametrize("completed, total, status, colour", [
        (3, 3, COMPLETE, "navy"),
        (1, 3, PARTIAL, "#ffe627"),
        (0, 3, UNTOUCHED, "white"),
        (0, 0, UNTOUCHED, "white"),
    ])
    def test_status_and_border(self, completed, total, status, colour):
        assert progress_status(completed, total) == status
        assert border_color(completed, total) == colour


def make_user(*badges):
    return User(
        id="00000000-0000-0000-0000-000000000001",
        first_name="Akela",
        last_name="Wolf",
        email="akela@scouts.org.uk",
        membership_number="1",
        earned_badges=list(badges),
    )


def held(badge_id, *flags):
    return UserBadge(
        badge_id=badge_id,
        badge_name=f"Badge {badge_id}",
        requirements=[
            UserRequirement(requirement_id=i + 1, requirement_string=f"Step {i + 1}", completed=flag)
            for i, flag in enumerate(flags)
        ],
    )


class TestAchievementState:
    def test_state_holds_completed_ids(self):
        user = make_user(held(1, True, False, True), held(2))
        assert achievement_state(user) == {1: frozenset({1, 3}), 2: frozenset()}

    def test_merge_does_not_mutate_the_input(self):
        state = {1: frozenset({1})}
        merged = merge_completion(state, 1, 2, True)
        assert merged == {1: frozenset({1, 2})}
        assert state == {1: frozenset({1})}

    def test_merge_clears_a_flag(self):
        assert merge_completion({1: frozenset({1, 2})}, 1, 2, False) == {1: frozenset({1})}

    def test_merge_into_unknown_badge(self):
        assert merge_completion({}, 5, 1, True) == {5: frozenset({1})}

    def test_badge_progress(self):
        user = make_user(held(1, True, True), held(2, True, False), held(3))
        progress = {p.badge_id: (p.completed, p.total, p.status, p.border_color) for p in badge_progress(user)}
        assert progress == {
            1: (2, 2, COMPLETE, "navy"),
            2: (1, 2, PARTIAL, "#ffe627"),
            3: (0, 0, UNTOUCHED, "white"),
        }
