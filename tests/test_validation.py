"""
Unit tests for the per-operation input schemas.
"""
import uuid

import pytest

from app.core.exceptions import BadgeFinderError, ErrorKind
from app.models import validation as schemas


def kind_of(schema, **data) -> ErrorKind:
    with pytest.raises(BadgeFinderError) as exc_info:
        schemas.validate(schema, **data)
    return exc_info.value.kind


VALID_PROFILE = {
    "first_name": "Olave",
    "last_name": "Soames",
    "email": "olave@scouts.org.uk",
    "membership_number": "1912",
}


class TestUserIds:
    def test_malformed_id_reads_as_user_not_found(self):
        assert kind_of(schemas.FindById, user_id="not-a-uuid") is ErrorKind.USER_NOT_FOUND

    def test_non_string_id_is_rejected(self):
        assert kind_of(schemas.FindById, user_id=42) is ErrorKind.USER_NOT_FOUND

    def test_id_is_canonicalized(self):
        raw = uuid.uuid4()
        query = schemas.validate(schemas.FindById, user_id=str(raw).upper())
        assert query.user_id == str(raw)


class TestProfileFields:
    def test_valid_profile_passes(self):
        data = schemas.validate(schemas.CreateUser, **VALID_PROFILE)
        assert data.first_name == "Olave"

    @pytest.mark.parametrize("field, kind", [
        ("first_name", ErrorKind.INVALID_FIRST_NAME),
        ("last_name", ErrorKind.INVALID_LAST_NAME),
        ("membership_number", ErrorKind.INVALID_MEMBERSHIP_NUMBER),
    ])
    def test_empty_field_names_its_own_error(self, field, kind):
        assert kind_of(schemas.CreateUser, **{**VALID_PROFILE, field: ""}) is kind

    def test_bad_email(self):
        assert kind_of(schemas.CreateUser, **{**VALID_PROFILE, "email": "nope"}) is ErrorKind.INVALID_EMAIL

    def test_update_rejects_unknown_fields(self):
        assert kind_of(
            schemas.UpdateUser, user_id=str(uuid.uuid4()), nickname="Bear"
        ) is ErrorKind.NO_CHANGES

    def test_query_rejects_unknown_fields_as_not_found(self):
        assert kind_of(schemas.FindByQuery, nickname="Bear") is ErrorKind.USER_NOT_FOUND


class TestSecondarySignup:
    def base(self, **overrides):
        data = {
            "user_id": str(uuid.uuid4()),
            "username": "akela",
            "password": "campfire123",
            "earned_badges": [1],
            "required_badges": [],
        }
        data.update(overrides)
        return data

    def test_short_password(self):
        assert kind_of(schemas.RegisterSecondaryUser, **self.base(password="short")) is ErrorKind.INVALID_PASSWORD

    def test_earned_badges_must_be_ids(self):
        assert kind_of(
            schemas.RegisterSecondaryUser, **self.base(earned_badges=["camper"])
        ) is ErrorKind.INVALID_EARNED_BADGES

    def test_required_badges_must_be_a_list(self):
        assert kind_of(
            schemas.RegisterSecondaryUser, **self.base(required_badges=7)
        ) is ErrorKind.INVALID_REQUIRED_BADGES

    def test_empty_username(self):
        assert kind_of(schemas.RegisterSecondaryUser, **self.base(username="")) is ErrorKind.INVALID_USERNAME


class TestRequirementCompletion:
    def base(self, **overrides):
        data = {"user_id": str(uuid.uuid4()), "badge_id": 1, "requirement_id": 2, "completed": True}
        data.update(overrides)
        return data

    def test_completed_must_be_a_real_boolean(self):
        assert kind_of(
            schemas.SetRequirementCompletion, **self.base(completed="true")
        ) is ErrorKind.INVALID_COMPLETION_STATUS

    def test_badge_id_must_be_positive(self):
        assert kind_of(schemas.SetRequirementCompletion, **self.base(badge_id=0)) is ErrorKind.BADGE_NOT_FOUND

    def test_requirement_id_must_be_an_integer(self):
        assert kind_of(
            schemas.SetRequirementCompletion, **self.base(requirement_id="2")
        ) is ErrorKind.REQUIREMENT_NOT_FOUND


class TestBadgeRefs:
    def test_add_with_bad_badge_id_reads_as_not_found(self):
        assert kind_of(schemas.AddBadge, user_id=str(uuid.uuid4()), badge_id=0) is ErrorKind.BADGE_NOT_FOUND

    def test_remove_with_bad_badge_id_reads_as_not_held(self):
        assert kind_of(schemas.RemoveBadge, user_id=str(uuid.uuid4()), badge_id=0) is ErrorKind.DOES_NOT_HAVE_BADGE
