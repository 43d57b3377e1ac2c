# models/validation.py
"""
Per-operation input schemas for the data-access layer.

Each schema names the error kind raised when a given field fails, so a bad
id surfaces as "user not found" and a bad email as "invalid email" rather
than as a generic validation failure. Validation always runs before the
database is touched.
"""
import uuid
from typing import Annotated, ClassVar, Dict, List, Optional, Type, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StrictBool,
    StrictInt,
    StrictStr,
    ValidationError,
)

from app.core.exceptions import BadgeFinderError, ErrorKind


def _canonical_uuid(value: str) -> str:
    return str(uuid.UUID(value))


UserId = Annotated[StrictStr, AfterValidator(_canonical_uuid)]
CatalogId = Annotated[StrictInt, Field(gt=0)]
NonEmptyStr = Annotated[StrictStr, Field(min_length=1)]
Password = Annotated[StrictStr, Field(min_length=8)]


class OperationSchema(BaseModel):
    model_config = ConfigDict(extra="forbid")

    field_errors: ClassVar[Dict[str, ErrorKind]] = {}
    default_error: ClassVar[ErrorKind] = ErrorKind.USER_NOT_FOUND
    extra_error: ClassVar[ErrorKind] = ErrorKind.NO_CHANGES


S = TypeVar("S", bound=OperationSchema)


def validate(schema: Type[S], **data) -> S:
    """Validate `data` against `schema` or raise the first failing field's error."""
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        if first.get("type") == "extra_forbidden":
            raise BadgeFinderError(schema.extra_error)
        loc = first.get("loc") or ()
        field = loc[0] if loc else None
        raise BadgeFinderError(schema.field_errors.get(field, schema.default_error))


# ------------------------------------------------------------------
# Lookups
# ------------------------------------------------------------------

class FindById(OperationSchema):
    user_id: UserId
    field_errors = {"user_id": ErrorKind.USER_NOT_FOUND}


class FindByEmail(OperationSchema):
    email: EmailStr
    field_errors = {"email": ErrorKind.INVALID_EMAIL}
    default_error = ErrorKind.INVALID_EMAIL


class FindByUsername(OperationSchema):
    username: NonEmptyStr
    field_errors = {"username": ErrorKind.INVALID_USERNAME}
    default_error = ErrorKind.INVALID_USERNAME


class FindByQuery(OperationSchema):
    """Any combination of the indexed lookup fields."""
    user_id: Optional[UserId] = None
    email: Optional[EmailStr] = None
    username: Optional[NonEmptyStr] = None
    membership_number: Optional[NonEmptyStr] = None

    field_errors = {
        "user_id": ErrorKind.USER_NOT_FOUND,
        "email": ErrorKind.INVALID_EMAIL,
        "username": ErrorKind.INVALID_USERNAME,
        "membership_number": ErrorKind.INVALID_MEMBERSHIP_NUMBER,
    }
    extra_error = ErrorKind.USER_NOT_FOUND


# ------------------------------------------------------------------
# Writes
# ------------------------------------------------------------------

_PROFILE_ERRORS = {
    "first_name": ErrorKind.INVALID_FIRST_NAME,
    "last_name": ErrorKind.INVALID_LAST_NAME,
    "email": ErrorKind.INVALID_EMAIL,
    "membership_number": ErrorKind.INVALID_MEMBERSHIP_NUMBER,
}


class CreateUser(OperationSchema):
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    email: EmailStr
    membership_number: NonEmptyStr

    field_errors = _PROFILE_ERRORS


class RegisterUser(CreateUser):
    pass


class UpdateUser(OperationSchema):
    user_id: UserId
    first_name: Optional[NonEmptyStr] = None
    last_name: Optional[NonEmptyStr] = None
    email: Optional[EmailStr] = None
    membership_number: Optional[NonEmptyStr] = None
    username: Optional[NonEmptyStr] = None

    field_errors = {
        "user_id": ErrorKind.USER_NOT_FOUND,
        "username": ErrorKind.INVALID_USERNAME,
        **_PROFILE_ERRORS,
    }


class DeleteById(FindById):
    pass


class RegisterSecondaryUser(OperationSchema):
    user_id: UserId
    username: NonEmptyStr
    password: Password
    earned_badges: List[CatalogId] = []
    required_badges: List[CatalogId] = []

    field_errors = {
        "user_id": ErrorKind.USER_NOT_FOUND,
        "username": ErrorKind.INVALID_USERNAME,
        "password": ErrorKind.INVALID_PASSWORD,
        "earned_badges": ErrorKind.INVALID_EARNED_BADGES,
        "required_badges": ErrorKind.INVALID_REQUIRED_BADGES,
    }


class AuthenticateUser(OperationSchema):
    username: NonEmptyStr
    password: NonEmptyStr

    field_errors = {
        "username": ErrorKind.INVALID_USERNAME,
        "password": ErrorKind.INVALID_PASSWORD,
    }


class BadgeRef(OperationSchema):
    user_id: UserId
    badge_id: CatalogId

    field_errors = {
        "user_id": ErrorKind.USER_NOT_FOUND,
        "badge_id": ErrorKind.BADGE_NOT_FOUND,
    }


class AddBadge(BadgeRef):
    pass


class RemoveBadge(BadgeRef):
    field_errors = {
        "user_id": ErrorKind.USER_NOT_FOUND,
        "badge_id": ErrorKind.DOES_NOT_HAVE_BADGE,
    }


class RequirementRef(OperationSchema):
    user_id: UserId
    badge_id: CatalogId
    requirement_id: CatalogId

    field_errors = {
        "user_id": ErrorKind.USER_NOT_FOUND,
        "badge_id": ErrorKind.BADGE_NOT_FOUND,
        "requirement_id": ErrorKind.REQUIREMENT_NOT_FOUND,
    }


class UpdateBadgeRequirement(RequirementRef):
    pass


class SetRequirementCompletion(RequirementRef):
    completed: StrictBool

    field_errors = {
        **RequirementRef.field_errors,
        "completed": ErrorKind.INVALID_COMPLETION_STATUS,
    }
