# app/core/exceptions.py

import enum
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    """Every user-facing failure the API can report."""

    USER_NOT_FOUND = "user_not_found"
    BADGE_NOT_FOUND = "badge_not_found"
    REQUIREMENT_NOT_FOUND = "requirement_not_found"

    INVALID_FIRST_NAME = "invalid_first_name"
    INVALID_LAST_NAME = "invalid_last_name"
    INVALID_EMAIL = "invalid_email"
    INVALID_MEMBERSHIP_NUMBER = "invalid_membership_number"
    INVALID_USERNAME = "invalid_username"
    INVALID_PASSWORD = "invalid_password"
    INVALID_EARNED_BADGES = "invalid_earned_badges"
    INVALID_REQUIRED_BADGES = "invalid_required_badges"
    INVALID_BADGE_ID = "invalid_badge_id"
    INVALID_COMPLETION_STATUS = "invalid_completion_status"
    DOES_NOT_HAVE_BADGE = "does_not_have_badge"
    BADGE_HAS_NO_REQUIREMENTS = "badge_has_no_requirements"
    NO_CHANGES = "no_changes"
    INVALID_CREDENTIALS = "invalid_credentials"

    DUPLICATE_EMAIL = "duplicate_email"
    DUPLICATE_USERNAME = "duplicate_username"
    ALREADY_REGISTERED = "already_registered"

    TOKEN_MISSING = "token_missing"
    TOKEN_INVALID = "token_invalid"
    TOKEN_EXPIRED = "token_expired"
    UNAUTHENTICATED = "unauthenticated"

    RATE_LIMITED = "rate_limited"


STATUS_BY_KIND = {
    ErrorKind.USER_NOT_FOUND:            status.HTTP_404_NOT_FOUND,
    ErrorKind.BADGE_NOT_FOUND:           status.HTTP_404_NOT_FOUND,
    ErrorKind.REQUIREMENT_NOT_FOUND:     status.HTTP_404_NOT_FOUND,
    ErrorKind.INVALID_FIRST_NAME:        status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_LAST_NAME:         status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_EMAIL:             status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_MEMBERSHIP_NUMBER: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_USERNAME:          status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_PASSWORD:          status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_EARNED_BADGES:     status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_REQUIRED_BADGES:   status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_BADGE_ID:          status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_COMPLETION_STATUS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.DOES_NOT_HAVE_BADGE:       status.HTTP_400_BAD_REQUEST,
    ErrorKind.BADGE_HAS_NO_REQUIREMENTS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NO_CHANGES:                status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CREDENTIALS:       status.HTTP_400_BAD_REQUEST,
    ErrorKind.DUPLICATE_EMAIL:           status.HTTP_409_CONFLICT,
    ErrorKind.DUPLICATE_USERNAME:        status.HTTP_409_CONFLICT,
    ErrorKind.ALREADY_REGISTERED:        status.HTTP_409_CONFLICT,
    ErrorKind.TOKEN_MISSING:             status.HTTP_401_UNAUTHORIZED,
    ErrorKind.TOKEN_INVALID:             status.HTTP_401_UNAUTHORIZED,
    ErrorKind.TOKEN_EXPIRED:             status.HTTP_401_UNAUTHORIZED,
    ErrorKind.UNAUTHENTICATED:           status.HTTP_401_UNAUTHORIZED,
    ErrorKind.RATE_LIMITED:              status.HTTP_429_TOO_MANY_REQUESTS,
}

DEFAULT_MESSAGES = {
    ErrorKind.USER_NOT_FOUND:            "User not found",
    ErrorKind.BADGE_NOT_FOUND:           "Badge not found",
    ErrorKind.REQUIREMENT_NOT_FOUND:     "Requirement not found",
    ErrorKind.INVALID_FIRST_NAME:        "firstName must be a non-empty string",
    ErrorKind.INVALID_LAST_NAME:         "lastName must be a non-empty string",
    ErrorKind.INVALID_EMAIL:             "email must be a valid email address",
    ErrorKind.INVALID_MEMBERSHIP_NUMBER: "membershipNumber must be a non-empty string",
    ErrorKind.INVALID_USERNAME:          "username must be a non-empty string",
    ErrorKind.INVALID_PASSWORD:          "password must be a string of at least 8 characters",
    ErrorKind.INVALID_EARNED_BADGES:     "earned_badges must be a list of badge ids",
    ErrorKind.INVALID_REQUIRED_BADGES:   "required_badges must be a list of badge ids",
    ErrorKind.INVALID_BADGE_ID:          "badgeId is required",
    ErrorKind.INVALID_COMPLETION_STATUS: "Completed is required",
    ErrorKind.DOES_NOT_HAVE_BADGE:       "User does not have the badge",
    ErrorKind.BADGE_HAS_NO_REQUIREMENTS: "Badge does not have any requirements",
    ErrorKind.NO_CHANGES:                "No changes made to the user",
    ErrorKind.INVALID_CREDENTIALS:       "Invalid username or password",
    ErrorKind.DUPLICATE_EMAIL:           "User with this email already exists",
    ErrorKind.DUPLICATE_USERNAME:        "username already exists",
    ErrorKind.ALREADY_REGISTERED:        "User already completed the signup process",
    ErrorKind.TOKEN_MISSING:             "Token is missing",
    ErrorKind.TOKEN_INVALID:             "Token is invalid",
    ErrorKind.TOKEN_EXPIRED:             "Token is expired",
    ErrorKind.UNAUTHENTICATED:           "Unauthorized",
    ErrorKind.RATE_LIMITED:              "Too many requests, please try again later.",
}


class BadgeFinderError(Exception):
    """A failure with a known kind; the route layer maps the kind to a status."""

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or DEFAULT_MESSAGES[kind]
        super().__init__(self.message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"BadgeFinderError({self.kind.name}, {self.message!r})"


def register_exception_handlers(app: FastAPI, production: bool) -> None:
    """Attach the handlers that shape every failure into a {message} body."""

    @app.exception_handler(BadgeFinderError)
    async def badgefinder_error_handler(request: Request, exc: BadgeFinderError):
        logger.info(f"{request.method} {request.url.path} -> {exc.kind.name}: {exc.message}")
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.message},
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
                "msg": err.get("msg"),
            }
            for err in exc.errors()
        ]
        logger.info(f"Validation error for {request.url.path}: {errors!r}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unexpected error on {request.method} {request.url.path}: {exc}", exc_info=True)
        message = "Something broke!" if production else str(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"message": message},
        )
