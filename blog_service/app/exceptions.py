from __future__ import annotations

from http import HTTPStatus


class BlogServiceError(Exception):
    """Base exception for all blog-service errors.

    Each subclass carries the HTTP status it is rendered with.
    """

    status: HTTPStatus = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(BlogServiceError):
    """Missing session token."""

    status = HTTPStatus.UNAUTHORIZED
    default_message = "unauthorized"


class InvalidToken(Unauthenticated):
    """Session token with a bad signature, expired, or missing claims."""

    default_message = "invalid token"


class Forbidden(BlogServiceError):
    """Authenticated, but not the author of the post."""

    status = HTTPStatus.FORBIDDEN
    default_message = "you are not the author"


class NotFound(BlogServiceError):
    status = HTTPStatus.NOT_FOUND
    default_message = "not found"


class ValidationFailure(BlogServiceError):
    """Bad input to register/login/create/update."""

    status = HTTPStatus.BAD_REQUEST
    default_message = "invalid input"


class UpstreamFailure(BlogServiceError):
    """Storage or object-storage (Cloudinary) failures."""

    status = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "upstream service failed"
