"""Centralized exception hierarchy for the application.

All custom exceptions inherit from AppException, which provides:
- Consistent error response format
- HTTP status codes
- Machine-readable error codes
- Optional details dict for additional context

The exception handler in main.py converts these to JSON responses.
"""

from typing import Any


class AppException(Exception):
    """Base exception for all application errors.

    - message: Human-readable error description
    - error_code: Machine-readable code (e.g., "NOT_AUTHORISED")
    - status_code: HTTP status code
    - details: Optional dict with additional context
    """

    def __init__(
        self,
        message: str,
        error_code: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dict for JSON serialization."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class AuthorizationError(AppException):
    """User is authenticated but not authorised for this action.

    Chat clients receive this as 401.
    """

    def __init__(self, message: str = "You are not authorised"):
        super().__init__(message, "NOT_AUTHORISED", 401)


class ResourceNotFoundError(AppException):
    """Requested resource does not exist."""

    def __init__(
        self,
        resource: str,
        identifier: str | None = None,
        message: str | None = None,
    ):
        msg = message or f"{resource} does not exist"
        super().__init__(
            msg,
            f"{resource.upper().replace(' ', '_')}_NOT_FOUND",
            404,
            {"resource": resource, "id": identifier}
            if identifier
            else {"resource": resource},
        )


class ResourceExistsError(AppException):
    """Resource already exists (duplicate key, unique constraint violation)."""

    def __init__(self, resource: str, field: str | None = None):
        msg = f"{resource} already exists"
        if field:
            msg = f"{resource} with this {field} already exists"
        super().__init__(
            msg,
            f"{resource.upper().replace(' ', '_')}_EXISTS",
            409,
            {"resource": resource, "field": field} if field else {"resource": resource},
        )


class BadRequestError(AppException):
    """The request is well-formed but cannot be processed as asked."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(
            message,
            "BAD_REQUEST",
            400,
            {"field": field} if field else {},
        )


class DeleteWindowExpiredError(AppException):
    """Sender tried to delete a message after the allowed window."""

    def __init__(self, window_minutes: int):
        super().__init__(
            f"{window_minutes} mins has passed you cannot delete this message",
            "DELETE_WINDOW_EXPIRED",
            400,
            {"window_minutes": window_minutes},
        )


class AttachmentUploadError(AppException):
    """Storage provider rejected one of the message attachments."""

    def __init__(self, filename: str | None = None, reason: str | None = None):
        msg = "Failed to upload attachment"
        if filename:
            msg = f"Failed to upload attachment: {filename}"
        super().__init__(
            msg,
            "ATTACHMENT_UPLOAD_FAILED",
            502,
            {"filename": filename, "reason": reason} if filename else {},
        )


class MessageDeletionError(AppException):
    """Database failure while deleting a message."""

    def __init__(self, message_id: str | None = None):
        super().__init__(
            "Internal Server Error Try again",
            "MESSAGE_DELETE_FAILED",
            500,
            {"message_id": message_id} if message_id else {},
        )
