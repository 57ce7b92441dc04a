"""
Error taxonomy shared by the gateway, the auth façade and the screens.

Every error carries an ErrorKind so screens can branch on the category
without inspecting exception classes.
"""
from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Category of a failure, as surfaced to screens."""

    VALIDATION = "validation"
    AUTH_PROVIDER = "auth_provider"
    FETCH = "fetch"
    WRITE = "write"
    IMAGE_UPLOAD = "image_upload"


class AuthErrorCategory(str, Enum):
    """User-facing categories translated from auth provider error codes."""

    UNKNOWN_ACCOUNT = "unknown_account"
    INVALID_EMAIL = "invalid_email"
    RATE_LIMITED = "rate_limited"
    GENERIC = "generic"


AUTH_ERROR_MESSAGES = {
    AuthErrorCategory.UNKNOWN_ACCOUNT: "No account found with this email address",
    AuthErrorCategory.INVALID_EMAIL: "Please enter a valid email address",
    AuthErrorCategory.RATE_LIMITED: "Too many requests. Please try again later",
    AuthErrorCategory.GENERIC: "Something went wrong. Please try again.",
}


class LokalFindsError(Exception):
    """Base class for all errors raised by this package."""

    kind: ErrorKind

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.message = message
        self.cause = cause
        super().__init__(self.message)


class ValidationError(LokalFindsError):
    """
    Local form or permission check failed. No network call was attempted.
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class AuthProviderError(LokalFindsError):
    """
    Exception raised when the auth provider rejects a request
    """

    kind = ErrorKind.AUTH_PROVIDER

    def __init__(
        self,
        category: AuthErrorCategory = AuthErrorCategory.GENERIC,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        self.category = category
        super().__init__(message or AUTH_ERROR_MESSAGES[category], cause)


class FetchError(LokalFindsError):
    """Reading from the backend failed."""

    kind = ErrorKind.FETCH


class WriteError(LokalFindsError):
    """Writing to the backend failed."""

    kind = ErrorKind.WRITE


class ImageUploadError(LokalFindsError):
    kind = ErrorKind.IMAGE_UPLOAD
