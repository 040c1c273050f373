# storefront/store/errors.py

"""Exception types raised by the storefront clients and services."""


class StorefrontError(Exception):
    """Base class for every storefront failure."""


class StoreError(StorefrontError):
    """The document store rejected or failed a request."""

    def __init__(self, message: str, status: int = 0) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(StoreError):
    """The requested document does not exist."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status=404)


class PermissionDeniedError(StoreError):
    """The caller may not perform this operation."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status=403)


class AuthError(StorefrontError):
    """Sign-in, sign-up or token verification failed."""

    # Identity Toolkit error codes → user-facing text
    _MESSAGES: dict[str, str] = {
        "EMAIL_EXISTS": "An account with this email already exists.",
        "EMAIL_NOT_FOUND": "Invalid email or password.",
        "INVALID_PASSWORD": "Invalid email or password.",
        "INVALID_LOGIN_CREDENTIALS": "Invalid email or password.",
        "INVALID_EMAIL": "The email address is badly formatted.",
        "MISSING_PASSWORD": "A password is required.",
        "USER_DISABLED": "This account has been disabled.",
        "TOO_MANY_ATTEMPTS_TRY_LATER": "Too many attempts, try again later.",
        "INVALID_ID_TOKEN": "Unauthorized: invalid token",
        "USER_NOT_FOUND": "Unauthorized: invalid token",
    }

    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        super().__init__(message or self.describe(code))

    @classmethod
    def describe(cls, code: str) -> str:
        """Map a provider error code to a user-facing message.

        Codes may carry a suffix (``WEAK_PASSWORD : Password should be
        at least 6 characters``); the suffix is shown as-is.
        """
        base, _, detail = code.partition(" : ")
        if base in cls._MESSAGES:
            return cls._MESSAGES[base]
        if detail:
            return detail
        return base.replace("_", " ").capitalize()


class AuthServiceError(AuthError):
    """The identity provider could not be reached or failed server-side."""


class ValidationError(StorefrontError):
    """User input is missing or out of range."""


class QueryError(StorefrontError):
    """A catalog query or pagination cursor is invalid."""
