# storefront/services/auth_gate.py

"""Signed-in session holder that gates review mutations."""

import logging

from storefront.models.review import Review
from storefront.models.user import AuthUser
from storefront.services.reviews import is_author
from storefront.store.auth_client import AuthClient
from storefront.store.errors import AuthError

logger = logging.getLogger("storefront.auth")


class AuthGate:
    """Tracks the current user for one UI session."""

    def __init__(self, client: AuthClient | None = None) -> None:
        self.client = client or AuthClient()
        self._user: AuthUser | None = None

    @property
    def current_user(self) -> AuthUser | None:
        return self._user

    @property
    def is_signed_in(self) -> bool:
        return self._user is not None

    def sign_up(
        self, email: str, password: str, display_name: str = ""
    ) -> AuthUser:
        """Create an account and keep it as the current user."""
        try:
            self._user = self.client.sign_up(
                email.strip(), password, display_name.strip()
            )
        except AuthError as exc:
            logger.error("Error during sign up: %s", exc)
            raise
        return self._user

    def sign_in(self, email: str, password: str) -> AuthUser:
        """Sign in and keep the account as the current user."""
        try:
            self._user = self.client.sign_in(email.strip(), password)
        except AuthError as exc:
            logger.error("Error during sign in: %s", exc)
            raise
        return self._user

    def sign_out(self) -> None:
        """Forget the current user (tokens are discarded locally)."""
        if self._user is not None:
            logger.info("User signed out: %s", self._user.email)
        self._user = None

    def require_user(self) -> AuthUser:
        """Return the current user or raise ``AuthError``."""
        if self._user is None:
            raise AuthError(
                "NOT_SIGNED_IN", "You must be signed in to leave a review."
            )
        return self._user

    def can_modify(self, review: Review) -> bool:
        """True when the current user authored ``review``."""
        return bool(review.id) and is_author(self._user, review)
