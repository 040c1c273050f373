# storefront/store/auth_client.py

"""Email/password accounts against the Firebase Identity Toolkit REST API."""

import logging
from typing import Any

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings
from storefront.models.user import AuthUser
from storefront.store.errors import AuthError, AuthServiceError


class AuthClient:
    """Sign-up, sign-in and ID-token verification."""

    def __init__(self, api_key: str | None = None) -> None:
        self.settings = Settings()
        self.logger = logging.getLogger("storefront.auth")
        self.api_key = (
            api_key if api_key is not None else self.settings.FIREBASE_API_KEY
        )
        self.session = curl_requests.Session()
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    @property
    def base_url(self) -> str:
        """REST root, pointing at the auth emulator when configured."""
        host = self.settings.FIREBASE_AUTH_EMULATOR_HOST
        if host:
            return f"http://{host}/identitytoolkit.googleapis.com/v1"
        return self.settings.IDENTITY_BASE_URL

    def _call(self, endpoint: str, payload: dict[str, Any]) -> dict[str, Any]:
        """POST to ``accounts:<endpoint>`` and return the JSON body."""
        url = f"{self.base_url}/accounts:{endpoint}"
        try:
            resp = self.session.post(
                url,
                params={"key": self.api_key},
                json=payload,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.error(
                "[auth] accounts:%s failed: %s",
                endpoint,
                exc,
                exc_info=True,
            )
            raise AuthServiceError(
                "NETWORK_ERROR", f"Identity provider unreachable: {exc}"
            ) from exc

        try:
            body: Any = resp.json()
        except Exception:
            body = {}

        if resp.status_code != 200:
            code = f"HTTP_{resp.status_code}"
            if isinstance(body, dict) and isinstance(body.get("error"), dict):
                code = str(body["error"].get("message") or code)
            self.logger.warning(
                "[auth] accounts:%s rejected: %s", endpoint, code
            )
            if resp.status_code >= 500:
                raise AuthServiceError(code, f"Identity provider failed: {code}")
            raise AuthError(code)

        result: dict[str, Any] = body if isinstance(body, dict) else {}
        return result

    @staticmethod
    def _user_from(body: dict[str, Any]) -> AuthUser:
        return AuthUser(
            uid=str(body.get("localId", "")),
            email=str(body.get("email", "")),
            display_name=str(body.get("displayName") or ""),
            id_token=str(body.get("idToken", "")),
            refresh_token=str(body.get("refreshToken", "")),
        )

    def sign_up(
        self, email: str, password: str, display_name: str = ""
    ) -> AuthUser:
        """Create an account and return it signed in."""
        body = self._call(
            "signUp",
            {
                "email": email,
                "password": password,
                "returnSecureToken": True,
            },
        )
        user = self._user_from(body)
        if display_name:
            self._call(
                "update",
                {
                    "idToken": user.id_token,
                    "displayName": display_name,
                    "returnSecureToken": False,
                },
            )
            user.display_name = display_name
        self.logger.info("User signed up: %s", user.email)
        return user

    def sign_in(self, email: str, password: str) -> AuthUser:
        """Exchange email and password for a signed-in user."""
        body = self._call(
            "signInWithPassword",
            {
                "email": email,
                "password": password,
                "returnSecureToken": True,
            },
        )
        user = self._user_from(body)
        self.logger.info("User signed in: %s", user.email)
        return user

    def verify_id_token(self, id_token: str) -> AuthUser:
        """Resolve an ID token to its account; raises ``AuthError``."""
        if not id_token:
            raise AuthError("MISSING_ID_TOKEN", "Unauthorized: No token provided")
        body = self._call("lookup", {"idToken": id_token})
        users = body.get("users") or []
        if not users:
            raise AuthError("INVALID_ID_TOKEN")
        user = self._user_from(users[0])
        user.id_token = id_token
        return user
