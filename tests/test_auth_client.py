# tests/test_auth_client.py

"""Tests for AuthClient against a mocked Identity Toolkit."""

import unittest
from typing import Any
from unittest.mock import MagicMock, patch

from storefront.config.settings import Settings
from storefront.store.auth_client import AuthClient
from storefront.store.errors import AuthError, AuthServiceError


def _resp(status: int, body: Any) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    return resp


_SIGNED_IN = {
    "localId": "uid-1",
    "email": "ann@example.com",
    "displayName": "",
    "idToken": "id-tok",
    "refreshToken": "refresh-tok",
}


@patch("storefront.store.auth_client.curl_requests.Session")
class TestAuthClient(unittest.TestCase):
    """Sign-up, sign-in and token lookup."""

    def _client(self, mock_session_cls: MagicMock) -> tuple[
        AuthClient, MagicMock
    ]:
        session = MagicMock()
        mock_session_cls.return_value = session
        return AuthClient(api_key="k"), session

    def test_sign_in(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        session.post.return_value = _resp(200, _SIGNED_IN)

        user = client.sign_in("ann@example.com", "secret")

        self.assertEqual(user.uid, "uid-1")
        self.assertEqual(user.id_token, "id-tok")
        url = session.post.call_args.args[0]
        self.assertTrue(url.endswith("/accounts:signInWithPassword"))
        self.assertEqual(session.post.call_args.kwargs["params"], {"key": "k"})
        self.assertTrue(
            session.post.call_args.kwargs["json"]["returnSecureToken"]
        )

    def test_sign_up_sets_display_name(
        self, mock_session_cls: MagicMock,
    ) -> None:
        """A display name triggers a follow-up accounts:update call."""
        client, session = self._client(mock_session_cls)
        session.post.side_effect = [
            _resp(200, _SIGNED_IN),
            _resp(200, {"displayName": "Ann"}),
        ]

        user = client.sign_up("ann@example.com", "secret", "Ann")

        self.assertEqual(user.display_name, "Ann")
        urls = [c.args[0] for c in session.post.call_args_list]
        self.assertTrue(urls[0].endswith("/accounts:signUp"))
        self.assertTrue(urls[1].endswith("/accounts:update"))
        self.assertEqual(
            session.post.call_args_list[1].kwargs["json"]["idToken"],
            "id-tok",
        )

    def test_sign_up_without_display_name(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.post.return_value = _resp(200, _SIGNED_IN)
        client.sign_up("ann@example.com", "secret")
        self.assertEqual(session.post.call_count, 1)

    def test_provider_error_code_is_mapped(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.post.return_value = _resp(
            400, {"error": {"code": 400, "message": "EMAIL_EXISTS"}}
        )
        with self.assertRaises(AuthError) as ctx:
            client.sign_up("ann@example.com", "secret")
        self.assertEqual(ctx.exception.code, "EMAIL_EXISTS")
        self.assertNotIsInstance(ctx.exception, AuthServiceError)
        self.assertEqual(
            str(ctx.exception), "An account with this email already exists."
        )

    def test_error_detail_suffix_is_shown(
        self, mock_session_cls: MagicMock,
    ) -> None:
        client, session = self._client(mock_session_cls)
        session.post.return_value = _resp(
            400,
            {
                "error": {
                    "message": "WEAK_PASSWORD : Password should be at "
                    "least 6 characters"
                }
            },
        )
        with self.assertRaises(AuthError) as ctx:
            client.sign_up("ann@example.com", "123")
        self.assertEqual(
            str(ctx.exception), "Password should be at least 6 characters"
        )

    def test_non_json_error(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        resp = _resp(503, None)
        resp.json.side_effect = ValueError("html")
        session.post.return_value = resp
        with self.assertRaises(AuthServiceError) as ctx:
            client.sign_in("a@b.c", "x")
        self.assertEqual(ctx.exception.code, "HTTP_503")

    def test_network_failure(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        session.post.side_effect = OSError("unreachable")
        with self.assertRaises(AuthServiceError) as ctx:
            client.sign_in("a@b.c", "x")
        self.assertEqual(ctx.exception.code, "NETWORK_ERROR")

    def test_verify_id_token(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        session.post.return_value = _resp(
            200, {"users": [{"localId": "uid-1", "email": "ann@example.com"}]}
        )
        user = client.verify_id_token("id-tok")
        self.assertEqual(user.uid, "uid-1")
        self.assertEqual(user.id_token, "id-tok")
        self.assertTrue(
            session.post.call_args.args[0].endswith("/accounts:lookup")
        )

    def test_verify_empty_token(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        with self.assertRaises(AuthError) as ctx:
            client.verify_id_token("")
        self.assertEqual(str(ctx.exception), "Unauthorized: No token provided")
        session.post.assert_not_called()

    def test_verify_unknown_token(self, mock_session_cls: MagicMock) -> None:
        client, session = self._client(mock_session_cls)
        session.post.return_value = _resp(200, {"users": []})
        with self.assertRaises(AuthError) as ctx:
            client.verify_id_token("stale")
        self.assertEqual(ctx.exception.code, "INVALID_ID_TOKEN")

    def test_auth_emulator_host(self, mock_session_cls: MagicMock) -> None:
        client, _ = self._client(mock_session_cls)
        with patch.object(
            Settings, "FIREBASE_AUTH_EMULATOR_HOST", "localhost:9099"
        ):
            self.assertEqual(
                client.base_url,
                "http://localhost:9099/identitytoolkit.googleapis.com/v1",
            )


class TestAuthErrorMessages(unittest.TestCase):
    """AuthError.describe maps provider codes to readable text."""

    def test_known_codes(self) -> None:
        self.assertEqual(
            AuthError.describe("INVALID_LOGIN_CREDENTIALS"),
            "Invalid email or password.",
        )

    def test_unknown_code_is_humanised(self) -> None:
        self.assertEqual(
            AuthError.describe("OPERATION_NOT_ALLOWED"),
            "Operation not allowed",
        )

    def test_explicit_message_wins(self) -> None:
        exc = AuthError("EMAIL_EXISTS", "custom")
        self.assertEqual(str(exc), "custom")
        self.assertEqual(exc.code, "EMAIL_EXISTS")


if __name__ == "__main__":
    unittest.main()
