# storefront/models/user.py

"""Signed-in user as reported by the identity provider."""

from dataclasses import dataclass


@dataclass
class AuthUser:
    """An authenticated identity-provider account."""

    uid: str
    email: str
    display_name: str = ""
    id_token: str = ""
    refresh_token: str = ""
