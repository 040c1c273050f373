# storefront/ui/sign_in_screen.py

"""Modal email/password sign-in and sign-up dialog."""

import asyncio
import logging

from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Static

from storefront.models.user import AuthUser
from storefront.services.auth_gate import AuthGate
from storefront.store.errors import AuthError

logger = logging.getLogger("storefront.ui")


class SignInScreen(ModalScreen[AuthUser | None]):
    """Dismisses with the signed-in user, or None when cancelled."""

    BINDINGS = [Binding("escape", "cancel", "Cancel")]

    def __init__(self, auth: AuthGate) -> None:
        super().__init__()
        self.auth = auth

    def compose(self) -> ComposeResult:
        yield Vertical(
            Static("Sign in", id="auth_title"),
            Input(placeholder="Email", id="email_input"),
            Input(placeholder="Password", password=True, id="password_input"),
            Input(
                placeholder="Display name (sign up only)",
                id="display_name_input",
            ),
            Static("", id="auth_error"),
            Horizontal(
                Button("Sign in", variant="primary", id="sign_in_btn"),
                Button("Sign up", id="sign_up_btn"),
                Button("Cancel", id="cancel_btn"),
            ),
            id="auth_dialog",
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "sign_in_btn":
            await self.submit(sign_up=False)
        elif event.button.id == "sign_up_btn":
            await self.submit(sign_up=True)
        elif event.button.id == "cancel_btn":
            self.action_cancel()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "password_input":
            await self.submit(sign_up=False)

    async def submit(self, sign_up: bool) -> None:
        """Run sign-in or sign-up and dismiss on success."""
        email = self.query_one("#email_input", Input).value
        password = self.query_one("#password_input", Input).value
        error = self.query_one("#auth_error", Static)
        if not email.strip() or not password:
            error.update(Text("Email and password are required.", style="red"))
            return

        try:
            if sign_up:
                name = self.query_one("#display_name_input", Input).value
                user = await asyncio.to_thread(
                    self.auth.sign_up, email, password, name
                )
            else:
                user = await asyncio.to_thread(self.auth.sign_in, email, password)
        except AuthError as exc:
            error.update(Text(str(exc), style="red"))
            return

        self.dismiss(user)

    def action_cancel(self) -> None:
        self.dismiss(None)
