# storefront/ui/detail_screen.py

"""Product detail view with the reviews section."""

import asyncio
import logging
from typing import cast

from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Static

from storefront.models.product import Product
from storefront.models.review import Review
from storefront.services.auth_gate import AuthGate
from storefront.services.catalog import CatalogService
from storefront.services.reviews import ReviewService
from storefront.store.errors import AuthError, StorefrontError

logger = logging.getLogger("storefront.ui")


def _product_summary(product: Product) -> str:
    stock = (
        f"In Stock: {product.stock}" if product.in_stock else "Out of Stock"
    )
    lines = [
        f"[b]{escape(product.title)}[/b]",
        f"[green]${product.price:,.2f}[/green]",
        f"Category: {escape(product.category)}",
        stock,
        f"Rating: {product.rating.rate} "
        f"(Based on {product.rating.count} reviews)",
    ]
    if product.description:
        lines.append("")
        lines.append(escape(product.description))
    if product.tags:
        lines.append(escape(f"Tags: {', '.join(product.tags)}"))
    return "\n".join(lines)


class ProductDetailScreen(Screen[None]):
    """One product, its images and its reviews."""

    BINDINGS = [
        Binding("escape", "back", "Back to Products"),
    ]

    def __init__(
        self,
        product_id: str,
        catalog: CatalogService,
        reviews: ReviewService,
        auth: AuthGate,
    ) -> None:
        super().__init__()
        self.product_id = product_id
        self.catalog = catalog
        self.review_service = reviews
        self.auth = auth
        self.product: Product | None = None
        self.selected_review: Review | None = None
        self.editing_review: Review | None = None

    def compose(self) -> ComposeResult:
        yield Header()
        yield VerticalScroll(
            Static("", id="detail_error"),
            Static("Loading...", id="product_info"),
            Static("", id="product_images"),
            Static("[b]Reviews:[/b]", id="reviews_title"),
            cast(
                DataTable[str | Text],
                DataTable(id="reviews_table", cursor_type="row"),
            ),
            Horizontal(
                Button("Edit", id="edit_review_btn"),
                Button("Delete", variant="error", id="delete_review_btn"),
                id="owner_actions",
            ),
            Vertical(
                Static("Add a Review", id="review_form_title"),
                Input(placeholder="Rating (1-5)", id="rating_input"),
                Input(placeholder="Your review", id="comment_input"),
                Horizontal(
                    Button("Submit Review", variant="primary", id="submit_review_btn"),
                    Button("Cancel", id="cancel_edit_btn"),
                ),
                id="review_form",
            ),
            Static(
                "You must be signed in to leave a review.",
                id="signin_hint",
            ),
            Button("Back to Products", id="back_btn"),
            id="detail_container",
        )
        yield Footer()

    async def on_mount(self) -> None:
        table = self._reviews_table()
        table.add_columns("Name", "Date", "Rating", "Comment")
        self.query_one("#cancel_edit_btn", Button).display = False
        self.refresh_auth_controls()
        await self.load_product()

    def on_screen_resume(self) -> None:
        """Sign-in may have changed while a dialog was open."""
        self.refresh_auth_controls()

    # ── Rendering ────────────────────────────────────────

    def _reviews_table(self) -> DataTable[str | Text]:
        return cast(DataTable[str | Text], self.query_one("#reviews_table", DataTable))

    def _show_error(self, message: str) -> None:
        self.query_one("#detail_error", Static).update(
            f"[red]{escape(message)}[/red]" if message else ""
        )

    async def load_product(self) -> None:
        """Fetch the product and its reviews."""
        try:
            self.product = await asyncio.to_thread(
                self.catalog.get_product, self.product_id
            )
        except StorefrontError as exc:
            logger.error("Error fetching product %s: %s", self.product_id, exc)
            self.query_one("#product_info", Static).update("")
            self._show_error(str(exc))
            return
        self.render_product()

    def render_product(self) -> None:
        if self.product is None:
            return
        self.query_one("#product_info", Static).update(
            _product_summary(self.product)
        )
        images = "\n".join(self.product.images)
        self.query_one("#product_images", Static).update(
            f"Images:\n{images}" if images else ""
        )
        self.populate_reviews()

    def populate_reviews(self) -> None:
        table = self._reviews_table()
        table.clear()
        reviews = self.product.reviews if self.product else []
        for index, review in enumerate(reviews):
            table.add_row(
                Text(review.reviewer_name or "Anonymous"),
                review.date[:10],
                str(review.rating),
                Text(review.comment),
                key=str(index),
            )
        self.selected_review = reviews[0] if reviews else None
        if not reviews:
            self.query_one("#reviews_title", Static).update(
                "[b]Reviews:[/b] No reviews available."
            )
        else:
            self.query_one("#reviews_title", Static).update("[b]Reviews:[/b]")
        self.refresh_auth_controls()

    def refresh_auth_controls(self) -> None:
        """Show mutation controls only to signed-in users and authors."""
        signed_in = self.auth.is_signed_in
        self.query_one("#review_form").display = signed_in
        self.query_one("#signin_hint").display = not signed_in
        owns = (
            self.selected_review is not None
            and self.auth.can_modify(self.selected_review)
        )
        self.query_one("#owner_actions").display = signed_in and owns
        if not signed_in:
            self._stop_editing()

    # ── Events ───────────────────────────────────────────

    def on_data_table_row_highlighted(
        self, event: DataTable.RowHighlighted
    ) -> None:
        if event.data_table.id != "reviews_table" or self.product is None:
            return
        if 0 <= event.cursor_row < len(self.product.reviews):
            self.selected_review = self.product.reviews[event.cursor_row]
            self.refresh_auth_controls()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id
        if button_id == "submit_review_btn":
            await self.submit_review()
        elif button_id == "edit_review_btn":
            self.start_editing()
        elif button_id == "cancel_edit_btn":
            self._stop_editing()
        elif button_id == "delete_review_btn":
            await self.delete_selected_review()
        elif button_id == "back_btn":
            self.action_back()

    def action_back(self) -> None:
        self.app.pop_screen()

    # ── Review mutations ─────────────────────────────────

    def start_editing(self) -> None:
        review = self.selected_review
        if review is None or not self.auth.can_modify(review):
            return
        self.editing_review = review
        self.query_one("#rating_input", Input).value = str(review.rating)
        self.query_one("#comment_input", Input).value = review.comment
        self.query_one("#review_form_title", Static).update("Edit Your Review")
        self.query_one("#submit_review_btn", Button).label = "Update Review"
        self.query_one("#cancel_edit_btn", Button).display = True

    def _stop_editing(self) -> None:
        self.editing_review = None
        self.query_one("#rating_input", Input).value = ""
        self.query_one("#comment_input", Input).value = ""
        self.query_one("#review_form_title", Static).update("Add a Review")
        self.query_one("#submit_review_btn", Button).label = "Submit Review"
        self.query_one("#cancel_edit_btn", Button).display = False

    async def submit_review(self) -> None:
        """Add a new review or save the one being edited."""
        if self.product is None:
            return
        try:
            user = self.auth.require_user()
        except AuthError as exc:
            self._show_error(str(exc))
            return
        rating = self.query_one("#rating_input", Input).value
        comment = self.query_one("#comment_input", Input).value
        if not rating.strip() or not comment.strip():
            self._show_error("Please provide a rating and a comment.")
            return

        editing = self.editing_review
        try:
            if editing is not None:
                updated = await asyncio.to_thread(
                    self.review_service.edit_review,
                    self.product.id,
                    editing.id,
                    user,
                    rating,
                    comment,
                )
                self.product.reviews = [
                    updated if r.id == updated.id else r
                    for r in self.product.reviews
                ]
            else:
                added = await asyncio.to_thread(
                    self.review_service.add_review,
                    self.product.id,
                    user,
                    rating,
                    comment,
                )
                self.product.reviews.append(added)
        except StorefrontError as exc:
            action = "editing" if editing is not None else "adding"
            logger.error("Error %s review: %s", action, exc)
            self._show_error(f"Error {action} review: {exc}")
            return

        self._show_error("")
        self._stop_editing()
        self.populate_reviews()

    async def delete_selected_review(self) -> None:
        review = self.selected_review
        user = self.auth.current_user
        if self.product is None or review is None or user is None:
            return
        if not self.auth.can_modify(review):
            return
        try:
            await asyncio.to_thread(
                self.review_service.delete_review,
                self.product.id,
                review.id,
                user,
            )
        except StorefrontError as exc:
            logger.error("Error deleting review: %s", exc)
            self._show_error(f"Error deleting review: {exc}")
            return
        self.product.reviews = [
            r for r in self.product.reviews if r.id != review.id
        ]
        self._show_error("")
        self.populate_reviews()
