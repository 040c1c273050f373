# storefront/ui/app.py

"""Terminal storefront: filterable, paginated product list."""

import asyncio
import logging
from dataclasses import replace
from typing import Any, cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    Select,
    Static,
)

from storefront.config.settings import Settings
from storefront.models.product import Product
from storefront.models.query import ProductPage, ProductQuery
from storefront.models.user import AuthUser
from storefront.services.auth_gate import AuthGate
from storefront.services.catalog import CatalogService
from storefront.services.reviews import ReviewService
from storefront.store.errors import StorefrontError
from storefront.ui.detail_screen import ProductDetailScreen
from storefront.ui.sign_in_screen import SignInScreen

logger = logging.getLogger("storefront.ui")

SORT_OPTIONS: list[tuple[str, str]] = [
    ("Default", "id:asc"),
    ("Price: Low to High", "price:asc"),
    ("Price: High to Low", "price:desc"),
    ("Title: A to Z", "title:asc"),
    ("Top Rated", "rating.rate:desc"),
    ("Most in Stock", "stock:desc"),
]


class StorefrontApp(App[object]):
    """Terminal storefront over the hosted catalog."""

    CSS_PATH = "styles.css"
    TITLE = "Storefront"

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("n", "next_page", "Next"),
        Binding("p", "prev_page", "Previous"),
        Binding("r", "reset_filters", "Reset"),
        Binding("l", "sign_in", "Sign in"),
        Binding("o", "sign_out", "Sign out"),
    ]

    def __init__(
        self,
        catalog: CatalogService | None = None,
        reviews: ReviewService | None = None,
        auth: AuthGate | None = None,
    ) -> None:
        super().__init__()
        self.settings = Settings()
        self.catalog = catalog or CatalogService()
        self.reviews = reviews or ReviewService(self.catalog.client, self.catalog)
        self.auth = auth or AuthGate()
        self.query_params = ProductQuery()
        self.page = ProductPage()
        self.page_number: int = 1
        self.total_count: int = 0
        self.categories: list[str] = []
        # Bumped per request; responses from older requests are dropped
        self._generation: int = 0

    def compose(self) -> ComposeResult:
        """Build the widget tree for the list view."""
        yield Header()
        yield Container(
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Select[str](
                    [],
                    prompt="All Categories",
                    id="category_select",
                ),
                Select[str](
                    SORT_OPTIONS,
                    value="id:asc",
                    allow_blank=False,
                    id="sort_select",
                ),
                Button("Reset Filters", variant="error", id="reset_btn"),
                id="filter_bar",
            ),
            Static("Loading products...", id="status"),
            cast(
                DataTable[str | Text],
                DataTable(
                    id="products_table",
                    zebra_stripes=True,
                    cursor_type="row",
                ),
            ),
            Horizontal(
                Button("Previous", id="prev_btn", disabled=True),
                Static("Page 1", id="page_label"),
                Button("Next", id="next_btn", disabled=True),
                id="pagination",
            ),
            id="main_container",
        )
        yield Footer()

    async def on_mount(self) -> None:
        """Configure the table, then load categories and the first page."""
        table = self._table()
        table.add_columns("ID", "Title", "Price", "Category", "Stock", "Rating")
        await self.load_categories()
        await self.load_page(self.query_params.first_page(), 1)

    # ── Widgets ──────────────────────────────────────────

    def _table(self) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text],
            self.query_one("#products_table", DataTable),
        )

    def _filters_from_widgets(self) -> ProductQuery:
        """Current filter widgets as a first-page query."""
        search = self.query_one("#search_input", Input).value.strip()
        category_value: Any = self.query_one("#category_select", Select).value
        sort_value: Any = self.query_one("#sort_select", Select).value
        category = category_value if isinstance(category_value, str) else ""
        sort_key = sort_value if isinstance(sort_value, str) else "id:asc"
        sort_by, _, order = sort_key.partition(":")
        return replace(
            self.query_params,
            category=category,
            search=search,
            sort_by=sort_by,
            order=order or "asc",
            cursor=None,
            direction="next",
        )

    # ── Loading ──────────────────────────────────────────

    async def load_categories(self) -> None:
        """Fill the category dropdown."""
        try:
            self.categories = await asyncio.to_thread(
                self.catalog.list_categories
            )
        except StorefrontError as exc:
            logger.error("Error fetching categories: %s", exc)
            self.notify(f"Could not load categories: {exc}", severity="error")
            return
        select = cast(Select[str], self.query_one("#category_select", Select))
        select.set_options([(c, c) for c in self.categories])

    async def _fetch(self, query: ProductQuery) -> ProductPage | None:
        """Run the query off the UI thread; None if it failed or went stale."""
        self._generation += 1
        generation = self._generation
        status = self.query_one("#status", Static)
        status.update("Loading products...")
        try:
            page = await asyncio.to_thread(self.catalog.list_products, query)
        except StorefrontError as exc:
            logger.error("Failed to fetch products: %s", exc)
            if generation == self._generation:
                status.update(Text(f"Error: {exc}"))
                self.notify(f"Error: {exc}", severity="error")
            return None
        if generation != self._generation:
            logger.debug("Dropping stale product page (request %d)", generation)
            return None
        return page

    async def load_page(self, query: ProductQuery, page_number: int) -> None:
        """Fetch and show one page; recount when on the first page."""
        page = await self._fetch(query)
        if page is None:
            return
        generation = self._generation
        if page_number == 1:
            try:
                count = await asyncio.to_thread(
                    self.catalog.count_products, query.category
                )
            except StorefrontError as exc:
                logger.error("Error fetching total product count: %s", exc)
                count = 0
            if generation != self._generation:
                logger.debug(
                    "Dropping stale product count (request %d)", generation
                )
                return
            self.total_count = count
        self.query_params = query
        self.page = page
        self.page_number = page_number
        self.populate_table()

    def populate_table(self) -> None:
        """Fill the table and pagination controls from the current page."""
        table = self._table()
        table.clear()
        products = self.page.products
        for p in products:
            stock = str(p.stock) if p.in_stock else "Out of Stock"
            table.add_row(
                p.id,
                Text(p.title[:60]),
                Text(f"${p.price:,.2f}", style="bold green"),
                Text(p.category),
                stock,
                f"⭐ {p.rating.rate:.1f}" if p.rating.rate else "",
                key=p.id,
            )

        status = self.query_one("#status", Static)
        if not products:
            status.update("No products available")
        else:
            total = f" of {self.total_count}" if self.total_count else ""
            status.update(f"Showing {len(products)} products{total}")

        pages = self.total_pages
        label = f"Page {self.page_number}"
        if pages:
            label += f" of {pages}"
        self.query_one("#page_label", Static).update(label)
        self.query_one("#prev_btn", Button).disabled = not self.page.has_prev
        self.query_one("#next_btn", Button).disabled = not self.page.has_next

    @property
    def total_pages(self) -> int:
        """Page count from the last product count (0 when unknown)."""
        if not self.total_count:
            return 0
        size = self.query_params.limit
        return (self.total_count + size - 1) // size

    # ── Events ───────────────────────────────────────────

    async def apply_filters(self) -> None:
        """Reload from page 1 when any filter actually changed."""
        query = self._filters_from_widgets()
        if query == self.query_params.first_page() and self.page_number == 1:
            return
        await self.load_page(query, 1)

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter in the search box applies the filters."""
        if event.input.id == "search_input":
            await self.apply_filters()

    async def on_select_changed(self, event: Select.Changed) -> None:
        """Category or sort changes apply the filters."""
        await self.apply_filters()

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "next_btn":
            await self.action_next_page()
        elif event.button.id == "prev_btn":
            await self.action_prev_page()
        elif event.button.id == "reset_btn":
            await self.action_reset_filters()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        """Open the detail view for the selected product."""
        if event.data_table.id != "products_table":
            return
        product_id = event.row_key.value
        if product_id:
            self.push_screen(
                ProductDetailScreen(
                    str(product_id), self.catalog, self.reviews, self.auth
                )
            )

    # ── Actions ──────────────────────────────────────────

    async def action_next_page(self) -> None:
        """Advance to the page after the current one."""
        cursor = self.page.next_cursor
        if cursor is None:
            self.notify("No more products", severity="warning")
            return
        page = await self._fetch(self.query_params.after(cursor))
        if page is None:
            return
        if not page.products and not page.has_next:
            # Last page was exactly full
            self.notify("No more products", severity="warning")
            self.page.next_cursor = None
            self.populate_table()
            return
        self.query_params = self.query_params.after(cursor)
        self.page = page
        self.page_number += 1
        self.populate_table()

    async def action_prev_page(self) -> None:
        """Go back to the page before the current one."""
        cursor = self.page.prev_cursor
        if cursor is None:
            return
        page = await self._fetch(self.query_params.before(cursor))
        if page is None:
            return
        self.query_params = self.query_params.before(cursor)
        self.page = page
        self.page_number = (
            max(1, self.page_number - 1) if page.has_prev else 1
        )
        self.populate_table()

    async def action_reset_filters(self) -> None:
        """Clear search, category and sort and reload page 1."""
        self.query_one("#search_input", Input).value = ""
        self.query_one("#category_select", Select).clear()
        self.query_one("#sort_select", Select).value = "id:asc"
        await self.load_page(ProductQuery(), 1)

    def action_sign_in(self) -> None:
        """Open the sign-in dialog."""
        if self.auth.is_signed_in:
            self.notify("Already signed in")
            return
        self.push_screen(SignInScreen(self.auth), self._on_signed_in)

    def _on_signed_in(self, user: AuthUser | None) -> None:
        if user is not None:
            self.notify(f"Signed in as {user.email}")
            self._refresh_detail_controls()

    def action_sign_out(self) -> None:
        """Sign the current user out."""
        if not self.auth.is_signed_in:
            return
        self.auth.sign_out()
        self.notify("Signed out")
        self._refresh_detail_controls()

    def _refresh_detail_controls(self) -> None:
        if isinstance(self.screen, ProductDetailScreen):
            self.screen.refresh_auth_controls()

    @property
    def products(self) -> list[Product]:
        """Products shown on the current page."""
        return self.page.products
