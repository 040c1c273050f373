# storefront/cli/runner.py

"""Headless CLI commands over the catalog services."""

import json
import logging
import sys
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from storefront.config.settings import Settings
from storefront.models.product import Product
from storefront.models.query import PageCursor, ProductPage, ProductQuery
from storefront.services.catalog import CatalogService
from storefront.store.errors import QueryError, StorefrontError

logger = logging.getLogger("storefront.cli")

# Stderr console for status messages so stdout stays clean for JSON
_err = Console(stderr=True)


def build_query(
    category: str | None = None,
    search: str | None = None,
    sort_by: str | None = None,
    order: str | None = None,
    page_size: int | None = None,
    cursor_token: str | None = None,
    backwards: bool = False,
) -> ProductQuery:
    """Map CLI options onto a ``ProductQuery`` (raises ``QueryError``)."""
    cursor = PageCursor.decode(cursor_token) if cursor_token else None
    return ProductQuery(
        category=category or "",
        search=search or "",
        sort_by=sort_by or Settings.DEFAULT_SORT_FIELD,
        order=order or Settings.DEFAULT_ORDER,
        page_size=page_size or Settings.PAGE_SIZE,
        cursor=cursor,
        direction="prev" if backwards else "next",
    )


def _write_json(data: Any) -> None:
    json.dump(data, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")


def _page_to_dict(page: ProductPage) -> dict[str, Any]:
    return {
        "products": [p.to_dict(include_reviews=False) for p in page.products],
        "nextCursor": page.next_cursor.encode() if page.next_cursor else None,
        "prevCursor": page.prev_cursor.encode() if page.prev_cursor else None,
    }


def _print_table(products: list[Product]) -> None:
    """Render a Rich table of products to stdout."""
    table = Table(
        title="Products",
        show_lines=True,
        title_style="bold cyan",
    )
    table.add_column("ID", style="dim", width=6)
    table.add_column("Title", max_width=50)
    table.add_column("Price", justify="right", style="green")
    table.add_column("Category", style="magenta")
    table.add_column("Stock", justify="right")
    table.add_column("Rating", justify="center")

    for p in products:
        table.add_row(
            p.id,
            p.title[:50],
            f"${p.price:,.2f}",
            p.category,
            str(p.stock) if p.in_stock else "Out of Stock",
            f"{p.rating.rate:.1f}" if p.rating.rate else "—",
        )

    Console().print(table)


def cli_list(
    query: ProductQuery,
    output_format: str,
    catalog: CatalogService | None = None,
) -> int:
    """Print one page of products; return an exit code."""
    catalog = catalog or CatalogService()
    try:
        page = catalog.list_products(query)
    except QueryError as exc:
        _err.print(f"[red]Invalid query: {exc}[/red]")
        return 2
    except StorefrontError as exc:
        logger.error("List failed: %s", exc, exc_info=True)
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    if not page.products:
        _err.print("[yellow]No products available.[/yellow]")

    if output_format == "table":
        if page.products:
            _print_table(page.products)
        if page.next_cursor:
            _err.print(f"[dim]Next page: --cursor {page.next_cursor.encode()}[/dim]")
        if page.prev_cursor:
            _err.print(
                f"[dim]Previous page: --prev --cursor "
                f"{page.prev_cursor.encode()}[/dim]"
            )
    else:
        _write_json(_page_to_dict(page))

    return 0 if page.products else 1


def cli_show(
    product_id: str,
    output_format: str,
    catalog: CatalogService | None = None,
) -> int:
    """Print one product with its reviews."""
    catalog = catalog or CatalogService()
    try:
        product = catalog.get_product(product_id)
    except StorefrontError as exc:
        _err.print(f"[red]Error: {exc}[/red]")
        return 1

    if output_format != "table":
        _write_json(product.to_dict())
        return 0

    console = Console()
    console.print(f"[bold]{product.title}[/bold]  [green]${product.price:,.2f}[/green]")
    console.print(f"Category: {product.category}")
    console.print(
        f"In Stock: {product.stock}" if product.in_stock else "Out of Stock"
    )
    console.print(
        f"Rating: {product.rating.rate} (Based on {product.rating.count} reviews)"
    )
    if product.description:
        console.print(product.description)
    for url in product.images:
        console.print(f"[dim]{url}[/dim]")

    if not product.reviews:
        console.print("No reviews available.")
        return 0

    table = Table(title="Reviews", show_lines=True, title_style="bold cyan")
    table.add_column("Name")
    table.add_column("Date", style="dim")
    table.add_column("Rating", justify="center")
    table.add_column("Comment")
    for r in product.reviews:
        table.add_row(r.reviewer_name or "Anonymous", r.date[:10], str(r.rating), r.comment)
    console.print(table)
    return 0


def cli_categories(catalog: CatalogService | None = None) -> int:
    """Print the category list, one per line."""
    catalog = catalog or CatalogService()
    try:
        categories = catalog.list_categories()
    except StorefrontError as exc:
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    if not categories:
        _err.print("[yellow]No categories available.[/yellow]")
        return 1
    for name in categories:
        sys.stdout.write(f"{name}\n")
    return 0


def cli_count(category: str | None, catalog: CatalogService | None = None) -> int:
    """Print the number of products (optionally in one category)."""
    catalog = catalog or CatalogService()
    try:
        count = catalog.count_products(category or "")
    except StorefrontError as exc:
        _err.print(f"[red]Error: {exc}[/red]")
        return 1
    _write_json({"count": count})
    return 0


def run_seed(path: str) -> int:
    """Upload a catalog JSON file into the document store."""
    from storefront.services.seeder import seed_catalog
    from storefront.store.firestore_client import FirestoreClient

    source = Path(path)
    if not source.exists():
        _err.print(f"[red]File not found: {source}[/red]")
        return 1

    _err.print(f"[bold]Seeding catalog from {source}...[/bold]")
    try:
        result = seed_catalog(FirestoreClient(), source)
    except (StorefrontError, ValueError) as exc:
        logger.error("Seeding failed: %s", exc, exc_info=True)
        _err.print(f"[red]Seeding failed: {exc}[/red]")
        return 1

    _err.print(
        f"[green]✓ {result.products} products, {result.reviews} reviews,"
        f" {result.categories} categories[/green]"
    )
    return 0


def run_server(host: str | None, port: int | None) -> int:
    """Serve the JSON API until interrupted."""
    from storefront.api.app import create_app

    app = create_app()
    bind_host = host or Settings.API_HOST
    bind_port = port or Settings.API_PORT
    logger.info("Serving API on %s:%d", bind_host, bind_port)
    app.run(host=bind_host, port=bind_port)
    return 0
