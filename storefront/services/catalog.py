# storefront/services/catalog.py

"""Catalog reads: product pages, counts, product detail and categories."""

import logging
from typing import Any

from storefront.config.settings import Settings
from storefront.filters.product_filter import ProductFilter
from storefront.filters.product_validator import ProductValidator
from storefront.filters.query_composer import (
    compose_count_query,
    compose_product_query,
    cursor_for,
    is_backwards,
    padded_product_id,
)
from storefront.models.product import Product
from storefront.models.query import PageCursor, ProductPage, ProductQuery
from storefront.models.review import Review
from storefront.store.codec import document_id
from storefront.store.errors import NotFoundError, QueryError, StorefrontError
from storefront.store.firestore_client import FirestoreClient

logger = logging.getLogger("storefront.catalog")


class CatalogService:
    """Read-only access to the products and categories collections."""

    def __init__(self, client: FirestoreClient | None = None) -> None:
        self.settings = Settings()
        self.client = client or FirestoreClient()

    # ── Product list ─────────────────────────────────────

    def list_products(self, query: ProductQuery) -> ProductPage:
        """Fetch one page of products for the given parameters.

        The search text is applied to the fetched page, so a page may
        hold fewer than ``page_size`` products while more remain; the
        cursors always come from the raw rows.
        """
        if query.cursor is not None:
            self._check_cursor_database(query.cursor)
        structured = compose_product_query(query)
        try:
            rows = self.client.run_query(structured)
        except StorefrontError:
            logger.error(
                "Error fetching products (category=%r, sort=%s %s)",
                query.category,
                query.sort_by,
                query.order,
                exc_info=True,
            )
            raise

        backwards = is_backwards(query)
        if backwards and not rows:
            # Walked back past the start: show the first page instead
            return self.list_products(query.first_page())
        if backwards:
            rows.reverse()

        page = ProductPage()
        raw_full = len(rows) == query.limit
        if rows:
            first = cursor_for(query.sort_by, *rows[0])
            last = cursor_for(query.sort_by, *rows[-1])
            if backwards:
                page.next_cursor = last
                page.prev_cursor = first if raw_full else None
            else:
                page.next_cursor = last if raw_full else None
                page.prev_cursor = first if query.cursor is not None else None

        products = [
            Product.from_document(document_id(name), data)
            for name, data in rows
        ]
        products, page.invalid_count = ProductValidator.validate(products)
        page.products, page.filtered_count = ProductFilter.filter_by_search(
            products, query.search
        )

        logger.info(
            "Fetched %d products (%d raw, category=%r, search=%r)",
            len(page.products),
            len(rows),
            query.category,
            query.search,
        )
        return page

    def _check_cursor_database(self, cursor: PageCursor) -> None:
        prefix = f"{self.client.root}/{self.settings.PRODUCTS_COLLECTION}/"
        if not cursor.document.startswith(prefix):
            raise QueryError(
                f"Cursor belongs to another database: {cursor.document!r}"
            )

    def count_products(self, category: str = "") -> int:
        """Number of products, optionally within one category."""
        try:
            count = self.client.run_count(compose_count_query(category))
        except StorefrontError:
            logger.error(
                "Error counting products (category=%r)",
                category,
                exc_info=True,
            )
            raise
        logger.debug("Counted %d products (category=%r)", count, category)
        return count

    # ── Product detail ───────────────────────────────────

    def _product_path(self, product_id: str) -> str:
        return f"{self.settings.PRODUCTS_COLLECTION}/{product_id}"

    def _fetch_product_document(
        self, product_id: str
    ) -> tuple[str, dict[str, Any]]:
        """Find a product by padded id first, then by the raw id."""
        raw = str(product_id).strip()
        candidates = [padded_product_id(raw)]
        if raw and raw not in candidates:
            candidates.append(raw)

        for candidate in candidates:
            try:
                data = self.client.get_document(
                    self._product_path(candidate)
                )
            except NotFoundError:
                logger.debug("No product document at id %r", candidate)
                continue
            return candidate, data

        raise NotFoundError(f"No such product exists: {product_id}")

    def resolve_product_id(self, product_id: str) -> str:
        """Stored document id for a user-supplied product id."""
        stored_id, _ = self._fetch_product_document(product_id)
        return stored_id

    def get_product(self, product_id: str) -> Product:
        """Fetch one product with embedded and sub-collection reviews."""
        try:
            stored_id, data = self._fetch_product_document(product_id)
            product = Product.from_document(stored_id, data)
            product.reviews.extend(self.list_reviews(stored_id))
        except NotFoundError:
            logger.warning("Product %s not found", product_id)
            raise
        except StorefrontError:
            logger.error(
                "Error fetching product %s", product_id, exc_info=True
            )
            raise
        return product

    def list_reviews(self, stored_id: str) -> list[Review]:
        """Reviews in a product's sub-collection, oldest first."""
        path = (
            f"{self._product_path(stored_id)}/"
            f"{self.settings.REVIEWS_COLLECTION}"
        )
        reviews = [
            Review.from_dict(data, review_id=doc_id)
            for doc_id, data in self.client.list_documents(path)
        ]
        reviews.sort(key=lambda r: r.date)
        return reviews

    # ── Categories ───────────────────────────────────────

    def list_categories(self) -> list[str]:
        """Sorted category names.

        Reads both the single aggregate document holding a
        ``categories`` array and one-document-per-category layouts.
        """
        try:
            documents = self.client.list_documents(
                self.settings.CATEGORIES_COLLECTION
            )
        except StorefrontError:
            logger.error("Error fetching categories", exc_info=True)
            raise

        names: set[str] = set()
        for doc_id, data in documents:
            listed = data.get("categories")
            if isinstance(listed, list):
                names.update(str(c) for c in listed if c)
            elif data.get("name"):
                names.add(str(data["name"]))
            else:
                names.add(doc_id)

        categories = sorted(names)
        logger.info("Fetched %d categories", len(categories))
        return categories
