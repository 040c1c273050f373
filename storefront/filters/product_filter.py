# storefront/filters/product_filter.py

"""Local search-text filtering of a fetched product page."""

import logging

from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


class ProductFilter:
    """Filter products by the free-text search box."""

    @staticmethod
    def _haystack(product: Product) -> str:
        parts = [
            product.title,
            product.description,
            product.category,
            *product.tags,
        ]
        return " ".join(parts).lower()

    @staticmethod
    def filter_by_search(
        products: list[Product],
        search: str,
    ) -> tuple[list[Product], int]:
        """Keep products whose text contains every search word.

        Matches title, description, category and tags,
        case-insensitively.  Returns the kept list and the count of
        products that did not match.
        """
        words = search.lower().split()
        if not words:
            return products, 0

        kept: list[Product] = []
        excluded = 0
        for product in products:
            haystack = ProductFilter._haystack(product)
            if all(word in haystack for word in words):
                kept.append(product)
            else:
                excluded += 1

        if excluded:
            logger.info(
                "Search '%s' filtered out %d of %d products",
                search,
                excluded,
                len(products),
            )

        return kept, excluded
