# storefront/filters/product_validator.py

"""Drop catalog documents that cannot be shown as products."""

import logging
import math
from collections import Counter

from storefront.models.product import Product

logger = logging.getLogger("storefront.filters")


class ProductValidator:
    """Checks a fetched page before it reaches the search filter."""

    @staticmethod
    def rejection_reason(product: Product) -> str | None:
        """Why ``product`` is unusable, or None when it is fine.

        Free items (price 0) are legitimate catalog entries.
        """
        if not product.title.strip():
            return "empty title"
        if not math.isfinite(product.price):
            return "non-numeric price"
        if product.price < 0:
            return "negative price"
        return None

    @staticmethod
    def validate(
        products: list[Product],
    ) -> tuple[list[Product], int]:
        """Return the usable products and how many were dropped."""
        valid: list[Product] = []
        reasons: Counter[str] = Counter()

        for product in products:
            reason = ProductValidator.rejection_reason(product)
            if reason is None:
                valid.append(product)
                continue
            reasons[reason] += 1
            logger.debug("Dropped product %s: %s", product.id, reason)

        dropped = sum(reasons.values())
        if dropped:
            logger.info(
                "Validation dropped %d of %d documents (%s)",
                dropped,
                len(products),
                ", ".join(f"{r}: {n}" for r, n in reasons.most_common()),
            )
        return valid, dropped
