# storefront/services/seeder.py

"""Upload a local catalog JSON file into the document store."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from storefront.config.settings import Settings
from storefront.filters.query_composer import padded_product_id
from storefront.store.firestore_client import FirestoreClient

logger = logging.getLogger("storefront.seeder")


@dataclass
class SeedResult:
    """Counts of what a seed run wrote."""

    products: int = 0
    reviews: int = 0
    categories: int = 0


def load_catalog_file(path: Path) -> tuple[list[dict[str, Any]], list[str]]:
    """Read products and categories from a JSON file.

    Accepts ``{"products": [...], "categories": [...]}`` or a bare list
    of products.  Category entries may be strings or objects with a
    ``name``/``slug``.  Raises ``ValueError`` on any other shape.
    """
    with open(path, encoding="utf-8") as f:
        raw: Any = json.load(f)

    if isinstance(raw, list):
        products, categories_raw = raw, []
    elif isinstance(raw, dict) and isinstance(raw.get("products"), list):
        products = raw["products"]
        categories_raw = raw.get("categories") or []
    else:
        raise ValueError(
            f"{path} must hold a product list or an object with 'products'"
        )

    categories: list[str] = []
    for entry in categories_raw:
        if isinstance(entry, dict):
            name = entry.get("name") or entry.get("slug")
        else:
            name = entry
        if name:
            categories.append(str(name))

    return [p for p in products if isinstance(p, dict)], categories


def seed_catalog(
    client: FirestoreClient,
    path: Path,
) -> SeedResult:
    """Write every product (and its reviews) plus the category list.

    Products are stored under their zero-padded id, falling back to
    their 1-based position in the file.  Embedded reviews move to the
    product's reviews sub-collection so they can be edited later.
    """
    settings = Settings()
    products, categories = load_catalog_file(path)
    result = SeedResult()

    for index, product in enumerate(products, 1):
        data = dict(product)
        reviews = data.pop("reviews", None) or []
        doc_id = padded_product_id(data.get("id") or index)
        product_path = f"{settings.PRODUCTS_COLLECTION}/{doc_id}"

        client.set_document(product_path, data)
        result.products += 1

        for review in reviews:
            if not isinstance(review, dict):
                continue
            client.create_document(
                f"{product_path}/{settings.REVIEWS_COLLECTION}",
                review,
            )
            result.reviews += 1

        if data.get("category"):
            categories.append(str(data["category"]))

    unique = sorted(set(categories))
    if unique:
        client.set_document(
            f"{settings.CATEGORIES_COLLECTION}/"
            f"{settings.CATEGORIES_DOCUMENT}",
            {"categories": unique},
        )
    result.categories = len(unique)

    logger.info(
        "Seeded %d products, %d reviews, %d categories from %s",
        result.products,
        result.reviews,
        result.categories,
        path,
    )
    return result
