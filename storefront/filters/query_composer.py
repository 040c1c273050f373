# storefront/filters/query_composer.py

"""Build Firestore structured queries for the product list.

A page request becomes::

    from products
    where category == <category>          (only when a category is set)
    order by <sort field> <dir>, __name__ <dir>
    start after <cursor>                  (only when paging)
    limit <page size>

Ordering on ``__name__`` as a second key makes the order total, so a
cursor made of (sort value, document name) always resumes exactly after
the boundary document even when many products share a price.

Walking backwards flips both directions, starts after the *first*
document of the current page, and leaves it to the caller to reverse
the returned rows.
"""

import logging
from typing import Any

from storefront.config.settings import Settings
from storefront.models.query import PageCursor, ProductQuery
from storefront.store.codec import encode_value

logger = logging.getLogger("storefront.query")

# Sorting by "id" means the document id, which is zero-padded so that
# lexical order matches numeric order.
_NAME_FIELD = "__name__"


def padded_product_id(raw_id: str | int) -> str:
    """Zero-pad all-digit ids to the stored width; keep others as-is."""
    text = str(raw_id).strip()
    if text.isdigit():
        return text.zfill(Settings.PRODUCT_ID_WIDTH)
    return text


def sort_field_path(sort_by: str) -> str:
    """Firestore field path used to order by ``sort_by``."""
    return _NAME_FIELD if sort_by == "id" else sort_by


def field_value(data: dict[str, Any], path: str) -> Any:
    """Look up a dotted field path (``rating.rate``) in decoded fields."""
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None
        current = current[part]
    return current


def cursor_for(
    sort_by: str, document_name: str, data: dict[str, Any]
) -> PageCursor:
    """Build the cursor that points at one returned document."""
    value = None if sort_by == "id" else field_value(data, sort_by)
    return PageCursor(
        sort_field=sort_by, value=value, document=document_name
    )


def _category_filter(category: str) -> dict[str, Any]:
    return {
        "fieldFilter": {
            "field": {"fieldPath": "category"},
            "op": "EQUAL",
            "value": encode_value(category),
        }
    }


def is_backwards(query: ProductQuery) -> bool:
    """True when the query walks back from its cursor."""
    return query.direction == "prev" and query.cursor is not None


def compose_product_query(query: ProductQuery) -> dict[str, Any]:
    """Translate a validated ``ProductQuery`` into a structured query."""
    query.validate()

    descending = query.order == "desc"
    if is_backwards(query):
        descending = not descending
    direction = "DESCENDING" if descending else "ASCENDING"

    path = sort_field_path(query.sort_by)
    order_by: list[dict[str, Any]] = [
        {"field": {"fieldPath": path}, "direction": direction}
    ]
    if path != _NAME_FIELD:
        order_by.append(
            {"field": {"fieldPath": _NAME_FIELD}, "direction": direction}
        )

    structured: dict[str, Any] = {
        "from": [{"collectionId": Settings.PRODUCTS_COLLECTION}],
        "orderBy": order_by,
        "limit": query.limit,
    }
    if query.category:
        structured["where"] = _category_filter(query.category)

    if query.cursor is not None:
        values: list[dict[str, Any]] = []
        if path != _NAME_FIELD:
            values.append(encode_value(query.cursor.value))
        values.append({"referenceValue": query.cursor.document})
        structured["startAt"] = {"values": values, "before": False}

    logger.debug(
        "Composed product query: category=%r sort=%s %s limit=%d "
        "cursor=%s direction=%s",
        query.category,
        query.sort_by,
        query.order,
        query.limit,
        query.cursor is not None,
        query.direction,
    )
    return structured


def compose_count_query(category: str = "") -> dict[str, Any]:
    """Structured query whose matches are the products to count."""
    structured: dict[str, Any] = {
        "from": [{"collectionId": Settings.PRODUCTS_COLLECTION}],
    }
    if category:
        structured["where"] = _category_filter(category)
    return structured
