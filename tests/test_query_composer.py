# tests/test_query_composer.py

"""Tests for structured-query composition and cursor helpers."""

import unittest

from storefront.filters.query_composer import (
    compose_count_query,
    compose_product_query,
    cursor_for,
    field_value,
    padded_product_id,
    sort_field_path,
)
from storefront.models.query import PageCursor, ProductQuery
from storefront.store.errors import QueryError

_DOC = "projects/p/databases/(default)/documents/products/004"


class TestHelpers(unittest.TestCase):
    """Id padding, field paths and cursors."""

    def test_padded_product_id(self) -> None:
        self.assertEqual(padded_product_id("7"), "007")
        self.assertEqual(padded_product_id(42), "042")
        self.assertEqual(padded_product_id("1234"), "1234")

    def test_non_numeric_id_untouched(self) -> None:
        self.assertEqual(padded_product_id(" abc12 "), "abc12")

    def test_sort_field_path(self) -> None:
        self.assertEqual(sort_field_path("id"), "__name__")
        self.assertEqual(sort_field_path("rating.rate"), "rating.rate")

    def test_field_value_dotted(self) -> None:
        data = {"rating": {"rate": 4.5}}
        self.assertEqual(field_value(data, "rating.rate"), 4.5)
        self.assertIsNone(field_value(data, "rating.count"))
        self.assertIsNone(field_value({"rating": 3}, "rating.rate"))

    def test_cursor_for_id_sort_has_no_value(self) -> None:
        cursor = cursor_for("id", _DOC, {"price": 3.0})
        self.assertEqual(cursor, PageCursor("id", None, _DOC))

    def test_cursor_for_price(self) -> None:
        cursor = cursor_for("price", _DOC, {"price": 3.0})
        self.assertEqual(cursor.value, 3.0)


class TestComposeProductQuery(unittest.TestCase):
    """compose_product_query output shape."""

    def test_first_page_default_sort(self) -> None:
        """Default sort orders by document name only."""
        structured = compose_product_query(ProductQuery(page_size=10))
        self.assertEqual(
            structured["orderBy"],
            [{"field": {"fieldPath": "__name__"}, "direction": "ASCENDING"}],
        )
        self.assertEqual(structured["limit"], 10)
        self.assertEqual(structured["from"], [{"collectionId": "products"}])
        self.assertNotIn("where", structured)
        self.assertNotIn("startAt", structured)

    def test_category_filter(self) -> None:
        structured = compose_product_query(ProductQuery(category="beauty"))
        self.assertEqual(
            structured["where"],
            {
                "fieldFilter": {
                    "field": {"fieldPath": "category"},
                    "op": "EQUAL",
                    "value": {"stringValue": "beauty"},
                }
            },
        )

    def test_price_desc_adds_name_tie_break(self) -> None:
        """Non-name sorts add __name__ in the same direction."""
        structured = compose_product_query(
            ProductQuery(sort_by="price", order="desc")
        )
        self.assertEqual(
            [o["field"]["fieldPath"] for o in structured["orderBy"]],
            ["price", "__name__"],
        )
        self.assertEqual(
            {o["direction"] for o in structured["orderBy"]}, {"DESCENDING"}
        )

    def test_next_page_starts_after_cursor(self) -> None:
        cursor = PageCursor("price", 9.5, _DOC)
        structured = compose_product_query(
            ProductQuery(sort_by="price").after(cursor)
        )
        self.assertEqual(
            structured["startAt"],
            {
                "values": [
                    {"doubleValue": 9.5},
                    {"referenceValue": _DOC},
                ],
                "before": False,
            },
        )

    def test_name_sort_cursor_uses_reference_only(self) -> None:
        cursor = PageCursor("id", None, _DOC)
        structured = compose_product_query(ProductQuery().after(cursor))
        self.assertEqual(
            structured["startAt"]["values"], [{"referenceValue": _DOC}]
        )

    def test_previous_page_flips_direction(self) -> None:
        """Walking backwards reverses the order of every sort key."""
        cursor = PageCursor("title", "M", _DOC)
        structured = compose_product_query(
            ProductQuery(sort_by="title", order="asc").before(cursor)
        )
        self.assertEqual(
            {o["direction"] for o in structured["orderBy"]}, {"DESCENDING"}
        )
        self.assertFalse(structured["startAt"]["before"])

    def test_prev_without_cursor_is_a_first_page(self) -> None:
        structured = compose_product_query(ProductQuery(direction="prev"))
        self.assertEqual(structured["orderBy"][0]["direction"], "ASCENDING")
        self.assertNotIn("startAt", structured)

    def test_invalid_query_raises(self) -> None:
        with self.assertRaises(QueryError):
            compose_product_query(ProductQuery(sort_by="password"))


class TestComposeCountQuery(unittest.TestCase):

    def test_all_products(self) -> None:
        self.assertEqual(
            compose_count_query(), {"from": [{"collectionId": "products"}]}
        )

    def test_one_category(self) -> None:
        structured = compose_count_query("toys")
        self.assertEqual(
            structured["where"]["fieldFilter"]["value"],
            {"stringValue": "toys"},
        )


if __name__ == "__main__":
    unittest.main()
