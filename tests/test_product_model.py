# tests/test_product_model.py

"""Tests for the Product, RatingSummary and Review dataclasses."""

import math
import unittest

from storefront.models.product import Product, RatingSummary
from storefront.models.review import Review, utc_now_iso


class TestRatingSummary(unittest.TestCase):
    """RatingSummary.from_value accepts several stored shapes."""

    def test_from_map(self) -> None:
        summary = RatingSummary.from_value({"rate": 4.2, "count": 10})
        self.assertEqual(summary, RatingSummary(4.2, 10))

    def test_from_bare_number(self) -> None:
        """Some documents store the average rating directly."""
        self.assertEqual(RatingSummary.from_value(3), RatingSummary(3.0, 0))

    def test_missing_rating(self) -> None:
        self.assertEqual(RatingSummary.from_value(None), RatingSummary())

    def test_boolean_rating_ignored(self) -> None:
        self.assertEqual(RatingSummary.from_value(True), RatingSummary())


class TestProductFromDocument(unittest.TestCase):
    """Product.from_document builds products from decoded fields."""

    def test_full_document(self) -> None:
        product = Product.from_document(
            "001",
            {
                "title": "Mascara",
                "price": 9.99,
                "category": "beauty",
                "stock": 5,
                "description": "Long lashes",
                "images": ["https://img/1.png", "https://img/2.png"],
                "rating": {"rate": 4.5, "count": 2},
                "tags": ["beauty", "mascara"],
            },
        )
        self.assertEqual(product.id, "001")
        self.assertEqual(product.title, "Mascara")
        self.assertAlmostEqual(product.price, 9.99)
        self.assertTrue(product.in_stock)
        self.assertEqual(product.main_image, "https://img/1.png")
        self.assertEqual(product.rating.count, 2)
        self.assertEqual(product.tags, ["beauty", "mascara"])

    def test_single_image_field(self) -> None:
        """A lone 'image' or 'thumbnail' string becomes the image list."""
        product = Product.from_document(
            "002", {"title": "Lamp", "price": 5, "thumbnail": "t.png"}
        )
        self.assertEqual(product.images, ["t.png"])

    def test_zero_stock_is_out_of_stock(self) -> None:
        product = Product.from_document("003", {"title": "X", "price": 1})
        self.assertFalse(product.in_stock)
        self.assertEqual(product.main_image, "")

    def test_embedded_reviews(self) -> None:
        """Reviews stored inside the product document are parsed."""
        product = Product.from_document(
            "004",
            {
                "title": "Phone",
                "price": 100,
                "reviews": [
                    {
                        "rating": 5,
                        "comment": "Great",
                        "reviewerName": "Ann",
                        "reviewerEmail": "ann@example.com",
                        "date": "2024-01-01T00:00:00Z",
                    },
                    "not a review",
                ],
            },
        )
        self.assertEqual(len(product.reviews), 1)
        self.assertEqual(product.reviews[0].reviewer_name, "Ann")
        self.assertEqual(product.reviews[0].id, "")

    def test_to_dict_without_reviews(self) -> None:
        product = Product(id="005", title="Desk", price=80.0)
        product.reviews.append(Review(rating=4, comment="Fine"))
        self.assertNotIn("reviews", product.to_dict(include_reviews=False))
        self.assertEqual(len(product.to_dict()["reviews"]), 1)

    def test_default_lists_are_not_shared(self) -> None:
        a = Product(id="1", title="A", price=1.0)
        b = Product(id="2", title="B", price=1.0)
        a.tags.append("x")
        self.assertEqual(b.tags, [])

    def test_unreadable_price_is_nan(self) -> None:
        """A non-numeric price is kept as NaN for validation to drop."""
        for raw in ("N/A", {"amount": 3}, True, "inf"):
            with self.subTest(price=raw):
                product = Product.from_document(
                    "006", {"title": "X", "price": raw}
                )
                self.assertTrue(math.isnan(product.price))

    def test_numeric_string_price(self) -> None:
        product = Product.from_document("007", {"title": "X", "price": "12.5"})
        self.assertEqual(product.price, 12.5)

    def test_missing_price_is_zero(self) -> None:
        product = Product.from_document("008", {"title": "X"})
        self.assertEqual(product.price, 0.0)

    def test_malformed_optional_fields_fall_back(self) -> None:
        product = Product.from_document(
            "009",
            {
                "title": "X",
                "price": 1,
                "stock": "many",
                "rating": {"rate": "high", "count": None},
                "images": "one.png",
                "tags": 7,
                "reviews": {"rating": 5},
            },
        )
        self.assertEqual(product.stock, 0)
        self.assertEqual(product.rating, RatingSummary())
        self.assertEqual(product.images, [])
        self.assertEqual(product.tags, [])
        self.assertEqual(product.reviews, [])


class TestReview(unittest.TestCase):
    """Review parsing and serialisation."""

    def test_short_field_names(self) -> None:
        """Reviews written with name/email are still understood."""
        review = Review.from_dict(
            {"rating": "4", "comment": "ok", "name": "Bo", "email": "b@x.io"},
            review_id="r1",
        )
        self.assertEqual(review.rating, 4)
        self.assertEqual(review.reviewer_name, "Bo")
        self.assertEqual(review.reviewer_email, "b@x.io")
        self.assertEqual(review.id, "r1")

    def test_bad_rating_becomes_zero(self) -> None:
        review = Review.from_dict({"rating": "five", "comment": "?"})
        self.assertEqual(review.rating, 0)
        infinite = Review.from_dict({"rating": float("inf"), "comment": "?"})
        self.assertEqual(infinite.rating, 0)

    def test_to_document_omits_id(self) -> None:
        review = Review(rating=3, comment="meh", id="abc")
        self.assertNotIn("id", review.to_document())
        self.assertEqual(review.to_dict()["id"], "abc")

    def test_utc_now_iso_format(self) -> None:
        self.assertRegex(
            utc_now_iso(), r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$"
        )


if __name__ == "__main__":
    unittest.main()
