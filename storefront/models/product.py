# storefront/models/product.py

"""Product data model as rendered from a catalog document."""

import math
from dataclasses import dataclass, field
from typing import Any

from storefront.models.review import Review


def _as_float(value: Any, fallback: float = 0.0) -> float:
    """Read a loosely typed stored value as a finite float."""
    if isinstance(value, bool):
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    return number if math.isfinite(number) else fallback


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


@dataclass
class RatingSummary:
    """Average rating and number of ratings for a product."""

    rate: float = 0.0
    count: int = 0

    @classmethod
    def from_value(cls, value: Any) -> "RatingSummary":
        """Accept both ``{"rate", "count"}`` maps and bare numbers."""
        if isinstance(value, dict):
            return cls(
                rate=_as_float(value.get("rate")),
                count=int(_as_float(value.get("count"))),
            )
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return cls(rate=_as_float(value), count=0)
        return cls()


@dataclass
class Product:
    """A render-time copy of one document in the products collection."""

    id: str
    title: str
    price: float
    category: str = ""
    stock: int = 0
    description: str = ""
    images: list[str] = field(default_factory=lambda: list[str]())
    rating: RatingSummary = field(default_factory=RatingSummary)
    tags: list[str] = field(default_factory=lambda: list[str]())
    reviews: list[Review] = field(default_factory=lambda: list[Review]())

    @property
    def in_stock(self) -> bool:
        """True when at least one unit is available."""
        return self.stock > 0

    @property
    def main_image(self) -> str:
        """First image URL, or an empty string."""
        return self.images[0] if self.images else ""

    @classmethod
    def from_document(
        cls, doc_id: str, data: dict[str, Any]
    ) -> "Product":
        """Build a Product from decoded document fields.

        Older uploads store a single ``image``/``thumbnail`` string
        instead of an ``images`` list; both shapes are accepted.  A price
        that is present but not a number becomes NaN so validation drops
        the product; other unreadable numbers fall back to zero.
        """
        images = [str(i) for i in _as_list(data.get("images")) if i]
        if not images:
            single = data.get("image") or data.get("thumbnail")
            if single:
                images = [str(single)]

        reviews = [
            Review.from_dict(r)
            for r in _as_list(data.get("reviews"))
            if isinstance(r, dict)
        ]

        raw_price = data.get("price")
        price = 0.0 if raw_price is None else _as_float(raw_price, math.nan)

        return cls(
            id=doc_id,
            title=str(data.get("title") or ""),
            price=price,
            category=str(data.get("category") or ""),
            stock=int(_as_float(data.get("stock"))),
            description=str(data.get("description") or ""),
            images=images,
            rating=RatingSummary.from_value(data.get("rating")),
            tags=[str(t) for t in _as_list(data.get("tags"))],
            reviews=reviews,
        )

    def to_dict(self, include_reviews: bool = True) -> dict[str, Any]:
        """Serialise to the JSON shape used by the API and CLI."""
        out: dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "category": self.category,
            "stock": self.stock,
            "description": self.description,
            "images": list(self.images),
            "rating": {
                "rate": self.rating.rate,
                "count": self.rating.count,
            },
            "tags": list(self.tags),
        }
        if include_reviews:
            out["reviews"] = [r.to_dict() for r in self.reviews]
        return out
