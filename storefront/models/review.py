# storefront/models/review.py

"""Review model for a product's reviews sub-collection."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with milliseconds."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


@dataclass
class Review:
    """A single review written by an authenticated user."""

    rating: int
    comment: str
    reviewer_name: str = ""
    reviewer_email: str = ""
    date: str = ""
    id: str = ""  # empty for reviews embedded in the product document

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], review_id: str = ""
    ) -> "Review":
        """Build a Review from stored fields.

        Reviews written by the web UI used ``name``/``email`` while the
        API and the seed data use ``reviewerName``/``reviewerEmail``.
        """
        try:
            rating = int(data.get("rating") or 0)
        except (TypeError, ValueError, OverflowError):
            rating = 0
        return cls(
            rating=rating,
            comment=str(data.get("comment") or ""),
            reviewer_name=str(
                data.get("reviewerName") or data.get("name") or ""
            ),
            reviewer_email=str(
                data.get("reviewerEmail") or data.get("email") or ""
            ),
            date=str(data.get("date") or ""),
            id=review_id or str(data.get("id") or ""),
        )

    def to_document(self) -> dict[str, Any]:
        """Fields written to the store (the id is the document name)."""
        return {
            "rating": self.rating,
            "comment": self.comment,
            "reviewerName": self.reviewer_name,
            "reviewerEmail": self.reviewer_email,
            "date": self.date,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialise for JSON output, including the id."""
        return {"id": self.id, **self.to_document()}
