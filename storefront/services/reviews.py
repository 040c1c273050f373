# storefront/services/reviews.py

"""Review mutations with author-only edit and delete."""

import logging
from typing import Any

from storefront.config.settings import Settings
from storefront.models.review import Review, utc_now_iso
from storefront.models.user import AuthUser
from storefront.services.catalog import CatalogService
from storefront.store.errors import (
    PermissionDeniedError,
    StorefrontError,
    ValidationError,
)
from storefront.store.firestore_client import FirestoreClient

logger = logging.getLogger("storefront.reviews")


def parse_rating(value: Any) -> int:
    """Coerce a submitted rating to an int within the allowed range."""
    if isinstance(value, bool):
        raise ValidationError("Rating must be a whole number")
    try:
        rating = int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise ValidationError("Rating must be a whole number") from exc
    low, high = Settings.MIN_RATING, Settings.MAX_RATING
    if not low <= rating <= high:
        raise ValidationError(f"Rating must be between {low} and {high}")
    return rating


def clean_comment(value: Any) -> str:
    """Strip a submitted comment; reject empty ones."""
    comment = str(value or "").strip()
    if not comment:
        raise ValidationError("Please provide a rating and a comment.")
    return comment


def is_author(user: AuthUser | None, review: Review) -> bool:
    """True when ``user`` wrote ``review`` (emails compared case-blind)."""
    if user is None or not user.email or not review.reviewer_email:
        return False
    return user.email.lower() == review.reviewer_email.lower()


class ReviewService:
    """Add, edit and delete reviews in ``products/{id}/reviews``."""

    def __init__(
        self,
        client: FirestoreClient | None = None,
        catalog: CatalogService | None = None,
    ) -> None:
        self.settings = Settings()
        self.client = client or FirestoreClient()
        self.catalog = catalog or CatalogService(self.client)

    def _reviews_path(self, stored_id: str) -> str:
        return (
            f"{self.settings.PRODUCTS_COLLECTION}/{stored_id}/"
            f"{self.settings.REVIEWS_COLLECTION}"
        )

    def _owned_review(
        self, product_id: str, review_id: str, user: AuthUser
    ) -> tuple[str, Review]:
        """Resolve the product, load the review and check authorship."""
        if not review_id:
            raise ValidationError("Review ID is required")
        stored_id = self.catalog.resolve_product_id(product_id)
        data = self.client.get_document(
            f"{self._reviews_path(stored_id)}/{review_id}"
        )
        review = Review.from_dict(data, review_id=review_id)
        if not is_author(user, review):
            logger.warning(
                "User %s may not modify review %s on product %s",
                user.email,
                review_id,
                stored_id,
            )
            raise PermissionDeniedError(
                "Only the author can change this review"
            )
        return stored_id, review

    def add_review(
        self,
        product_id: str,
        user: AuthUser,
        rating: Any,
        comment: Any,
        reviewer_name: str | None = None,
    ) -> Review:
        """Create a review authored by ``user`` and return it."""
        review = Review(
            rating=parse_rating(rating),
            comment=clean_comment(comment),
            reviewer_name=(
                reviewer_name
                or user.display_name
                or self.settings.ANONYMOUS_REVIEWER
            ),
            reviewer_email=user.email,
            date=utc_now_iso(),
        )
        try:
            stored_id = self.catalog.resolve_product_id(product_id)
            review.id = self.client.create_document(
                self._reviews_path(stored_id),
                review.to_document(),
                id_token=user.id_token or None,
            )
        except StorefrontError:
            logger.error(
                "Error adding review to product %s", product_id, exc_info=True
            )
            raise
        logger.info(
            "Review %s added to product %s by %s",
            review.id,
            stored_id,
            user.email,
        )
        return review

    def edit_review(
        self,
        product_id: str,
        review_id: str,
        user: AuthUser,
        rating: Any,
        comment: Any,
    ) -> Review:
        """Change the rating and comment of the user's own review."""
        new_rating = parse_rating(rating)
        new_comment = clean_comment(comment)
        stored_id, review = self._owned_review(product_id, review_id, user)

        review.rating = new_rating
        review.comment = new_comment
        review.date = utc_now_iso()
        try:
            self.client.update_document(
                f"{self._reviews_path(stored_id)}/{review_id}",
                {
                    "rating": review.rating,
                    "comment": review.comment,
                    "date": review.date,
                },
                id_token=user.id_token or None,
            )
        except StorefrontError:
            logger.error("Error editing review %s", review_id, exc_info=True)
            raise
        return review

    def delete_review(
        self, product_id: str, review_id: str, user: AuthUser
    ) -> None:
        """Delete the user's own review."""
        stored_id, _ = self._owned_review(product_id, review_id, user)
        try:
            self.client.delete_document(
                f"{self._reviews_path(stored_id)}/{review_id}",
                id_token=user.id_token or None,
            )
        except StorefrontError:
            logger.error("Error deleting review %s", review_id, exc_info=True)
            raise
