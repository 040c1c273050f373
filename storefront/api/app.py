# storefront/api/app.py

"""JSON HTTP API over the catalog and review services."""

import logging
from functools import wraps
from typing import Any, Callable, TypeVar, cast

from flask import Flask, g, jsonify, request
from flask.typing import ResponseReturnValue

from storefront.config.settings import Settings
from storefront.models.query import PageCursor, ProductQuery
from storefront.services.catalog import CatalogService
from storefront.services.reviews import ReviewService
from storefront.store.auth_client import AuthClient
from storefront.store.errors import (
    AuthError,
    AuthServiceError,
    NotFoundError,
    PermissionDeniedError,
    QueryError,
    StoreError,
    StorefrontError,
    ValidationError,
)

logger = logging.getLogger("storefront.api")

F = TypeVar("F", bound=Callable[..., ResponseReturnValue])


def require_user(fn: F) -> F:
    """Reject the request with 401 unless a valid bearer token was sent."""

    @wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> ResponseReturnValue:
        if g.get("user") is None:
            rejected = g.get("auth_error")
            if rejected is not None:
                raise rejected
            return jsonify({"message": "Unauthorized: No token provided"}), 401
        return fn(*args, **kwargs)

    return cast(F, wrapper)


def _int_arg(name: str, alias: str, default: int) -> int:
    raw = request.args.get(name) or request.args.get(alias)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise QueryError(f"'{name}' must be an integer") from exc


def product_query_from_args() -> ProductQuery:
    """Build and validate a ``ProductQuery`` from the query string."""
    args = request.args
    cursor_token = args.get("cursor", "")
    query = ProductQuery(
        category=args.get("category", ""),
        search=args.get("search", ""),
        sort_by=(
            args.get("sortBy") or args.get("sort") or Settings.DEFAULT_SORT_FIELD
        ),
        order=args.get("order") or Settings.DEFAULT_ORDER,
        page_size=_int_arg("pageSize", "limit", Settings.PAGE_SIZE),
        cursor=PageCursor.decode(cursor_token) if cursor_token else None,
        direction=args.get("direction") or "next",
    )
    query.validate()
    return query


def _json_body() -> dict[str, Any]:
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def create_app(
    catalog: CatalogService | None = None,
    reviews: ReviewService | None = None,
    auth: AuthClient | None = None,
) -> Flask:
    """Application factory; services default to live REST clients."""
    app = Flask(__name__)
    catalog = catalog or CatalogService()
    reviews = reviews or ReviewService(catalog.client, catalog)
    auth = auth or AuthClient()

    @app.before_request
    def verify_bearer_token() -> None:
        # Public routes ignore a bad token; require_user raises it.
        g.user = None
        g.auth_error = None
        header = request.headers.get("Authorization", "")
        if not header:
            return
        if not header.startswith("Bearer "):
            g.auth_error = AuthError(
                "MISSING_ID_TOKEN", "Unauthorized: No token provided"
            )
            return
        token = header.split("Bearer ", 1)[1].strip()
        try:
            g.user = auth.verify_id_token(token)
        except AuthError as exc:
            logger.warning("Rejected bearer token: %s", exc)
            g.auth_error = exc

    # ── Error mapping ────────────────────────────────────

    @app.errorhandler(ValidationError)
    @app.errorhandler(QueryError)
    def bad_request(exc: StorefrontError) -> ResponseReturnValue:
        return jsonify({"message": str(exc)}), 400

    @app.errorhandler(AuthError)
    def unauthorized(exc: AuthError) -> ResponseReturnValue:
        return jsonify({"message": str(exc)}), 401

    @app.errorhandler(AuthServiceError)
    def auth_unavailable(exc: AuthServiceError) -> ResponseReturnValue:
        logger.error("Identity provider error: %s", exc)
        return jsonify({"error": str(exc)}), 502

    @app.errorhandler(PermissionDeniedError)
    def forbidden(exc: PermissionDeniedError) -> ResponseReturnValue:
        return jsonify({"message": str(exc)}), 403

    @app.errorhandler(NotFoundError)
    def not_found(exc: NotFoundError) -> ResponseReturnValue:
        return jsonify({"error": str(exc)}), 404

    @app.errorhandler(StoreError)
    def store_failed(exc: StoreError) -> ResponseReturnValue:
        logger.error("Document store error: %s", exc)
        return jsonify({"error": str(exc)}), 502

    @app.errorhandler(StorefrontError)
    def failed(exc: StorefrontError) -> ResponseReturnValue:
        logger.error("Unhandled storefront error: %s", exc, exc_info=exc)
        return jsonify({"error": str(exc)}), 500

    # ── Products ─────────────────────────────────────────

    @app.get("/api/products")
    def list_products() -> ResponseReturnValue:
        page = catalog.list_products(product_query_from_args())
        return jsonify(
            {
                "products": [
                    p.to_dict(include_reviews=False) for p in page.products
                ],
                "nextCursor": (
                    page.next_cursor.encode() if page.next_cursor else None
                ),
                "prevCursor": (
                    page.prev_cursor.encode() if page.prev_cursor else None
                ),
            }
        )

    @app.get("/api/products/count")
    def count_products() -> ResponseReturnValue:
        count = catalog.count_products(request.args.get("category", ""))
        return jsonify({"count": count})

    @app.get("/api/products/<product_id>")
    def get_product(product_id: str) -> ResponseReturnValue:
        return jsonify(catalog.get_product(product_id).to_dict())

    # ── Reviews ──────────────────────────────────────────

    @app.get("/api/products/<product_id>/reviews")
    def list_reviews(product_id: str) -> ResponseReturnValue:
        stored_id = catalog.resolve_product_id(product_id)
        return jsonify(
            {"reviews": [r.to_dict() for r in catalog.list_reviews(stored_id)]}
        )

    @app.post("/api/products/<product_id>/reviews")
    @require_user
    def add_review(product_id: str) -> ResponseReturnValue:
        body = _json_body()
        if not body.get("rating") or not body.get("comment"):
            return jsonify({"message": "Rating and comment are required"}), 400
        review = reviews.add_review(
            product_id,
            g.user,
            body["rating"],
            body["comment"],
            reviewer_name=body.get("reviewerName") or None,
        )
        return (
            jsonify(
                {"message": "Review added successfully", "review": review.to_dict()}
            ),
            201,
        )

    @app.put("/api/products/<product_id>/reviews")
    @require_user
    def edit_review(product_id: str) -> ResponseReturnValue:
        body = _json_body()
        if not body.get("reviewId") or not body.get("rating") or not body.get(
            "comment"
        ):
            return (
                jsonify({"message": "Review ID, rating, and comment are required"}),
                400,
            )
        review = reviews.edit_review(
            product_id,
            str(body["reviewId"]),
            g.user,
            body["rating"],
            body["comment"],
        )
        return jsonify(
            {"message": "Review updated successfully", "review": review.to_dict()}
        )

    @app.delete("/api/products/<product_id>/reviews")
    @require_user
    def delete_review(product_id: str) -> ResponseReturnValue:
        body = _json_body()
        if not body.get("reviewId"):
            return jsonify({"message": "Review ID is required"}), 400
        reviews.delete_review(product_id, str(body["reviewId"]), g.user)
        return jsonify({"message": "Review deleted successfully"})

    # ── Categories & auth check ──────────────────────────

    @app.get("/api/categories")
    def list_categories() -> ResponseReturnValue:
        return jsonify({"categories": catalog.list_categories()})

    @app.get("/api/secure-endpoint")
    @require_user
    def secure_endpoint() -> ResponseReturnValue:
        return jsonify({"message": "Authorized", "uid": g.user.uid})

    return app
