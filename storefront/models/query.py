# storefront/models/query.py

"""Catalog query parameters, pagination cursors and result pages."""

import base64
import binascii
import json
from dataclasses import dataclass, field, replace
from typing import Any

from storefront.config.settings import Settings
from storefront.models.product import Product
from storefront.store.errors import QueryError

_NUMBER = (int, float)
_NONE = type(None)

# JSON types a cursor value may hold for each sort field; None is a
# document missing the field.
_CURSOR_VALUE_TYPES: dict[str, tuple[type, ...]] = {
    "id": (_NONE,),
    "price": (*_NUMBER, _NONE),
    "stock": (*_NUMBER, _NONE),
    "rating.rate": (*_NUMBER, _NONE),
    "title": (str, _NONE),
}


@dataclass(frozen=True)
class PageCursor:
    """Opaque handle to the boundary document of a page.

    ``value`` is the boundary document's value for ``sort_field`` and
    ``document`` its full resource name (the tie-break key).
    """

    sort_field: str
    value: Any
    document: str

    def encode(self) -> str:
        """Serialise to a URL-safe token."""
        raw = json.dumps(
            [self.sort_field, self.value, self.document],
            separators=(",", ":"),
        ).encode("utf-8")
        return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")

    @classmethod
    def decode(cls, token: str) -> "PageCursor":
        """Parse a token produced by :meth:`encode`.

        Raises ``QueryError`` for anything that is not a valid token.
        """
        padded = token + "=" * (-len(token) % 4)
        try:
            raw = base64.urlsafe_b64decode(padded.encode("ascii"))
            sort_field, value, document = json.loads(raw)
        except (
            binascii.Error,
            UnicodeError,
            ValueError,
            TypeError,
        ) as exc:
            raise QueryError(f"Invalid page cursor: {token!r}") from exc
        if not isinstance(sort_field, str) or not isinstance(document, str):
            raise QueryError(f"Invalid page cursor: {token!r}")
        return cls(sort_field=sort_field, value=value, document=document)

    def check(self, sort_by: str) -> None:
        """Raise ``QueryError`` unless this cursor fits a ``sort_by`` list."""
        if self.sort_field != sort_by:
            raise QueryError(
                "Cursor was issued for a different sort field "
                f"('{self.sort_field}' != '{sort_by}')"
            )
        parent, _, doc_id = self.document.rpartition("/")
        collection = parent.rsplit("/", 1)[-1]
        if not doc_id or collection != Settings.PRODUCTS_COLLECTION:
            raise QueryError(
                f"Cursor does not point at a product: {self.document!r}"
            )
        allowed = _CURSOR_VALUE_TYPES.get(sort_by)
        if allowed is not None and (
            isinstance(self.value, bool) or not isinstance(self.value, allowed)
        ):
            raise QueryError(
                f"Cursor value {self.value!r} does not fit sort field "
                f"'{sort_by}'"
            )


@dataclass(frozen=True)
class ProductQuery:
    """UI-selected parameters for one page of the product list."""

    category: str = ""
    search: str = ""
    sort_by: str = Settings.DEFAULT_SORT_FIELD
    order: str = Settings.DEFAULT_ORDER
    page_size: int = Settings.PAGE_SIZE
    cursor: PageCursor | None = None
    direction: str = "next"  # "next" or "prev" relative to cursor

    def validate(self) -> None:
        """Raise ``QueryError`` on unsupported parameters."""
        if self.sort_by not in Settings.SORTABLE_FIELDS:
            allowed = ", ".join(Settings.SORTABLE_FIELDS)
            raise QueryError(
                f"Cannot sort by '{self.sort_by}' (allowed: {allowed})"
            )
        if self.order not in ("asc", "desc"):
            raise QueryError(f"Order must be 'asc' or 'desc', not '{self.order}'")
        if self.direction not in ("next", "prev"):
            raise QueryError(
                f"Direction must be 'next' or 'prev', not '{self.direction}'"
            )
        if self.cursor is not None:
            self.cursor.check(self.sort_by)

    @property
    def limit(self) -> int:
        """Page size clamped to the configured bounds."""
        return max(1, min(self.page_size, Settings.MAX_PAGE_SIZE))

    def first_page(self) -> "ProductQuery":
        """Same filters, no cursor."""
        return replace(self, cursor=None, direction="next")

    def after(self, cursor: PageCursor) -> "ProductQuery":
        """Same filters, page following ``cursor``."""
        return replace(self, cursor=cursor, direction="next")

    def before(self, cursor: PageCursor) -> "ProductQuery":
        """Same filters, page preceding ``cursor``."""
        return replace(self, cursor=cursor, direction="prev")


@dataclass
class ProductPage:
    """One page of catalog results."""

    products: list[Product] = field(
        default_factory=lambda: list[Product]()
    )
    next_cursor: PageCursor | None = None
    prev_cursor: PageCursor | None = None
    filtered_count: int = 0
    invalid_count: int = 0

    @property
    def has_next(self) -> bool:
        return self.next_cursor is not None

    @property
    def has_prev(self) -> bool:
        return self.prev_cursor is not None
