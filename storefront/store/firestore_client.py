# storefront/store/firestore_client.py

"""Thin client for the Firestore REST API."""

import logging
from typing import Any
from urllib.parse import quote

from curl_cffi import requests as curl_requests

from storefront.config.settings import Settings
from storefront.store.codec import (
    decode_document,
    decode_value,
    encode_fields,
)
from storefront.store.errors import (
    NotFoundError,
    PermissionDeniedError,
    StoreError,
)

Params = list[tuple[str, str]]


class FirestoreClient:
    """Document reads, writes and structured queries over HTTP.

    Paths are relative to the database root, e.g. ``products/007`` or
    ``products/007/reviews``.  Writes may carry the signed-in user's ID
    token so that the database's security rules see the author.
    """

    def __init__(
        self,
        project_id: str | None = None,
        database: str | None = None,
        api_key: str | None = None,
    ) -> None:
        self.settings = Settings()
        self.logger = logging.getLogger("storefront.firestore")
        self.project_id = project_id or self.settings.FIREBASE_PROJECT_ID
        self.database = database or self.settings.FIRESTORE_DATABASE
        self.api_key = (
            api_key if api_key is not None else self.settings.FIREBASE_API_KEY
        )
        self.session = curl_requests.Session()
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    # ── Resource names ───────────────────────────────────

    @property
    def base_url(self) -> str:
        """REST root, pointing at the emulator when configured."""
        host = self.settings.FIRESTORE_EMULATOR_HOST
        if host:
            return f"http://{host}/v1"
        return self.settings.FIRESTORE_BASE_URL

    @property
    def root(self) -> str:
        """Resource name of the database's document root."""
        return (
            f"projects/{self.project_id}"
            f"/databases/{self.database}/documents"
        )

    def document_name(self, path: str) -> str:
        """Full resource name for a root-relative document path."""
        return f"{self.root}/{path.strip('/')}" if path else self.root

    def _url(self, name: str, suffix: str = "") -> str:
        return f"{self.base_url}/{quote(name, safe='/()')}{suffix}"

    # ── Transport ────────────────────────────────────────

    def _request(
        self,
        method: str,
        url: str,
        params: Params | None = None,
        payload: dict[str, Any] | None = None,
        id_token: str | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Maps HTTP failures onto the storefront error types.  There is
        no retry: the caller decides what to show the user.
        """
        query: Params = list(params or [])
        if self.api_key:
            query.append(("key", self.api_key))
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if id_token:
            headers["Authorization"] = f"Bearer {id_token}"

        try:
            resp = self.session.request(
                method,
                url,
                params=query or None,
                json=payload,
                headers=headers,
                timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.error(
                "[firestore] %s %s failed: %s",
                method,
                url,
                exc,
                exc_info=True,
            )
            raise StoreError(f"Document store unreachable: {exc}") from exc

        if resp.status_code == 200:
            return resp.json() if resp.content else {}

        message = self._error_message(resp)
        self.logger.warning(
            "[firestore] HTTP %d on %s %s: %s",
            resp.status_code,
            method,
            url,
            message,
        )
        if resp.status_code == 404:
            raise NotFoundError(message)
        if resp.status_code in (401, 403):
            raise PermissionDeniedError(message)
        raise StoreError(message, status=resp.status_code)

    @staticmethod
    def _error_message(resp: curl_requests.Response) -> str:
        """Pull ``error.message`` out of a Google API error body."""
        try:
            body = resp.json()
        except Exception:
            return f"HTTP {resp.status_code}"
        if isinstance(body, list) and body:
            body = body[0]
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return str(error["message"])
        return f"HTTP {resp.status_code}"

    # ── Reads ────────────────────────────────────────────

    def get_document(self, path: str) -> dict[str, Any]:
        """Fetch one document's fields; raises ``NotFoundError``."""
        body = self._request("GET", self._url(self.document_name(path)))
        _, data = decode_document(body)
        return data

    def list_documents(
        self, collection_path: str, page_size: int = 300
    ) -> list[tuple[str, dict[str, Any]]]:
        """Return ``(id, fields)`` for every document in a collection."""
        url = self._url(self.document_name(collection_path))
        results: list[tuple[str, dict[str, Any]]] = []
        page_token = ""
        while True:
            params: Params = [("pageSize", str(page_size))]
            if page_token:
                params.append(("pageToken", page_token))
            body = self._request("GET", url, params=params)
            for document in body.get("documents", []):
                results.append(decode_document(document))
            page_token = body.get("nextPageToken", "")
            if not page_token:
                break
        self.logger.debug(
            "Listed %d documents in %s", len(results), collection_path
        )
        return results

    def run_query(
        self, structured_query: dict[str, Any], parent: str = ""
    ) -> list[tuple[str, dict[str, Any]]]:
        """Run a structured query; returns ``(resource name, fields)``.

        Full resource names are returned (not ids) because pagination
        cursors reference documents by name.
        """
        url = self._url(self.document_name(parent), ":runQuery")
        body = self._request(
            "POST", url, payload={"structuredQuery": structured_query}
        )
        results: list[tuple[str, dict[str, Any]]] = []
        for row in body or []:
            document = row.get("document")
            if document is None:
                continue
            _, data = decode_document(document)
            results.append((document["name"], data))
        return results

    def run_count(
        self, structured_query: dict[str, Any], parent: str = ""
    ) -> int:
        """Count the documents matching a structured query."""
        url = self._url(
            self.document_name(parent), ":runAggregationQuery"
        )
        payload = {
            "structuredAggregationQuery": {
                "structuredQuery": structured_query,
                "aggregations": [{"alias": "count", "count": {}}],
            }
        }
        body = self._request("POST", url, payload=payload)
        for row in body or []:
            fields = row.get("result", {}).get("aggregateFields", {})
            if "count" in fields:
                return int(decode_value(fields["count"]))
        return 0

    # ── Writes ───────────────────────────────────────────

    def create_document(
        self,
        collection_path: str,
        data: dict[str, Any],
        document_id: str | None = None,
        id_token: str | None = None,
    ) -> str:
        """Create a document and return its id (server-assigned if None)."""
        parent, _, collection_id = collection_path.strip("/").rpartition("/")
        url = self._url(self.document_name(parent), f"/{collection_id}")
        params: Params = []
        if document_id:
            params.append(("documentId", document_id))
        body = self._request(
            "POST",
            url,
            params=params,
            payload=encode_fields(data),
            id_token=id_token,
        )
        doc_id, _ = decode_document(body)
        self.logger.info("Created %s/%s", collection_path, doc_id)
        return doc_id

    def set_document(
        self,
        path: str,
        data: dict[str, Any],
        id_token: str | None = None,
    ) -> None:
        """Create or overwrite a document with exactly ``data``."""
        self._request(
            "PATCH",
            self._url(self.document_name(path)),
            payload=encode_fields(data),
            id_token=id_token,
        )
        self.logger.debug("Wrote %s", path)

    def update_document(
        self,
        path: str,
        data: dict[str, Any],
        id_token: str | None = None,
    ) -> None:
        """Update only the given fields of an existing document."""
        params: Params = [
            ("updateMask.fieldPaths", key) for key in data
        ]
        params.append(("currentDocument.exists", "true"))
        self._request(
            "PATCH",
            self._url(self.document_name(path)),
            params=params,
            payload=encode_fields(data),
            id_token=id_token,
        )
        self.logger.info("Updated %s (%s)", path, ", ".join(data))

    def delete_document(
        self, path: str, id_token: str | None = None
    ) -> None:
        """Delete a document (no error if it is already gone)."""
        self._request(
            "DELETE",
            self._url(self.document_name(path)),
            id_token=id_token,
        )
        self.logger.info("Deleted %s", path)
