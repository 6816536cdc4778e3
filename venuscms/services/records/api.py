"""Record store backed by the content REST API."""

import logging
from typing import Any

import httpx
from pydantic_core import to_jsonable_python

from venuscms.schemas.import_schemas import RecordType
from venuscms.services.records.base import PersistError, Record, RecordPage, RecordStore

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30.0


class ApiRecordStore(RecordStore):
    """Record store that talks to `{base_url}/{record_type}` over HTTP.

    Responses use the `{success, data, pagination}` envelope; the payload
    under `data` is unwrapped.
    """

    def __init__(
        self,
        record_type: RecordType,
        base_url: str,
        token: str | None = None,
        timeout: float = REQUEST_TIMEOUT,
        page_size: int = 100,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the API record store.

        Args:
            record_type: Record type; also the REST path segment.
            base_url: API root, e.g. http://localhost:3001/api.
            token: Bearer token, if the API requires one.
            timeout: Request timeout in seconds.
            page_size: Page size used by list_all.
            transport: Optional transport, used by tests.
        """
        super().__init__(record_type, page_size=page_size)
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    @property
    def endpoint(self) -> str:
        return f"/{self.record_type.value}"

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        """Send a request and return the decoded response body.

        Raises:
            PersistError: On a non-2xx status or a transport failure.
        """
        try:
            response = await self._client.request(
                method,
                path,
                json=to_jsonable_python(json) if json is not None else None,
                params=params,
            )
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise PersistError("Network error") from e

        if response.is_error:
            message = f"HTTP {response.status_code}"
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("message"):
                message = str(body["message"])
            raise PersistError(message, status_code=response.status_code)

        if not response.content:
            return {}
        return response.json()

    @staticmethod
    def _unwrap(body: Any) -> Any:
        if isinstance(body, dict) and body.get("data") is not None:
            return body["data"]
        return body

    async def create(self, record: Record) -> Record:
        body = await self._request("POST", self.endpoint, json=record)
        return self._unwrap(body)

    async def update(self, record_id: str, partial: Record) -> Record:
        body = await self._request("PUT", f"{self.endpoint}/{record_id}", json=partial)
        return self._unwrap(body)

    async def delete(self, record_id: str) -> None:
        await self._request("DELETE", f"{self.endpoint}/{record_id}")

    async def list(
        self,
        page: int = 1,
        limit: int = 10,
        category: str | None = None,
        published: bool | None = None,
    ) -> RecordPage:
        params: dict[str, Any] = {"page": page, "limit": limit}
        if category is not None:
            params["category"] = category
        if published is not None:
            params["published"] = "true" if published else "false"

        body = await self._request("GET", self.endpoint, params=params)
        data = self._unwrap(body) or []
        pagination = body.get("pagination", {}) if isinstance(body, dict) else {}
        return RecordPage(
            data=data,
            page=pagination.get("page", page),
            limit=pagination.get("limit", limit),
            total=pagination.get("total", len(data)),
            total_pages=pagination.get("totalPages", 1 if data else 0),
        )

    async def aclose(self) -> None:
        await self._client.aclose()
