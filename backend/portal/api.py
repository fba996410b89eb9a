# backend/portal/api.py
import logging
from typing import Any, Optional

import httpx

from portal.session import SessionStore

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx answer or transport failure. status_code is 0 for transport errors."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class ApiClient:
    def __init__(self, base_url: str, session: SessionStore, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.session = session
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport)

    async def request(self, method: str, path: str, *, json=None, params=None, files=None) -> Any:
        headers = {}
        if self.session.token:
            headers["Authorization"] = f"Bearer {self.session.token}"
        try:
            response = await self._client.request(method, path, json=json, params=params, files=files, headers=headers)
        except httpx.RequestError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(0, str(e))

        if response.status_code >= 400:
            try:
                body = response.json()
                detail = body.get("detail") if isinstance(body, dict) else body
            except ValueError:
                detail = response.text
            logger.warning("%s %s -> %s %s", method, path, response.status_code, detail)
            raise ApiError(response.status_code, detail)

        if not response.content:
            return None
        return response.json()

    async def get(self, path: str, **kwargs) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs) -> Any:
        return await self.request("POST", path, **kwargs)

    async def patch(self, path: str, **kwargs) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def post_workflow(self, name: str, payload: dict) -> Any:
        # Workflow endpoints take the fields wrapped in "payload"
        return await self.post(f"/webhook/{name}", json={"payload": payload})

    async def search_catalog(self, query: str) -> list:
        return await self.get("/catalog/search", params={"q": query})

    async def aclose(self):
        await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()
