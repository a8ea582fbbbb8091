"""Async HTTP client for the family finance REST API.

The bearer token is passed per request. The underlying ``httpx.AsyncClient``
never carries an Authorization header of its own, so a logout cannot leave a
stale credential behind.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from famfin.shared.core.configuration import ApiConfig
from famfin.shared.infrastructure.api.errors import ApiConnectionError, error_for_status

logger = logging.getLogger(__name__)


class ApiClient:
    """Thin JSON wrapper over ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: ApiConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.config = config
        self._client = httpx.AsyncClient(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            headers={"User-Agent": config.user_agent, "Accept": "application/json"},
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _auth_headers(token: Optional[str]) -> Dict[str, str]:
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def request(
        self,
        method: str,
        path: str,
        *,
        token: Optional[str] = None,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Send a request and return the decoded JSON body.

        Raises:
            ApiConnectionError: transport failure (DNS, refused, reset, timeout)
            ApiError: any non-2xx response, subclassed by status
        """
        clean_params = {k: v for k, v in (params or {}).items() if v is not None}
        logger.debug(f"{method.upper()} {path} params={clean_params}")

        try:
            response = await self._client.request(
                method.upper(),
                path,
                json=json,
                params=clean_params or None,
                headers=self._auth_headers(token),
            )
        except httpx.HTTPError as exc:
            logger.warning(f"{method.upper()} {path} failed: {exc!r}")
            raise ApiConnectionError(f"Connection failed: {exc}") from exc

        payload = self._decode(response)
        if response.is_error:
            raise error_for_status(response.status_code, payload, response.reason_phrase)
        return payload

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def get(self, path: str, *, token: Optional[str] = None, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, token=token, params=params)

    async def post(self, path: str, *, token: Optional[str] = None, json: Any = None) -> Any:
        return await self.request("POST", path, token=token, json=json)

    async def put(self, path: str, *, token: Optional[str] = None, json: Any = None) -> Any:
        return await self.request("PUT", path, token=token, json=json)

    async def delete(self, path: str, *, token: Optional[str] = None) -> Any:
        return await self.request("DELETE", path, token=token)
