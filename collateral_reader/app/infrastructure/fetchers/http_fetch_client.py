from __future__ import annotations

import asyncio
import logging
from typing import Mapping

import httpx

from collateral_reader.app.domain.errors import FetchError, FetchErrorKind
from collateral_reader.app.domain.ports.out import RemoteFetchClient

logger = logging.getLogger(__name__)

_DEFAULT_TIMEOUT_S = 5.0


class HttpxFetchClient(RemoteFetchClient):
    """
    Remote fetch client on top of httpx.AsyncClient.

    - one shared AsyncClient (connection pooling across registry and RPC calls),
    - every request is bounded by `timeout_s` end to end (connect + read + body),
    - anything but HTTP 200 is an error; no retries here.

    `transport` is only meant for tests (httpx.MockTransport).
    """

    def __init__(
        self,
        *,
        timeout_s: float = _DEFAULT_TIMEOUT_S,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout_s = timeout_s
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout_s),
            transport=transport,
        )

    async def __aenter__(self) -> HttpxFetchClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get(self, url: str) -> bytes:
        return await self._request("GET", url)

    async def post(
        self,
        url: str,
        body: bytes,
        headers: Mapping[str, str] | None = None,
    ) -> bytes:
        return await self._request("POST", url, content=body, headers=dict(headers or {}))

    async def _request(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> bytes:
        try:
            response = await asyncio.wait_for(
                self._client.request(method, url, content=content, headers=headers),
                timeout=self._timeout_s,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            logger.warning("%s %s timed out after %ss", method, url, self._timeout_s)
            raise FetchError(FetchErrorKind.TIMEOUT, url=url) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise FetchError(FetchErrorKind.TRANSPORT, url=url, detail=str(exc)) from exc

        if response.status_code != 200:
            logger.warning("Unexpected http status code %s for %s", response.status_code, url)
            raise FetchError(
                FetchErrorKind.NON_SUCCESS_STATUS,
                url=url,
                status_code=response.status_code,
            )

        return response.content
