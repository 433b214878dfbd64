"""
HTTP client for the product service
"""

import asyncio
from typing import Optional

import httpx

from gateway.proxy import (
    OutboundRequest,
    ProxyResponse,
    deadline_exceeded,
    map_upstream_error,
    relay_headers,
)
from shared.utils.logger import get_logger

logger = get_logger(__name__)


class BackendClient:
    """Owns the connection pool used to reach the backend"""

    def __init__(
        self,
        base_url: str,
        timeout: httpx.Timeout,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def open(self):
        """Create the underlying httpx client"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
                follow_redirects=False,
            )
            logger.info("Backend client opened", backend_url=self.base_url)

    async def close(self):
        """Close the underlying httpx client"""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Backend client closed")

    async def send(self, outbound: OutboundRequest) -> ProxyResponse:
        """
        Send one request to the backend.

        Transport failures and an exceeded deadline are mapped to a gateway
        error response; the call is never retried.
        """
        if self._client is None:
            raise RuntimeError("Backend client not opened")

        try:
            async with asyncio.timeout(outbound.deadline):
                response = await self._client.request(
                    outbound.method,
                    outbound.url,
                    headers=outbound.headers,
                    content=outbound.body or None,
                    timeout=outbound.timeout,
                )
        except httpx.RequestError as e:
            logger.warning(
                "Backend request failed",
                method=outbound.method,
                url=outbound.url,
                error_type=type(e).__name__,
                error=str(e),
            )
            return map_upstream_error(e)
        except TimeoutError:
            logger.warning(
                "Backend request exceeded deadline",
                method=outbound.method,
                url=outbound.url,
                deadline=outbound.deadline,
            )
            return deadline_exceeded()

        return ProxyResponse(
            status_code=response.status_code,
            headers=relay_headers(list(response.headers.multi_items()), outbound.method),
            body=response.content,
        )
