"""Async blob sidecar client using httpx for non-blocking fetches."""

import asyncio
import logging
from typing import Optional

import httpx

from .client import (
    BLOB_SIDECARS_PATH,
    HTTP_INTERNAL_SERVER_ERROR,
    HTTP_OK,
    FetchResult,
    Format,
    decode_body,
)
from .errors import DecodeError, TransportError
from .models import BlobSidecars

logger = logging.getLogger(__name__)


class AsyncBlobSidecarClient:
    """Async counterpart of BlobSidecarClient.

    Same contract: one GET per call, status codes passed through, transport
    and decode failures returned inside the FetchResult.
    """

    def __init__(self, url: str, client: Optional[httpx.AsyncClient] = None):
        """Initialize async client. Performs no network I/O.

        :param url: Beacon node base URL (scheme and host, no path).
        :param client: Optional preconfigured httpx.AsyncClient; its timeout applies.
        """
        self.url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient()

    async def __aenter__(self) -> "AsyncBlobSidecarClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _full_url(self, path: str) -> str:
        return self.url.rstrip("/") + "/" + path.lstrip("/")

    def sidecars_url(self, block_id: str) -> str:
        return self._full_url(BLOB_SIDECARS_PATH.format(block_id=block_id))

    async def fetch_sidecars(self, block_id: str, fmt: Format = Format.JSON) -> FetchResult:
        """Fetch the blob sidecars for a slot or block root asynchronously.

        :param block_id: Slot number, block root, or named block id; passed through as-is.
        :param fmt: Response encoding to negotiate.
        :return: FetchResult with the same semantics as the sync client.
        """
        url = self.sidecars_url(block_id)
        headers = {"Accept": fmt.value}
        logger.debug(f"GET {url} (Accept: {fmt.value})")
        try:
            resp = await self._client.get(url, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Sidecar request to {url} failed: {e}")
            return FetchResult(
                HTTP_INTERNAL_SERVER_ERROR,
                BlobSidecars(),
                TransportError(f"failed to fetch sidecars: {e}", e),
            )

        # httpx reads the body fully and closes the response before get() returns
        logger.debug(f"GET {url} -> {resp.status_code}")
        if resp.status_code != HTTP_OK:
            return FetchResult(resp.status_code, BlobSidecars())
        try:
            # SSZ decoding of full blobs is CPU bound; keep it off the event loop
            sidecars = await asyncio.to_thread(decode_body, resp.content, fmt, resp.headers.get("Content-Type"))
        except DecodeError as e:
            logger.warning(f"Could not decode sidecars from {url}: {e}")
            return FetchResult(resp.status_code, BlobSidecars(), e)
        return FetchResult(resp.status_code, sidecars)
