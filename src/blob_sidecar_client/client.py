import json
import logging
from enum import Enum
from typing import Callable, Dict, NamedTuple, Optional, Union

import requests

from .errors import BlobSidecarError, DecodeError, TransportError
from .models import BlobSidecars
from .ssz import decode_blob_sidecars

logger = logging.getLogger(__name__)

# Beacon API path for blob sidecars by slot or block root
BLOB_SIDECARS_PATH = "eth/v1/beacon/blob_sidecars/{block_id}"

HTTP_OK = 200
# Reported when no response was received at all
HTTP_INTERNAL_SERVER_ERROR = 500


class Format(str, Enum):
    """Response encodings a beacon node can serve, keyed by Accept media type."""
    JSON = "application/json"
    SSZ = "application/octet-stream"


class FetchResult(NamedTuple):
    """Outcome of a single sidecar fetch.

    Exactly one holds: ``error`` is set; status is 200 and ``sidecars``
    holds the decoded data; status is not 200 and ``sidecars`` is empty.
    """
    status_code: int
    sidecars: BlobSidecars
    error: Optional[BlobSidecarError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == HTTP_OK

    def raise_for_error(self) -> BlobSidecars:
        """Raise the carried error, if any, otherwise return the sidecars."""
        if self.error is not None:
            raise self.error
        return self.sidecars


def decode_json(body: bytes) -> BlobSidecars:
    try:
        obj = json.loads(body)
    except (ValueError, RecursionError) as e:
        # deeply nested arrays exhaust the decoder stack
        raise DecodeError(f"failed to decode json response: {e}", e) from e
    try:
        return BlobSidecars.from_json(obj)
    except DecodeError as e:
        raise DecodeError(f"failed to decode json response: {e}", e) from e


def decode_ssz(body: bytes) -> BlobSidecars:
    return BlobSidecars(data=decode_blob_sidecars(body))


DECODERS: Dict[Format, Callable[[bytes], BlobSidecars]] = {
    Format.JSON: decode_json,
    Format.SSZ: decode_ssz,
}


def decode_body(body: bytes, fmt: Format, content_type: Optional[str] = None) -> BlobSidecars:
    """Decode a 200 response body according to the requested format.

    The response Content-Type is not trusted over the requested format; a
    mismatch is only logged.

    :param body: Full response body.
    :param fmt: Format that was requested via Accept.
    :param content_type: Content-Type the server reported, if any.
    :return: Decoded sidecars.
    :raises DecodeError: If the body does not conform to ``fmt``.
    """
    if content_type and fmt.value not in content_type:
        logger.warning(f"Requested {fmt.value} but server replied with Content-Type {content_type}")
    return DECODERS[fmt](body)


class BlobSidecarClient:
    """Minimal client for the beacon API blob sidecar endpoint.

    One GET per call, no retries and no caching. Errors are returned inside
    the FetchResult rather than raised.
    """

    def __init__(self, url: str, session: Optional[requests.Session] = None,
                 timeout: Optional[Union[float, tuple]] = None):
        """Initialize client. Performs no network I/O.

        :param url: Beacon node base URL (scheme and host, no path).
        :param session: Optional preconfigured requests.Session to reuse.
        :param timeout: Passed through to requests unchanged; None means no timeout.
        """
        self.url = url
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session or requests.Session()

    def __enter__(self) -> "BlobSidecarClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_session:
            self._session.close()

    def _full_url(self, path: str) -> str:
        return self.url.rstrip('/') + '/' + path.lstrip('/')

    def sidecars_url(self, block_id: str) -> str:
        return self._full_url(BLOB_SIDECARS_PATH.format(block_id=block_id))

    def fetch_sidecars(self, block_id: str, fmt: Format = Format.JSON) -> FetchResult:
        """Fetch the blob sidecars for a slot or block root.

        :param block_id: Slot number, block root, or named block id; passed through as-is.
        :param fmt: Response encoding to negotiate.
        :return: FetchResult. Non-200 statuses come back verbatim with no error;
            transport failures come back as status 500 with a TransportError.
        """
        url = self.sidecars_url(block_id)
        headers = {"Accept": fmt.value}
        logger.debug(f"GET {url} (Accept: {fmt.value})")
        try:
            resp = self._session.get(url, headers=headers, timeout=self.timeout)
        except (requests.RequestException, ValueError) as e:
            logger.warning(f"Sidecar request to {url} failed: {e}")
            return FetchResult(HTTP_INTERNAL_SERVER_ERROR, BlobSidecars(),
                               TransportError(f"failed to fetch sidecars: {e}", e))

        with resp:
            logger.debug(f"GET {url} -> {resp.status_code}")
            if resp.status_code != HTTP_OK:
                return FetchResult(resp.status_code, BlobSidecars())
            try:
                sidecars = decode_body(resp.content, fmt, resp.headers.get('Content-Type'))
            except DecodeError as e:
                logger.warning(f"Could not decode sidecars from {url}: {e}")
                return FetchResult(resp.status_code, BlobSidecars(), e)
            return FetchResult(resp.status_code, sidecars)
