"""Client for fetching blob sidecars from a beacon node HTTP API."""

from .client import BlobSidecarClient, FetchResult, Format
from .async_client import AsyncBlobSidecarClient
from .errors import BlobSidecarError, DecodeError, TransportError
from .models import BeaconBlockHeader, BlobSidecar, BlobSidecars, SignedBeaconBlockHeader

__version__ = "0.1.0"

__all__ = [
    "BlobSidecarClient",
    "AsyncBlobSidecarClient",
    "FetchResult",
    "Format",
    "BlobSidecarError",
    "DecodeError",
    "TransportError",
    "BlobSidecar",
    "BlobSidecars",
    "BeaconBlockHeader",
    "SignedBeaconBlockHeader",
]
