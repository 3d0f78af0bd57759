"""Error types returned by the blob sidecar clients."""

from typing import Optional


class BlobSidecarError(Exception):
    """Base class for all blob sidecar client errors."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class TransportError(BlobSidecarError):
    """No response was received: the request could not be built or sent."""


class DecodeError(BlobSidecarError):
    """The server answered 200 but the payload did not match the requested format."""
