"""Error taxonomy for the ingestion pipeline."""

from __future__ import annotations


class QuakeRelayError(Exception):
    """Base class for all pipeline errors."""


class UpstreamUnavailable(QuakeRelayError):
    """The bulletin index could not be fetched or parsed; aborts a refresh."""


class RecordUnusable(QuakeRelayError):
    """A single bulletin could not be fetched or validated; the record is dropped."""

    def __init__(self, document_id: str, reason: str) -> None:
        super().__init__(f"{document_id}: {reason}")
        self.document_id = document_id
        self.reason = reason


class CacheUnavailable(QuakeRelayError):
    """The key-value store could not be read or written."""
