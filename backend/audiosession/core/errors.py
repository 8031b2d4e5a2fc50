"""
Error taxonomy for the audio session store.

Store-level failures are propagated unchanged to the caller; nothing in
this package retries.
"""


class AudioSessionError(Exception):
    """Base class for all audio session errors."""


class InvalidArgumentError(AudioSessionError):
    """Raised for a non-positive chunk number/duration or an empty identifier."""


class NotFoundError(AudioSessionError):
    """Raised when a key, or a session under either layout, does not resolve."""

    def __init__(self, message: str = "Object not found") -> None:
        super().__init__(message)


class StoreError(AudioSessionError):
    """Raised when the blob store fails or holds a malformed document."""


class InconsistentStateError(AudioSessionError):
    """
    Processing status is missing or unreadable while its session exists.

    Recovered locally by synthesizing defaults; never surfaced to callers.
    """


class MalformedDocumentError(StoreError):
    """Raised when stored bytes do not parse as the expected JSON document."""


class PayloadTooLargeError(AudioSessionError):
    """Raised when an uploaded chunk exceeds the configured size limit."""
