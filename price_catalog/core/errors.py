"""
Error kinds for price synchronization.

Each failure carries a kind so callers can tell an unreachable feed from
a feed whose schema no longer matches the tracked models.
"""

from enum import Enum


class ErrorKind(Enum):
    """Categories of synchronization failure."""
    FEED_UNAVAILABLE = "feed_unavailable"
    EMPTY_RESOLUTION = "empty_resolution"
    STORE_UNAVAILABLE = "store_unavailable"


class PricingSyncError(Exception):
    """Base error for the pricing synchronization engine."""
    def __init__(self, message: str, kind: ErrorKind):
        super().__init__(message)
        self.kind = kind


class FeedUnavailable(PricingSyncError):
    """Raised when the pricing feed cannot be retrieved."""
    def __init__(self, message: str):
        super().__init__(message, ErrorKind.FEED_UNAVAILABLE)


class EmptyResolution(PricingSyncError):
    """Raised when the feed was fetched but no tracked model resolved."""
    def __init__(self, message: str):
        super().__init__(message, ErrorKind.EMPTY_RESOLUTION)


class StoreUnavailable(PricingSyncError):
    """Raised when the catalog store cannot be read or written."""
    def __init__(self, message: str):
        super().__init__(message, ErrorKind.STORE_UNAVAILABLE)
