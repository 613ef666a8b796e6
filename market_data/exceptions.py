from __future__ import annotations


UNAVAILABLE_MESSAGE = "Data temporarily unavailable. Please try again."


class MarketDataError(Exception):
    pass


class DataNotFoundError(MarketDataError):
    """Raised when the provider has no usable rows for a ticker/range."""


class RateLimitedError(MarketDataError):
    """Raised when the upstream provider throttles us (HTTP 429)."""

    def __init__(self, message: str = UNAVAILABLE_MESSAGE):
        super().__init__(message)


class FetchError(MarketDataError):
    """Raised when a request fails for any other reason (network, 5xx, bad payload)."""

    def __init__(self, message: str = UNAVAILABLE_MESSAGE):
        super().__init__(message)
