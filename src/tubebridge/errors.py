"""Exceptions raised by tubebridge.

Only the operation facade raises OperationFailedError; the transport
bridge distinguishes nothing but rate limiting.
"""


class TubeBridgeError(Exception):
    """Base exception for tubebridge errors."""

    pass


class InvalidInputError(TubeBridgeError):
    """Raised when a required parameter is missing or empty."""

    pass


class RateLimitedError(TubeBridgeError):
    """Raised when upstream answers HTTP 429 (verification challenge)."""

    def __init__(self, url: str) -> None:
        super().__init__(f"reCAPTCHA required (429) for {url}")
        self.url = url


class OperationFailedError(TubeBridgeError):
    """Raised when an operation fails inside the engine or transport."""

    pass
