"""HTTP transport bridge for the extraction engine.

Classes:
    Downloader: httpx-backed request executor.
    CookieStore: Per-host cookie persistence.
    Request: Outbound request.
    Response: Buffered inbound response.
"""

from .cookies import CookieStore
from .downloader import INNERTUBE_HEADERS, INNERTUBE_MARKER, Downloader
from .models import Request, Response

__all__ = [
    "Downloader",
    "CookieStore",
    "Request",
    "Response",
    "INNERTUBE_HEADERS",
    "INNERTUBE_MARKER",
]
