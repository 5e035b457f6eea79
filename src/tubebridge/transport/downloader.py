"""HTTP downloader servicing the extraction engine's requests.

Backs every engine request with an httpx client, keeping cookies per
host across requests and impersonating the YouTube web client on
InnerTube API calls.
"""

from http.cookiejar import CookieJar, DefaultCookiePolicy
from types import TracebackType

import httpx

from tubebridge.errors import RateLimitedError
from tubebridge.settings import settings
from tubebridge.transport.cookies import CookieStore
from tubebridge.transport.models import Request, Response
from tubebridge.utils.logger import setup_logger

logger = setup_logger("transport.downloader")


# =============================================================================
# INNERTUBE IMPERSONATION
# =============================================================================

INNERTUBE_MARKER = "youtubei/v1"
RELOAD_MARKER = "The page needs to be reloaded"

# Client name, version and user-agent must describe the same client.
INNERTUBE_HEADERS = {
    "X-Goog-Api-Format-Version": "1",
    "X-YouTube-Client-Name": "1",
    "X-YouTube-Client-Version": "2.20260124.00.00",
    "Origin": "https://www.youtube.com",
    "Referer": "https://www.youtube.com/",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:140.0) Gecko/20100101 Firefox/140.0"
    ),
}


# =============================================================================
# DOWNLOADER
# =============================================================================


class Downloader:
    """Synchronous HTTP transport for the extraction engine.

    Attributes:
        user_agent: User-Agent applied when a request carries none.
        cookie_store: Cookies received so far, per host.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize downloader.

        Args:
            user_agent: Default User-Agent. If None, uses settings.
            transport: Optional httpx transport (tests use MockTransport).
        """
        cfg = settings.transport
        self.user_agent = user_agent or cfg.user_agent
        self.cookie_store = CookieStore()
        self._log_body_chars = cfg.log_body_chars

        # The client's own jar accepts nothing; cookie_store is the only session state.
        self._client = httpx.Client(
            timeout=httpx.Timeout(cfg.read_timeout, connect=cfg.connect_timeout),
            follow_redirects=True,
            cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
            event_hooks={
                "request": [self._attach_cookies],
                "response": [self._store_cookies],
            },
            transport=transport,
        )

    def __enter__(self) -> "Downloader":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        _exc_type: type[BaseException] | None,
        _exc_val: BaseException | None,
        _exc_tb: TracebackType | None,
    ) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    # -------------------------------------------------------------------------
    # Cookie Hooks
    # -------------------------------------------------------------------------

    def _attach_cookies(self, request: httpx.Request) -> None:
        """Merge stored cookies for the request host into its Cookie header.

        Runs on every hop. Cookies the caller already sends are kept; a
        stored cookie of the same name replaces the caller's value.
        """
        stored = self.cookie_store.load_for_request(request.url.host)
        if not stored:
            return

        cookies = dict(_parse_cookie_header(request.headers.get("Cookie", "")))
        cookies.update(stored)
        request.headers["Cookie"] = "; ".join(f"{name}={value}" for name, value in cookies.items())

    def _store_cookies(self, response: httpx.Response) -> None:
        """Merge Set-Cookie values of a response into the store."""
        received = httpx.Cookies()
        received.extract_cookies(response)
        cookies = [(cookie.name, cookie.value or "") for cookie in received.jar]
        self.cookie_store.save_from_response(response.request.url.host, cookies)

    # -------------------------------------------------------------------------
    # Request Execution
    # -------------------------------------------------------------------------

    def execute(self, request: Request) -> Response:
        """Perform a request and return the fully buffered response.

        Non-2xx responses are returned unchanged, except HTTP 429.

        Args:
            request: Outbound request from the engine.

        Returns:
            Response with decoded body and final URL.

        Raises:
            RateLimitedError: When upstream answers 429.
            httpx.HTTPError: On network failures and timeouts.
        """
        headers = self._build_headers(request)

        if request.method.upper() == "POST":
            outbound = self._client.build_request(
                "POST",
                request.url,
                headers=headers,
                content=request.data or b"",
            )
        else:
            outbound = self._client.build_request("GET", request.url, headers=headers)

        response = self._client.send(outbound)
        body = response.text

        if response.status_code >= 400 or RELOAD_MARKER in body:
            logger.warning(f"Error response URL: {request.url} CODE: {response.status_code}")
            logger.warning(f"Response body (start): {body[: self._log_body_chars]}")

        if response.status_code == 429:
            raise RateLimitedError(request.url)

        return Response(
            status_code=response.status_code,
            message=response.reason_phrase,
            headers=_to_multimap(response.headers),
            body=body,
            url=str(response.url),
        )

    def _build_headers(self, request: Request) -> httpx.Headers:
        """Build outbound headers from the caller's multimap.

        Args:
            request: Outbound request from the engine.

        Returns:
            Headers with duplicates and order preserved.
        """
        headers = httpx.Headers(
            [(key, value) for key, values in request.headers.items() for value in values]
        )

        if INNERTUBE_MARKER in request.url:
            for key, value in INNERTUBE_HEADERS.items():
                headers[key] = value
        elif "User-Agent" not in headers:
            headers["User-Agent"] = self.user_agent

        return headers


def _to_multimap(headers: httpx.Headers) -> dict[str, list[str]]:
    """Convert httpx headers to a lower-cased header multimap."""
    multimap: dict[str, list[str]] = {}
    for key, value in headers.multi_items():
        multimap.setdefault(key.lower(), []).append(value)
    return multimap


def _parse_cookie_header(header: str) -> list[tuple[str, str]]:
    """Split a Cookie header into (name, value) pairs, in order."""
    pairs: list[tuple[str, str]] = []
    for part in header.split(";"):
        name, sep, value = part.strip().partition("=")
        if sep and name:
            pairs.append((name, value))
    return pairs
