"""yt-dlp request handler delegating to the installed Downloader.

yt-dlp routes all of its HTTP traffic through registered request
handlers; BridgeRH is registered with top preference so the engine's
requests go through tubebridge's transport.
"""

import io
from collections.abc import Mapping

import httpx
from yt_dlp.networking.common import (
    Request as EngineRequest,
    RequestHandler,
    Response as EngineResponse,
    register_preference,
    register_rh,
)
from yt_dlp.networking.exceptions import HTTPError, TransportError

from tubebridge.errors import RateLimitedError
from tubebridge.transport import Downloader, Request

# Body is handed over already decoded, so these no longer describe it.
_DROPPED_RESPONSE_HEADERS = {"content-encoding", "content-length", "transfer-encoding"}

_downloader: Downloader | None = None


def install_downloader(downloader: Downloader | None) -> None:
    """Set the Downloader used by every BridgeRH instance."""
    global _downloader
    _downloader = downloader


def installed_downloader() -> Downloader | None:
    """Return the installed Downloader, if any."""
    return _downloader


@register_rh
class BridgeRH(RequestHandler):
    """Request handler backed by the installed Downloader.

    Proxies are not supported: requests carrying one are rejected here
    and left to yt-dlp's other handlers.
    """

    RH_NAME = "tubebridge"
    _SUPPORTED_URL_SCHEMES = ("http", "https")
    _SUPPORTED_PROXY_SCHEMES = ()
    _SUPPORTED_FEATURES = ()

    def _send(self, request: EngineRequest) -> EngineResponse:
        downloader = _downloader
        if downloader is None:
            raise TransportError("no downloader installed")

        headers = self._merge_headers(request.headers)
        cookie_header = self._get_cookiejar(request).get_cookie_header(request.url)
        if cookie_header:
            headers["Cookie"] = cookie_header

        bridge_request = _to_bridge_request(request, headers)
        try:
            response = downloader.execute(bridge_request)
        except RateLimitedError as e:
            # HTTPError 429 is the one failure the engine never retries.
            raise HTTPError(_rate_limited_response(e)) from e
        except httpx.HTTPError as e:
            raise TransportError(str(e) or type(e).__name__, cause=e) from e

        engine_response = EngineResponse(
            fp=io.BytesIO(response.body.encode("utf-8")),
            url=response.url,
            headers={
                key: ", ".join(values)
                for key, values in response.headers.items()
                if key not in _DROPPED_RESPONSE_HEADERS
            },
            status=response.status_code,
            reason=response.message,
        )

        if not 200 <= response.status_code < 300:
            raise HTTPError(engine_response)

        return engine_response


@register_preference(BridgeRH)
def _prefer_bridge(_handler: RequestHandler, _request: EngineRequest) -> int:
    return 1000


def _rate_limited_response(error: RateLimitedError) -> EngineResponse:
    """Build the engine-side response of a rate-limited request."""
    return EngineResponse(
        fp=io.BytesIO(str(error).encode("utf-8")),
        url=error.url,
        headers={},
        status=429,
        reason="Too Many Requests",
    )


def _to_bridge_request(request: EngineRequest, headers: Mapping[str, str]) -> Request:
    """Convert a yt-dlp request to a bridge Request."""
    data = request.data
    if data is not None and not isinstance(data, bytes):
        data = data.read() if hasattr(data, "read") else b"".join(data)

    return Request(
        method=request.method,
        url=request.url,
        headers={key: [value] for key, value in headers.items()},
        data=data,
    )
