"""Request and response types exchanged with the transport bridge."""

from dataclasses import dataclass, field


@dataclass
class Request:
    """Outbound HTTP request produced by the extraction engine.

    Attributes:
        method: HTTP method, GET or POST.
        url: Target URL.
        headers: Header multimap; each key keeps its values in order.
        data: Body bytes for POST requests.
    """

    method: str
    url: str
    headers: dict[str, list[str]] = field(default_factory=dict)
    data: bytes | None = None


@dataclass
class Response:
    """Inbound HTTP response handed back to the extraction engine.

    Attributes:
        status_code: Numeric HTTP status.
        message: Status reason phrase.
        headers: Header multimap with lower-cased names.
        body: Entire response body decoded as text.
        url: Final URL after redirects.
    """

    status_code: int
    message: str
    headers: dict[str, list[str]]
    body: str
    url: str
