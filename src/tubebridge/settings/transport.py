"""Transport bridge configuration settings.

HTTP timeouts and default identity used for every request
the extraction engine sends through the bridge.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/121.0.0.0 Safari/537.36"
)


class TransportSettings(BaseSettings):
    """HTTP transport configuration.

    Attributes:
        connect_timeout: Connection timeout in seconds.
        read_timeout: Read timeout in seconds.
        user_agent: User-Agent of the engine's requests, also used by the
            bridge when a request carries none. InnerTube calls always
            use the impersonated client's own User-Agent.
        log_body_chars: Body characters included in error diagnostics.
    """

    connect_timeout: float = Field(default=30.0, gt=0, alias="TRANSPORT_CONNECT_TIMEOUT")
    read_timeout: float = Field(default=60.0, gt=0, alias="TRANSPORT_READ_TIMEOUT")
    user_agent: str = Field(default=DEFAULT_USER_AGENT, alias="TRANSPORT_USER_AGENT")
    log_body_chars: int = Field(default=500, ge=0, alias="TRANSPORT_LOG_BODY_CHARS")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
