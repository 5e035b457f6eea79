"""YouTube extraction configuration settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExtractionSettings(BaseSettings):
    """Extraction engine configuration.

    Attributes:
        consent_accepted: Send the cookie-consent acceptance cookie.
        base_url: YouTube web origin used to build watch/channel URLs.
        search_limit: Maximum search results requested from the engine.
        channel_page_size: Entries per page of a channel videos tab.
        playlist_limit: Maximum entries read from a playlist.
    """

    consent_accepted: bool = Field(default=True, alias="YOUTUBE_CONSENT_ACCEPTED")
    base_url: str = Field(default="https://www.youtube.com", alias="YOUTUBE_BASE_URL")
    search_limit: int = Field(default=20, ge=1, le=100, alias="YOUTUBE_SEARCH_LIMIT")
    channel_page_size: int = Field(default=30, ge=1, alias="YOUTUBE_CHANNEL_PAGE_SIZE")
    playlist_limit: int = Field(default=200, ge=1, alias="YOUTUBE_PLAYLIST_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def watch_url(self) -> str:
        """Watch page prefix, completed with a video ID."""
        return f"{self.base_url.rstrip('/')}/watch?v="
