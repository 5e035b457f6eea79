"""YouTube extraction service.

Entry points used by the host application: search, video info, channel
listings and metadata, and playlist listings. Every operation
initializes the engine once, runs yt-dlp synchronously and normalizes
its output.
"""

from collections.abc import Callable
from typing import Any

import yt_dlp

from tubebridge import engine
from tubebridge.errors import InvalidInputError, OperationFailedError
from tubebridge.settings import settings
from tubebridge.utils.logger import setup_logger

from .normalizer import YouTubeNormalizer
from .schemas import ChannelInfo, ChannelVideosPage, VideoDetail, VideoSummary
from .url_parser import YouTubeUrlParser

logger = setup_logger("youtube.service")


# =============================================================================
# ENGINE OPTIONS
# =============================================================================

BASE_OPTIONS: dict[str, Any] = {
    "quiet": True,
    "no_warnings": True,
    "noprogress": True,
    "skip_download": True,
    "ignoreerrors": False,
    "extractor_retries": 0,
}

FLAT_OPTIONS: dict[str, Any] = {
    **BASE_OPTIONS,
    "extract_flat": "in_playlist",
}

VIDEO_OPTIONS: dict[str, Any] = {
    **BASE_OPTIONS,
    "format": "bestaudio/best",
    "noplaylist": True,
}

CHANNEL_TABS = ("videos", "streams", "shorts", "featured", "playlists", "community", "about")


# =============================================================================
# SERVICE
# =============================================================================


class YouTubeExtractionService:
    """Search, video info, channels and playlists through yt-dlp.

    Failures from the engine or the transport are reported as a single
    OperationFailedError; no partial result is ever returned.
    """

    def __init__(self, ydl_factory: Callable[[dict[str, Any]], Any] | None = None) -> None:
        """Initialize service.

        Args:
            ydl_factory: Builds an engine instance from options.
                Defaults to yt_dlp.YoutubeDL.
        """
        self._cfg = settings.extraction
        self._user_agent = settings.transport.user_agent
        self._normalizer = YouTubeNormalizer()
        self._urls = YouTubeUrlParser()
        self._ydl_factory = ydl_factory or yt_dlp.YoutubeDL

    # -------------------------------------------------------------------------
    # Videos
    # -------------------------------------------------------------------------

    def search(self, query: str | None) -> list[VideoSummary]:
        """Search videos, in relevance order.

        Args:
            query: Search terms.

        Returns:
            Videos of the first result page.

        Raises:
            InvalidInputError: If query is empty.
            OperationFailedError: If the search fails.
        """
        self._require(query, "Must provide a query")
        logger.info(f"Searching: {query}")

        try:
            engine.initialize()
            info = self._extract(f"ytsearch{self._cfg.search_limit}:{query}", FLAT_OPTIONS)
            items = self._normalizer.to_video_summaries(info.get("entries") or [])
        except Exception as e:
            logger.error(f"Search failed for {query!r}: {e}")
            raise OperationFailedError(f"Search failed: {e}") from e

        logger.info(f"Search returned {len(items)} videos")
        return items

    def get_video_info(self, video_id: str | None) -> VideoDetail:
        """Fetch full information and audio streams of a video.

        Args:
            video_id: YouTube video ID.

        Returns:
            Video detail.

        Raises:
            InvalidInputError: If video_id is empty.
            OperationFailedError: If extraction fails.
        """
        self._require(video_id, "Must provide a videoId")
        logger.info(f"Fetching video info: {video_id}")

        try:
            engine.initialize()
            info = self._extract(f"{self._cfg.watch_url}{video_id}", VIDEO_OPTIONS)
            detail = self._normalizer.to_video_detail(video_id, info)
        except Exception as e:
            logger.error(f"Video info failed for {video_id}: {e}")
            raise OperationFailedError(f"Failed to get video info: {e}") from e

        logger.info(f"Video {video_id}: {len(detail.audio_streams)} audio streams")
        return detail

    # -------------------------------------------------------------------------
    # Channels
    # -------------------------------------------------------------------------

    def get_channel_videos(self, channel_id: str | None) -> list[VideoSummary]:
        """List the first page of a channel's videos tab.

        Args:
            channel_id: Channel ID (UC...) or @handle.

        Returns:
            Videos in the channel's listing order.

        Raises:
            InvalidInputError: If channel_id is empty.
            OperationFailedError: If extraction fails.
        """
        return self.get_channel_videos_page(channel_id).items

    def get_channel_videos_page(
        self,
        channel_id: str | None,
        continuation: str | None = None,
    ) -> ChannelVideosPage:
        """List one page of a channel's videos tab.

        Args:
            channel_id: Channel ID (UC...) or @handle.
            continuation: Token of a previous page, None for the first page.

        Returns:
            Page of videos with the token of the next page.

        Raises:
            InvalidInputError: If channel_id is empty or the token is invalid.
            OperationFailedError: If extraction fails.
        """
        self._require(channel_id, "Must provide a channelId")
        page = self._page_number(continuation)
        size = self._cfg.channel_page_size
        logger.info(f"Fetching channel videos: {channel_id} (page {page})")

        options = {
            **FLAT_OPTIONS,
            "playliststart": (page - 1) * size + 1,
            "playlistend": page * size,
        }

        try:
            engine.initialize()
            info = self._extract(self._channel_videos_url(channel_id), options)
            entries = info.get("entries") or []
            items = self._normalizer.to_video_summaries(entries, channel_id=channel_id)
        except Exception as e:
            logger.error(f"Channel videos failed for {channel_id}: {e}")
            raise OperationFailedError(f"Failed to get channel videos: {e}") from e

        next_token = str(page + 1) if len(entries) >= size else None
        logger.info(f"Channel {channel_id}: {len(items)} videos (page {page})")
        return ChannelVideosPage(items=items, continuation=next_token)

    def get_channel_info(self, channel_id: str | None) -> ChannelInfo:
        """Fetch channel metadata.

        Args:
            channel_id: Channel ID (UC...) or @handle, passed through.

        Returns:
            Channel info.

        Raises:
            InvalidInputError: If channel_id is empty.
            OperationFailedError: If extraction fails.
        """
        self._require(channel_id, "Must provide a channelId")
        logger.info(f"Fetching channel info: {channel_id}")

        try:
            engine.initialize()
            info = self._extract(
                self._channel_videos_url(channel_id),
                {**FLAT_OPTIONS, "playlistend": 1},
            )
            channel = self._normalizer.to_channel_info(info, channel_id=channel_id)
        except Exception as e:
            logger.error(f"Channel info failed for {channel_id}: {e}")
            raise OperationFailedError(f"Failed to get channel info: {e}") from e

        return channel

    def resolve_channel(self, url: str | None) -> ChannelInfo:
        """Resolve a channel URL, @handle, channel ID or custom name.

        Args:
            url: Anything a user may paste to designate a channel.

        Returns:
            Channel info with the canonical channel ID.

        Raises:
            InvalidInputError: If url is empty.
            OperationFailedError: If the channel cannot be resolved.
        """
        self._require(url and url.strip(), "Must provide a channel URL")
        logger.info(f"Resolving channel: {url}")

        try:
            engine.initialize()
            info = self._extract(self._resolve_url(url), {**FLAT_OPTIONS, "playlistend": 1})
            channel = self._normalizer.to_channel_info(info)
            if not channel.id:
                raise OperationFailedError(f"no channel ID found for {url}")
        except Exception as e:
            logger.error(f"Channel resolution failed for {url}: {e}")
            raise OperationFailedError(f"Failed to resolve channel: {e}") from e

        logger.info(f"Resolved {url} to {channel.id}")
        return channel

    # -------------------------------------------------------------------------
    # Playlists
    # -------------------------------------------------------------------------

    def get_playlist_videos(self, playlist_id: str | None) -> list[VideoSummary]:
        """List the videos of a playlist, in playlist order.

        Args:
            playlist_id: Playlist ID, or a URL carrying list=.

        Returns:
            Videos of the playlist, at most YOUTUBE_PLAYLIST_LIMIT.

        Raises:
            InvalidInputError: If playlist_id is empty.
            OperationFailedError: If extraction fails.
        """
        self._require(playlist_id, "Must provide a playlistId")
        list_id = self._urls.extract_playlist_id(playlist_id)
        logger.info(f"Fetching playlist videos: {list_id}")

        url = f"{self._cfg.base_url.rstrip('/')}/playlist?list={list_id}"
        options = {**FLAT_OPTIONS, "playlistend": self._cfg.playlist_limit}

        try:
            engine.initialize()
            info = self._extract(url, options)
            items = self._normalizer.to_video_summaries(info.get("entries") or [])
        except Exception as e:
            logger.error(f"Playlist videos failed for {list_id}: {e}")
            raise OperationFailedError(f"Failed to get playlist videos: {e}") from e

        logger.info(f"Playlist {list_id}: {len(items)} videos")
        return items

    # -------------------------------------------------------------------------
    # Helper Methods
    # -------------------------------------------------------------------------

    @staticmethod
    def _require(value: str | None, message: str) -> None:
        if not value:
            raise InvalidInputError(message)

    @staticmethod
    def _page_number(continuation: str | None) -> int:
        """Decode a continuation token, 1 for the first page."""
        if continuation is None:
            return 1
        if not continuation.isdigit() or int(continuation) < 1:
            raise InvalidInputError(f"Invalid continuation token: {continuation}")
        return int(continuation)

    def _channel_videos_url(self, channel_id: str) -> str:
        base = self._cfg.base_url.rstrip("/")
        if channel_id.startswith("@"):
            return f"{base}/{channel_id}/videos"
        return f"{base}/channel/{channel_id}/videos"

    def _resolve_url(self, ref: str) -> str:
        """Build the videos tab URL of any channel reference.

        Full URLs are kept (minus query and tab), @handles and UC IDs get
        their canonical paths, anything else is taken as a custom name.
        """
        ref = ref.strip()
        base = self._cfg.base_url.rstrip("/")

        if ref.startswith("http"):
            url = ref.split("?", 1)[0].rstrip("/")
        elif ref.startswith("UC"):
            url = f"{base}/channel/{ref}"
        else:
            url = f"{base}/{ref}"

        if url.rsplit("/", 1)[-1] in CHANNEL_TABS:
            url = url.rsplit("/", 1)[0]
        return f"{url}/videos"

    def _extract(self, url: str, options: dict[str, Any]) -> dict[str, Any]:
        """Run the engine on a URL without downloading.

        Args:
            url: Engine input (URL or ytsearch query).
            options: Engine options.

        Returns:
            Info dict.

        Raises:
            OperationFailedError: If the engine returns nothing.
        """
        options = {**options, "http_headers": {"User-Agent": self._user_agent}}
        with self._ydl_factory(options) as ydl:
            info = ydl.extract_info(url, download=False)

        if not info:
            raise OperationFailedError(f"no information extracted for {url}")
        return info
