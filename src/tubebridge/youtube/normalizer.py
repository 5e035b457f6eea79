"""YouTube result normalizer.

Transforms engine info dicts into the flat schemas returned to the
host application.
"""

from datetime import datetime, timezone
from typing import Any

from tubebridge.engine.items import ItemKind, classify_entry
from tubebridge.utils.logger import setup_logger

from .schemas import AudioStream, ChannelInfo, VideoDetail, VideoSummary
from .url_parser import YouTubeUrlParser

logger = setup_logger("youtube.normalizer")


# Container extension -> (format name, file suffix)
AUDIO_FORMATS: dict[str, tuple[str, str]] = {
    "m4a": ("M4A", "m4a"),
    "webm": ("WEBMA", "webm"),
    "mp3": ("MP3", "mp3"),
    "opus": ("OPUS", "opus"),
    "ogg": ("OGG", "ogg"),
    "aac": ("AAC", "aac"),
    "flac": ("FLAC", "flac"),
    "wav": ("WAV", "wav"),
}


# =============================================================================
# NORMALIZER
# =============================================================================


class YouTubeNormalizer:
    """Normalizes engine output.

    Maps search/channel/playlist entries to VideoSummary, full video
    info to VideoDetail and channel tabs to ChannelInfo.
    """

    def __init__(self) -> None:
        """Initialize normalizer."""
        self._urls = YouTubeUrlParser()

    # -------------------------------------------------------------------------
    # Video Summaries
    # -------------------------------------------------------------------------

    def to_video_summary(
        self,
        entry: dict[str, Any],
        channel_id: str | None = None,
    ) -> VideoSummary:
        """Normalize one video entry.

        Args:
            entry: Engine info dict of a video.
            channel_id: Known channel ID, used as-is instead of being
                parsed from the uploader URL.

        Returns:
            VideoSummary.
        """
        if channel_id is None:
            channel_id = self._urls.extract_channel_id(self._uploader_url(entry))

        return VideoSummary(
            id=self._urls.extract_video_id(entry.get("webpage_url") or entry.get("url")),
            title=entry.get("title") or "",
            duration=self._safe_int(entry.get("duration")),
            thumbnail=self._first_thumbnail(entry),
            channel_id=channel_id,
            channel_title=entry.get("channel") or entry.get("uploader") or "",
            views=self._safe_int(entry.get("view_count")),
            uploaded_at=self._upload_date(entry),
        )

    def to_video_summaries(
        self,
        entries: list[dict[str, Any] | None],
        channel_id: str | None = None,
    ) -> list[VideoSummary]:
        """Normalize the video entries of a listing, in order.

        Channel and playlist entries are skipped.

        Args:
            entries: Engine entries of a search or channel tab.
            channel_id: Known channel ID for every entry.

        Returns:
            List of VideoSummary.
        """
        summaries: list[VideoSummary] = []

        for entry in entries:
            match classify_entry(entry):
                case ItemKind.STREAM:
                    summaries.append(self.to_video_summary(entry, channel_id))
                case ItemKind.CHANNEL | ItemKind.PLAYLIST | ItemKind.OTHER as kind:
                    logger.debug(f"Skipping {kind.value} entry: {(entry or {}).get('url')}")

        return summaries

    # -------------------------------------------------------------------------
    # Video Detail
    # -------------------------------------------------------------------------

    def to_video_detail(self, video_id: str, info: dict[str, Any]) -> VideoDetail:
        """Normalize full video info.

        Args:
            video_id: ID the caller asked for, passed through.
            info: Engine info dict of the video.

        Returns:
            VideoDetail with audio-only streams in engine order.
        """
        return VideoDetail(
            id=video_id,
            title=info.get("title") or "",
            description=info.get("description") or "",
            duration=self._safe_int(info.get("duration")),
            thumbnail=self._first_thumbnail(info),
            channel_id=self._urls.extract_channel_id(self._uploader_url(info)),
            channel_title=info.get("channel") or info.get("uploader") or "",
            views=self._safe_int(info.get("view_count")),
            uploaded_at=self._upload_date(info),
            audio_streams=[
                self.to_audio_stream(fmt)
                for fmt in info.get("formats") or []
                if self._is_audio_only(fmt)
            ],
        )

    @staticmethod
    def to_audio_stream(fmt: dict[str, Any]) -> AudioStream:
        """Normalize an audio-only format.

        The MIME type is always derived from the format's file suffix.

        Args:
            fmt: Engine format dict.

        Returns:
            AudioStream.
        """
        ext = fmt.get("ext") or "unknown"
        name, suffix = AUDIO_FORMATS.get(ext, (ext.upper(), ext))
        if ext == "webm" and (fmt.get("acodec") or "").startswith("opus"):
            name = "WEBMA_OPUS"

        return AudioStream(
            url=fmt["url"],
            format=name,
            bitrate=int(fmt.get("abr") or fmt.get("tbr") or 0),
            mime_type=f"audio/{suffix}",
        )

    # -------------------------------------------------------------------------
    # Channel Info
    # -------------------------------------------------------------------------

    def to_channel_info(
        self,
        info: dict[str, Any],
        channel_id: str | None = None,
    ) -> ChannelInfo:
        """Normalize the metadata of a channel tab.

        Args:
            info: Engine info dict of a channel tab.
            channel_id: Known channel ID, passed through as-is.

        Returns:
            ChannelInfo.
        """
        if channel_id is None:
            channel_id = info.get("channel_id") or self._urls.extract_channel_id(
                self._uploader_url(info)
            )

        return ChannelInfo(
            id=channel_id,
            name=info.get("channel") or info.get("uploader") or info.get("title") or "",
            logo=self._avatar(info),
            video_count=self._safe_int(info.get("playlist_count")),
        )

    # -------------------------------------------------------------------------
    # Helper Methods
    # -------------------------------------------------------------------------

    @staticmethod
    def _is_audio_only(fmt: dict[str, Any]) -> bool:
        return (
            bool(fmt.get("url"))
            and fmt.get("vcodec") == "none"
            and fmt.get("acodec") not in (None, "none")
        )

    @staticmethod
    def _uploader_url(info: dict[str, Any]) -> str | None:
        return info.get("channel_url") or info.get("uploader_url")

    @staticmethod
    def _first_thumbnail(info: dict[str, Any]) -> str:
        """Return the first thumbnail URL or empty string."""
        thumbnails = info.get("thumbnails") or []
        if not thumbnails:
            return ""
        return thumbnails[0].get("url") or ""

    @classmethod
    def _avatar(cls, info: dict[str, Any]) -> str:
        """Return the channel avatar URL, else the first thumbnail."""
        for thumbnail in info.get("thumbnails") or []:
            if "avatar" in (thumbnail.get("id") or "") and thumbnail.get("url"):
                return thumbnail["url"]
        return cls._first_thumbnail(info)

    @staticmethod
    def _upload_date(info: dict[str, Any]) -> str:
        """Return the upload date as an ISO string.

        Prefers the exact timestamp, then the YYYYMMDD upload date.

        Args:
            info: Engine info dict.

        Returns:
            ISO date or datetime, or empty string when unknown.
        """
        timestamp = info.get("timestamp")
        if timestamp is not None:
            return datetime.fromtimestamp(timestamp, tz=timezone.utc).isoformat()

        upload_date = info.get("upload_date")
        if not upload_date:
            return ""

        try:
            return datetime.strptime(upload_date, "%Y%m%d").date().isoformat()
        except ValueError:
            return upload_date

    @staticmethod
    def _safe_int(value: Any) -> int:
        """Convert a number to int, -1 when unknown."""
        try:
            return int(value) if value is not None else -1
        except (ValueError, TypeError):
            return -1
