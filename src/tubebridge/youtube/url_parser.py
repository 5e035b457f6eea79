"""YouTube URL parser.

Extracts video, channel and playlist IDs from the inconsistent URL
shapes the engine returns. These are first-match string heuristics,
not a URL grammar: unrecognized input falls through to the last path
segment, and nothing is percent-decoded.
"""


class YouTubeUrlParser:
    """Total functions from URL text to canonical YouTube IDs."""

    CHANNEL_MARKERS = ("/channel/", "/c/", "/user/")

    # -------------------------------------------------------------------------
    # Video IDs
    # -------------------------------------------------------------------------

    @staticmethod
    def extract_video_id(url: str | None) -> str:
        """Extract a video ID from a watch, shorts or embed URL.

        Args:
            url: Video URL, or None.

        Returns:
            Video ID, or empty string when url is None.
        """
        if url is None:
            return ""

        if "v=" in url:
            return url.split("v=", 1)[1].split("&", 1)[0]

        if "/shorts/" in url:
            return url.split("/shorts/", 1)[1].split("?", 1)[0]

        return url.rsplit("/", 1)[-1]

    # -------------------------------------------------------------------------
    # Channel IDs
    # -------------------------------------------------------------------------

    @classmethod
    def extract_channel_id(cls, url: str | None) -> str:
        """Extract a channel ID, custom name, user name or handle.

        Checked in order: /channel/<id>, /c/<name>, /user/<name>,
        a bare @handle, then the last path segment.

        Args:
            url: Channel URL or handle, or None.

        Returns:
            Channel identifier, or empty string when nothing matches.
        """
        if url is None:
            return ""

        for marker in cls.CHANNEL_MARKERS:
            if marker in url:
                return url.split(marker, 1)[1].split("/", 1)[0]

        if url.startswith("@"):
            return url

        return url.rsplit("/", 1)[-1]

    # -------------------------------------------------------------------------
    # Playlist IDs
    # -------------------------------------------------------------------------

    @staticmethod
    def extract_playlist_id(url: str | None) -> str:
        """Extract a playlist ID from a playlist or watch URL.

        Input without list= is taken as a playlist ID already.
        """
        if url is None:
            return ""

        if "list=" in url:
            return url.split("list=", 1)[1].split("&", 1)[0]

        return url.strip()
