"""YouTube extraction package.

Classes:
    YouTubeExtractionService: search, video info, channels and playlists.
    YouTubeNormalizer: engine output to host schemas.
    YouTubeUrlParser: video, channel and playlist IDs from URLs.

Example:
    >>> from tubebridge.youtube import YouTubeExtractionService, to_host_payload
    >>>
    >>> service = YouTubeExtractionService()
    >>> to_host_payload(service.search("dhammapada"))
    {'items': [...]}
"""

from .normalizer import YouTubeNormalizer
from .schemas import (
    AudioStream,
    ChannelInfo,
    ChannelVideosPage,
    VideoDetail,
    VideoList,
    VideoSummary,
    to_host_payload,
)
from .service import YouTubeExtractionService
from .url_parser import YouTubeUrlParser

__all__ = [
    "YouTubeExtractionService",
    "YouTubeNormalizer",
    "YouTubeUrlParser",
    "AudioStream",
    "VideoSummary",
    "VideoDetail",
    "VideoList",
    "ChannelVideosPage",
    "ChannelInfo",
    "to_host_payload",
]
