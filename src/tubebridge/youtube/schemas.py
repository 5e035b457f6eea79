"""Pydantic schemas for results handed to the host application.

Field names are snake_case in Python and camelCase once dumped with
``by_alias=True``.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HostModel(BaseModel):
    """Immutable model serialized with camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class AudioStream(HostModel):
    """Playable audio-only stream of a video."""

    url: str
    format: str
    bitrate: int
    mime_type: str


class VideoSummary(HostModel):
    """Video as listed by search results and channel tabs.

    Unknown duration and view count are reported as -1.
    """

    id: str
    title: str
    duration: int = -1
    thumbnail: str = ""
    channel_id: str = ""
    channel_title: str = ""
    views: int = -1
    uploaded_at: str = ""


class VideoDetail(VideoSummary):
    """Full video information with its audio streams."""

    description: str = ""
    audio_streams: list[AudioStream] = Field(default_factory=list)


class VideoList(HostModel):
    """Envelope for search and channel listing results."""

    items: list[VideoSummary] = Field(default_factory=list)


class ChannelVideosPage(HostModel):
    """One page of a channel's videos tab.

    continuation is the opaque token of the next page, None on the last.
    """

    items: list[VideoSummary] = Field(default_factory=list)
    continuation: str | None = None


class ChannelInfo(HostModel):
    """Channel metadata. Unknown video count is reported as -1."""

    id: str
    name: str
    logo: str = ""
    video_count: int = -1


def to_host_payload(result: HostModel | list[VideoSummary]) -> dict:
    """Dump an operation result to the shape the host expects.

    Args:
        result: Any result model, or a list of VideoSummary.

    Returns:
        The model dict, or {"items": [...]} for lists.
    """
    if isinstance(result, list):
        result = VideoList(items=result)
    return result.model_dump(by_alias=True)
