"""Kinds of entries returned by the extraction engine.

Search results and channel tabs mix videos with channel and playlist
entries; only video entries are mapped.
"""

from enum import Enum
from typing import Any


class ItemKind(Enum):
    """Variant of an engine entry."""

    STREAM = "stream"
    CHANNEL = "channel"
    PLAYLIST = "playlist"
    OTHER = "other"


def classify_entry(entry: dict[str, Any] | None) -> ItemKind:
    """Classify an engine info dict.

    Flat entries (``_type == "url"``) are classified by the extractor
    that would resolve them; fully extracted entries by their own type.

    Args:
        entry: Info dict from the engine, possibly None for failed entries.

    Returns:
        The entry's kind.
    """
    if not entry:
        return ItemKind.OTHER

    entry_type = entry.get("_type", "video")

    if entry_type == "video":
        return ItemKind.STREAM
    if entry_type == "playlist":
        return ItemKind.PLAYLIST

    if entry_type in ("url", "url_transparent"):
        ie_key = entry.get("ie_key")
        if ie_key == "Youtube":
            return ItemKind.STREAM
        if ie_key == "YoutubeTab":
            url = entry.get("url") or ""
            return ItemKind.PLAYLIST if "list=" in url else ItemKind.CHANNEL

    return ItemKind.OTHER
