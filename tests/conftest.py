"""Shared pytest fixtures."""

from collections.abc import Callable, Iterator
from http.cookiejar import Cookie
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from tubebridge import engine


@pytest.fixture(autouse=True, scope="function")
def mock_env_for_tests(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Mock env variables for reproducible tests."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))


@pytest.fixture(autouse=True)
def reset_engine() -> Iterator[None]:
    """Each test starts with an uninitialized engine."""
    engine.reset()
    yield
    engine.reset()


@pytest.fixture
def video_entry() -> dict[str, Any]:
    """Flat search entry for a video."""
    return {
        "_type": "url",
        "ie_key": "Youtube",
        "id": "dQw4w9WgXcQ",
        "url": "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "title": "Dhammapada Verse 1",
        "duration": 212.0,
        "view_count": 1500,
        "channel": "Forest Sangha",
        "channel_id": "UCabc123",
        "channel_url": "https://www.youtube.com/channel/UCabc123",
        "uploader_url": "https://www.youtube.com/@ForestSangha",
        "thumbnails": [
            {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg", "height": 360},
            {"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/maxresdefault.jpg", "height": 720},
        ],
        "timestamp": None,
        "upload_date": "20240115",
    }


@pytest.fixture
def channel_entry() -> dict[str, Any]:
    """Flat search entry for a channel."""
    return {
        "_type": "url",
        "ie_key": "YoutubeTab",
        "id": "UCxyz",
        "url": "https://www.youtube.com/channel/UCxyz",
        "title": "Some Channel",
    }


@pytest.fixture
def playlist_entry() -> dict[str, Any]:
    """Flat search entry for a playlist."""
    return {
        "_type": "url",
        "ie_key": "YoutubeTab",
        "id": "PL123",
        "url": "https://www.youtube.com/playlist?list=PL123",
        "title": "Some Playlist",
    }


@pytest.fixture
def video_info() -> dict[str, Any]:
    """Fully extracted video info."""
    return {
        "id": "dQw4w9WgXcQ",
        "title": "Dhammapada Verse 1",
        "description": "Mind precedes all things.",
        "duration": 212,
        "view_count": 1500,
        "channel": "Forest Sangha",
        "channel_url": "https://www.youtube.com/channel/UCabc123",
        "thumbnails": [{"url": "https://i.ytimg.com/vi/dQw4w9WgXcQ/default.jpg"}],
        "timestamp": 1705312800,
        "upload_date": "20240115",
        "formats": [
            {
                "format_id": "139",
                "url": "https://rr1.googlevideo.com/videoplayback?itag=139",
                "ext": "m4a",
                "acodec": "mp4a.40.5",
                "vcodec": "none",
                "abr": 48.8,
            },
            {
                "format_id": "251",
                "url": "https://rr1.googlevideo.com/videoplayback?itag=251",
                "ext": "webm",
                "acodec": "opus",
                "vcodec": "none",
                "abr": 130.5,
            },
            {
                "format_id": "18",
                "url": "https://rr1.googlevideo.com/videoplayback?itag=18",
                "ext": "mp4",
                "acodec": "mp4a.40.2",
                "vcodec": "avc1.42001E",
                "tbr": 500.0,
            },
            {
                "format_id": "sb0",
                "url": "https://i.ytimg.com/sb/dQw4w9WgXcQ/storyboard3_L0/default.jpg",
                "ext": "mhtml",
                "acodec": "none",
                "vcodec": "none",
            },
        ],
    }


@pytest.fixture
def ydl_factory() -> Callable[..., MagicMock]:
    """Build a fake yt_dlp.YoutubeDL factory.

    The factory is a MagicMock (options are in its call_args) and
    exposes the engine it returns as ``factory.ydl``.
    """

    def build(info: dict[str, Any] | None = None, error: Exception | None = None) -> MagicMock:
        ydl = MagicMock()
        ydl.__enter__.return_value = ydl
        ydl.__exit__.return_value = False
        if error is not None:
            ydl.extract_info.side_effect = error
        else:
            ydl.extract_info.return_value = info

        factory = MagicMock(return_value=ydl)
        factory.ydl = ydl
        return factory

    return build


@pytest.fixture
def make_cookie() -> Callable[[str, str], Cookie]:
    """Build youtube.com cookies as the engine stores them in its jar."""

    def build(name: str, value: str) -> Cookie:
        return Cookie(
            version=0,
            name=name,
            value=value,
            port=None,
            port_specified=False,
            domain=".youtube.com",
            domain_specified=True,
            domain_initial_dot=True,
            path="/",
            path_specified=True,
            secure=False,
            expires=None,
            discard=False,
            comment=None,
            comment_url=None,
            rest={},
        )

    return build


@pytest.fixture
def channel_tab_info(video_entry: dict[str, Any]) -> dict[str, Any]:
    """Flat extraction of a channel videos tab."""
    return {
        "_type": "playlist",
        "id": "UCabc123",
        "title": "Forest Sangha - Videos",
        "channel": "Forest Sangha",
        "channel_id": "UCabc123",
        "channel_url": "https://www.youtube.com/channel/UCabc123",
        "playlist_count": 412,
        "thumbnails": [
            {"id": "banner_uncropped", "url": "https://yt3.googleusercontent.com/banner"},
            {"id": "avatar_uncropped", "url": "https://yt3.googleusercontent.com/avatar"},
        ],
        "entries": [video_entry],
    }
