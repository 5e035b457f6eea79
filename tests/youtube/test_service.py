"""Unit tests for the YouTube extraction service."""

import threading
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from yt_dlp.utils import DownloadError

from tubebridge import engine
from tubebridge.errors import InvalidInputError, OperationFailedError
from tubebridge.settings import settings
from tubebridge.youtube.service import YouTubeExtractionService

FactoryBuilder = Callable[..., MagicMock]


class TestInputValidation:
    @staticmethod
    @pytest.mark.parametrize(
        ("operation", "message"),
        [
            ("search", "Must provide a query"),
            ("get_video_info", "Must provide a videoId"),
            ("get_channel_videos", "Must provide a channelId"),
        ],
    )
    @pytest.mark.parametrize("value", ["", None])
    def test_empty_input_rejected_without_network(
        ydl_factory: FactoryBuilder, operation: str, message: str, value: str | None
    ) -> None:
        factory = ydl_factory(info={})
        service = YouTubeExtractionService(ydl_factory=factory)

        with pytest.raises(InvalidInputError, match=message):
            getattr(service, operation)(value)

        factory.assert_not_called()
        assert not engine.is_initialized()


class TestSearch:
    @staticmethod
    def test_maps_stream_entries_in_order(
        ydl_factory: FactoryBuilder,
        video_entry: dict[str, Any],
        channel_entry: dict[str, Any],
    ) -> None:
        second = {**video_entry, "url": "https://www.youtube.com/watch?v=second"}
        factory = ydl_factory(info={"entries": [video_entry, channel_entry, second]})

        items = YouTubeExtractionService(ydl_factory=factory).search("metta sutta")

        assert [item.id for item in items] == ["dQw4w9WgXcQ", "second"]
        factory.ydl.extract_info.assert_called_once_with("ytsearch20:metta sutta", download=False)

    @staticmethod
    def test_flat_extraction_options(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(info={"entries": []})
        YouTubeExtractionService(ydl_factory=factory).search("metta")

        options = factory.call_args.args[0]
        assert options["extract_flat"] == "in_playlist"
        assert options["quiet"] is True

    @staticmethod
    def test_initializes_engine(ydl_factory: FactoryBuilder) -> None:
        YouTubeExtractionService(ydl_factory=ydl_factory(info={"entries": []})).search("metta")
        assert engine.is_initialized()

    @staticmethod
    def test_engine_error_reported(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(error=DownloadError("ERROR: unable to download"))

        with pytest.raises(OperationFailedError, match="Search failed: ERROR: unable to download") as exc_info:
            YouTubeExtractionService(ydl_factory=factory).search("metta")

        assert isinstance(exc_info.value.__cause__, DownloadError)

    @staticmethod
    def test_empty_result_reported(ydl_factory: FactoryBuilder) -> None:
        with pytest.raises(OperationFailedError, match="Search failed"):
            YouTubeExtractionService(ydl_factory=ydl_factory(info=None)).search("metta")


class TestGetVideoInfo:
    @staticmethod
    def test_returns_detail(ydl_factory: FactoryBuilder, video_info: dict[str, Any]) -> None:
        factory = ydl_factory(info=video_info)

        detail = YouTubeExtractionService(ydl_factory=factory).get_video_info("dQw4w9WgXcQ")

        assert detail.id == "dQw4w9WgXcQ"
        assert len(detail.audio_streams) == 2
        factory.ydl.extract_info.assert_called_once_with(
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ", download=False
        )

    @staticmethod
    def test_error_reported(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(error=DownloadError("Video unavailable"))

        with pytest.raises(OperationFailedError, match="Failed to get video info: Video unavailable"):
            YouTubeExtractionService(ydl_factory=factory).get_video_info("gone")

    @staticmethod
    def test_mapping_failure_reported(ydl_factory: FactoryBuilder, video_info: dict[str, Any]) -> None:
        video_info["formats"] = [{"url": None, "vcodec": "none", "acodec": "opus"}, 42]

        with pytest.raises(OperationFailedError):
            YouTubeExtractionService(ydl_factory=ydl_factory(info=video_info)).get_video_info("x")


class TestGetChannelVideos:
    @staticmethod
    def test_given_channel_id_used(ydl_factory: FactoryBuilder, video_entry: dict[str, Any]) -> None:
        factory = ydl_factory(info={"entries": [video_entry]})

        items = YouTubeExtractionService(ydl_factory=factory).get_channel_videos("UCgiven")

        assert items[0].channel_id == "UCgiven"
        factory.ydl.extract_info.assert_called_once_with(
            "https://www.youtube.com/channel/UCgiven/videos", download=False
        )

    @staticmethod
    def test_first_page_only(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(info={"entries": []})
        YouTubeExtractionService(ydl_factory=factory).get_channel_videos("UCgiven")

        assert factory.call_args.args[0]["playlistend"] == 30

    @staticmethod
    def test_handle_url(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(info={"entries": []})
        YouTubeExtractionService(ydl_factory=factory).get_channel_videos("@ForestSangha")

        factory.ydl.extract_info.assert_called_once_with(
            "https://www.youtube.com/@ForestSangha/videos", download=False
        )

    @staticmethod
    def test_error_reported(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(error=DownloadError("This channel does not exist."))

        with pytest.raises(OperationFailedError, match="Failed to get channel videos"):
            YouTubeExtractionService(ydl_factory=factory).get_channel_videos("UCnope")


class TestConcurrentFirstCalls:
    @staticmethod
    def test_single_engine_initialization(ydl_factory: FactoryBuilder) -> None:
        service = YouTubeExtractionService(ydl_factory=ydl_factory(info={"entries": []}))
        barrier = threading.Barrier(4)
        errors: list[BaseException] = []

        def call() -> None:
            barrier.wait()
            try:
                service.search("metta")
            except BaseException as e:
                errors.append(e)

        with patch("tubebridge.engine.Downloader", wraps=engine.Downloader) as downloader_cls:
            threads = [threading.Thread(target=call) for _ in range(4)]
            for thread in threads:
                thread.start()
            for thread in threads:
                thread.join()

        assert errors == []
        assert downloader_cls.call_count == 1


class TestEngineSetup:
    @staticmethod
    def test_initialization_failure_reported(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(info={"entries": []})

        with patch("tubebridge.engine.Downloader", side_effect=OSError("no sockets")):
            with pytest.raises(OperationFailedError, match="Search failed: no sockets"):
                YouTubeExtractionService(ydl_factory=factory).search("metta")

        factory.assert_not_called()

    @staticmethod
    def test_configured_user_agent_passed_to_engine(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(info={"entries": []})
        YouTubeExtractionService(ydl_factory=factory).search("metta")

        options = factory.call_args.args[0]
        assert options["http_headers"]["User-Agent"] == settings.transport.user_agent

    @staticmethod
    def test_engine_retries_disabled(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(info={"entries": []})
        YouTubeExtractionService(ydl_factory=factory).search("metta")

        assert factory.call_args.args[0]["extractor_retries"] == 0


class TestChannelPaging:
    @staticmethod
    def test_first_page_has_continuation_when_full(
        ydl_factory: FactoryBuilder, video_entry: dict[str, Any]
    ) -> None:
        factory = ydl_factory(info={"entries": [video_entry] * 30})

        page = YouTubeExtractionService(ydl_factory=factory).get_channel_videos_page("UCgiven")

        assert len(page.items) == 30
        assert page.continuation == "2"
        options = factory.call_args.args[0]
        assert (options["playliststart"], options["playlistend"]) == (1, 30)

    @staticmethod
    def test_continuation_selects_next_slice(
        ydl_factory: FactoryBuilder, video_entry: dict[str, Any]
    ) -> None:
        factory = ydl_factory(info={"entries": [video_entry] * 5})

        page = YouTubeExtractionService(ydl_factory=factory).get_channel_videos_page("UCgiven", "3")

        options = factory.call_args.args[0]
        assert (options["playliststart"], options["playlistend"]) == (61, 90)
        assert page.continuation is None

    @staticmethod
    @pytest.mark.parametrize("token", ["", "0", "abc", "-2"])
    def test_invalid_continuation_rejected(ydl_factory: FactoryBuilder, token: str) -> None:
        factory = ydl_factory(info={"entries": []})

        with pytest.raises(InvalidInputError, match="Invalid continuation token"):
            YouTubeExtractionService(ydl_factory=factory).get_channel_videos_page("UCgiven", token)

        factory.assert_not_called()


class TestGetChannelInfo:
    @staticmethod
    def test_returns_channel(ydl_factory: FactoryBuilder, channel_tab_info: dict[str, Any]) -> None:
        factory = ydl_factory(info=channel_tab_info)

        channel = YouTubeExtractionService(ydl_factory=factory).get_channel_info("@ForestSangha")

        assert channel.id == "@ForestSangha"
        assert channel.name == "Forest Sangha"
        assert channel.logo == "https://yt3.googleusercontent.com/avatar"
        assert channel.video_count == 412
        factory.ydl.extract_info.assert_called_once_with(
            "https://www.youtube.com/@ForestSangha/videos", download=False
        )
        assert factory.call_args.args[0]["playlistend"] == 1

    @staticmethod
    def test_error_reported(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(error=DownloadError("This channel does not exist."))

        with pytest.raises(OperationFailedError, match="Failed to get channel info"):
            YouTubeExtractionService(ydl_factory=factory).get_channel_info("UCnope")

    @staticmethod
    def test_empty_input_rejected(ydl_factory: FactoryBuilder) -> None:
        with pytest.raises(InvalidInputError, match="Must provide a channelId"):
            YouTubeExtractionService(ydl_factory=ydl_factory(info={})).get_channel_info("")


class TestResolveChannel:
    @staticmethod
    @pytest.mark.parametrize(
        ("ref", "expected_url"),
        [
            ("@ForestSangha", "https://www.youtube.com/@ForestSangha/videos"),
            ("UCabc123", "https://www.youtube.com/channel/UCabc123/videos"),
            ("forestsangha", "https://www.youtube.com/forestsangha/videos"),
            ("https://www.youtube.com/@ForestSangha", "https://www.youtube.com/@ForestSangha/videos"),
            (
                "https://www.youtube.com/@ForestSangha/streams?view=0",
                "https://www.youtube.com/@ForestSangha/videos",
            ),
            ("  https://www.youtube.com/c/Sangha/  ", "https://www.youtube.com/c/Sangha/videos"),
        ],
    )
    def test_reference_forms(
        ydl_factory: FactoryBuilder,
        channel_tab_info: dict[str, Any],
        ref: str,
        expected_url: str,
    ) -> None:
        factory = ydl_factory(info=channel_tab_info)

        channel = YouTubeExtractionService(ydl_factory=factory).resolve_channel(ref)

        assert channel.id == "UCabc123"
        factory.ydl.extract_info.assert_called_once_with(expected_url, download=False)

    @staticmethod
    def test_missing_channel_id_reported(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(info={"title": "Somewhere", "entries": []})

        with pytest.raises(OperationFailedError, match="Failed to resolve channel"):
            YouTubeExtractionService(ydl_factory=factory).resolve_channel("@nobody")

    @staticmethod
    @pytest.mark.parametrize("value", ["", "   ", None])
    def test_empty_input_rejected(ydl_factory: FactoryBuilder, value: str | None) -> None:
        factory = ydl_factory(info={})

        with pytest.raises(InvalidInputError, match="Must provide a channel URL"):
            YouTubeExtractionService(ydl_factory=factory).resolve_channel(value)

        assert not engine.is_initialized()


class TestGetPlaylistVideos:
    @staticmethod
    @pytest.mark.parametrize(
        "ref",
        ["PL123", "https://www.youtube.com/watch?v=dQw4w9WgXcQ&list=PL123&index=2"],
    )
    def test_lists_playlist(
        ydl_factory: FactoryBuilder, video_entry: dict[str, Any], ref: str
    ) -> None:
        factory = ydl_factory(info={"entries": [video_entry, None]})

        items = YouTubeExtractionService(ydl_factory=factory).get_playlist_videos(ref)

        assert [item.id for item in items] == ["dQw4w9WgXcQ"]
        assert items[0].channel_id == "UCabc123"
        factory.ydl.extract_info.assert_called_once_with(
            "https://www.youtube.com/playlist?list=PL123", download=False
        )
        assert factory.call_args.args[0]["playlistend"] == 200

    @staticmethod
    def test_error_reported(ydl_factory: FactoryBuilder) -> None:
        factory = ydl_factory(error=DownloadError("The playlist does not exist."))

        with pytest.raises(OperationFailedError, match="Failed to get playlist videos"):
            YouTubeExtractionService(ydl_factory=factory).get_playlist_videos("PLnope")

    @staticmethod
    def test_empty_input_rejected(ydl_factory: FactoryBuilder) -> None:
        with pytest.raises(InvalidInputError, match="Must provide a playlistId"):
            YouTubeExtractionService(ydl_factory=ydl_factory(info={})).get_playlist_videos("")
