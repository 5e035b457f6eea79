"""Command line entry point. Allows python -m tubebridge."""

import argparse
import json
import sys

from tubebridge.errors import TubeBridgeError
from tubebridge.youtube import YouTubeExtractionService, to_host_payload


def _parse_cli_arguments(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="tubebridge",
        description="YouTube search, video info, channels and playlists",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search videos")
    search.add_argument("query", help="Search terms")

    info = subparsers.add_parser("info", help="Video info and audio streams")
    info.add_argument("video_id", help="YouTube video ID")

    channel = subparsers.add_parser("channel", help="A page of a channel's videos")
    channel.add_argument("channel_id", help="Channel ID (UC...) or @handle")
    channel.add_argument(
        "--continuation",
        help="Token of the page to read, printed with the previous page",
    )

    channel_info = subparsers.add_parser("channel-info", help="Channel metadata")
    channel_info.add_argument("channel_id", help="Channel ID (UC...) or @handle")

    resolve = subparsers.add_parser("resolve", help="Resolve a channel URL or handle")
    resolve.add_argument("url", help="Channel URL, @handle, channel ID or custom name")

    playlist = subparsers.add_parser("playlist", help="Videos of a playlist")
    playlist.add_argument("playlist_id", help="Playlist ID or URL")

    return parser.parse_args(argv)


def _run(service: YouTubeExtractionService, args: argparse.Namespace):
    """Dispatch a parsed command to the service."""
    match args.command:
        case "search":
            return service.search(args.query)
        case "info":
            return service.get_video_info(args.video_id)
        case "channel" if args.continuation is not None:
            return service.get_channel_videos_page(args.channel_id, args.continuation)
        case "channel":
            return service.get_channel_videos(args.channel_id)
        case "channel-info":
            return service.get_channel_info(args.channel_id)
        case "resolve":
            return service.resolve_channel(args.url)
        case "playlist":
            return service.get_playlist_videos(args.playlist_id)


def main(argv: list[str] | None = None) -> int:
    """Run one operation and print its result as JSON."""
    args = _parse_cli_arguments(argv)
    service = YouTubeExtractionService()

    try:
        result = _run(service, args)
    except TubeBridgeError as e:
        print(str(e), file=sys.stderr)
        return 1

    print(json.dumps(to_host_payload(result), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
