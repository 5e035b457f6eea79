"""tubebridge: YouTube search, video info and channel listings via yt-dlp."""

__version__ = "1.0.0"
