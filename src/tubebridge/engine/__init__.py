"""Extraction engine setup.

The engine (yt-dlp) is configured once per process: the consent
cookie is seeded and a Downloader is installed as its transport.
Concurrent first calls perform exactly one initialization.

Example:
    >>> from tubebridge import engine
    >>>
    >>> engine.initialize()
    True
    >>> engine.initialize()
    False
"""

import threading

from tubebridge.settings import settings
from tubebridge.transport import Downloader
from tubebridge.utils.logger import setup_logger

from .handler import BridgeRH, install_downloader, installed_downloader
from .items import ItemKind, classify_entry

__all__ = [
    "initialize",
    "is_initialized",
    "reset",
    "BridgeRH",
    "ItemKind",
    "classify_entry",
    "installed_downloader",
]

logger = setup_logger("engine")

CONSENT_COOKIE = ("SOCS", "CAI")
YOUTUBE_HOSTS = ("www.youtube.com", "m.youtube.com", "music.youtube.com", "youtube.com")

_init_lock = threading.Lock()
_initialized = False


def initialize(
    downloader: Downloader | None = None,
    consent_accepted: bool | None = None,
) -> bool:
    """Configure the extraction engine once.

    Args:
        downloader: Transport to install. If None, one is built with
            the default User-Agent from settings.
        consent_accepted: Accept the cookie-consent prompt. If None,
            uses YOUTUBE_CONSENT_ACCEPTED from settings.

    Returns:
        True if this call initialized the engine, False if it already was.
    """
    global _initialized

    with _init_lock:
        if _initialized:
            return False

        if downloader is None:
            downloader = Downloader(user_agent=settings.transport.user_agent)
        if consent_accepted is None:
            consent_accepted = settings.extraction.consent_accepted

        if consent_accepted:
            for host in YOUTUBE_HOSTS:
                downloader.cookie_store.save_from_response(host, [CONSENT_COOKIE])

        install_downloader(downloader)
        _initialized = True

    logger.info(f"Engine initialized (consent accepted: {consent_accepted})")
    return True


def is_initialized() -> bool:
    """Whether the engine has been configured."""
    return _initialized


def reset() -> None:
    """Uninstall and close the Downloader so the next call re-initializes."""
    global _initialized

    with _init_lock:
        downloader = installed_downloader()
        install_downloader(None)
        _initialized = False

    if downloader is not None:
        downloader.close()
