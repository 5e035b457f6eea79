"""Per-host cookie store shared by every request of a downloader."""

import threading

from tubebridge.utils.logger import setup_logger

logger = setup_logger("transport.cookies")


class CookieStore:
    """Thread-safe mapping of host to cookies, unique by name per host.

    Each host has its own lock so that concurrent requests to different
    hosts never wait on each other, while a merge into one host is an
    atomic read-modify-write.
    """

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._cookies: dict[str, dict[str, str]] = {}
        self._host_locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, host: str) -> threading.Lock:
        with self._registry_lock:
            return self._host_locks.setdefault(host, threading.Lock())

    def save_from_response(self, host: str, cookies: list[tuple[str, str]]) -> None:
        """Merge cookies received from a host.

        A cookie replaces any stored cookie with the same name.

        Args:
            host: Host the response came from.
            cookies: (name, value) pairs in the order they were received.
        """
        if not cookies:
            return

        with self._lock_for(host):
            merged = dict(self._cookies.get(host, {}))
            for name, value in cookies:
                merged.pop(name, None)
                merged[name] = value
            self._cookies[host] = merged

        logger.debug(f"Stored {len(cookies)} cookie(s) for {host}")

    def load_for_request(self, host: str) -> list[tuple[str, str]]:
        """Return every cookie stored for a host (empty if none).

        Args:
            host: Host the request is about to be sent to.

        Returns:
            (name, value) pairs.
        """
        with self._lock_for(host):
            return list(self._cookies.get(host, {}).items())

