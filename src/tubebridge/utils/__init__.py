"""Shared utilities: logging."""

from tubebridge.utils.logger import setup_logger

__all__ = ["setup_logger"]
