"""Common utilities for the link registry."""

from .validators import is_valid_destination, is_valid_short_key
from .urls import build_base_url, build_short_url
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_destination",
    "is_valid_short_key",
    "build_base_url",
    "build_short_url",
    "setup_logging",
    "get_logger",
]
