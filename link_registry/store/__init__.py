"""Storage backends for the link registry."""

from .base import LinkStore
from .memory import MemoryLinkStore
from .redis_store import RedisLinkStore

__all__ = ["LinkStore", "MemoryLinkStore", "RedisLinkStore"]
