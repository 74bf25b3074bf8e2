"""Core business logic for the link registry."""

from .errors import (
    RegistryError,
    InvalidInput,
    KeyConflict,
    NotFound,
    Unauthorized,
    AuthenticationFailed,
)
from .environment import (
    Authenticator,
    StaticAuthenticator,
    RequestAuthenticator,
    Clock,
    SystemClock,
    ManualClock,
)
from .keygen import KeyGenerator
from .models import LinkRecord
from .registry import Registry

__all__ = [
    "RegistryError",
    "InvalidInput",
    "KeyConflict",
    "NotFound",
    "Unauthorized",
    "AuthenticationFailed",
    "Authenticator",
    "StaticAuthenticator",
    "RequestAuthenticator",
    "Clock",
    "SystemClock",
    "ManualClock",
    "KeyGenerator",
    "LinkRecord",
    "Registry",
]
