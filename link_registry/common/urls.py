"""Helpers for building public short URLs."""

from typing import Mapping, Optional


def build_base_url(
    headers: Mapping[str, str],
    fallback_base_url: str,
    request_scheme: Optional[str] = None,
    request_host: Optional[str] = None,
) -> str:
    """Work out the externally visible base URL of a request.
    
    X-Forwarded-Proto/X-Forwarded-Host win over the request's own scheme and
    host, which win over the configured fallback.
    """
    lowered = {k.lower(): v for k, v in headers.items()}
    proto = lowered.get("x-forwarded-proto")
    host = lowered.get("x-forwarded-host")
    
    if proto and host:
        return f"{proto}://{host}"
    if request_scheme and request_host:
        return f"{request_scheme}://{request_host}"
    return fallback_base_url.rstrip("/")


def build_short_url(short_key: str, base_url: str, path_prefix: str = "") -> str:
    """Join base URL, optional path prefix and short key."""
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")
    
    if prefix:
        return f"{base}/{prefix}/{short_key}"
    return f"{base}/{short_key}"
