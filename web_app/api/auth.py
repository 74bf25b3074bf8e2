"""Bearer-token authentication for API routes."""

import hmac
from typing import Mapping, Optional

from fastapi import Request

from link_registry.environment import RequestAuthenticator


def resolve_identity(authorization: Optional[str], api_tokens: Mapping[str, str]) -> Optional[str]:
    """Map an ``Authorization: Bearer <token>`` header to an identity.
    
    Returns:
        The identity for a known token, None otherwise
    """
    if not authorization:
        return None
    
    scheme, _, token = authorization.partition(" ")
    token = token.strip()
    if scheme.lower() != "bearer" or not token:
        return None
    
    for known_token, identity in api_tokens.items():
        if hmac.compare_digest(known_token.encode(), token.encode()):
            return identity
    return None


def get_authenticator(request: Request) -> RequestAuthenticator:
    """FastAPI dependency: authenticator for the current request."""
    config = request.app.state.config
    principal = resolve_identity(request.headers.get("authorization"), config.api_tokens)
    return RequestAuthenticator(principal)
