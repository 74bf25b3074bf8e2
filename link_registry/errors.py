"""Error types raised by the link registry."""


class RegistryError(Exception):
    """Base class for registry failures.
    
    Each subclass carries a stable ``code`` tag so callers can branch on the
    kind of failure without parsing the message.
    """
    
    code = "registry_error"
    
    def __init__(self, message: str = ""):
        super().__init__(message or self.code)
        self.message = message or self.code


class InvalidInput(RegistryError):
    """Empty destination URL or malformed custom key."""
    
    code = "invalid_input"


class KeyConflict(RegistryError):
    """The short key already maps to a live record."""
    
    code = "key_conflict"


class NotFound(RegistryError):
    """No live record exists for the short key."""
    
    code = "not_found"


class Unauthorized(RegistryError):
    """The authenticated caller does not own the record."""
    
    code = "unauthorized"


class AuthenticationFailed(RegistryError):
    """The claimed identity could not be verified."""
    
    code = "authentication_failed"
