"""Validation utilities for the link registry."""

from typing import Optional, Tuple

MIN_KEY_LENGTH = 1
MAX_KEY_LENGTH = 64


def is_valid_destination(url: Optional[str]) -> Tuple[bool, str]:
    """Validate a destination URL.
    
    Only emptiness is checked; the registry stores any non-empty text.
    
    Args:
        url: The destination URL
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(url, str) or len(url) == 0:
        return False, "URL cannot be empty"
    
    return True, ""


def is_valid_short_key(
    short_key: Optional[str],
    min_length: int = MIN_KEY_LENGTH,
    max_length: int = MAX_KEY_LENGTH,
) -> Tuple[bool, str]:
    """Validate a caller-supplied short key.
    
    Args:
        short_key: The short key to validate
        min_length: Minimum length for short key
        max_length: Maximum length for short key
        
    Returns:
        Tuple of (is_valid, error_message)
    """
    if not isinstance(short_key, str):
        return False, "Custom key must be text"
    
    if not min_length <= len(short_key) <= max_length:
        return False, f"Custom key must be between {min_length} and {max_length} characters"
    
    return True, ""
