"""Host environment collaborators: authentication and the ledger clock."""

import hmac
import time
from abc import ABC, abstractmethod
from typing import Iterable, Optional

from .errors import AuthenticationFailed


class Authenticator(ABC):
    """Verifies that the current call is authorized by an identity."""

    @abstractmethod
    def require_auth(self, identity: str) -> None:
        """Abort unless the current call is authorized as ``identity``.

        Raises:
            AuthenticationFailed: If the identity cannot be verified
        """
        pass


class StaticAuthenticator(Authenticator):
    """Trusts a fixed set of identities.

    Used by tests and by the CLI, where the operator is trusted to act as
    whichever identity they name.
    """

    def __init__(self, identities: Iterable[str]):
        self.identities = set(identities)

    def require_auth(self, identity: str) -> None:
        if identity not in self.identities:
            raise AuthenticationFailed(f"Cannot authenticate as '{identity}'")


class RequestAuthenticator(Authenticator):
    """Authorizes a single request for the principal resolved from its credentials."""

    def __init__(self, principal: Optional[str]):
        self.principal = principal

    def require_auth(self, identity: str) -> None:
        if self.principal is None:
            raise AuthenticationFailed("Missing or invalid credentials")
        if not hmac.compare_digest(self.principal.encode(), identity.encode()):
            raise AuthenticationFailed(
                f"Credentials for '{self.principal}' cannot act as '{identity}'"
            )


class Clock(ABC):
    """Read-only ledger sequence and timestamp source."""

    @abstractmethod
    def sequence(self) -> int:
        """Current ledger sequence number (monotonically non-decreasing)."""
        pass

    @abstractmethod
    def timestamp(self) -> int:
        """Current ledger timestamp in seconds."""
        pass


class SystemClock(Clock):
    """Ledger clock derived from wall-clock time.

    A new ledger closes every ``close_seconds``; the sequence number counts
    ledgers since ``genesis`` (a Unix timestamp).
    """

    def __init__(self, close_seconds: int = 5, genesis: int = 0, time_source=time.time):
        if close_seconds < 1:
            raise ValueError("close_seconds must be at least 1")
        self.close_seconds = close_seconds
        self.genesis = genesis
        self._time = time_source

    def timestamp(self) -> int:
        return int(self._time())

    def sequence(self) -> int:
        return max(0, (self.timestamp() - self.genesis) // self.close_seconds)


class ManualClock(Clock):
    """Clock whose values are set explicitly."""

    def __init__(self, sequence: int = 0, timestamp: int = 0):
        self._sequence = sequence
        self._timestamp = timestamp

    def sequence(self) -> int:
        return self._sequence

    def timestamp(self) -> int:
        return self._timestamp

    def set(self, sequence: int, timestamp: int) -> None:
        if sequence < self._sequence:
            raise ValueError("Ledger sequence cannot move backwards")
        self._sequence = sequence
        self._timestamp = timestamp

    def advance(self, ledgers: int = 1, seconds: int = 5) -> None:
        """Close ``ledgers`` ledgers, each ``seconds`` apart."""
        self.set(self._sequence + ledgers, self._timestamp + ledgers * seconds)
