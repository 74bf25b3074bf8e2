"""Core registry logic: ownership-gated link CRUD."""

import asyncio
import logging
from typing import Any, Dict, Optional

from .common.validators import is_valid_destination, is_valid_short_key
from .environment import Authenticator, Clock
from .errors import AuthenticationFailed, InvalidInput, KeyConflict, NotFound, Unauthorized
from .keygen import KeyGenerator
from .models import LinkRecord
from .store.base import LinkStore

# One year, in seconds
DEFAULT_RETENTION_SECONDS = 31_536_000


class Registry:
    """Maps short keys to destination URLs and enforces record ownership.

    Mutations are serialized on an internal lock, and every check runs before
    the first store write, so a failed call leaves the store untouched.
    """

    def __init__(
        self,
        store: LinkStore,
        clock: Clock,
        authenticator: Optional[Authenticator] = None,
        key_generator: Optional[KeyGenerator] = None,
        logger: Optional[logging.Logger] = None,
        max_collision_retries: int = 5,
        retention_seconds: int = DEFAULT_RETENTION_SECONDS,
    ):
        """Initialize the registry.

        Args:
            store: Backing link store
            clock: Ledger sequence/timestamp source
            authenticator: Default authenticator, used when a call passes none
            key_generator: Optional short key generator
            logger: Optional logger
            max_collision_retries: Extra attempts when a generated key is taken
                (0 fails on the first collision)
            retention_seconds: Retention horizon requested for live records
        """
        if max_collision_retries < 0:
            raise ValueError("max_collision_retries cannot be negative")

        self.store = store
        self.clock = clock
        self.authenticator = authenticator
        self.generator = key_generator or KeyGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.max_collision_retries = max_collision_retries
        self.retention_seconds = retention_seconds
        self._lock = asyncio.Lock()

    async def create(
        self,
        owner: str,
        destination_url: str,
        custom_key: Optional[str] = None,
        auth: Optional[Authenticator] = None,
    ) -> str:
        """Create a new link owned by ``owner``.

        Args:
            owner: Identity that will own the link
            destination_url: Redirect target
            custom_key: Optional caller-chosen short key
            auth: Authenticator for this call (defaults to the registry's)

        Returns:
            The short key the link was filed under

        Raises:
            AuthenticationFailed: If ``owner`` cannot be authenticated
            InvalidInput: If the URL is empty or the custom key malformed
            KeyConflict: If the key is already live
        """
        async with self._lock:
            self._authenticate(owner, auth)

            is_valid, error = is_valid_destination(destination_url)
            if not is_valid:
                raise InvalidInput(error)

            if custom_key is not None:
                is_valid, error = is_valid_short_key(custom_key)
                if not is_valid:
                    raise InvalidInput(error)

            sequence = self.clock.sequence()
            timestamp = self.clock.timestamp()
            record = LinkRecord(
                destination_url=destination_url,
                created_at=sequence,
                owner=owner,
            )

            if custom_key is not None:
                short_key = custom_key
                if not await self.store.insert(short_key, record, self.retention_seconds):
                    self.logger.warning(f"Rejected duplicate key: {short_key}")
                    raise KeyConflict(f"Link key '{short_key}' already exists")
            else:
                short_key = await self._insert_generated(record, sequence, timestamp)

        self.logger.info(f"Created link: {short_key} -> {destination_url} (owner={owner})")
        return short_key

    async def update(
        self,
        caller: str,
        short_key: str,
        new_destination_url: str,
        auth: Optional[Authenticator] = None,
    ) -> None:
        """Point an existing link at a new destination.

        Raises:
            AuthenticationFailed: If ``caller`` cannot be authenticated
            NotFound: If the key is not live
            Unauthorized: If ``caller`` does not own the link
            InvalidInput: If the new URL is empty
        """
        async with self._lock:
            self._authenticate(caller, auth)
            record = await self._owned_record(caller, short_key)

            is_valid, error = is_valid_destination(new_destination_url)
            if not is_valid:
                raise InvalidInput(error)

            if not await self.store.put(short_key, record.with_destination(new_destination_url)):
                raise NotFound(f"Link '{short_key}' not found")

            await self.store.extend_retention(
                short_key, self.retention_seconds, self.retention_seconds
            )

        self.logger.info(f"Updated link: {short_key} -> {new_destination_url}")

    async def delete(
        self,
        caller: str,
        short_key: str,
        auth: Optional[Authenticator] = None,
    ) -> None:
        """Delete a link and its ownership entry.

        Raises:
            AuthenticationFailed: If ``caller`` cannot be authenticated
            NotFound: If the key is not live
            Unauthorized: If ``caller`` does not own the link
        """
        async with self._lock:
            self._authenticate(caller, auth)
            await self._owned_record(caller, short_key)

            if not await self.store.delete(short_key):
                raise NotFound(f"Link '{short_key}' not found")

        self.logger.info(f"Deleted link: {short_key}")

    async def get_destination(self, short_key: str) -> str:
        """Get the destination URL for a short key (public)."""
        record = await self.get_record(short_key)
        return record.destination_url

    async def get_record(self, short_key: str) -> LinkRecord:
        """Get the full record for a short key (public).

        Raises:
            NotFound: If the key is not live
        """
        record = await self.store.get(short_key)
        if record is None:
            self.logger.debug(f"Link not found: {short_key}")
            raise NotFound(f"Link '{short_key}' not found")
        return record

    async def get_owner(self, short_key: str) -> str:
        """Get the owner identity of a short key (public)."""
        record = await self.get_record(short_key)
        return record.owner

    async def health_check(self) -> Dict[str, Any]:
        """Report store health."""
        store_healthy = await self.store.health_check()
        return {
            "store": store_healthy,
            "overall": store_healthy,
        }

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()

    def _authenticate(self, identity: str, auth: Optional[Authenticator]) -> None:
        authenticator = auth or self.authenticator
        if authenticator is None:
            raise AuthenticationFailed("No authenticator available for this call")
        try:
            authenticator.require_auth(identity)
        except AuthenticationFailed:
            self.logger.warning(f"Authentication failed for identity: {identity}")
            raise

    async def _owned_record(self, caller: str, short_key: str) -> LinkRecord:
        record = await self.store.get(short_key)
        if record is None:
            raise NotFound(f"Link '{short_key}' not found")
        if record.owner != caller:
            self.logger.warning(f"Rejected change to {short_key} by non-owner {caller}")
            raise Unauthorized("Not the owner of this link")
        return record

    async def _insert_generated(self, record: LinkRecord, sequence: int, timestamp: int) -> str:
        """Insert under a generated key, retrying on collision.

        Attempt 0 is the plain (sequence + timestamp) key; later attempts
        shift the seed by the attempt number.
        """
        for attempt in range(self.max_collision_retries + 1):
            short_key = self.generator.generate(sequence, timestamp, attempt)
            if await self.store.insert(short_key, record, self.retention_seconds):
                if attempt:
                    self.logger.debug(f"Generated key after {attempt + 1} attempts: {short_key}")
                return short_key

        self.logger.warning(f"Generated key collided after {self.max_collision_retries + 1} attempts")
        raise KeyConflict(f"Link key '{short_key}' already exists")
