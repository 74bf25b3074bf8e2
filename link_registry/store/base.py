"""Abstract base class for link store implementations."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import LinkRecord


class LinkStore(ABC):
    """Persistent key-value storage for link records.
    
    Each record embeds its owner, so the links table and the owners table
    always share one key set.
    """
    
    @abstractmethod
    async def get(self, short_key: str) -> Optional[LinkRecord]:
        """Get the live record for a short key.
        
        Args:
            short_key: The short key to lookup
            
        Returns:
            The record if present, None otherwise
        """
        pass
    
    @abstractmethod
    async def insert(
        self, short_key: str, record: LinkRecord, retention: Optional[int] = None
    ) -> bool:
        """Insert a record under a key that is not live.

        Args:
            short_key: The short key to file the record under
            record: The record to store
            retention: Seconds to keep the record, set in the same write;
                None keeps it until deleted

        Returns:
            True if inserted, False if the key is already live
        """
        pass
    
    @abstractmethod
    async def put(self, short_key: str, record: LinkRecord) -> bool:
        """Replace the record of a live key, keeping its retention.
        
        Returns:
            True if replaced, False if the key is not live
        """
        pass
    
    @abstractmethod
    async def delete(self, short_key: str) -> bool:
        """Remove a record.
        
        Returns:
            True if deleted, False if not found
        """
        pass
    
    @abstractmethod
    async def extend_retention(self, short_key: str, min_horizon: int, max_horizon: int) -> None:
        """Extend how long a record is kept.
        
        If the record's remaining lifetime is below ``min_horizon`` seconds,
        it is extended to ``max_horizon`` seconds. Advisory only.
        """
        pass
    
    async def exists(self, short_key: str) -> bool:
        """Check if a short key is live."""
        return await self.get(short_key) is not None
    
    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        pass
    
    @abstractmethod
    async def close(self) -> None:
        """Release store connections."""
        pass
