"""Data models for the link registry."""

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class LinkRecord:
    """A destination URL filed under a short key."""
    
    destination_url: str
    created_at: int
    owner: str
    
    def with_destination(self, destination_url: str) -> "LinkRecord":
        """Return a copy pointing at a new destination, metadata unchanged."""
        return replace(self, destination_url=destination_url)
    
    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "destination_url": self.destination_url,
            "created_at": self.created_at,
            "owner": self.owner,
        }
    
    @classmethod
    def from_dict(cls, data: dict) -> "LinkRecord":
        """Create from dictionary."""
        return cls(
            destination_url=data["destination_url"],
            created_at=int(data["created_at"]),
            owner=data["owner"],
        )
