"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from link_registry.models import LinkRecord


class CreateLinkRequest(BaseModel):
    """Request to register a new link."""
    
    destination_url: str = Field(..., description="The redirect target")
    custom_key: Optional[str] = Field(None, description="Optional custom short key (1-64 characters)")
    owner: Optional[str] = Field(None, description="Owner identity; defaults to the authenticated identity")
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "destination_url": "https://example.com/very/long/path/to/resource",
                    "custom_key": None
                },
                {
                    "destination_url": "https://github.com/user/repo",
                    "custom_key": "myrepo"
                }
            ]
        }
    }


class UpdateLinkRequest(BaseModel):
    """Request to change a link's destination."""
    
    destination_url: str = Field(..., description="The new redirect target")


class LinkResponse(BaseModel):
    """A link record."""
    
    short_key: str = Field(..., description="The short key")
    short_url: str = Field(..., description="The complete short URL")
    destination_url: str = Field(..., description="The redirect target")
    created_at: int = Field(..., description="Ledger sequence at creation")
    owner: str = Field(..., description="Owner identity")
    
    @classmethod
    def from_record(cls, short_key: str, short_url: str, record: LinkRecord) -> "LinkResponse":
        return cls(short_key=short_key, short_url=short_url, **record.to_dict())
    
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "short_key": "abc1234",
                    "short_url": "https://short.link/abc1234",
                    "destination_url": "https://example.com/very/long/path",
                    "created_at": 351234,
                    "owner": "alice"
                }
            ]
        }
    }


class DestinationResponse(BaseModel):
    """Destination lookup response."""
    
    short_key: str
    destination_url: str


class OwnerResponse(BaseModel):
    """Owner lookup response."""
    
    short_key: str
    owner: str


class HealthResponse(BaseModel):
    """Health check response."""
    
    status: str = Field(..., description="Overall status")
    store: str = Field(..., description="Link store status")
    timestamp: datetime = Field(..., description="Check timestamp")


class ErrorResponse(BaseModel):
    """Error response."""
    
    error: str = Field(..., description="Error code")
    detail: Optional[str] = Field(None, description="Detailed error information")
