# src/inventory_relay/schemas/share.py
"""Share-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from inventory_relay.models.base import IsoDatetime


class CamelModel(BaseModel):
    """Schema exchanged with clients using camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShareCreate(CamelModel):
    """Schema for claiming a share code."""

    share_code: str = Field(..., min_length=1, description="6-character uppercase alphanumeric code")
    snapshot_data: str = Field(..., min_length=1, description="Base64-encoded signed snapshot")
    public_key: str = Field(..., min_length=1, description="Base64-encoded Ed25519 public key")


class ShareUpdate(CamelModel):
    """Schema for replacing a share's snapshot and key."""

    snapshot_data: str = Field(..., min_length=1, description="Base64-encoded signed snapshot")
    public_key: str = Field(..., min_length=1, description="Base64-encoded Ed25519 public key")


class ShareResponse(CamelModel):
    """Share payload returned to readers."""

    snapshot_data: str
    public_key: str
    display_name: str | None = None
    share_notes: str | None = None
    expires_at: IsoDatetime


class ExpiringShareCreate(CamelModel):
    """Schema for creating a time-boxed alias of a share."""

    main_share_code: str = Field(..., min_length=1, description="Code of the primary share")
    display_name: str = Field(..., min_length=1, description="Name shown to recipients")
    share_notes: str | None = Field(None, description="Optional notes shown to recipients")
    expiration_duration: int = Field(..., description="Lifetime in seconds")


class ExpiringShareCreated(CamelModel):
    share_code: str
    expires_at: IsoDatetime


class ExpiringShareSummary(CamelModel):
    """Alias details returned when listing a share's aliases."""

    share_code: str
    display_name: str
    share_notes: str | None = None
    expires_at: IsoDatetime
    created_at: IsoDatetime


class ExpiringShareList(CamelModel):
    expiring_shares: list[ExpiringShareSummary]
