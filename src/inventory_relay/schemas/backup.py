# src/inventory_relay/schemas/backup.py
"""Backup-related Pydantic schemas."""

from pydantic import Field

from .share import CamelModel


class BackupRegister(CamelModel):
    """Schema for reserving a backup key."""

    backup_key: str = Field(..., min_length=1, description="Key in XXX-XXX-XXX form (A-Z, 2-9)")
    public_key: str = Field(..., min_length=1, description="Base64-encoded Ed25519 public key")


class BackupUpload(CamelModel):
    """Schema for uploading one backup version."""

    backup_type: str = Field(..., alias="type", min_length=1, description="Backup stream type")
    data: str = Field(..., min_length=1, description="Opaque backup payload")
    checksum: str = Field(..., min_length=1, description="Content hash used for deduplication")


class BackupCreated(CamelModel):
    message: str = "Backup created"
    timestamp: str
    backup_count: int


class BackupSkipped(CamelModel):
    message: str = "Backup unchanged"
    skipped: bool = True
    latest_timestamp: str


class BackupDownload(CamelModel):
    """Latest backup of a stream."""

    data: str
    checksum: str
    timestamp: str
    backup_count: int
