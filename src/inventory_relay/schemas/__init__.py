"""Pydantic schemas for the HTTP API."""

from .backup import BackupCreated, BackupDownload, BackupRegister, BackupSkipped, BackupUpload
from .share import (
    ExpiringShareCreate,
    ExpiringShareCreated,
    ExpiringShareList,
    ExpiringShareSummary,
    ShareCreate,
    ShareResponse,
    ShareUpdate,
)

__all__ = [
    "BackupCreated",
    "BackupDownload",
    "BackupRegister",
    "BackupSkipped",
    "BackupUpload",
    "ExpiringShareCreate",
    "ExpiringShareCreated",
    "ExpiringShareList",
    "ExpiringShareSummary",
    "ShareCreate",
    "ShareResponse",
    "ShareUpdate",
]
