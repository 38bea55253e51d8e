# src/inventory_relay/api/v1/endpoints/backups.py
"""Backup endpoints for the Inventory Relay API."""

from fastapi import APIRouter, Depends, Query, Response, status

from inventory_relay.schemas.backup import (
    BackupCreated,
    BackupDownload,
    BackupRegister,
    BackupSkipped,
    BackupUpload,
)

from ..dependencies import (
    AttestationDep,
    BackupStoreDep,
    ClientAddressDep,
    KeyRegistryDep,
    OwnershipSignature,
    RateLimit,
)

router = APIRouter(prefix="/backup", tags=["backups"])


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    dependencies=[Depends(RateLimit("register-backup")), AttestationDep],
)
async def register_backup_key(
    registration: BackupRegister,
    registry: KeyRegistryDep,
    client_address: ClientAddressDep,
) -> None:
    """Reserve a backup key for a public key. Keys are never reassigned."""
    registry.register(registration.backup_key, registration.public_key, client_address)


@router.post(
    "/{backup_key}",
    status_code=status.HTTP_201_CREATED,
    response_model=BackupCreated | BackupSkipped,
    dependencies=[Depends(RateLimit("upload-backup")), AttestationDep],
)
async def upload_backup(
    backup_key: str,
    upload: BackupUpload,
    backups: BackupStoreDep,
    response: Response,
    signature: OwnershipSignature = None,
) -> BackupCreated | BackupSkipped:
    """Upload a backup version; unchanged content is skipped."""
    result = backups.upload(
        backup_key,
        upload.backup_type,
        upload.data,
        upload.checksum,
        signature,
    )
    if result.skipped:
        response.status_code = status.HTTP_200_OK
        return BackupSkipped(latest_timestamp=result.timestamp)
    return BackupCreated(timestamp=result.timestamp, backup_count=result.backup_count)


@router.get(
    "/{backup_key}",
    response_model=BackupDownload,
    dependencies=[Depends(RateLimit("download-backup")), AttestationDep],
)
async def download_backup(
    backup_key: str,
    backups: BackupStoreDep,
    backup_type: str | None = Query(None, alias="type"),
) -> BackupDownload:
    """Return the newest backup of the requested type."""
    result = backups.download(backup_key, backup_type or "")
    return BackupDownload(
        data=result.data,
        checksum=result.checksum,
        timestamp=result.timestamp,
        backup_count=result.backup_count,
    )
