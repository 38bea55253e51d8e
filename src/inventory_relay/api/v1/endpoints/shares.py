# src/inventory_relay/api/v1/endpoints/shares.py
"""Share endpoints for the Inventory Relay API."""

from fastapi import APIRouter, Depends, Response, status

from inventory_relay.schemas.share import ShareCreate, ShareResponse, ShareUpdate
from inventory_relay.services.shares import validate_share_code

from ..dependencies import (
    AliasStoreDep,
    AttestationDep,
    ClientAddressDep,
    OwnershipSignature,
    RateLimit,
    ShareStoreDep,
)

router = APIRouter(prefix="/share", tags=["shares"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    dependencies=[Depends(RateLimit("create-share")), AttestationDep],
)
async def create_share(
    share_data: ShareCreate,
    shares: ShareStoreDep,
    client_address: ClientAddressDep,
) -> None:
    """Claim an unused share code for a snapshot."""
    shares.create(
        share_data.share_code,
        share_data.snapshot_data,
        share_data.public_key,
        client_address,
    )


@router.get(
    "/{share_code}",
    response_model=ShareResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(RateLimit("download-share")), AttestationDep],
)
async def get_share(share_code: str, aliases: AliasStoreDep) -> ShareResponse:
    """Download a share by its own code or by one of its expiring aliases."""
    validate_share_code(share_code)
    resolved = aliases.get(share_code)
    return ShareResponse(
        snapshot_data=resolved.snapshot_data,
        public_key=resolved.public_key,
        display_name=resolved.display_name,
        share_notes=resolved.share_notes,
        expires_at=resolved.expires_at,
    )


@router.put(
    "/{share_code}",
    response_class=Response,
    dependencies=[Depends(RateLimit("update-share")), AttestationDep],
)
async def update_share(
    share_code: str,
    share_data: ShareUpdate,
    shares: ShareStoreDep,
    signature: OwnershipSignature = None,
) -> None:
    """Replace a share's snapshot; requires a signature from the stored key."""
    validate_share_code(share_code)
    shares.update(share_code, share_data.snapshot_data, share_data.public_key, signature)


@router.delete(
    "/{share_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(RateLimit("delete-share")), AttestationDep],
)
async def delete_share(
    share_code: str,
    shares: ShareStoreDep,
    signature: OwnershipSignature = None,
) -> None:
    """Delete a share; requires a signature from the stored key."""
    validate_share_code(share_code)
    shares.delete(share_code, signature)
