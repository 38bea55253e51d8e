# src/inventory_relay/api/v1/endpoints/expiring.py
"""Expiring share (alias) endpoints for the Inventory Relay API."""

from fastapi import APIRouter, Depends, Response, status

from inventory_relay.schemas.share import (
    ExpiringShareCreate,
    ExpiringShareCreated,
    ExpiringShareList,
    ExpiringShareSummary,
)
from inventory_relay.services.shares import validate_share_code

from ..dependencies import AliasStoreDep, AttestationDep, ClientAddressDep, RateLimit

router = APIRouter(prefix="/share", tags=["expiring-shares"])


@router.post(
    "/expiring",
    status_code=status.HTTP_201_CREATED,
    response_model=ExpiringShareCreated,
    dependencies=[Depends(RateLimit("create-expiring-share")), AttestationDep],
)
async def create_expiring_share(
    alias_data: ExpiringShareCreate,
    aliases: AliasStoreDep,
    client_address: ClientAddressDep,
) -> ExpiringShareCreated:
    """Create a time-boxed code pointing at an existing share."""
    record = aliases.create(
        alias_data.main_share_code,
        alias_data.display_name,
        alias_data.share_notes,
        alias_data.expiration_duration,
        client_address,
    )
    return ExpiringShareCreated(share_code=record.share_code, expires_at=record.expires_at)


@router.get(
    "/{main_share_code}/expiring",
    response_model=ExpiringShareList,
    dependencies=[AttestationDep],
)
async def list_expiring_shares(main_share_code: str, aliases: AliasStoreDep) -> ExpiringShareList:
    """List the live aliases of a share, soonest expiry first."""
    records = aliases.list(main_share_code)
    return ExpiringShareList(
        expiring_shares=[
            ExpiringShareSummary(
                share_code=record.share_code,
                display_name=record.display_name,
                share_notes=record.share_notes,
                expires_at=record.expires_at,
                created_at=record.created_at,
            )
            for record in records
        ]
    )


@router.delete(
    "/expiring/{share_code}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    dependencies=[Depends(RateLimit("delete-expiring-share")), AttestationDep],
)
async def delete_expiring_share(share_code: str, aliases: AliasStoreDep) -> None:
    """Delete an alias. Knowing the alias code is sufficient."""
    validate_share_code(share_code)
    aliases.delete(share_code)
