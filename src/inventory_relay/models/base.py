# src/inventory_relay/models/base.py
"""Base class for JSON documents persisted in the key-value store."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel

from inventory_relay.db.time import to_iso

IsoDatetime = Annotated[datetime, PlainSerializer(to_iso, return_type=str, when_used="json")]


class StoredDocument(BaseModel):
    """Document stored as camelCase JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready camelCase representation."""
        return self.model_dump(by_alias=True, mode="json")
