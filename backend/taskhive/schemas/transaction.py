"""Transaction Schema — ledger row shape.

Invariants:
    - type and status are open strings, not enums (permissive external schema)
    - metadata is read from the ORM attribute metadata_ and emitted as metadata
"""

from datetime import datetime
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Transaction(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    amount: float
    credits: float | None = None
    type: str
    status: str
    payment_processor: str | None = None
    payment_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    # ADR: ORM objects also expose Base.metadata, so metadata_ must be tried first
    metadata: dict[str, Any] | None = Field(
        None, validation_alias=AliasChoices("metadata_", "metadata"),
    )
    role: str | None = None
    currency: str | None = None
    recipient_id: str | None = None
    description: str | None = None
    payment_method: str | None = None
