"""UserProfile Schema — row shape of user_profiles."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class UserProfile(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    role: Literal["admin", "client", "worker"]
    credits: float
    wallet_address: str | None
    wallet_status: str | None
    created_at: datetime
    updated_at: datetime
