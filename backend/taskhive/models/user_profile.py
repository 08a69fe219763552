"""UserProfile ORM — per-account role, credit balance, wallet and KYC state.

Invariants:
    - id equals the identity provider's user id
    - role is one of admin | client | worker
    - credits is the ledger balance, never written from here
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Float, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from taskhive.db.base import Base


class UserProfile(Base):
    __tablename__ = "user_profiles"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default="worker",
    )
    credits: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    wallet_address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    wallet_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    kyc_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
