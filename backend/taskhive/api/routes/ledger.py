"""Ledger Routes — read-only transactions and user profiles.

Invariants:
    - Never writes: balances and ledger entries are owned by the external store
    - Transactions listed newest first for one user
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhive.core.errors import ResourceNotFoundError
from taskhive.infrastructure.database import get_db
from taskhive.models.transaction import Transaction as TransactionModel
from taskhive.models.user_profile import UserProfile as UserProfileModel
from taskhive.schemas.profile import UserProfile
from taskhive.schemas.transaction import Transaction

router = APIRouter(prefix="/api/v1", tags=["ledger"])


@router.get("/transactions", response_model=list[Transaction])
async def list_transactions(
    user_id: UUID = Query(...),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(
        select(TransactionModel)
        .where(TransactionModel.user_id == str(user_id))
        .order_by(TransactionModel.created_at.desc())
        .limit(limit),
    )
    return [Transaction.model_validate(row) for row in result.scalars().all()]


@router.get("/profiles/{user_id}", response_model=UserProfile)
async def get_profile(user_id: UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(UserProfileModel).where(UserProfileModel.id == str(user_id)),
    )
    row = result.scalar_one_or_none()
    if not row:
        raise ResourceNotFoundError("UserProfile", str(user_id))
    return UserProfile.model_validate(row)
