"""Task Routes — read-only listing and lookup of marketplace tasks.

Invariants:
    - Never writes: tasks are owned by the external store
    - worker_wallet_* display fields joined from the assigned worker's profile
    - Unknown task id -> 404 ResourceNotFoundError
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from taskhive.core.errors import ResourceNotFoundError
from taskhive.infrastructure.database import get_db
from taskhive.models.task import Task as TaskModel
from taskhive.schemas.task import Task

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


def to_task_schema(row: TaskModel) -> Task:
    """ORM row -> Task with worker display fields joined in."""
    task = Task.model_validate(row)
    profile = row.worker_profile
    if profile is not None:
        task.worker_wallet_address = profile.wallet_address
        task.worker_wallet_status = profile.wallet_status
    return task


@router.get("", response_model=list[Task])
async def list_tasks(
    status: str | None = Query(None),
    client_id: UUID | None = Query(None),
    worker_id: UUID | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
):
    """Newest tasks first, optionally filtered by status, client or worker."""
    query = select(TaskModel).order_by(TaskModel.created_at.desc()).limit(limit)
    if status:
        query = query.where(TaskModel.status == status)
    if client_id:
        query = query.where(TaskModel.client_id == str(client_id))
    if worker_id:
        query = query.where(TaskModel.worker_id == str(worker_id))
    result = await db.execute(query)
    return [to_task_schema(row) for row in result.scalars().all()]


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: UUID, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(TaskModel).where(TaskModel.id == str(task_id)))
    row = result.scalar_one_or_none()
    if not row:
        raise ResourceNotFoundError("Task", str(task_id))
    return to_task_schema(row)
