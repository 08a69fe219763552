"""Task Schemas — task rows plus joined display fields and submission shapes.

Invariants:
    - worker_id is None until a worker is assigned
    - status is an open string; TaskSubmissionResult/TaskItem statuses are closed
    - Display fields (client_name, worker_email, ...) are optional: present
      only when the caller joined the related user records

Design Decisions:
    - estimatedTime keeps its camelCase name: it is part of the UI contract
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from taskhive.core.domain_types import SubmissionStatus, TaskItemStatus


class Task(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    client_id: str
    worker_id: str | None
    title: str
    description: str
    payment: float
    time_taken: int | None
    status: str
    payment_status: str | None
    created_at: datetime
    updated_at: datetime

    # Joined / optional display fields
    client_name: str | None = None
    client_email: str | None = None
    worker_name: str | None = None
    worker_email: str | None = None
    worker_wallet_address: str | None = None
    worker_wallet_status: str | None = None
    submission_text: str | None = None
    comment: str | None = None
    file_path: str | None = None
    submitted_at: datetime | None = None
    completed_at: datetime | None = None
    requires_human_review: bool | None = None
    ai_validation_summary: str | None = None
    score: float | None = None
    category: str | None = None
    difficulty: str | None = None
    deadline: datetime | None = None
    estimatedTime: str | None = None


class TaskSubmission(BaseModel):
    task_id: str
    comment: str | None = None
    file_name: str | None = None


class TaskSubmissionResult(BaseModel):
    status: SubmissionStatus
    task: Task
    message: str


class TaskActivity(BaseModel):
    id: str
    message: str
    created_at: datetime
    task_name: str | None = None
    task_id: str | None = None


class TaskItem(BaseModel):
    id: str
    title: str
    deadline: datetime | None = None
    status: TaskItemStatus
