"""Domain Types — enums and constants shared across schemas, services and pages.

Invariants:
    - Enum values equal the literal strings stored in the external database
    - Task.status and Transaction.type/status stay open strings (not enumerated here)

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
    - Age bounds live here so the validator and the signup form agree
"""

from enum import Enum


# ─── Constants ───────────────────────────────────────────────────

MINIMUM_AGE = 18
MAXIMUM_SIGNUP_AGE = 90
PRODUCT_NAME = "TaskHived"
PRODUCT_TAGLINE = "AI-Verified Microtask Marketplace"


# ─── Enums ───────────────────────────────────────────────────────

class UserRole(str, Enum):
    """Account roles — maps to user_profiles.role."""
    ADMIN = "admin"
    CLIENT = "client"
    WORKER = "worker"


class KycStatus(str, Enum):
    """Identity verification states — only VERIFIED unlocks protected pages."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"


class SubmissionStatus(str, Enum):
    """Outcome of a worker's task submission."""
    COMPLETED = "completed"
    UNDER_REVIEW = "under_review"
    REJECTED = "rejected"


class TaskItemStatus(str, Enum):
    """Worker-facing task list states."""
    ASSIGNED = "assigned"
    SUBMITTED = "submitted"
    VERIFIED = "verified"
    REJECTED = "rejected"
