"""ORM Models — SQLAlchemy mirrors of the external marketplace tables.

Invariants:
    - All models inherit from Base (db/base.py)
    - Column names match the external schema exactly

Design Decisions:
    - One file per table for locality
    - All models imported here so string-based relationship() references resolve
"""

from taskhive.models.user_profile import UserProfile  # noqa: F401
from taskhive.models.task import Task  # noqa: F401
from taskhive.models.transaction import Transaction  # noqa: F401
