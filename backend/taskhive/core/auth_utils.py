"""Auth Utilities — age validation and user-metadata normalization.

Invariants:
    - validate_age never raises: empty, None or malformed input -> False
    - Age is computed on calendar dates: year difference, minus one when
      today's (month, day) precedes the birthday
    - format_user_with_metadata mutates and returns the SAME mapping
    - name defaults to "" and experience to 0 when metadata is absent or falsy

Design Decisions:
    - Tuple comparison of (month, day) handles 29 February without special
      cases (a leap-day birthday turns 18 on 1 March in non-leap years)
    - Malformed strings are not rejected up front: the caller receives a
      boolean with no guarantee of meaning, matching upstream behavior
    - `today` injectable for deterministic tests
"""

from datetime import date, datetime
from typing import Any, MutableMapping

from taskhive.core.domain_types import MINIMUM_AGE


def parse_birth_date(value: str | None) -> date | None:
    """Parse an ISO date (or datetime) string. Returns None when unusable."""
    if not value:
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def calculate_age(birth: date, today: date) -> int:
    """Whole years between birth and today."""
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def validate_age(date_of_birth: str | None, today: date | None = None) -> bool:
    """True when the person born on date_of_birth is at least 18 today."""
    birth = parse_birth_date(date_of_birth)
    if birth is None:
        return False
    return calculate_age(birth, today or date.today()) >= MINIMUM_AGE


def format_user_with_metadata(
    user: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Copy name/experience from user_metadata to the top level. Pure, total."""
    metadata = user.get("user_metadata") or {}
    user["name"] = metadata.get("name") or ""
    user["experience"] = metadata.get("experience") or 0
    return user
