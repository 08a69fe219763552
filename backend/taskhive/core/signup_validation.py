"""Signup Validation — field-level checks for the signup form.

Invariants:
    - Returns a flat {field: message} dict; empty dict means the form is valid
    - Every rule on a field is checked; the last failing rule's message wins
      (an empty name reports the character rule, not the length rule)
    - confirmPassword mismatch reported even when other fields fail
    - Keys use the form's field names (dateOfBirth, confirmPassword)

Design Decisions:
    - Pydantic model for the rules (same tool as the API schemas), errors
      flattened here so pages and the JSON API share one message set
    - Age bound 18-90 is stricter than validate_age (18+) on purpose:
      the form rejects implausible birth dates, validate_age does not
    - Email requires a top-level domain of two or more letters
"""

import re
from datetime import date

from pydantic import BaseModel, ValidationError, field_validator

from taskhive.core.auth_utils import calculate_age, parse_birth_date
from taskhive.core.domain_types import MINIMUM_AGE, MAXIMUM_SIGNUP_AGE

NAME_PATTERN = re.compile(r"^[a-zA-Z\s\-']+$")
EMAIL_PATTERN = re.compile(
    r"^(?!\.)(?!.*\.\.)[A-Z0-9_'+\-.]*[A-Z0-9_+\-]"
    r"@(?:[A-Z0-9][A-Z0-9\-]*\.)+[A-Z]{2,}$",
    re.IGNORECASE,
)
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]+$",
)

AGE_RANGE_MESSAGE = (
    f"You must be between {MINIMUM_AGE} and {MAXIMUM_SIGNUP_AGE} "
    "years old to sign up"
)


def _raise_last(failures: list[str]) -> None:
    if failures:
        raise ValueError(failures[-1])


class SignupForm(BaseModel):
    """Submitted signup fields, validated in declaration order."""
    name: str = ""
    email: str = ""
    password: str = ""
    dateOfBirth: str = ""

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        failures = []
        if len(v) < 2:
            failures.append("Name must be at least 2 characters")
        if len(v) > 50:
            failures.append("Name must be less than 50 characters")
        if not NAME_PATTERN.match(v):
            failures.append(
                "Name can only contain letters, spaces, hyphens, and apostrophes",
            )
        _raise_last(failures)
        return v

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str) -> str:
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Please enter a valid email")
        return v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        failures = []
        if len(v) < 8:
            failures.append("Password must be at least 8 characters")
        if not PASSWORD_PATTERN.match(v):
            failures.append(
                "Password must contain uppercase letter, lowercase letter, "
                "number, and special character (@$!%*?&)",
            )
        _raise_last(failures)
        return v

    @field_validator("dateOfBirth")
    @classmethod
    def check_date_of_birth(cls, v: str, info) -> str:
        today = (info.context or {}).get("today") or date.today()
        birth = parse_birth_date(v)
        if birth is None:
            raise ValueError(AGE_RANGE_MESSAGE)
        age = calculate_age(birth, today)
        if not MINIMUM_AGE <= age <= MAXIMUM_SIGNUP_AGE:
            raise ValueError(AGE_RANGE_MESSAGE)
        return v


def validate_signup_form(
    form_data: dict[str, str], today: date | None = None,
) -> dict[str, str]:
    """Validate signup fields. Returns {field: message} for every failing field."""
    errors: dict[str, str] = {}
    try:
        SignupForm.model_validate(
            {k: form_data.get(k) or "" for k in SignupForm.model_fields},
            context={"today": today},
        )
    except ValidationError as e:
        for err in e.errors():
            field = str(err["loc"][0])
            errors[field] = _strip_prefix(err["msg"])
    if form_data.get("password", "") != form_data.get("confirmPassword", ""):
        errors["confirmPassword"] = "Passwords do not match"
    return errors


def _strip_prefix(msg: str) -> str:
    """Pydantic prefixes ValueError messages with 'Value error, '."""
    return msg.removeprefix("Value error, ")
