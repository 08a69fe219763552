"""Signup Form Flow — terms check, field validation, then account creation.

Invariants:
    - Terms not agreed: general error only, nothing else validated or sent
    - Any field error: provider is never called
    - Duplicate email becomes a field error on "email", not a general error
    - Other provider failures become the general error (banner text)
    - status_code is what the page answers with: 400 for form problems,
      the error's own http_status once the provider was involved
"""

from dataclasses import dataclass, field
from datetime import date

from taskhive.core.errors import EmailAlreadyRegisteredError, TaskHiveError
from taskhive.core.signup_validation import validate_signup_form
from taskhive.schemas.auth import CustomUser
from taskhive.services.auth_context import AuthContext

TERMS_REQUIRED_MESSAGE = "You must agree to the terms and conditions"
DUPLICATE_EMAIL_MESSAGE = (
    "This email is already registered. Would you like to reset your password?"
)


@dataclass
class SignupOutcome:
    """What the signup page needs to re-render (or redirect on success)."""
    errors: dict[str, str] = field(default_factory=dict)
    general_error: str = ""
    user: CustomUser | None = None
    status_code: int = 400

    @property
    def ok(self) -> bool:
        return self.user is not None


async def process_signup(
    form_data: dict[str, str],
    agree_to_terms: bool,
    auth: AuthContext,
    today: date | None = None,
) -> SignupOutcome:
    if not agree_to_terms:
        return SignupOutcome(general_error=TERMS_REQUIRED_MESSAGE)

    errors = validate_signup_form(form_data, today=today)
    if errors:
        return SignupOutcome(errors=errors)

    try:
        user = await auth.signup(
            form_data["name"], form_data["email"], form_data["password"],
            form_data.get("role") or "worker",
        )
    except EmailAlreadyRegisteredError as e:
        return SignupOutcome(
            errors={"email": DUPLICATE_EMAIL_MESSAGE}, status_code=e.http_status,
        )
    except TaskHiveError as e:
        return SignupOutcome(
            general_error=e.message or "An unexpected error occurred. Please try again.",
            status_code=e.http_status,
        )
    return SignupOutcome(user=user, status_code=200)
