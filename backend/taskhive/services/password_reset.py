"""Password Reset Flow — email a recovery link, then set a new password from it.

Invariants:
    - A reset request never reveals whether the email has an account:
      provider failures are logged and the request still reads as sent
    - A reset without a link token is refused before any provider call
    - New password checks run in order (both fields, match, length) and the
      first failure is the banner text
    - The recovery token is spent only after the new password passes those
      checks; a rejected token reads as an invalid or expired link
"""

import logging
from dataclasses import dataclass

from taskhive.core.errors import (
    IdentityRequestError, IdentityProviderError, TaskHiveError,
)
from taskhive.core.identity_protocol import IdentityProvider

logger = logging.getLogger(__name__)

MINIMUM_RESET_PASSWORD_LENGTH = 8

EMAIL_REQUIRED_MESSAGE = "Please enter your email address"
INVALID_LINK_MESSAGE = (
    "Invalid or expired password reset link. Please request a new one."
)
FIELDS_REQUIRED_MESSAGE = "Please fill in all fields"
PASSWORD_MISMATCH_MESSAGE = "Passwords do not match"
PASSWORD_TOO_SHORT_MESSAGE = "Password must be at least 8 characters long"
RESET_FAILED_MESSAGE = "Failed to reset password. Please try again."
RESET_SENT_MESSAGE = (
    "If an account exists with this email, "
    "you'll receive password reset instructions."
)


@dataclass
class ResetOutcome:
    error: str = ""
    status_code: int = 200
    invalid_link: bool = False

    @property
    def ok(self) -> bool:
        return not self.error


def _invalid_link() -> ResetOutcome:
    return ResetOutcome(
        error=INVALID_LINK_MESSAGE, status_code=400, invalid_link=True,
    )


async def request_password_reset(
    email: str, provider: IdentityProvider, redirect_to: str | None = None,
) -> ResetOutcome:
    email = email.strip()
    if not email:
        return ResetOutcome(error=EMAIL_REQUIRED_MESSAGE, status_code=400)
    try:
        await provider.send_password_reset(email, redirect_to)
    except TaskHiveError as e:
        logger.error(
            f"Error requesting password reset: {e.message}",
            extra={"email": email, "error_code": e.code},
        )
    else:
        logger.info("Password reset requested", extra={"email": email})
    return ResetOutcome()


def check_new_password(password: str, confirm_password: str) -> str:
    """First problem with the new password pair, or "" when acceptable."""
    if not password or not confirm_password:
        return FIELDS_REQUIRED_MESSAGE
    if password != confirm_password:
        return PASSWORD_MISMATCH_MESSAGE
    if len(password) < MINIMUM_RESET_PASSWORD_LENGTH:
        return PASSWORD_TOO_SHORT_MESSAGE
    return ""


async def reset_password(
    token: str | None,
    password: str,
    confirm_password: str,
    provider: IdentityProvider,
) -> ResetOutcome:
    if not token:
        return _invalid_link()
    problem = check_new_password(password, confirm_password)
    if problem:
        return ResetOutcome(error=problem, status_code=400)

    try:
        session = await provider.verify_recovery(token)
    except IdentityRequestError as e:
        logger.warning(
            f"Recovery token rejected: {e.message}",
            extra={"status_code": e.status_code},
        )
        return _invalid_link()
    except IdentityProviderError as e:
        return ResetOutcome(error=e.message, status_code=e.http_status)

    access_token = session.get("access_token")
    if not access_token:
        return _invalid_link()
    user_id = (session.get("user") or {}).get("id")

    try:
        await provider.update_password(access_token, password)
    except TaskHiveError as e:
        logger.error(
            f"Error resetting password: {e.message}",
            extra={"user_id": user_id, "error_code": e.code},
        )
        return ResetOutcome(
            error=e.message or RESET_FAILED_MESSAGE, status_code=e.http_status,
        )
    logger.info("Password reset completed", extra={"user_id": user_id})
    return ResetOutcome()
