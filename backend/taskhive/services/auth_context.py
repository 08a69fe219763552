"""Auth Context — per-request view of who is signed in, backed by the identity provider.

Invariants:
    - user is always a CustomUser built via format_user_with_metadata (or None)
    - is_loading is True until restore/login/signup settles, then False
    - is_verified is None when signed out, otherwise the KYC check result
    - A failed KYC lookup leaves is_verified False, never raises
    - A provider user record that cannot be read raises IdentityProviderError
    - update_experience never lets experience drop below zero
    - logout clears local state even when the provider call fails

Design Decisions:
    - One AuthContext per request (no shared mutable state across requests)
    - Provider error messages surface unchanged as AuthenticationError so the
      form error banner shows what the provider said
    - Welcome email is best effort: failure is logged, signup still succeeds
"""

import logging
from typing import Any

from pydantic import ValidationError

from taskhive.core.auth_utils import format_user_with_metadata
from taskhive.core.domain_types import KycStatus, UserRole
from taskhive.core.errors import (
    AuthenticationError,
    EmailAlreadyRegisteredError,
    ErrorContext,
    IdentityProviderError,
    IdentityRequestError,
    InvalidExperienceError,
    NotAuthenticatedError,
    TaskHiveError,
)
from taskhive.core.identity_protocol import IdentityProvider
from taskhive.schemas.auth import AuthSession, CustomUser

logger = logging.getLogger(__name__)

_DUPLICATE_MARKERS = ("already registered", "already exists")


def to_custom_user(raw_user: dict[str, Any]) -> CustomUser:
    """Normalize a provider user record into a CustomUser."""
    try:
        return CustomUser.model_validate(format_user_with_metadata(dict(raw_user)))
    except ValidationError as e:
        raise IdentityProviderError(
            "Identity provider returned an unreadable user record",
            "invalid_response",
            context=ErrorContext(
                operation="to_custom_user",
                debug_info={"fields": [str(err["loc"][0]) for err in e.errors()]},
            ),
        ) from e


def to_session(payload: dict[str, Any], user: CustomUser) -> AuthSession:
    """Build the session from a password-grant response."""
    try:
        return AuthSession.model_validate({**payload, "user": user})
    except ValidationError as e:
        raise IdentityProviderError(
            "Identity provider returned an unreadable session",
            "invalid_response",
            context=ErrorContext(operation="sign_in", user_id=user.id),
        ) from e


class AuthContext:
    """Auth state plus login/signup/logout/update_experience for one client."""

    def __init__(self, provider: IdentityProvider, welcome_email: bool = True):
        self._provider = provider
        self._welcome_email = welcome_email
        self.user: CustomUser | None = None
        self.session: AuthSession | None = None
        self.is_loading = True
        self.is_verified: bool | None = None

    @property
    def access_token(self) -> str | None:
        return self.session.access_token if self.session else None

    async def restore(self, access_token: str | None) -> None:
        """Load the user behind an existing access token (or settle as signed out)."""
        if not access_token:
            self._clear()
            self.is_loading = False
            return
        try:
            raw_user = await self._provider.get_user(access_token)
        except IdentityRequestError as e:
            raise AuthenticationError(e.message or "Session expired") from e
        user = to_custom_user(raw_user)
        self.session = AuthSession(access_token=access_token, user=user)
        self.user = user
        await self.check_verification()

    async def login(self, email: str, password: str) -> None:
        """Sign in with email and password."""
        self.is_loading = True
        try:
            payload = await self._provider.sign_in_with_password(email, password)
        except IdentityRequestError as e:
            self.is_loading = False
            logger.warning(
                "Login rejected by identity provider",
                extra={"email": email, "status_code": e.status_code},
            )
            raise AuthenticationError(e.message or "Failed to log in") from e
        try:
            user = to_custom_user(payload.get("user") or {})
            session = to_session(payload, user)
        except IdentityProviderError:
            self.is_loading = False
            raise
        self.session = session
        self.user = user
        logger.info("User logged in", extra={"user_id": user.id})
        await self.check_verification()

    async def signup(
        self,
        name: str,
        email: str,
        password: str,
        role: str = UserRole.WORKER.value,
    ) -> CustomUser:
        """Create an account; new accounts start unverified with 0 experience."""
        self.is_loading = True
        try:
            return await self._signup(name, email, password, role)
        finally:
            self.is_loading = False

    async def _signup(
        self, name: str, email: str, password: str, role: str,
    ) -> CustomUser:
        if await self._provider.email_exists(email):
            raise EmailAlreadyRegisteredError()
        metadata = {
            "name": name, "experience": 0, "role": role, "verified": False,
        }
        try:
            raw_user = await self._provider.sign_up(email, password, metadata)
        except IdentityRequestError as e:
            if any(m in e.message.lower() for m in _DUPLICATE_MARKERS):
                raise EmailAlreadyRegisteredError() from e
            raise AuthenticationError(e.message or "Failed to create account") from e
        if not raw_user:
            raise IdentityProviderError(
                "Failed to create user account", "empty_response",
                context=ErrorContext(operation="sign_up"),
            )
        await self._send_welcome_email(name, email, role)
        self.user = to_custom_user(raw_user)
        self.is_verified = False
        logger.info("User signed up", extra={"user_id": self.user.id})
        return self.user

    async def logout(self) -> None:
        """Sign out at the provider, then drop local state regardless."""
        token = self.access_token
        try:
            if token:
                await self._provider.sign_out(token)
        except TaskHiveError as e:
            logger.error(
                f"Error signing out: {e.message}",
                extra={"error_code": e.code},
            )
        finally:
            self._clear()

    async def update_experience(self, hours: float) -> CustomUser | None:
        """Add hours to the user's experience. No-op when signed out."""
        if not self.user:
            return None
        token = self.access_token
        if not token:
            raise NotAuthenticatedError()
        new_experience = (self.user.experience or 0) + hours
        if new_experience < 0:
            raise InvalidExperienceError(self.user.experience, hours)
        await self._provider.update_user(token, {"experience": new_experience})
        updated = self.user.model_copy(deep=True)
        updated.experience = new_experience
        updated.user_metadata.experience = new_experience
        self.user = updated
        if self.session:
            self.session.user = updated
        return updated

    async def check_verification(self) -> bool:
        """Refresh is_verified from the user's KYC status."""
        if not self.user:
            self.is_verified = None
            self.is_loading = False
            return False
        try:
            status = await self._provider.fetch_kyc_status(
                self.user.id, self.access_token,
            )
            self.is_verified = status == KycStatus.VERIFIED.value
        except TaskHiveError as e:
            logger.error(
                f"Error checking verification status: {e.message}",
                extra={"user_id": self.user.id, "error_code": e.code},
            )
            self.is_verified = False
        finally:
            self.is_loading = False
        return self.is_verified

    def require_user(self) -> CustomUser:
        if not self.user:
            raise NotAuthenticatedError()
        return self.user

    async def _send_welcome_email(self, name: str, email: str, role: str) -> None:
        if not self._welcome_email:
            return
        try:
            await self._provider.invoke_function(
                "send-welcome-email",
                {"name": name, "email": email, "role": role, "welcomeType": "initial"},
            )
        except TaskHiveError as e:
            logger.error(
                f"Failed to send welcome email: {e.message}",
                extra={"error_code": e.code},
            )

    def _clear(self) -> None:
        self.user = None
        self.session = None
        self.is_verified = None
