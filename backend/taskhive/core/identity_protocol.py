"""Boundary Protocol — contract between the auth context and the identity provider.

Invariants:
    - Services depend on IdentityProvider, never on httpx directly
    - Payloads are raw provider dicts; formatting happens in core/auth_utils.py

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
"""

from typing import Any, Protocol


class IdentityProvider(Protocol):
    """Contract for the external identity provider — implemented by infrastructure."""
    async def sign_in_with_password(
        self, email: str, password: str,
    ) -> dict[str, Any]: ...
    async def email_exists(self, email: str) -> bool: ...
    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any],
    ) -> dict[str, Any] | None: ...
    async def sign_out(self, access_token: str) -> None: ...
    async def update_user(
        self, access_token: str, data: dict[str, Any],
    ) -> dict[str, Any]: ...
    async def get_user(self, access_token: str) -> dict[str, Any]: ...
    async def fetch_kyc_status(
        self, user_id: str, access_token: str | None = None,
    ) -> str | None: ...
    async def invoke_function(
        self, name: str, body: dict[str, Any], access_token: str | None = None,
    ) -> Any: ...
    async def send_password_reset(
        self, email: str, redirect_to: str | None = None,
    ) -> None: ...
    async def verify_recovery(self, token_hash: str) -> dict[str, Any]: ...
    async def update_password(
        self, access_token: str, password: str,
    ) -> dict[str, Any]: ...
