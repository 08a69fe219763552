"""Resilient Identity Client — GoTrue/PostgREST REST calls over httpx with retry and error mapping.

Invariants:
    - Rate limits (429): exponential backoff with jitter, respects Retry-After header
    - Transient errors (5xx, connection): max_retries retries with exponential backoff
    - Client errors (4xx except 429): immediate failure as IdentityRequestError
    - Timeouts and exhausted retries raise IdentityProviderError
    - Every request carries the project's anon key; user calls add a bearer token

Design Decisions:
    - Wrapper over raw httpx: isolates retry logic from the auth context
    - ±25% jitter on backoff: prevents thundering herd on shared rate limits
    - transport injectable so tests drive it with httpx.MockTransport
"""

import asyncio
import random
import logging
from typing import Any

import httpx

from taskhive.core.errors import (
    ErrorContext, IdentityProviderError, IdentityRequestError,
)

logger = logging.getLogger(__name__)

_RATE_LIMITED = 429


class IdentityClient:
    """Implements core.identity_protocol.IdentityProvider against a GoTrue-compatible API."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        timeout_seconds: int = 30,
        max_retries: int = 3,
        base_delay_ms: int = 500,
        max_delay_ms: int = 8_000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
            headers={"apikey": anon_key},
            transport=transport,
        )
        self.anon_key = anon_key
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms

    async def aclose(self) -> None:
        await self.client.aclose()

    # ─── Auth (GoTrue) ───────────────────────────────────────────

    async def sign_in_with_password(self, email: str, password: str) -> dict[str, Any]:
        """Exchange credentials for a session ({access_token, user, ...})."""
        response = await self._request(
            "POST", "/auth/v1/token",
            operation="sign_in",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        return response.json()

    async def email_exists(self, email: str) -> bool:
        """Check via OTP without user creation; only "user not found" means free."""
        try:
            await self._request(
                "POST", "/auth/v1/otp",
                operation="email_exists",
                json={"email": email, "create_user": False},
            )
        except IdentityRequestError as e:
            return "user not found" not in e.message.lower()
        return True

    async def sign_up(
        self, email: str, password: str, metadata: dict[str, Any],
    ) -> dict[str, Any] | None:
        """Create an account. Returns the provider's user record, or None."""
        response = await self._request(
            "POST", "/auth/v1/signup",
            operation="sign_up",
            json={"email": email, "password": password, "data": metadata},
        )
        body = response.json()
        # Autoconfirm projects answer {user, session}; others answer the bare user
        if "user" in body:
            return body["user"]
        return body if body.get("id") else None

    async def sign_out(self, access_token: str) -> None:
        await self._request(
            "POST", "/auth/v1/logout",
            operation="sign_out", access_token=access_token,
        )

    async def update_user(
        self, access_token: str, data: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge data into the signed-in user's metadata."""
        response = await self._request(
            "PUT", "/auth/v1/user",
            operation="update_user", access_token=access_token,
            json={"data": data},
        )
        return response.json()

    async def get_user(self, access_token: str) -> dict[str, Any]:
        response = await self._request(
            "GET", "/auth/v1/user",
            operation="get_user", access_token=access_token,
        )
        return response.json()

    # ─── Password recovery ───────────────────────────────────────

    async def send_password_reset(
        self, email: str, redirect_to: str | None = None,
    ) -> None:
        """Ask the provider to email a recovery link for this address."""
        await self._request(
            "POST", "/auth/v1/recover",
            operation="send_password_reset",
            params={"redirect_to": redirect_to} if redirect_to else None,
            json={"email": email},
        )

    async def verify_recovery(self, token_hash: str) -> dict[str, Any]:
        """Exchange the token from a recovery link for a short-lived session."""
        response = await self._request(
            "POST", "/auth/v1/verify",
            operation="verify_recovery",
            json={"type": "recovery", "token_hash": token_hash},
        )
        return response.json()

    async def update_password(
        self, access_token: str, password: str,
    ) -> dict[str, Any]:
        response = await self._request(
            "PUT", "/auth/v1/user",
            operation="update_password", access_token=access_token,
            json={"password": password},
        )
        return response.json()

    # ─── Data (PostgREST) and edge functions ─────────────────────

    async def fetch_kyc_status(
        self, user_id: str, access_token: str | None = None,
    ) -> str | None:
        response = await self._request(
            "GET", "/rest/v1/user_profiles",
            operation="fetch_kyc_status", access_token=access_token,
            params={"id": f"eq.{user_id}", "select": "kyc_status"},
        )
        rows = response.json()
        if not rows:
            raise IdentityRequestError(
                f"No profile for user '{user_id}'", 404,
                ErrorContext(user_id=user_id, operation="fetch_kyc_status"),
            )
        return rows[0].get("kyc_status")

    async def invoke_function(
        self, name: str, body: dict[str, Any], access_token: str | None = None,
    ) -> Any:
        response = await self._request(
            "POST", f"/functions/v1/{name}",
            operation=f"function:{name}", access_token=access_token,
            json=body,
        )
        if not response.content:
            return None
        return response.json()

    # ─── Transport ───────────────────────────────────────────────

    async def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        access_token: str | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send with retry on 429/5xx/connection errors; map failures to typed errors."""
        headers = {"Authorization": f"Bearer {access_token or self.anon_key}"}
        context = ErrorContext(operation=operation)
        for attempt in range(self.max_retries + 1):
            try:
                response = await self.client.request(
                    method, path, headers=headers, **kwargs,
                )
            except httpx.TimeoutException:
                raise IdentityProviderError(
                    "Identity provider timed out", "timeout", context=context,
                )
            except httpx.TransportError as e:
                await self._handle_transient_error(e, attempt, context)
                continue

            status = response.status_code
            if status == _RATE_LIMITED:
                await self._handle_rate_limit(response, attempt, context)
                continue
            if status >= 500:
                await self._handle_transient_error(
                    f"HTTP {status}", attempt, context,
                )
                continue
            if status >= 400:
                raise IdentityRequestError(
                    _error_message(response), status, context,
                )
            logger.debug(
                f"Identity provider {operation} ok",
                extra={
                    "operation": operation,
                    "attempt": attempt + 1,
                    "status_code": status,
                },
            )
            return response
        # Unreachable: the handlers raise on the final attempt
        raise IdentityProviderError(
            "Identity provider retries exhausted", "connection_error",
            context=context,
        )

    async def _handle_rate_limit(
        self, response: httpx.Response, attempt: int, context: ErrorContext,
    ) -> None:
        """Handle rate limit with retry or raise."""
        retry_after_ms = _extract_retry_after(response)
        if attempt >= self.max_retries:
            raise IdentityProviderError(
                "Rate limit exceeded after retries",
                "rate_limit",
                retry_after_ms=retry_after_ms,
                context=context,
            )
        delay = retry_after_ms or self._backoff(attempt)
        logger.warning(
            f"Identity provider rate limit hit, retry after {delay}ms "
            f"(attempt {attempt + 1})",
            extra={"operation": context.operation, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    async def _handle_transient_error(
        self, error: object, attempt: int, context: ErrorContext,
    ) -> None:
        """Handle transient errors with retry or raise."""
        if attempt >= self.max_retries:
            raise IdentityProviderError(
                f"Identity provider unavailable after {self.max_retries} retries",
                "connection_error",
                context=context,
            )
        delay = self._backoff(attempt)
        logger.warning(
            f"Identity provider transient error, retry after {delay}ms: {error}",
            extra={"operation": context.operation, "attempt": attempt + 1},
        )
        await asyncio.sleep(delay / 1000)

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311


def _error_message(response: httpx.Response) -> str:
    """Pull the human-readable message out of a GoTrue/PostgREST error body."""
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


def _extract_retry_after(response: httpx.Response) -> int | None:
    """Retry-After header in milliseconds (seconds form only)."""
    val = response.headers.get("retry-after")
    if val and val.isdigit():
        return int(val) * 1000
    return None


# Singleton (initialized on startup)
identity_client: IdentityClient | None = None


def init_identity_client(base_url: str, anon_key: str, **kwargs) -> IdentityClient:
    global identity_client
    identity_client = IdentityClient(base_url, anon_key, **kwargs)
    return identity_client


def get_identity_provider() -> IdentityClient:
    """FastAPI dependency for the identity provider."""
    if not identity_client:
        raise RuntimeError("Identity client not initialized")
    return identity_client
