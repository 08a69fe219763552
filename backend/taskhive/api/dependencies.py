"""Route Dependencies — per-request auth context resolved from the bearer token or cookie.

Invariants:
    - A fresh AuthContext per request; never cached across requests
    - Bearer header wins over the session cookie
    - Missing token yields a signed-out context, not an error
"""

from fastapi import Depends, Request

from taskhive.config import get_settings
from taskhive.core.identity_protocol import IdentityProvider
from taskhive.infrastructure.identity_client import get_identity_provider
from taskhive.services.auth_context import AuthContext

SESSION_COOKIE = "taskhive_access_token"


def extract_access_token(request: Request) -> str | None:
    header = request.headers.get("authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token:
        return token.strip()
    return request.cookies.get(SESSION_COOKIE)


def get_auth_context(
    provider: IdentityProvider = Depends(get_identity_provider),
) -> AuthContext:
    """Signed-out auth context (login/signup start here)."""
    return AuthContext(provider, welcome_email=get_settings().welcome_email_enabled)


async def get_current_auth(
    request: Request, auth: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    """Auth context restored from the caller's token."""
    await auth.restore(extract_access_token(request))
    return auth
