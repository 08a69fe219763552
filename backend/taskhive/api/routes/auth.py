"""Auth Routes — JSON surface of the auth context (login, signup, logout, experience).

Invariants:
    - Every handler works on a per-request AuthContext (api/dependencies.py)
    - Signup validates fields before any provider call
    - Errors propagate as TaskHiveError to the global handlers

Design Decisions:
    - Signup field errors returned as SignupValidationError details (400),
      using the same messages as the HTML signup page
    - Password reset answers 202 whether or not the email has an account
"""

import logging

from fastapi import APIRouter, Depends, Response, status

from taskhive.api.dependencies import get_auth_context, get_current_auth
from taskhive.config import get_settings
from taskhive.core.errors import PasswordResetError, SignupValidationError
from taskhive.core.identity_protocol import IdentityProvider
from taskhive.core.signup_validation import validate_signup_form
from taskhive.infrastructure.identity_client import get_identity_provider
from taskhive.schemas.auth import (
    AuthStateResponse, CustomUser, ExperienceUpdate, LoginRequest,
    PasswordResetConfirm, PasswordResetRequest, SignupRequest,
)
from taskhive.services.auth_context import AuthContext
from taskhive.services.password_reset import (
    RESET_SENT_MESSAGE, request_password_reset, reset_password,
)
from taskhive.services.signup_form import TERMS_REQUIRED_MESSAGE

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/login", response_model=AuthStateResponse)
async def login(
    body: LoginRequest, auth: AuthContext = Depends(get_auth_context),
):
    await auth.login(body.email, body.password)
    return AuthStateResponse(
        user=auth.user, session=auth.session, is_verified=auth.is_verified,
    )


@router.post(
    "/signup", response_model=AuthStateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def signup(
    body: SignupRequest, auth: AuthContext = Depends(get_auth_context),
):
    if not body.agreeToTerms:
        raise SignupValidationError({"agreeToTerms": TERMS_REQUIRED_MESSAGE})
    errors = validate_signup_form(body.model_dump())
    if errors:
        raise SignupValidationError(errors)
    user = await auth.signup(body.name, body.email, body.password, body.role)
    return AuthStateResponse(user=user, is_verified=auth.is_verified)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(auth: AuthContext = Depends(get_current_auth)):
    await auth.logout()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=AuthStateResponse)
async def current_user(auth: AuthContext = Depends(get_current_auth)):
    auth.require_user()
    return AuthStateResponse(user=auth.user, is_verified=auth.is_verified)


@router.patch("/experience", response_model=CustomUser)
async def update_experience(
    body: ExperienceUpdate, auth: AuthContext = Depends(get_current_auth),
):
    """Add (or subtract) hours of experience for the signed-in user."""
    auth.require_user()
    return await auth.update_experience(body.hours)


@router.post("/password-reset", status_code=status.HTTP_202_ACCEPTED)
async def request_reset(
    body: PasswordResetRequest,
    provider: IdentityProvider = Depends(get_identity_provider),
):
    outcome = await request_password_reset(
        body.email, provider, get_settings().password_reset_redirect_url,
    )
    if not outcome.ok:
        raise PasswordResetError(outcome.error, outcome.status_code)
    return {"message": RESET_SENT_MESSAGE}


@router.post("/password-reset/confirm", status_code=status.HTTP_204_NO_CONTENT)
async def confirm_reset(
    body: PasswordResetConfirm,
    provider: IdentityProvider = Depends(get_identity_provider),
):
    outcome = await reset_password(
        body.token, body.password, body.confirmPassword, provider,
    )
    if not outcome.ok:
        raise PasswordResetError(outcome.error, outcome.status_code)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
