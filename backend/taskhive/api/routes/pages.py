"""Page Routes — server-rendered auth pages composed from components.

Invariants:
    - Pages only pass values into components; validation lives in core/services
    - A failed submit re-renders the form with the banner/field errors and
      the previously entered values (passwords never echoed back)
    - A failed submit answers with the status of what failed: 400 for the
      form itself, the provider error's http_status otherwise
    - Successful login sets the session cookie and redirects home
    - Forgot-password always lands on "check your email", whether or not
      the address has an account

Design Decisions:
    - Form posts (python-multipart) instead of client-side state: the
      change-notification callbacks of the components become form fields
    - Cookie is httponly; the JSON API accepts the same token as a bearer
    - The reset link's token rides in a hidden field from GET to POST
"""

import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse

from taskhive.api.dependencies import (
    SESSION_COOKIE, extract_access_token, get_auth_context,
)
from taskhive.components import render_page
from taskhive.config import get_settings
from taskhive.core.errors import AuthenticationError, TaskHiveError
from taskhive.core.identity_protocol import IdentityProvider
from taskhive.infrastructure.identity_client import get_identity_provider
from taskhive.services.auth_context import AuthContext
from taskhive.services.password_reset import (
    INVALID_LINK_MESSAGE, request_password_reset, reset_password,
)
from taskhive.services.signup_form import process_signup

logger = logging.getLogger(__name__)
router = APIRouter(tags=["pages"], include_in_schema=False)

LOGIN_MISSING_FIELDS = "Please enter both email and password"


def _signed_in_redirect(access_token: str | None) -> RedirectResponse:
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    if access_token:
        response.set_cookie(
            SESSION_COOKIE, access_token, httponly=True, samesite="lax",
        )
    return response


@router.get("/", response_class=HTMLResponse)
async def home(request: Request, auth: AuthContext = Depends(get_auth_context)):
    try:
        await auth.restore(extract_access_token(request))
    except AuthenticationError:
        response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
        response.delete_cookie(SESSION_COOKIE)
        return response
    return render_page(request, "pages/home.html", {
        "user": auth.user, "is_verified": auth.is_verified,
    })


# ─── Login / signup ──────────────────────────────────────────────

@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request):
    return render_page(request, "pages/login.html", {"error": "", "email": ""})


@router.post("/login", response_class=HTMLResponse)
async def login_submit(
    request: Request,
    email: str = Form(""),
    password: str = Form(""),
    auth: AuthContext = Depends(get_auth_context),
):
    if not email or not password:
        return render_page(request, "pages/login.html", {
            "error": LOGIN_MISSING_FIELDS, "email": email,
        }, status_code=status.HTTP_400_BAD_REQUEST)
    try:
        await auth.login(email, password)
    except TaskHiveError as e:
        return render_page(request, "pages/login.html", {
            "error": e.message, "email": email,
        }, status_code=e.http_status)
    return _signed_in_redirect(auth.access_token)


@router.get("/signup", response_class=HTMLResponse)
async def signup_page(request: Request):
    return render_page(request, "pages/signup.html", {
        "form": {"role": "worker"}, "errors": {},
        "general_error": "", "agree_to_terms": False, "offer_reset": False,
    })


@router.post("/signup", response_class=HTMLResponse)
async def signup_submit(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    password: str = Form(""),
    confirmPassword: str = Form(""),
    dateOfBirth: str = Form(""),
    role: str = Form("worker"),
    terms: str | None = Form(None),
    auth: AuthContext = Depends(get_auth_context),
):
    form = {
        "name": name, "email": email, "password": password,
        "confirmPassword": confirmPassword, "dateOfBirth": dateOfBirth,
        "role": role if role in ("client", "worker") else "worker",
    }
    agree_to_terms = terms is not None
    outcome = await process_signup(form, agree_to_terms, auth)
    if outcome.ok:
        return _signed_in_redirect(auth.access_token)
    shown = {k: v for k, v in form.items() if k not in ("password", "confirmPassword")}
    return render_page(request, "pages/signup.html", {
        "form": shown, "errors": outcome.errors,
        "general_error": outcome.general_error,
        "agree_to_terms": agree_to_terms,
        "offer_reset": outcome.status_code == status.HTTP_409_CONFLICT,
    }, status_code=outcome.status_code)


# ─── Password reset ──────────────────────────────────────────────

@router.get("/forgot-password", response_class=HTMLResponse)
async def forgot_password_page(request: Request):
    return render_page(request, "pages/forgot_password.html", {
        "error": "", "email": "", "submitted": False,
    })


@router.post("/forgot-password", response_class=HTMLResponse)
async def forgot_password_submit(
    request: Request,
    email: str = Form(""),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    outcome = await request_password_reset(
        email, provider, get_settings().password_reset_redirect_url,
    )
    return render_page(request, "pages/forgot_password.html", {
        "error": outcome.error, "email": email.strip(),
        "submitted": outcome.ok,
    }, status_code=outcome.status_code)


@router.get("/reset-password", response_class=HTMLResponse)
async def reset_password_page(request: Request, token: str = ""):
    return render_page(request, "pages/reset_password.html", {
        "token": token,
        "invalid_link": not token,
        "error": "" if token else INVALID_LINK_MESSAGE,
        "completed": False,
    })


@router.post("/reset-password", response_class=HTMLResponse)
async def reset_password_submit(
    request: Request,
    token: str = Form(""),
    password: str = Form(""),
    confirmPassword: str = Form(""),
    provider: IdentityProvider = Depends(get_identity_provider),
):
    outcome = await reset_password(token, password, confirmPassword, provider)
    return render_page(request, "pages/reset_password.html", {
        "token": token,
        "invalid_link": outcome.invalid_link,
        "error": outcome.error,
        "completed": outcome.ok,
    }, status_code=outcome.status_code)


@router.post("/logout")
async def logout_submit(
    request: Request, auth: AuthContext = Depends(get_auth_context),
):
    token = extract_access_token(request)
    if token:
        try:
            await auth.restore(token)
        except AuthenticationError:
            logger.info("Logout with expired session")
        await auth.logout()
    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(SESSION_COOKIE)
    return response
