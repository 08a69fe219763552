"""Server-rendered pages — forms compose components, errors re-render, success redirects."""

from taskhive.api.dependencies import SESSION_COOKIE
from taskhive.services.signup_form import TERMS_REQUIRED_MESSAGE

SIGNUP_FORM = {
    "name": "Carol",
    "email": "carol@example.com",
    "password": "Secret1!",
    "confirmPassword": "Secret1!",
    "dateOfBirth": "1990-01-01",
    "role": "client",
    "terms": "on",
}


def _cookie(token):
    return {"Cookie": f"{SESSION_COOKIE}={token}"}


# --- Login --------------------------------------------------------------------

async def test_login_page_renders_without_banner(client):
    res = await client.get("/login")
    assert res.status_code == 200
    assert 'id="email"' in res.text
    assert 'role="alert"' not in res.text
    assert "AI-Verified Microtask Marketplace" in res.text


async def test_login_missing_fields_shows_banner(client, identity):
    res = await client.post("/login", data={"email": "a@example.com"})
    assert res.status_code == 400
    assert "Please enter both email and password" in res.text
    assert 'value="a@example.com"' in res.text
    assert identity.calls == []


async def test_login_bad_credentials_shows_provider_message(client, identity):
    identity.add_user("alice@example.com")
    res = await client.post(
        "/login", data={"email": "alice@example.com", "password": "nope"},
    )
    assert res.status_code == 401
    assert "Invalid login credentials" in res.text


async def test_login_success_sets_cookie_and_redirects(client, identity):
    identity.add_user("alice@example.com")
    res = await client.post(
        "/login", data={"email": "alice@example.com", "password": "Secret1!"},
    )
    assert res.status_code == 303
    assert res.headers["location"] == "/"
    assert SESSION_COOKIE in res.headers["set-cookie"]


# --- Signup -------------------------------------------------------------------

async def test_signup_page_renders_components(client):
    res = await client.get("/signup")
    assert res.status_code == 200
    assert 'type="date"' in res.text
    assert 'id="terms"' in res.text
    assert 'role="alert"' not in res.text


async def test_signup_without_terms_shows_banner(client, identity):
    form = {k: v for k, v in SIGNUP_FORM.items() if k != "terms"}
    res = await client.post("/signup", data=form)
    assert res.status_code == 400
    assert TERMS_REQUIRED_MESSAGE in res.text
    assert identity.calls == []


async def test_signup_field_error_rendered_next_to_field(client):
    res = await client.post(
        "/signup", data={**SIGNUP_FORM, "dateOfBirth": "2015-05-05"},
    )
    assert res.status_code == 400
    assert "You must be between 18 and 90 years old to sign up" in res.text
    assert 'value="carol@example.com"' in res.text
    assert 'value="Secret1!"' not in res.text


async def test_signup_success_redirects(client, identity):
    res = await client.post("/signup", data=SIGNUP_FORM)
    assert res.status_code == 303
    assert identity.users["carol@example.com"]["user_metadata"]["role"] == "client"


# --- Home / logout ------------------------------------------------------------

async def test_home_signed_out(client):
    res = await client.get("/")
    assert res.status_code == 200
    assert 'href="/signup"' in res.text


async def test_home_greets_signed_in_user(client, identity):
    identity.add_user("alice@example.com", metadata={"name": "Alice", "experience": 2})
    token = identity.issue_token("alice@example.com")

    res = await client.get("/", headers=_cookie(token))

    assert "Welcome, Alice" in res.text
    assert "Experience: 2 hours" in res.text
    assert "Please complete identity verification" in res.text


async def test_home_with_expired_cookie_redirects_to_login(client):
    res = await client.get("/", headers=_cookie("stale"))
    assert res.status_code == 303
    assert res.headers["location"] == "/login"


async def test_logout_revokes_and_clears_cookie(client, identity):
    identity.add_user("alice@example.com")
    token = identity.issue_token("alice@example.com")

    res = await client.post("/logout", headers=_cookie(token))

    assert res.status_code == 303
    assert token not in identity.tokens
    assert f'{SESSION_COOKIE}=""' in res.headers["set-cookie"]


async def test_signup_provider_outage_keeps_provider_status(client, identity):
    identity.sign_up_returns_none = True
    res = await client.post("/signup", data=SIGNUP_FORM)
    assert res.status_code == 503
    assert "Failed to create user account" in res.text


async def test_signup_duplicate_email_offers_reset(client, identity):
    identity.add_user("carol@example.com")
    res = await client.post("/signup", data=SIGNUP_FORM)
    assert res.status_code == 409
    assert "This email is already registered" in res.text
    assert 'href="/forgot-password"' in res.text


async def test_home_with_negative_stored_experience(client, identity):
    identity.add_user("neg@example.com", metadata={"name": "Neg", "experience": -4})
    token = identity.issue_token("neg@example.com")

    res = await client.get("/", headers=_cookie(token))

    assert res.status_code == 200
    assert "Experience: 0 hours" in res.text


async def test_home_provider_outage_renders_error_page(client, identity):
    identity.add_user("alice@example.com")
    token = identity.issue_token("alice@example.com")
    identity.unavailable = True

    res = await client.get("/", headers=_cookie(token))

    assert res.status_code == 503
    assert res.headers["content-type"].startswith("text/html")
    assert "Service unavailable" in res.text
    assert "Identity provider unavailable after 3 retries" in res.text


# --- Password reset -----------------------------------------------------------

async def test_login_page_links_forgot_password(client):
    res = await client.get("/login")
    assert 'href="/forgot-password"' in res.text


async def test_forgot_password_page_renders_form(client):
    res = await client.get("/forgot-password")
    assert res.status_code == 200
    assert 'action="/forgot-password"' in res.text
    assert 'role="alert"' not in res.text


async def test_forgot_password_empty_email_shows_banner(client, identity):
    res = await client.post("/forgot-password", data={"email": ""})
    assert res.status_code == 400
    assert "Please enter your email address" in res.text
    assert identity.calls == []


async def test_forgot_password_unknown_email_reads_as_sent(client, identity):
    res = await client.post("/forgot-password", data={"email": "ghost@example.com"})
    assert res.status_code == 200
    assert "Check Your Email" in res.text
    assert "ghost@example.com" in res.text


async def test_reset_page_without_token_is_invalid_link(client):
    res = await client.get("/reset-password")
    assert "Invalid Reset Link" in res.text
    assert 'href="/forgot-password"' in res.text


async def test_reset_page_carries_token_into_form(client):
    res = await client.get("/reset-password", params={"token": "abc123"})
    assert 'name="token" value="abc123"' in res.text
    assert 'id="confirmPassword"' in res.text


async def test_reset_submit_mismatch_shows_banner(client, identity):
    res = await client.post("/reset-password", data={
        "token": "abc123", "password": "NewSecret2!", "confirmPassword": "nope",
    })
    assert res.status_code == 400
    assert "Passwords do not match" in res.text
    assert 'name="token" value="abc123"' in res.text


async def test_reset_submit_success(client, identity):
    identity.add_user("alice@example.com")
    token = identity.issue_recovery_token("alice@example.com")

    res = await client.post("/reset-password", data={
        "token": token, "password": "NewSecret2!", "confirmPassword": "NewSecret2!",
    })

    assert res.status_code == 200
    assert "Password Reset Complete" in res.text
    assert identity.passwords["alice@example.com"] == "NewSecret2!"
