"""Auth Schemas — identity provider user/session shapes and auth request bodies.

Invariants:
    - CustomUser.name defaults to "" and experience to 0 (never negative)
    - Negative or non-numeric provider experience reads as 0 on CustomUser;
      user_metadata keeps a negative value as sent
    - Unknown provider fields are preserved (extra="allow"), never dropped
    - user_metadata keys mirror what signup writes: name, experience, role,
      user_type, verified

Design Decisions:
    - CustomUser built from format_user_with_metadata output, so the top-level
      name/experience always agree with user_metadata at load time
    - Request bodies validate shape only; signup field rules live in
      core/signup_validation.py so the HTML form and JSON API share messages
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserMetadata(BaseModel):
    """Free-form metadata attached to the provider's user record."""
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    experience: float | None = None
    role: str | None = None
    user_type: str | None = None
    verified: bool | None = None

    @field_validator("experience", mode="before")
    @classmethod
    def tolerate_non_numeric(cls, v):
        try:
            return None if v is None else float(v)
        except (TypeError, ValueError):
            return None


class CustomUser(BaseModel):
    """Provider user plus top-level name/experience lifted from metadata."""
    model_config = ConfigDict(extra="allow")

    id: str
    email: str | None = None
    name: str = ""
    experience: float = Field(0, ge=0)
    user_metadata: UserMetadata = Field(default_factory=UserMetadata)
    app_metadata: dict = Field(default_factory=dict)
    created_at: str | None = None

    @field_validator("experience", mode="before")
    @classmethod
    def clamp_experience(cls, v):
        try:
            return max(float(v or 0), 0.0)
        except (TypeError, ValueError):
            return 0.0


class AuthSession(BaseModel):
    """Session issued by the identity provider on sign-in."""
    model_config = ConfigDict(extra="allow")

    access_token: str
    token_type: str = "bearer"
    expires_in: int | None = None
    refresh_token: str | None = None
    user: CustomUser | None = None


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class SignupRequest(BaseModel):
    """Signup body — camelCase keys match the signup form field names."""
    name: str
    email: str
    password: str
    confirmPassword: str
    dateOfBirth: str
    role: str = Field("worker", pattern=r"^(client|worker)$")
    agreeToTerms: bool = False


class ExperienceUpdate(BaseModel):
    hours: float


class AuthStateResponse(BaseModel):
    """Current auth context state as exposed to API clients."""
    user: CustomUser | None
    session: AuthSession | None = None
    is_verified: bool | None = None


class PasswordResetRequest(BaseModel):
    email: str = ""


class PasswordResetConfirm(BaseModel):
    """New password for the account behind a recovery link token."""
    token: str = ""
    password: str = ""
    confirmPassword: str = ""
