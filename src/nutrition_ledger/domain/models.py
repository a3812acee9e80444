"""Domain models for signed-in users."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserRecord:
    """Identity returned by the authentication provider."""

    id: str
    email: str
    display_name: str | None = None


@dataclass(frozen=True)
class AuthResult:
    """Outcome of a sign-in, sign-up or sign-out attempt."""

    success: bool
    user: UserRecord | None = None
    error: str | None = None
