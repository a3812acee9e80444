"""Sign-in lifecycle and per-user sessions."""

import logging
import random
import re
from dataclasses import dataclass, field
from typing import Protocol

from nutrition_ledger.domain.errors import AuthenticationError, NotSignedInError
from nutrition_ledger.domain.models import AuthResult, UserRecord
from nutrition_ledger.services.clock import Clock
from nutrition_ledger.services.ledger import NutritionDayLedger
from nutrition_ledger.services.meal_plans import MealGenerator, MealPlanService
from nutrition_ledger.services.storage import (
    MEALS_KEY,
    STREAK_KEY,
    USER_DATA_KEY,
    StorageService,
)

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2

_ERROR_MESSAGES = {
    "email_exists": "This email is already registered",
    "user_already_exists": "This email is already registered",
    "email_address_invalid": "Invalid email address",
    "weak_password": "Password should be at least 6 characters",
    "user_not_found": "No account found with this email",
    "invalid_credentials": "Incorrect email or password",
    "over_request_rate_limit": "Too many attempts. Please try again later",
    "over_email_send_rate_limit": "Too many attempts. Please try again later",
    "network": "Network error. Check your connection",
}
_GENERIC_ERROR = "An error occurred. Please try again"

_logger = logging.getLogger(__name__)


class AuthProvider(Protocol):
    """Identity provider. Failures raise AuthenticationError."""

    async def sign_in(self, email: str, password: str) -> UserRecord:
        """Authenticate and return the user."""

    async def sign_up(self, email: str, password: str, name: str) -> UserRecord:
        """Register a new account and return the user."""

    async def sign_out(self) -> None:
        """End the provider session."""


@dataclass
class UserSession:
    """Services bound to one signed-in user's storage namespace."""

    user: UserRecord
    storage: StorageService
    ledger: NutritionDayLedger
    meal_plans: MealPlanService


@dataclass
class SessionManager:
    """Creates a UserSession on sign-in and tears it down on sign-out."""

    auth_provider: AuthProvider
    storage: StorageService
    clock: Clock
    meal_generator: MealGenerator
    rng: random.Random = field(default_factory=random.Random)
    current: UserSession | None = None

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """Sign in and open a session for the user."""
        error = validate_email(email) or (
            None if password else "Password is required"
        )
        if error:
            return AuthResult(success=False, error=error)
        try:
            user = await self.auth_provider.sign_in(email.strip(), password)
        except AuthenticationError as exc:
            _logger.warning("Sign in failed: code=%s", exc.code)
            return AuthResult(success=False, error=error_message(exc.code))
        await self._open(user)
        return AuthResult(success=True, user=user)

    async def sign_up(self, email: str, password: str, name: str) -> AuthResult:
        """Register, then open a session for the new user."""
        error = validate_name(name) or validate_email(email) or validate_password(
            password
        )
        if error:
            return AuthResult(success=False, error=error)
        try:
            user = await self.auth_provider.sign_up(
                email.strip(), password, name.strip()
            )
        except AuthenticationError as exc:
            _logger.warning("Sign up failed: code=%s", exc.code)
            return AuthResult(success=False, error=error_message(exc.code))
        await self._open(user)
        return AuthResult(success=True, user=user)

    async def sign_out(self) -> AuthResult:
        """Sign out and drop the user's day data from local storage."""
        try:
            await self.auth_provider.sign_out()
        except AuthenticationError as exc:
            _logger.warning("Sign out failed: code=%s", exc.code)
            return AuthResult(success=False, error=error_message(exc.code))
        session = self.current
        self.current = None
        if session is not None:
            for key in (USER_DATA_KEY, MEALS_KEY, STREAK_KEY):
                await session.storage.remove(key)
        return AuthResult(success=True)

    def require_session(self) -> UserSession:
        """Return the active session or raise NotSignedInError."""
        if self.current is None:
            raise NotSignedInError("sign in first")
        return self.current

    async def _open(self, user: UserRecord) -> UserSession:
        storage = self.storage.for_user(user.id)
        session = UserSession(
            user=user,
            storage=storage,
            ledger=NutritionDayLedger(storage=storage, clock=self.clock),
            meal_plans=MealPlanService(
                storage=storage, generator=self.meal_generator, rng=self.rng
            ),
        )
        await storage.set(
            USER_DATA_KEY,
            {"id": user.id, "email": user.email, "display_name": user.display_name},
        )
        await session.ledger.load()
        self.current = session
        return session


def error_message(code: str | None) -> str:
    """Translate a provider error code into a user-facing message."""
    return _ERROR_MESSAGES.get(code or "", _GENERIC_ERROR)


def validate_email(email: str) -> str | None:
    if not email or not email.strip():
        return "Email is required"
    if not _EMAIL_PATTERN.match(email.strip()):
        return "Please enter a valid email address"
    return None


def validate_password(password: str) -> str | None:
    if not password or not password.strip():
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
    return None


def validate_name(name: str) -> str | None:
    if not name or not name.strip():
        return "Name is required"
    if len(name.strip()) < MIN_NAME_LENGTH:
        return f"Name must be at least {MIN_NAME_LENGTH} characters"
    return None
