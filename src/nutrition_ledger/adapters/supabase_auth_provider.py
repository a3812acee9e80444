"""Supabase Auth identity provider."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import httpx
from supabase import Client

from nutrition_ledger.domain.errors import AuthenticationError
from nutrition_ledger.domain.models import UserRecord
from nutrition_ledger.services.auth import AuthProvider

_logger = logging.getLogger(__name__)


@dataclass
class SupabaseAuthProvider(AuthProvider):
    """Email and password accounts via Supabase Auth."""

    client: Client

    async def sign_in(self, email: str, password: str) -> UserRecord:
        """Authenticate with email and password."""
        response = await self._call(
            lambda: self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        )
        return _to_user(response)

    async def sign_up(self, email: str, password: str, name: str) -> UserRecord:
        """Create an account and store the display name as user metadata."""
        response = await self._call(
            lambda: self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"name": name}},
                }
            )
        )
        return _to_user(response, fallback_name=name)

    async def sign_out(self) -> None:
        """End the Supabase session."""
        await self._call(self.client.auth.sign_out)

    async def _call(self, request: Callable[[], Any]) -> Any:
        try:
            return await asyncio.to_thread(request)
        except httpx.HTTPError as exc:
            raise AuthenticationError("network", "auth service unreachable") from exc
        except Exception as exc:
            code = getattr(exc, "code", None)
            _logger.exception("Supabase auth request failed")
            raise AuthenticationError(
                code if isinstance(code, str) else None, str(exc)
            ) from exc


def _to_user(response: Any, fallback_name: str | None = None) -> UserRecord:
    user = getattr(response, "user", None)
    if user is None:
        raise AuthenticationError(None, "no user returned")
    metadata = getattr(user, "user_metadata", None) or {}
    return UserRecord(
        id=str(user.id),
        email=user.email or "",
        display_name=metadata.get("name") or fallback_name,
    )
