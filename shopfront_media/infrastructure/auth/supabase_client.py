from __future__ import annotations

import hashlib
from dataclasses import dataclass

from supabase import Client, create_client

from shopfront_media.config import SupabaseSettings


@dataclass(slots=True)
class AdminInfo:
    id: str
    email: str | None


class SupabaseAuthAdapter:
    """Small wrapper to validate Supabase access tokens for admin endpoints.

    When Supabase is disabled (SUPABASE_DISABLED=1), any non-empty token maps to
    a deterministic fake admin. Otherwise tokens are checked against Supabase
    Auth, and every token is rejected if no URL or anon key is configured.
    """

    def __init__(self, settings: SupabaseSettings) -> None:
        self.disabled = settings.disabled
        self._client: Client | None = None
        if not self.disabled and settings.url and settings.anon_key:
            self._client = create_client(settings.url, settings.anon_key)

    def validate_token(self, token: str) -> AdminInfo:
        if not token:
            raise ValueError("Missing access token")
        if self.disabled:
            fake_id = f"fake-{hashlib.sha1(token.encode('utf-8')).hexdigest()[:10]}"
            return AdminInfo(id=fake_id, email=None)
        if not self._client:
            raise ValueError("Authentication is not configured")
        # Real validation via Supabase Auth API
        try:
            res = self._client.auth.get_user(token)
            user = res.user if res else None
        except Exception as exc:  # pragma: no cover - network path
            raise ValueError(f"Invalid access token: {exc}") from exc
        if not user:
            raise ValueError("Invalid access token")
        return AdminInfo(id=user.id, email=user.email)
