"""
Identity provider adapter.

The marketplace keeps its own users table, but every local user is mirrored
by an identity at an external auth provider (Supabase) and carries that
provider's stable UID. ``IdentityProvider`` is the narrow interface the auth
service depends on.
"""
import logging
import uuid
from typing import Optional, Protocol

import httpx

from homeservices.core.config import Settings
from homeservices.core.errors import IdentityProviderError

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    def create_user(self, email: str, password: str, full_name: str) -> str:
        """Create the identity and return its external UID."""

    def sign_in(self, email: str, password: str) -> Optional[str]:
        """Return the external UID when the credentials are valid, else None."""


class SupabaseIdentityProvider:
    """Talks to the Supabase GoTrue admin API with the service-role key."""

    def __init__(self, base_url: str, service_key: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self.timeout = timeout
        self._client: Optional[httpx.Client] = None

    @property
    def client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                base_url=f"{self.base_url}/auth/v1",
                headers={
                    "apikey": self.service_key,
                    "Authorization": f"Bearer {self.service_key}",
                },
                timeout=self.timeout,
            )
        return self._client

    def create_user(self, email: str, password: str, full_name: str) -> str:
        try:
            response = self.client.post(
                "/admin/users",
                json={
                    "email": email,
                    "password": password,
                    "email_confirm": True,
                    "user_metadata": {"fullName": full_name},
                },
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Identity provider unreachable while creating {email}: {e}")
            raise IdentityProviderError() from e

        if response.status_code >= 400:
            logger.error(f"❌ Identity provider rejected user {email}: HTTP {response.status_code}")
            raise IdentityProviderError(f"Identity provider rejected user: HTTP {response.status_code}")

        uid = response.json().get("id")
        if not uid:
            raise IdentityProviderError("Failed to obtain identity provider UID")
        return uid

    def sign_in(self, email: str, password: str) -> Optional[str]:
        try:
            response = self.client.post(
                "/token",
                params={"grant_type": "password"},
                json={"email": email, "password": password},
            )
        except httpx.HTTPError as e:
            logger.error(f"❌ Identity provider unreachable during sign-in for {email}: {e}")
            raise IdentityProviderError() from e

        if response.status_code in (400, 401):
            return None
        if response.status_code >= 400:
            raise IdentityProviderError(f"Identity provider sign-in failed: HTTP {response.status_code}")
        return (response.json().get("user") or {}).get("id")


class LocalIdentityProvider:
    """Development stand-in: issues random UIDs and never authenticates."""

    def create_user(self, email: str, password: str, full_name: str) -> str:
        return str(uuid.uuid4())

    def sign_in(self, email: str, password: str) -> Optional[str]:
        return None


def build_identity_provider(settings: Settings) -> IdentityProvider:
    if settings.identity_provider_enabled:
        return SupabaseIdentityProvider(settings.supabase_url, settings.supabase_service_key)
    logger.warning("⚠️ SUPABASE_URL/SUPABASE_SERVICE_ROLE_KEY not set, using local identity provider")
    return LocalIdentityProvider()
