import httpx
from loguru import logger
from typing import Dict, Optional, Protocol
from app.core.config import settings
from app.core.exceptions import AuthenticationError
from app.models.account import Profile


class SessionStore(Protocol):
    async def get_profile(self, access_token: str) -> Optional[Profile]:
        ...

    async def increment_usage(self, profile: Profile) -> int:
        ...


class SupabaseSessionStore:
    """
    Resolves sessions and usage counters through the Supabase REST API.

    The user comes from ``/auth/v1/user`` and the counter lives in the
    ``profiles`` table (``id``, ``email``, ``usage_count``).
    """

    def __init__(self, url: Optional[str] = None, anon_key: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = (url or settings.SUPABASE_URL).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self.transport = transport

        if not self.url or not self.anon_key:
            logger.warning("⚠️ Supabase is not configured; every session will be unauthenticated.")

    def _headers(self, access_token: str) -> dict:
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.url, timeout=15.0, transport=self.transport)

    async def get_profile(self, access_token: str) -> Optional[Profile]:
        if not access_token or not self.url:
            return None

        headers = self._headers(access_token)
        try:
            async with self._client() as client:
                user_resp = await client.get("/auth/v1/user", headers=headers)
                if user_resp.status_code in (401, 403):
                    logger.info("Access token rejected by Supabase.")
                    return None
                user_resp.raise_for_status()
                user = user_resp.json()

                profile_resp = await client.get(
                    "/rest/v1/profiles",
                    headers=headers,
                    params={"select": "*", "id": f"eq.{user['id']}"},
                )
                profile_resp.raise_for_status()
                rows = profile_resp.json()
                if rows:
                    return Profile(**rows[0], access_token=access_token)

                # First sign-in: create the profile row
                logger.info(f"👤 Creating profile for new user {user['id']}")
                insert_resp = await client.post(
                    "/rest/v1/profiles",
                    headers={**headers, "Prefer": "return=representation"},
                    json={"id": user["id"], "email": user.get("email"), "usage_count": 0},
                )
                insert_resp.raise_for_status()
                return Profile(**insert_resp.json()[0], access_token=access_token)
        except httpx.HTTPError as e:
            logger.error(f"Authentication Error: {e}")
            raise AuthenticationError("Failed to connect to authentication service. Please check your internet connection.")

    async def increment_usage(self, profile: Profile) -> int:
        new_count = profile.usage_count + 1
        try:
            async with self._client() as client:
                response = await client.patch(
                    "/rest/v1/profiles",
                    headers={**self._headers(profile.access_token), "Prefer": "return=minimal"},
                    params={"id": f"eq.{profile.id}"},
                    json={"usage_count": new_count},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            # Counter stays at its stored value when the update fails
            logger.error(f"Error updating usage count for {profile.id}: {e}")
            return profile.usage_count
        return new_count

    async def send_magic_link(self, email: str, redirect_to: Optional[str] = None) -> None:
        try:
            async with self._client() as client:
                response = await client.post(
                    "/auth/v1/otp",
                    headers={"apikey": self.anon_key, "Content-Type": "application/json"},
                    params={"redirect_to": redirect_to or settings.AUTH_REDIRECT_URL},
                    json={"email": email, "create_user": True},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Magic link request failed for {email}: {e}")
            raise AuthenticationError("Could not send the sign-in link. Please try again.")
        logger.info(f"📧 Magic link sent to {email}")


class InMemorySessionStore:
    """Token -> profile map for local development and tests."""

    def __init__(self, profiles: Optional[Dict[str, Profile]] = None):
        self.profiles: Dict[str, Profile] = {}
        for token, profile in (profiles or {}).items():
            self.profiles[token] = profile.model_copy(update={"access_token": token})
        self.magic_links = []

    async def get_profile(self, access_token: str) -> Optional[Profile]:
        profile = self.profiles.get(access_token)
        if profile is None:
            return None
        return profile.model_copy()

    async def increment_usage(self, profile: Profile) -> int:
        stored = self.profiles[profile.access_token]
        stored.usage_count += 1
        return stored.usage_count

    async def send_magic_link(self, email: str, redirect_to: Optional[str] = None) -> None:
        self.magic_links.append(email)
