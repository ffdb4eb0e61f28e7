from fastapi import Depends, Header
from functools import lru_cache
from typing import Optional
from app.services.gemini_service import GeminiService
from app.services.generation_client import GenerationClient
from app.services.session_store import SessionStore, SupabaseSessionStore
from app.services.usage_gate import UsageGate


@lru_cache
def get_generation_client() -> GenerationClient:
    return GeminiService()


@lru_cache
def get_session_store() -> SessionStore:
    return SupabaseSessionStore()


def get_access_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def get_usage_gate(
    access_token: Optional[str] = Depends(get_access_token),
    store: SessionStore = Depends(get_session_store),
) -> UsageGate:
    return await UsageGate.open(store, access_token)
