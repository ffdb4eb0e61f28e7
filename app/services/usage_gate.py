from loguru import logger
from typing import Optional
from app.core.config import settings
from app.core.constants import LOGIN_MESSAGE, QUOTA_MESSAGE
from app.core.exceptions import AuthenticationError, QuotaExceededError
from app.models.account import GateState, Profile, UsageStatus
from app.services.session_store import SessionStore


class UsageGate:
    """
    Per-session usage counter with a fixed ceiling.

    A gate is opened once per session from an access token. The counter only
    moves up, by one per ``record_success`` call.
    """

    def __init__(self, store: SessionStore, profile: Optional[Profile] = None,
                 limit: Optional[int] = None):
        self.store = store
        self.profile = profile
        self.limit = settings.USAGE_LIMIT if limit is None else limit

    @classmethod
    async def open(cls, store: SessionStore, access_token: Optional[str],
                   limit: Optional[int] = None) -> "UsageGate":
        profile = await store.get_profile(access_token) if access_token else None
        gate = cls(store, profile, limit)
        logger.debug(f"Usage gate opened | state={gate.state.value} usage={gate.usage_count}/{gate.limit}")
        return gate

    @property
    def usage_count(self) -> int:
        return self.profile.usage_count if self.profile else 0

    @property
    def is_authenticated(self) -> bool:
        return self.profile is not None

    @property
    def is_limit_reached(self) -> bool:
        # Anonymous users cannot generate at all
        if not self.is_authenticated:
            return True
        return self.usage_count >= self.limit

    @property
    def state(self) -> GateState:
        if not self.is_authenticated:
            return GateState.UNAUTHENTICATED
        if self.usage_count >= self.limit:
            return GateState.AT_LIMIT
        return GateState.UNDER_LIMIT

    def ensure_can_generate(self) -> None:
        if not self.is_authenticated:
            raise AuthenticationError(LOGIN_MESSAGE)
        if self.is_limit_reached:
            logger.warning(f"🚫 Usage limit reached for {self.profile.id} ({self.usage_count}/{self.limit})")
            raise QuotaExceededError(QUOTA_MESSAGE)

    async def record_success(self) -> int:
        if not self.is_authenticated:
            raise AuthenticationError(LOGIN_MESSAGE)
        new_count = await self.store.increment_usage(self.profile)
        self.profile.usage_count = max(self.profile.usage_count, new_count)
        logger.info(f"📈 Usage for {self.profile.id}: {self.usage_count}/{self.limit}")
        return self.usage_count

    def status(self) -> UsageStatus:
        return UsageStatus(
            usage_count=self.usage_count,
            usage_limit=self.limit,
            is_limit_reached=self.is_limit_reached,
            state=self.state,
            email=self.profile.email if self.profile else None,
        )
