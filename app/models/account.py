from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional


class GateState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    UNDER_LIMIT = "authenticated_under_limit"
    AT_LIMIT = "authenticated_at_limit"


class Profile(BaseModel):
    id: str
    email: Optional[str] = None
    usage_count: int = 0
    access_token: str = Field(default="", exclude=True, repr=False)


class UsageStatus(BaseModel):
    usage_count: int
    usage_limit: int
    is_limit_reached: bool
    state: GateState
    email: Optional[str] = None


class MagicLinkRequest(BaseModel):
    email: str = ""


class ContactMessage(BaseModel):
    name: str = ""
    email: str = ""
    message: str = ""
