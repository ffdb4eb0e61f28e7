from fastapi import APIRouter, Depends
from app.api.deps import get_session_store, get_usage_gate
from app.core.exceptions import ValidationError
from app.models.account import MagicLinkRequest, UsageStatus
from app.services.usage_gate import UsageGate

router = APIRouter()


@router.post("/magic-link")
async def send_magic_link(payload: MagicLinkRequest, store=Depends(get_session_store)):
    email = payload.email.strip()
    if "@" not in email:
        raise ValidationError("Please enter a valid email address.")
    await store.send_magic_link(email)
    return {"status": "sent", "email": email}


@router.get("/me", response_model=UsageStatus)
async def current_usage(gate: UsageGate = Depends(get_usage_gate)):
    return gate.status()
