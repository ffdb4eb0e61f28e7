from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from app.core.exceptions import AppError
from app.models.account import ContactMessage
from app.services.contact_service import ContactService

router = APIRouter()


def get_contact_service() -> ContactService:
    return ContactService()


@router.post("")
async def submit_contact(message: ContactMessage, service: ContactService = Depends(get_contact_service)):
    try:
        await service.submit(message)
    except AppError as e:
        return JSONResponse(status_code=e.status_code, content={"success": False, "error": e.message})
    return {"success": True}
