from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import Optional
from app.api.deps import get_generation_client, get_usage_gate
from app.core.constants import LANGUAGES, TONES
from app.models.content import ContentType, GenerationRequest, GenerationResult
from app.services.content_service import generate_single
from app.services.generation_client import GenerationClient
from app.services.usage_gate import UsageGate
from app.utils.image_processor import ImageProcessor

router = APIRouter()


@router.post("", response_model=GenerationResult, response_model_exclude_none=True)
async def generate(
    request: GenerationRequest,
    gate: UsageGate = Depends(get_usage_gate),
    client: GenerationClient = Depends(get_generation_client),
):
    """Generate a marketing kit or social posts for one product."""
    return await generate_single(gate, client, request)


@router.post("/upload", response_model=GenerationResult, response_model_exclude_none=True)
async def generate_with_image(
    productName: str = Form(""),
    description: str = Form(""),
    tone: str = Form(""),
    language: str = Form(""),
    contentType: ContentType = Form(ContentType.PRODUCT_DESCRIPTION),
    image: Optional[UploadFile] = File(None),
    gate: UsageGate = Depends(get_usage_gate),
    client: GenerationClient = Depends(get_generation_client),
):
    """Multipart variant of ``/generate`` that takes the product image as a file."""
    image_data, image_mime = None, None
    if image is not None and image.filename:
        image_data, image_mime = ImageProcessor.encode_upload(await image.read(), image.content_type)

    request = GenerationRequest(
        productName=productName,
        description=description,
        tone=tone,
        language=language,
        contentType=contentType,
        imageData=image_data,
        imageMimeType=image_mime,
    )
    return await generate_single(gate, client, request)


@router.get("/options")
async def generation_options():
    return {
        "tones": TONES,
        "languages": LANGUAGES,
        "content_types": [c.value for c in ContentType],
    }
