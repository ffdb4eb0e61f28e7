from loguru import logger
from app.core.exceptions import AppError, RemoteGenerationError
from app.models.content import GenerationRequest, GenerationResult
from app.services.gemini_service import GeminiService
from app.services.generation_client import GenerationClient
from app.services.usage_gate import UsageGate
from app.utils.image_processor import ImageProcessor


async def generate_single(gate: UsageGate, client: GenerationClient,
                          request: GenerationRequest) -> GenerationResult:
    """Single-mode generation: refuse at the limit, count only successes."""
    gate.ensure_can_generate()
    GeminiService.validate_request(request)
    if request.imageData:
        image_data, mime_type = ImageProcessor.check_inline(request.imageData, request.imageMimeType)
        request = request.model_copy(update={"imageData": image_data, "imageMimeType": mime_type})

    try:
        result = await client.generate(request)
    except AppError:
        raise
    except Exception as e:
        logger.error(f"❌ Generation failed for '{request.productName}': {e}")
        raise RemoteGenerationError(str(e) or "Failed to generate content from the backend.") from e

    await gate.record_success()
    return result
