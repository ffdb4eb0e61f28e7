import json
import httpx
from loguru import logger
from pydantic import ValidationError as SchemaError
from typing import Optional
from app.core.config import settings
from app.core.exceptions import RemoteGenerationError, ValidationError
from app.models.content import ContentType, GenerationRequest, GenerationResult
from app.services import prompts

UNEXPECTED_RESPONSE = "The generation backend returned an unexpected response."


class GeminiService:
    """Server-side generation backend: one request, one ``generateContent`` call."""

    def __init__(self, api_key: Optional[str] = None, base_url: Optional[str] = None,
                 model: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.api_key = settings.GEMINI_API_KEY if api_key is None else api_key
        self.base_url = base_url or settings.GEMINI_BASE_URL
        self.model = model or settings.GEMINI_MODEL_VERSION
        self.transport = transport

        self.headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }
        masked = (
            f"{self.api_key[:6]}...{self.api_key[-4:]}"
            if self.api_key
            else "MISSING"
        )
        logger.info(f"🔑 Gemini service initialized | Model: {self.model} | Key: {masked}")

    @staticmethod
    def validate_request(request: GenerationRequest) -> None:
        required = [request.productName, request.description, request.tone, request.language]
        if not all(str(v).strip() for v in required):
            raise ValidationError("Missing required product information.")

    def build_payload(self, request: GenerationRequest) -> dict:
        prompt, schema = prompts.build_prompt(request)

        parts = [{"text": prompt}]
        # Only the marketing kit uses the product image
        if (
            request.contentType == ContentType.PRODUCT_DESCRIPTION
            and request.imageData
            and request.imageMimeType
        ):
            parts.append({
                "inline_data": {
                    "mime_type": request.imageMimeType,
                    "data": request.imageData,
                }
            })

        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": schema,
            },
        }

    @staticmethod
    def parse_response(result_data: dict, content_type: ContentType) -> GenerationResult:
        if not isinstance(result_data, dict):
            raise RemoteGenerationError(UNEXPECTED_RESPONSE)

        usage = result_data.get("usageMetadata") or {}
        if isinstance(usage, dict):
            logger.info(f"📊 Tokens used: {usage.get('totalTokenCount', 0)}")

        candidates = result_data.get("candidates") or []
        if not isinstance(candidates, list):
            raise RemoteGenerationError(UNEXPECTED_RESPONSE)

        text_chunks = []
        for candidate in candidates:
            content = candidate.get("content") if isinstance(candidate, dict) else None
            content = content or {}
            parts = content.get("parts") if isinstance(content, dict) else None
            if not isinstance(content, dict) or not isinstance(parts or [], list):
                raise RemoteGenerationError(UNEXPECTED_RESPONSE)
            for part in parts or []:
                if isinstance(part, dict) and isinstance(part.get("text"), str):
                    text_chunks.append(part["text"])
            if text_chunks:
                break

        text = "".join(text_chunks).strip()
        if not text:
            raise RemoteGenerationError("The model returned an empty response.")

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            logger.error(f"❌ Model output is not valid JSON: {e}")
            raise RemoteGenerationError("The model returned a response that is not valid JSON.")

        if not isinstance(data, dict):
            raise RemoteGenerationError("The model returned an unexpected response structure.")

        _, schema = prompts.build_prompt(GenerationRequest(contentType=content_type))
        missing = [key for key in schema["required"] if key not in data]
        if missing:
            raise RemoteGenerationError(f"The model response is missing fields: {', '.join(missing)}")

        try:
            return GenerationResult.model_validate(data)
        except SchemaError as e:
            logger.error(f"❌ Model output failed schema validation: {e}")
            raise RemoteGenerationError("The model response did not match the expected schema.")

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        self.validate_request(request)
        logger.info(f"✍️ Generating {request.contentType.value} for '{request.productName}' ({request.tone}/{request.language})")

        payload = self.build_payload(request)
        endpoint = f"{self.base_url}/models/{self.model}:generateContent"

        try:
            async with httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT, transport=self.transport) as client:
                response = await client.post(
                    endpoint,
                    headers=self.headers,
                    json=payload
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Gemini transport error: {e}")
            raise RemoteGenerationError(f"Failed to reach the generation backend: {e}")

        if response.status_code != 200:
            logger.error(f"❌ API Error {response.status_code}: {response.text}")
            raise RemoteGenerationError(self._error_message(response))

        try:
            result_data = response.json()
        except ValueError:
            raise RemoteGenerationError("The generation backend returned a non-JSON response.")

        result = self.parse_response(result_data, request.contentType)
        logger.success(f"✅ Generated content for '{request.productName}'")
        return result

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
            message = body.get("error", {}).get("message")
            if message:
                return message
        except (ValueError, AttributeError):
            pass
        return f"Gemini API failed with status: {response.status_code}"
