import httpx
from loguru import logger
from pydantic import ValidationError as SchemaError
from typing import Optional, Protocol
from app.core.config import settings
from app.core.exceptions import RemoteGenerationError
from app.models.content import GenerationRequest, GenerationResult


class GenerationClient(Protocol):
    async def generate(self, request: GenerationRequest) -> GenerationResult:
        ...


NETWORK_ERROR_MESSAGE = (
    "Network error: Could not connect to the server. "
    "Please check your internet connection and try again."
)


class ApiGenerationClient:
    """
    Calls the service's own ``/generate`` endpoint.

    Failures are normalised into ``RemoteGenerationError`` with a message taken
    from the ``error`` field of the response body when there is one. No retries.
    """

    def __init__(self, base_url: Optional[str] = None, access_token: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.access_token = access_token
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{settings.API_V1_STR}/generate"

    async def generate(self, request: GenerationRequest) -> GenerationResult:
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"

        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    self.endpoint,
                    headers=headers,
                    json=request.model_dump(mode="json", exclude_none=True),
                )
        except httpx.TransportError as e:
            logger.error(f"❌ Could not reach {self.endpoint}: {e}")
            raise RemoteGenerationError(NETWORK_ERROR_MESSAGE)

        if not response.is_success:
            message = f"API request failed with status: {response.status_code}"
            try:
                error_data = response.json()
                if isinstance(error_data, dict) and isinstance(error_data.get("error"), str):
                    message = error_data["error"]
            except ValueError:
                logger.warning("Could not parse JSON from error response.")
            raise RemoteGenerationError(message)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            raise RemoteGenerationError("Invalid response structure from our API proxy.")

        try:
            return GenerationResult.model_validate(data)
        except SchemaError as e:
            logger.error(f"❌ Proxy response failed schema validation: {e}")
            raise RemoteGenerationError("Invalid response structure from our API proxy.")
