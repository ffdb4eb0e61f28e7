import httpx
from loguru import logger
from typing import Optional
from app.core.config import settings
from app.core.exceptions import AppError, ValidationError
from app.models.account import ContactMessage


class ContactSubmissionError(AppError):
    status_code = 500


class ContactService:
    """Forwards contact-form messages to a Google Form."""

    def __init__(self, form_url: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.form_url = form_url or settings.CONTACT_FORM_URL
        self.transport = transport

    async def submit(self, message: ContactMessage) -> None:
        if not (message.name.strip() and message.email.strip() and message.message.strip()):
            raise ValidationError("Missing required fields.")

        form_data = {
            settings.CONTACT_ENTRY_NAME: message.name,
            settings.CONTACT_ENTRY_EMAIL: message.email,
            settings.CONTACT_ENTRY_MESSAGE: message.message,
        }

        try:
            async with httpx.AsyncClient(timeout=15.0, transport=self.transport) as client:
                response = await client.post(self.form_url, data=form_data)
        except httpx.HTTPError as e:
            logger.error(f"Error in contact form submission: {e}")
            raise ContactSubmissionError(f"Failed to submit form: {e}")

        if not response.is_success:
            logger.error(f"Google Form submission failed with status: {response.status_code}")
            raise ContactSubmissionError(
                f"Failed to submit form: Google Form submission failed with status: {response.status_code}"
            )

        logger.info(f"📨 Contact message from {message.email} submitted")
