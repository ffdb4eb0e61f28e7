import base64
import binascii
from io import BytesIO
from PIL import Image, UnidentifiedImageError
from loguru import logger
from typing import Tuple
from app.core.config import settings
from app.core.exceptions import ValidationError

class ImageProcessor:
    @staticmethod
    def validate_image(image_bytes: bytes, content_type: str) -> None:
        """Checks the upload is an allowed, readable image within the size limit."""
        if content_type not in settings.ALLOWED_IMAGE_TYPES:
            raise ValidationError(f"Invalid image type: {content_type}")
        if len(image_bytes) > settings.MAX_UPLOAD_MB * 1024 * 1024:
            raise ValidationError(f"Image is too large. The limit is {settings.MAX_UPLOAD_MB}MB.")
        try:
            with Image.open(BytesIO(image_bytes)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError) as e:
            logger.error(f"Image validation failed: {e}")
            raise ValidationError("The uploaded file is not a readable image.")

    @staticmethod
    def optimize_for_api(image_bytes: bytes, max_size=(1536, 1536)) -> bytes:
        """Downscales large images while keeping the aspect ratio and format."""
        try:
            with Image.open(BytesIO(image_bytes)) as img:
                if img.width > max_size[0] or img.height > max_size[1]:
                    image_format = img.format or "PNG"
                    img.thumbnail(max_size, Image.Resampling.LANCZOS)
                    buffer = BytesIO()
                    img.save(buffer, format=image_format, quality=95)
                    logger.info(f"Image optimized to {img.width}x{img.height}")
                    return buffer.getvalue()
            return image_bytes
        except OSError as e:
            logger.warning(f"Image optimization failed, using original: {e}")
            return image_bytes

    @staticmethod
    def encode_upload(image_bytes: bytes, content_type: str) -> Tuple[str, str]:
        """Validate, shrink and base64-encode an uploaded image for the request."""
        ImageProcessor.validate_image(image_bytes, content_type)
        optimized = ImageProcessor.optimize_for_api(image_bytes)
        return base64.b64encode(optimized).decode("utf-8"), content_type

    @staticmethod
    def check_inline(image_data: str, content_type: str) -> Tuple[str, str]:
        """Re-checks an image that arrived already base64-encoded in a JSON body."""
        try:
            image_bytes = base64.b64decode(image_data, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("The attached image is not valid base64 data.")
        return ImageProcessor.encode_upload(image_bytes, content_type)
