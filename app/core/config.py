from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import List, Any
import os

class Settings(BaseSettings):
    PROJECT_NAME: str = "CopyCraft AI Content Studio"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"

    # Gemini
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta")
    GEMINI_MODEL_VERSION: str = os.getenv("GEMINI_MODEL_VERSION", "gemini-2.5-flash")
    GEMINI_TIMEOUT: float = 60.0

    # Supabase (auth + profiles table)
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    AUTH_REDIRECT_URL: str = os.getenv("AUTH_REDIRECT_URL", "http://localhost:8501")

    # Usage quota
    USAGE_LIMIT: int = 3
    # "flat_rate": bulk runs check the limit once and never consume quota
    # "per_item": every successful bulk row consumes one unit
    BULK_QUOTA_POLICY: str = "flat_rate"
    BULK_DEFAULT_LANGUAGE: str = "en"

    # Storage
    LOG_DIR: str = "logs"

    # Uploads
    ALLOWED_EXTENSIONS: Any = ["csv", "xlsx"]
    ALLOWED_IMAGE_TYPES: Any = ["image/jpeg", "image/png", "image/webp"]
    MAX_UPLOAD_MB: int = 10

    @field_validator("ALLOWED_EXTENSIONS", "ALLOWED_IMAGE_TYPES", mode="before")
    @classmethod
    def assemble_list(cls, v: Any) -> List[str]:
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    @field_validator("BULK_QUOTA_POLICY")
    @classmethod
    def check_quota_policy(cls, v: str) -> str:
        if v not in ("flat_rate", "per_item"):
            raise ValueError("BULK_QUOTA_POLICY must be 'flat_rate' or 'per_item'")
        return v

    # Contact form (Google Forms)
    CONTACT_FORM_URL: str = os.getenv(
        "CONTACT_FORM_URL",
        "https://docs.google.com/forms/d/e/1FAIpQLSdLDx2MKsh5RpjwYHpVRcD4lEIaT-LgmuzxH3rHExBJBZPFhg/formResponse",
    )
    CONTACT_ENTRY_NAME: str = "entry.809904154"
    CONTACT_ENTRY_EMAIL: str = "entry.561482795"
    CONTACT_ENTRY_MESSAGE: str = "entry.2098362872"

    # GUI -> API
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://localhost:8080")

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
