from enum import Enum
from pydantic import BaseModel, Field, model_validator
from typing import Optional, List


class ContentType(str, Enum):
    PRODUCT_DESCRIPTION = "product_description"
    SOCIAL_MEDIA_POST = "social_media_post"


class ProductRecord(BaseModel):
    """One input row. Identity is its position in the input sequence."""
    product_name: str
    description: str = ""


class GenerationRequest(BaseModel):
    productName: str = ""
    description: str = ""
    tone: str = ""
    language: str = ""
    contentType: ContentType = ContentType.PRODUCT_DESCRIPTION
    imageData: Optional[str] = None  # base64, no data: prefix
    imageMimeType: Optional[str] = None

    @classmethod
    def from_record(cls, record: ProductRecord, tone: str, language: str,
                    content_type: ContentType) -> "GenerationRequest":
        return cls(
            productName=record.product_name,
            description=record.description,
            tone=tone,
            language=language,
            contentType=content_type,
        )


class SeoData(BaseModel):
    metaTitle: str = ""
    metaDescription: str = ""
    keywords: List[str] = Field(default_factory=list)


class GenerationResult(BaseModel):
    # Product description fields
    descriptions: Optional[List[str]] = None
    seo: Optional[SeoData] = None
    featureBullets: Optional[List[str]] = None
    targetAudience: Optional[str] = None
    callToActions: Optional[List[str]] = None
    hashtags: Optional[List[str]] = None
    # Social media fields
    socialMediaPosts: Optional[List[str]] = None


class BulkOutcome(BaseModel):
    product_name: str
    description: str = ""
    generated_description_1: Optional[str] = None
    generated_description_2: Optional[str] = None
    generated_description_3: Optional[str] = None
    meta_title: Optional[str] = None
    meta_description: Optional[str] = None
    keywords: Optional[str] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def check_single_variant(self):
        success_fields = [
            self.generated_description_1,
            self.generated_description_2,
            self.generated_description_3,
            self.meta_title,
            self.meta_description,
            self.keywords,
        ]
        has_success = any(v is not None for v in success_fields)
        if self.error is not None and has_success:
            raise ValueError("An outcome cannot carry both an error and generated content")
        if self.error is None and not all(v is not None for v in success_fields):
            raise ValueError("A successful outcome must carry every generated field")
        return self

    @property
    def is_success(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, record: ProductRecord, result: GenerationResult) -> "BulkOutcome":
        descriptions = result.descriptions or []
        seo = result.seo or SeoData()
        padded = (descriptions + ["", "", ""])[:3]
        return cls(
            product_name=record.product_name,
            description=record.description,
            generated_description_1=padded[0],
            generated_description_2=padded[1],
            generated_description_3=padded[2],
            meta_title=seo.metaTitle,
            meta_description=seo.metaDescription,
            keywords=", ".join(seo.keywords),
        )

    @classmethod
    def failure(cls, record: ProductRecord, message: str) -> "BulkOutcome":
        return cls(
            product_name=record.product_name,
            description=record.description,
            error=message or "Unknown API error",
        )


class Progress(BaseModel):
    current: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)
    current_label: str = ""

    def advance(self, label: str) -> None:
        if self.current >= self.total:
            raise ValueError("Progress cannot move past the total")
        self.current += 1
        self.current_label = label


class BulkSettings(BaseModel):
    tone: str = "professional"
    language: str = "en"
    content_type: ContentType = ContentType.PRODUCT_DESCRIPTION


class BulkReport(BaseModel):
    outcomes: List[BulkOutcome] = Field(default_factory=list)

    @property
    def success_count(self) -> int:
        return sum(1 for o in self.outcomes if o.is_success)

    @property
    def failure_count(self) -> int:
        return sum(1 for o in self.outcomes if not o.is_success)

    @property
    def failures(self) -> List[BulkOutcome]:
        return [o for o in self.outcomes if not o.is_success]


class JobStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class BulkJob(BaseModel):
    job_id: str
    status: JobStatus = JobStatus.PENDING
    progress: Progress = Field(default_factory=Progress)
    report: Optional[BulkReport] = None
    error: Optional[str] = None

    def summary(self) -> dict:
        data = {
            "job_id": self.job_id,
            "status": self.status.value,
            "progress": self.progress.model_dump(),
        }
        if self.report is not None:
            data["success_count"] = self.report.success_count
            data["failure_count"] = self.report.failure_count
            data["failures"] = [
                {"product_name": f.product_name, "error": f.error}
                for f in self.report.failures
            ]
        if self.error:
            data["error"] = self.error
        return data
