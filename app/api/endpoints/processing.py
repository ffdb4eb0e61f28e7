from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from app.api.deps import get_generation_client, get_usage_gate
from app.core.config import settings
from app.core.constants import EMPTY_FILE_MESSAGE, TEMPLATE_CSV
from app.core.exceptions import ValidationError
from app.models.content import BulkJob, BulkSettings, JobStatus, ContentType
from app.services.bulk_pipeline import BulkPipeline
from app.services.generation_client import GenerationClient
from app.services.spreadsheet_service import CSV_MIME, XLSX_MIME, SpreadsheetService
from app.services.usage_gate import UsageGate
from loguru import logger
from typing import Dict, Optional
import uuid

router = APIRouter()


class JobStore:
    """In-memory registry of bulk jobs for this process."""

    def __init__(self):
        self.jobs: Dict[str, BulkJob] = {}

    def create(self) -> BulkJob:
        job = BulkJob(job_id=f"job_{uuid.uuid4().hex[:12]}")
        self.jobs[job.job_id] = job
        return job

    def get(self, job_id: str) -> BulkJob:
        if job_id not in self.jobs:
            raise HTTPException(status_code=404, detail="Job ID not found")
        return self.jobs[job_id]


jobs = JobStore()


def get_job_store() -> JobStore:
    return jobs


@router.post("/upload")
async def upload_and_process(
    background_tasks: BackgroundTasks,
    file: Optional[UploadFile] = File(None),
    tone: str = Form("professional"),
    language: str = Form(settings.BULK_DEFAULT_LANGUAGE),
    gate: UsageGate = Depends(get_usage_gate),
    client: GenerationClient = Depends(get_generation_client),
    store: JobStore = Depends(get_job_store),
):
    """
    Upload a CSV/XLSX of products and start a background bulk run.
    """

    # ---------------------------------------------------------
    # 1. Pipeline-level checks (nothing is processed on failure)
    # ---------------------------------------------------------
    gate.ensure_can_generate()

    if file is None or not file.filename:
        raise ValidationError("Please select a file to process.")

    records = SpreadsheetService.parse_rows(file.filename, await file.read())
    if not records:
        raise ValidationError(EMPTY_FILE_MESSAGE)

    # ---------------------------------------------------------
    # 2. Initialize Job State
    # ---------------------------------------------------------
    job = store.create()
    job.progress.total = len(records)

    bulk_settings = BulkSettings(
        tone=tone,
        language=language or settings.BULK_DEFAULT_LANGUAGE,
        content_type=ContentType.PRODUCT_DESCRIPTION,
    )

    def track_progress(progress):
        job.progress = progress

    pipeline = BulkPipeline(client, on_progress=track_progress, gate=gate)

    # ---------------------------------------------------------
    # 3. Background Processing Logic
    # ---------------------------------------------------------
    async def run_and_track():
        job.status = JobStatus.RUNNING
        logger.info(f"🚀 Job {job.job_id} started | {len(records)} products")
        try:
            job.report = await pipeline.run(records, bulk_settings)
            job.status = JobStatus.COMPLETED
        except Exception as e:
            logger.exception(f"Job {job.job_id} failed: {e}")
            job.status = JobStatus.FAILED
            job.error = str(e)

    background_tasks.add_task(run_and_track)

    return {
        "job_id": job.job_id,
        "status": "processing_started",
        "items_count": len(records),
        "product_names": [r.product_name for r in records],
    }


@router.get("/status/{job_id}")
async def get_job_status(job_id: str, store: JobStore = Depends(get_job_store)):
    return store.get(job_id).summary()


@router.get("/results/{job_id}")
async def get_job_results(job_id: str, store: JobStore = Depends(get_job_store)):
    job = store.get(job_id)
    if job.report is None:
        raise HTTPException(status_code=409, detail="Job has not finished yet")
    return [o.model_dump() for o in job.report.outcomes]


@router.get("/download/{job_id}")
async def download_results(job_id: str, format: str = "csv",
                           store: JobStore = Depends(get_job_store)):
    job = store.get(job_id)
    if job.report is None:
        raise HTTPException(status_code=409, detail="Job has not finished yet")

    if format == "csv":
        content, media_type = SpreadsheetService.export_csv(job.report.outcomes), CSV_MIME
    elif format == "xlsx":
        content, media_type = SpreadsheetService.export_xlsx(job.report.outcomes), XLSX_MIME
    else:
        raise ValidationError("Unsupported export format. Use 'csv' or 'xlsx'.")

    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="generated_products.{format}"'},
    )


@router.get("/template")
async def download_template():
    return Response(
        content=TEMPLATE_CSV,
        media_type=CSV_MIME,
        headers={"Content-Disposition": 'attachment; filename="template.csv"'},
    )
