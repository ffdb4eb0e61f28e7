from loguru import logger
from typing import Callable, List, Optional
from app.core.config import settings
from app.core.constants import EMPTY_FILE_MESSAGE, QUOTA_MESSAGE
from app.core.exceptions import ValidationError
from app.models.content import (
    BulkOutcome,
    BulkReport,
    BulkSettings,
    GenerationRequest,
    ProductRecord,
    Progress,
)
from app.services.generation_client import GenerationClient
from app.services.usage_gate import UsageGate

FLAT_RATE = "flat_rate"
PER_ITEM = "per_item"

ProgressCallback = Callable[[Progress], None]


class BulkPipeline:
    """
    Runs the generation client over a list of records, one at a time.

    A failing row is recorded on its own outcome and never stops the run, so
    the report always has one outcome per input record, in input order.
    """

    def __init__(self, client: GenerationClient, on_progress: Optional[ProgressCallback] = None,
                 gate: Optional[UsageGate] = None, quota_policy: Optional[str] = None):
        self.client = client
        self.on_progress = on_progress
        self.gate = gate
        self.quota_policy = quota_policy or settings.BULK_QUOTA_POLICY

    def _publish(self, progress: Progress) -> None:
        if self.on_progress is not None:
            self.on_progress(progress.model_copy())

    async def run(self, records: List[ProductRecord], bulk_settings: BulkSettings) -> BulkReport:
        if not records:
            raise ValidationError(EMPTY_FILE_MESSAGE)

        # Checked once per run
        if self.gate is not None:
            self.gate.ensure_can_generate()

        total = len(records)
        progress = Progress(current=0, total=total, current_label="")
        outcomes: List[BulkOutcome] = []
        self._publish(progress)

        logger.info(f"🚀 Starting bulk run | {total} products | tone={bulk_settings.tone} language={bulk_settings.language}")

        for record in records:
            progress.advance(record.product_name)
            logger.info(f"🔄 Processing {record.product_name} ({progress.current}/{total})")

            if self._quota_exhausted():
                outcomes.append(BulkOutcome.failure(record, QUOTA_MESSAGE))
                self._publish(progress)
                continue

            request = GenerationRequest.from_record(
                record, bulk_settings.tone, bulk_settings.language, bulk_settings.content_type
            )
            try:
                result = await self.client.generate(request)
            except Exception as e:
                logger.error(f"❌ Failed {record.product_name}: {e}")
                outcomes.append(BulkOutcome.failure(record, str(e)))
            else:
                outcomes.append(BulkOutcome.success(record, result))
                if self.quota_policy == PER_ITEM and self.gate is not None:
                    await self.gate.record_success()

            self._publish(progress)

        report = BulkReport(outcomes=outcomes)
        logger.info(f"🏁 Bulk run finished | {report.success_count} succeeded, {report.failure_count} failed")
        return report

    def _quota_exhausted(self) -> bool:
        return (
            self.quota_policy == PER_ITEM
            and self.gate is not None
            and self.gate.is_limit_reached
        )
