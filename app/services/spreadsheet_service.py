import os
import zipfile
import pandas as pd
from io import BytesIO
from loguru import logger
from typing import List
from app.core.config import settings
from app.core.constants import EMPTY_FILE_MESSAGE, EXPORT_COLUMNS, REQUIRED_COLUMNS
from app.core.exceptions import ValidationError
from app.models.content import BulkOutcome, ProductRecord

CSV_MIME = "text/csv"
XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class SpreadsheetService:
    @staticmethod
    def detect_format(filename: str) -> str:
        extension = os.path.splitext(filename or "")[1].lower().lstrip(".")
        if extension not in settings.ALLOWED_EXTENSIONS:
            raise ValidationError("Invalid file type. Please upload a CSV or XLSX file.")
        return extension

    @staticmethod
    def _read_frame(file_bytes: bytes, file_format: str) -> pd.DataFrame:
        try:
            if file_format == "csv":
                return pd.read_csv(BytesIO(file_bytes), dtype=str, keep_default_na=False, skip_blank_lines=True)
            # First sheet only
            return pd.read_excel(BytesIO(file_bytes), sheet_name=0, dtype=object)
        except pd.errors.EmptyDataError:
            raise ValidationError(EMPTY_FILE_MESSAGE)
        except (ValueError, OSError, zipfile.BadZipFile) as e:
            logger.error(f"Error reading {file_format} file: {str(e)}")
            raise ValidationError(f"Failed to parse {file_format.upper()} file.")

    @staticmethod
    def parse_rows(filename: str, file_bytes: bytes) -> List[ProductRecord]:
        """
        Parse an uploaded CSV/XLSX into product records, in file order.

        Headers are normalised (lowercase, trimmed, spaces to underscores) and
        must include ``product_name`` and ``description``. Rows whose
        product name is blank are dropped.
        """
        file_format = SpreadsheetService.detect_format(filename)

        max_bytes = settings.MAX_UPLOAD_MB * 1024 * 1024
        if len(file_bytes) > max_bytes:
            raise ValidationError(f"File is too large. The limit is {settings.MAX_UPLOAD_MB}MB.")

        logger.info(f"Parsing {file_format.upper()} file: {filename}")
        df = SpreadsheetService._read_frame(file_bytes, file_format)

        df.columns = [str(col).lower().strip().replace(' ', '_') for col in df.columns]

        duplicated = sorted(set(df.columns[df.columns.duplicated()]))
        if duplicated:
            logger.warning(f"🚫 Duplicate columns after normalisation: {duplicated}")
            raise ValidationError(
                f"{file_format.upper()} file has duplicate columns: {', '.join(duplicated)}."
            )

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            logger.warning(f"🚫 Missing columns {missing}. Columns found: {list(df.columns)}")
            raise ValidationError(
                f'{file_format.upper()} file must contain "product_name" and "description" columns.'
            )

        df = df.fillna("")

        records = []
        dropped = 0
        for _, row in df.iterrows():
            name = str(row["product_name"]).strip()
            if not name:
                dropped += 1
                continue
            records.append(ProductRecord(product_name=name, description=str(row["description"]).strip()))

        if dropped:
            logger.warning(f"Dropped {dropped} row(s) without a product name.")
        logger.success(f"Successfully parsed {len(records)} rows. Columns found: {list(df.columns)}")
        return records

    @staticmethod
    def to_frame(outcomes: List[BulkOutcome]) -> pd.DataFrame:
        rows = [outcome.model_dump() for outcome in outcomes]
        return pd.DataFrame(rows, columns=EXPORT_COLUMNS)

    @staticmethod
    def export_csv(outcomes: List[BulkOutcome]) -> bytes:
        df = SpreadsheetService.to_frame(outcomes)
        return df.to_csv(index=False).encode("utf-8")

    @staticmethod
    def export_xlsx(outcomes: List[BulkOutcome]) -> bytes:
        df = SpreadsheetService.to_frame(outcomes)
        buffer = BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Results")
        return buffer.getvalue()
