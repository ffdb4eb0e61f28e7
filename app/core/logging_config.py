import os
import sys
from loguru import logger
from app.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<magenta>{extra[request_id]}</magenta> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[request_id]} | {name}:{function}:{line} - {message}"


def setup_logging(log_dir: str = None):
    """Console + rotating file sinks. Records outside a request get request_id "-"."""
    logger.remove()
    logger.configure(extra={"request_id": "-"})

    logger.add(sys.stdout, format=CONSOLE_FORMAT, level=settings.LOG_LEVEL, colorize=True)

    log_dir = log_dir or settings.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)
    logger.add(
        os.path.join(log_dir, "app.log"),
        rotation="10 MB",
        retention="10 days",
        level="DEBUG",
        compression="zip",
        format=FILE_FORMAT,
    )

    logger.info(f"Logging initialized | level={settings.LOG_LEVEL} dir={log_dir}")
