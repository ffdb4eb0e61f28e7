from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from app.core.exceptions import AppError
import time
import uuid


async def log_request_middleware(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    with logger.contextualize(request_id=request_id):
        started = time.perf_counter()
        authenticated = "authorization" in request.headers
        logger.info(f"➡️ {request.method} {request.url.path} | auth={'yes' if authenticated else 'no'}")

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(f"Unhandled exception occurred: {str(e)}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"detail": "An internal server error occurred.", "request_id": request_id}
            )

        elapsed_ms = (time.perf_counter() - started) * 1000
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"⬅️ {request.method} {request.url.path} - {response.status_code} in {elapsed_ms:.2f}ms")

        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app):
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        logger.warning(f"{type(exc).__name__} on {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(part) for part in first.get("loc", []) if part != "body")
        message = f"Invalid value for '{field}': {first.get('msg', 'invalid input')}" if field else "Invalid request."
        logger.warning(f"Request validation failed on {request.url.path}: {message}")
        return JSONResponse(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, content={"error": message})

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Global Exception: {str(exc)}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal Server Error", "message": str(exc)}
        )
