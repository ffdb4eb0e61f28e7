from fastapi import FastAPI
from app.api.endpoints import auth, contact, generation, processing
from app.core.config import settings
from app.core.logging_config import setup_logging
from loguru import logger
from app.core.middleware import log_request_middleware, setup_exception_handlers
from starlette.middleware.base import BaseHTTPMiddleware
from fastapi.middleware.cors import CORSMiddleware

# Initialize Logging
setup_logging()

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="AI marketing-copy generation for e-commerce products: single products, bulk spreadsheets and usage quotas."
)

# Add Middleware
app.add_middleware(BaseHTTPMiddleware, dispatch=log_request_middleware)
setup_exception_handlers(app)

# Add CORS last so it runs first (outermost)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)

@app.get("/")
async def root():
    return {
        "app": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "online"
    }

# Include Routers
app.include_router(generation.router, prefix=f"{settings.API_V1_STR}/generate", tags=["Generation"])
app.include_router(processing.router, prefix=f"{settings.API_V1_STR}/bulk", tags=["Bulk"])
app.include_router(auth.router, prefix=f"{settings.API_V1_STR}/auth", tags=["Auth"])
app.include_router(contact.router, prefix=f"{settings.API_V1_STR}/contact", tags=["Contact"])

@app.on_event("startup")
async def startup_event():
    logger.info(f"Starting {settings.PROJECT_NAME}...")
    logger.info(f"Usage limit: {settings.USAGE_LIMIT} | Bulk quota policy: {settings.BULK_QUOTA_POLICY}")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8080, reload=True)
