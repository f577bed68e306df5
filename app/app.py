"""FastAPI application setup."""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from routers import health, pipeline, storage, upload
from schemas.common import ErrorResponse
from src.config.log_setup import configure_logging
from src.config.settings import get_settings
from src.errors import RawDataServiceError


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(
    title="Geotechnical Raw Data API",
    description="API for raw dataset upload, storage listing and pipeline triggering",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:3001",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RawDataServiceError)
async def _service_error_handler(request: Request, exc: RawDataServiceError):
    logger.error("{} {} -> {}: {}", request.method, request.url.path, exc.status_code, exc.message)
    body = ErrorResponse(error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


# Include routers
app.include_router(upload.router, prefix="/api/upload", tags=["Upload"])
app.include_router(storage.router, prefix="/api", tags=["Storage"])
app.include_router(pipeline.router, prefix="/api/pipeline", tags=["Pipeline"])
app.include_router(health.router, tags=["Health"])
