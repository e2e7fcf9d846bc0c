from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, File, Request, UploadFile
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .errors import ApiError, ErrorCode
from .logging_setup import configure_logging, get_logger
from .models import (
    DetectRequest,
    DetectResponse,
    ErrorResponse,
    HealthResponse,
    ImportResponse,
)
from .parsers import detect_csv_format
from .rules import ALLOWED_CSV_TYPES
from .service import import_csv_bytes

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(get_settings().log_level)
    yield


app = FastAPI(
    title="statement-import",
    description="Bank-statement CSV detection and normalization",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message, code=exc.code).model_dump(),
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("unexpected error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="An unexpected error occurred.",
            code=ErrorCode.INTERNAL_ERROR,
        ).model_dump(),
    )


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/detect", response_model=DetectResponse)
def detect(body: DetectRequest):
    return {"format": detect_csv_format(body.headers)}


@app.post(
    "/import",
    response_model=ImportResponse,
    responses={413: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def import_csv(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    if not (file.filename or "").lower().endswith(".csv"):
        raise ApiError(ErrorCode.VALIDATION_ERROR, "Only CSV files are supported", 422)
    if file.content_type and file.content_type not in ALLOWED_CSV_TYPES:
        raise ApiError(ErrorCode.VALIDATION_ERROR, f"Unsupported content type: {file.content_type}", 422)

    raw = await file.read(settings.max_file_size + 1)
    if len(raw) > settings.max_file_size:
        raise ApiError(
            ErrorCode.VALIDATION_ERROR,
            f"File exceeds {settings.max_file_size} bytes",
            413,
        )

    return import_csv_bytes(raw, max_rows=settings.max_rows)
