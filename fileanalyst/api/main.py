"""FastAPI application: routers, CORS, and error-to-envelope mapping."""

import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from dotenv import load_dotenv

# Settings below and in the db/storage/llm modules are read at import time
load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import ConnectionFailure

from fileanalyst.api.exceptions import (
    FileTooLargeError,
    InvalidFileTypeError,
    NoReadableContentError,
    StoredFileExistsError,
    StoredFileNotFoundError,
    UnauthorizedError,
    ValidationError,
)
from fileanalyst.api.response import error_json
from fileanalyst.api.routes import analysis, files, health
from fileanalyst.db.mongo import close_database
from fileanalyst.llm import (
    LLMError,
    ProviderError,
    ProviderNotConfiguredError,
    ProviderTimeoutError,
)

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = "http://localhost:5173,http://localhost:8080,http://127.0.0.1:5173"


def cors_origins() -> list[str]:
    """Allowed origins from the comma-separated CORS_ORIGINS variable."""
    raw = os.getenv("CORS_ORIGINS", DEFAULT_CORS_ORIGINS)
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    yield
    await close_database()


app = FastAPI(
    title="File Analyst API",
    description="Upload data files and analyze them with a hosted language model",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request errors


@app.exception_handler(UnauthorizedError)
async def unauthorized_handler(request: Request, exc: UnauthorizedError) -> JSONResponse:
    return error_json(401, "UNAUTHORIZED", exc.message)


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    return error_json(400, "VALIDATION_ERROR", exc.message)


@app.exception_handler(NoReadableContentError)
async def no_readable_content_handler(request: Request, exc: NoReadableContentError) -> JSONResponse:
    return error_json(400, "NO_READABLE_CONTENT", str(exc))


# Storage errors


@app.exception_handler(FileTooLargeError)
async def file_too_large_handler(request: Request, exc: FileTooLargeError) -> JSONResponse:
    limit_mb = exc.max_size // (1024 * 1024)
    return error_json(400, "FILE_TOO_LARGE", f"File size exceeds maximum of {limit_mb}MB")


@app.exception_handler(InvalidFileTypeError)
async def invalid_file_type_handler(request: Request, exc: InvalidFileTypeError) -> JSONResponse:
    return error_json(
        400,
        "INVALID_FILE_TYPE",
        f"File type '{exc.file_type}' is not supported. Allowed: CSV, XLS, XLSX, JSON, PDF, TXT, XML",
    )


@app.exception_handler(StoredFileNotFoundError)
async def file_not_found_handler(request: Request, exc: StoredFileNotFoundError) -> JSONResponse:
    return error_json(404, "FILE_NOT_FOUND", str(exc))


@app.exception_handler(StoredFileExistsError)
async def file_exists_handler(request: Request, exc: StoredFileExistsError) -> JSONResponse:
    return error_json(409, "FILE_EXISTS", str(exc))


# Token store errors


@app.exception_handler(ConnectionFailure)
async def token_store_unavailable_handler(request: Request, exc: ConnectionFailure) -> JSONResponse:
    logger.error("Token store unreachable: %s", exc)
    return error_json(503, "DATABASE_UNAVAILABLE", "Database is not available. Please try again later.")


# Model provider errors


@app.exception_handler(ProviderNotConfiguredError)
async def provider_not_configured_handler(
    request: Request, exc: ProviderNotConfiguredError
) -> JSONResponse:
    return error_json(500, "AI_NOT_CONFIGURED", exc.args[0])


@app.exception_handler(ProviderTimeoutError)
async def provider_timeout_handler(request: Request, exc: ProviderTimeoutError) -> JSONResponse:
    return error_json(504, "AI_PROVIDER_TIMEOUT", exc.args[0])


@app.exception_handler(ProviderError)
async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    """Relay the provider's status and raw error body untranslated."""
    status_code = exc.status_code if exc.status_code and 400 <= exc.status_code < 600 else 502
    return error_json(status_code, "AI_PROVIDER_ERROR", exc.args[0])


@app.exception_handler(LLMError)
async def llm_error_handler(request: Request, exc: LLMError) -> JSONResponse:
    return error_json(503, "AI_SERVICE_ERROR", "AI service is temporarily unavailable. Please try again.")


app.include_router(health.router)
app.include_router(files.router)
app.include_router(analysis.router, prefix="/api")
