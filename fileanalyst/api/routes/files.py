"""File upload, listing, and delete endpoints."""

from typing import Annotated

from fastapi import APIRouter, File, Form, UploadFile
from fastapi.responses import JSONResponse

from fileanalyst.api.deps import CurrentUser, Storage
from fileanalyst.api.response import success_response
from fileanalyst.models.files import FileCategory

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("")
async def list_files(
    user: CurrentUser,
    storage: Storage,
    category: FileCategory | None = None,
) -> JSONResponse:
    """List the caller's files, newest first.

    Without a category, farm-data and certification-requirements are merged.
    """
    files = await storage.list_files(user.id, category)
    return JSONResponse(
        content=success_response([f.model_dump(mode="json") for f in files]),
    )


@router.post("", status_code=201)
async def upload_file(
    user: CurrentUser,
    storage: Storage,
    file: Annotated[UploadFile, File(...)],
    category: Annotated[FileCategory, Form()] = FileCategory.FARM_DATA,
) -> JSONResponse:
    """Upload a data file into one of the caller's folders.

    The file is validated for size (max 10MB) and type
    (CSV, XLS, XLSX, JSON, PDF, TXT, XML).
    """
    content = await file.read()

    stored = await storage.upload_file(
        owner_id=user.id,
        category=category,
        filename=file.filename or "unnamed",
        content=content,
        content_type=file.content_type,
    )

    return JSONResponse(
        status_code=201,
        content=success_response(stored.model_dump(mode="json")),
    )


@router.delete("/{category}/{name}")
async def delete_file(
    user: CurrentUser,
    storage: Storage,
    category: FileCategory,
    name: str,
) -> JSONResponse:
    """Delete one of the caller's files."""
    await storage.delete_file(user.id, category, name)
    return JSONResponse(content=success_response({"deleted": True}))
