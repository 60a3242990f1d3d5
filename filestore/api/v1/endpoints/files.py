"""File API: thin routes delegating to StorageService."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile

from filestore.api.v1.dependencies import (
    get_current_user_id,
    get_storage_query_service,
    get_storage_service,
)
from filestore.application.dtos.storage import UploadOptions, UploadStream
from filestore.application.use_cases.storage import StorageService
from filestore.core.config import get_settings
from filestore.domain.enums import ReferenceType
from filestore.domain.exceptions import ResourceNotFoundException
from filestore.schemas.files import (
    FileUrlResponse,
    StoredFileResponse,
    UploadFromUrlRequest,
    UploadResponse,
)

router = APIRouter()


@router.post("", response_model=UploadResponse, status_code=201)
async def upload_file(
    user_id: Annotated[int, Depends(get_current_user_id)],
    file: UploadFile = File(...),
    reference_type: ReferenceType = Form(ReferenceType.POST),
    sub_path: str | None = Form(None),
    provider_id: int | None = Form(None),
    is_public: bool = Form(True),
    storage: StorageService = Depends(get_storage_service),
) -> UploadResponse:
    """Upload a file (multipart). Identical content on the same provider is reused."""
    source = UploadStream(
        file=file,
        filename=file.filename,
        content_type=file.content_type or "application/octet-stream",
    )
    options = UploadOptions(
        reference_type=reference_type,
        user_id=user_id,
        sub_path=sub_path or None,
        original_filename=file.filename,
        provider_id=provider_id,
        is_public=is_public,
    )
    result = await storage.upload(source, options)
    return UploadResponse.from_result(result)


@router.post("/from-url", response_model=UploadResponse, status_code=201)
async def upload_file_from_url(
    body: UploadFromUrlRequest,
    user_id: Annotated[int, Depends(get_current_user_id)],
    storage: StorageService = Depends(get_storage_service),
) -> UploadResponse:
    """Fetch a public URL (internal addresses refused) and upload its body."""
    options = UploadOptions(
        reference_type=body.reference_type,
        user_id=user_id,
        sub_path=body.sub_path or None,
        original_filename=body.original_filename,
        provider_id=body.provider_id,
        is_public=body.is_public,
    )
    timeout_ms = body.timeout_ms or get_settings().remote_fetch_timeout_ms
    result = await storage.upload_from_url(body.url, options, timeout_ms=timeout_ms)
    return UploadResponse.from_result(result)


@router.get("/{file_id}", response_model=StoredFileResponse)
async def get_file(
    file_id: int,
    _: Annotated[int, Depends(get_current_user_id)],
    storage: StorageService = Depends(get_storage_query_service),
) -> StoredFileResponse:
    """Return metadata of a live file."""
    record = await storage.get_file(file_id)
    if record is None:
        raise ResourceNotFoundException("file", str(file_id))
    return StoredFileResponse.from_record(record)


@router.get("/{file_id}/url", response_model=FileUrlResponse)
async def get_file_url(
    file_id: int,
    _: Annotated[int, Depends(get_current_user_id)],
    storage: StorageService = Depends(get_storage_query_service),
) -> FileUrlResponse:
    """Return the public URL of a live file."""
    url = await storage.get_url(file_id)
    if url is None:
        raise ResourceNotFoundException("file", str(file_id))
    return FileUrlResponse(url=url)


@router.delete("/{file_id}", status_code=204)
async def delete_file(
    file_id: int,
    _: Annotated[int, Depends(get_current_user_id)],
    storage: StorageService = Depends(get_storage_service),
) -> Response:
    """Soft-delete a file. The object is removed once no live file shares its content."""
    await storage.delete(file_id)
    return Response(status_code=204)
