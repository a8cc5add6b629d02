import asyncio
import logging
from typing import List
from urllib.parse import quote

from fastapi import (
    APIRouter,
    Depends,
    Path,
    Request,
    status
)
from fastapi.responses import StreamingResponse
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile

from files_gateway.dependencies import get_s3_client, get_settings
from files_gateway.errors import GatewayError
from files_gateway.s3.delete_objects import delete_s3_object
from files_gateway.s3.keys import (
    build_upload_key,
    display_name,
    key_for_file_name,
    public_object_url,
)
from files_gateway.s3.read_objects import fetch_s3_object, fetch_s3_objects_metadata
from files_gateway.s3.write_objects import upload_s3_object
from files_gateway.schemas import (
    DeleteFileResponse,
    ErrorResponse,
    FileDescriptor,
    GetFilesResponse,
    UploadFilesResponse,
)
from files_gateway.settings import Settings
from files_gateway.streaming import relay_object_body

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}

UPLOAD_FIELD = "files"

UPLOAD_REQUEST_BODY = {
    "required": False,
    "content": {
        "multipart/form-data": {
            "schema": {
                "type": "object",
                "properties": {
                    UPLOAD_FIELD: {
                        "type": "array",
                        "items": {"type": "string", "format": "binary"},
                        "description": "Files to store",
                    }
                },
            }
        }
    },
}

# characters that cannot appear in an unquoted header parameter
HEADER_SPECIALS = set(';", \\')


def _object_url(object_key: str, settings: Settings) -> str:
    return public_object_url(
        object_key,
        bucket_name=settings.s3_bucket_name,
        region=settings.aws_region,
        public_base_url=settings.public_base_url,
    )


def _content_disposition(file_name: str) -> str:
    try:
        file_name.encode("latin-1")
    except UnicodeEncodeError:
        # header values must be latin-1
        return f"attachment; filename*=UTF-8''{quote(file_name)}"
    if HEADER_SPECIALS.intersection(file_name):
        escaped = file_name.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
    return f"attachment; filename={file_name}"


async def _submitted_files(request: Request) -> List[UploadFile]:
    """
    File parts of the upload field.

    Text values and parts without a filename are skipped; browsers submit an
    empty part for an untouched file input.
    """
    form = await request.form()
    return [
        value for value in form.getlist(UPLOAD_FIELD)
        if isinstance(value, UploadFile) and value.filename
    ]


@router.post(
    "/upload",
    response_model=UploadFilesResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        **ERROR_RESPONSES,
    },
    openapi_extra={"requestBody": UPLOAD_REQUEST_BODY},
)
async def upload_files(
    request: Request,
    settings: Settings = Depends(get_settings),
    s3_client=Depends(get_s3_client),
) -> UploadFilesResponse:
    """
    Store every submitted file under ``uploads/<ms-epoch>_<filename>``.

    All files are written concurrently. If any write fails the whole request
    fails and no descriptors are returned.
    """
    files = await _submitted_files(request)
    if not files:
        raise GatewayError("No files uploaded", status_code=status.HTTP_400_BAD_REQUEST)
    if len(files) > settings.max_upload_files:
        raise GatewayError(
            f"Too many files, at most {settings.max_upload_files} allowed",
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    async def store(upload: UploadFile) -> FileDescriptor:
        object_key = build_upload_key(upload.filename)
        file_bytes = await upload.read()
        await run_in_threadpool(
            upload_s3_object,
            bucket_name=settings.s3_bucket_name,
            object_key=object_key,
            file_content=file_bytes,
            s3_client=s3_client,
            content_type=upload.content_type,
        )
        logger.info(f"Uploaded {object_key} ({len(file_bytes)} bytes)")
        return FileDescriptor(name=object_key, url=_object_url(object_key, settings))

    try:
        uploaded_files = await asyncio.gather(*(store(upload) for upload in files))
    except Exception as e:
        logger.error(f"Upload error: {str(e)}")
        raise GatewayError.from_exception("File upload failed", e) from e

    return UploadFilesResponse(message="Files uploaded successfully", files=list(uploaded_files))


@router.get("/files", response_model=GetFilesResponse, responses=ERROR_RESPONSES)
async def list_files(
    settings: Settings = Depends(get_settings),
    s3_client=Depends(get_s3_client),
) -> GetFilesResponse:
    """
    List one page of the bucket.

    The listing covers the whole bucket; the `uploads/` prefix is only stripped
    from the names shown.
    """
    try:
        objects = await run_in_threadpool(fetch_s3_objects_metadata, settings.s3_bucket_name, s3_client)
    except Exception as e:
        logger.error(f"Fetch error: {str(e)}")
        raise GatewayError.from_exception("Failed to fetch files", e) from e

    return GetFilesResponse(
        files=[
            FileDescriptor(name=display_name(item["Key"]), url=_object_url(item["Key"], settings))
            for item in objects
        ]
    )


@router.delete("/delete/{file_name}", response_model=DeleteFileResponse, responses=ERROR_RESPONSES)
async def delete_file(
    file_name: str = Path(..., description="Name of the file under `uploads/`"),
    settings: Settings = Depends(get_settings),
    s3_client=Depends(get_s3_client),
) -> DeleteFileResponse:
    """Delete ``uploads/<file_name>``. Succeeds whether or not the file existed."""
    object_key = key_for_file_name(file_name)
    logger.info(f"Deleting file: {object_key}")

    try:
        await run_in_threadpool(delete_s3_object, settings.s3_bucket_name, object_key, s3_client)
    except Exception as e:
        logger.error(f"Delete error: {str(e)}")
        raise GatewayError.from_exception("File deletion failed", e) from e

    return DeleteFileResponse(message=f"File {file_name} deleted successfully")


@router.get(
    "/download/{file_name}",
    response_class=StreamingResponse,
    responses={
        status.HTTP_200_OK: {"content": {"application/octet-stream": {}}},
        **ERROR_RESPONSES,
    },
)
async def download_file(
    file_name: str = Path(..., description="Name of the file under `uploads/`"),
    settings: Settings = Depends(get_settings),
    s3_client=Depends(get_s3_client),
) -> StreamingResponse:
    """
    Stream ``uploads/<file_name>`` to the client as an attachment.

    The object is fetched before any header is sent, so a missing key or a
    storage failure produces a JSON error instead of a truncated download.
    """
    object_key = key_for_file_name(file_name)

    try:
        s3_object = await run_in_threadpool(fetch_s3_object, settings.s3_bucket_name, object_key, s3_client)
    except Exception as e:
        logger.error(f"Download error: {str(e)}")
        raise GatewayError.from_exception("File download failed", e) from e

    return StreamingResponse(
        relay_object_body(s3_object["Body"], settings.download_chunk_size, object_key),
        media_type="application/octet-stream",
        headers={"Content-Disposition": _content_disposition(file_name)},
    )
