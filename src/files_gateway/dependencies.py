"""FastAPI dependencies handing the process-wide handles to route handlers."""
from typing import TYPE_CHECKING

from fastapi import Request

from files_gateway.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client


def get_settings(request: Request) -> Settings:
    """Settings built once by ``create_app``."""
    return request.app.state.settings


def get_s3_client(request: Request) -> "S3Client":
    """S3 client built once by ``create_app``."""
    return request.app.state.s3_client
