"""Object key and public URL construction."""
import time
from typing import Optional

UPLOAD_PREFIX = "uploads/"


def build_upload_key(original_filename: str, timestamp_ms: Optional[int] = None) -> str:
    """
    Key for a newly uploaded file: ``uploads/<ms-epoch>_<original-filename>``.

    Two files with the same name uploaded within the same millisecond share a key.
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"{UPLOAD_PREFIX}{timestamp_ms}_{original_filename}"


def key_for_file_name(file_name: str) -> str:
    """Key used by delete and download lookups."""
    return f"{UPLOAD_PREFIX}{file_name}"


def display_name(object_key: str) -> str:
    """Object key without the upload prefix, for listings."""
    return object_key.removeprefix(UPLOAD_PREFIX)


def public_object_url(
    object_key: str,
    bucket_name: str,
    region: str,
    public_base_url: Optional[str] = None,
) -> str:
    """
    Public access URL of an object.

    Virtual-hosted S3 URL unless a base URL is configured.
    """
    if public_base_url:
        return f"{public_base_url}/{object_key}"
    return f"https://{bucket_name}.s3.{region}.amazonaws.com/{object_key}"
