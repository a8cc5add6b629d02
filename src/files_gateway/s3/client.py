"""S3 client construction."""
import logging
from typing import TYPE_CHECKING

import boto3

from files_gateway.settings import Settings

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)


def create_s3_client(settings: Settings) -> "S3Client":
    """
    Build the S3 client the gateway shares across requests.

    boto3 clients are thread-safe, so one instance serves every request
    handled in the thread pool.

    :param settings: Gateway settings carrying region, credentials and endpoint.
    """
    client_kwargs = {
        "region_name": settings.aws_region,
    }

    # Explicit credentials win; otherwise boto3's default chain applies
    if settings.aws_access_key_id:
        client_kwargs["aws_access_key_id"] = settings.aws_access_key_id
    if settings.aws_secret_access_key:
        client_kwargs["aws_secret_access_key"] = settings.aws_secret_access_key

    if settings.aws_endpoint_url:
        client_kwargs["endpoint_url"] = settings.aws_endpoint_url

    logger.info("Creating S3 client")
    logger.info(f"  Region: {settings.aws_region}")
    logger.info(f"  Bucket: {settings.s3_bucket_name}")
    logger.info(f"  Endpoint: {settings.aws_endpoint_url or 'default'}")

    try:
        return boto3.client("s3", **client_kwargs)
    except Exception as e:
        logger.error(f"Error creating s3 client: {str(e)}")
        raise
