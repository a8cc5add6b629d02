"""Functions for reading objects from an S3 bucket--the "R" in CRUD."""

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client
    from mypy_boto3_s3.type_defs import GetObjectOutputTypeDef, ObjectTypeDef


def fetch_s3_objects_metadata(bucket_name: str, s3_client: "S3Client") -> List["ObjectTypeDef"]:
    """
    Fetch a single page of object metadata for the whole bucket.

    No prefix filter is applied and continuation tokens are not followed, so
    buckets larger than one listing page are truncated.

    :param bucket_name: The name of the S3 bucket.
    :param s3_client: The boto3 S3 client shared by the gateway.

    :return: Metadata of the listed objects, empty when the bucket is empty.
    """
    response = s3_client.list_objects_v2(Bucket=bucket_name)
    return response.get("Contents", [])


def fetch_s3_object(bucket_name: str, object_key: str, s3_client: "S3Client") -> "GetObjectOutputTypeDef":
    """
    Fetch an object from an S3 bucket.

    Raises ``botocore.exceptions.ClientError`` (``NoSuchKey``) when the key does
    not exist, before any of the body has been read.

    :param bucket_name: The name of the S3 bucket.
    :param object_key: path to the object in the S3 bucket.
    :param s3_client: The boto3 S3 client shared by the gateway.

    :return: The get_object response; ``Body`` is an unread streaming body.
    """
    return s3_client.get_object(Bucket=bucket_name, Key=object_key)
