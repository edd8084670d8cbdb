"""S3-compatible object store client.

``ObjectStore`` wraps a single boto3 S3 client that is built once at startup
and shared by every request. Path-style addressing is used so MinIO and
other self-hosted endpoints work without DNS bucket names.

Missing objects or buckets are reported as ``NotFound``; anything else the
store rejects is reported as ``ObjectStoreFailure``.

Copyright (c) Bryn Gwalad 2025
"""

import logging
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from api.errors import NotFound, ObjectStoreFailure
from utils.settings import Settings

logger = logging.getLogger(__name__)

_MISSING_CODES = {"NoSuchKey", "NoSuchBucket", "404", "NotFound"}
_BUCKET_EXISTS_CODES = {"BucketAlreadyOwnedByYou", "BucketAlreadyExists"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class ObjectStore:
    """Blob storage grouped in buckets."""

    def __init__(self, client, region: Optional[str] = None):
        self._client = client
        self._region = region

    @classmethod
    def from_settings(cls, settings: Settings) -> "ObjectStore":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url,
            region_name=settings.s3_region,
            aws_access_key_id=settings.s3_access_key,
            aws_secret_access_key=settings.s3_secret_key,
            config=Config(s3={"addressing_style": "path"}),
        )
        logger.info(
            "Object store client ready; endpoint=%s region=%s",
            settings.s3_endpoint_url or "aws",
            settings.s3_region,
        )
        return cls(client, region=settings.s3_region)

    def ensure_bucket(self, bucket: str) -> None:
        """Create ``bucket`` unless it already exists.

        Another request may create the same bucket between the existence
        check and the create call; that is not an error.
        """
        try:
            self._client.head_bucket(Bucket=bucket)
            return
        except ClientError as exc:
            if _error_code(exc) not in _MISSING_CODES:
                raise ObjectStoreFailure(f"checking bucket {bucket}: {exc}") from exc
        except BotoCoreError as exc:
            raise ObjectStoreFailure(f"checking bucket {bucket}: {exc}") from exc

        kwargs = {"Bucket": bucket}
        if self._region and self._region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self._region}
        try:
            self._client.create_bucket(**kwargs)
            logger.info("Created bucket %s", bucket)
        except ClientError as exc:
            if _error_code(exc) in _BUCKET_EXISTS_CODES:
                logger.debug("Bucket %s created concurrently", bucket)
                return
            raise ObjectStoreFailure(f"creating bucket {bucket}: {exc}") from exc
        except BotoCoreError as exc:
            raise ObjectStoreFailure(f"creating bucket {bucket}: {exc}") from exc

    def put(self, bucket: str, key: str, data: bytes) -> None:
        self.ensure_bucket(bucket)
        try:
            self._client.put_object(Bucket=bucket, Key=key, Body=data)
        except (ClientError, BotoCoreError) as exc:
            raise ObjectStoreFailure(f"writing {bucket}/{key}: {exc}") from exc

    def get(self, bucket: str, key: str) -> bytes:
        try:
            response = self._client.get_object(Bucket=bucket, Key=key)
            return response["Body"].read()
        except ClientError as exc:
            if _error_code(exc) in _MISSING_CODES:
                raise NotFound(f"object {bucket}/{key} not found") from exc
            raise ObjectStoreFailure(f"reading {bucket}/{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise ObjectStoreFailure(f"reading {bucket}/{key}: {exc}") from exc

    def delete(self, bucket: str, key: str) -> None:
        try:
            self._client.delete_object(Bucket=bucket, Key=key)
        except ClientError as exc:
            if _error_code(exc) == "NoSuchBucket":
                return
            raise ObjectStoreFailure(f"deleting {bucket}/{key}: {exc}") from exc
        except BotoCoreError as exc:
            raise ObjectStoreFailure(f"deleting {bucket}/{key}: {exc}") from exc
