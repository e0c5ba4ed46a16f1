"""S3 object storage access for interview artifacts."""
import json
import logging
from typing import Any, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings, settings as default_settings
from app.core.exceptions import ConfigurationError, StorageError
from app.core.logger import log_execution_time

logger = logging.getLogger(__name__)


class ObjectStorage:
    """
    Thin wrapper around a boto3 S3 client bound to one bucket.

    Calls are blocking; async callers run them through ``asyncio.to_thread``.
    """

    def __init__(self, client: Any, bucket: str):
        if not bucket:
            raise ConfigurationError("S3_BUCKET is not configured")
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ObjectStorage":
        settings = settings or default_settings
        client = boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        )
        return cls(client, settings.S3_BUCKET)

    @log_execution_time
    def put_object(self, key: str, body: bytes, content_type: str) -> str:
        """Store ``body`` under ``key`` and return the s3:// URI."""
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"S3 upload failed for {key}: {e}")
            raise StorageError(f"S3 upload failed for {key}", {"key": key, "reason": str(e)}) from e

        logger.info(f"Uploaded to S3: s3://{self.bucket}/{key}")
        return f"s3://{self.bucket}/{key}"

    def put_json(self, key: str, data: Any) -> str:
        body = json.dumps(data, indent=2).encode("utf-8")
        return self.put_object(key, body, "application/json")
