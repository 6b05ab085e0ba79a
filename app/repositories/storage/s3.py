"""S3 object store - JSON blobs under `charts/`, `tables/`, `blog-articles/`, `config/`, ..."""

import json
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from app.errors import PreconditionFailedError, StorageError
from settings import AWS_REGION, S3_BUCKET_NAME

MISSING_CODES = {"NoSuchKey", "404", "NotFound"}
PRECONDITION_CODES = {"PreconditionFailed", "ConditionalRequestConflict", "412", "409"}


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class ObjectStore:
    """Thin JSON wrapper over an S3 bucket."""

    def __init__(self, bucket: str = S3_BUCKET_NAME, client=None, region: str = AWS_REGION):
        self._bucket = bucket
        self._region = region
        self._client = client

    @property
    def bucket(self) -> str:
        return self._bucket

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("s3", region_name=self._region)
            logger.debug("S3 client created for bucket {}", self._bucket)
        return self._client

    def get_versioned(self, key: str) -> tuple[Any | None, str | None]:
        """(parsed JSON, ETag) or (None, None) when the key does not exist."""
        try:
            resp = self.client.get_object(Bucket=self._bucket, Key=key)
        except ClientError as e:
            if _error_code(e) in MISSING_CODES:
                return None, None
            raise StorageError(f"Error getting {key} from S3: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Error getting {key} from S3: {e}") from e

        body = resp["Body"].read()
        if not body:
            return None, resp.get("ETag")
        try:
            return json.loads(body.decode("utf-8")), resp.get("ETag")
        except ValueError as e:
            raise StorageError(f"Invalid JSON in {key}: {e}") from e

    def get(self, key: str) -> Any | None:
        """Parsed JSON or None when the key does not exist."""
        data, _ = self.get_versioned(key)
        return data

    def save(self, key: str, data: Any, metadata: dict[str, str] | None = None) -> None:
        """Unconditional put."""
        self._put(key, data, metadata=metadata)
        logger.info("Saved s3://{}/{}", self._bucket, key)

    def save_if(self, key: str, data: Any, etag: str | None) -> None:
        """Put only if the object still has `etag` (or still does not exist when etag is None)."""
        self._put(key, data, etag=etag, conditional=True)
        logger.debug("Conditionally saved s3://{}/{}", self._bucket, key)

    def _put(
        self,
        key: str,
        data: Any,
        metadata: dict[str, str] | None = None,
        etag: str | None = None,
        conditional: bool = False,
    ) -> None:
        params = {
            "Bucket": self._bucket,
            "Key": key,
            "Body": json.dumps(data, indent=2, default=str).encode("utf-8"),
            "ContentType": "application/json",
        }
        if metadata:
            params["Metadata"] = metadata
        if conditional:
            if etag:
                params["IfMatch"] = etag
            else:
                params["IfNoneMatch"] = "*"

        try:
            self.client.put_object(**params)
        except ClientError as e:
            if conditional and _error_code(e) in PRECONDITION_CODES:
                raise PreconditionFailedError(f"Concurrent write on {key}") from e
            raise StorageError(f"Error uploading {key} to S3: {e}") from e
        except BotoCoreError as e:
            raise StorageError(f"Error uploading {key} to S3: {e}") from e

    def delete(self, key: str) -> None:
        """Delete an object (S3 treats missing keys as success)."""
        try:
            self.client.delete_object(Bucket=self._bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Error deleting {key} from S3: {e}") from e
        logger.info("Deleted s3://{}/{}", self._bucket, key)

    def exists(self, key: str) -> bool:
        return self.get(key) is not None

    def list(self, prefix: str) -> list[str]:
        """All keys under a prefix."""
        keys: list[str] = []
        params = {"Bucket": self._bucket, "Prefix": prefix}
        try:
            while True:
                resp = self.client.list_objects_v2(**params)
                keys.extend(item["Key"] for item in resp.get("Contents", []) if item.get("Key"))
                if not resp.get("IsTruncated"):
                    break
                params["ContinuationToken"] = resp["NextContinuationToken"]
        except (ClientError, BotoCoreError) as e:
            raise StorageError(f"Error listing {prefix} from S3: {e}") from e
        return keys
