from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from intake.storage.base import BaseObjectStore
from intake.storage.exceptions import StorageError, StorageSizeLimitError

_SIZE_LIMIT_CODES = frozenset({"EntityTooLarge", "RequestEntityTooLarge", "413"})


def s3_key_join(*parts: str) -> str:
    """Join path parts into an S3 key without empty or traversal segments."""
    segments = (segment.replace("..", "") for part in parts for segment in part.split("/"))
    return "/".join(segment for segment in segments if segment)


class S3ObjectStore(BaseObjectStore):
    """Stores documents in an S3-compatible bucket through boto3."""

    def __init__(
        self,
        client: Any,
        bucket: str,
        region: str,
        public_base_url: str = "",
        cache_control: str = "max-age=3600",
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._region = region
        self._public_base_url = public_base_url.rstrip("/")
        self._cache_control = cache_control

    def write(self, locator: str, data: bytes, content_type: str) -> str:
        key = s3_key_join(locator)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                CacheControl=self._cache_control,
                IfNoneMatch="*",
            )
        except ClientError as exc:
            if _is_size_limit_error(exc):
                raise StorageSizeLimitError(
                    f"Object {key} exceeded the maximum allowed size"
                ) from exc
            raise StorageError(f"S3 upload failed: {_client_error_message(exc)}") from exc
        except BotoCoreError as exc:
            raise StorageError(f"S3 upload failed: {exc}") from exc
        return key

    def public_url(self, locator: str) -> str:
        key = s3_key_join(locator)
        if self._public_base_url:
            if self._public_base_url.startswith(("http://", "https://")):
                return f"{self._public_base_url}/{key}"
            return f"https://{self._public_base_url}/{key}"
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{key}"

    def delete(self, locator: str) -> None:
        key = s3_key_join(locator)
        try:
            self._client.delete_object(Bucket=self._bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise StorageError(f"S3 delete failed: {exc}") from exc


def _is_size_limit_error(exc: ClientError) -> bool:
    error = exc.response.get("Error", {}) or {}
    meta = exc.response.get("ResponseMetadata", {}) or {}
    return (
        str(error.get("Code", "")) in _SIZE_LIMIT_CODES
        or meta.get("HTTPStatusCode") == 413
    )


def _client_error_message(exc: ClientError) -> str:
    error = exc.response.get("Error", {}) or {}
    return str(error.get("Message") or error.get("Code") or exc)
