"""S3 object storage backend."""

import logging
import tempfile
from contextlib import contextmanager
from typing import Any, BinaryIO, Iterator

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..exceptions import StorageOperationError
from ..models import FileEntry
from ..utils import join_key, normalize_path, strip_prefix, to_timestamp

logger = logging.getLogger(__name__)

_NOT_FOUND_CODES = {"404", "NoSuchKey", "NotFound"}


def create_s3_client(settings: Any) -> Any:
    """Create a boto3 S3 client from remote settings.

    Args:
        settings: Object with ``key``, ``secret``, ``region`` and
            ``endpoint`` attributes (see ``S3Settings``)

    Returns:
        boto3 S3 client
    """
    return boto3.client(
        "s3",
        aws_access_key_id=settings.key,
        aws_secret_access_key=settings.secret,
        region_name=settings.region,
        endpoint_url=settings.endpoint,
    )


class S3Storage:
    """Storage adapter for a key prefix inside an S3 bucket."""

    def __init__(self, client: Any, bucket: str, prefix: str = ""):
        """Initialize S3 storage.

        Args:
            client: boto3 S3 client
            bucket: Bucket name
            prefix: Key prefix that acts as the storage root
        """
        self.s3 = client
        self.bucket = bucket
        self.prefix = normalize_path(prefix)

    def __repr__(self) -> str:
        return f"S3Storage(s3://{self.bucket}/{self.prefix})"

    def _make_key(self, path: str) -> str:
        """Convert a relative path to an S3 key with prefix.

        The path is used verbatim so that keys returned by ``list_contents``
        address the same object, even when they are not in normalized form.
        """
        if not self.prefix:
            return path
        return f"{self.prefix}/{path}"

    def _relative_key(self, key: str) -> str:
        """Strip the storage prefix from a raw object key."""
        if not self.prefix:
            return key
        return key[len(self.prefix) + 1 :]

    def _fail(self, action: str, path: str, error: Exception) -> StorageOperationError:
        logger.error("S3 %s failed for %s: %s", action, path, error)
        return StorageOperationError(f"Failed to {action} {path}: {error}", path)

    def list_contents(self, prefix: str = "", recursive: bool = True) -> list[FileEntry]:
        """List objects below ``prefix``.

        S3 has no real directories: folder marker keys (ending in ``/``) are
        skipped, and in non-recursive mode common prefixes are reported as
        directory entries.

        Args:
            prefix: Relative path prefix to list
            recursive: Whether to include keys below nested prefixes

        Returns:
            List of FileEntry objects with paths relative to the storage prefix
        """
        key_prefix = join_key(self.prefix, prefix)
        if key_prefix:
            key_prefix += "/"

        params: dict[str, Any] = {"Bucket": self.bucket, "Prefix": key_prefix}
        if not recursive:
            params["Delimiter"] = "/"

        entries: list[FileEntry] = []
        try:
            paginator = self.s3.get_paginator("list_objects_v2")
            for page in paginator.paginate(**params):
                for common in page.get("CommonPrefixes", []):
                    relative = strip_prefix(self.prefix, common["Prefix"])
                    if relative:
                        entries.append(FileEntry(path=relative, is_directory=True))

                for obj in page.get("Contents", []):
                    key = obj["Key"]
                    if key.endswith("/"):
                        continue
                    relative = self._relative_key(key)
                    if not relative:
                        continue
                    entries.append(
                        FileEntry(
                            path=relative,
                            modified_time=to_timestamp(obj.get("LastModified")),
                            size=obj.get("Size", 0),
                        )
                    )
        except (ClientError, BotoCoreError) as e:
            raise self._fail("list", prefix or "/", e) from e

        logger.debug("Listed %d object(s) in %r", len(entries), self)
        return entries

    def _head(self, path: str) -> dict:
        return self.s3.head_object(Bucket=self.bucket, Key=self._make_key(path))

    def exists(self, path: str) -> bool:
        try:
            self._head(path)
            return True
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in _NOT_FOUND_CODES:
                return False
            raise self._fail("check", path, e) from e
        except BotoCoreError as e:
            raise self._fail("check", path, e) from e

    def get_modified_time(self, path: str) -> float:
        try:
            return to_timestamp(self._head(path).get("LastModified"))
        except (ClientError, BotoCoreError) as e:
            raise self._fail("stat", path, e) from e

    def copy(self, src: str, dst: str) -> None:
        try:
            self.s3.copy_object(
                Bucket=self.bucket,
                Key=self._make_key(dst),
                CopySource={"Bucket": self.bucket, "Key": self._make_key(src)},
            )
        except (ClientError, BotoCoreError) as e:
            raise self._fail("copy", src, e) from e

    def delete(self, path: str) -> None:
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=self._make_key(path))
        except (ClientError, BotoCoreError) as e:
            raise self._fail("delete", path, e) from e

    def write_stream(self, path: str, stream: BinaryIO) -> None:
        try:
            self.s3.upload_fileobj(stream, self.bucket, self._make_key(path))
        except (ClientError, BotoCoreError) as e:
            raise self._fail("upload", path, e) from e

    @contextmanager
    def read_stream(self, path: str) -> Iterator[BinaryIO]:
        with tempfile.TemporaryFile() as buffer:
            try:
                self.s3.download_fileobj(self.bucket, self._make_key(path), buffer)
            except (ClientError, BotoCoreError) as e:
                raise self._fail("download", path, e) from e
            buffer.seek(0)
            yield buffer
