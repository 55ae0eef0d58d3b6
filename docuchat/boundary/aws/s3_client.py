"""
S3 client for document bucket operations.

Writes uploaded documents under session-scoped keys together with the
Knowledge Base metadata sidecar used for session filtering, and exposes
the listing and maintenance calls around them.

Dependencies: boto3
System role: Blob storage for uploaded documents
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Any, Callable
from urllib.parse import quote, unquote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from docuchat.core.exceptions import UploadError
from docuchat.models.document import DocumentUpload, UploadResult

logger = logging.getLogger(__name__)

METADATA_SUFFIX = ".metadata.json"


def build_object_key(session_id: str, file_name: str, upload_time: datetime) -> str:
    """
    Build the session-scoped object key for an upload.

    The epoch-millisecond stamp sits before the extension so repeated
    uploads of one file name never collide and the indexer still sees the
    file type.

    Args:
        session_id: Owning session
        file_name: Original file name (any directory part is dropped)
        upload_time: Upload timestamp

    Returns:
        str: `<session_id>/<stem>_<epochMillis><suffix>`
    """
    path = PurePosixPath(file_name.replace("\\", "/").split("/")[-1])
    millis = int(upload_time.timestamp() * 1000)
    return f"{session_id}/{path.stem}_{millis}{path.suffix}"


class S3DocumentClient:
    """S3 client for the document bucket."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        create_bucket_if_missing: bool = True,
        client: Any | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize S3 client for document bucket.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            create_bucket_if_missing: Create the bucket on first upload when absent
            client: Pre-built boto3 S3 client (tests pass a stubbed one)
            clock: Time source for object keys
        """
        self._bucket = bucket
        self._region = region
        self._create_bucket_if_missing = create_bucket_if_missing
        self._s3_client = client or boto3.client("s3", region_name=region)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._bucket_ready = False

    @property
    def bucket(self) -> str:
        return self._bucket

    def object_url(self, key: str) -> str:
        """Return the virtual-hosted URL of an object."""
        return f"https://{self._bucket}.s3.{self._region}.amazonaws.com/{quote(key)}"

    def ensure_bucket(self) -> None:
        """
        Make sure the document bucket exists, creating it when allowed.

        Idempotent; the positive result is remembered for the client's lifetime.

        Raises:
            UploadError: If the bucket is missing and cannot be created
        """
        if self._bucket_ready:
            return
        try:
            self._s3_client.head_bucket(Bucket=self._bucket)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code not in ("404", "NoSuchBucket") or not self._create_bucket_if_missing:
                raise UploadError(f"Document bucket unavailable: {e}", details={"bucket": self._bucket}) from e
            self._create_bucket()
        except BotoCoreError as e:
            raise UploadError(f"Document bucket unavailable: {e}", details={"bucket": self._bucket}) from e
        self._bucket_ready = True

    def _create_bucket(self) -> None:
        logger.info(f"{__name__}:ensure_bucket - Creating bucket {self._bucket}")
        kwargs: dict[str, Any] = {"Bucket": self._bucket}
        if self._region != "us-east-1":
            kwargs["CreateBucketConfiguration"] = {"LocationConstraint": self._region}
        try:
            self._s3_client.create_bucket(**kwargs)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "BucketAlreadyOwnedByYou":
                return
            raise UploadError(f"Failed to create bucket: {e}", details={"bucket": self._bucket}) from e
        except BotoCoreError as e:
            raise UploadError(f"Failed to create bucket: {e}", details={"bucket": self._bucket}) from e

    def upload(self, document: DocumentUpload, session_id: str) -> UploadResult:
        """
        Upload a document under a session-scoped key.

        Writes the object with sessionId/originalName/uploadTime/fileSize
        metadata, then the `<key>.metadata.json` sidecar the Knowledge Base
        reads for filterable attributes.

        Args:
            document: Buffered upload
            session_id: Owning session

        Returns:
            UploadResult: Object key and URL

        Raises:
            UploadError: If the bucket or either object cannot be written
        """
        self.ensure_bucket()

        upload_time = self._clock()
        key = build_object_key(session_id, document.file_name, upload_time)
        sidecar = {
            "metadataAttributes": {
                "sessionId": session_id,
                "originalName": document.file_name,
            }
        }

        try:
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=document.content,
                ContentType=document.content_type or "application/octet-stream",
                Metadata={
                    "sessionId": session_id,
                    "originalName": quote(document.file_name),
                    "uploadTime": upload_time.isoformat(),
                    "fileSize": str(document.size),
                },
            )
            self._s3_client.put_object(
                Bucket=self._bucket,
                Key=f"{key}{METADATA_SUFFIX}",
                Body=json.dumps(sidecar).encode("utf-8"),
                ContentType="application/json",
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(
                f"{__name__}:upload - Upload failed",
                extra={"session_id": session_id, "key": key, "error": str(e)},
            )
            raise UploadError(f"Failed to upload document: {e}", file_name=document.file_name) from e

        logger.info(
            f"{__name__}:upload - Uploaded {key}",
            extra={"session_id": session_id, "size": document.size},
        )
        return UploadResult(blob_name=key, url=self.object_url(key))

    def list_session_blobs(self, session_id: str) -> list[dict]:
        """
        List uploaded documents of a session (sidecars excluded).

        Args:
            session_id: Owning session

        Returns:
            list[dict]: Entries with key, size and last_modified

        Raises:
            ClientError: If listing fails
        """
        blobs = []
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket, Prefix=f"{session_id}/"):
            for obj in page.get("Contents", []):
                if obj["Key"].endswith(METADATA_SUFFIX):
                    continue
                blobs.append(
                    {
                        "key": obj["Key"],
                        "size": obj.get("Size", 0),
                        "last_modified": obj.get("LastModified"),
                    }
                )
        return blobs

    def get_blob_metadata(self, blob_name: str) -> dict[str, str] | None:
        """
        Return the user metadata of an object.

        originalName is URL-decoded back to the uploaded file name.

        Returns:
            dict | None: Metadata, None when the object does not exist

        Raises:
            ClientError: If the object cannot be read for another reason
        """
        try:
            response = self._s3_client.head_object(Bucket=self._bucket, Key=blob_name)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in ("404", "NoSuchKey"):
                return None
            raise

        # S3 returns user metadata keys lowercased
        metadata = dict(response.get("Metadata", {}))
        for key, value in metadata.items():
            if key.lower() == "originalname":
                metadata[key] = unquote(value)
        return metadata

    def delete_blob(self, blob_name: str) -> bool:
        """
        Delete an object and its metadata sidecar.

        Args:
            blob_name: Object key

        Returns:
            bool: True if the delete calls succeeded
        """
        try:
            self._s3_client.delete_objects(
                Bucket=self._bucket,
                Delete={
                    "Objects": [{"Key": blob_name}, {"Key": f"{blob_name}{METADATA_SUFFIX}"}],
                    "Quiet": True,
                },
            )
            return True
        except ClientError as e:
            logger.error(f"{__name__}:delete_blob - Delete failed for {blob_name}: {e}")
            return False

    def get_bucket_stats(self) -> dict[str, int]:
        """
        Count documents and their total size across the bucket.

        Raises:
            ClientError: If listing fails
        """
        blob_count = 0
        total_size = 0
        paginator = self._s3_client.get_paginator("list_objects_v2")
        for page in paginator.paginate(Bucket=self._bucket):
            for obj in page.get("Contents", []):
                if obj["Key"].endswith(METADATA_SUFFIX):
                    continue
                blob_count += 1
                total_size += obj.get("Size", 0)
        return {"blob_count": blob_count, "total_size": total_size}

    def test_connection(self) -> dict[str, Any]:
        """Check bucket reachability; returns {success, error?}."""
        try:
            self._s3_client.head_bucket(Bucket=self._bucket)
            return {"success": True}
        except (ClientError, BotoCoreError) as e:
            logger.warning(f"{__name__}:test_connection - S3 unreachable: {e}")
            return {"success": False, "error": str(e)}
