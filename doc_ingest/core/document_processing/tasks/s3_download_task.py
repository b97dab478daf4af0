"""
S3 document download task.

Fetches the raw bytes of an uploaded document into memory. The whole body is
read before extraction starts.

Dependencies: boto3
System role: Binary object store access for the ingestion pipeline
"""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from doc_ingest.core.exceptions import DocumentNotFoundError, DocumentProcessingError

logger = logging.getLogger(__name__)


class S3DownloadError(DocumentProcessingError):
    """Raised when S3 download fails."""

    def __init__(self, message: str, s3_key: str | None = None) -> None:
        self.s3_key = s3_key
        super().__init__(message, details={"s3_key": s3_key} if s3_key else None)


class S3DownloadTask:
    """Download documents from S3 into memory."""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        endpoint_url: str | None = None,
        s3_client=None,
    ) -> None:
        """
        Initialize S3 download task.

        Args:
            bucket: S3 bucket name for document storage
            region: AWS region for S3 bucket
            endpoint_url: Optional S3-compatible endpoint
            s3_client: Preconfigured boto3 client (tests, custom sessions)
        """
        self._bucket = bucket
        self._s3_client = s3_client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=endpoint_url,
        )

    def download(self, s3_key: str, document_id: str | None = None) -> bytes:
        """
        Download a document body.

        Args:
            s3_key: S3 object key stored on the document record
            document_id: Document id for error context

        Returns:
            bytes: Full object body

        Raises:
            DocumentNotFoundError: When the object does not exist
            S3DownloadError: When download fails for any other reason
        """
        if not s3_key:
            raise S3DownloadError("S3 key is required", s3_key)

        try:
            response = self._s3_client.get_object(Bucket=self._bucket, Key=s3_key)
            body = response["Body"].read()
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            if error_code in ("404", "NoSuchKey"):
                raise DocumentNotFoundError(
                    document_id or s3_key,
                    f"file not found in S3: {s3_key}",
                ) from e
            raise S3DownloadError(f"Failed to download from S3: {e}", s3_key) from e
        except BotoCoreError as e:
            raise S3DownloadError(f"Unexpected error downloading from S3: {e}", s3_key) from e

        logger.info(
            "Downloaded document from S3",
            extra={"s3_key": s3_key, "size_bytes": len(body), "bucket": self._bucket},
        )
        return body
