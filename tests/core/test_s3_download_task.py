"""Tests for S3DownloadTask with a mocked boto3 client."""

import io
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from doc_ingest.core.document_processing.tasks import S3DownloadError, S3DownloadTask
from doc_ingest.core.exceptions import DocumentNotFoundError


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock()


@pytest.fixture
def download_task(s3_client: MagicMock) -> S3DownloadTask:
    return S3DownloadTask(bucket="test-bucket", s3_client=s3_client)


def _client_error(code: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": code}}, "GetObject")


class TestS3Download:
    """Test object download and error mapping."""

    def test_download_should_return_object_body(
        self,
        download_task: S3DownloadTask,
        s3_client: MagicMock,
    ) -> None:
        # Arrange
        s3_client.get_object.return_value = {"Body": io.BytesIO(b"file bytes")}

        # Act
        body = download_task.download("uploads/a.txt")

        # Assert
        assert body == b"file bytes"
        s3_client.get_object.assert_called_once_with(Bucket="test-bucket", Key="uploads/a.txt")

    @pytest.mark.parametrize("code", ["NoSuchKey", "404"])
    def test_download_should_raise_not_found_for_missing_object(
        self,
        download_task: S3DownloadTask,
        s3_client: MagicMock,
        code: str,
    ) -> None:
        s3_client.get_object.side_effect = _client_error(code)

        with pytest.raises(DocumentNotFoundError) as exc_info:
            download_task.download("uploads/a.txt", document_id="doc-1")

        assert exc_info.value.document_id == "doc-1"

    def test_download_should_wrap_other_client_errors(
        self,
        download_task: S3DownloadTask,
        s3_client: MagicMock,
    ) -> None:
        s3_client.get_object.side_effect = _client_error("AccessDenied")

        with pytest.raises(S3DownloadError):
            download_task.download("uploads/a.txt")

    def test_download_should_wrap_connection_errors(
        self,
        download_task: S3DownloadTask,
        s3_client: MagicMock,
    ) -> None:
        s3_client.get_object.side_effect = EndpointConnectionError(endpoint_url="http://s3.test")

        with pytest.raises(S3DownloadError):
            download_task.download("uploads/a.txt")

    def test_download_should_require_key(self, download_task: S3DownloadTask) -> None:
        with pytest.raises(S3DownloadError):
            download_task.download("")
