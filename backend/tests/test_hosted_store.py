"""
Tests for the hosted S3-compatible store.
"""
import re
from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from docstore.storage.base import StorageBackend, BytesContent
from docstore.storage.errors import NotFoundError, AlreadyExistsError, ProviderError
from docstore.storage.hosted import HostedStore


def _client_error(code: str, message: str, operation: str) -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


class TestHostedUpload:
    """Tests for HostedStore.upload_file."""

    def test_upload_uses_timestamped_key(self, hosted_store: HostedStore):
        result = hosted_store.upload_file(b"hello", "a.txt", "text/plain")

        assert re.fullmatch(r"uploads/\d+-a\.txt", result.path)
        assert result.backend == StorageBackend.HOSTED
        assert result.url is None

    def test_upload_is_a_conditional_create(self, hosted_store: HostedStore, s3_client):
        hosted_store.upload_file(b"hello", "a.txt", "text/plain")

        call = s3_client.put_calls[0]
        assert call["Bucket"] == "documents"
        assert call["ContentType"] == "text/plain"
        assert call["IfNoneMatch"] == "*"

    def test_same_name_different_tick_gets_distinct_paths(self, hosted_store: HostedStore, s3_client):
        with patch("docstore.storage.hosted._now_ms", side_effect=[1000, 1001]):
            first = hosted_store.upload_file(b"one", "a.txt", "text/plain")
            second = hosted_store.upload_file(b"two", "a.txt", "text/plain")

        assert first.path == "uploads/1000-a.txt"
        assert second.path == "uploads/1001-a.txt"
        assert s3_client.objects[("documents", first.path)] == b"one"
        assert s3_client.objects[("documents", second.path)] == b"two"

    def test_same_tick_collision_raises_already_exists(self, hosted_store: HostedStore, s3_client):
        with patch("docstore.storage.hosted._now_ms", return_value=1000):
            first = hosted_store.upload_file(b"one", "a.txt", "text/plain")
            with pytest.raises(AlreadyExistsError):
                hosted_store.upload_file(b"two", "a.txt", "text/plain")

        assert s3_client.objects[("documents", first.path)] == b"one"

    def test_upload_from_path_reads_file(self, hosted_store: HostedStore, s3_client, tmp_path):
        source = tmp_path / "report.pdf"
        source.write_bytes(b"%PDF-1.4 body")

        result = hosted_store.upload_file(source, "report.pdf", "application/pdf")

        assert s3_client.objects[("documents", result.path)] == b"%PDF-1.4 body"

    def test_public_url_when_configured(self, s3_client):
        store = HostedStore(
            client=s3_client,
            bucket="documents",
            public_url="https://cdn.example.com/object/public/documents/"
        )

        result = store.upload_file(b"hello", "a.txt", "text/plain")

        assert result.url == f"https://cdn.example.com/object/public/documents/{result.path}"

    def test_provider_failure_raises_provider_error(self):
        client = MagicMock()
        client.put_object.side_effect = _client_error("AccessDenied", "Access Denied", "PutObject")
        store = HostedStore(client=client, bucket="documents")

        with pytest.raises(ProviderError) as exc_info:
            store.upload_file(b"hello", "a.txt", "text/plain")

        assert "Access Denied" in str(exc_info.value)
        assert exc_info.value.backend == "hosted"

    def test_transport_failure_raises_provider_error(self):
        client = MagicMock()
        client.put_object.side_effect = EndpointConnectionError(endpoint_url="https://storage.example.com")
        store = HostedStore(client=client, bucket="documents")

        with pytest.raises(ProviderError):
            store.upload_file(b"hello", "a.txt", "text/plain")


class TestHostedGetFile:
    """Tests for HostedStore.get_file."""

    def test_round_trip_returns_bytes(self, hosted_store: HostedStore):
        uploaded = hosted_store.upload_file(b"hello", "a.txt", "text/plain")

        content = hosted_store.get_file(uploaded.path)

        assert isinstance(content, BytesContent)
        assert content.kind == "bytes"
        assert content.data == b"hello"
        assert content.backend == StorageBackend.HOSTED

    def test_missing_object_raises_not_found(self, hosted_store: HostedStore):
        with pytest.raises(NotFoundError):
            hosted_store.get_file("uploads/0-missing.txt")

    def test_other_failure_raises_provider_error(self):
        client = MagicMock()
        client.get_object.side_effect = _client_error("InternalError", "We encountered an internal error", "GetObject")
        store = HostedStore(client=client, bucket="documents")

        with pytest.raises(ProviderError):
            store.get_file("uploads/1-a.txt")


class TestHostedDelete:
    """Tests for HostedStore.delete_file."""

    def test_delete_removes_object(self, hosted_store: HostedStore, s3_client):
        uploaded = hosted_store.upload_file(b"hello", "a.txt", "text/plain")

        assert hosted_store.delete_file(uploaded.path) is True
        assert ("documents", uploaded.path) not in s3_client.objects

    def test_delete_missing_object_does_not_raise(self, hosted_store: HostedStore):
        assert hosted_store.delete_file("uploads/0-missing.txt") is True

    def test_delete_failure_is_logged_not_raised(self, caplog):
        client = MagicMock()
        client.delete_object.side_effect = _client_error("AccessDenied", "Access Denied", "DeleteObject")
        store = HostedStore(client=client, bucket="documents")

        with caplog.at_level("ERROR", logger="docstore.storage.hosted"):
            assert store.delete_file("uploads/1-a.txt") is False

        assert "Access Denied" in caplog.text


class TestHostedSignedUrl:
    """Tests for HostedStore.get_signed_url."""

    def test_signed_url_defaults_to_one_hour(self):
        client = MagicMock()
        client.generate_presigned_url.return_value = "https://storage.example.com/signed"
        store = HostedStore(client=client, bucket="documents")

        url = store.get_signed_url("uploads/1-a.txt")

        assert url == "https://storage.example.com/signed"
        client.generate_presigned_url.assert_called_once_with(
            ClientMethod="get_object",
            Params={"Bucket": "documents", "Key": "uploads/1-a.txt"},
            ExpiresIn=3600
        )

    def test_signed_url_custom_expiry(self, hosted_store: HostedStore):
        url = hosted_store.get_signed_url("uploads/1-a.txt", expires_in=60)

        assert "X-Amz-Expires=60" in url

    def test_signed_url_failure_raises_provider_error(self):
        client = MagicMock()
        client.generate_presigned_url.side_effect = _client_error("InvalidRequest", "bad", "GetObject")
        store = HostedStore(client=client, bucket="documents")

        with pytest.raises(ProviderError):
            store.get_signed_url("uploads/1-a.txt")
