"""
Test configuration and fixtures.
Hosted storage is exercised against an in-memory S3-compatible fake; local
storage uses pytest's tmp_path.
"""
import io
import os
import tempfile

# Set test environment before any imports
os.environ["ENVIRONMENT"] = "test"
os.environ["LOCAL_UPLOAD_DIR"] = os.path.join(tempfile.gettempdir(), "docstore-test-uploads")
for _var in ("STORAGE_ENDPOINT", "STORAGE_ACCESS_KEY", "STORAGE_SECRET_KEY", "STORAGE_PUBLIC_URL"):
    os.environ.pop(_var, None)

import pytest
from typing import AsyncGenerator
from unittest.mock import MagicMock
from botocore.exceptions import ClientError
from httpx import AsyncClient, ASGITransport

from docstore.storage.gateway import StorageGateway
from docstore.storage.hosted import HostedStore
from docstore.storage.local import LocalStore


class FakeS3Client:
    """Minimal in-memory stand-in for a boto3 S3 client."""

    def __init__(self):
        self.objects = {}
        self.put_calls = []

    def put_object(self, Bucket, Key, Body, ContentType, IfNoneMatch=None):
        self.put_calls.append({
            "Bucket": Bucket,
            "Key": Key,
            "ContentType": ContentType,
            "IfNoneMatch": IfNoneMatch,
        })
        if IfNoneMatch == "*" and (Bucket, Key) in self.objects:
            raise ClientError(
                {"Error": {"Code": "PreconditionFailed", "Message": "At least one of the pre-conditions you specified did not hold"}},
                "PutObject"
            )
        data = Body if isinstance(Body, bytes) else Body.read()
        self.objects[(Bucket, Key)] = data
        return {"ETag": '"fake"'}

    def get_object(self, Bucket, Key):
        if (Bucket, Key) not in self.objects:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
                "GetObject"
            )
        return {"Body": io.BytesIO(self.objects[(Bucket, Key)])}

    def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)
        return {}

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        return (
            f"https://storage.example.com/{Params['Bucket']}/{Params['Key']}"
            f"?X-Amz-Expires={ExpiresIn}&X-Amz-Signature=fake"
        )


@pytest.fixture
def s3_client() -> FakeS3Client:
    """In-memory S3-compatible client."""
    return FakeS3Client()


@pytest.fixture
def hosted_store(s3_client: FakeS3Client) -> HostedStore:
    """Hosted store backed by the fake client."""
    return HostedStore(client=s3_client, bucket="documents")


@pytest.fixture
def local_store(tmp_path) -> LocalStore:
    """Local store rooted in a temporary directory."""
    return LocalStore(tmp_path / "uploads" / "documents")


@pytest.fixture
def local_gateway(local_store: LocalStore) -> StorageGateway:
    return StorageGateway(local_store)


@pytest.fixture
def hosted_gateway(hosted_store: HostedStore) -> StorageGateway:
    return StorageGateway(hosted_store)


def get_test_app(storage: StorageGateway):
    """Return the FastAPI app with the storage dependency overridden."""
    from docstore.main import app
    from docstore.api.dependencies import get_storage

    app.dependency_overrides[get_storage] = lambda: storage
    return app


@pytest.fixture(scope="function")
async def client(local_gateway: StorageGateway) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against local storage."""
    app = get_test_app(local_gateway)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def hosted_client(hosted_gateway: StorageGateway) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against hosted storage."""
    app = get_test_app(hosted_gateway)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def mock_s3_client() -> MagicMock:
    """Bare boto3 stand-in; tests set side effects per call."""
    return MagicMock()


@pytest.fixture(scope="function")
async def mock_hosted_client(mock_s3_client: MagicMock) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client against hosted storage backed by a MagicMock client."""
    app = get_test_app(StorageGateway(HostedStore(client=mock_s3_client, bucket="documents")))

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
