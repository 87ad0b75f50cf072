import os
import pytest
from moto import mock_aws
from fastapi.testclient import TestClient
import boto3

# Dummy AWS credentials for moto, set BEFORE importing app modules
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_SECURITY_TOKEN"] = "testing"
os.environ["AWS_SESSION_TOKEN"] = "testing"
os.environ["AWS_REGION"] = "us-east-1"
os.environ["S3_BUCKET"] = "photo-album-test"
# Clear the endpoint so moto mocks are used instead of a local S3
os.environ.pop("AWS_ENDPOINT_URL", None)
os.environ.pop("BLOB_PUBLIC_BASE_URL", None)

from photo_album.main import app
from photo_album.dependencies import get_blob_store
from photo_album.storage.s3 import S3BlobStore

BUCKET = "photo-album-test"


@pytest.fixture(scope="function")
def store():
    """A blob store over a moto-backed bucket."""
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=BUCKET)
        yield S3BlobStore()


@pytest.fixture(scope="function")
def s3_client(store):
    return store.client


@pytest.fixture(scope="function")
def test_client(store):
    app.dependency_overrides[get_blob_store] = lambda: store
    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
