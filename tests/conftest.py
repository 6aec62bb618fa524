"""Pytest fixtures for storage adapter tests (moto-backed S3, in-memory backend)."""

import os

import pytest
from moto import mock_aws

from s3_asset_storage.memory_backend import MemoryObjectBackend
from s3_asset_storage.models import ClientConfig, Credentials

TEST_BUCKET = "test-assets"
MOTO_ENDPOINT = "https://s3.us-east-1.amazonaws.com"


@pytest.fixture(scope="function")
def aws_credentials():
    """Set fake AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def moto_aws(aws_credentials):
    """Enable moto mock for S3."""
    with mock_aws():
        yield


@pytest.fixture
def s3_bucket(moto_aws):
    """Create the test bucket and return its name."""
    import boto3

    client = boto3.client("s3", region_name="us-east-1")
    client.create_bucket(Bucket=TEST_BUCKET)
    return TEST_BUCKET


@pytest.fixture
def moto_config() -> ClientConfig:
    """ClientConfig pointing at the AWS regional endpoint moto intercepts."""
    return ClientConfig(
        bucket=TEST_BUCKET,
        region="us-east-1",
        endpoint=MOTO_ENDPOINT,
        public_url="https://cdn.example.com",
        credentials=Credentials(access_key_id="testing", secret_access_key="testing"),
    )


@pytest.fixture
def minio_config() -> ClientConfig:
    """ClientConfig for a MinIO-style deployment (public URL includes the bucket path)."""
    return ClientConfig(
        bucket=TEST_BUCKET,
        region="us-east-1",
        endpoint="http://localhost:9000",
        public_url="http://localhost:9000/test-assets",
        credentials=Credentials(access_key_id="minioadmin", secret_access_key="minioadmin"),
    )


@pytest.fixture
def memory_backend() -> MemoryObjectBackend:
    return MemoryObjectBackend(buckets={TEST_BUCKET})
