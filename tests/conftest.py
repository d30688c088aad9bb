"""
Pytest configuration and shared fixtures for testing.
"""

import os
from typing import Any, Dict, List, Optional

import boto3
import pytest
from moto import mock_aws

from bucket_purge.core.aws_client import AWSClient


class FakeS3Client:
    """
    Stand-in for a boto3 S3 client's ``delete_objects``.

    ``outcomes`` is consumed one entry per call: an exception is raised, a
    list is returned as the response ``Errors``. Calls past the end succeed.
    """

    def __init__(self, outcomes: Optional[List[Any]] = None) -> None:
        self.outcomes = list(outcomes or [])
        self.calls: List[Dict[str, Any]] = []

    def delete_objects(self, **kwargs: Any) -> Dict[str, Any]:
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0) if self.outcomes else []
        if isinstance(outcome, Exception):
            raise outcome
        return {"Errors": outcome} if outcome else {}

    @property
    def batch_sizes(self) -> List[int]:
        return [len(call["Delete"]["Objects"]) for call in self.calls]

    @property
    def buckets(self) -> List[str]:
        return [call["Bucket"] for call in self.calls]


@pytest.fixture
def fake_s3():
    """A fake S3 client whose calls all succeed."""
    return FakeS3Client()


@pytest.fixture
def aws_credentials():
    """Mock AWS credentials for moto."""
    os.environ["AWS_ACCESS_KEY_ID"] = "testing"
    os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
    os.environ["AWS_SECURITY_TOKEN"] = "testing"
    os.environ["AWS_SESSION_TOKEN"] = "testing"
    os.environ["AWS_DEFAULT_REGION"] = "us-east-1"


@pytest.fixture
def mock_aws_environment(aws_credentials):
    """Create a mocked AWS environment."""
    with mock_aws():
        yield


@pytest.fixture
def aws_client(mock_aws_environment):
    """Create an AWSClient instance for testing."""
    return AWSClient(region="us-east-1")


@pytest.fixture
def s3_client(mock_aws_environment):
    """Create a boto3 S3 client for setting up test resources."""
    return boto3.client("s3", region_name="us-east-1")


@pytest.fixture
def bucket(s3_client):
    """Create an unversioned bucket holding 25 objects."""
    name = "test-bucket"
    s3_client.create_bucket(Bucket=name)
    for i in range(25):
        s3_client.put_object(Bucket=name, Key=f"data/file-{i:03d}.txt", Body=b"x")
    return name


@pytest.fixture
def versioned_bucket(s3_client):
    """Create a versioned bucket with two versions and a delete marker."""
    name = "versioned-bucket"
    s3_client.create_bucket(Bucket=name)
    s3_client.put_bucket_versioning(
        Bucket=name, VersioningConfiguration={"Status": "Enabled"}
    )
    s3_client.put_object(Bucket=name, Key="a.txt", Body=b"v1")
    s3_client.put_object(Bucket=name, Key="a.txt", Body=b"v2")
    s3_client.put_object(Bucket=name, Key="b.txt", Body=b"v1")
    s3_client.delete_object(Bucket=name, Key="b.txt")
    return name


def count_keys(s3_client, bucket: str) -> int:
    return s3_client.list_objects_v2(Bucket=bucket).get("KeyCount", 0)


def count_versions(s3_client, bucket: str) -> int:
    response = s3_client.list_object_versions(Bucket=bucket)
    return len(response.get("Versions", [])) + len(response.get("DeleteMarkers", []))
