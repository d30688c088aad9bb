"""
Core Infrastructure Components
==============================

- :class:`AWSClient` - Manages AWS connections and client creation
- Exception hierarchy for error handling
- Logging setup

Example
-------
>>> from bucket_purge.core import AWSClient
>>>
>>> client = AWSClient(region="us-east-1", profile="production")
>>> s3 = client.get_s3_client()
"""

from bucket_purge.core.aws_client import AWSClient
from bucket_purge.core.exceptions import (
    AWSClientError,
    BatchDeleteError,
    BatchError,
    BatchObjectError,
    BucketPurgeError,
    CleanerError,
    CredentialsError,
    FailureKind,
    OperationCancelledError,
    RegionError,
    ServiceError,
)

__all__ = [
    # Client
    "AWSClient",
    # Exceptions - Base
    "BucketPurgeError",
    # Exceptions - AWS Client
    "AWSClientError",
    "CredentialsError",
    "RegionError",
    "ServiceError",
    # Exceptions - Batch
    "BatchError",
    "BatchObjectError",
    "BatchDeleteError",
    "FailureKind",
    "OperationCancelledError",
    # Exceptions - Cleaner
    "CleanerError",
]
