"""
Bucket-Purge: S3 Bucket Emptying & Removal
==========================================

Empties S3 buckets through batched ``DeleteObjects`` calls and removes
them once empty.

Modules
-------
core
    AWS client, exception hierarchy, logging setup
batch
    Object iterators, batch assembly and the batch delete engine
cleaners
    Bucket purge and removal with dry-run support
reporters
    Terminal output

Example
-------
>>> from bucket_purge import AWSClient, BucketCleaner
>>>
>>> cleaner = BucketCleaner(AWSClient(region="us-east-1"))
>>> result = cleaner.purge_bucket("my-bucket", dry_run=False)
>>> print(f"Deleted {result.deleted} objects")

Notes
-----
Requires AWS credentials configured via:
- Environment variables (AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY)
- AWS credentials file (~/.aws/credentials)
- IAM role (when running on AWS infrastructure)
"""

__version__ = "0.1.0"
__license__ = "MIT"

# Public API
from bucket_purge.batch import (
    BatchDelete,
    DeleteObject,
    DeleteObjectsIterator,
    new_delete_list_iterator,
    new_delete_version_iterator,
)
from bucket_purge.cleaners import BucketCleaner, PurgeResult
from bucket_purge.core.aws_client import AWSClient
from bucket_purge.core.exceptions import BatchDeleteError, BucketPurgeError

__all__ = [
    "__version__",
    "__license__",
    "AWSClient",
    "BatchDelete",
    "BatchDeleteError",
    "BucketCleaner",
    "BucketPurgeError",
    "DeleteObject",
    "DeleteObjectsIterator",
    "PurgeResult",
    "new_delete_list_iterator",
    "new_delete_version_iterator",
]
