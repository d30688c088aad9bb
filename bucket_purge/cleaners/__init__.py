"""
Bucket Cleaners
===============

Safe removal of S3 bucket contents and of the buckets themselves.

Safety Features
---------------
1. **Dry-run mode**: List what would be deleted without making changes
2. **Refusal on partial purge**: A bucket is never deleted while objects remain
3. **Error handling**: Every per-object failure is kept in the result
4. **Progress tracking**: Callbacks with each object's final result

Example
-------
>>> from bucket_purge.cleaners import BucketCleaner, DeleteStatus
>>> from bucket_purge.core import AWSClient
>>>
>>> cleaner = BucketCleaner(AWSClient(region="us-east-1"))
>>> result = cleaner.purge_bucket("my-bucket", versions=True, dry_run=False)
>>> print(f"Deleted {result.deleted}, failed {result.failed}")
"""

from bucket_purge.cleaners.bucket_cleaner import (
    BucketCleaner,
    DeleteResult,
    DeleteStatus,
    PurgeResult,
)

__all__ = [
    "BucketCleaner",
    "DeleteResult",
    "DeleteStatus",
    "PurgeResult",
]
