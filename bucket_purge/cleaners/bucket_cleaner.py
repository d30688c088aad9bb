"""
Cleaner for emptying and removing S3 buckets.

Provides safe deletion with dry-run mode, per-object progress callbacks
and error handling on top of the batch delete engine.
"""

import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from botocore.exceptions import ClientError

from ..batch import (
    BatchDelete,
    DeleteListIterator,
    new_delete_list_iterator,
    new_delete_version_iterator,
)
from ..batch.assembler import DEFAULT_BATCH_SIZE
from ..batch.policy import ErrorPolicy
from ..core.aws_client import AWSClient
from ..core.exceptions import BatchDeleteError, BatchObjectError, CleanerError, FailureKind


class DeleteStatus(Enum):
    """Status of a delete operation."""

    SUCCESS = "success"
    FAILED = "failed"
    SKIPPED = "skipped"
    DRY_RUN = "dry_run"


@dataclass
class DeleteResult:
    """
    Result of deleting a single object or bucket.

    Attributes:
        bucket: Bucket name
        key: Object key, or None for the bucket itself
        version_id: Object version, if any
        status: Result status
        error_message: Error message if failed
        timestamp: When the operation was attempted
    """

    bucket: str
    key: Optional[str]
    status: DeleteStatus
    version_id: Optional[str] = None
    error_message: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bucket": self.bucket,
            "key": self.key,
            "version_id": self.version_id,
            "status": self.status.value,
            "error_message": self.error_message,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class PurgeResult:
    """
    Summary of purging a bucket.

    Attributes:
        bucket: Bucket name
        total: Number of objects processed
        deleted: Number confirmed deleted
        failed: Number that could not be deleted
        dry_run: Number listed in dry-run mode
        errors: Every failure reported by the batch engine
        start_time: When the operation started
        end_time: When the operation completed
    """

    bucket: str
    total: int = 0
    deleted: int = 0
    failed: int = 0
    dry_run: int = 0
    errors: List[BatchObjectError] = field(default_factory=list)
    start_time: datetime = field(default_factory=datetime.utcnow)
    end_time: Optional[datetime] = None

    @property
    def success(self) -> bool:
        return not self.errors

    def add_result(self, result: DeleteResult) -> None:
        """Add a per-object result and update counts."""
        self.total += 1
        if result.status == DeleteStatus.SUCCESS:
            self.deleted += 1
        elif result.status == DeleteStatus.FAILED:
            self.failed += 1
        elif result.status == DeleteStatus.DRY_RUN:
            self.dry_run += 1

    def complete(self) -> None:
        """Mark the operation as complete."""
        self.end_time = datetime.utcnow()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "bucket": self.bucket,
            "total": self.total,
            "deleted": self.deleted,
            "failed": self.failed,
            "dry_run": self.dry_run,
            "errors": [e.to_dict() for e in self.errors],
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }


class BucketCleaner:
    """
    Cleaner for emptying and deleting buckets.

    Provides safe deletion with:
    - Dry-run mode (list without deleting)
    - Versioned bucket support (versions and delete markers)
    - Per-object progress callbacks
    - Detailed error handling
    """

    # Common error codes and user-friendly messages
    ERROR_MESSAGES = {
        "NoSuchBucket": "Bucket no longer exists",
        "BucketNotEmpty": "Bucket still contains objects or versions",
        "AccessDenied": "Insufficient permissions to delete bucket",
        "OperationAborted": "A conflicting operation is in progress on the bucket",
    }

    def __init__(
        self,
        aws_client: AWSClient,
        batch_size: int = DEFAULT_BATCH_SIZE,
        error_policy: Optional[ErrorPolicy] = None,
    ):
        """
        Initialize the cleaner.

        Args:
            aws_client: Instance of AWSClient
            batch_size: Objects per DeleteObjects call
            error_policy: Failure classifier passed to BatchDelete
        """
        self.aws_client = aws_client
        self.region = aws_client.region
        self.batch_size = batch_size
        self.error_policy = error_policy
        self._s3_client = None

    @property
    def s3_client(self):
        """Lazy load S3 client."""
        if self._s3_client is None:
            self._s3_client = self.aws_client.get_s3_client()
        return self._s3_client

    def _iterator(self, bucket: str, prefix: Optional[str], versions: bool, **options) -> DeleteListIterator:
        factory = new_delete_version_iterator if versions else new_delete_list_iterator
        return factory(self.s3_client, bucket, prefix=prefix, **options)

    def count_objects(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        versions: bool = False,
    ) -> int:
        """
        Count the objects a purge would delete.

        Raises:
            CleanerError: If the listing fails
        """
        iterator = self._iterator(bucket, prefix, versions)
        count = 0
        while iterator.next():
            count += 1
        err = iterator.err()
        if err is not None:
            raise CleanerError(
                f"Failed to list {bucket}: {err}",
                bucket=bucket,
                details={"prefix": prefix, "listed": count},
            ) from err
        return count

    def purge_bucket(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        versions: bool = False,
        dry_run: bool = True,
        mfa: Optional[str] = None,
        request_payer: Optional[str] = None,
        bypass_governance_retention: bool = False,
        progress_callback: Optional[Callable[[DeleteResult], None]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> PurgeResult:
        """
        Delete every object in a bucket.

        Args:
            bucket: Bucket to empty
            prefix: Only delete keys under this prefix
            versions: Delete every version and delete marker
            dry_run: If True, only list what would be deleted
            mfa: MFA token for MFA-delete buckets
            request_payer: Request payer mode, e.g. "requester"
            bypass_governance_retention: Delete objects under governance lock
            progress_callback: Called once per object with its final result,
                as soon as its batch has been sent
            cancel_event: Stops the purge between batches when set

        Returns:
            PurgeResult with counts and failures
        """
        result = PurgeResult(bucket=bucket)

        if dry_run:
            iterator = self._iterator(
                bucket, prefix, versions, request_payer=request_payer
            )
            while iterator.next():
                obj = iterator.delete_object()
                item = DeleteResult(
                    bucket=bucket,
                    key=obj.key,
                    version_id=obj.version_id,
                    status=DeleteStatus.DRY_RUN,
                )
                result.add_result(item)
                if progress_callback:
                    progress_callback(item)
            if iterator.err() is not None:
                result.errors.append(
                    BatchObjectError(iterator.err(), kind=FailureKind.ITERATION)
                )
            result.complete()
            return result

        extra = {"BypassGovernanceRetention": True} if bypass_governance_retention else None
        batcher = BatchDelete(
            self.s3_client,
            batch_size=self.batch_size,
            error_policy=self.error_policy,
            s3_additional_kwargs=extra,
        )

        def after_factory(listed: Dict[str, Any]) -> Callable[[], None]:
            def after() -> None:
                item = DeleteResult(
                    bucket=bucket,
                    key=listed["Key"],
                    version_id=listed.get("VersionId"),
                    status=DeleteStatus.SUCCESS,
                )
                failure = self._failure_for(batcher.batch_errors, item.key, item.version_id)
                if failure is not None:
                    item.status = DeleteStatus.FAILED
                    item.error_message = self._error_message(failure)
                result.add_result(item)
                if progress_callback:
                    progress_callback(item)

            return after

        iterator = self._iterator(
            bucket,
            prefix,
            versions,
            mfa=mfa,
            request_payer=request_payer,
            after=after_factory,
            cancel_event=cancel_event,
        )

        try:
            batcher.delete(iterator, cancel_event=cancel_event)
        except BatchDeleteError as e:
            result.errors = e.errors

        result.complete()
        return result

    def delete_bucket(
        self,
        bucket: str,
        dry_run: bool = True,
        purge: bool = True,
        versions: bool = True,
        **purge_options: Any,
    ) -> DeleteResult:
        """
        Delete a bucket, emptying it first.

        Args:
            bucket: Bucket to delete
            dry_run: If True, only simulate deletion
            purge: Empty the bucket before deleting it
            versions: Also remove versions and delete markers when purging
            **purge_options: Passed to purge_bucket

        Returns:
            DeleteResult with operation status
        """
        if dry_run:
            return DeleteResult(bucket=bucket, key=None, status=DeleteStatus.DRY_RUN)

        if purge:
            purge_result = self.purge_bucket(
                bucket, versions=versions, dry_run=False, **purge_options
            )
            if not purge_result.success:
                return DeleteResult(
                    bucket=bucket,
                    key=None,
                    status=DeleteStatus.SKIPPED,
                    error_message=(
                        f"{len(purge_result.errors)} objects could not be "
                        f"deleted; bucket left in place"
                    ),
                )

        try:
            self.s3_client.delete_bucket(Bucket=bucket)
            return DeleteResult(bucket=bucket, key=None, status=DeleteStatus.SUCCESS)
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            error_message = self.ERROR_MESSAGES.get(
                error_code, e.response.get("Error", {}).get("Message", str(e))
            )
            return DeleteResult(
                bucket=bucket,
                key=None,
                status=DeleteStatus.FAILED,
                error_message=error_message,
            )
        except Exception as e:
            return DeleteResult(
                bucket=bucket,
                key=None,
                status=DeleteStatus.FAILED,
                error_message=str(e),
            )

    @staticmethod
    def _failure_for(
        errors: List[BatchObjectError], key: str, version_id: Optional[str]
    ) -> Optional[BatchObjectError]:
        """Find the failure of one object version, falling back to an unversioned one."""
        fallback = None
        for err in errors:
            if err.key != key:
                continue
            if err.version_id == version_id:
                return err
            if err.version_id is None and fallback is None:
                fallback = err
        return fallback

    @staticmethod
    def _error_message(failure: BatchObjectError) -> str:
        orig = failure.orig_error
        if isinstance(orig, ClientError):
            info = orig.response.get("Error", {})
            return f"{info.get('Code')}: {info.get('Message')}"
        return str(orig)
