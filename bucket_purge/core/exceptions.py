"""
Custom Exceptions for Bucket-Purge
==================================

This module defines a hierarchy of custom exceptions used throughout
the application for consistent error handling and reporting.

Exception Hierarchy
-------------------
::

    BucketPurgeError (base)
    ├── AWSClientError
    │   ├── CredentialsError
    │   ├── RegionError
    │   └── ServiceError
    ├── BatchError
    │   ├── BatchObjectError
    │   ├── BatchDeleteError
    │   └── OperationCancelledError
    └── CleanerError

Example
-------
>>> from bucket_purge.core.exceptions import BatchDeleteError
>>>
>>> try:
...     batcher.delete(iterator)
... except BatchDeleteError as e:
...     for err in e.errors:
...         print(err.key, err.orig_error)
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class BucketPurgeError(Exception):
    """
    Base exception for all Bucket-Purge errors.

    All custom exceptions in the application inherit from this class,
    allowing for broad exception catching when needed.

    Parameters
    ----------
    message : str
        Human-readable error message.
    details : dict, optional
        Additional context about the error.

    Attributes
    ----------
    message : str
        The error message.
    details : dict
        Additional error details.

    Example
    -------
    >>> raise BucketPurgeError("Something went wrong", details={"code": 500})
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (Details: {self.details})"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to dictionary for serialization.

        Returns
        -------
        dict
            Dictionary representation of the error.
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# =============================================================================
# AWS Client Exceptions
# =============================================================================


class AWSClientError(BucketPurgeError):
    """
    Base exception for AWS client-related errors.

    Raised when there's an issue with AWS connectivity, authentication,
    or service access.

    Parameters
    ----------
    message : str
        Human-readable error message.
    service : str, optional
        The AWS service that caused the error.
    region : str, optional
        The AWS region where the error occurred.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        region: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.service = service
        self.region = region
        full_details = details or {}
        if service:
            full_details["service"] = service
        if region:
            full_details["region"] = region
        super().__init__(message, full_details)


class CredentialsError(AWSClientError):
    """
    Raised when AWS credentials are invalid, missing, or expired.

    Example
    -------
    >>> raise CredentialsError(
    ...     "AWS credentials not found",
    ...     details={"hint": "Run 'aws configure' to set up credentials"}
    ... )
    """

    pass


class RegionError(AWSClientError):
    """Raised when the configured region is invalid or missing."""

    pass


class ServiceError(AWSClientError):
    """Raised when a service client cannot be created."""

    pass


# =============================================================================
# Batch Exceptions
# =============================================================================


class FailureKind(Enum):
    """Where a per-object failure came from."""

    ITERATION = "iteration"
    TRANSPORT = "transport"
    PER_KEY = "per_key"
    HOOK = "hook"


class BatchError(BucketPurgeError):
    """Base exception for batch delete errors."""

    pass


class OperationCancelledError(BatchError):
    """
    Raised in place of a remote call that was not issued because the
    caller's cancel event was set.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(
            f"{operation} cancelled",
            details={"operation": operation},
        )


class BatchObjectError(BatchError):
    """
    Failure of a single object during a batch operation.

    An error without a bucket and key describes a failure of the object
    iterator rather than of a specific delete.

    Parameters
    ----------
    orig_error : Exception
        The underlying error (transport failure, per-key error reported by
        the server, iterator failure or hook failure).
    bucket : str, optional
        Bucket of the object that failed.
    key : str, optional
        Key of the object that failed.
    kind : FailureKind, default=FailureKind.TRANSPORT
        Channel the failure was detected on.
    version_id : str, optional
        Version of the object that failed, when known.
    """

    def __init__(
        self,
        orig_error: Exception,
        bucket: Optional[str] = None,
        key: Optional[str] = None,
        kind: FailureKind = FailureKind.TRANSPORT,
        version_id: Optional[str] = None,
    ) -> None:
        self.orig_error = orig_error
        self.bucket = bucket
        self.key = key
        self.kind = kind
        self.version_id = version_id

        details: Dict[str, Any] = {"kind": kind.value}
        if bucket is not None:
            details["bucket"] = bucket
        if key is not None:
            details["key"] = key
        if version_id is not None:
            details["version_id"] = version_id

        message = (
            f"failed to perform batch operation on '{key or ''}' "
            f"to '{bucket or ''}'"
        )
        if orig_error is not None:
            message = f"{message}:\n{orig_error}"
        super().__init__(message, details)

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["orig_error"] = str(self.orig_error)
        return data


class BatchDeleteError(BatchError):
    """
    Aggregate error raised once a batch delete finishes with failures.

    Parameters
    ----------
    errors : sequence of BatchObjectError
        Every per-object failure, in the order it was detected.
    code : str, default="BatchedDeleteIncomplete"
        Error code of the aggregate.
    message : str, default="some objects have failed to be deleted."
        Human-readable summary.

    Example
    -------
    >>> try:
    ...     batcher.delete(iterator)
    ... except BatchDeleteError as e:
    ...     print(e.code, len(e.errors))
    BatchedDeleteIncomplete 3
    """

    DEFAULT_CODE = "BatchedDeleteIncomplete"
    DEFAULT_MESSAGE = "some objects have failed to be deleted."

    def __init__(
        self,
        errors: Sequence[BatchObjectError],
        code: str = DEFAULT_CODE,
        message: str = DEFAULT_MESSAGE,
    ) -> None:
        self.code = code
        self.errors: List[BatchObjectError] = list(errors)
        super().__init__(message, details={"code": code, "count": len(self.errors)})

    def __str__(self) -> str:
        text = f"{self.code}: {self.message}"
        if self.errors:
            text += "\ncaused by: " + "\n".join(str(e) for e in self.errors)
        return text

    def by_kind(self, kind: FailureKind) -> List[BatchObjectError]:
        """Return the collected errors of one failure kind."""
        return [e for e in self.errors if e.kind is kind]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["errors"] = [e.to_dict() for e in self.errors]
        return data


# =============================================================================
# Cleaner Exceptions
# =============================================================================


class CleanerError(BucketPurgeError):
    """
    Raised when the cleaner cannot complete an operation on a bucket.

    Parameters
    ----------
    message : str
        Human-readable error message.
    bucket : str, optional
        The bucket being cleaned.
    details : dict, optional
        Additional context about the error.
    """

    def __init__(
        self,
        message: str,
        bucket: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.bucket = bucket
        full_details = details or {}
        if bucket:
            full_details["bucket"] = bucket
        super().__init__(message, full_details)
