"""
Batch Delete Module
===================

Deletes objects in batches through the S3 ``DeleteObjects`` API.

:class:`BatchDelete` pulls objects from a
:class:`~bucket_purge.batch.iterators.BatchDeleteIterator`, groups them with a
:class:`~bucket_purge.batch.assembler.BatchAssembler`, and sends each batch as
soon as it is complete, so at most one open batch is held in memory. Every
failure is collected and reported at the end in a single
:class:`~bucket_purge.core.exceptions.BatchDeleteError`:

- a call that fails outright fails every object in its batch
- keys listed in the response ``Errors`` fail individually
- a post-delete hook that raises fails its own object
- an iterator that stops with an error adds one error with no bucket or key

Batches run one after another on the calling thread. Retries are left to the
botocore client configuration.

Example
-------
>>> from bucket_purge.batch import BatchDelete, new_delete_list_iterator
>>>
>>> batcher = BatchDelete(s3_client)
>>> try:
...     batcher.delete(new_delete_list_iterator(s3_client, "my-bucket"))
... except BatchDeleteError as e:
...     print(f"{len(e.errors)} objects could not be deleted")
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from botocore.exceptions import ClientError

from bucket_purge.batch.assembler import DEFAULT_BATCH_SIZE, BatchAssembler
from bucket_purge.batch.iterators import (
    BatchDeleteIterator,
    DeleteObjectsIterator,
    new_delete_list_iterator,
    new_delete_version_iterator,
)
from bucket_purge.batch.objects import DeleteObject, DeleteRequest
from bucket_purge.batch.policy import (
    ErrorDisposition,
    ErrorPolicy,
    default_error_policy,
)
from bucket_purge.core.exceptions import (
    BatchDeleteError,
    BatchObjectError,
    FailureKind,
    OperationCancelledError,
)

# Module logger
logger = logging.getLogger(__name__)

# Used when a DeleteObjects error entry has no Code / Message
ERR_DELETE_BATCH_FAIL_CODE = "DeleteBatchError"
ERR_DEFAULT_DELETE_BATCH_MESSAGE = "failed to delete"


@dataclass
class BatchStats:
    """Counters for the most recent :meth:`BatchDelete.delete` run."""

    objects: int = 0
    batches: int = 0
    failed: int = 0
    ignored: int = 0


def per_key_error(entry: Dict[str, Any]) -> ClientError:
    """
    Build a ``ClientError`` from one ``DeleteObjects`` ``Errors`` entry.

    Missing codes and messages fall back to ``DeleteBatchError`` and
    ``failed to delete``.
    """
    return ClientError(
        {
            "Error": {
                "Code": entry.get("Code") or ERR_DELETE_BATCH_FAIL_CODE,
                "Message": entry.get("Message") or ERR_DEFAULT_DELETE_BATCH_MESSAGE,
                "Key": entry.get("Key"),
                "VersionId": entry.get("VersionId"),
            }
        },
        "DeleteObjects",
    )


class BatchDelete:
    """
    Batched object deleter.

    Parameters
    ----------
    client : S3.Client
        Any object with a boto3-compatible ``delete_objects`` method.
    batch_size : int, default=1000
        Objects per ``DeleteObjects`` call. ``-1`` selects the default.
    error_policy : callable, optional
        Classifies transport and per-key failures; ``IGNORABLE`` ones are
        dropped. Defaults to :func:`default_error_policy`.
    s3_additional_kwargs : dict, optional
        Extra arguments sent with every call, e.g.
        ``{"BypassGovernanceRetention": True}``.

    Attributes
    ----------
    stats : BatchStats
        Counters for the last run.
    batch_errors : list of BatchObjectError
        Call-level and per-key failures of the batch whose post-delete hooks
        are running, so a hook can tell whether its own object was deleted.
    """

    def __init__(
        self,
        client: Any,
        batch_size: int = DEFAULT_BATCH_SIZE,
        error_policy: Optional[ErrorPolicy] = None,
        s3_additional_kwargs: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.client = client
        self.batch_size = DEFAULT_BATCH_SIZE if batch_size == -1 else batch_size
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.error_policy = error_policy or default_error_policy
        self.s3_additional_kwargs = dict(s3_additional_kwargs or {})
        self.stats = BatchStats()
        self.batch_errors: List[BatchObjectError] = []

    def delete(
        self,
        iterator: BatchDeleteIterator,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Delete every object the iterator produces.

        Parameters
        ----------
        iterator : BatchDeleteIterator
            Source of objects; consumed to exhaustion.
        cancel_event : threading.Event, optional
            Once set, no further ``DeleteObjects`` call is sent and no
            further object is pulled. The batch that would have been sent
            fails with :class:`OperationCancelledError`.

        Raises
        ------
        BatchDeleteError
            If any object failed. Objects not listed in it were deleted.
        """
        self.stats = BatchStats()
        errors: List[BatchObjectError] = []
        assembler = BatchAssembler(self.batch_size)
        cancelled = False

        while True:
            if _is_set(cancel_event):
                cancelled = True
                break
            if not iterator.next():
                break
            obj = iterator.delete_object()
            self.stats.objects += 1
            for request in assembler.add(obj):
                errors.extend(self._delete_batch(request, cancel_event))

        request = assembler.flush()
        if request is not None:
            errors.extend(self._delete_batch(request, cancel_event))

        iter_err = iterator.err()
        if iter_err is not None:
            logger.warning(f"Object iteration stopped early: {iter_err}")
            errors.append(BatchObjectError(iter_err, kind=FailureKind.ITERATION))
        if cancelled and not isinstance(iter_err, OperationCancelledError):
            # Objects the iterator never produced were not deleted
            errors.append(
                BatchObjectError(
                    OperationCancelledError("BatchDelete"),
                    kind=FailureKind.ITERATION,
                )
            )

        self.stats.failed = len(errors)
        logger.info(
            f"Batch delete finished: {self.stats.objects} objects, "
            f"{self.stats.batches} batches, {len(errors)} errors"
        )
        if errors:
            raise BatchDeleteError(errors)

    def _delete_batch(
        self,
        request: DeleteRequest,
        cancel_event: Optional[threading.Event] = None,
    ) -> List[BatchObjectError]:
        """Send one request, run its hooks and return its failures."""
        errors: List[BatchObjectError] = []
        self.stats.batches += 1
        logger.debug(f"Deleting batch of {len(request)} objects from {request.bucket}")

        try:
            if _is_set(cancel_event):
                raise OperationCancelledError("DeleteObjects")
            response = self.client.delete_objects(
                **request.to_kwargs(), **self.s3_additional_kwargs
            )
        except Exception as e:
            if self._ignorable(e):
                logger.debug(f"Ignoring failed batch on {request.bucket}: {e}")
                self.stats.ignored += len(request)
            else:
                logger.warning(
                    f"DeleteObjects on {request.bucket} failed for "
                    f"{len(request)} objects: {e}"
                )
                for obj in request.objects:
                    errors.append(
                        BatchObjectError(
                            e,
                            bucket=request.bucket,
                            key=obj.key,
                            kind=FailureKind.TRANSPORT,
                            version_id=obj.version_id,
                        )
                    )
        else:
            for entry in response.get("Errors", []) or []:
                err = per_key_error(entry)
                if self._ignorable(err):
                    self.stats.ignored += 1
                    continue
                errors.append(
                    BatchObjectError(
                        err,
                        bucket=request.bucket,
                        key=entry.get("Key"),
                        kind=FailureKind.PER_KEY,
                        version_id=entry.get("VersionId"),
                    )
                )
            if errors:
                logger.warning(
                    f"DeleteObjects on {request.bucket} reported "
                    f"{len(errors)} failed keys"
                )

        self.batch_errors = list(errors)
        for obj in request.objects:
            if obj.after is None:
                continue
            try:
                obj.after()
            except Exception as e:
                logger.warning(f"Post-delete hook failed for {obj.bucket}/{obj.key}: {e}")
                errors.append(
                    BatchObjectError(
                        e,
                        bucket=obj.bucket,
                        key=obj.key,
                        kind=FailureKind.HOOK,
                        version_id=obj.version_id,
                    )
                )

        return errors

    def _ignorable(self, error: Exception) -> bool:
        return self.error_policy(error) is ErrorDisposition.IGNORABLE


def _is_set(event: Optional[threading.Event]) -> bool:
    return event is not None and event.is_set()


# =============================================================================
# Convenience Functions
# =============================================================================


def delete_objects(
    client: Any,
    objects: Sequence[DeleteObject],
    batch_size: int = DEFAULT_BATCH_SIZE,
    **options: Any,
) -> None:
    """
    Delete a fixed list of objects.

    Extra keyword arguments go to :class:`BatchDelete`.

    Raises
    ------
    BatchDeleteError
        If any object failed.
    """
    BatchDelete(client, batch_size=batch_size, **options).delete(
        DeleteObjectsIterator(objects)
    )


def delete_bucket_contents(
    client: Any,
    bucket: str,
    prefix: Optional[str] = None,
    versions: bool = False,
    batch_size: int = DEFAULT_BATCH_SIZE,
    cancel_event: Optional[threading.Event] = None,
    **options: Any,
) -> None:
    """
    Delete every object in ``bucket`` (optionally under ``prefix``).

    With ``versions=True`` every object version and delete marker is removed,
    which empties a versioned bucket. Extra keyword arguments go to
    :class:`BatchDelete`.
    """
    factory = new_delete_version_iterator if versions else new_delete_list_iterator
    iterator = factory(client, bucket, prefix=prefix, cancel_event=cancel_event)
    BatchDelete(client, batch_size=batch_size, **options).delete(
        iterator, cancel_event=cancel_event
    )
