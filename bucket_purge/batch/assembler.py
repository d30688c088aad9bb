"""
Parity-aware batching of delete candidates.

Objects are grouped into :class:`DeleteRequest` batches of at most
``batch_size`` members. A batch only accepts objects with the same bucket,
MFA token and request payer as the object that opened it; the first object
that differs closes the open batch and opens the next one, even when the
closed batch is not full. A lone object can therefore end up in a batch of
one even if the object after it would have matched it.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from bucket_purge.batch.objects import DeleteObject, DeleteRequest

# Module logger
logger = logging.getLogger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per call
DEFAULT_BATCH_SIZE = 1000


def has_parity(request: DeleteRequest, obj: DeleteObject) -> bool:
    """Whether ``obj`` may join ``request`` without changing its shared fields."""
    return (
        request.bucket == obj.bucket
        and (request.mfa or None) == (obj.mfa or None)
        and (request.request_payer or None) == (obj.request_payer or None)
    )


class BatchAssembler:
    """
    Groups a stream of objects into delete requests.

    Args:
        batch_size: Maximum number of objects per request

    Example:
        >>> assembler = BatchAssembler(batch_size=2)
        >>> for obj in objects:
        ...     for request in assembler.add(obj):
        ...         send(request)
        >>> last = assembler.flush()
    """

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE):
        if batch_size < 1:
            raise ValueError(f"batch_size must be at least 1, got {batch_size}")
        self.batch_size = batch_size
        self._open: Optional[DeleteRequest] = None

    @property
    def pending(self) -> int:
        """Number of objects in the open batch."""
        return len(self._open) if self._open is not None else 0

    def add(self, obj: DeleteObject) -> List[DeleteRequest]:
        """
        Add an object, returning the requests it completed.

        At most two requests are returned: the batch closed by a parity break
        and, when ``batch_size`` is 1, the batch the object itself filled.
        """
        completed: List[DeleteRequest] = []

        if self._open is not None and not has_parity(self._open, obj):
            logger.debug(
                f"Parity break at {obj.bucket}/{obj.key}, "
                f"flushing batch of {len(self._open)}"
            )
            completed.append(self._open)
            self._open = None

        if self._open is None:
            self._open = DeleteRequest.for_object(obj)
        self._open.append(obj)

        if len(self._open) >= self.batch_size:
            completed.append(self._open)
            self._open = None

        return completed

    def flush(self) -> Optional[DeleteRequest]:
        """Close and return the open batch, or None if there is none."""
        request, self._open = self._open, None
        if request is not None and len(request) == 0:
            return None
        return request
