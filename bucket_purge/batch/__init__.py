"""
Batch Object Deletion
=====================

Empties buckets by deleting objects in ``DeleteObjects`` batches.

Components
----------
DeleteObject, DeleteRequest
    An object to delete and a batch request under construction.
DeleteObjectsIterator, DeleteListIterator
    Static and paginated object sources.
BatchAssembler
    Groups objects into requests by size and shared request fields.
BatchDelete
    Sends the requests and collects every failure.

Example
-------
>>> from bucket_purge.batch import BatchDelete, DeleteObject, DeleteObjectsIterator
>>>
>>> objects = [DeleteObject(bucket="my-bucket", key=k) for k in keys]
>>> BatchDelete(s3_client).delete(DeleteObjectsIterator(objects))
"""

from bucket_purge.batch.assembler import DEFAULT_BATCH_SIZE, BatchAssembler, has_parity
from bucket_purge.batch.delete import (
    ERR_DELETE_BATCH_FAIL_CODE,
    BatchDelete,
    BatchStats,
    delete_bucket_contents,
    delete_objects,
)
from bucket_purge.batch.iterators import (
    BatchDeleteIterator,
    DeleteListIterator,
    DeleteObjectsIterator,
    list_object_versions_pages,
    list_objects_pages,
    new_delete_list_iterator,
    new_delete_version_iterator,
)
from bucket_purge.batch.objects import DeleteObject, DeleteRequest
from bucket_purge.batch.policy import (
    ErrorDisposition,
    default_error_policy,
    strict_error_policy,
)

__all__ = [
    "DEFAULT_BATCH_SIZE",
    "ERR_DELETE_BATCH_FAIL_CODE",
    # Objects
    "DeleteObject",
    "DeleteRequest",
    # Iterators
    "BatchDeleteIterator",
    "DeleteObjectsIterator",
    "DeleteListIterator",
    "list_objects_pages",
    "list_object_versions_pages",
    "new_delete_list_iterator",
    "new_delete_version_iterator",
    # Batching
    "BatchAssembler",
    "has_parity",
    "BatchDelete",
    "BatchStats",
    "delete_objects",
    "delete_bucket_contents",
    # Error policy
    "ErrorDisposition",
    "default_error_policy",
    "strict_error_policy",
]
