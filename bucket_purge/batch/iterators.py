"""
Object Iterators
================

Sources of objects for :class:`~bucket_purge.batch.delete.BatchDelete`.

Iterators follow a scanner pattern: ``next()`` advances and reports whether
a current object is available, ``delete_object()`` returns it, and ``err()``
returns the error that ended iteration early, if any. Iterators are
single-pass.

Classes
-------
BatchDeleteIterator
    Protocol implemented by every iterator.
DeleteObjectsIterator
    Walks a fixed list of :class:`DeleteObject`.
DeleteListIterator
    Lazily walks a paged listing, one page in memory at a time.

Functions
---------
list_objects_pages
    Page source over the ``list_objects_v2`` paginator.
list_object_versions_pages
    Page source over the ``list_object_versions`` paginator (versions and
    delete markers).
new_delete_list_iterator, new_delete_version_iterator
    Build a :class:`DeleteListIterator` over an S3 client.

Example
-------
>>> iterator = new_delete_list_iterator(s3, "my-bucket", prefix="logs/")
>>> BatchDelete(s3).delete(iterator)
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from typing import (
    Any,
    Callable,
    Deque,
    Dict,
    Iterator,
    List,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from bucket_purge.batch.objects import AfterHook, DeleteObject
from bucket_purge.core.exceptions import OperationCancelledError

# Module logger
logger = logging.getLogger(__name__)

# A listed item: {"Key": ..., "VersionId": ...}
ListItem = Dict[str, Any]

# bucket -> lazy iterator over pages of listed items
PageSource = Callable[[str], Iterator[List[ListItem]]]


@runtime_checkable
class BatchDeleteIterator(Protocol):
    """Scanner-style source of objects to delete."""

    def next(self) -> bool:
        ...

    def err(self) -> Optional[Exception]:
        ...

    def delete_object(self) -> DeleteObject:
        ...


class DeleteObjectsIterator:
    """
    Iterator over a fixed list of objects.

    Parameters
    ----------
    objects : sequence of DeleteObject
        Objects to delete, in order.

    Example
    -------
    >>> iterator = DeleteObjectsIterator([
    ...     DeleteObject(bucket="my-bucket", key="a.txt"),
    ...     DeleteObject(bucket="my-bucket", key="b.txt"),
    ... ])
    """

    def __init__(self, objects: Sequence[DeleteObject]) -> None:
        self.objects = list(objects)
        self._index = -1

    def next(self) -> bool:
        if self._index < len(self.objects):
            self._index += 1
        return self._index < len(self.objects)

    def err(self) -> Optional[Exception]:
        # A fixed list never fails
        return None

    def delete_object(self) -> DeleteObject:
        return self.objects[self._index]


class DeleteListIterator:
    """
    Iterator over a paged object listing.

    Pages are pulled on demand: the next page is requested only after every
    item of the current page has been handed out. A failed fetch ends the
    iteration and is reported by :meth:`err`.

    Parameters
    ----------
    bucket : str
        Bucket being listed; every produced object belongs to it.
    list_pages : callable
        ``(bucket) -> iterator of pages``, each page a list of
        ``{"Key", "VersionId"}`` dicts. Built on a boto3 paginator, so each
        page pulled is one listing call.
    mfa : str, optional
        MFA token attached to every produced object.
    request_payer : str, optional
        Request payer mode attached to every produced object.
    after : callable, optional
        ``(item) -> hook`` factory; the returned hook becomes the object's
        post-delete hook.
    cancel_event : threading.Event, optional
        When set, no further page is fetched and :meth:`err` returns
        :class:`OperationCancelledError`.
    """

    def __init__(
        self,
        bucket: str,
        list_pages: PageSource,
        mfa: Optional[str] = None,
        request_payer: Optional[str] = None,
        after: Optional[Callable[[ListItem], Optional[AfterHook]]] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.bucket = bucket
        self.list_pages = list_pages
        self.mfa = mfa
        self.request_payer = request_payer
        self.after = after
        self.cancel_event = cancel_event

        self._items: Deque[ListItem] = deque()
        self._pages: Optional[Iterator[List[ListItem]]] = None
        self._has_more = True
        self._err: Optional[Exception] = None
        self.pages_fetched = 0

    def next(self) -> bool:
        if self._items:
            self._items.popleft()
            if self._items:
                return True

        # Empty pages are skipped
        while not self._items and self._has_more:
            if not self._fetch_page():
                return False

        return bool(self._items)

    def _fetch_page(self) -> bool:
        if self.cancel_event is not None and self.cancel_event.is_set():
            self._err = OperationCancelledError("ListObjects")
            self._has_more = False
            return False

        try:
            if self._pages is None:
                self._pages = iter(self.list_pages(self.bucket))
            page = next(self._pages, None)
        except Exception as e:
            logger.warning(f"Listing {self.bucket} failed after {self.pages_fetched} pages: {e}")
            self._err = e
            self._has_more = False
            return False

        if page is None:
            self._has_more = False
            return False

        self.pages_fetched += 1
        self._items = deque(page)
        logger.debug(
            f"Fetched page {self.pages_fetched} of {self.bucket} "
            f"({len(self._items)} items)"
        )
        return True

    def err(self) -> Optional[Exception]:
        return self._err

    def delete_object(self) -> DeleteObject:
        item = self._items[0]
        return DeleteObject(
            bucket=self.bucket,
            key=item["Key"],
            version_id=item.get("VersionId"),
            mfa=self.mfa,
            request_payer=self.request_payer,
            after=self.after(item) if self.after else None,
        )


# =============================================================================
# S3 Page Sources
# =============================================================================


def _paginate_kwargs(
    bucket: str,
    prefix: Optional[str],
    page_size: Optional[int],
    request_payer: Optional[str],
) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"Bucket": bucket}
    if prefix:
        kwargs["Prefix"] = prefix
    if request_payer:
        kwargs["RequestPayer"] = request_payer
    if page_size:
        kwargs["PaginationConfig"] = {"PageSize": page_size}
    return kwargs


def list_objects_pages(
    client: Any,
    prefix: Optional[str] = None,
    page_size: Optional[int] = None,
    request_payer: Optional[str] = None,
) -> PageSource:
    """
    Build a page source over the ``list_objects_v2`` paginator.

    Args:
        client: boto3 S3 client
        prefix: Only list keys under this prefix
        page_size: Keys per request
        request_payer: Sent as ``RequestPayer`` on each listing call

    Returns:
        Callable suitable for :class:`DeleteListIterator`
    """

    def pages(bucket: str) -> Iterator[List[ListItem]]:
        paginator = client.get_paginator("list_objects_v2")
        for page in paginator.paginate(
            **_paginate_kwargs(bucket, prefix, page_size, request_payer)
        ):
            yield [{"Key": obj["Key"]} for obj in page.get("Contents", [])]

    return pages


def list_object_versions_pages(
    client: Any,
    prefix: Optional[str] = None,
    page_size: Optional[int] = None,
    request_payer: Optional[str] = None,
) -> PageSource:
    """
    Build a page source over the ``list_object_versions`` paginator.

    Each page yields every object version followed by every delete marker
    of that page.
    """

    def pages(bucket: str) -> Iterator[List[ListItem]]:
        paginator = client.get_paginator("list_object_versions")
        for page in paginator.paginate(
            **_paginate_kwargs(bucket, prefix, page_size, request_payer)
        ):
            yield [
                {"Key": v["Key"], "VersionId": v.get("VersionId")}
                for v in page.get("Versions", []) + page.get("DeleteMarkers", [])
            ]

    return pages


def new_delete_list_iterator(
    client: Any,
    bucket: str,
    prefix: Optional[str] = None,
    page_size: Optional[int] = None,
    **options: Any,
) -> DeleteListIterator:
    """
    Iterate the current objects of ``bucket`` for deletion.

    Extra keyword arguments (``mfa``, ``request_payer``, ``after``,
    ``cancel_event``) are passed to :class:`DeleteListIterator`.
    """
    list_pages = list_objects_pages(
        client,
        prefix=prefix,
        page_size=page_size,
        request_payer=options.get("request_payer"),
    )
    return DeleteListIterator(bucket, list_pages, **options)


def new_delete_version_iterator(
    client: Any,
    bucket: str,
    prefix: Optional[str] = None,
    page_size: Optional[int] = None,
    **options: Any,
) -> DeleteListIterator:
    """Iterate every version and delete marker of ``bucket`` for deletion."""
    list_pages = list_object_versions_pages(
        client,
        prefix=prefix,
        page_size=page_size,
        request_payer=options.get("request_payer"),
    )
    return DeleteListIterator(bucket, list_pages, **options)
