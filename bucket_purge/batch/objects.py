"""
Batch delete value types.

``DeleteObject`` describes one object to delete; ``DeleteRequest`` is the
``DeleteObjects`` call being assembled from a run of compatible objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

# Post-attempt hook; runs whether or not the delete succeeded
AfterHook = Callable[[], None]


@dataclass(frozen=True)
class DeleteObject:
    """
    A single object queued for deletion.

    Attributes:
        bucket: Bucket holding the object
        key: Object key
        version_id: Version to delete, or None for the current version
        mfa: MFA token sent with the delete (versioned, MFA-delete buckets)
        request_payer: Request payer mode, e.g. "requester"
        after: Hook called once after the delete attempt
    """

    bucket: str
    key: str
    version_id: Optional[str] = None
    mfa: Optional[str] = None
    request_payer: Optional[str] = None
    after: Optional[AfterHook] = field(default=None, compare=False, repr=False)

    def identifier(self) -> Dict[str, str]:
        """Return the ``ObjectIdentifier`` dict for a ``DeleteObjects`` call."""
        ident = {"Key": self.key}
        if self.version_id:
            ident["VersionId"] = self.version_id
        return ident


@dataclass
class DeleteRequest:
    """
    One ``DeleteObjects`` call under construction.

    All members share the request's bucket, MFA token and request payer.
    """

    bucket: str
    mfa: Optional[str] = None
    request_payer: Optional[str] = None
    objects: List[DeleteObject] = field(default_factory=list)

    @classmethod
    def for_object(cls, obj: DeleteObject) -> DeleteRequest:
        """Start a request whose shared fields are taken from ``obj``."""
        return cls(bucket=obj.bucket, mfa=obj.mfa, request_payer=obj.request_payer)

    def append(self, obj: DeleteObject) -> None:
        self.objects.append(obj)

    def identifiers(self) -> List[Dict[str, str]]:
        return [obj.identifier() for obj in self.objects]

    def to_kwargs(self) -> Dict[str, Any]:
        """Render the keyword arguments for ``S3.Client.delete_objects``."""
        kwargs: Dict[str, Any] = {
            "Bucket": self.bucket,
            "Delete": {"Objects": self.identifiers(), "Quiet": True},
        }
        if self.mfa:
            kwargs["MFA"] = self.mfa
        if self.request_payer:
            kwargs["RequestPayer"] = self.request_payer
        return kwargs

    def __len__(self) -> int:
        return len(self.objects)
