"""
Error classification for batch deletes.

A policy decides whether a delete failure means the object is already gone
(``IGNORABLE``) or must be reported (``FATAL``). Policies are plain callables
so callers talking to other S3-compatible stores can supply their own.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, FrozenSet

from botocore.exceptions import ClientError


class ErrorDisposition(Enum):
    """What to do with a delete failure."""

    IGNORABLE = "ignorable"
    FATAL = "fatal"


ErrorPolicy = Callable[[Exception], ErrorDisposition]

# Codes meaning the target no longer exists
ALREADY_GONE_CODES: FrozenSet[str] = frozenset(
    {"NoSuchKey", "NoSuchVersion", "NoSuchBucket"}
)


def error_code(error: Exception) -> str:
    """Return the AWS error code carried by ``error``, or an empty string."""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code", "") or ""
    return ""


def default_error_policy(error: Exception) -> ErrorDisposition:
    """Ignore failures on objects that no longer exist."""
    if error_code(error) in ALREADY_GONE_CODES:
        return ErrorDisposition.IGNORABLE
    return ErrorDisposition.FATAL


def strict_error_policy(error: Exception) -> ErrorDisposition:
    """Report every failure."""
    return ErrorDisposition.FATAL
