"""
Tests for the exception hierarchy.
"""

from botocore.exceptions import ClientError

from bucket_purge.core.exceptions import (
    BatchDeleteError,
    BatchError,
    BatchObjectError,
    BucketPurgeError,
    FailureKind,
    OperationCancelledError,
)


class TestBatchObjectError:
    """Tests for per-object errors."""

    def test_message_names_key_and_bucket(self):
        """Test the error text."""
        err = BatchObjectError(RuntimeError("timeout"), bucket="b", key="k")
        assert str(err) == "failed to perform batch operation on 'k' to 'b':\ntimeout"
        assert err.details == {"kind": "transport", "bucket": "b", "key": "k"}

    def test_iteration_error_has_no_location(self):
        """Test an error without bucket or key."""
        err = BatchObjectError(RuntimeError("list failed"), kind=FailureKind.ITERATION)
        assert err.bucket is None
        assert err.key is None
        assert "''" in str(err)

    def test_to_dict(self):
        """Test serialization includes the original error."""
        orig = ClientError({"Error": {"Code": "AccessDenied", "Message": "no"}}, "DeleteObjects")
        data = BatchObjectError(orig, bucket="b", key="k", kind=FailureKind.PER_KEY).to_dict()
        assert data["error_type"] == "BatchObjectError"
        assert "AccessDenied" in data["orig_error"]


class TestBatchDeleteError:
    """Tests for the aggregate error."""

    def test_defaults(self):
        """Test default code and message."""
        err = BatchDeleteError([BatchObjectError(RuntimeError("x"), bucket="b", key="k")])
        assert err.code == "BatchedDeleteIncomplete"
        assert err.message == "some objects have failed to be deleted."
        assert str(err).startswith("BatchedDeleteIncomplete: some objects")
        assert isinstance(err, BatchError)
        assert isinstance(err, BucketPurgeError)

    def test_custom_code_and_message(self):
        """Test overriding the code and message by keyword."""
        errors = [BatchObjectError(RuntimeError("x"), bucket="b", key="k")]
        err = BatchDeleteError(errors, code="PurgeIncomplete", message="bucket not emptied")

        assert err.errors == errors
        assert err.code == "PurgeIncomplete"
        assert err.message == "bucket not emptied"
        assert err.details == {"code": "PurgeIncomplete", "count": 1}

    def test_by_kind(self):
        """Test filtering errors by kind."""
        errors = [
            BatchObjectError(RuntimeError("a"), bucket="b", key="1", kind=FailureKind.HOOK),
            BatchObjectError(RuntimeError("b"), kind=FailureKind.ITERATION),
        ]
        err = BatchDeleteError(errors)
        assert err.by_kind(FailureKind.HOOK) == errors[:1]
        assert err.by_kind(FailureKind.TRANSPORT) == []
        assert err.to_dict()["details"]["count"] == 2

    def test_cancelled_error(self):
        """Test the cancelled operation error."""
        err = OperationCancelledError("DeleteObjects")
        assert err.operation == "DeleteObjects"
        assert "cancelled" in err.message
