"""
Tests for parity-aware batch assembly.
"""

import pytest

from bucket_purge.batch.assembler import DEFAULT_BATCH_SIZE, BatchAssembler, has_parity
from bucket_purge.batch.objects import DeleteObject, DeleteRequest


def obj(key, bucket="A", **kwargs):
    return DeleteObject(bucket=bucket, key=key, **kwargs)


def assemble(objects, batch_size=DEFAULT_BATCH_SIZE):
    assembler = BatchAssembler(batch_size)
    requests = []
    for o in objects:
        requests.extend(assembler.add(o))
    last = assembler.flush()
    if last is not None:
        requests.append(last)
    return requests


class TestHasParity:
    """Tests for the parity check."""

    def test_same_fields(self):
        request = DeleteRequest.for_object(obj("1", mfa="m", request_payer="requester"))
        assert has_parity(request, obj("2", mfa="m", request_payer="requester"))

    def test_bucket_differs(self):
        assert not has_parity(DeleteRequest.for_object(obj("1")), obj("2", bucket="B"))

    def test_mfa_presence_differs(self):
        assert not has_parity(DeleteRequest.for_object(obj("1")), obj("2", mfa="m"))

    def test_mfa_value_differs(self):
        request = DeleteRequest.for_object(obj("1", mfa="m1"))
        assert not has_parity(request, obj("2", mfa="m2"))

    def test_request_payer_differs(self):
        request = DeleteRequest.for_object(obj("1"))
        assert not has_parity(request, obj("2", request_payer="requester"))

    def test_version_does_not_matter(self):
        request = DeleteRequest.for_object(obj("1", version_id="v1"))
        assert has_parity(request, obj("2", version_id="v2"))


class TestBatchAssembler:
    """Tests for BatchAssembler."""

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            BatchAssembler(0)

    def test_full_batch_is_emitted_immediately(self):
        assembler = BatchAssembler(2)
        assert assembler.add(obj("1")) == []
        completed = assembler.add(obj("2"))
        assert [len(r) for r in completed] == [2]
        assert assembler.pending == 0
        assert assembler.flush() is None

    def test_parity_break_flushes_partial_batch(self):
        requests = assemble([obj("1"), obj("2"), obj("3", bucket="B")])
        assert [(r.bucket, len(r)) for r in requests] == [("A", 2), ("B", 1)]

    def test_break_and_fill_with_batch_size_one(self):
        assembler = BatchAssembler(1)
        assembler.add(obj("1"))
        completed = assembler.add(obj("2", bucket="B"))
        assert [r.bucket for r in completed] == ["B"]

    def test_non_maximal_packing_is_kept(self):
        """A lone object between two runs stays in its own batch."""
        requests = assemble([obj("1"), obj("2", mfa="m"), obj("3")])
        assert [len(r) for r in requests] == [1, 1, 1]

    def test_request_flags_come_from_first_object(self):
        (request,) = assemble([obj("1", mfa="m", request_payer="requester")])
        kwargs = request.to_kwargs()
        assert kwargs["Bucket"] == "A"
        assert kwargs["MFA"] == "m"
        assert kwargs["RequestPayer"] == "requester"
        assert kwargs["Delete"]["Objects"] == [{"Key": "1"}]

    def test_order_is_preserved(self):
        objects = [obj(str(i)) for i in range(5)]
        requests = assemble(objects, batch_size=2)
        keys = [o.key for r in requests for o in r.objects]
        assert keys == [str(i) for i in range(5)]
        assert [len(r) for r in requests] == [2, 2, 1]

    def test_flush_empty(self):
        assert BatchAssembler().flush() is None
