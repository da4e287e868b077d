"""
Tests for partial-failure batch helpers.
"""

from randonneurs.shared.batch import map_with_partial_failure
from randonneurs.shared.errors import EmailDeliveryError


async def double_unless_odd(n: int) -> int:
    if n % 2:
        raise EmailDeliveryError(f"odd {n}")
    return n * 2


class TestMapWithPartialFailure:
    async def test_all_succeed(self):
        batch = await map_with_partial_failure([2, 4], double_unless_odd)
        assert batch.succeeded == [4, 8]
        assert batch.ok

    async def test_failures_do_not_stop_the_batch(self):
        batch = await map_with_partial_failure(
            [1, 2, 3, 4], double_unless_odd, describe=lambda n: f"item {n}"
        )

        assert batch.succeeded == [4, 8]
        assert [f.item for f in batch.failed] == [1, 3]
        assert batch.error_messages == ["item 1: odd 1", "item 3: odd 3"]
        assert not batch.ok

    async def test_unexpected_exceptions_are_collected(self):
        async def boom(n):
            raise RuntimeError("kaboom")

        batch = await map_with_partial_failure([1], boom, describe=lambda n: "Failed")
        assert batch.error_messages == ["Failed: kaboom"]

    async def test_empty(self):
        batch = await map_with_partial_failure([], double_unless_odd)
        assert batch.succeeded == [] and batch.failed == []
