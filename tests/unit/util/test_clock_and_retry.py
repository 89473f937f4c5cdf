"""Unit tests for the clock and read retry helpers."""

from datetime import datetime, timezone

import pytest

from tally.config import LedgerSettings
from tally.domain.error import ConflictError, StorageUnavailableError
from tally.util.clock import FrozenClock
from tally.util.retry import retry_read

FAST = LedgerSettings(read_retry_attempts=3, read_retry_min_wait=0, read_retry_max_wait=0)


class TestFrozenClock:
    def test_only_moves_when_told(self):
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        clock = FrozenClock(start)

        assert clock.now() == start
        assert clock.advance(hours=2).hour == 2
        clock.set(start)
        assert clock.now() == start


class TestRetryRead:
    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        calls = []

        async def read():
            calls.append(1)
            if len(calls) < 3:
                raise StorageUnavailableError("find_by_id")
            return "value"

        assert await retry_read(read, FAST) == "value"
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_gives_up_after_attempts(self):
        calls = []

        async def read():
            calls.append(1)
            raise StorageUnavailableError("find_by_id")

        with pytest.raises(StorageUnavailableError):
            await retry_read(read, FAST)
        assert len(calls) == 3

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self):
        calls = []

        async def read():
            calls.append(1)
            raise ConflictError("changed")

        with pytest.raises(ConflictError):
            await retry_read(read, FAST)
        assert len(calls) == 1
