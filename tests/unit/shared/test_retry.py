from unittest.mock import AsyncMock, MagicMock

import pytest

from shared.utils.retry import Backoff, retry_async




NO_WAIT = Backoff(base_delay=0, jitter=0)


def test_backoff_delays_double_up_to_cap():
    backoff = Backoff(base_delay=0.5, max_delay=1.5, jitter=0)

    assert list(backoff.delays(5)) == [0.5, 1.0, 1.5, 1.5]
    assert list(backoff.delays(1)) == []


async def test_retry_until_success():
    func = AsyncMock(side_effect=[ConnectionError("a"), ConnectionError("b"), "ok"])
    on_retry = MagicMock()

    result = await retry_async(func, retries=3, backoff=NO_WAIT, on_retry=on_retry)

    assert result == "ok"
    assert func.await_count == 3
    assert [c.args[0] for c in on_retry.call_args_list] == [1, 2]


async def test_retry_reraises_last_error():
    func = AsyncMock(side_effect=ConnectionError("down"))

    with pytest.raises(ConnectionError):
        await retry_async(func, retries=2, backoff=NO_WAIT)
    assert func.await_count == 2


async def test_non_retryable_error_propagates_immediately():
    func = AsyncMock(side_effect=KeyError("x"))

    with pytest.raises(KeyError):
        await retry_async(func, retries=5, backoff=NO_WAIT, retry_on=(ConnectionError,))
    assert func.await_count == 1
