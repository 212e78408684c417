import asyncio
import pytest
from unittest.mock import AsyncMock

from src.core.agents.invoker import ModelInvoker, classify_failure
from src.core.errors import InvocationError, InvocationKind


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


@pytest.mark.asyncio
async def test_returns_text_on_first_success(invoker, mock_provider, sleep_recorder):
    mock_provider.generate.return_value = '{"ok": true}'

    assert await invoker.invoke(mock_provider, "prompt") == '{"ok": true}'
    mock_provider.generate.assert_awaited_once_with("prompt")
    sleep_recorder.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("failures", [1, 2])
async def test_retries_overload_with_increasing_backoff(invoker, mock_provider, sleep_recorder, overloaded_error, failures):
    mock_provider.generate.side_effect = [overloaded_error] * failures + ["done"]

    result = await invoker.invoke(mock_provider, "prompt")

    assert result == "done"
    assert mock_provider.generate.await_count == failures + 1
    delays = [call.args[0] for call in sleep_recorder.await_args_list]
    assert delays == [2.0 * n for n in range(1, failures + 1)]
    assert all(a < b for a, b in zip(delays, delays[1:]))


@pytest.mark.asyncio
async def test_overload_exhausts_after_three_attempts(invoker, mock_provider, sleep_recorder, overloaded_error):
    mock_provider.generate.side_effect = [overloaded_error] * 5

    with pytest.raises(InvocationError) as exc_info:
        await invoker.invoke(mock_provider, "prompt")

    assert exc_info.value.kind == InvocationKind.OVERLOADED_EXHAUSTED
    assert exc_info.value.http_kind == "overloaded"
    assert exc_info.value.attempts == 3
    assert mock_provider.generate.await_count == 3
    assert [call.args[0] for call in sleep_recorder.await_args_list] == [2.0, 4.0]


@pytest.mark.asyncio
@pytest.mark.parametrize("error, kind", [
    (StatusError("Invalid API key provided", 401), InvocationKind.AUTH),
    (StatusError("Forbidden", 403), InvocationKind.AUTH),
    (StatusError("Too many requests", 429), InvocationKind.QUOTA),
    (Exception("You exceeded your current quota"), InvocationKind.QUOTA),
    (StatusError("Bad request: prompt too long", 400), InvocationKind.OTHER),
    (ValueError("unexpected response"), InvocationKind.OTHER),
])
async def test_fatal_failures_are_not_retried(invoker, mock_provider, sleep_recorder, error, kind):
    mock_provider.generate.side_effect = error

    with pytest.raises(InvocationError) as exc_info:
        await invoker.invoke(mock_provider, "prompt")

    assert exc_info.value.kind == kind
    assert mock_provider.generate.await_count == 1
    sleep_recorder.assert_not_awaited()


@pytest.mark.asyncio
async def test_timeout_counts_as_overload(mock_provider, sleep_recorder):
    async def slow(_prompt):
        await asyncio.sleep(1)
        return "late"

    mock_provider.generate.side_effect = slow
    invoker = ModelInvoker(max_attempts=2, base_delay=0.5, timeout=0.01, sleep=sleep_recorder)

    with pytest.raises(InvocationError) as exc_info:
        await invoker.invoke(mock_provider, "prompt")

    assert exc_info.value.kind == InvocationKind.OVERLOADED_EXHAUSTED
    assert mock_provider.generate.await_count == 2


def test_classify_failure_by_code_attribute():
    class GenAIError(Exception):
        def __init__(self, code):
            super().__init__("UNAVAILABLE")
            self.code = code

    assert classify_failure(GenAIError(503)) == "overloaded"
    assert classify_failure(StatusError("overloaded_error", 529)) == "overloaded"
    assert classify_failure(Exception("The service is currently unavailable")) == "overloaded"
    assert classify_failure(StatusError("Internal error", 500)) == "other"


def test_rejects_zero_attempts():
    with pytest.raises(ValueError):
        ModelInvoker(max_attempts=0, sleep=AsyncMock())
