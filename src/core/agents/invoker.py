import asyncio
from typing import Awaitable, Callable, Optional

from src.core.errors import InvocationError, InvocationKind
from src.core.providers.base import BaseProvider
from src.utils.logger import get_logger

OVERLOADED = "overloaded"
AUTH = "auth"
QUOTA = "quota"
OTHER = "other"

_OVERLOAD_STATUS = {503, 529}
_AUTH_STATUS = {401, 403}
_QUOTA_STATUS = {429}

_OVERLOAD_MARKERS = ("service unavailable", "overloaded", "503", "unavailable", "try again later")
_AUTH_MARKERS = ("api key", "api_key", "unauthorized", "permission denied", "authentication")
_QUOTA_MARKERS = ("quota", "rate limit", "rate_limit", "too many requests", "resource_exhausted", "429")


def _status_code(error: BaseException) -> Optional[int]:
    # openai/anthropic expose status_code, google-genai exposes code
    for attr in ("status_code", "code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def classify_failure(error: BaseException) -> str:
    """Map a provider exception onto overloaded, auth, quota or other"""
    if isinstance(error, asyncio.TimeoutError):
        return OVERLOADED

    status = _status_code(error)
    if status in _OVERLOAD_STATUS:
        return OVERLOADED
    if status in _AUTH_STATUS:
        return AUTH
    if status in _QUOTA_STATUS:
        return QUOTA

    message = str(error).lower()
    if any(marker in message for marker in _AUTH_MARKERS):
        return AUTH
    if any(marker in message for marker in _QUOTA_MARKERS):
        return QUOTA
    if status is None and any(marker in message for marker in _OVERLOAD_MARKERS):
        return OVERLOADED
    return OTHER


class ModelInvoker:
    """
    Calls a provider with bounded retries on transient overload.

    Attempt ``n`` that fails with an overload signal is followed by a sleep of
    ``base_delay * n`` seconds before the next attempt, up to ``max_attempts``
    attempts in total. Any other failure is raised immediately.
    """

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 2.0,
        timeout: Optional[float] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.timeout = timeout
        self._sleep = sleep
        self.logger = get_logger(self.__class__.__name__)

    def backoff_delay(self, attempt: int) -> float:
        return self.base_delay * attempt

    async def _call(self, provider: BaseProvider, prompt: str) -> str:
        if self.timeout:
            return await asyncio.wait_for(provider.generate(prompt), timeout=self.timeout)
        return await provider.generate(prompt)

    async def invoke(self, provider: BaseProvider, prompt: str) -> str:
        last_error: Optional[BaseException] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._call(provider, prompt)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                last_error = e
                kind = classify_failure(e)

                if kind == AUTH:
                    self.logger.error(f"{provider.display_name} rejected credentials: {e}")
                    raise InvocationError(InvocationKind.AUTH, str(e), attempts=attempt) from e
                if kind == QUOTA:
                    self.logger.warning(f"{provider.display_name} quota exceeded: {e}")
                    raise InvocationError(InvocationKind.QUOTA, str(e), attempts=attempt) from e
                if kind == OTHER:
                    self.logger.error(f"{provider.display_name} call failed: {e}")
                    raise InvocationError(InvocationKind.OTHER, str(e), attempts=attempt) from e

                if attempt < self.max_attempts:
                    delay = self.backoff_delay(attempt)
                    self.logger.warning(
                        f"{provider.display_name} overloaded (attempt {attempt}/{self.max_attempts}), "
                        f"retrying in {delay:.1f}s"
                    )
                    await self._sleep(delay)

        self.logger.error(f"{provider.display_name} still overloaded after {self.max_attempts} attempts")
        raise InvocationError(
            InvocationKind.OVERLOADED_EXHAUSTED,
            str(last_error) if last_error else "",
            attempts=self.max_attempts,
        ) from last_error
