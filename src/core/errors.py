from enum import Enum
from typing import List, Optional


class AssistantError(Exception):
    """Base class for assistant orchestration errors"""


class ConfigurationError(AssistantError):
    """
    The selected provider cannot be constructed (unknown name or missing credential).

    This is a setup problem, not a transient one, so it is the only error allowed
    to leave the assistant service.
    """

    def __init__(self, message: str, available_providers: Optional[List[str]] = None, provider: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.available_providers = list(available_providers or [])
        self.provider = provider


class InvocationKind(str, Enum):
    OVERLOADED_EXHAUSTED = "overloaded-exhausted"
    AUTH = "auth"
    QUOTA = "quota"
    OTHER = "other"


class InvocationError(AssistantError):
    """Raised by the model invoker after retries are exhausted or on a fatal failure"""

    def __init__(self, kind: InvocationKind, message: str = "", attempts: int = 1):
        super().__init__(message or kind.value)
        self.kind = InvocationKind(kind)
        self.message = message
        self.attempts = attempts

    @property
    def http_kind(self) -> str:
        """Discriminator exposed to HTTP callers: auth, quota, overloaded or other"""
        if self.kind == InvocationKind.OVERLOADED_EXHAUSTED:
            return "overloaded"
        return self.kind.value


class ParseError(AssistantError):
    """Model output did not contain a decodable structured result"""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.raw = raw
