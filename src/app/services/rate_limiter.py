from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class RateLimitPolicy:
    """Sliding window policy: at most max_requests per window_seconds per key"""

    max_requests: int
    window_seconds: float
    key_prefix: str = ""


LOGIN_POLICY = RateLimitPolicy(max_requests=5, window_seconds=60, key_prefix="login:")
PASSWORD_RESET_POLICY = RateLimitPolicy(
    max_requests=1, window_seconds=300, key_prefix="password_reset:"
)


class IRateLimiter(ABC):
    """Per-key request limiter - application layer"""

    @abstractmethod
    def allow(self, key: str) -> bool:
        """Record a request for the key if it is within the limit"""
        pass

    @abstractmethod
    def reset(self, key: str) -> None:
        """Forget all recorded requests for the key"""
        pass

    @abstractmethod
    def get_remaining(self, key: str) -> int:
        """Requests still allowed in the current window"""
        pass

    @abstractmethod
    def get_reset_time(self, key: str) -> datetime:
        """When the oldest recorded request leaves the window"""
        pass

    @abstractmethod
    def retry_after(self, key: str) -> int:
        """Whole seconds until the next request for the key may be allowed"""
        pass

    def close(self) -> None:
        """Release background resources, if any"""
