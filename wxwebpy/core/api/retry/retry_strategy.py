"""Retry strategies using Strategy Pattern."""
import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from ..config import RetryConfig


class RetryStrategy(ABC):
    """Abstract retry strategy."""
    
    @abstractmethod
    def should_retry(self, error: BaseException, retry_count: int) -> bool:
        """Determines if the failed call should be retried."""
        pass
    
    @abstractmethod
    def get_delay(self, retry_count: int) -> float:
        """Seconds to wait before the given retry."""
        pass

    async def wait(self, retry_count: int):
        """Waits before retry."""
        await asyncio.sleep(self.get_delay(retry_count))


class ExponentialBackoffStrategy(RetryStrategy):
    """Exponential backoff on retryable errors (transport failures)."""
    
    def __init__(self, config: Optional[RetryConfig] = None):
        self._config = config or RetryConfig()
    
    @property
    def max_retries(self) -> int:
        return self._config.max_retries
    
    def should_retry(self, error: BaseException, retry_count: int) -> bool:
        """Retries errors flagged retryable, up to max_retries times."""
        return getattr(error, 'retryable', False) and retry_count < self._config.max_retries
    
    def get_delay(self, retry_count: int) -> float:
        return self._config.calculate_delay(retry_count)
