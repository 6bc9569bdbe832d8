"""Message sending."""
from .dispatch import MessageDispatcher

__all__ = [
    'MessageDispatcher',
]
