"""Sync check polling."""
from .poller import SyncPoller

__all__ = [
    'SyncPoller',
]
