"""Reply decoding and status classification."""
from .envelope import ResponseEnvelope
from .classifier import HasStatus, classify, raise_for_status

__all__ = [
    'ResponseEnvelope',
    'HasStatus',
    'classify',
    'raise_for_status',
]
