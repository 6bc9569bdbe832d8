"""Web API module: configuration, errors, reply decoding and vendor operations."""
from .config import (
    ClientConfig,
    HandshakeConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
)
from .errors import RemoteError, RetCodes, LoginRejectedError, SessionTerminatedError
from .events import EventEmitter
from .retry import RetryStrategy, ExponentialBackoffStrategy
from .response import ResponseEnvelope, HasStatus, classify, raise_for_status
from .caller import Caller

__all__ = [
    # Operations
    'Caller',
    
    # Replies
    'ResponseEnvelope',
    'HasStatus',
    'classify',
    'raise_for_status',
    
    # Configuration
    'ClientConfig',
    'HandshakeConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    
    # Errors
    'RemoteError',
    'RetCodes',
    'LoginRejectedError',
    'SessionTerminatedError',
    
    # Events and retries
    'EventEmitter',
    'RetryStrategy',
    'ExponentialBackoffStrategy',
]
