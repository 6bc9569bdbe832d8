"""
wxwebpy - Async Python client for the web messaging login and IM API.

Usage:
    >>> from wxwebpy import WebWxClient
    >>>
    >>> async with WebWxClient(transport) as client:
    ...     await client.login(on_uuid=lambda uuid, url: print(url))
    ...     await client.send_text('filehelper', 'hello')
"""
import logging
from .client import WebWxClient

# Configuration
from .core.api import (
    ClientConfig,
    HandshakeConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    RetryConfig,
    Caller,
    ResponseEnvelope,
    classify,
    raise_for_status,
    RemoteError,
    RetCodes,
    LoginRejectedError,
    SessionTerminatedError,
)
from .core.exceptions import (
    WebWxError,
    TransportError,
    MissingLocationError,
    ParseError,
    ProtocolError,
    QRCodeExpiredError,
    LoginForbiddenError,
    UploadError,
)
from .core.login import LoginHandshake, HandshakeState, Session
from .core.messages import MessageDispatcher
from .core.sync import SyncPoller
from .core.transport import Transport, ResponseBody, BytesBody, HTTPSession, PreparedRequest

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for wxwebpy modules.

    Args:
        level: Logging level (default: logging.INFO)
    """
    loggers = [
        'wxwebpy',
        'wxwebpy.client',
        'wxwebpy.login',
        'wxwebpy.sync',
        'wxwebpy.messages',
        'wxwebpy.transport',
        'wxwebpy.api.caller',
        'wxwebpy.api.response',
    ]

    for logger_name in loggers:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'WebWxClient',
    'LoginHandshake',
    'HandshakeState',
    'Session',
    'SyncPoller',
    'MessageDispatcher',
    'Caller',
    'ResponseEnvelope',
    'classify',
    'raise_for_status',
    'Transport',
    'ResponseBody',
    'BytesBody',
    'HTTPSession',
    'PreparedRequest',
    'ClientConfig',
    'HandshakeConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'RetryConfig',
    'WebWxError',
    'TransportError',
    'MissingLocationError',
    'ParseError',
    'ProtocolError',
    'QRCodeExpiredError',
    'LoginForbiddenError',
    'UploadError',
    'RemoteError',
    'RetCodes',
    'LoginRejectedError',
    'SessionTerminatedError',
    'setup_logging',
]
