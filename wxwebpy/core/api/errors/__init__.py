"""Server status errors."""
from .api_errors import RemoteError, RetCodes, LoginRejectedError, SessionTerminatedError

__all__ = [
    'RemoteError',
    'RetCodes',
    'LoginRejectedError',
    'SessionTerminatedError',
]
