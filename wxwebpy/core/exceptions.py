"""
Exceptions for web login and messaging operations.

Every error raised by wxwebpy derives from WebWxError. The class flags
tell callers what to do next:

- retryable: the same call may succeed later (network trouble)
- restart_handshake: the session is gone, login must start over from a new UUID

Errors that do not set either flag should not be retried as-is.
"""
from typing import Optional, Any


class WebWxError(Exception):
    """Base exception for all wxwebpy errors."""

    retryable = False
    restart_handshake = False

    # Partial result of a send that failed (see MessageDispatcher.send)
    sent_message: Optional[Any] = None


class TransportError(WebWxError, IOError):
    """Network or I/O failure while talking to the server."""

    retryable = True


class MissingLocationError(TransportError):
    """
    A redirect reply came back without a Location header.

    Raised by transports so the login flow can tell an account
    restriction apart from an ordinary network failure.
    """

    retryable = False


class ParseError(WebWxError, ValueError):
    """
    Reply payload did not have the expected shape.

    Usually means the vendor changed its reply format, or the
    current IP address was blocked and got a different page back.
    """

    def __init__(self, message: str, payload: Optional[bytes] = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            payload: Raw reply that failed to parse (if available)
        """
        self.payload = payload
        super().__init__(message)


class ProtocolError(ParseError):
    """A login handshake invariant was violated."""


class QRCodeExpiredError(ProtocolError):
    """The QR code expired before it was confirmed on the phone."""

    restart_handshake = True


class LoginForbiddenError(WebWxError):
    """
    Login was refused for this account.

    The redirect to the login page was answered without a location,
    which the server does for accounts that may not use web login.
    """

    def __init__(self, message: str = "login forbidden") -> None:
        super().__init__(message)


class UploadError(WebWxError):
    """Media upload reported success but returned no media id."""

    def __init__(self, message: str = "upload failed", response: Any = None) -> None:
        """
        Initialize the exception.

        Args:
            message: Error message
            response: Decoded upload response (if available)
        """
        self.response = response
        super().__init__(message)
