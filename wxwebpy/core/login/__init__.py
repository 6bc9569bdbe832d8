"""Login handshake and session state."""
from .handshake import LoginHandshake, HandshakeState, QR_CODE_URL
from .session import Session

__all__ = [
    'LoginHandshake',
    'HandshakeState',
    'QR_CODE_URL',
    'Session',
]
