"""Transport layer: the Transport protocol and an aiohttp request executor."""
from .protocols import Transport, ResponseBody
from .body import BytesBody, AiohttpBody
from .http import HTTPSession, PreparedRequest

__all__ = [
    'Transport',
    'ResponseBody',
    'BytesBody',
    'AiohttpBody',
    'HTTPSession',
    'PreparedRequest',
]
