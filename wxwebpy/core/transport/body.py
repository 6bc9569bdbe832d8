"""Reply body implementations."""
from typing import Optional

import aiohttp


class BytesBody:
    """In-memory reply body."""

    def __init__(self, data: bytes):
        self._data = data
        self.release_count = 0

    @property
    def released(self) -> bool:
        return self.release_count > 0

    async def read(self) -> bytes:
        return self._data

    def release(self) -> None:
        self.release_count += 1


class AiohttpBody:
    """
    Reply body backed by an unread aiohttp response.

    The connection goes back to the pool on release().
    """

    def __init__(self, response: aiohttp.ClientResponse):
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def url(self) -> str:
        return str(self._response.url)

    def header(self, name: str) -> Optional[str]:
        return self._response.headers.get(name)

    async def read(self) -> bytes:
        return await self._response.read()

    def release(self) -> None:
        self._response.release()
