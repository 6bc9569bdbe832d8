"""
Response envelope.

Wraps one transport result (a reply body, or the error raised while
getting it) and decodes it. The body is released exactly once, whichever
decode path runs and whether or not it succeeds.
"""
import re
import json
import asyncio
from typing import Optional, Awaitable, Tuple, Type, TypeVar, Any, Union, Pattern

import aiohttp
from lxml import etree

from ...exceptions import TransportError, ParseError
from ...logging import get_logger, preview
from ...transport.protocols import ResponseBody


T = TypeVar('T')

logger = get_logger('wxwebpy.api.response')


class ResponseEnvelope:
    """
    One transport result plus decode helpers.

    Example:
        >>> envelope = await ResponseEnvelope.capture(transport.get_login_uuid())
        >>> (uuid,) = await envelope.decode_regex(UUID_PATTERN, 1)
    """

    def __init__(
        self,
        body: Optional[ResponseBody] = None,
        error: Optional[TransportError] = None
    ):
        """
        Initialize envelope.

        Args:
            body: Unread reply body
            error: Transport failure (takes precedence over body)
        """
        self._body = body
        self._error = error
        self._data: Optional[bytes] = None
        self._released = False

    @classmethod
    async def capture(cls, call: Awaitable[ResponseBody]) -> 'ResponseEnvelope':
        """
        Await a transport call and wrap its outcome.

        Network failures are stored on the envelope instead of being raised.
        """
        try:
            body = await call
        except TransportError as e:
            return cls(error=e)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            error = TransportError(f"Network error: {e}")
            error.__cause__ = e
            return cls(error=error)
        return cls(body=body)

    def err(self) -> Optional[TransportError]:
        """Returns the transport error, if the call failed."""
        return self._error

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        """Release the body (no-op after the first call)."""
        if self._released:
            return
        self._released = True
        if self._body is not None:
            self._body.release()

    async def __aenter__(self) -> 'ResponseEnvelope':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.release()

    async def read_all(self) -> bytes:
        """
        Read the whole body.

        Returns:
            Raw reply bytes

        Raises:
            TransportError: If the call failed or the body could not be drained
        """
        if self._error is not None:
            self.release()
            raise self._error
        if self._data is not None:
            return self._data
        if self._body is None:
            raise TransportError("no response body")

        try:
            self._data = await self._body.read()
        except TransportError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(f"failed to read response: {e}") from e
        finally:
            self.release()

        logger.debug(f"Response data: {preview(self._data)}")
        return self._data

    async def decode_regex(
        self,
        pattern: Union[str, Pattern],
        expected_groups: int
    ) -> Tuple[str, ...]:
        """
        Extract fields from a free-form body.

        The pattern must match exactly once and yield exactly
        expected_groups capture groups.

        Raises:
            ParseError: On no match, several matches or a group count mismatch
        """
        data = await self.read_all()
        regex = re.compile(pattern) if isinstance(pattern, str) else pattern
        text = data.decode('utf-8', errors='replace')

        matches = list(regex.finditer(text))
        if len(matches) != 1:
            raise ParseError("pattern mismatch", payload=data)

        groups = matches[0].groups()
        if len(groups) != expected_groups or any(g is None for g in groups):
            raise ParseError("pattern mismatch", payload=data)

        return groups

    async def decode_json(self, model: Optional[Type[T]] = None) -> Any:
        """
        Decode a JSON object body.

        Args:
            model: Class with a from_dict() constructor; the raw dict is
                returned when not given

        Raises:
            ParseError: If the body is not a JSON object or does not fit the model
        """
        data = await self.read_all()
        try:
            obj = json.loads(data)
        except ValueError as e:
            raise ParseError(f"invalid JSON: {e}", payload=data) from e

        if not isinstance(obj, dict):
            raise ParseError("JSON reply is not an object", payload=data)

        if model is None:
            return obj

        try:
            return model.from_dict(obj)
        except (TypeError, ValueError, AttributeError) as e:
            raise ParseError(f"unexpected JSON shape: {e}", payload=data) from e

    async def decode_xml(self, model: Type[T]) -> T:
        """
        Decode an XML body.

        Args:
            model: Class with a from_xml() constructor taking the root element

        Raises:
            ParseError: If the body is not well-formed or does not fit the model
        """
        data = await self.read_all()
        try:
            root = etree.fromstring(data)
        except (etree.XMLSyntaxError, ValueError) as e:
            raise ParseError(f"invalid XML: {e}", payload=data) from e

        try:
            return model.from_xml(root)
        except (TypeError, ValueError, AttributeError) as e:
            raise ParseError(f"unexpected XML shape: {e}", payload=data) from e
