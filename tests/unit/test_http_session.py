"""Tests for HTTPSession and reply bodies."""
import asyncio
from unittest.mock import Mock, AsyncMock

import aiohttp
import pytest

from wxwebpy.core.api.config import ClientConfig, ProxyConfig
from wxwebpy.core.api.response import ResponseEnvelope
from wxwebpy.core.exceptions import TransportError, MissingLocationError
from wxwebpy.core.transport import HTTPSession, PreparedRequest, BytesBody, ResponseBody
from wxwebpy.core.transport.body import AiohttpBody


def mock_response(status=200, headers=None, body=b'{}'):
    response = Mock()
    response.status = status
    response.headers = headers or {}
    response.url = 'https://wx2.qq.com/cgi-bin/mmwebwx-bin/webwxinit'
    response.read = AsyncMock(return_value=body)
    response.release = Mock()
    return response


def http_with(response=None, error=None, config=None):
    """HTTPSession whose aiohttp session is a mock."""
    http = HTTPSession(config)
    session = Mock()
    session.closed = False
    session.close = AsyncMock()
    if error is not None:
        session.request = AsyncMock(side_effect=error)
    else:
        session.request = AsyncMock(return_value=response)
    http._session = session
    return http, session


REQUEST = PreparedRequest('POST', 'https://wx2.qq.com/cgi-bin/mmwebwx-bin/webwxinit', json={'a': 1})


class TestSend:
    """Test suite for HTTPSession.send."""

    @pytest.mark.asyncio
    async def test_returns_unread_body(self):
        response = mock_response(body=b'{"BaseResponse": {"Ret": 0}}')
        http, session = http_with(response)

        body = await http.send(REQUEST)

        assert isinstance(body, AiohttpBody)
        assert body.status == 200
        response.read.assert_not_called()
        assert await body.read() == b'{"BaseResponse": {"Ret": 0}}'

    @pytest.mark.asyncio
    async def test_request_arguments(self):
        http, session = http_with(mock_response())

        await http.send(REQUEST)

        args, kwargs = session.request.call_args
        assert args == ('POST', REQUEST.url)
        assert kwargs['json'] == {'a': 1}
        assert kwargs['allow_redirects'] is True
        assert kwargs['proxy'] is None

    @pytest.mark.asyncio
    async def test_data_wins_over_json(self):
        http, session = http_with(mock_response())

        await http.send(PreparedRequest('POST', REQUEST.url, data=b'raw', json={'a': 1}))

        _, kwargs = session.request.call_args
        assert kwargs['data'] == b'raw'
        assert kwargs['json'] is None

    @pytest.mark.asyncio
    async def test_proxy_passed(self):
        config = ClientConfig(proxy=ProxyConfig('http://proxy:8080', 'u', 'p'))
        http, session = http_with(mock_response(), config=config)

        await http.send(REQUEST)

        assert session.request.call_args[1]['proxy'] == 'http://u:p@proxy:8080'

    @pytest.mark.asyncio
    async def test_redirect_without_location(self):
        """Test a bare redirect is reported as MissingLocationError."""
        response = mock_response(status=301)
        http, _ = http_with(response)

        with pytest.raises(MissingLocationError):
            await http.send(PreparedRequest('GET', REQUEST.url, allow_redirects=False))

        response.release.assert_called_once()

    @pytest.mark.asyncio
    async def test_redirect_with_location(self):
        response = mock_response(status=302, headers={'Location': 'https://wx2.qq.com/'})
        http, _ = http_with(response)

        body = await http.send(PreparedRequest('GET', REQUEST.url, allow_redirects=False))

        assert body.header('Location') == 'https://wx2.qq.com/'

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        response = mock_response(status=503)
        http, _ = http_with(response)

        with pytest.raises(TransportError, match="503"):
            await http.send(REQUEST)

        response.release.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("error", [
        aiohttp.ClientConnectionError("refused"),
        asyncio.TimeoutError(),
    ])
    async def test_network_errors(self, error):
        http, _ = http_with(error=error)

        with pytest.raises(TransportError) as exc_info:
            await http.send(REQUEST)

        assert exc_info.value.retryable
        assert exc_info.value.__cause__ is error

    @pytest.mark.asyncio
    async def test_close(self):
        http, session = http_with(mock_response())

        await http.close()

        session.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_envelope_releases_aiohttp_body(self):
        response = mock_response(body=b'{"BaseResponse": {"Ret": 0}}')
        http, _ = http_with(response)

        envelope = await ResponseEnvelope.capture(http.send(REQUEST))
        await envelope.decode_json()

        response.release.assert_called_once()


class TestBodies:
    """Test suite for body implementations."""

    def test_bodies_satisfy_protocol(self):
        assert isinstance(BytesBody(b''), ResponseBody)
        assert isinstance(AiohttpBody(mock_response()), ResponseBody)

    @pytest.mark.asyncio
    async def test_bytes_body(self):
        body = BytesBody(b'data')

        assert await body.read() == b'data'
        assert not body.released
        body.release()
        assert body.released
