"""Tests for ResponseEnvelope."""
import asyncio
from dataclasses import dataclass

import aiohttp
import pytest

from wxwebpy.core.api.response import ResponseEnvelope
from wxwebpy.core.exceptions import TransportError, MissingLocationError, ParseError
from wxwebpy.core.models import LoginInfo, StatusReply
from wxwebpy.core.transport import BytesBody

from conftest import LOGIN_INFO_XML


class FailingBody:
    """Body whose stream breaks while reading."""

    def __init__(self):
        self.release_count = 0

    async def read(self):
        raise aiohttp.ClientPayloadError("connection reset")

    def release(self):
        self.release_count += 1


async def returns(body):
    return body


async def raises(error):
    raise error


@dataclass
class Strict:
    value: int

    @classmethod
    def from_dict(cls, data):
        return cls(value=int(data['value']))


class TestCapture:
    """Test suite for building envelopes from transport calls."""

    @pytest.mark.asyncio
    async def test_capture_body(self):
        """Test a successful call has no error."""
        envelope = await ResponseEnvelope.capture(returns(BytesBody(b'ok')))

        assert envelope.err() is None
        assert await envelope.read_all() == b'ok'

    @pytest.mark.asyncio
    async def test_capture_transport_error(self):
        """Test transport errors are stored, not raised."""
        error = TransportError("boom")
        envelope = await ResponseEnvelope.capture(raises(error))

        assert envelope.err() is error

    @pytest.mark.asyncio
    async def test_capture_keeps_missing_location(self):
        """Test redirect-without-location keeps its type."""
        envelope = await ResponseEnvelope.capture(raises(MissingLocationError("302")))

        assert isinstance(envelope.err(), MissingLocationError)

    @pytest.mark.asyncio
    async def test_capture_wraps_client_error(self):
        """Test aiohttp errors become TransportError."""
        envelope = await ResponseEnvelope.capture(
            raises(aiohttp.ClientConnectionError("refused"))
        )

        assert isinstance(envelope.err(), TransportError)
        assert isinstance(envelope.err().__cause__, aiohttp.ClientConnectionError)

    @pytest.mark.asyncio
    async def test_capture_wraps_timeout(self):
        """Test timeouts become TransportError."""
        envelope = await ResponseEnvelope.capture(raises(asyncio.TimeoutError()))

        assert isinstance(envelope.err(), TransportError)

    @pytest.mark.asyncio
    async def test_decode_raises_stored_error(self):
        """Test decoding a failed call raises the transport error."""
        envelope = await ResponseEnvelope.capture(raises(TransportError("down")))

        with pytest.raises(TransportError, match="down"):
            await envelope.decode_json()


class TestRelease:
    """Test suite for the release-exactly-once contract."""

    @pytest.mark.asyncio
    async def test_released_after_read(self):
        body = BytesBody(b'data')
        envelope = ResponseEnvelope(body)

        await envelope.read_all()
        await envelope.read_all()

        assert body.release_count == 1

    @pytest.mark.asyncio
    async def test_released_after_failed_decode(self):
        body = BytesBody(b'not json')
        envelope = ResponseEnvelope(body)

        with pytest.raises(ParseError):
            await envelope.decode_json()

        assert body.release_count == 1

    @pytest.mark.asyncio
    async def test_released_after_regex_mismatch(self):
        body = BytesBody(b'nothing here')
        envelope = ResponseEnvelope(body)

        with pytest.raises(ParseError):
            await envelope.decode_regex(r'uuid = "(.*?)"', 1)

        assert body.release_count == 1

    @pytest.mark.asyncio
    async def test_released_when_read_fails(self):
        """Test a broken stream is released and reported as TransportError."""
        body = FailingBody()
        envelope = ResponseEnvelope(body)

        with pytest.raises(TransportError):
            await envelope.read_all()

        assert body.release_count == 1

    @pytest.mark.asyncio
    async def test_context_manager_releases_unread_body(self):
        body = BytesBody(b'data')

        async with ResponseEnvelope(body) as envelope:
            assert not envelope.released

        assert body.release_count == 1

    @pytest.mark.asyncio
    async def test_release_is_idempotent(self):
        body = BytesBody(b'data')
        envelope = ResponseEnvelope(body)

        envelope.release()
        envelope.release()

        assert body.release_count == 1


class TestDecodeRegex:
    """Test suite for regex extraction."""

    @pytest.mark.asyncio
    async def test_single_group(self):
        envelope = ResponseEnvelope(BytesBody(b'window.QRLogin.uuid = "abc123"'))

        assert await envelope.decode_regex(r'uuid = "(.*?)"', 1) == ('abc123',)

    @pytest.mark.asyncio
    async def test_two_groups(self):
        envelope = ResponseEnvelope(BytesBody(b'retcode:"0",selector:"2"'))

        groups = await envelope.decode_regex(r'retcode:"(\d+)",selector:"(\d+)"', 2)

        assert groups == ('0', '2')

    @pytest.mark.asyncio
    async def test_group_count_mismatch(self):
        """Test a pattern with the wrong number of groups is rejected."""
        envelope = ResponseEnvelope(BytesBody(b'retcode:"0",selector:"2"'))

        with pytest.raises(ParseError, match="pattern mismatch"):
            await envelope.decode_regex(r'retcode:"(\d+)",selector:"(\d+)"', 1)

    @pytest.mark.asyncio
    async def test_no_match(self):
        envelope = ResponseEnvelope(BytesBody(b'<html>blocked</html>'))

        with pytest.raises(ParseError, match="pattern mismatch") as exc_info:
            await envelope.decode_regex(r'uuid = "(.*?)"', 1)

        assert exc_info.value.payload == b'<html>blocked</html>'

    @pytest.mark.asyncio
    async def test_several_matches(self):
        """Test an ambiguous body is rejected rather than picking one match."""
        envelope = ResponseEnvelope(BytesBody(b'uuid = "a"; uuid = "b";'))

        with pytest.raises(ParseError):
            await envelope.decode_regex(r'uuid = "(.*?)"', 1)


class TestDecodeJSON:
    """Test suite for JSON decoding."""

    @pytest.mark.asyncio
    async def test_decode_model(self):
        envelope = ResponseEnvelope(BytesBody(b'{"BaseResponse": {"Ret": 1205, "ErrMsg": "slow"}}'))

        reply = await envelope.decode_json(StatusReply)

        assert reply.base_response.ret == 1205
        assert reply.base_response.err_msg == "slow"

    @pytest.mark.asyncio
    async def test_decode_raw_dict(self):
        envelope = ResponseEnvelope(BytesBody(b'{"a": 1}'))

        assert await envelope.decode_json() == {'a': 1}

    @pytest.mark.asyncio
    async def test_malformed_json(self):
        envelope = ResponseEnvelope(BytesBody(b'{"a": '))

        with pytest.raises(ParseError, match="invalid JSON"):
            await envelope.decode_json(StatusReply)

    @pytest.mark.asyncio
    async def test_non_object_json(self):
        envelope = ResponseEnvelope(BytesBody(b'[1, 2]'))

        with pytest.raises(ParseError, match="not an object"):
            await envelope.decode_json(StatusReply)

    @pytest.mark.asyncio
    async def test_shape_mismatch(self):
        """Test a payload that does not fit the model is a ParseError."""
        envelope = ResponseEnvelope(BytesBody(b'{"value": "x"}'))

        with pytest.raises(ParseError, match="unexpected JSON shape"):
            await envelope.decode_json(Strict)


class TestDecodeXML:
    """Test suite for XML decoding."""

    @pytest.mark.asyncio
    async def test_decode_login_info(self):
        envelope = ResponseEnvelope(BytesBody(LOGIN_INFO_XML))

        info = await envelope.decode_xml(LoginInfo)

        assert info.ok()
        assert info.skey == '@crypt_skey'
        assert info.wxsid == 'sid123'
        assert info.wxuin == 123456

    @pytest.mark.asyncio
    async def test_malformed_xml(self):
        envelope = ResponseEnvelope(BytesBody(b'<error><ret>0</ret>'))

        with pytest.raises(ParseError, match="invalid XML"):
            await envelope.decode_xml(LoginInfo)

    @pytest.mark.asyncio
    async def test_non_numeric_field(self):
        envelope = ResponseEnvelope(BytesBody(b'<error><ret>zero</ret></error>'))

        with pytest.raises(ParseError, match="unexpected XML shape"):
            await envelope.decode_xml(LoginInfo)

    @pytest.mark.asyncio
    async def test_document_without_ret(self):
        envelope = ResponseEnvelope(BytesBody(b'<html><body/></html>'))

        with pytest.raises(ParseError, match="unexpected XML shape"):
            await envelope.decode_xml(LoginInfo)
