"""Tests for status classification."""
import pytest

from wxwebpy.core.api.errors import RemoteError, RetCodes
from wxwebpy.core.api.response import HasStatus, classify, raise_for_status
from wxwebpy.core.models import (
    BaseResponse,
    StatusReply,
    MessageResponse,
    UploadResponse,
    ContactListResponse,
)


class TestClassify:
    """Test suite for classify()."""

    def test_success_returns_none(self):
        assert classify(StatusReply(BaseResponse(ret=0))) is None

    @pytest.mark.parametrize("code,message", [
        (1, "param error"),
        (-14, ""),
        (1101, "logged in elsewhere"),
        (1205, ""),
        (42, "something new"),
    ])
    def test_failure_carries_code_and_message(self, code, message):
        """Test every non-zero code produces an error."""
        error = classify(StatusReply(BaseResponse(ret=code, err_msg=message)))

        assert isinstance(error, RemoteError)
        assert error.code == code
        assert error.message == (message or RetCodes.get_message(code))

    def test_known_code_default_message(self):
        error = classify(StatusReply(BaseResponse(ret=RetCodes.OPT_TOO_OFTEN)))

        assert 'too frequent' in error.message

    def test_unknown_code_default_message(self):
        error = classify(StatusReply(BaseResponse(ret=777)))

        assert error.message == "Unknown error: 777"

    def test_any_reply_shape(self):
        """Test classification works on every model with a base_response."""
        failing = BaseResponse(ret=1)
        replies = [
            MessageResponse(base_response=failing, msg_id='1'),
            UploadResponse(base_response=failing, media_id='m'),
            ContactListResponse(base_response=failing, member_list=[]),
        ]

        for reply in replies:
            assert isinstance(reply, HasStatus)
            assert classify(reply).code == 1


class TestRaiseForStatus:
    """Test suite for raise_for_status()."""

    def test_success_does_not_raise(self):
        raise_for_status(StatusReply(BaseResponse(ret=0)))

    def test_failure_raises(self):
        with pytest.raises(RemoteError) as exc_info:
            raise_for_status(StatusReply(BaseResponse(ret=1102, err_msg="cookie invalid")))

        assert exc_info.value.code == 1102
        assert not exc_info.value.retryable

    def test_decoded_from_json(self):
        reply = StatusReply.from_dict({'BaseResponse': {'Ret': '1100', 'ErrMsg': ''}})

        with pytest.raises(RemoteError) as exc_info:
            raise_for_status(reply)

        assert exc_info.value.code == 1100
