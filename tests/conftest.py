"""Pytest fixtures for wxwebpy tests."""
import json
from collections import defaultdict, deque

import pytest

from wxwebpy.core.api import Caller
from wxwebpy.core.login import Session
from wxwebpy.core.models import LoginInfo, WechatDomain, WebInitResponse
from wxwebpy.core.transport import BytesBody


UUID_BODY = b'window.QRLogin.code = 200; window.QRLogin.uuid = "abc123";'
WAITING_BODY = b'window.code=408;'
SCANNED_BODY = b"window.code=201;window.userAvatar = 'data:img/jpg;base64,AAAA';"
EXPIRED_BODY = b'window.code=400;'
CONFIRMED_BODY = (
    b'window.code=200;\n'
    b'window.redirect_uri="https://wx2.qq.com/cgi-bin/mmwebwx-bin/webwxnewloginpage'
    b'?ticket=T123&uuid=abc123&lang=zh_CN&scan=1700000000";'
)
LOGIN_INFO_XML = (
    b'<error><ret>0</ret><message></message><skey>@crypt_skey</skey>'
    b'<wxsid>sid123</wxsid><wxuin>123456</wxuin><pass_ticket>ticket%2B1</pass_ticket>'
    b'<isgrayscale>1</isgrayscale></error>'
)
REJECTED_LOGIN_XML = (
    '<error><ret>1203</ret><message>login environment abnormal</message></error>'
).encode()


def web_init_payload(**overrides):
    payload = {
        'BaseResponse': {'Ret': 0, 'ErrMsg': ''},
        'User': {'UserName': '@me', 'NickName': 'Me', 'Uin': 123456},
        'SyncKey': {'Count': 2, 'List': [{'Key': 1, 'Val': 100}, {'Key': 2, 'Val': 200}]},
        'ContactList': [{'UserName': 'filehelper', 'NickName': 'File Transfer'}],
        'SKey': '@crypt_skey',
        'ChatSet': 'filehelper,',
    }
    payload.update(overrides)
    return payload


def status_payload(ret=0, err_msg=''):
    return {'BaseResponse': {'Ret': ret, 'ErrMsg': err_msg}}


class FakeTransport:
    """
    Transport fed with canned replies.

    Replies are queued per method and consumed in order. A reply may be
    bytes, str, a dict (sent as JSON) or an exception to raise.
    """

    def __init__(self):
        self.replies = defaultdict(deque)
        self.calls = []
        self.bodies = []

    def queue(self, method, *replies):
        self.replies[method].extend(replies)
        return self

    def called(self, method):
        return sum(1 for name, _ in self.calls if name == method)

    def args(self, method, index=-1):
        return [args for name, args in self.calls if name == method][index]

    async def _reply(self, method, *args):
        self.calls.append((method, args))
        queue = self.replies[method]
        if not queue:
            raise AssertionError(f"unexpected call to {method}")
        reply = queue.popleft()
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, dict):
            reply = json.dumps(reply).encode()
        if isinstance(reply, str):
            reply = reply.encode()
        body = BytesBody(reply)
        self.bodies.append(body)
        return body

    async def get_login_uuid(self):
        return await self._reply('get_login_uuid')

    async def check_login(self, uuid):
        return await self._reply('check_login', uuid)

    async def get_login_info(self, redirect_url):
        return await self._reply('get_login_info', redirect_url)

    async def web_init(self, info, request):
        return await self._reply('web_init', info, request)

    async def status_notify(self, info, request, init):
        return await self._reply('status_notify', info, request, init)

    async def sync_check(self, info, request, sync_key):
        return await self._reply('sync_check', info, request, sync_key)

    async def web_sync(self, info, request, sync_key):
        return await self._reply('web_sync', info, request, sync_key)

    async def get_contact(self, info, request):
        return await self._reply('get_contact', info, request)

    async def batch_get_contact(self, info, request, user_names):
        return await self._reply('batch_get_contact', info, request, user_names)

    async def send_message(self, info, request, message):
        return await self._reply('send_message', info, request, message)

    async def send_image_message(self, info, request, message):
        return await self._reply('send_image_message', info, request, message)

    async def send_app_message(self, info, request, message):
        return await self._reply('send_app_message', info, request, message)

    async def upload_media(self, info, request, file_path, from_user_name, to_user_name):
        return await self._reply(
            'upload_media', info, request, file_path, from_user_name, to_user_name
        )

    async def oplog(self, info, request, remark_name, to_user_name):
        return await self._reply('oplog', info, request, remark_name, to_user_name)

    async def logout(self, info, request):
        return await self._reply('logout', info, request)

    async def add_members_to_chatroom(self, info, request, chatroom, user_names):
        return await self._reply('add_members_to_chatroom', info, request, chatroom, user_names)

    async def remove_members_from_chatroom(self, info, request, chatroom, user_names):
        return await self._reply(
            'remove_members_from_chatroom', info, request, chatroom, user_names
        )

    async def verify_user(self, info, request, recommend, verify_content):
        return await self._reply('verify_user', info, request, recommend, verify_content)

    async def revoke_message(self, info, request, sent):
        return await self._reply('revoke_message', info, request, sent)


@pytest.fixture
def transport():
    """Returns an empty fake transport."""
    return FakeTransport()


@pytest.fixture
def caller(transport):
    """Returns a caller on the fake transport."""
    return Caller(transport)


@pytest.fixture
def login_info():
    """Returns login info for an accepted login."""
    return LoginInfo(
        skey='@crypt_skey',
        wxsid='sid123',
        wxuin=123456,
        pass_ticket='ticket%2B1',
        domain=WechatDomain.from_host('wx2.qq.com')
    )


@pytest.fixture
def session(login_info):
    """Returns an initialized session."""
    init = WebInitResponse.from_dict(web_init_payload())
    return Session(
        login_info=login_info,
        base_request=login_info.base_request('e123456789012345'),
        init=init,
        sync_key=init.sync_key
    )


@pytest.fixture
def temp_file(tmp_path):
    """Create a small file to upload."""
    path = tmp_path / 'report.pdf'
    path.write_bytes(b'%PDF-1.4 test content')
    return path
