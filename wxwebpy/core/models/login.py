"""
Login models.

Covers everything produced during the handshake: the check-login status,
the regional domain picked from the redirect, the login info document and
the web init reply.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, List, Optional

from .base import BaseResponse, BaseRequest, SyncKey
from .contact import User
from ..exceptions import ProtocolError


class LoginStatus(Enum):
    """Check-login status codes."""
    CONFIRMED = '200'
    SCANNED = '201'
    EXPIRED = '400'
    WAITING = '408'

    @classmethod
    def from_code(cls, code: str) -> 'LoginStatus':
        """
        Map a status code to a LoginStatus.

        Raises:
            ProtocolError: If the code is not a known status
        """
        try:
            return cls(code)
        except ValueError:
            raise ProtocolError(f"unexpected status code: {code}") from None


@dataclass(frozen=True)
class CheckLoginResponse:
    """One check-login poll result."""
    code: str
    raw: bytes = field(repr=False, default=b'')

    @property
    def status(self) -> LoginStatus:
        return LoginStatus.from_code(self.code)


@dataclass(frozen=True)
class WechatDomain:
    """
    Regional host family a session is bound to.

    Picked once from the login redirect; every later call of the session
    goes to these hosts.
    """
    host: str

    KNOWN_HOSTS = (
        'wx.qq.com',
        'wx2.qq.com',
        'wx8.qq.com',
        'web.wechat.com',
        'web2.wechat.com',
    )

    @property
    def base_url(self) -> str:
        return f"https://{self.host}/cgi-bin/mmwebwx-bin"

    @property
    def file_url(self) -> str:
        return f"https://file.{self.host}/cgi-bin/mmwebwx-bin"

    @property
    def sync_url(self) -> str:
        return f"https://webpush.{self.host}/cgi-bin/mmwebwx-bin"

    @classmethod
    def from_host(cls, host: str) -> 'WechatDomain':
        """
        Resolve the domain for a redirect host.

        Raises:
            ProtocolError: If the host is not one of the known regions
        """
        host = (host or '').lower()
        if host not in cls.KNOWN_HOSTS:
            raise ProtocolError(f"invalid host: {host!r}")
        return cls(host=host)


def _text(element, tag: str) -> str:
    child = element.find(tag)
    if child is None or child.text is None:
        return ''
    return child.text.strip()


@dataclass
class LoginInfo:
    """
    Session credentials from the login info XML document.

    The document doubles as an error: when ret is not 0 the message
    explains why the login was refused.

    Attributes:
        ret: Status, 0 when the login was accepted
        message: Server message (set on rejection)
        skey: Session key
        wxsid: Session id
        wxuin: Account number
        pass_ticket: Ticket appended to most URLs
        is_grayscale: Grayscale flag
        domain: Regional domain resolved from the redirect URL
    """
    ret: int = 0
    message: str = ''
    skey: str = ''
    wxsid: str = ''
    wxuin: int = 0
    pass_ticket: str = ''
    is_grayscale: int = 0
    domain: Optional[WechatDomain] = None

    def ok(self) -> bool:
        return self.ret == 0

    def has_credentials(self) -> bool:
        """Returns True if every session field is present."""
        return bool(self.skey and self.wxsid and self.wxuin and self.pass_ticket)

    def base_request(self, device_id: Optional[str] = None) -> BaseRequest:
        """Build the BaseRequest for this session."""
        if device_id:
            return BaseRequest(uin=self.wxuin, sid=self.wxsid, skey=self.skey, device_id=device_id)
        return BaseRequest(uin=self.wxuin, sid=self.wxsid, skey=self.skey)

    @classmethod
    def from_xml(cls, root) -> 'LoginInfo':
        """
        Create from the parsed <error> document.

        Raises:
            ValueError: If <ret> is missing or a numeric field is not a number
        """
        if root.find('ret') is None:
            raise ValueError("no <ret> element")
        return cls(
            ret=int(_text(root, 'ret')),
            message=_text(root, 'message'),
            skey=_text(root, 'skey'),
            wxsid=_text(root, 'wxsid'),
            wxuin=int(_text(root, 'wxuin') or 0),
            pass_ticket=_text(root, 'pass_ticket'),
            is_grayscale=int(_text(root, 'isgrayscale') or 0)
        )


@dataclass(frozen=True)
class WebInitResponse:
    """Reply of the web init endpoint."""
    base_response: BaseResponse
    user: User
    sync_key: SyncKey
    contact_list: List[User] = field(default_factory=list)
    chat_set: str = ''
    skey: str = ''
    client_version: int = 0
    system_time: int = 0
    invite_start_count: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'WebInitResponse':
        return cls(
            base_response=BaseResponse.from_dict(data.get('BaseResponse')),
            user=User.from_dict(data.get('User') or {}),
            sync_key=SyncKey.from_dict(data.get('SyncKey')),
            contact_list=[User.from_dict(c) for c in data.get('ContactList') or []],
            chat_set=data.get('ChatSet', ''),
            skey=data.get('SKey', ''),
            client_version=int(data.get('ClientVersion', 0) or 0),
            system_time=int(data.get('SystemTime', 0) or 0),
            invite_start_count=int(data.get('InviteStartCount', 0) or 0)
        )
