"""
Login session.

A Session is everything a successful handshake produced. It is passed
explicitly to every operation; nothing about it lives on the transport
or in module state, so separate sessions never interfere.
"""
from dataclasses import dataclass
from typing import Optional

from ..exceptions import WebWxError
from ..models import (
    BaseRequest,
    LoginInfo,
    SyncKey,
    User,
    WebInitResponse,
    WebSyncResponse,
    WechatDomain,
)


@dataclass
class Session:
    """
    Authenticated session state.

    Attributes:
        login_info: Credentials from the login info document (root of the session)
        base_request: Identity block sent with authenticated requests
        init: Web init reply
        sync_key: Current sync position, advanced by web sync
        sync_check_key: Position to send with sync checks (falls back to sync_key)
        notify_error: Why the phone notification failed, if it did
    """
    login_info: LoginInfo
    base_request: BaseRequest
    init: WebInitResponse
    sync_key: SyncKey
    sync_check_key: Optional[SyncKey] = None
    notify_error: Optional[WebWxError] = None

    @property
    def user(self) -> User:
        """The logged in account."""
        return self.init.user

    @property
    def domain(self) -> Optional[WechatDomain]:
        return self.login_info.domain

    @property
    def check_key(self) -> SyncKey:
        """Key for the next sync check."""
        if self.sync_check_key is not None and not self.sync_check_key.is_empty():
            return self.sync_check_key
        return self.sync_key

    def apply_sync(self, response: WebSyncResponse) -> None:
        """Advance the sync position and rotate skey after a web sync."""
        if not response.sync_key.is_empty():
            self.sync_key = response.sync_key
        if not response.sync_check_key.is_empty():
            self.sync_check_key = response.sync_check_key
        if response.skey:
            self.rotate_skey(response.skey)

    def rotate_skey(self, skey: str) -> None:
        if skey == self.login_info.skey:
            return
        self.login_info.skey = skey
        self.base_request = self.base_request.with_skey(skey)
