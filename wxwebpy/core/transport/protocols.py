"""
Protocol definitions for the transport layer.

A Transport turns one vendor operation into an HTTP exchange: it builds
the URL, query and body for the endpoint, sends it on the session's
domain and hands back the reply body unread. Decoding and status checks
happen above it, in the Caller.

Transports raise TransportError for network failures and
MissingLocationError when a redirect carries no Location header.
"""
from pathlib import Path
from typing import Protocol, List, runtime_checkable

from ..models import (
    BaseRequest,
    LoginInfo,
    SyncKey,
    WebInitResponse,
    SendMessage,
    SentMessage,
    RecommendInfo,
)


@runtime_checkable
class ResponseBody(Protocol):
    """Reply body that has to be released after reading."""

    async def read(self) -> bytes:
        """Read the whole body."""
        ...

    def release(self) -> None:
        """Give the underlying connection back."""
        ...


class Transport(Protocol):
    """
    Protocol for per-endpoint request execution.

    Every method returns the raw reply body. Authenticated methods take
    the session's LoginInfo (which carries the resolved domain) and
    BaseRequest explicitly.
    """

    async def get_login_uuid(self) -> ResponseBody:
        """Request a new login UUID."""
        ...

    async def check_login(self, uuid: str) -> ResponseBody:
        """Poll the login status of a UUID."""
        ...

    async def get_login_info(self, redirect_url: str) -> ResponseBody:
        """Follow the login redirect and fetch the login info document."""
        ...

    async def web_init(self, info: LoginInfo, request: BaseRequest) -> ResponseBody:
        ...

    async def status_notify(
        self,
        info: LoginInfo,
        request: BaseRequest,
        init: WebInitResponse
    ) -> ResponseBody:
        """Tell the phone that web login completed."""
        ...

    async def sync_check(
        self,
        info: LoginInfo,
        request: BaseRequest,
        sync_key: SyncKey
    ) -> ResponseBody:
        ...

    async def web_sync(
        self,
        info: LoginInfo,
        request: BaseRequest,
        sync_key: SyncKey
    ) -> ResponseBody:
        ...

    async def get_contact(self, info: LoginInfo, request: BaseRequest) -> ResponseBody:
        ...

    async def batch_get_contact(
        self,
        info: LoginInfo,
        request: BaseRequest,
        user_names: List[str]
    ) -> ResponseBody:
        ...

    async def send_message(
        self,
        info: LoginInfo,
        request: BaseRequest,
        message: SendMessage
    ) -> ResponseBody:
        ...

    async def send_image_message(
        self,
        info: LoginInfo,
        request: BaseRequest,
        message: SendMessage
    ) -> ResponseBody:
        ...

    async def send_app_message(
        self,
        info: LoginInfo,
        request: BaseRequest,
        message: SendMessage
    ) -> ResponseBody:
        ...

    async def upload_media(
        self,
        info: LoginInfo,
        request: BaseRequest,
        file_path: Path,
        from_user_name: str,
        to_user_name: str
    ) -> ResponseBody:
        """Upload a file in chunks; the last chunk's reply is returned."""
        ...

    async def oplog(
        self,
        info: LoginInfo,
        request: BaseRequest,
        remark_name: str,
        to_user_name: str
    ) -> ResponseBody:
        ...

    async def logout(self, info: LoginInfo, request: BaseRequest) -> ResponseBody:
        ...

    async def add_members_to_chatroom(
        self,
        info: LoginInfo,
        request: BaseRequest,
        chatroom: str,
        user_names: List[str]
    ) -> ResponseBody:
        ...

    async def remove_members_from_chatroom(
        self,
        info: LoginInfo,
        request: BaseRequest,
        chatroom: str,
        user_names: List[str]
    ) -> ResponseBody:
        ...

    async def verify_user(
        self,
        info: LoginInfo,
        request: BaseRequest,
        recommend: RecommendInfo,
        verify_content: str
    ) -> ResponseBody:
        """Accept a friend request."""
        ...

    async def revoke_message(
        self,
        info: LoginInfo,
        request: BaseRequest,
        sent: SentMessage
    ) -> ResponseBody:
        ...
