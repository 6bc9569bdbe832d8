"""
Vendor operations.

Each method runs one transport call through a ResponseEnvelope, decodes
the reply into a typed model and, where the reply carries a BaseResponse,
checks it with the status classifier.
"""
import re
from typing import List, Tuple
from urllib.parse import urlparse

from .response import ResponseEnvelope, raise_for_status
from .errors import LoginRejectedError
from ..exceptions import ParseError, ProtocolError, MissingLocationError, LoginForbiddenError
from ..logging import get_logger
from ..models import (
    BaseRequest,
    StatusReply,
    SyncKey,
    User,
    LoginInfo,
    CheckLoginResponse,
    WechatDomain,
    WebInitResponse,
    SyncCheckResponse,
    WebSyncResponse,
    ContactListResponse,
    BatchContactResponse,
    RecommendInfo,
    SentMessage,
)
from ..transport.body import BytesBody
from ..transport.protocols import Transport


UUID_PATTERN = re.compile(r'uuid\s*=\s*"([^"]+)"')
STATUS_CODE_PATTERN = re.compile(r'window\.code\s*=\s*(\d+)')
REDIRECT_URI_PATTERN = re.compile(r'window\.redirect_uri\s*=\s*"([^"]+)"')
# Accepts both the script form (retcode:"0") and the JSON form ("retcode":"0")
SYNC_CHECK_PATTERN = re.compile(
    r'retcode"?\s*:\s*"(\d+)"\s*,\s*"?selector"?\s*:\s*"(\d+)"'
)

MAX_BATCH_CONTACTS = 50


class Caller:
    """
    Typed vendor operations on top of a Transport.

    The caller holds no session state: every authenticated operation takes
    the session's LoginInfo and BaseRequest as arguments.
    """

    def __init__(self, transport: Transport):
        """
        Initialize caller.

        Args:
            transport: Transport that executes the requests
        """
        self._transport = transport
        self._logger = get_logger('wxwebpy.api.caller')

    @property
    def transport(self) -> Transport:
        return self._transport

    # Login

    async def get_login_uuid(self) -> str:
        """
        Request a login UUID.

        Raises:
            ProtocolError: If the reply holds no UUID (format change or blocked IP)
            TransportError: On network failure
        """
        envelope = await ResponseEnvelope.capture(self._transport.get_login_uuid())
        try:
            (uuid,) = await envelope.decode_regex(UUID_PATTERN, 1)
        except ParseError as e:
            raise ProtocolError("uuid not found", payload=e.payload) from e
        self._logger.debug(f"Got login uuid {uuid}")
        return uuid

    async def check_login(self, uuid: str) -> CheckLoginResponse:
        """
        Poll the login status of a UUID once.

        Raises:
            ParseError: If the reply holds no status code
        """
        envelope = await ResponseEnvelope.capture(self._transport.check_login(uuid))
        (code,) = await envelope.decode_regex(STATUS_CODE_PATTERN, 1)
        return CheckLoginResponse(code=code, raw=await envelope.read_all())

    async def resolve_redirect(self, body: bytes) -> Tuple[str, WechatDomain]:
        """
        Extract the login redirect from a confirmed check-login reply.

        Returns:
            Tuple of (redirect URL, domain of its host)

        Raises:
            ProtocolError: If there is no redirect URL or its host is unknown
        """
        try:
            (redirect_url,) = await ResponseEnvelope(BytesBody(body)).decode_regex(
                REDIRECT_URI_PATTERN, 1
            )
        except ParseError as e:
            raise ProtocolError("redirect url not found", payload=body) from e

        domain = WechatDomain.from_host(urlparse(redirect_url).hostname or '')
        return redirect_url, domain

    async def get_login_info(self, redirect_url: str, domain: WechatDomain) -> LoginInfo:
        """
        Follow the login redirect and decode the login info document.

        Raises:
            LoginForbiddenError: If the redirect was answered without a location
            LoginRejectedError: If the document reports a not-ok status
            ParseError: If the document is not valid XML or lacks session fields
        """
        envelope = await ResponseEnvelope.capture(self._transport.get_login_info(redirect_url))
        error = envelope.err()
        if isinstance(error, MissingLocationError):
            raise LoginForbiddenError() from error

        info = await envelope.decode_xml(LoginInfo)
        if not info.ok():
            raise LoginRejectedError(info)
        if not info.has_credentials():
            raise ParseError(
                "login info missing session fields", payload=await envelope.read_all()
            )

        info.domain = domain
        return info

    async def web_init(self, info: LoginInfo, request: BaseRequest) -> WebInitResponse:
        envelope = await ResponseEnvelope.capture(self._transport.web_init(info, request))
        return await envelope.decode_json(WebInitResponse)

    async def status_notify(
        self,
        info: LoginInfo,
        request: BaseRequest,
        init: WebInitResponse
    ) -> None:
        """
        Tell the phone that web login completed.

        Raises:
            RemoteError: If the server refused the notification
        """
        await self._expect_ok(self._transport.status_notify(info, request, init))

    # Sync

    async def sync_check(
        self,
        info: LoginInfo,
        request: BaseRequest,
        sync_key: SyncKey
    ) -> SyncCheckResponse:
        """
        Ask whether anything new is pending.

        Raises:
            ParseError: If the reply does not hold exactly retcode and selector
        """
        envelope = await ResponseEnvelope.capture(
            self._transport.sync_check(info, request, sync_key)
        )
        retcode, selector = await envelope.decode_regex(SYNC_CHECK_PATTERN, 2)
        return SyncCheckResponse(retcode=retcode, selector=selector)

    async def web_sync(
        self,
        info: LoginInfo,
        request: BaseRequest,
        sync_key: SyncKey
    ) -> WebSyncResponse:
        """Fetch new messages and contact changes."""
        envelope = await ResponseEnvelope.capture(
            self._transport.web_sync(info, request, sync_key)
        )
        response = await envelope.decode_json(WebSyncResponse)
        raise_for_status(response)
        return response

    # Contacts

    async def get_contacts(self, info: LoginInfo, request: BaseRequest) -> List[User]:
        envelope = await ResponseEnvelope.capture(self._transport.get_contact(info, request))
        response = await envelope.decode_json(ContactListResponse)
        raise_for_status(response)
        return response.member_list

    async def batch_get_contacts(
        self,
        info: LoginInfo,
        request: BaseRequest,
        user_names: List[str]
    ) -> List[User]:
        """
        Fetch contact details, MAX_BATCH_CONTACTS per request.

        Raises:
            ValueError: If user_names is empty
        """
        if not user_names:
            raise ValueError("no users given")

        contacts: List[User] = []
        for start in range(0, len(user_names), MAX_BATCH_CONTACTS):
            batch = user_names[start:start + MAX_BATCH_CONTACTS]
            envelope = await ResponseEnvelope.capture(
                self._transport.batch_get_contact(info, request, batch)
            )
            response = await envelope.decode_json(BatchContactResponse)
            raise_for_status(response)
            contacts.extend(response.contact_list)
        return contacts

    async def oplog(
        self,
        info: LoginInfo,
        request: BaseRequest,
        remark_name: str,
        to_user_name: str
    ) -> None:
        """Set the remark name of a contact."""
        await self._expect_ok(self._transport.oplog(info, request, remark_name, to_user_name))

    async def verify_user(
        self,
        info: LoginInfo,
        request: BaseRequest,
        recommend: RecommendInfo,
        verify_content: str = ''
    ) -> None:
        """Accept a friend request."""
        await self._expect_ok(
            self._transport.verify_user(info, request, recommend, verify_content)
        )

    # Groups

    async def add_members_to_chatroom(
        self,
        info: LoginInfo,
        request: BaseRequest,
        chatroom: str,
        user_names: List[str]
    ) -> None:
        """
        Invite users into a group.

        Raises:
            ValueError: If user_names is empty
        """
        if not user_names:
            raise ValueError("no friends given")
        await self._expect_ok(
            self._transport.add_members_to_chatroom(info, request, chatroom, user_names)
        )

    async def remove_members_from_chatroom(
        self,
        info: LoginInfo,
        request: BaseRequest,
        chatroom: str,
        user_names: List[str]
    ) -> None:
        """
        Remove users from a group.

        Raises:
            ValueError: If user_names is empty
        """
        if not user_names:
            raise ValueError("no users given")
        await self._expect_ok(
            self._transport.remove_members_from_chatroom(info, request, chatroom, user_names)
        )

    # Messages and session

    async def revoke_message(
        self,
        info: LoginInfo,
        request: BaseRequest,
        sent: SentMessage
    ) -> None:
        """
        Revoke a sent message.

        Raises:
            ValueError: If the message never got a server id
        """
        if not sent.is_sent:
            raise ValueError("message was not sent")
        await self._expect_ok(self._transport.revoke_message(info, request, sent))

    async def logout(self, info: LoginInfo, request: BaseRequest) -> None:
        await self._expect_ok(self._transport.logout(info, request))

    async def _expect_ok(self, call) -> None:
        """Run a call whose reply is only a BaseResponse."""
        envelope = await ResponseEnvelope.capture(call)
        reply = await envelope.decode_json(StatusReply)
        raise_for_status(reply)
