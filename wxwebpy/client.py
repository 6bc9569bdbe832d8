"""
WebWxClient - High-level async client for the web messaging API.

Example:
    >>> async with WebWxClient(transport) as client:
    ...     await client.login(on_uuid=lambda uuid, url: print(url))
    ...     client.on('message', handle)
    ...     client.start_sync()
    ...     await client.send_text('@friend', 'hello')
"""
import asyncio
import inspect
from pathlib import Path
from typing import Optional, List, Callable, Any, Union

from .core.api import (
    Caller,
    ClientConfig,
    EventEmitter,
    ExponentialBackoffStrategy,
)
from .core.exceptions import WebWxError
from .core.logging import get_logger
from .core.login import LoginHandshake, Session
from .core.messages import MessageDispatcher
from .core.models import User, RecommendInfo, SentMessage, SendMessage, UploadResponse
from .core.sync import SyncPoller
from .core.transport import Transport


class WebWxClient:
    """
    High-level async client owning one session.

    The transport performs the endpoint requests; the client runs the
    handshake, keeps the resulting Session and passes it to every
    operation.
    """

    def __init__(self, transport: Transport, *, config: Optional[ClientConfig] = None):
        """
        Initialize client.

        Args:
            transport: Transport for the vendor endpoints
            config: Client configuration
        """
        self._config = config or ClientConfig.default()
        self._transport = transport
        self._caller = Caller(transport)
        self._events = EventEmitter()
        self._logger = get_logger('wxwebpy.client')

        self._session: Optional[Session] = None
        self._dispatcher: Optional[MessageDispatcher] = None
        self._poller: Optional[SyncPoller] = None
        self._sync_task: Optional[asyncio.Task] = None

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def session(self) -> Session:
        """
        Current session.

        Raises:
            RuntimeError: If not logged in
        """
        if self._session is None:
            raise RuntimeError("Not logged in. Call login() first.")
        return self._session

    @property
    def is_logged_in(self) -> bool:
        return self._session is not None

    @property
    def user(self) -> User:
        return self.session.user

    async def __aenter__(self) -> 'WebWxClient':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    def on(self, event: str, callback: Callable) -> 'WebWxClient':
        """Register a handler for sync events (message, contacts, sync, error)."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'WebWxClient':
        self._events.off(event, callback)
        return self

    # =========================================================================
    # Session management
    # =========================================================================

    async def login(
        self,
        on_uuid: Optional[Callable[[str, str], Any]] = None,
        on_scanned: Optional[Callable[[], Any]] = None
    ) -> Session:
        """
        Run the QR login handshake.

        Args:
            on_uuid: Called with (uuid, qr_code_url) for each QR code to show
            on_scanned: Called once the QR code was scanned

        Returns:
            The new session
        """
        await self.stop_sync()
        handshake = LoginHandshake(
            self._caller,
            self._config.handshake,
            on_uuid=on_uuid,
            on_scanned=on_scanned
        )
        session = await handshake.login()
        self._attach(session)
        return session

    def _attach(self, session: Session) -> None:
        self._session = session
        self._dispatcher = MessageDispatcher(self._caller, session)

    def start_sync(self) -> asyncio.Task:
        """
        Start sync polling in a background task.

        Returns:
            The polling task; it ends with SessionTerminatedError when the
            server closes the session
        """
        session = self.session
        if self._sync_task is None or self._sync_task.done():
            self._poller = SyncPoller(
                self._caller,
                session,
                interval=self._config.handshake.sync_interval,
                retry_strategy=ExponentialBackoffStrategy(self._config.retry),
                events=self._events
            )
            self._sync_task = asyncio.create_task(self._poller.run())
        return self._sync_task

    async def stop_sync(self) -> None:
        """Stop sync polling after the current poll."""
        if self._poller is not None:
            self._poller.stop()
        task, self._sync_task = self._sync_task, None
        if task is None:
            return
        try:
            await task
        except WebWxError as e:
            self._logger.debug(f"Sync task ended with {e!r}")

    async def logout(self) -> None:
        """Log out and drop the session."""
        session = self.session
        await self.stop_sync()
        try:
            await self._caller.logout(session.login_info, session.base_request)
        finally:
            self._session = None
            self._dispatcher = None
            self._poller = None

    async def close(self) -> None:
        """Stop polling and close the transport if it can be closed."""
        await self.stop_sync()
        close = getattr(self._transport, 'close', None)
        if close is not None:
            result = close()
            if inspect.isawaitable(result):
                await result

    # =========================================================================
    # Messages
    # =========================================================================

    @property
    def _messages(self) -> MessageDispatcher:
        if self._dispatcher is None:
            raise RuntimeError("Not logged in. Call login() first.")
        return self._dispatcher

    async def send(self, message: SendMessage) -> SentMessage:
        return await self._messages.send(message)

    async def send_text(self, to_user_name: str, content: str) -> SentMessage:
        return await self._messages.send_text(to_user_name, content)

    async def send_image(self, file_path: Union[str, Path], to_user_name: str) -> SentMessage:
        return await self._messages.send_image(file_path, to_user_name)

    async def send_file(self, file_path: Union[str, Path], to_user_name: str) -> SentMessage:
        return await self._messages.send_file(file_path, to_user_name)

    async def upload_media(self, file_path: Union[str, Path], to_user_name: str) -> UploadResponse:
        return await self._messages.upload_media(file_path, to_user_name)

    async def revoke(self, sent: SentMessage) -> None:
        await self._messages.revoke(sent)

    # =========================================================================
    # Contacts and groups
    # =========================================================================

    async def get_contacts(self) -> List[User]:
        session = self.session
        return await self._caller.get_contacts(session.login_info, session.base_request)

    async def get_contact_details(self, user_names: List[str]) -> List[User]:
        """Fetch full records (group members included) for user names."""
        session = self.session
        return await self._caller.batch_get_contacts(
            session.login_info, session.base_request, user_names
        )

    async def set_remark_name(self, user_name: str, remark_name: str) -> None:
        session = self.session
        await self._caller.oplog(session.login_info, session.base_request, remark_name, user_name)

    async def accept_friend(self, recommend: RecommendInfo, verify_content: str = '') -> None:
        session = self.session
        await self._caller.verify_user(
            session.login_info, session.base_request, recommend, verify_content
        )

    async def add_members(self, chatroom: str, user_names: List[str]) -> None:
        session = self.session
        await self._caller.add_members_to_chatroom(
            session.login_info, session.base_request, chatroom, user_names
        )

    async def remove_members(self, chatroom: str, user_names: List[str]) -> None:
        session = self.session
        await self._caller.remove_members_from_chatroom(
            session.login_info, session.base_request, chatroom, user_names
        )
