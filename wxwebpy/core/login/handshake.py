"""
Login handshake.

Drives the scan-to-login flow from a fresh UUID to an initialized
session:

    INIT -> AWAITING_SCAN -> REDIRECTING -> FETCHING_LOGIN_INFO
         -> INITIALIZING -> NOTIFYING_MOBILE -> SYNC_POLLING

Steps run strictly in order. Any field that cannot be parsed ends the
attempt; an expired QR code starts a new attempt if configured to.
"""
import asyncio
import inspect
from enum import Enum
from typing import Optional, Callable, Any

from ..api.caller import Caller
from ..api.config import HandshakeConfig
from ..exceptions import WebWxError, QRCodeExpiredError
from ..logging import get_logger
from ..models import LoginStatus, CheckLoginResponse
from .session import Session


QR_CODE_URL = 'https://login.weixin.qq.com/qrcode/{uuid}'


class HandshakeState(Enum):
    """Handshake states."""
    INIT = 'init'
    AWAITING_SCAN = 'awaiting_scan'
    REDIRECTING = 'redirecting'
    FETCHING_LOGIN_INFO = 'fetching_login_info'
    INITIALIZING = 'initializing'
    NOTIFYING_MOBILE = 'notifying_mobile'
    SYNC_POLLING = 'sync_polling'
    FAILED = 'failed'


async def _call_hook(hook: Optional[Callable], *args) -> None:
    if hook is None:
        return
    result = hook(*args)
    if inspect.isawaitable(result):
        await result


class LoginHandshake:
    """
    Scan-to-login state machine.

    Example:
        >>> handshake = LoginHandshake(Caller(transport), on_uuid=show_qr)
        >>> session = await handshake.login()
    """

    def __init__(
        self,
        caller: Caller,
        config: Optional[HandshakeConfig] = None,
        on_uuid: Optional[Callable[[str, str], Any]] = None,
        on_scanned: Optional[Callable[[], Any]] = None
    ):
        """
        Initialize handshake.

        Args:
            caller: Vendor operations
            config: Handshake configuration
            on_uuid: Called with (uuid, qr_code_url) for every new QR code
            on_scanned: Called once the QR code was scanned
        """
        self._caller = caller
        self._config = config or HandshakeConfig()
        self._on_uuid = on_uuid
        self._on_scanned = on_scanned
        self._state = HandshakeState.INIT
        self._uuid: Optional[str] = None
        self._logger = get_logger('wxwebpy.login')

    @property
    def state(self) -> HandshakeState:
        return self._state

    @property
    def uuid(self) -> Optional[str]:
        return self._uuid

    def _transition(self, state: HandshakeState) -> None:
        if state is not self._state:
            self._logger.info(f"Handshake {self._state.value} -> {state.value}")
        self._state = state

    async def login(self) -> Session:
        """
        Run the whole handshake.

        Returns:
            Initialized session, ready for sync polling

        Raises:
            QRCodeExpiredError: If every QR code expired unconfirmed
            LoginForbiddenError: If the account may not use web login
            WebWxError: On any other failed step
        """
        attempts = max(1, self._config.max_login_attempts)
        for attempt in range(1, attempts + 1):
            try:
                return await self._attempt()
            except QRCodeExpiredError:
                if attempt == attempts:
                    raise
                self._logger.info(f"QR code expired, starting login attempt {attempt + 1}")

    async def _attempt(self) -> Session:
        self._transition(HandshakeState.INIT)
        try:
            uuid = await self.get_uuid()
            confirmed = await self.wait_for_confirmation(uuid)
            return await self.complete(confirmed)
        except WebWxError:
            self._transition(HandshakeState.FAILED)
            raise

    async def get_uuid(self) -> str:
        """Obtain a login UUID and announce its QR code."""
        uuid = await self._caller.get_login_uuid()
        self._uuid = uuid
        self._transition(HandshakeState.AWAITING_SCAN)
        await _call_hook(self._on_uuid, uuid, QR_CODE_URL.format(uuid=uuid))
        return uuid

    async def poll(self, uuid: str) -> CheckLoginResponse:
        """
        Poll the login status once.

        Safe to repeat: the handshake state does not change while the
        status stays WAITING.

        Raises:
            QRCodeExpiredError: If the QR code expired
            ProtocolError: On an unknown status code
        """
        response = await self._caller.check_login(uuid)
        status = response.status
        self._logger.debug(f"Check login {uuid}: {status.name}")
        if status is LoginStatus.EXPIRED:
            raise QRCodeExpiredError("qr code expired")
        return response

    async def wait_for_confirmation(self, uuid: str) -> CheckLoginResponse:
        """
        Poll until the login is confirmed on the phone.

        Raises:
            QRCodeExpiredError: If the QR code expired or max_check_attempts ran out
        """
        scanned = False
        polls = 0
        while True:
            response = await self.poll(uuid)
            polls += 1
            status = response.status

            if status is LoginStatus.CONFIRMED:
                return response

            if status is LoginStatus.SCANNED and not scanned:
                scanned = True
                self._logger.info("QR code scanned, waiting for confirmation")
                await _call_hook(self._on_scanned)

            limit = self._config.max_check_attempts
            if limit is not None and polls >= limit:
                raise QRCodeExpiredError(f"login not confirmed after {polls} polls")

            if self._config.check_interval:
                await asyncio.sleep(self._config.check_interval)

    async def complete(self, confirmed: CheckLoginResponse) -> Session:
        """
        Finish the handshake from a confirmed check-login reply.

        Raises:
            ProtocolError: If the reply holds no usable redirect
            LoginForbiddenError: If the account may not use web login
            LoginRejectedError: If the login info reports a failure
        """
        self._transition(HandshakeState.REDIRECTING)
        redirect_url, domain = await self._caller.resolve_redirect(confirmed.raw)
        self._logger.debug(f"Session bound to {domain.host}")

        self._transition(HandshakeState.FETCHING_LOGIN_INFO)
        info = await self._caller.get_login_info(redirect_url, domain)

        self._transition(HandshakeState.INITIALIZING)
        request = info.base_request(self._config.device_id)
        init = await self._caller.web_init(info, request)

        session = Session(
            login_info=info,
            base_request=request,
            init=init,
            sync_key=init.sync_key
        )
        if init.skey:
            session.rotate_skey(init.skey)

        self._transition(HandshakeState.NOTIFYING_MOBILE)
        try:
            await self._caller.status_notify(info, session.base_request, init)
        except WebWxError as e:
            self._logger.warning(f"Status notify failed, continuing without it: {e}")
            session.notify_error = e

        self._transition(HandshakeState.SYNC_POLLING)
        self._logger.info(f"Logged in as {session.user.nick_name or session.user.user_name}")
        return session
