"""
Sync check polling.

Steady state of a logged in session: ask the server whether anything is
pending, pull it with web sync when it is, and hand the results to event
handlers.

Events:
    sync(WebSyncResponse)       every successful web sync
    message(Message)            every new message
    contacts(List[User])        modified contacts
    contacts_deleted(List[User])
    error(WebWxError)           the error that ended the loop
"""
import asyncio
from typing import Optional, Callable

from ..api.caller import Caller
from ..api.errors import SessionTerminatedError
from ..api.events import EventEmitter
from ..api.retry import RetryStrategy, ExponentialBackoffStrategy
from ..exceptions import WebWxError
from ..logging import get_logger
from ..login.session import Session
from ..models import SyncCheckResponse, WebSyncResponse


class SyncPoller:
    """
    Polls sync check for one session.

    Run it in its own task; stop() ends the loop between two polls and
    run() then returns normally. A stopped poller stays stopped.

    Example:
        >>> poller = SyncPoller(caller, session)
        >>> poller.on('message', handle_message)
        >>> task = asyncio.create_task(poller.run())
        >>> ...
        >>> poller.stop()
        >>> await task
    """

    def __init__(
        self,
        caller: Caller,
        session: Session,
        interval: float = 0.0,
        retry_strategy: Optional[RetryStrategy] = None,
        events: Optional[EventEmitter] = None
    ):
        """
        Initialize poller.

        Args:
            caller: Vendor operations
            session: Session to poll for
            interval: Seconds to wait between polls
            retry_strategy: Retry policy for transport failures
            events: Event emitter (a new one when not given)
        """
        self._caller = caller
        self._session = session
        self._interval = interval
        self._retry_strategy = retry_strategy or ExponentialBackoffStrategy()
        self._events = events or EventEmitter()
        self._stop = asyncio.Event()
        self._running = False
        self._logger = get_logger('wxwebpy.sync')

    @property
    def running(self) -> bool:
        return self._running

    @property
    def session(self) -> Session:
        return self._session

    def on(self, event: str, callback: Callable) -> 'SyncPoller':
        """Register an event handler."""
        self._events.on(event, callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'SyncPoller':
        self._events.off(event, callback)
        return self

    def stop(self) -> None:
        """Ask the loop to end before its next poll."""
        self._stop.set()

    async def poll_once(self) -> SyncCheckResponse:
        """
        Run one sync check, pulling new data if any is pending.

        Raises:
            SessionTerminatedError: If the server ended the session
        """
        session = self._session
        state = await self._caller.sync_check(
            session.login_info, session.base_request, session.check_key
        )
        self._logger.debug(f"Sync check retcode={state.retcode} selector={state.selector}")

        if not state.should_continue:
            raise SessionTerminatedError(state.retcode)

        if state.has_new_data:
            await self.pull()

        return state

    async def pull(self) -> WebSyncResponse:
        """Fetch pending messages and contact changes, then dispatch them."""
        session = self._session
        response = await self._caller.web_sync(
            session.login_info, session.base_request, session.sync_key
        )
        session.apply_sync(response)

        await self._events.emit('sync', response)
        for message in response.add_msg_list:
            await self._events.emit('message', message)
        if response.mod_contact_list:
            await self._events.emit('contacts', response.mod_contact_list)
        if response.del_contact_list:
            await self._events.emit('contacts_deleted', response.del_contact_list)

        return response

    async def run(self) -> None:
        """
        Poll until stopped.

        Raises:
            SessionTerminatedError: If the server ended the session (log in again)
            WebWxError: If a non-retryable error occurred or retries ran out
        """
        self._running = True
        retry_count = 0
        self._logger.info("Sync polling started")

        try:
            while not self._stop.is_set():
                try:
                    await self.poll_once()
                    retry_count = 0
                except WebWxError as e:
                    if self._retry_strategy.should_retry(e, retry_count):
                        self._logger.warning(
                            f"Sync check failed ({e}), retry attempt {retry_count + 1}"
                        )
                        await self._sleep(self._retry_strategy.get_delay(retry_count))
                        retry_count += 1
                        continue

                    self._logger.error(f"Sync polling ended: {e}")
                    await self._events.emit('error', e)
                    raise

                if self._interval:
                    await self._sleep(self._interval)
        finally:
            self._running = False

        self._logger.info("Sync polling stopped")

    async def _sleep(self, seconds: float) -> None:
        """Sleep, waking up early when stopped."""
        try:
            await asyncio.wait_for(self._stop.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            pass
