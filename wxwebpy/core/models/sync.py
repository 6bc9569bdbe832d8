"""Sync check models."""
from dataclasses import dataclass


class Selector:
    """Known selector values of a sync check."""
    NORMAL = '0'
    NEW_MESSAGE = '2'
    MOD_CONTACT = '4'
    ADD_OR_DEL_CONTACT = '6'
    ENTER_OR_LEAVE_CHAT = '7'


@dataclass(frozen=True)
class SyncCheckResponse:
    """
    One sync check result.

    Attributes:
        retcode: '0' while the session is alive
        selector: '0' when nothing is pending
    """
    retcode: str
    selector: str

    @property
    def should_continue(self) -> bool:
        """Returns True if the session is still alive."""
        return self.retcode == '0'

    @property
    def has_new_data(self) -> bool:
        """Returns True if web sync has something to deliver."""
        return self.selector != Selector.NORMAL
