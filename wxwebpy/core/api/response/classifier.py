"""Status classification for decoded replies."""
from typing import Optional, Protocol, runtime_checkable

from ...models import BaseResponse
from ..errors import RemoteError


@runtime_checkable
class HasStatus(Protocol):
    """Anything decoded from a reply that embeds a BaseResponse."""

    base_response: BaseResponse


def classify(item: HasStatus) -> Optional[RemoteError]:
    """
    Check the embedded status of a decoded reply.

    Returns:
        None on success, otherwise a RemoteError with the server's code and message
    """
    status = item.base_response
    if status.ok():
        return None
    return RemoteError(status.ret, status.err_msg)


def raise_for_status(item: HasStatus) -> None:
    """
    Raise the classified error of a decoded reply, if any.

    Raises:
        RemoteError: If the reply carries a non-zero status
    """
    error = classify(item)
    if error is not None:
        raise error
