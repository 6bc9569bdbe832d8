"""Event emitter for sync results."""
import inspect
from collections import defaultdict
from typing import Callable, DefaultDict, List, Optional


class EventEmitter:
    """
    Named events with plain or coroutine handlers.

    Handlers run in registration order; a coroutine handler is awaited
    before the next one runs. A handler that raises stops the emit and
    the error reaches the emitting code.
    """

    def __init__(self):
        self._handlers: DefaultDict[str, List[Callable]] = defaultdict(list)

    def on(self, event: str, callback: Callable) -> 'EventEmitter':
        self._handlers[event].append(callback)
        return self

    def off(self, event: str, callback: Optional[Callable] = None) -> 'EventEmitter':
        """Remove one handler, or every handler of the event when callback is None."""
        if callback is None:
            self._handlers.pop(event, None)
        elif event in self._handlers:
            self._handlers[event] = [h for h in self._handlers[event] if h != callback]
        return self

    def has_listeners(self, event: str) -> bool:
        return bool(self._handlers.get(event))

    async def emit(self, event: str, *args, **kwargs) -> None:
        # Copy so handlers may unregister themselves while running
        for handler in tuple(self._handlers.get(event, ())):
            result = handler(*args, **kwargs)
            if inspect.isawaitable(result):
                await result
