"""One-shot worker threads that hand their result back through join()."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING = object()


class JoinHandle(Generic[T]):
    """Handle to a thread started by spawn().

    join() blocks until the thread finishes, then returns the function's
    return value or re-raises whatever it raised. The handle is the only way
    to observe the result; nothing is readable before the thread exits.
    """

    __slots__ = ("_thread", "_result", "_exception")

    def __init__(self, fn: Callable[..., T], args: tuple[Any, ...], name: str | None) -> None:
        self._result: Any = _MISSING
        self._exception: BaseException | None = None
        self._thread = threading.Thread(target=self._run, args=(fn, args), name=name, daemon=True)

    def _run(self, fn: Callable[..., T], args: tuple[Any, ...]) -> None:
        try:
            self._result = fn(*args)
        except BaseException as exc:  # re-raised by join() in the caller's thread
            self._exception = exc

    @property
    def name(self) -> str:
        return self._thread.name

    def is_alive(self) -> bool:
        return self._thread.is_alive()

    def join(self) -> T:
        """Wait for the thread and return its result.

        Raises:
            BaseException: Whatever the spawned function raised.
        """
        self._thread.join()
        if self._exception is not None:
            raise self._exception
        return self._result

    def __repr__(self) -> str:
        if self._thread.is_alive():
            state = "running"
        elif self._exception is not None:
            state = f"failed={self._exception!r}"
        elif self._result is _MISSING:
            state = "not started"
        else:
            state = f"done={self._result!r}"
        return f"JoinHandle({self._thread.name}, {state})"


def spawn(fn: Callable[..., T], *args: Any, name: str | None = None) -> JoinHandle[T]:
    """Run ``fn(*args)`` on a new thread and return its JoinHandle."""
    handle = JoinHandle(fn, args, name)
    handle._thread.start()
    return handle
