"""Single-slot completion channel.

An exchange hands its caller a :class:`CompletionSlot` straight away and
fills it later from the transport's completion callback.  The slot holds at
most one value, written once and read once:

* the first :meth:`~CompletionSlot.deliver` or :meth:`~CompletionSlot.fail`
  wins; any later write is dropped and reported as ``False``;
* :meth:`~CompletionSlot.receive` (or ``await slot``) may be called once;
  a second read raises :class:`~oauth_async.exceptions.SlotConsumedError`.

Writes may come from any thread.  They are marshalled onto the event loop
that was running when the slot was created.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Generator, Optional

from oauth_async.exceptions import SlotConsumedError
from oauth_async.models import ExchangeResult
from oauth_async.output import debug


def _retrieve(future: asyncio.Future) -> None:
    # An unread failed slot must not log "exception was never retrieved".
    if not future.cancelled():
        future.exception()


class CompletionSlot:
    """One-shot delivery handle for an :data:`~oauth_async.models.ExchangeResult`.

    Args:
        loop: Event loop that owns the slot.  Defaults to the running loop,
            so creating a slot outside a coroutine raises ``RuntimeError``.

    Example::

        slot = fetch_token(config, {"code": code})
        result = await slot
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future[ExchangeResult] = self._loop.create_future()
        self._future.add_done_callback(_retrieve)
        self._lock = threading.Lock()
        self._written = False
        self._consumed = False

    def deliver(self, result: ExchangeResult) -> bool:
        """Put *result* in the slot.  Returns ``False`` if the slot was already written."""
        return self._write(result, None)

    def fail(self, exc: BaseException) -> bool:
        """Make the pending read raise *exc*.  Returns ``False`` if the slot was already written."""
        return self._write(None, exc)

    def done(self) -> bool:
        """Whether a value (or error) is ready to be read."""
        return self._future.done()

    @property
    def consumed(self) -> bool:
        return self._consumed

    async def receive(self) -> ExchangeResult:
        """Wait for and return the slot's value.

        Raises:
            SlotConsumedError: If the slot has already been read.
            MalformedResponseError: If the exchange failed that way.
        """
        if self._consumed:
            raise SlotConsumedError("Completion slot has already been read")
        self._consumed = True
        return await self._future

    def __await__(self) -> Generator[Any, None, ExchangeResult]:
        return self.receive().__await__()

    def _write(self, result: Optional[ExchangeResult], exc: Optional[BaseException]) -> bool:
        with self._lock:
            if self._written:
                debug("Completion slot already written; dropping second delivery")
                return False
            self._written = True

        try:
            self._loop.call_soon_threadsafe(self._settle, result, exc)
        except RuntimeError:
            # Owning loop is closed; nobody can read this slot any more.
            return False
        return True

    def _settle(self, result: Optional[ExchangeResult], exc: Optional[BaseException]) -> None:
        if self._future.done():
            return
        if exc is not None:
            self._future.set_exception(exc)
        else:
            self._future.set_result(result)  # type: ignore[arg-type]
