"""Per-key serial execution.

An ``Actor`` owns a FIFO mailbox for one key and processes the operations
admitted to it strictly one at a time. ``ActorRegistry`` hands out one actor
per key, creating it on first use. Actors for different keys share nothing,
so their work interleaves freely on the event loop.

This module is part of the infra layer and must not import from application features.
"""
from __future__ import annotations

import asyncio
from collections import OrderedDict, deque
from typing import Awaitable, Callable, Deque, Generic, Optional, Tuple, TypeVar

import structlog

logger = structlog.get_logger("infra.actors")

T = TypeVar("T")
A = TypeVar("A", bound="Actor")

Operation = Callable[[], Awaitable[T]]


class Actor:
    """Runs admitted operations for a single key in admission order.

    The worker task is started lazily and exits once the mailbox is empty.
    Operations run inside the worker task, not the caller's task, so a
    caller that stops waiting (cancellation, timeout) does not interrupt an
    operation that has already been admitted.
    """

    def __init__(self, key: str):
        self.key = key
        self._mailbox: Deque[Tuple[Operation, asyncio.Future]] = deque()
        self._worker: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        """Operations admitted but not yet finished."""
        return len(self._mailbox)

    @property
    def busy(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def idle(self) -> bool:
        """No queued or running work; safe to forget."""
        return not self.busy and not self._mailbox

    async def submit(self, operation: Operation[T]) -> T:
        """Admit ``operation`` and wait for its result."""
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._mailbox.append((operation, future))
        if not self.busy:
            self._worker = asyncio.create_task(
                self._run(), name=f"actor:{self.key}"
            )
        return await future

    async def join(self) -> None:
        """Wait until every admitted operation has finished."""
        while self.busy:
            await asyncio.wait({self._worker})

    async def _run(self) -> None:
        while self._mailbox:
            operation, future = self._mailbox[0]
            try:
                result = await operation()
            except asyncio.CancelledError:
                # The worker itself is going away: nothing queued will run.
                abandoned = len(self._mailbox)
                while self._mailbox:
                    _, queued = self._mailbox.popleft()
                    if not queued.done():
                        queued.cancel()
                logger.warning("Actor worker cancelled", key=self.key, abandoned=abandoned)
                raise
            except Exception as exc:
                self._mailbox.popleft()
                if not future.done():
                    future.set_exception(exc)
                else:
                    logger.warning(
                        "Operation failed after caller left",
                        key=self.key,
                        error=type(exc).__name__,
                    )
            else:
                self._mailbox.popleft()
                if not future.done():
                    future.set_result(result)


class ActorRegistry(Generic[A]):
    """Maps keys to their actor, creating actors lazily and reusing them.

    With a ``capacity`` the registry keeps at most that many actors, dropping
    the least recently used idle ones. An actor with queued or running work
    is never dropped, so a key never has two actors at once. The bound can be
    exceeded while more than ``capacity`` actors are busy.
    """

    def __init__(self, factory: Callable[[str], A], capacity: Optional[int] = None):
        if capacity is not None and capacity < 1:
            raise ValueError("capacity must be positive")
        self._factory = factory
        self.capacity = capacity
        self._actors: OrderedDict[str, A] = OrderedDict()

    def get(self, key: str) -> A:
        actor = self._actors.get(key)
        if actor is None:
            actor = self._factory(key)
            self._actors[key] = actor
            logger.debug("Actor created", key=key)
            self._evict()
        else:
            self._actors.move_to_end(key)
        return actor

    def _evict(self) -> None:
        if self.capacity is None:
            return
        excess = len(self._actors) - self.capacity
        if excess <= 0:
            return
        # Oldest first; the actor just handed out is last and never considered.
        for key in list(self._actors)[:-1]:
            if excess <= 0:
                break
            if self._actors[key].idle:
                del self._actors[key]
                excess -= 1
                logger.debug("Actor evicted", key=key)

    def __contains__(self, key: object) -> bool:
        return key in self._actors

    def __len__(self) -> int:
        return len(self._actors)

    async def drain(self) -> None:
        """Wait for all in-flight and queued operations of every actor."""
        await asyncio.gather(*(actor.join() for actor in list(self._actors.values())))
