import heapq
import itertools
import threading
import time
from collections.abc import Callable
from typing import Generic, TypeVar

from rfamsearch.pipeline.exceptions import QueueClosedError

T = TypeVar("T")


class DelayQueue(Generic[T]):
    """Bounded FIFO queue whose items become available at a ready time.

    Items put with a delay are held back until the delay has elapsed, so a
    consumer that requeues unfinished work sleeps in get() instead of
    spinning on it. Items with equal ready times come out in insertion order.
    """

    def __init__(
        self,
        maxsize: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._maxsize = maxsize
        self._clock = clock
        self._heap: list[tuple[float, int, T]] = []
        self._sequence = itertools.count()
        self._cond = threading.Condition()
        self._closed = False

    def put(self, item: T, delay: float = 0.0) -> None:
        """Add an item that becomes available after `delay` seconds.

        Blocks while the queue is full.

        Raises:
            QueueClosedError: if the queue has been closed.
        """
        with self._cond:
            while self._is_full() and not self._closed:
                self._cond.wait()
            if self._closed:
                raise QueueClosedError("Cannot put on a closed queue")
            ready_at = self._clock() + max(0.0, delay)
            heapq.heappush(self._heap, (ready_at, next(self._sequence), item))
            self._cond.notify_all()

    def get(self) -> T | None:
        """Block until an item is ready and return it; None once closed."""
        with self._cond:
            while not self._closed:
                if not self._heap:
                    self._cond.wait()
                    continue
                remaining = self._heap[0][0] - self._clock()
                if remaining <= 0:
                    _, _, item = heapq.heappop(self._heap)
                    self._cond.notify_all()
                    return item
                self._cond.wait(remaining)
            return None

    def expedite(self) -> None:
        """Make every held-back item available immediately."""
        with self._cond:
            now = self._clock()
            self._heap = [(min(ready_at, now), seq, item) for ready_at, seq, item in self._heap]
            heapq.heapify(self._heap)
            self._cond.notify_all()

    def close(self) -> None:
        """Wake all waiting consumers; further get() calls return None."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def snapshot(self) -> list[tuple[float, T]]:
        """Return (delay remaining, item) pairs in the order they would be served."""
        with self._cond:
            now = self._clock()
            return [
                (max(0.0, ready_at - now), item)
                for ready_at, _, item in sorted(self._heap, key=lambda entry: entry[:2])
            ]

    def __len__(self) -> int:
        with self._cond:
            return len(self._heap)

    def _is_full(self) -> bool:
        return self._maxsize > 0 and len(self._heap) >= self._maxsize
