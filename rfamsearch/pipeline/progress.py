import threading
from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class ProgressSnapshot:
    """Point-in-time view of the pipeline counters."""

    total: int
    created: int = 0
    submitted: int = 0
    completed: int = 0
    failed: int = 0

    @property
    def finished(self) -> int:
        return self.completed + self.failed


ProgressObserver = Callable[[ProgressSnapshot], None]


class ProgressCounters:
    """Monotonic created/submitted/completed/failed counters shared by all workers.

    Observers are called with a fresh snapshot after every increment. They
    run on the worker thread that made the change and must not block.
    """

    def __init__(self, total: int) -> None:
        self._total = total
        self._counts = {"created": 0, "submitted": 0, "completed": 0, "failed": 0}
        self._lock = threading.Lock()
        self._observers: list[ProgressObserver] = []

    def subscribe(self, observer: ProgressObserver) -> None:
        with self._lock:
            self._observers.append(observer)

    def mark_created(self) -> None:
        self._increment("created")

    def mark_submitted(self) -> None:
        self._increment("submitted")

    def mark_completed(self) -> None:
        self._increment("completed")

    def mark_failed(self) -> None:
        self._increment("failed")

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _increment(self, counter: str) -> None:
        with self._lock:
            self._counts[counter] += 1
            snapshot = self._snapshot_locked()
            observers = list(self._observers)
        for observer in observers:
            observer(snapshot)

    def _snapshot_locked(self) -> ProgressSnapshot:
        return ProgressSnapshot(total=self._total, **self._counts)
