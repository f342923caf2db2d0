"""A fixed-size pool of worker threads fed from one task queue."""

from __future__ import annotations

import threading
from collections import deque
from concurrent.futures import Future
from typing import Any, Callable


class ThreadPool:
    """Runs queued callables on a fixed number of threads."""

    def __init__(self, n_workers: int) -> None:
        self._tasks: deque[tuple[Future, Callable[..., Any], tuple, dict]] = deque()
        self._condition = threading.Condition()
        self._stopping = False
        self._workers = [
            threading.Thread(target=self._work, daemon=True) for _ in range(n_workers)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            with self._condition:
                self._condition.wait_for(lambda: self._stopping or bool(self._tasks))
                if self._stopping and not self._tasks:
                    return
                future, fn, args, kwargs = self._tasks.popleft()
            if not future.set_running_or_notify_cancel():
                continue
            try:
                result = fn(*args, **kwargs)
            except Exception as exc:
                future.set_exception(exc)
            else:
                future.set_result(result)

    def enqueue(self, fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        """Queue a call and return a future for its result."""
        future: Future = Future()
        with self._condition:
            if self._stopping:
                raise RuntimeError("Cannot enqueue task on stopped thread pool.")
            self._tasks.append((future, fn, args, kwargs))
            self._condition.notify()
        return future

    def shutdown(self) -> None:
        """Refuse new tasks, let the workers finish the queue, and join them."""
        with self._condition:
            self._stopping = True
            self._condition.notify_all()
        current = threading.current_thread()
        for worker in self._workers:
            if worker is not current:
                worker.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()