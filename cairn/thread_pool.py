"""A fixed set of worker threads fed from a shared queue."""

from __future__ import annotations

import threading
import traceback
from collections import deque
from typing import Callable, Optional

Task = Callable[[], None]


class ThreadPool:
    """Runs pushed callables on worker threads.

    Stopping discards the tasks still queued. Stopping from inside a task is
    allowed: that worker finishes its current task and then exits.
    """

    def __init__(self) -> None:
        self._cond = threading.Condition()
        self._queue: deque[Optional[Task]] = deque()
        self._workers: list[tuple[threading.Thread, threading.Event]] = []

    def push(self, fn: Task) -> None:
        """Queue ``fn`` to be run by one of the workers."""
        with self._cond:
            self._queue.append(fn)
            self._cond.notify()

    def start(self, threads: int) -> None:
        """Grow the pool to ``threads`` workers."""
        with self._cond:
            while len(self._workers) < threads:
                exit_flag = threading.Event()
                thread = threading.Thread(target=self._worker, args=(exit_flag,), daemon=True)
                self._workers.append((thread, exit_flag))
                thread.start()

    def stop(self) -> None:
        """Drop queued tasks, tell every worker to exit and wait for them."""
        with self._cond:
            workers, self._workers = self._workers, []
            self._queue = deque([None])
            self._cond.notify_all()
        current = threading.current_thread()
        for thread, exit_flag in workers:
            if thread is current:
                exit_flag.set()
            else:
                thread.join()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()

    def _worker(self, exit_flag: threading.Event) -> None:
        while True:
            with self._cond:
                while not self._queue:
                    self._cond.wait()
                task = self._queue[0]
                if task is None:
                    return
                self._queue.popleft()
            try:
                task()
            except Exception:
                # A failing task must not take its worker down with it.
                traceback.print_exc()
            if exit_flag.is_set():
                return